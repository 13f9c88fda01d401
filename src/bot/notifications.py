"""Group chat announcements sent after state-changing commands."""

from __future__ import annotations

import logging
import os
from html import escape
from typing import TYPE_CHECKING

from src.bot.messages import (
    format_round_deleted,
    format_rotation,
    format_scores,
    format_seats,
)
from src.game.models import GameState
from src.utils.constants import (
    EVENT_GAME_CREATED,
    EVENT_ROTATION,
    EVENT_ROUND_CONFIRMED,
    EVENT_ROUND_DELETED,
)

if TYPE_CHECKING:
    from src.utils.telegram import TelegramClient

logger = logging.getLogger("scoreboard.notifications")


def notify_game_event(
    game: GameState,
    events: list[dict],
    telegram: TelegramClient,
    chat_id: str | None = None,
) -> None:
    """Post standings and seat changes to the scoreboard chat, if one is set."""
    chat_id = chat_id or os.environ.get("SCOREBOARD_CHAT_ID", "")
    if not chat_id:
        return

    kinds = {e.get("event") for e in events}
    lines: list[str] = []

    if EVENT_GAME_CREATED in kinds:
        lines.append(f"New game: <b>{escape(game.name)}</b>")
        lines.append(format_seats(game))
    if EVENT_ROUND_CONFIRMED in kinds:
        lines.extend(format_rotation(e) for e in events if e.get("event") == EVENT_ROTATION)
        lines.append(format_scores(game))
        if any(e.get("event") == EVENT_ROTATION for e in events):
            lines.append(format_seats(game))
    if EVENT_ROUND_DELETED in kinds:
        lines.append(format_round_deleted(game))
        lines.append(format_scores(game))

    if not lines:
        return
    telegram.send_message(chat_id, "\n\n".join(lines))
    logger.info("Announced %s for game %s", sorted(kinds), game.game_id)


def make_listener(telegram: TelegramClient, chat_id: str | None = None):
    """Engine listener that announces to the scoreboard chat."""

    def listener(game: GameState, events: list[dict]) -> None:
        notify_game_event(game, events, telegram, chat_id)

    return listener
