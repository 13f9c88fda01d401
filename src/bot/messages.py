"""Message formatting for scoreboard announcements (Telegram HTML)."""

from __future__ import annotations

from html import escape

from src.game.models import GameState
from src.game.scoring import compute_totals, standings
from src.utils.constants import ELIMINATION_STEP, RULE_ONE_SHOT


def _name(name: str | None) -> str:
    return f"<b>{escape(name)}</b>" if name else "<i>empty</i>"


def format_seats(game: GameState) -> str:
    lines = ["<b>Seats:</b>"]
    for i, name in enumerate(game.active, 1):
        lines.append(f"  {i}. {_name(name)}")
    if game.queue:
        queue = ", ".join(escape(n) for n in game.queue)
        lines.append(f"<b>Queue:</b> {queue}")
    else:
        lines.append("<b>Queue:</b> (empty)")
    return "\n".join(lines)


def format_scores(game: GameState) -> str:
    totals = compute_totals(game.rounds, game.active, game.queue)
    lines = [f"<b>{escape(game.name)}</b>, round {len(game.rounds)}", "<b>Totals:</b>"]
    for name, total in standings(totals):
        next_line = (game.level_of(name) + 1) * ELIMINATION_STEP
        avg = totals.averages.get(name, 0)
        marker = " (25 used)" if name == game.one_shot_used_by else ""
        lines.append(
            f"  {escape(name)}: {total} (avg {avg:.1f}, next at {next_line}){marker}"
        )
    return "\n".join(lines)


def format_rotation(event: dict) -> str:
    who = _name(event["user_id"])
    replacement = _name(event.get("replacement"))
    if event.get("rule") == RULE_ONE_SHOT:
        reason = "first to reach 25"
    else:
        reason = f"reached {event.get('total_score', '?')}"
    return f"{who} {reason}, leaves seat {event['seat'] + 1} for {replacement}"


def format_round_deleted(game: GameState) -> str:
    return f"Last round deleted. {len(game.rounds)} rounds remain."
