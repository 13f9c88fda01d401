"""Dependency container for HTTP route handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.db.repository import GameRepository
    from src.game.engine import GameEngine
    from src.utils.telegram import TelegramClient


@dataclass
class Deps:
    """Bundles all dependencies for handler functions."""

    engine: GameEngine
    game_repo: GameRepository
    telegram: TelegramClient | None = None
