"""Storage contract for scoreboard games."""

from __future__ import annotations

from typing import Protocol

from src.game.models import GameState


class GameRepository(Protocol):
    """Whole-record game storage with optimistic versioning.

    save_game stores version + 1 and raises VersionConflictError when
    the stored copy no longer carries the version the caller loaded.
    Readers always get a detached copy.
    """

    def get_game(self, game_id: str) -> GameState | None:
        ...

    def save_game(self, game: GameState) -> None:
        ...

    def delete_game(self, game_id: str) -> None:
        ...

    def list_games(self) -> list[GameState]:
        """Every stored game, newest createdAt first."""
        ...
