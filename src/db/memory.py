"""Dict-backed game store for tests and the local CLIs."""

from __future__ import annotations

import copy

from src.game.errors import VersionConflictError
from src.game.models import GameState


class InMemoryGameRepository:
    def __init__(self) -> None:
        self._games: dict[str, GameState] = {}

    def get_game(self, game_id: str) -> GameState | None:
        stored = self._games.get(game_id)
        return copy.deepcopy(stored) if stored is not None else None

    def save_game(self, game: GameState) -> None:
        stored = self._games.get(game.game_id)
        if stored is not None and stored.version != game.version:
            raise VersionConflictError(game.game_id, game.version)
        record = copy.deepcopy(game)
        record.version += 1
        self._games[game.game_id] = record

    def delete_game(self, game_id: str) -> None:
        self._games.pop(game_id, None)

    def list_games(self) -> list[GameState]:
        newest_first = sorted(
            self._games.values(), key=lambda g: g.created_at, reverse=True
        )
        return copy.deepcopy(newest_first)
