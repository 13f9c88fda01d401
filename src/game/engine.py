"""Game engine for the scoreboard: load, transition, save, announce."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from src.db.repository import GameRepository
from src.game.elimination import RoundOutcome, apply_round, remove_last_round
from src.game.errors import EmptyHistoryError
from src.game.models import GameState, empty_seats
from src.game.normalizer import normalize_round
from src.game.scoring import compute_totals
from src.game.validator import validate_round_input
from src.utils.constants import (
    EVENT_GAME_CREATED,
    EVENT_GAME_DELETED,
    EVENT_GAME_RENAMED,
    EVENT_ROTATION,
    EVENT_ROUND_CONFIRMED,
    EVENT_ROUND_DELETED,
    SEAT_COUNT,
)

logger = logging.getLogger("scoreboard.engine")

# Error codes carried on failed results
ERR_NOT_FOUND = "not_found"
ERR_EMPTY_HISTORY = "empty_history"
ERR_INVALID_ROUND = "invalid_round"
ERR_INVALID_PLAYERS = "invalid_players"

GameListener = Callable[[GameState, list[dict]], None]


@dataclass
class ActionResult:
    success: bool
    game: GameState | None
    error: str | None = None
    error_code: str | None = None
    events: list[dict] = field(default_factory=list)


def _not_found(game_id: str) -> ActionResult:
    return ActionResult(
        success=False, game=None, error="Game not found", error_code=ERR_NOT_FOUND
    )


class GameEngine:
    """Stateless game engine. All state lives in GameState / repository.

    Listeners are called with the saved game and the events of every
    successful change; they are advisory and cannot fail a command.
    """

    def __init__(
        self,
        repo: GameRepository,
        listeners: list[GameListener] | None = None,
    ) -> None:
        self._repo = repo
        self._listeners = list(listeners or [])

    def add_listener(self, listener: GameListener) -> None:
        self._listeners.append(listener)

    def create_game(self, name: str, player_names: list[str]) -> ActionResult:
        """Create a game. The first 4 players sit, the rest queue in order."""
        names = [(n or "").strip() for n in player_names]
        if not names or any(not n for n in names):
            return ActionResult(
                success=False, game=None,
                error="Player names must not be empty",
                error_code=ERR_INVALID_PLAYERS,
            )
        if len(set(names)) != len(names):
            return ActionResult(
                success=False, game=None,
                error="Player names must be unique",
                error_code=ERR_INVALID_PLAYERS,
            )

        active = (names[:SEAT_COUNT] + empty_seats())[:SEAT_COUNT]
        game = GameState(
            game_id=GameState.new_game_id(),
            name=name.strip() or f"Game {self._now_ms()}",
            active=active,
            queue=names[SEAT_COUNT:],
            rounds=[],
            elimination_levels={n: 0 for n in names},
            one_shot_used=False,
            created_at=self._now_ms(),
            updated_at=self._now(),
            player_creation_order=list(names),
        )
        self._repo.save_game(game)
        game = self._repo.get_game(game.game_id)

        event = {
            "event": EVENT_GAME_CREATED,
            "game_id": game.game_id,
            "name": game.name,
            "active": list(game.active),
            "queue": list(game.queue),
        }
        logger.info(json.dumps(event))
        self._announce(game, [event])
        return ActionResult(success=True, game=game, events=[event])

    def confirm_round(
        self, game_id: str, raw_round: Any, validate: bool = True
    ) -> ActionResult:
        """Record a round, applying eliminations and seat rotation.

        validate=False skips the entry checks, for imported history.
        """
        game = self._repo.get_game(game_id)
        if game is None:
            return _not_found(game_id)

        rnd = normalize_round(raw_round)
        if rnd.timestamp is None:
            rnd.timestamp = self._now_ms()
        if validate:
            result = validate_round_input(rnd, game)
            if not result.valid:
                return ActionResult(
                    success=False, game=game,
                    error=result.error, error_code=ERR_INVALID_ROUND,
                )

        outcome = apply_round(game, rnd)
        game = outcome.game
        game.updated_at = self._now()
        self._repo.save_game(game)
        game = self._repo.get_game(game_id)

        events = self._round_events(game, outcome)
        for event in events:
            logger.info(json.dumps(event))
        self._announce(game, events)
        return ActionResult(success=True, game=game, events=events)

    def delete_last_round(self, game_id: str) -> ActionResult:
        """Retract the most recent round and rebuild levels and the 25 flag."""
        game = self._repo.get_game(game_id)
        if game is None:
            return _not_found(game_id)

        try:
            game, removed = remove_last_round(game)
        except EmptyHistoryError as e:
            return ActionResult(
                success=False, game=game, error=str(e), error_code=ERR_EMPTY_HISTORY
            )

        game.updated_at = self._now()
        self._repo.save_game(game)
        game = self._repo.get_game(game_id)

        event = {
            "event": EVENT_ROUND_DELETED,
            "game_id": game_id,
            "round_count": len(game.rounds),
            "removed_round": removed.to_dict(),
            **self._state_payload(game),
        }
        logger.info(json.dumps(event))
        self._announce(game, [event])
        return ActionResult(success=True, game=game, events=[event])

    def rename_game(self, game_id: str, name: str) -> ActionResult:
        game = self._repo.get_game(game_id)
        if game is None:
            return _not_found(game_id)

        game.name = name.strip() or game.name
        game.updated_at = self._now()
        self._repo.save_game(game)
        game = self._repo.get_game(game_id)

        event = {"event": EVENT_GAME_RENAMED, "game_id": game_id, "name": game.name}
        logger.info(json.dumps(event))
        self._announce(game, [event])
        return ActionResult(success=True, game=game, events=[event])

    def delete_game(self, game_id: str) -> ActionResult:
        game = self._repo.get_game(game_id)
        if game is None:
            return _not_found(game_id)

        self._repo.delete_game(game_id)
        event = {"event": EVENT_GAME_DELETED, "game_id": game_id}
        logger.info(json.dumps(event))
        self._announce(game, [event])
        return ActionResult(success=True, game=None, events=[event])

    def get_game(self, game_id: str) -> GameState | None:
        return self._repo.get_game(game_id)

    def list_games(self) -> list[GameState]:
        return self._repo.list_games()

    # --- Private helpers ---

    @staticmethod
    def _state_payload(game: GameState) -> dict:
        """Full post-transition state; observers must not rebuild it from deltas."""
        totals = compute_totals(game.rounds, game.active, game.queue)
        return {
            "active": list(game.active),
            "queue": list(game.queue),
            "elimination_levels": dict(game.elimination_levels),
            "one_shot_used": game.one_shot_used,
            "one_shot_used_by": game.one_shot_used_by,
            "totals": dict(totals.totals),
        }

    def _round_events(self, game: GameState, outcome: RoundOutcome) -> list[dict]:
        events = [{
            "event": EVENT_ROUND_CONFIRMED,
            "game_id": game.game_id,
            "round_count": len(game.rounds),
            "round": outcome.round.to_dict(),
            "rotations": [r.to_dict() for r in outcome.rotations],
            **self._state_payload(game),
        }]
        for rotation in outcome.rotations:
            events.append({
                "event": EVENT_ROTATION,
                "game_id": game.game_id,
                "user_id": rotation.eliminated,
                "replacement": rotation.replacement,
                "seat": rotation.seat,
                "rule": rotation.rule,
                "total_score": outcome.totals.total_of(rotation.eliminated),
            })
        return events

    def _announce(self, game: GameState, events: list[dict]) -> None:
        for listener in self._listeners:
            try:
                listener(game, events)
            except Exception:
                logger.exception("Listener failed for game %s", game.game_id)

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)
