"""Route handlers for the games API.

Each handler returns (status code, JSON-serializable body).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.game.engine import (
    ERR_EMPTY_HISTORY,
    ERR_INVALID_PLAYERS,
    ERR_INVALID_ROUND,
    ERR_NOT_FOUND,
    ActionResult,
)
from src.game.models import GameState

if TYPE_CHECKING:
    from src.api.deps import Deps

Response = tuple[int, "dict | list | None"]

_STATUS_BY_ERROR = {
    ERR_NOT_FOUND: 404,
    ERR_EMPTY_HISTORY: 409,
    ERR_INVALID_ROUND: 422,
    ERR_INVALID_PLAYERS: 400,
}


def _error(result: ActionResult) -> Response:
    status = _STATUS_BY_ERROR.get(result.error_code, 400)
    return status, {"error": result.error}


def _summary(game: GameState) -> dict:
    return {
        "id": game.game_id,
        "name": game.name,
        "createdAt": game.created_at,
        "roundCount": len(game.rounds),
        "playerCreationOrder": game.player_creation_order
        or [n for n in game.active + game.queue if n],
    }


def _full(game: GameState) -> dict:
    return {"id": game.game_id, "name": game.name, "data": game.to_dict()}


def health(deps: Deps, params: dict, query: dict, body: dict) -> Response:
    return 200, {"status": "ok"}


def list_games(deps: Deps, params: dict, query: dict, body: dict) -> Response:
    include_rounds = str(query.get("includeRounds", "")).lower() == "true"
    games = deps.engine.list_games()
    if include_rounds:
        return 200, [_full(g) for g in games]
    return 200, [_summary(g) for g in games]


def get_game(deps: Deps, params: dict, query: dict, body: dict) -> Response:
    game = deps.engine.get_game(params["game_id"])
    if game is None:
        return 404, {"error": "Not found"}
    return 200, _full(game)


def create_game(deps: Deps, params: dict, query: dict, body: dict) -> Response:
    players = body.get("players")
    if not isinstance(players, list):
        return 400, {"error": "Missing players list"}
    if not all(isinstance(p, str) for p in players):
        return 400, {"error": "Player names must be strings"}
    result = deps.engine.create_game(str(body.get("name") or ""), players)
    if not result.success:
        return _error(result)
    return 201, _full(result.game)


def rename_game(deps: Deps, params: dict, query: dict, body: dict) -> Response:
    name = body.get("name")
    if not isinstance(name, str) or not name.strip():
        return 400, {"error": "Missing name"}
    result = deps.engine.rename_game(params["game_id"], name)
    if not result.success:
        return _error(result)
    return 200, _full(result.game)


def delete_game(deps: Deps, params: dict, query: dict, body: dict) -> Response:
    result = deps.engine.delete_game(params["game_id"])
    if not result.success:
        return _error(result)
    return 204, None


def append_round(deps: Deps, params: dict, query: dict, body: dict) -> Response:
    raw_round = body.get("round")
    if not raw_round:
        return 400, {"error": "Missing round body"}
    validate = body.get("validate", True) is not False
    result = deps.engine.confirm_round(params["game_id"], raw_round, validate=validate)
    if not result.success:
        return _error(result)
    game = result.game
    confirmed = result.events[0]
    return 201, {
        "round": game.rounds[-1].to_dict(),
        "rotations": confirmed["rotations"],
        "data": game.to_dict(),
    }


def delete_last_round(deps: Deps, params: dict, query: dict, body: dict) -> Response:
    result = deps.engine.delete_last_round(params["game_id"])
    if not result.success:
        return _error(result)
    return 200, {"data": result.game.to_dict()}
