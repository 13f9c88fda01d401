"""AWS Lambda entry point for the scoreboard API.

This is a thin adapter that turns API Gateway proxy events into calls
on the game routes. All business logic lives in src/game/.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from src.game.errors import VersionConflictError

logger = logging.getLogger("scoreboard.handler")
logger.setLevel(logging.INFO)

# Module-level deps for Lambda warm starts
_deps = None

_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}


def _init_deps(overrides: dict | None = None):
    """Initialize dependencies (lazily, once per Lambda container)."""
    global _deps

    if overrides:
        from src.api.deps import Deps

        _deps = Deps(**overrides)
        return _deps

    from src.api.deps import Deps
    from src.bot.notifications import make_listener
    from src.db.dynamodb import DynamoDBGameRepository
    from src.game.engine import GameEngine
    from src.utils.telegram import TelegramClient

    game_repo = DynamoDBGameRepository()
    telegram = TelegramClient()
    engine = GameEngine(game_repo)
    if telegram.configured:
        engine.add_listener(make_listener(telegram))

    _deps = Deps(engine=engine, game_repo=game_repo, telegram=telegram)
    return _deps


def _response(status: int, body: Any = None) -> dict:
    return {
        "statusCode": status,
        "headers": dict(_HEADERS),
        "body": "" if body is None else json.dumps(body),
    }


def lambda_handler(event: dict, context: Any = None) -> dict:
    """Handle an API Gateway (REST or HTTP API) proxy request."""
    global _deps

    method = event.get("httpMethod") or (
        event.get("requestContext", {}).get("http", {}).get("method", "GET")
    )
    path = event.get("path") or event.get("rawPath") or "/"

    if method.upper() == "OPTIONS":
        return _response(204)

    # Validate shared secret
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    expected_secret = os.environ.get("API_SECRET", "")
    if expected_secret and path != "/health":
        received = headers.get("x-api-secret", "")
        if received != expected_secret:
            logger.warning("Invalid API secret")
            return _response(403, {"error": "Forbidden"})

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        return _response(400, {"error": "Invalid JSON"})
    if not isinstance(body, dict):
        return _response(400, {"error": "Expected a JSON object"})

    logger.info(json.dumps({"event": "request_received", "method": method, "path": path}))

    try:
        if _deps is None:
            _init_deps()

        from src.api.router import route_request

        assert _deps is not None
        query = event.get("queryStringParameters") or {}
        status, payload = route_request(method, path, query, body, _deps)
    except VersionConflictError as e:
        logger.warning(str(e))
        return _response(409, {"error": "Game was changed by another request, reload and retry"})
    except Exception:
        logger.exception("Error processing %s %s", method, path)
        return _response(500, {"error": "Internal error"})

    return _response(status, payload)
