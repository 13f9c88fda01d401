"""Request router: dispatches API Gateway requests to route handlers."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Callable

from src.api import routes

if TYPE_CHECKING:
    from src.api.deps import Deps

logger = logging.getLogger("scoreboard.router")

_GAME = r"/api/games/(?P<game_id>[^/]+)"

ROUTES: list[tuple[str, re.Pattern, Callable]] = [
    ("GET", re.compile(r"^/health$"), routes.health),
    ("GET", re.compile(r"^/api/games/?$"), routes.list_games),
    ("POST", re.compile(r"^/api/games/?$"), routes.create_game),
    ("GET", re.compile(f"^{_GAME}$"), routes.get_game),
    ("PUT", re.compile(f"^{_GAME}$"), routes.rename_game),
    ("DELETE", re.compile(f"^{_GAME}$"), routes.delete_game),
    ("POST", re.compile(f"^{_GAME}/rounds$"), routes.append_round),
    ("DELETE", re.compile(f"^{_GAME}/rounds/last$"), routes.delete_last_round),
]


def route_request(
    method: str, path: str, query: dict, body: dict, deps: Deps
) -> routes.Response:
    """Route a request to the matching handler; 404/405 otherwise."""
    method = method.upper()
    path_matched = False
    for route_method, pattern, handler in ROUTES:
        match = pattern.match(path)
        if match is None:
            continue
        path_matched = True
        if route_method != method:
            continue
        return handler(deps, match.groupdict(), query, body)

    if path_matched:
        return 405, {"error": "Method not allowed"}
    logger.info("No route for %s %s", method, path)
    return 404, {"error": "Not found"}
