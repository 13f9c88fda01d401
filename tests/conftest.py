"""Shared test fixtures for the scoreboard."""

from __future__ import annotations

import pytest

from src.db.memory import InMemoryGameRepository
from src.game.engine import GameEngine
from src.game.models import GameState, Round


class MockTelegramClient:
    """Records all Telegram API calls for test assertions."""

    configured = True

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []

    def send_message(
        self,
        chat_id: str | int,
        text: str,
        parse_mode: str = "HTML",
    ) -> dict:
        self.calls.append((
            "send_message",
            {"chat_id": chat_id, "text": text},
        ))
        return {"ok": True, "result": {"message_id": len(self.calls)}}

    def get_calls(self, method: str) -> list[dict]:
        """Get all calls for a specific method."""
        return [kwargs for m, kwargs in self.calls if m == method]

    def last_call(self, method: str) -> dict | None:
        """Get the last call for a specific method."""
        calls = self.get_calls(method)
        return calls[-1] if calls else None


def make_round(names: list[str | None], points: list[int]) -> Round:
    return Round(player_names=list(names), points=list(points), cards=[0] * 4)


def make_state(
    active: list[str | None],
    queue: list[str] | None = None,
    rounds: list[Round] | None = None,
    levels: dict[str, int] | None = None,
    one_shot_used: bool = False,
    one_shot_used_by: str | None = None,
) -> GameState:
    """GameState built directly, without going through the engine."""
    return GameState(
        game_id="g1",
        name="Test",
        active=list(active),
        queue=list(queue or []),
        rounds=list(rounds or []),
        elimination_levels=dict(levels or {}),
        one_shot_used=one_shot_used,
        one_shot_used_by=one_shot_used_by,
        created_at=1700000000000,
        updated_at="2025-01-01T00:00:00+00:00",
    )


@pytest.fixture
def game_repo():
    return InMemoryGameRepository()


@pytest.fixture
def engine(game_repo):
    return GameEngine(game_repo)


@pytest.fixture
def mock_telegram():
    return MockTelegramClient()
