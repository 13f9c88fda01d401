"""Scoreboard error types."""


class ScoreboardError(Exception):
    """Base class for scoreboard failures surfaced to callers."""


class EmptyHistoryError(ScoreboardError):
    def __init__(self) -> None:
        super().__init__("No rounds to delete")


class VersionConflictError(ScoreboardError):
    """A save raced another writer; the stored record is newer."""

    def __init__(self, game_id: str, expected: int) -> None:
        super().__init__(f"Game {game_id} changed since version {expected}")
        self.game_id = game_id
        self.expected = expected
