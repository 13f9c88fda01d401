"""Data models for scoreboard game state."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from src.utils.constants import SEAT_COUNT


def empty_seats() -> list[str | None]:
    return [None] * SEAT_COUNT


@dataclass
class Round:
    """A canonical round: one entry per seat, seat order preserved.

    Stored as {"players": [...], "points": [...], "cards": [...]}, the
    direct-array shape the normalizer resolves first.
    """

    player_names: list[str | None] = field(default_factory=empty_seats)
    points: list[int] = field(default_factory=lambda: [0] * SEAT_COUNT)
    cards: list[int] = field(default_factory=lambda: [0] * SEAT_COUNT)
    timestamp: int | None = None

    def seats(self) -> list[tuple[int, str | None, int]]:
        """(seat index, player name, points) for every seat."""
        return [
            (i, self.player_names[i], self.points[i]) for i in range(SEAT_COUNT)
        ]

    def is_empty(self) -> bool:
        return all(name is None for name in self.player_names)

    def to_dict(self) -> dict:
        d = {
            "players": list(self.player_names),
            "points": list(self.points),
            "cards": list(self.cards),
        }
        if self.timestamp is not None:
            d["timestamp"] = self.timestamp
        return d

    @classmethod
    def from_dict(cls, d: dict) -> Round:
        """Decode a stored round. Foreign shapes go through the normalizer."""
        from src.game.normalizer import normalize_round

        return normalize_round(d)


@dataclass
class GameState:
    """Complete scoreboard record for one game (maps to one storage row).

    elimination_levels and the one-shot flag are derived from rounds and
    can always be rebuilt with recompute_derived_state.
    """

    game_id: str
    name: str
    active: list[str | None]
    queue: list[str]
    rounds: list[Round]
    elimination_levels: dict[str, int]
    one_shot_used: bool
    created_at: int
    updated_at: str
    one_shot_used_by: str | None = None
    player_creation_order: list[str] = field(default_factory=list)
    version: int = 1

    def seated_players(self) -> list[str]:
        return [name for name in self.active if name]

    def known_players(self) -> list[str]:
        """Every name in creation order, then seats, queue and rounds."""
        names: list[str] = []
        for name in self.player_creation_order + self.active + self.queue:
            if name and name not in names:
                names.append(name)
        for rnd in self.rounds:
            for name in rnd.player_names:
                if name and name not in names:
                    names.append(name)
        return names

    def level_of(self, name: str) -> int:
        return self.elimination_levels.get(name, 0)

    def to_dict(self) -> dict:
        return {
            "gameId": self.game_id,
            "name": self.name,
            "players": {
                "active": list(self.active),
                "queue": list(self.queue),
            },
            "rounds": [r.to_dict() for r in self.rounds],
            "eliminationLevels": dict(self.elimination_levels),
            "elimination25Used": self.one_shot_used,
            "elimination25UsedBy": self.one_shot_used_by,
            "playerCreationOrder": list(self.player_creation_order),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, d: dict) -> GameState:
        players = d.get("players") or {}
        active = list(players.get("active") or [])
        active = (active + empty_seats())[:SEAT_COUNT]
        return cls(
            game_id=d["gameId"],
            name=d.get("name", ""),
            active=[name or None for name in active],
            queue=list(players.get("queue") or []),
            rounds=[Round.from_dict(r) for r in d.get("rounds", [])],
            elimination_levels={
                k: int(v) for k, v in (d.get("eliminationLevels") or {}).items()
            },
            one_shot_used=bool(d.get("elimination25Used", False)),
            one_shot_used_by=d.get("elimination25UsedBy"),
            player_creation_order=list(d.get("playerCreationOrder") or []),
            created_at=int(d.get("createdAt", 0)),
            updated_at=d.get("updatedAt", ""),
            version=int(d.get("version", 1)),
        )

    @staticmethod
    def new_game_id() -> str:
        return str(uuid.uuid4())
