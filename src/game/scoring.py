"""Cumulative totals and per-round standings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from src.game.models import Round
from src.game.normalizer import normalize_round


@dataclass
class Totals:
    totals: dict[str, int] = field(default_factory=dict)
    round_counts: dict[str, int] = field(default_factory=dict)
    averages: dict[str, float] = field(default_factory=dict)

    def total_of(self, name: str) -> int:
        return self.totals.get(name, 0)


def compute_totals(
    rounds: Iterable[Any],
    active: Iterable[str | None] = (),
    queue: Iterable[str | None] = (),
) -> Totals:
    """Fold rounds into per-player totals, round counts and averages.

    Players named in the active seats or the queue are included even if
    they have not played a round yet. Average is 0 for zero rounds.
    """
    result = Totals()
    for name in list(active) + list(queue):
        if name:
            result.totals.setdefault(name, 0)
            result.round_counts.setdefault(name, 0)

    for raw in rounds:
        rnd = normalize_round(raw)
        for _, name, points in rnd.seats():
            if not name:
                continue
            result.totals[name] = result.totals.get(name, 0) + points
            result.round_counts[name] = result.round_counts.get(name, 0) + 1

    for name, total in result.totals.items():
        count = result.round_counts.get(name, 0)
        result.averages[name] = total / count if count else 0
    return result


def _player_name(entry: Any) -> str | None:
    if isinstance(entry, dict):
        if entry.get("isEmpty"):
            return None
        return entry.get("name") or None
    return entry or None


def compute_cumulative_snapshots(
    all_players: Iterable[Any], rounds: Iterable[Any]
) -> list[dict[str, int]]:
    """Running total of every known player after each round.

    all_players holds names or {"name", "isEmpty"} entries; empty
    entries are skipped. Players first seen in a round are added from
    that round on, with earlier snapshots left as they were.
    """
    running: dict[str, int] = {}
    for entry in all_players:
        name = _player_name(entry)
        if name:
            running[name] = 0

    snapshots: list[dict[str, int]] = []
    for raw in rounds:
        rnd: Round = normalize_round(raw)
        for _, name, points in rnd.seats():
            if name:
                running[name] = running.get(name, 0) + points
        snapshots.append(dict(running))
    return snapshots


def standings(totals: Totals) -> list[tuple[str, int]]:
    """(name, total) sorted by total ascending, then name."""
    return sorted(totals.totals.items(), key=lambda x: (x[1], x[0]))
