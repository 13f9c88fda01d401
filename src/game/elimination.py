"""Threshold elimination and seat rotation.

Every 50 cumulative points a seated player gives up their seat: the head
of the queue sits down and the player joins the queue tail. The first
player in the game to reach 25 is rotated out the same way, once.

Transitions are pure: they take a GameState and return a new one.
Elimination levels and the one-shot flag are derived from the round
history and recompute_derived_state rebuilds them from scratch.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from src.game.errors import EmptyHistoryError
from src.game.models import GameState, Round
from src.game.normalizer import normalize_round
from src.game.scoring import Totals, compute_totals
from src.utils.constants import (
    ELIMINATION_STEP,
    ONE_SHOT_THRESHOLD,
    RULE_ONE_SHOT,
    RULE_STEP,
)


@dataclass
class Candidate:
    """A seated player whose total crossed a threshold this round."""

    name: str
    seat: int
    prev_total: int
    new_total: int
    overshoot: int
    rule: str

    def sort_key(self) -> tuple[int, int, int]:
        # Largest overshoot first; on a tie the player who started the
        # round closer to the line goes first; then lower seat.
        return (-self.overshoot, -self.prev_total, self.seat)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "seat": self.seat,
            "prevTotal": self.prev_total,
            "newTotal": self.new_total,
            "overshoot": self.overshoot,
            "rule": self.rule,
        }


@dataclass
class Rotation:
    eliminated: str
    replacement: str | None
    seat: int
    rule: str

    def to_dict(self) -> dict:
        return {
            "eliminated": self.eliminated,
            "replacement": self.replacement,
            "seat": self.seat,
            "rule": self.rule,
        }


@dataclass
class RoundOutcome:
    game: GameState
    round: Round
    totals: Totals
    rotations: list[Rotation] = field(default_factory=list)
    step_candidates: list[Candidate] = field(default_factory=list)
    one_shot_candidates: list[Candidate] = field(default_factory=list)


def order_candidates(candidates: list[Candidate]) -> list[Candidate]:
    return sorted(candidates, key=Candidate.sort_key)


def _seated_deltas(game: GameState, rnd: Round) -> list[tuple[int, str, int]]:
    """(seat in game.active, name, points) for round players still seated."""
    deltas = []
    for _, name, points in rnd.seats():
        if name and name in game.active:
            deltas.append((game.active.index(name), name, points))
    return deltas


def find_step_candidates(
    game: GameState, rnd: Round, prior: Totals
) -> list[Candidate]:
    """Seated players reaching their next multiple of 50."""
    candidates = []
    for seat, name, points in _seated_deltas(game, rnd):
        prev_total = prior.total_of(name)
        new_total = prev_total + points
        threshold = (game.level_of(name) + 1) * ELIMINATION_STEP
        if new_total >= threshold:
            candidates.append(Candidate(
                name=name,
                seat=seat,
                prev_total=prev_total,
                new_total=new_total,
                overshoot=new_total - threshold,
                rule=RULE_STEP,
            ))
    return order_candidates(candidates)


def find_one_shot_candidates(
    game: GameState, rnd: Round, prior: Totals
) -> list[Candidate]:
    """Seated players crossing 25 this round, while the rule is unused."""
    if game.one_shot_used:
        return []
    candidates = []
    for seat, name, points in _seated_deltas(game, rnd):
        prev_total = prior.total_of(name)
        new_total = prev_total + points
        if prev_total < ONE_SHOT_THRESHOLD <= new_total:
            candidates.append(Candidate(
                name=name,
                seat=seat,
                prev_total=prev_total,
                new_total=new_total,
                overshoot=new_total - ONE_SHOT_THRESHOLD,
                rule=RULE_ONE_SHOT,
            ))
    return order_candidates(candidates)


def _rotate(game: GameState, candidate: Candidate) -> Rotation:
    replacement = game.queue.pop(0) if game.queue else None
    game.active[candidate.seat] = replacement
    game.queue.append(candidate.name)
    return Rotation(
        eliminated=candidate.name,
        replacement=replacement,
        seat=candidate.seat,
        rule=candidate.rule,
    )


def apply_round(game: GameState, raw_round: Any) -> RoundOutcome:
    """Append a round and rotate every seated player it pushes over a line.

    50-rule rotations run first in candidate order. The one-shot winner
    (top-ranked 25 crosser) rotates next unless the 50 rule already moved
    them this round, in which case it only marks the rule as used.
    """
    game = copy.deepcopy(game)
    rnd = normalize_round(raw_round)
    prior = compute_totals(game.rounds, game.active, game.queue)

    step_candidates = find_step_candidates(game, rnd, prior)
    one_shot_candidates = find_one_shot_candidates(game, rnd, prior)

    rotations: list[Rotation] = []
    rotated: set[str] = set()
    for candidate in step_candidates:
        rotations.append(_rotate(game, candidate))
        rotated.add(candidate.name)
        game.elimination_levels[candidate.name] = (
            candidate.new_total // ELIMINATION_STEP
        )

    if one_shot_candidates:
        winner = one_shot_candidates[0]
        if winner.name not in rotated:
            rotations.append(_rotate(game, winner))
        game.one_shot_used = True
        game.one_shot_used_by = winner.name
        game.elimination_levels[winner.name] = max(game.level_of(winner.name), 1)

    game.rounds.append(rnd)
    for name in game.known_players():
        game.elimination_levels.setdefault(name, 0)

    return RoundOutcome(
        game=game,
        round=rnd,
        totals=compute_totals(game.rounds, game.active, game.queue),
        rotations=rotations,
        step_candidates=step_candidates,
        one_shot_candidates=one_shot_candidates,
    )


def replay_one_shot(rounds: list[Any]) -> str | None:
    """Player who first reached 25 walking the history, or None.

    Within the round where the first crossing happens, simultaneous
    crossers are ranked the same way apply_round ranks them.
    """
    running: dict[str, int] = {}
    for raw in rounds:
        rnd = normalize_round(raw)
        crossed = []
        for seat, name, points in rnd.seats():
            if not name:
                continue
            prev_total = running.get(name, 0)
            running[name] = prev_total + points
            if prev_total < ONE_SHOT_THRESHOLD <= running[name]:
                crossed.append(Candidate(
                    name=name,
                    seat=seat,
                    prev_total=prev_total,
                    new_total=running[name],
                    overshoot=running[name] - ONE_SHOT_THRESHOLD,
                    rule=RULE_ONE_SHOT,
                ))
        if crossed:
            return order_candidates(crossed)[0].name
    return None


def replay_levels(game: GameState) -> dict[str, int]:
    totals = compute_totals(game.rounds, game.active, game.queue)
    levels = {name: total // ELIMINATION_STEP for name, total in totals.totals.items()}
    for name in game.known_players():
        levels.setdefault(name, 0)
    return levels


def recompute_derived_state(game: GameState) -> GameState:
    """Rebuild elimination levels and the one-shot flag from history.

    Seats and queue are left as they are.
    """
    game = copy.deepcopy(game)
    game.elimination_levels = replay_levels(game)
    used_by = replay_one_shot(game.rounds)
    game.one_shot_used = used_by is not None
    game.one_shot_used_by = used_by
    return game


def remove_last_round(game: GameState) -> tuple[GameState, Round]:
    """Drop the most recent round and rebuild derived state.

    Raises EmptyHistoryError if there is nothing to remove.
    """
    if not game.rounds:
        raise EmptyHistoryError()
    game = copy.deepcopy(game)
    removed = game.rounds.pop()
    return recompute_derived_state(game), removed
