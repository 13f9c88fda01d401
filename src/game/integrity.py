"""State integrity checker for scoreboard game state."""

from __future__ import annotations

from collections import Counter

from src.game.elimination import replay_levels, replay_one_shot
from src.game.models import GameState
from src.game.scoring import compute_totals
from src.utils.constants import SEAT_COUNT


def validate_game_integrity(game: GameState) -> list[str]:
    """Validate all game state invariants. Returns list of errors (empty = OK).

    Checks:
    1. Exactly 4 active seats
    2. No player both seated and queued, or listed twice
    3. Every round has 4 seats
    4. Totals are non-negative
    5. Elimination levels match the round history
    6. One-shot flag matches the round history
    """
    errors: list[str] = []

    # 1. Seats
    if len(game.active) != SEAT_COUNT:
        errors.append(f"Seats = {len(game.active)}, expected {SEAT_COUNT}")

    # 2. Duplicates across seats and queue
    counts = Counter(name for name in game.active + game.queue if name)
    for name, count in counts.items():
        if count > 1:
            errors.append(f"Player {name} listed {count} times in seats/queue")

    # 3. Round shape
    for i, rnd in enumerate(game.rounds, 1):
        if not (len(rnd.player_names) == len(rnd.points) == len(rnd.cards) == SEAT_COUNT):
            errors.append(f"Round {i} does not have {SEAT_COUNT} seats")

    # 4. Non-negative totals
    totals = compute_totals(game.rounds, game.active, game.queue)
    for name, total in totals.totals.items():
        if total < 0:
            errors.append(f"Negative total for {name}: {total}")

    # 5. Levels; the one-shot player is held at level 1 or more until an undo
    expected_levels = replay_levels(game)
    for name, expected in expected_levels.items():
        actual = game.level_of(name)
        allowed = {expected}
        if game.one_shot_used and name == game.one_shot_used_by:
            allowed.add(max(expected, 1))
        if actual not in allowed:
            errors.append(
                f"Elimination level for {name} = {actual}, expected {expected}"
            )

    # 6. One-shot flag
    first_to_25 = replay_one_shot(game.rounds)
    if game.one_shot_used != (first_to_25 is not None):
        errors.append(
            f"One-shot flag = {game.one_shot_used}, history says {first_to_25 is not None}"
        )
    elif game.one_shot_used and game.one_shot_used_by != first_to_25:
        errors.append(
            f"One-shot used by {game.one_shot_used_by}, history says {first_to_25}"
        )

    return errors
