"""Round input validation, applied before a round is confirmed.

The elimination engine computes over whatever points it is given; the
checks here are what the entry form enforced before confirming.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.game.cards import points_from_cards
from src.game.models import GameState, Round
from src.utils.constants import MAX_CARDS


@dataclass
class ValidationResult:
    valid: bool
    error: str | None = None


def validate_round_input(rnd: Round, game: GameState) -> ValidationResult:
    """Validate a normalized round against the game's current seats.

    Rules:
    - Seat names match the active seats, in order
    - Empty seats score nothing
    - Card counts are 0..13 and points match the card count
    - Exactly one occupied seat scores 0 (the round winner)
    """
    if rnd.is_empty():
        return ValidationResult(False, error="Round has no players")

    for seat, name, points in rnd.seats():
        expected = game.active[seat]
        if name != expected:
            return ValidationResult(
                False,
                error=f"Seat {seat + 1}: expected {expected or 'empty'}, got {name or 'empty'}",
            )
        if name is None:
            if points:
                return ValidationResult(
                    False, error=f"Seat {seat + 1} is empty but scored {points}"
                )
            continue

        cards = rnd.cards[seat]
        if cards < 0 or cards > MAX_CARDS:
            return ValidationResult(
                False, error=f"{name}: card count must be 0..{MAX_CARDS}"
            )
        if points != points_from_cards(cards):
            return ValidationResult(
                False,
                error=f"{name}: {cards} cards score {points_from_cards(cards)}, not {points}",
            )

    winners = [name for _, name, points in rnd.seats() if name and points == 0]
    if len(winners) != 1:
        return ValidationResult(
            False, error=f"Exactly one player must score 0, found {len(winners)}"
        )
    return ValidationResult(True)
