"""Card-count to penalty-point conversion."""

from __future__ import annotations

from src.utils.constants import CARD_MULTIPLIERS, MAX_CARDS


def points_from_cards(cards: int) -> int:
    """Penalty points for the number of cards left in hand.

    0 -> 0, 5 -> 5, 8 -> 16, 11 -> 33, 13 -> 52.
    """
    if cards < 0 or cards > MAX_CARDS:
        raise ValueError(f"Card count out of range: {cards}")
    for minimum, multiplier in CARD_MULTIPLIERS:
        if cards >= minimum:
            return cards * multiplier
    return cards


# Every point value the table can produce, mapped back to its card count
_CARDS_BY_POINTS = {points_from_cards(n): n for n in range(MAX_CARDS + 1)}


def cards_from_points(points: int) -> int:
    """Inverse of points_from_cards for the values it produces."""
    try:
        return _CARDS_BY_POINTS[points]
    except KeyError:
        raise ValueError(f"No card count scores {points} points") from None


def is_card_points(points: int) -> bool:
    """True if some card count scores exactly this many points."""
    return points in _CARDS_BY_POINTS
