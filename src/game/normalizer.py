"""Round record normalization.

Rounds reach the scoreboard from more than one producer (manual entry,
imported history, older clients), so the stored shape drifts. Every
consumer works on the canonical Round produced here.

Shapes are tried in a fixed priority and the first structural match wins:

1. direct arrays: ``players``/``playerNames`` with ``points`` and/or ``cards``
2. per-seat keys, case-insensitive: ``player1Name``, ``p1Score``, ``cards1``...
3. ``players`` array of names or ``{name, score, cards}`` objects
4. parallel arrays: ``playerNames``/``playerScores`` or ``names``/``scores``
5. positional keys ``"0"`` .. ``"3"``

A record matching none of them becomes an all-empty round.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Any, Callable

from src.game.cards import cards_from_points, is_card_points, points_from_cards
from src.game.models import Round
from src.utils.constants import MAX_CARDS, SEAT_COUNT, TIMESTAMP_KEYS

logger = logging.getLogger("scoreboard.normalizer")

# (name, points, cards); None marks a value the shape did not carry
SeatEntry = tuple[Any, Any, Any]
Resolver = Callable[[dict], "list[SeatEntry] | None"]


def _is_name_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        v is None or isinstance(v, str) for v in value
    )


def _seat(values: list, i: int) -> Any:
    if isinstance(values, list) and i < len(values):
        return values[i]
    return None


def _to_int(value: Any) -> int | None:
    """Coerce a stored number (int, float, Decimal, numeric string)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, int):
        return value
    # NaN and infinities carry no score
    if isinstance(value, Decimal):
        return int(value) if value.is_finite() else None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    return None


def _name_of(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    return None


# --- Shape resolvers, in priority order ---


def _from_direct_arrays(raw: dict) -> list[SeatEntry] | None:
    points = raw.get("points")
    cards = raw.get("cards")
    if not isinstance(points, list) and not isinstance(cards, list):
        return None
    if _is_name_list(raw.get("players")):
        names = raw["players"]
    elif _is_name_list(raw.get("playerNames")):
        names = raw["playerNames"]
    else:
        return None
    return [
        (_seat(names, i), _seat(points, i), _seat(cards, i))
        for i in range(SEAT_COUNT)
    ]


def _from_seat_keys(raw: dict) -> list[SeatEntry] | None:
    lowered = {str(k).lower(): v for k, v in raw.items()}

    def first(keys: list[str]) -> Any:
        for key in keys:
            if key in lowered:
                return lowered[key]
        return None

    entries: list[SeatEntry] = []
    matched = False
    for seat in range(1, SEAT_COUNT + 1):
        name_keys = [f"player{seat}name", f"p{seat}name", f"player{seat}"]
        if any(k in lowered for k in name_keys):
            matched = True
        name = first(name_keys)
        if isinstance(name, dict):
            name = name.get("name")
        entries.append((
            name,
            first([f"player{seat}score", f"p{seat}score", f"score{seat}"]),
            first([f"cards{seat}", f"p{seat}cards", f"player{seat}cards"]),
        ))
    return entries if matched else None


def _from_player_objects(raw: dict) -> list[SeatEntry] | None:
    players = raw.get("players")
    if not isinstance(players, list):
        return None
    entries: list[SeatEntry] = []
    for i in range(SEAT_COUNT):
        p = _seat(players, i)
        if isinstance(p, dict):
            name = p.get("name") or p.get("displayName") or p.get("username")
            score = p.get("score", p.get("points"))
            entries.append((name, score, p.get("cards")))
        else:
            entries.append((p, None, None))
    return entries


def _from_parallel_arrays(raw: dict) -> list[SeatEntry] | None:
    for names_key, scores_key, cards_key in (
        ("playerNames", "playerScores", "playerCards"),
        ("names", "scores", "cards"),
    ):
        names = raw.get(names_key)
        if isinstance(names, list):
            scores = raw.get(scores_key)
            cards = raw.get(cards_key)
            return [
                (_seat(names, i), _seat(scores, i), _seat(cards, i))
                for i in range(SEAT_COUNT)
            ]
    return None


def _from_positional_keys(raw: dict) -> list[SeatEntry] | None:
    if not any(str(i) in raw for i in range(SEAT_COUNT)):
        return None
    entries: list[SeatEntry] = []
    for i in range(SEAT_COUNT):
        v = raw.get(str(i))
        if isinstance(v, dict):
            entries.append((v.get("name"), v.get("score", v.get("points")), v.get("cards")))
        else:
            entries.append((v, None, None))
    return entries


ROUND_SHAPE_RESOLVERS: list[tuple[str, Resolver]] = [
    ("direct_arrays", _from_direct_arrays),
    ("seat_keys", _from_seat_keys),
    ("player_objects", _from_player_objects),
    ("parallel_arrays", _from_parallel_arrays),
    ("positional_keys", _from_positional_keys),
]


def resolve_shape(raw: Any) -> tuple[str | None, list[SeatEntry] | None]:
    """Return (shape name, seat entries) for the first matching shape."""
    if not isinstance(raw, dict):
        return None, None
    for shape, resolver in ROUND_SHAPE_RESOLVERS:
        entries = resolver(raw)
        if entries is not None:
            return shape, entries
    return None, None


def _canonical_seat(entry: SeatEntry) -> tuple[str | None, int, int]:
    name = _name_of(entry[0])
    if name is None:
        return None, 0, 0

    points = _to_int(entry[1])
    cards = _to_int(entry[2])
    if points is not None:
        points = max(points, 0)
    if cards is not None:
        cards = min(max(cards, 0), MAX_CARDS)

    if points is None and cards is not None:
        points = points_from_cards(cards)
    if cards is None and points is not None:
        cards = cards_from_points(points) if is_card_points(points) else 0
    return name, points or 0, cards or 0


def _timestamp_of(raw: dict) -> int | None:
    for key in TIMESTAMP_KEYS:
        ts = _to_int(raw.get(key))
        if ts is not None:
            return ts
    return None


def normalize_round(raw: Any) -> Round:
    """Normalize any accepted round shape to a canonical 4-seat Round."""
    if isinstance(raw, Round):
        return raw

    shape, entries = resolve_shape(raw)
    if entries is None:
        logger.warning("Malformed round, no known shape: %r", raw)
        return Round()

    logger.debug("Round resolved as %s", shape)
    seats = [_canonical_seat(e) for e in entries]
    return Round(
        player_names=[s[0] for s in seats],
        points=[s[1] for s in seats],
        cards=[s[2] for s in seats],
        timestamp=_timestamp_of(raw),
    )
