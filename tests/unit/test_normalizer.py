"""Tests for round normalization."""

import logging
from decimal import Decimal

from src.game.models import Round
from src.game.normalizer import ROUND_SHAPE_RESOLVERS, normalize_round, resolve_shape

EXPECTED_NAMES = ["A", "B", "C", "D"]
EXPECTED_POINTS = [0, 16, 5, 33]
EXPECTED_CARDS = [0, 8, 5, 11]


def _assert_canonical(rnd: Round) -> None:
    assert rnd.player_names == EXPECTED_NAMES
    assert rnd.points == EXPECTED_POINTS
    assert rnd.cards == EXPECTED_CARDS


class TestShapes:
    def test_direct_arrays(self):
        rnd = normalize_round({
            "players": ["A", "B", "C", "D"],
            "points": [0, 16, 5, 33],
            "cards": [0, 8, 5, 11],
        })
        _assert_canonical(rnd)

    def test_direct_arrays_stored_sample(self):
        rnd = normalize_round(
            {"players": ["A", "B", "C", "D"], "points": [1, 2, 3, 4], "cards": [5, 6, 7, 8]}
        )
        assert rnd.player_names == ["A", "B", "C", "D"]
        assert rnd.points == [1, 2, 3, 4]
        assert rnd.cards == [5, 6, 7, 8]

    def test_seat_keys(self):
        rnd = normalize_round({
            "player1Name": "A", "player1Score": 0,
            "player2Name": "B", "player2Score": 16,
            "player3Name": "C", "player3Score": 5,
            "player4Name": "D", "player4Score": 33,
        })
        _assert_canonical(rnd)

    def test_seat_keys_case_insensitive(self):
        rnd = normalize_round({
            "P1NAME": "A", "p1score": 0,
            "p2name": "B", "P2Score": 16,
            "p3Name": "C", "score3": 5,
            "PLAYER4": "D", "Cards4": 11,
        })
        _assert_canonical(rnd)

    def test_player_objects(self):
        rnd = normalize_round({"players": [
            {"name": "A", "score": 0},
            {"displayName": "B", "score": 16},
            {"username": "C", "cards": 5},
            {"name": "D", "score": 33, "cards": 11},
        ]})
        _assert_canonical(rnd)

    def test_parallel_arrays(self):
        rnd = normalize_round({
            "playerNames": ["A", "B", "C", "D"],
            "playerScores": [0, 16, 5, 33],
        })
        _assert_canonical(rnd)

    def test_names_scores(self):
        rnd = normalize_round({"names": ["A", "B", "C", "D"], "scores": [0, 16, 5, 33]})
        _assert_canonical(rnd)

    def test_positional_keys(self):
        rnd = normalize_round({
            "0": {"name": "A", "score": 0},
            "1": {"name": "B", "score": 16},
            "2": {"name": "C", "score": 5},
            "3": {"name": "D", "score": 33},
        })
        _assert_canonical(rnd)

    def test_all_shapes_agree(self):
        shapes = [
            {"players": EXPECTED_NAMES, "points": EXPECTED_POINTS},
            {f"player{i + 1}Name": n for i, n in enumerate(EXPECTED_NAMES)}
            | {f"player{i + 1}Score": p for i, p in enumerate(EXPECTED_POINTS)},
            {"players": [{"name": n, "score": p} for n, p in zip(EXPECTED_NAMES, EXPECTED_POINTS)]},
            {"names": EXPECTED_NAMES, "scores": EXPECTED_POINTS},
            {str(i): {"name": n, "score": p} for i, (n, p) in enumerate(zip(EXPECTED_NAMES, EXPECTED_POINTS))},
        ]
        results = [normalize_round(s) for s in shapes]
        assert all(r == results[0] for r in results)


class TestPriority:
    def test_order_is_fixed(self):
        assert [name for name, _ in ROUND_SHAPE_RESOLVERS] == [
            "direct_arrays",
            "seat_keys",
            "player_objects",
            "parallel_arrays",
            "positional_keys",
        ]

    def test_arrays_win_over_seat_keys(self):
        shape, _ = resolve_shape({
            "players": ["A", "B", "C", "D"],
            "points": [0, 1, 2, 3],
            "player1Name": "Z",
            "player1Score": 40,
        })
        assert shape == "direct_arrays"
        rnd = normalize_round({
            "players": ["A", "B", "C", "D"],
            "points": [0, 1, 2, 3],
            "player1Name": "Z",
        })
        assert rnd.player_names[0] == "A"

    def test_seat_keys_win_over_player_objects(self):
        shape, _ = resolve_shape({
            "player1Name": "A",
            "players": [{"name": "Z", "score": 9}],
        })
        assert shape == "seat_keys"

    def test_names_without_points_use_player_list(self):
        shape, entries = resolve_shape({"players": ["A", "B"]})
        assert shape == "player_objects"
        rnd = normalize_round({"players": ["A", "B"]})
        assert rnd.player_names == ["A", "B", None, None]
        assert rnd.points == [0, 0, 0, 0]


class TestDefaults:
    def test_short_arrays_padded(self):
        rnd = normalize_round({"players": ["A", "B"], "points": [2, 3]})
        assert rnd.player_names == ["A", "B", None, None]
        assert rnd.points == [2, 3, 0, 0]
        assert rnd.cards == [2, 3, 0, 0]

    def test_null_points(self):
        rnd = normalize_round({"players": ["A", "B", None, None], "points": [5, 10, None, None]})
        assert rnd.points == [5, 10, 0, 0]

    def test_empty_seat_has_no_points(self):
        rnd = normalize_round({"players": ["A", None, "", "D"], "points": [0, 7, 8, 3]})
        assert rnd.player_names == ["A", None, None, "D"]
        assert rnd.points == [0, 0, 0, 3]

    def test_cards_derive_points(self):
        rnd = normalize_round({"players": ["A", "B", "C", "D"], "cards": [0, 8, 13, 2]})
        assert rnd.points == [0, 16, 52, 2]

    def test_points_off_table_keep_zero_cards(self):
        rnd = normalize_round({"players": ["A", "B", "C", "D"], "points": [0, 15, 1, 1]})
        assert rnd.points[1] == 15
        assert rnd.cards[1] == 0

    def test_numeric_strings_and_decimals(self):
        rnd = normalize_round({
            "players": ["A", "B", "C", "D"],
            "points": ["0", "16", Decimal("5"), 33.0],
        })
        assert rnd.points == [0, 16, 5, 33]

    def test_non_finite_numbers_become_zero(self):
        rnd = normalize_round({
            "players": ["A", "B", "C", "D"],
            "points": ["inf", float("inf"), Decimal("Infinity"), float("nan")],
            "cards": [Decimal("NaN"), "-inf", None, None],
        })
        assert rnd.points == [0, 0, 0, 0]
        assert rnd.cards == [0, 0, 0, 0]

    def test_non_finite_timestamp_ignored(self):
        rnd = normalize_round({"players": ["A"], "points": [0], "timestamp": float("inf")})
        assert rnd.timestamp is None

    def test_negative_points_clamped(self):
        rnd = normalize_round({"players": ["A", "B", "C", "D"], "points": [0, -4, 1, 1]})
        assert rnd.points[1] == 0

    def test_timestamp_carried(self):
        rnd = normalize_round({"players": ["A"], "points": [0], "ts": 1700000000000})
        assert rnd.timestamp == 1700000000000


class TestMalformed:
    def test_unknown_shape_is_empty_round(self, caplog):
        with caplog.at_level(logging.WARNING, logger="scoreboard.normalizer"):
            rnd = normalize_round({"foo": "bar"})
        assert rnd == Round()
        assert "Malformed round" in caplog.text

    def test_not_a_mapping(self):
        assert normalize_round(None) == Round()
        assert normalize_round([1, 2, 3]) == Round()

    def test_round_passthrough(self):
        rnd = Round(player_names=["A", None, None, None], points=[3, 0, 0, 0], cards=[3, 0, 0, 0])
        assert normalize_round(rnd) is rnd
