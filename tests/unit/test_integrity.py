"""Tests for state integrity checker."""

from src.game.elimination import apply_round
from src.game.integrity import validate_game_integrity

from tests.conftest import make_round, make_state

SEATS = ["A", "B", "C", "D"]


def _played_game():
    game = make_state(SEATS, queue=["Q1", "Q2"], levels={n: 0 for n in SEATS + ["Q1", "Q2"]})
    for points in ([0, 10, 20, 5], [0, 16, 7, 2], [30, 0, 33, 1]):
        game = apply_round(game, make_round(game.active, points)).game
    return game


class TestValidateGameIntegrity:
    def test_valid_game_passes(self):
        errors = validate_game_integrity(_played_game())
        assert errors == [], f"Unexpected errors: {errors}"

    def test_fresh_game_passes(self):
        assert validate_game_integrity(make_state(SEATS, queue=["Q1"])) == []

    def test_wrong_seat_count(self):
        game = _played_game()
        game.active.append(None)
        errors = validate_game_integrity(game)
        assert any("Seats = 5" in e for e in errors)

    def test_duplicate_name(self):
        game = _played_game()
        game.queue.append(game.active[0])
        errors = validate_game_integrity(game)
        assert any("listed 2 times" in e for e in errors)

    def test_tampered_level(self):
        game = _played_game()
        game.elimination_levels["D"] = 3
        errors = validate_game_integrity(game)
        assert any("Elimination level for D" in e for e in errors)

    def test_one_shot_level_allowance(self):
        game = _played_game()
        assert game.one_shot_used_by == "C"
        assert game.level_of("C") == 1
        assert validate_game_integrity(game) == []

    def test_flag_mismatch(self):
        game = _played_game()
        game.one_shot_used = False
        game.one_shot_used_by = None
        game.elimination_levels["C"] = 1
        errors = validate_game_integrity(game)
        assert any("One-shot flag" in e for e in errors)

    def test_wrong_one_shot_owner(self):
        game = _played_game()
        game.one_shot_used_by = "B"
        errors = validate_game_integrity(game)
        assert any("One-shot used by B" in e for e in errors)
