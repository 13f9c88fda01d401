"""Simulate scoreboard games with random rounds.

Usage: python -m cli.simulate --games 100 --players 6 --rounds 40 [--seed 42] [--verbose]
"""

from __future__ import annotations

import argparse
import random
import secrets
import time

from src.db.memory import InMemoryGameRepository
from src.game.cards import points_from_cards
from src.game.engine import GameEngine
from src.game.integrity import validate_game_integrity
from src.game.models import GameState
from src.utils.constants import MAX_CARDS

UNDO_CHANCE = 0.05


def create_rng(seed: int | None = None) -> random.Random:
    """Seeded Random for reproducible runs, SystemRandom otherwise."""
    if seed is not None:
        return random.Random(seed)
    return secrets.SystemRandom()


def random_round(game: GameState, rng: random.Random) -> dict:
    """A valid round for the current seats: one winner, others hold cards."""
    occupied = [i for i, name in enumerate(game.active) if name]
    winner = rng.choice(occupied)
    cards = [0] * len(game.active)
    for i in occupied:
        if i != winner:
            cards[i] = rng.randint(1, MAX_CARDS)
    return {
        "players": list(game.active),
        "points": [points_from_cards(c) for c in cards],
        "cards": cards,
    }


def simulate_game(
    num_players: int, num_rounds: int, rng: random.Random, verbose: bool = False
) -> dict:
    """Simulate one game. Returns stats dict."""
    repo = InMemoryGameRepository()
    engine = GameEngine(repo)

    names = [f"p{i + 1}" for i in range(num_players)]
    result = engine.create_game("sim", names)
    assert result.game is not None
    game = result.game

    rotations = 0
    undos = 0
    for _ in range(num_rounds):
        if sum(1 for n in game.active if n) < 2:
            break
        if game.rounds and rng.random() < UNDO_CHANCE:
            result = engine.delete_last_round(game.game_id)
            undos += 1
        else:
            result = engine.confirm_round(game.game_id, random_round(game, rng))
            rotations += sum(1 for e in result.events if e.get("event") == "rotation")
        if not result.success:
            return {"error": result.error, "rounds": len(game.rounds)}
        assert result.game is not None
        game = result.game

        errors = validate_game_integrity(game)
        if errors:
            return {"error": f"Integrity: {errors}", "rounds": len(game.rounds)}

    if verbose:
        print(f"  seats={game.active} queue={game.queue}")

    return {
        "rounds": len(game.rounds),
        "rotations": rotations,
        "undos": undos,
        "one_shot_by": game.one_shot_used_by,
        "error": None,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Scoreboard simulator")
    parser.add_argument("--games", type=int, default=100)
    parser.add_argument("--players", type=int, default=6)
    parser.add_argument("--rounds", type=int, default=40)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    base_seed = args.seed if args.seed is not None else int(time.time())
    print(
        f"Simulating {args.games} games, {args.players} players, "
        f"{args.rounds} rounds (base seed: {base_seed})"
    )

    errors = 0
    total_rotations = 0
    total_undos = 0
    for i in range(args.games):
        rng = create_rng(base_seed + i)
        result = simulate_game(args.players, args.rounds, rng, verbose=args.verbose)

        if result.get("error"):
            errors += 1
            print(f"  Game {i + 1}: ERROR - {result['error']}")
            continue

        total_rotations += result["rotations"]
        total_undos += result["undos"]
        if args.verbose:
            print(
                f"  Game {i + 1}: rounds={result['rounds']}, "
                f"rotations={result['rotations']}, 25 used by {result['one_shot_by']}"
            )

    completed = args.games - errors
    print("\nResults:")
    print(f"  Games completed: {completed}/{args.games}")
    print(f"  Errors: {errors}")
    if completed > 0:
        print(f"  Avg rotations: {total_rotations / completed:.1f}")
        print(f"  Avg undos: {total_undos / completed:.1f}")


if __name__ == "__main__":
    main()
