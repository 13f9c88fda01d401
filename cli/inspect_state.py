"""Inspect and validate a saved game state.

Usage:
  python -m cli.inspect_state --file game_snapshot.json
  python -m cli.inspect_state --file game_snapshot.json --show totals
  python -m cli.inspect_state --file game_snapshot.json --show snapshots
  python -m cli.inspect_state --file game_snapshot.json --validate
  python -m cli.inspect_state --file game_snapshot.json --recompute
"""

from __future__ import annotations

import argparse
import json
import sys

from src.game.elimination import recompute_derived_state
from src.game.integrity import validate_game_integrity
from src.game.models import GameState
from src.game.scoring import compute_cumulative_snapshots, compute_totals, standings


def load_game(file_path: str) -> GameState:
    """Load a stored record, or an API response wrapping it under "data"."""
    with open(file_path) as f:
        data = json.load(f)
    if "data" in data and "gameId" not in data:
        data = dict(data["data"], gameId=data.get("id", ""))
    return GameState.from_dict(data)


def inspect_state(
    file_path: str,
    show: str | None,
    validate: bool,
    recompute: bool,
) -> None:
    game = load_game(file_path)

    if validate:
        errors = validate_game_integrity(game)
        if errors:
            print("Integrity errors:")
            for e in errors:
                print(f"  - {e}")
            sys.exit(1)
        else:
            print("State valid ✓")
        return

    if recompute:
        rebuilt = recompute_derived_state(game)
        print(json.dumps(rebuilt.to_dict(), indent=2))
        return

    if show == "totals":
        totals = compute_totals(game.rounds, game.active, game.queue)
        for name, total in standings(totals):
            rounds = totals.round_counts.get(name, 0)
            avg = totals.averages.get(name, 0)
            print(f"  {name}: {total} in {rounds} rounds (avg {avg:.2f})")
        return

    if show == "snapshots":
        snapshots = compute_cumulative_snapshots(game.known_players(), game.rounds)
        for i, snap in enumerate(snapshots, 1):
            print(f"  after round {i}: {snap}")
        return

    # Default: full dump
    print(f"Game ID: {game.game_id}")
    print(f"Name: {game.name}")
    print(f"Rounds: {len(game.rounds)}")
    print(f"Seats: {game.active}")
    print(f"Queue: {game.queue}")
    print(f"Levels: {game.elimination_levels}")
    print(f"25 rule: used={game.one_shot_used} by={game.one_shot_used_by}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect scoreboard game state")
    parser.add_argument("--file", required=True, help="Path to game state JSON")
    parser.add_argument("--show", choices=["totals", "snapshots"], help="What to show")
    parser.add_argument("--validate", action="store_true", help="Validate integrity")
    parser.add_argument(
        "--recompute", action="store_true", help="Print state with derived fields rebuilt"
    )
    args = parser.parse_args()
    inspect_state(args.file, args.show, args.validate, args.recompute)


if __name__ == "__main__":
    main()
