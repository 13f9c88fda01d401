"""Interactive scorekeeping CLI.

Usage: python -m cli.play --players Anna Ben Cleo Dario Eva [--name "Friday"] [--save game.json]

Commands:
  round <cards1> <cards2> <cards3> <cards4>   cards left per seat, winner 0, "-" for empty seats
  undo                                        delete the last round
  totals | seats | history                    show standings
  quit
"""

from __future__ import annotations

import argparse
import json

from src.db.memory import InMemoryGameRepository
from src.game.cards import points_from_cards
from src.game.engine import GameEngine
from src.game.integrity import validate_game_integrity
from src.game.models import GameState
from src.game.scoring import compute_cumulative_snapshots, compute_totals, standings


def parse_cards(args: list[str], game: GameState) -> dict:
    """Build a round record from per-seat card counts."""
    if len(args) != len(game.active):
        raise ValueError(f"Expected {len(game.active)} values, got {len(args)}")
    cards = [0 if a == "-" else int(a) for a in args]
    return {
        "players": list(game.active),
        "points": [points_from_cards(c) for c in cards],
        "cards": cards,
    }


def display_totals(game: GameState) -> str:
    totals = compute_totals(game.rounds, game.active, game.queue)
    lines = [f"  {game.name}: {len(game.rounds)} rounds"]
    for name, total in standings(totals):
        avg = totals.averages.get(name, 0)
        lines.append(
            f"    {name:<12} {total:>4}  avg {avg:5.1f}  level {game.level_of(name)}"
        )
    return "\n".join(lines)


def display_seats(game: GameState) -> str:
    seats = "  ".join(f"{i}:{n or '-'}" for i, n in enumerate(game.active, 1))
    queue = ", ".join(game.queue) or "(empty)"
    flag = f"used by {game.one_shot_used_by}" if game.one_shot_used else "unused"
    return f"  Seats  {seats}\n  Queue  {queue}\n  25 rule {flag}"


def display_history(game: GameState) -> str:
    snapshots = compute_cumulative_snapshots(game.known_players(), game.rounds)
    lines = []
    for i, (rnd, snap) in enumerate(zip(game.rounds, snapshots), 1):
        seats = ", ".join(
            f"{n}={p}" for n, p in zip(rnd.player_names, rnd.points) if n
        )
        running = ", ".join(f"{n}:{t}" for n, t in snap.items())
        lines.append(f"  #{i:<3} {seats}  | {running}")
    return "\n".join(lines) or "  (no rounds)"


def play(names: list[str], game_name: str, save_path: str | None) -> None:
    engine = GameEngine(InMemoryGameRepository())
    result = engine.create_game(game_name, names)
    if not result.success:
        print(f"  ✗ {result.error}")
        return
    game = result.game
    assert game is not None
    print(display_seats(game))

    while True:
        try:
            line = input("\n> ").strip()
        except EOFError:
            break
        if not line:
            continue
        parts = line.split()
        cmd = parts[0].lower()

        if cmd in ("quit", "exit", "q"):
            break
        if cmd == "totals":
            print(display_totals(game))
            continue
        if cmd == "seats":
            print(display_seats(game))
            continue
        if cmd == "history":
            print(display_history(game))
            continue

        if cmd == "round":
            try:
                raw_round = parse_cards(parts[1:], game)
            except ValueError as e:
                print(f"  ✗ {e}")
                continue
            result = engine.confirm_round(game.game_id, raw_round)
        elif cmd == "undo":
            result = engine.delete_last_round(game.game_id)
        else:
            print(f"  Unknown command: {cmd}")
            continue

        if not result.success:
            print(f"  ✗ {result.error}")
            continue
        assert result.game is not None
        game = result.game

        for event in result.events:
            if event.get("event") == "rotation":
                print(
                    f"  *** {event['user_id']} ({event['rule']} rule) leaves seat "
                    f"{event['seat'] + 1}, {event['replacement'] or 'nobody'} sits down"
                )
        print(display_totals(game))
        print(display_seats(game))

        errors = validate_game_integrity(game)
        if errors:
            print(f"\n  ⚠ INTEGRITY ERROR: {errors}")
            return

    if save_path:
        with open(save_path, "w") as f:
            json.dump(game.to_dict(), f, indent=2)
        print(f"  Saved to {save_path}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Big Two scoreboard CLI")
    parser.add_argument("--players", nargs="+", required=True)
    parser.add_argument("--name", default="")
    parser.add_argument("--save", help="Write the final game state to this JSON file")
    args = parser.parse_args()
    play(args.players, args.name, args.save)


if __name__ == "__main__":
    main()
