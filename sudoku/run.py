import argparse
import json
import os

import numpy as np

from sudoku.generator import Difficulty, generate_pair
from sudoku.grid import count_empty, format_grid, grid_to_rows

# Entry point: generate puzzles and print or save them. Usage: python -m sudoku.run [--difficulty hard]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Generate uniquely solvable 9x9 Sudoku puzzles.")
    ap.add_argument(
        "--difficulty",
        type=str,
        default="easy",
        choices=[d.name.lower() for d in Difficulty],
        help="Target empty cells: easy 40, medium 45, hard 50, expert 54",
    )
    ap.add_argument("--count", type=int, default=1, help="Number of puzzles to generate")
    ap.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")
    ap.add_argument("--pretty", action="store_true", help="Print boards instead of 81-char lines")
    ap.add_argument("--with-solution", action="store_true", help="Also print/save the solution")
    ap.add_argument("--out", type=str, default=None, help="Write puzzles to this JSON file")
    return ap


def generate_records(args) -> list:
    """Generate args.count puzzles, print each, and optionally save them as JSON.

    Args:
        args: Parsed arguments from build_parser.

    Returns:
        List of dicts with keys "difficulty", "requested_empty", "empty", "puzzle" and,
        with --with-solution, "solution".
    """
    level = Difficulty.from_name(args.difficulty)
    rng = np.random.default_rng(args.seed)
    records = []
    for i in range(args.count):
        puzzle, solution = generate_pair(level, rng=rng)
        empty = count_empty(puzzle)
        # Fewer empty cells than requested is expected when uniqueness blocks further removals.
        note = "" if empty == level.empty_cells else f" (requested {level.empty_cells})"
        print(f"Puzzle {i + 1}/{args.count} [{level.value}]: {empty} empty cells{note}")
        print(format_grid(puzzle, pretty=args.pretty))
        if args.with_solution:
            print("Solution:")
            print(format_grid(solution, pretty=args.pretty))

        record = {
            "difficulty": level.value,
            "requested_empty": level.empty_cells,
            "empty": empty,
            "puzzle": grid_to_rows(puzzle),
        }
        if args.with_solution:
            record["solution"] = grid_to_rows(solution)
        records.append(record)

    if args.out:
        out_dir = os.path.dirname(args.out)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.out, "w") as f:
            json.dump(records, f, indent=2)
        print(f"Saved {args.out}")

    return records


def main(argv=None):
    """Generate puzzles from the command line."""
    args = build_parser().parse_args(argv)
    if args.count < 1:
        raise SystemExit("--count must be at least 1")
    generate_records(args)


if __name__ == "__main__":
    main()
