from enum import Enum
from typing import List, Optional, Tuple, Union

import numpy as np

from sudoku.grid import ALL_POSITIONS, EMPTY, SIZE
from sudoku.solver import UNIQUENESS_LIMIT, count_solutions, generate_solved

# Puzzle generation: random full solution, then dig cells while the solution stays unique.


class Difficulty(Enum):
    """Difficulty level; the only knob is how many cells the digger tries to empty."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"

    @property
    def empty_cells(self) -> int:
        return _EMPTY_CELLS[self]

    @classmethod
    def from_name(cls, name: str) -> "Difficulty":
        """Look up a difficulty by value or member name, case-insensitively.

        Raises:
            ValueError: If name matches no difficulty.
        """
        key = name.strip().lower()
        for member in cls:
            if key in (member.value.lower(), member.name.lower()):
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown difficulty: {name!r}. Use one of {choices}.")


_EMPTY_CELLS = {
    Difficulty.EASY: 40,
    Difficulty.MEDIUM: 45,
    Difficulty.HARD: 50,
    Difficulty.EXPERT: 54,
}

DifficultyLike = Union[Difficulty, str]


def _as_difficulty(difficulty: DifficultyLike) -> Difficulty:
    if isinstance(difficulty, Difficulty):
        return difficulty
    return Difficulty.from_name(difficulty)


def dig(
    solution: np.ndarray,
    target_empty: int,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Clear cells of a full solution, one at a time, keeping exactly one completion.

    Positions are tried once each in a random order. A cleared cell is kept empty only if the
    puzzle still counts exactly one solution; otherwise its value goes back and that position
    is never retried. Digging stops at target_empty removals or when positions run out.

    Running out first is normal for high targets: the puzzle is returned with fewer empty
    cells than asked for, without an error and without retrying on another solution.

    Args:
        solution: 9x9 complete valid grid (not modified).
        target_empty: Number of cells to clear, 0..81.
        rng: Random generator for the trial order. Defaults to None (new default_rng).

    Returns:
        New 9x9 puzzle grid with at most target_empty empty cells and a unique solution.

    Raises:
        ValueError: If target_empty is outside 0..81.
    """
    if not 0 <= target_empty <= SIZE * SIZE:
        raise ValueError(f"target_empty must be in 0..{SIZE * SIZE}, got {target_empty}")
    if rng is None:
        rng = np.random.default_rng()
    puzzle = np.array(solution, dtype=np.int64)
    positions = list(ALL_POSITIONS)
    rng.shuffle(positions)

    removed = 0
    for r, c in positions:
        if removed >= target_empty:
            break
        value = puzzle[r, c]
        if value == EMPTY:
            continue
        puzzle[r, c] = EMPTY
        scratch = puzzle.copy()
        if count_solutions(scratch, UNIQUENESS_LIMIT) == 1:
            removed += 1
        else:
            puzzle[r, c] = value
    return puzzle


def generate_pair(
    difficulty: DifficultyLike,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Generate a puzzle together with the full solution it was dug from.

    Args:
        difficulty: Difficulty or its name ("easy", "Expert", ...).
        rng: Random generator. Defaults to None (built from seed).
        seed: Seed used when rng is None. Defaults to None.

    Returns:
        Tuple (puzzle, solution); every non-empty puzzle cell equals the solution there.
    """
    level = _as_difficulty(difficulty)
    if rng is None:
        rng = np.random.default_rng(seed)
    solution = generate_solved(rng)
    puzzle = dig(solution, level.empty_cells, rng)
    return puzzle, solution


def generate(
    difficulty: DifficultyLike,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Generate a uniquely solvable puzzle for a difficulty.

    The puzzle aims for difficulty.empty_cells empty cells but may have fewer (see dig);
    that shortfall is expected, mostly for HARD and EXPERT.

    Args:
        difficulty: Difficulty or its name.
        rng: Random generator. Defaults to None (built from seed).
        seed: Seed used when rng is None. Defaults to None.

    Returns:
        9x9 int64 puzzle (0 = empty). A cell is a given iff it is non-zero.
    """
    puzzle, _ = generate_pair(difficulty, rng=rng, seed=seed)
    return puzzle


def generate_puzzles(
    num_puzzles: int, difficulty: DifficultyLike = Difficulty.EASY, seed: Optional[int] = 42
) -> List[Tuple[np.ndarray, np.ndarray]]:
    """Generate (puzzle, solution) pairs, all drawn from one seeded generator.

    Args:
        num_puzzles: Number of pairs to generate.
        difficulty: Difficulty or its name. Defaults to EASY.
        seed: Random seed. Defaults to 42.

    Returns:
        List of (puzzle, solution) tuples.
    """
    rng = np.random.default_rng(seed)
    return [generate_pair(difficulty, rng=rng) for _ in range(num_puzzles)]
