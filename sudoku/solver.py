from typing import Optional

import numpy as np

from sudoku.grid import (
    DIGITS,
    EMPTY,
    SIZE,
    candidate_mask,
    empty_grid,
    find_empty,
    is_safe,
    is_valid_grid,
)

# Backtracking filler (random digit order) and bounded solution counter (uniqueness oracle).
# Both mutate the grid in place and undo every trial assignment they abandon.

UNIQUENESS_LIMIT = 2


def fill(grid: np.ndarray, rng: Optional[np.random.Generator] = None) -> bool:
    """Fill every empty cell in place by randomized depth-first backtracking.

    Cells are visited row-major; at each one the digits 1..9 are tried in an order drawn
    from rng and filtered by is_safe. A different rng state gives a different filling.

    Args:
        grid: 9x9 int array (0 = empty), modified in place.
        rng: Random generator for the digit order. Defaults to None (new default_rng).

    Returns:
        True if the grid was completed. False if the partial grid has no completion, in
        which case every cell this call touched is empty again.
    """
    if rng is None:
        rng = np.random.default_rng()
    cell = find_empty(grid)
    if cell is None:
        return True
    r, c = cell
    for d in rng.permutation(DIGITS):
        d = int(d)
        if is_safe(grid, r, c, d):
            grid[r, c] = d
            if fill(grid, rng):
                return True
            grid[r, c] = EMPTY
    return False


def generate_solved(
    rng: Optional[np.random.Generator] = None, seed: Optional[int] = None
) -> np.ndarray:
    """Generate a random complete 9x9 solution by filling an empty grid.

    Args:
        rng: Random generator. Defaults to None (built from seed).
        seed: Seed used when rng is None. Defaults to None.

    Returns:
        9x9 int64 array with every row, column and box holding 1..9.
    """
    if rng is None:
        rng = np.random.default_rng(seed)
    grid = empty_grid()
    # An empty board always has a completion, so fill cannot fail here.
    fill(grid, rng)
    return grid


def _most_constrained(grid: np.ndarray):
    """Pick the empty cell with the fewest safe digits (row-major tie break).

    Returns:
        None if the grid is full, else ((row, col), digits) with digits ascending
        (possibly empty, meaning a dead end).
    """
    mask = candidate_mask(grid)
    counts = mask.sum(axis=-1)
    counts[grid != EMPTY] = SIZE + 1
    flat = int(counts.argmin())
    r, c = divmod(flat, SIZE)
    if grid[r, c] != EMPTY:
        return None
    digits = [d for d in DIGITS if mask[r, c, d - 1]]
    return (r, c), digits


def _count(grid: np.ndarray, found: int, limit: int) -> int:
    """Add the completions of grid to found, stopping as soon as found reaches limit."""
    if found >= limit:
        return found
    choice = _most_constrained(grid)
    if choice is None:
        return found + 1
    (r, c), digits = choice
    for d in digits:
        grid[r, c] = d
        found = _count(grid, found, limit)
        grid[r, c] = EMPTY
        if found >= limit:
            break
    return found


def count_solutions(grid: np.ndarray, limit: int = UNIQUENESS_LIMIT) -> int:
    """Count completions of a (partial) grid, giving up once limit of them are found.

    Digits are tried in ascending order at the most constrained empty cell; that choice only
    affects speed. Every assignment is undone, so grid is unchanged when this returns. The
    count is carried through the recursion as a return value; nothing is shared between calls.

    Args:
        grid: 9x9 int array (0 = empty). Restored before returning.
        limit: Stop searching once this many solutions are found. Defaults to 2, which is
            all a uniqueness check needs.

    Returns:
        min(number of solutions, limit). A full valid grid counts 1; a grid that already
        breaks the row/column/box rule counts 0.

    Raises:
        ValueError: If limit < 1.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    if not is_valid_grid(grid):
        return 0
    return _count(grid, 0, limit)


def has_unique_solution(grid: np.ndarray) -> bool:
    """True iff grid has exactly one completion (checked on a copy)."""
    return count_solutions(np.array(grid, dtype=np.int64), UNIQUENESS_LIMIT) == 1
