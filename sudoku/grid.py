from typing import List, Tuple

import numpy as np

# 9x9 Sudoku: grid representation, safety check, candidates, validity, text format. 0 = empty.
SIZE = 9
BOX = 3
EMPTY = 0
DIGITS = tuple(range(1, SIZE + 1))

Position = Tuple[int, int]
ALL_POSITIONS: List[Position] = [(r, c) for r in range(SIZE) for c in range(SIZE)]

_SEPARATORS = "|-+"


def empty_grid() -> np.ndarray:
    """Return an all-empty 9x9 grid (int64 zeros)."""
    return np.zeros((SIZE, SIZE), dtype=np.int64)


def as_grid(values) -> np.ndarray:
    """Copy a 9x9 nested sequence or array into a fresh int64 grid.

    Args:
        values: Anything np.asarray understands with shape (9, 9) and entries in 0..9.

    Returns:
        New (9, 9) int64 array; the input is never aliased.

    Raises:
        ValueError: If the shape is not (9, 9) or a value is outside 0..9.
    """
    grid = np.array(values, dtype=np.int64)
    if grid.shape != (SIZE, SIZE):
        raise ValueError(f"Grid must be {SIZE}x{SIZE}, got shape {grid.shape}")
    if grid.min() < EMPTY or grid.max() > SIZE:
        raise ValueError(f"Grid values must be in 0..{SIZE}")
    return grid


def _check_cell(row: int, col: int) -> None:
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise ValueError(f"Position ({row}, {col}) is off the board")


def _check_digit(digit: int) -> None:
    if not 1 <= digit <= SIZE:
        raise ValueError(f"Digit must be in 1..{SIZE}, got {digit}")


def is_safe(grid: np.ndarray, row: int, col: int, digit: int) -> bool:
    """Check whether digit can go at (row, col) without a row, column or box repeat.

    The cell's own current value is not excluded, so callers use this on empty cells
    (or cells about to be overwritten).

    Args:
        grid: 9x9 array (0 = empty).
        row: Row index 0..8.
        col: Column index 0..8.
        digit: Candidate digit 1..9.

    Returns:
        False if digit already appears in the row, column or 3x3 box; True otherwise.

    Raises:
        ValueError: If the position or digit is out of range.
    """
    _check_cell(row, col)
    _check_digit(digit)
    if (grid[row, :] == digit).any():
        return False
    if (grid[:, col] == digit).any():
        return False
    br, bc = row - row % BOX, col - col % BOX
    return not (grid[br : br + BOX, bc : bc + BOX] == digit).any()


def candidates(grid: np.ndarray, row: int, col: int) -> List[int]:
    """Return the digits (ascending) that are safe at an empty cell; [] if the cell is filled."""
    _check_cell(row, col)
    if grid[row, col] != EMPTY:
        return []
    return [d for d in DIGITS if is_safe(grid, row, col, d)]


def candidate_mask(grid: np.ndarray) -> np.ndarray:
    """Vectorized is_safe over the whole board.

    Args:
        grid: 9x9 array (0 = empty).

    Returns:
        Boolean array of shape (9, 9, 9); mask[r, c, d - 1] is True iff (r, c) is empty and
        digit d is safe there.
    """
    onehot = np.eye(SIZE + 1, dtype=bool)[grid][..., 1:]  # (9, 9, 9), drop the "empty" slot
    row_used = onehot.any(axis=1)  # (9, 9): row x digit
    col_used = onehot.any(axis=0)  # (9, 9): col x digit
    box_used = onehot.reshape(BOX, BOX, BOX, BOX, SIZE).any(axis=(1, 3))  # (3, 3, 9)
    box_used = box_used.repeat(BOX, axis=0).repeat(BOX, axis=1)  # back to (9, 9, 9)
    used = row_used[:, None, :] | col_used[None, :, :] | box_used
    return ~used & (grid == EMPTY)[..., None]


def find_empty(grid: np.ndarray):
    """Return the first empty (row, col) in row-major order, or None if the grid is full."""
    rows, cols = np.nonzero(grid == EMPTY)
    if len(rows) == 0:
        return None
    return int(rows[0]), int(cols[0])


def count_empty(grid: np.ndarray) -> int:
    return int((np.asarray(grid) == EMPTY).sum())


def _valid_unit(arr: np.ndarray) -> bool:
    """Unit (row/col/box) has no repeated digit among its non-empty cells."""
    vals = arr.ravel()
    vals = vals[vals != EMPTY]
    return len(vals) == len(np.unique(vals))


def is_valid_grid(grid: np.ndarray) -> bool:
    """Check the no-repeat invariant over non-empty cells (partial grids allowed).

    Args:
        grid: 9x9 array with values in 0..9.

    Returns:
        True if no digit repeats in any row, column or 3x3 box; False otherwise
        (including a wrong shape).
    """
    grid = np.asarray(grid)
    if grid.shape != (SIZE, SIZE):
        return False
    if grid.min() < EMPTY or grid.max() > SIZE:
        return False
    for i in range(SIZE):
        if not _valid_unit(grid[i, :]) or not _valid_unit(grid[:, i]):
            return False
    for br in range(0, SIZE, BOX):
        for bc in range(0, SIZE, BOX):
            if not _valid_unit(grid[br : br + BOX, bc : bc + BOX]):
                return False
    return True


def is_solved_grid(grid: np.ndarray) -> bool:
    """True if the grid is full and valid."""
    return is_valid_grid(grid) and count_empty(grid) == 0


def format_grid(grid: np.ndarray, pretty: bool = False) -> str:
    """Render a grid as text.

    Args:
        grid: 9x9 array (0 = empty).
        pretty: If True, a 9-line board with box separators; otherwise one 81-char line.
            Defaults to False.

    Returns:
        The text, with "." for empty cells.
    """
    cells = ["." if v == EMPTY else str(int(v)) for v in np.asarray(grid).ravel()]
    if not pretty:
        return "".join(cells)
    lines = []
    for r in range(SIZE):
        if r and r % BOX == 0:
            lines.append("------+-------+------")
        row = cells[r * SIZE : (r + 1) * SIZE]
        chunks = [" ".join(row[i : i + BOX]) for i in range(0, SIZE, BOX)]
        lines.append(" | ".join(chunks))
    return "\n".join(lines)


def parse_grid(text: str) -> np.ndarray:
    """Parse 81 cells ("1"-"9", "0" or "." for empty), ignoring whitespace and box separators.

    Accepts both the one-line and the pretty output of format_grid.

    Raises:
        ValueError: If an unexpected character appears or the cell count is not 81.
    """
    values: List[int] = []
    for ch in text:
        if ch.isspace() or ch in _SEPARATORS:
            continue
        if ch == ".":
            values.append(EMPTY)
        elif ch.isdigit():
            values.append(int(ch))
        else:
            raise ValueError(f"Unexpected character {ch!r} in grid text")
    if len(values) != SIZE * SIZE:
        raise ValueError(f"Expected {SIZE * SIZE} cells, got {len(values)}")
    return as_grid(np.array(values).reshape(SIZE, SIZE))


def grid_to_rows(grid: np.ndarray) -> List[List[int]]:
    """Plain nested lists of ints (for JSON)."""
    return [[int(v) for v in row] for row in np.asarray(grid)]
