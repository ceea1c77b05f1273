import numpy as np

from sudoku.grid import BOX, EMPTY, SIZE, as_grid

# Checks on a board being played: given cells come from the puzzle, the rest are player entries.


def given_mask(puzzle: np.ndarray) -> np.ndarray:
    """Boolean 9x9 mask, True where the puzzle has a given (non-empty) cell."""
    return np.asarray(puzzle) != EMPTY


def is_placement_valid(board: np.ndarray, row: int, col: int, value: int) -> bool:
    """Check value at (row, col) against the rest of its row, column and box.

    Unlike grid.is_safe, the cell (row, col) itself is skipped, so this can check a value
    that is already on the board.
    """
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise ValueError(f"Position ({row}, {col}) is off the board")
    board = np.asarray(board)
    others = np.ones(SIZE, dtype=bool)
    others[col] = False
    if (board[row, others] == value).any():
        return False
    others = np.ones(SIZE, dtype=bool)
    others[row] = False
    if (board[others, col] == value).any():
        return False
    br, bc = row - row % BOX, col - col % BOX
    box = board[br : br + BOX, bc : bc + BOX].copy()
    box[row - br, col - bc] = EMPTY
    return not (box == value).any()


def _check_givens(board: np.ndarray, puzzle: np.ndarray) -> np.ndarray:
    givens = given_mask(puzzle)
    if not np.array_equal(board[givens], puzzle[givens]):
        raise ValueError("Board does not match the puzzle's given cells")
    return givens


def find_conflicts(board, puzzle) -> np.ndarray:
    """Mark player entries that break a row, column or box rule.

    Args:
        board: 9x9 board being played (0 = empty).
        puzzle: The 9x9 puzzle the board started from.

    Returns:
        Boolean 9x9 mask, True for each non-given, non-empty cell whose value repeats in its
        row, column or box. Given cells are never marked.

    Raises:
        ValueError: If a given cell of the board differs from the puzzle.
    """
    board = as_grid(board)
    puzzle = as_grid(puzzle)
    givens = _check_givens(board, puzzle)
    conflicts = np.zeros((SIZE, SIZE), dtype=bool)
    for r in range(SIZE):
        for c in range(SIZE):
            value = board[r, c]
            if givens[r, c] or value == EMPTY:
                continue
            conflicts[r, c] = not is_placement_valid(board, r, c, value)
    return conflicts


def is_complete(board, puzzle) -> bool:
    """True if every cell is filled and no player entry conflicts."""
    board = as_grid(board)
    if (board == EMPTY).any():
        _check_givens(board, as_grid(puzzle))
        return False
    return not find_conflicts(board, puzzle).any()
