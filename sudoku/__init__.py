from sudoku.board import find_conflicts, given_mask, is_complete, is_placement_valid
from sudoku.generator import Difficulty, dig, generate, generate_pair, generate_puzzles
from sudoku.grid import empty_grid, format_grid, is_safe, is_valid_grid, parse_grid
from sudoku.solver import count_solutions, fill, generate_solved, has_unique_solution

# 9x9 Sudoku generation: randomized backtracking fill, uniqueness-preserving digging.
__all__ = [
    "Difficulty",
    "count_solutions",
    "dig",
    "empty_grid",
    "fill",
    "find_conflicts",
    "format_grid",
    "generate",
    "generate_pair",
    "generate_puzzles",
    "generate_solved",
    "given_mask",
    "has_unique_solution",
    "is_complete",
    "is_placement_valid",
    "is_safe",
    "is_valid_grid",
    "parse_grid",
]
