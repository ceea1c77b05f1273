import json

import numpy as np
import pytest

from sudoku.board import find_conflicts, given_mask, is_complete, is_placement_valid
from sudoku.generator import Difficulty, dig, generate, generate_pair, generate_puzzles
from sudoku.grid import (
    candidate_mask,
    candidates,
    count_empty,
    empty_grid,
    format_grid,
    is_safe,
    is_solved_grid,
    is_valid_grid,
    parse_grid,
)
from sudoku.run import build_parser, generate_records, main as run_main
from sudoku.solver import count_solutions, fill, generate_solved, has_unique_solution

# Unit tests: safety check, fill, solution counting, digging/generation, board checks, CLI.

PUZZLE = parse_grid(
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)
SOLUTION = parse_grid(
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


def _is_subset_of(puzzle, solution):
    givens = puzzle != 0
    return np.array_equal(puzzle[givens], solution[givens])


def test_is_safe_row_conflict():
    grid = empty_grid()
    grid[4, 8] = 7
    assert not is_safe(grid, 4, 0, 7)
    assert is_safe(grid, 4, 0, 6)
    assert is_safe(grid, 5, 0, 7)


def test_is_safe_column_conflict():
    grid = empty_grid()
    grid[8, 2] = 3
    assert not is_safe(grid, 0, 2, 3)
    assert is_safe(grid, 0, 3, 3)


def test_is_safe_box_conflict():
    grid = empty_grid()
    grid[3, 5] = 9  # middle box, not sharing row or column with (4, 3)
    assert not is_safe(grid, 4, 3, 9)
    assert is_safe(grid, 4, 6, 9)  # same row band, next box over


def test_is_safe_does_not_exclude_own_value():
    grid = empty_grid()
    grid[0, 0] = 5
    assert not is_safe(grid, 0, 0, 5)


def test_is_safe_rejects_out_of_range():
    grid = empty_grid()
    with pytest.raises(ValueError):
        is_safe(grid, 9, 0, 1)
    with pytest.raises(ValueError):
        is_safe(grid, 0, -1, 1)
    with pytest.raises(ValueError):
        is_safe(grid, 0, 0, 0)
    with pytest.raises(ValueError):
        is_safe(grid, 0, 0, 10)


def test_candidate_mask_agrees_with_is_safe():
    mask = candidate_mask(PUZZLE)
    for r in range(9):
        for c in range(9):
            expected = candidates(PUZZLE, r, c)
            got = [d for d in range(1, 10) if mask[r, c, d - 1]]
            assert got == expected
            if PUZZLE[r, c] == 0:
                assert expected == [d for d in range(1, 10) if is_safe(PUZZLE, r, c, d)]


def test_fill_completes_empty_grid():
    for seed in range(3):
        grid = empty_grid()
        assert fill(grid, np.random.default_rng(seed))
        assert count_empty(grid) == 0
        assert is_solved_grid(grid)


def test_fill_is_deterministic_with_rng():
    a = generate_solved(seed=7)
    b = generate_solved(rng=np.random.default_rng(7))
    np.testing.assert_array_equal(a, b)
    c = generate_solved(seed=8)
    assert not np.array_equal(a, c)


def test_fill_keeps_existing_values():
    grid = PUZZLE.copy()
    assert fill(grid, np.random.default_rng(0))
    np.testing.assert_array_equal(grid, SOLUTION)  # unique puzzle, so the only completion


def test_fill_reports_unsolvable_and_restores():
    grid = empty_grid()
    grid[0, :8] = np.arange(1, 9)
    grid[1, 8] = 9  # (0, 8) can only be 9, which its column already has
    assert is_valid_grid(grid)
    before = grid.copy()
    assert not fill(grid, np.random.default_rng(0))
    np.testing.assert_array_equal(grid, before)


def test_count_solutions_full_grid_is_one_and_unchanged():
    grid = SOLUTION.copy()
    assert count_solutions(grid) == 1
    np.testing.assert_array_equal(grid, SOLUTION)


def test_count_solutions_unique_puzzle_restores_grid():
    grid = PUZZLE.copy()
    assert count_solutions(grid) == 1
    np.testing.assert_array_equal(grid, PUZZLE)


def test_count_solutions_single_hole():
    grid = SOLUTION.copy()
    grid[4, 4] = 0
    assert count_solutions(grid) == 1
    assert grid[4, 4] == 0


def test_count_solutions_stops_at_limit():
    grid = empty_grid()
    assert count_solutions(grid) == 2
    assert count_solutions(grid, limit=1) == 1
    assert count_solutions(grid, limit=4) == 4
    assert count_empty(grid) == 81


def test_count_solutions_invalid_grid_is_zero():
    grid = PUZZLE.copy()
    grid[0, 2] = 5  # row 0 already has a 5
    assert count_solutions(grid) == 0


def test_count_solutions_rejects_bad_limit():
    with pytest.raises(ValueError):
        count_solutions(PUZZLE.copy(), limit=0)


def test_has_unique_solution():
    assert has_unique_solution(PUZZLE)
    assert not has_unique_solution(empty_grid())


def test_difficulty_table():
    assert [d.empty_cells for d in Difficulty] == [40, 45, 50, 54]
    assert Difficulty.from_name("expert") is Difficulty.EXPERT
    assert Difficulty.from_name("Medium") is Difficulty.MEDIUM
    with pytest.raises(ValueError):
        Difficulty.from_name("nightmare")


def test_generate_easy_seeded():
    """Easy from a fixed seed: <= 40 empty, unique, givens consistent with one solution."""
    puzzle, solution = generate_pair(Difficulty.EASY, seed=42)
    assert puzzle.shape == (9, 9)
    assert count_empty(puzzle) <= 40
    assert is_solved_grid(solution)
    assert is_valid_grid(puzzle)
    assert _is_subset_of(puzzle, solution)
    assert count_solutions(puzzle.copy()) == 1
    solved = puzzle.copy()
    assert fill(solved, np.random.default_rng(0))
    np.testing.assert_array_equal(solved, solution)


def test_generate_is_deterministic_with_seed():
    np.testing.assert_array_equal(generate("easy", seed=3), generate(Difficulty.EASY, seed=3))


def test_generate_expert_allows_shortfall():
    """Expert asks for 54 empty cells; fewer is an accepted outcome, never an error."""
    puzzle, solution = generate_pair(Difficulty.EXPERT, seed=5)
    empty = count_empty(puzzle)
    assert 0 <= empty <= Difficulty.EXPERT.empty_cells
    assert has_unique_solution(puzzle)
    assert _is_subset_of(puzzle, solution)


def test_dig_past_uniqueness_returns_short_puzzle():
    solution = SOLUTION.copy()
    puzzle = dig(solution, 81, np.random.default_rng(1))
    np.testing.assert_array_equal(solution, SOLUTION)
    assert 0 < count_empty(puzzle) < 81  # at least 17 givens are needed for uniqueness
    assert has_unique_solution(puzzle)
    assert _is_subset_of(puzzle, SOLUTION)


def test_dig_zero_target_is_a_copy():
    puzzle = dig(SOLUTION, 0, np.random.default_rng(0))
    np.testing.assert_array_equal(puzzle, SOLUTION)
    assert puzzle is not SOLUTION


def test_dig_rejects_bad_target():
    with pytest.raises(ValueError):
        dig(SOLUTION, 82)
    with pytest.raises(ValueError):
        dig(SOLUTION, -1)


def test_generate_puzzles_pairs():
    pairs = generate_puzzles(2, "easy", seed=11)
    assert len(pairs) == 2
    for puzzle, solution in pairs:
        assert count_empty(puzzle) <= 40
        assert _is_subset_of(puzzle, solution)
    assert not np.array_equal(pairs[0][1], pairs[1][1])


def test_given_mask():
    mask = given_mask(PUZZLE)
    assert mask.sum() == 81 - count_empty(PUZZLE)
    assert mask[0, 0] and not mask[0, 2]


def test_is_placement_valid_skips_own_cell():
    assert is_placement_valid(SOLUTION, 0, 0, SOLUTION[0, 0])
    assert not is_placement_valid(SOLUTION, 0, 0, SOLUTION[0, 1])


def test_find_conflicts_marks_entries_only():
    board = PUZZLE.copy()
    board[0, 2] = 4  # legal entry
    board[1, 1] = 5  # 5 is a given at (0, 0), same box
    board[1, 2] = 5  # clashes with (1, 1) as well
    conflicts = find_conflicts(board, PUZZLE)
    assert conflicts[1, 1] and conflicts[1, 2]
    assert not conflicts[0, 2]
    assert not conflicts[0, 0]  # given cells are never marked
    assert conflicts.sum() == 2


def test_find_conflicts_rejects_changed_given():
    board = PUZZLE.copy()
    board[0, 0] = 1
    with pytest.raises(ValueError):
        find_conflicts(board, PUZZLE)


def test_is_complete():
    assert is_complete(SOLUTION, PUZZLE)
    assert not is_complete(PUZZLE, PUZZLE)
    wrong = SOLUTION.copy()
    wrong[0, 2], wrong[0, 3] = wrong[0, 3], wrong[0, 2]  # both are player cells in PUZZLE
    assert not is_complete(wrong, PUZZLE)


def test_format_and_parse_grid():
    line = format_grid(PUZZLE)
    assert len(line) == 81 and line.startswith("53..7....")
    np.testing.assert_array_equal(parse_grid(line), PUZZLE)
    pretty = format_grid(PUZZLE, pretty=True)
    assert len(pretty.splitlines()) == 11
    np.testing.assert_array_equal(parse_grid(pretty), PUZZLE)


def test_parse_grid_errors():
    with pytest.raises(ValueError):
        parse_grid("123")
    with pytest.raises(ValueError):
        parse_grid("x" * 81)


def test_run_writes_json(tmp_path, capsys):
    out = tmp_path / "out" / "puzzles.json"
    assert run_main(["--seed", "0", "--with-solution", "--out", str(out)]) is None
    assert "Puzzle 1/1 [Easy]" in capsys.readouterr().out
    with open(out) as f:
        saved = json.load(f)
    args = build_parser().parse_args(["--seed", "0", "--with-solution"])
    assert generate_records(args) == saved  # same seed, same puzzles
    rec = saved[0]
    assert rec["difficulty"] == "Easy" and rec["requested_empty"] == 40
    puzzle = np.array(rec["puzzle"])
    assert count_empty(puzzle) == rec["empty"] <= 40
    assert _is_subset_of(puzzle, np.array(rec["solution"]))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
