import unittest
from unittest.mock import patch

from puzzlebox.core.constants import Difficulty, Operation, SolveStatus
from puzzlebox.core.exceptions import GenerationError, InvalidArgumentError
from puzzlebox.core.models import Cage, KenKenPuzzle, copy_grid
from puzzlebox.engine.latin import is_complete, is_latin
from puzzlebox.engine.regions import components
from puzzlebox.puzzles.kenken.generator import (
    KenKenConfig,
    choose_operation,
    generate_kenken,
    partition_cages,
)
from puzzlebox.puzzles.kenken.hints import cell_candidates, explain_step, get_hints
from puzzlebox.puzzles.kenken.solver import solve
from puzzlebox.puzzles.kenken.validator import cage_feasible, is_solved, validate_move

SOLUTION = [
    [1, 2, 3],
    [2, 3, 1],
    [3, 1, 2],
]


def small_puzzle() -> KenKenPuzzle:
    return KenKenPuzzle(
        size=3,
        cages=(
            Cage(cells=((0, 0), (0, 1)), op=Operation.ADD, target=3),
            Cage(cells=((0, 2), (1, 2)), op=Operation.SUB, target=2),
            Cage(cells=((1, 0), (2, 0)), op=Operation.MUL, target=6),
            Cage(cells=((1, 1), (2, 1)), op=Operation.DIV, target=3),
            Cage(cells=((2, 2),), op=Operation.ADD, target=2),
        ),
    )


def whole_grid_cage(target: int) -> KenKenPuzzle:
    cells = tuple((r, c) for r in range(4) for c in range(4))
    return KenKenPuzzle(size=4, cages=(Cage(cells=cells, op=Operation.ADD, target=target),))


def cage_is_connected(cells) -> bool:
    rows = max(r for r, _ in cells) + 1
    cols = max(c for _, c in cells) + 1
    mask = [[0] * cols for _ in range(rows)]
    for r, c in cells:
        mask[r][c] = 1
    return len(components(mask, 1)) == 1


class OperationChoiceTests(unittest.TestCase):
    def test_preferred_operation_wins_when_it_applies(self) -> None:
        self.assertEqual(choose_operation([3, 1], (Operation.SUB,)), (Operation.SUB, 2))
        self.assertEqual(choose_operation([4, 2], (Operation.DIV,)), (Operation.DIV, 2))
        self.assertEqual(choose_operation([2, 3], (Operation.MUL,)), (Operation.MUL, 6))

    def test_falls_back_to_addition(self) -> None:
        self.assertEqual(choose_operation([3, 2], (Operation.DIV,)), (Operation.ADD, 5))
        self.assertEqual(choose_operation([1, 2, 3], (Operation.SUB,)), (Operation.ADD, 6))


class KenKenGeneratorTests(unittest.TestCase):
    def test_generated_puzzle_is_consistent(self) -> None:
        for size in (3, 4, 5, 6):
            for difficulty in Difficulty:
                puzzle = generate_kenken(KenKenConfig(size=size, difficulty=difficulty, seed=size))
                solution = [list(row) for row in puzzle.solution]
                self.assertTrue(is_complete(solution, size))
                self.assertTrue(is_latin(solution))

                cells = sorted(cell for cage in puzzle.cages for cell in cage.cells)
                self.assertEqual(cells, [(r, c) for r in range(size) for c in range(size)])
                for cage in puzzle.cages:
                    self.assertTrue(cage_is_connected(cage.cells))
                    if cage.op in (Operation.SUB, Operation.DIV):
                        self.assertEqual(len(cage.cells), 2)
                self.assertTrue(is_solved(puzzle, solution))

    def test_same_seed_is_reproducible(self) -> None:
        first = generate_kenken(KenKenConfig(size=5, seed=11))
        second = generate_kenken(KenKenConfig(size=5, seed=11))
        self.assertEqual(first, second)

    def test_hard_cages_prefer_multiplication(self) -> None:
        puzzle = generate_kenken(KenKenConfig(size=5, difficulty=Difficulty.HARD, seed=2))
        self.assertTrue(all(cage.op == Operation.MUL for cage in puzzle.cages))

    def test_operator_override(self) -> None:
        puzzle = generate_kenken(KenKenConfig(size=4, seed=4, operators=[Operation.SUB]))
        for cage in puzzle.cages:
            expected = Operation.SUB if len(cage.cells) == 2 else Operation.ADD
            self.assertEqual(cage.op, expected)

    def test_partition_covers_grid(self) -> None:
        import random

        groups = partition_cages(6, 2.7, random.Random(3))
        cells = sorted(cell for group in groups for cell in group)
        self.assertEqual(len(cells), 36)
        self.assertEqual(len(set(cells)), 36)

    def test_rejects_bad_config(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            generate_kenken(KenKenConfig(size=2))
        with self.assertRaises(InvalidArgumentError):
            generate_kenken(KenKenConfig(size=10))
        with self.assertRaises(InvalidArgumentError):
            generate_kenken(KenKenConfig(size=4, difficulty="IMPOSSIBLE"))
        with self.assertRaises(InvalidArgumentError):
            generate_kenken(KenKenConfig(size=4, operators=["pow"]))

    def test_unique_generation(self) -> None:
        puzzle = generate_kenken(KenKenConfig(size=4, seed=5, ensure_unique=True))
        result = solve(puzzle.without_solution(), timeout=30)
        self.assertEqual(result.grid, [list(row) for row in puzzle.solution])

    def test_unique_generation_gives_up(self) -> None:
        whole_grid = [[(r, c) for r in range(3) for c in range(3)]]
        config = KenKenConfig(size=3, seed=1, ensure_unique=True, retry_limit=1)
        with patch("puzzlebox.puzzles.kenken.generator.partition_cages", return_value=whole_grid):
            with self.assertRaises(GenerationError):
                generate_kenken(config)


class KenKenValidatorTests(unittest.TestCase):
    def test_cage_bounds(self) -> None:
        self.assertTrue(cage_feasible(Operation.ADD, 10, [4], 2, 4))
        self.assertFalse(cage_feasible(Operation.ADD, 3, [3], 1, 4))
        self.assertFalse(cage_feasible(Operation.MUL, 12, [5], 1, 6))
        self.assertTrue(cage_feasible(Operation.SUB, 2, [2], 1, 4))
        self.assertFalse(cage_feasible(Operation.SUB, 3, [2], 1, 4))
        self.assertTrue(cage_feasible(Operation.DIV, 2, [2], 1, 4))
        self.assertFalse(cage_feasible(Operation.DIV, 2, [3], 1, 4))
        self.assertFalse(cage_feasible(Operation.SUB, 1, [], 3, 4))

    def test_validate_partial_grid(self) -> None:
        puzzle = small_puzzle()
        grid = puzzle.empty_grid()
        grid[0][0] = 1
        self.assertTrue(validate_move(puzzle, grid).ok)
        grid[0][0] = 3
        result = validate_move(puzzle, grid)
        self.assertFalse(result.ok)
        self.assertIn("Cage 1 cannot make 3 (add)", result.violations)

    def test_validate_reports_latin_breaks(self) -> None:
        puzzle = small_puzzle()
        grid = puzzle.empty_grid()
        grid[1][1] = 3
        grid[1][2] = 3
        self.assertIn("Row 2 repeats a value", validate_move(puzzle, grid).violations)

    def test_validate_does_not_touch_grid(self) -> None:
        puzzle = small_puzzle()
        grid = copy_grid(SOLUTION)
        grid[2][2] = 0
        before = copy_grid(grid)
        first = validate_move(puzzle, grid)
        second = validate_move(puzzle, grid)
        self.assertEqual(first, second)
        self.assertEqual(grid, before)

    def test_shape_errors(self) -> None:
        puzzle = small_puzzle()
        self.assertEqual(validate_move(puzzle, [[0, 0], [0, 0]]).violations, ["Grid must be 3x3"])
        grid = puzzle.empty_grid()
        grid[0][0] = 4
        self.assertFalse(validate_move(puzzle, grid).ok)

    def test_is_solved(self) -> None:
        puzzle = small_puzzle()
        self.assertTrue(is_solved(puzzle, SOLUTION))
        grid = copy_grid(SOLUTION)
        grid[2][2] = 0
        self.assertFalse(is_solved(puzzle, grid))


class KenKenSolverTests(unittest.TestCase):
    def test_solves_small_puzzle(self) -> None:
        result = solve(small_puzzle(), timeout=10)
        self.assertEqual(result.status, SolveStatus.SOLVED)
        self.assertEqual(result.grid, SOLUTION)

    def test_whole_grid_cage(self) -> None:
        result = solve(whole_grid_cage(40), timeout=30)
        self.assertEqual(result.status, SolveStatus.SOLVED)
        self.assertTrue(is_solved(whole_grid_cage(40), result.grid))

    def test_unreachable_whole_grid_cage(self) -> None:
        result = solve(whole_grid_cage(41), timeout=60)
        self.assertEqual(result.status, SolveStatus.INFEASIBLE)
        self.assertIsNone(result.grid)

    def test_row_cages(self) -> None:
        cages = tuple(
            Cage(cells=tuple((r, c) for c in range(4)), op=Operation.ADD, target=10) for r in range(4)
        )
        puzzle = KenKenPuzzle(size=4, cages=cages)
        result = solve(puzzle, timeout=10)
        self.assertEqual(result.status, SolveStatus.SOLVED)
        self.assertTrue(is_solved(puzzle, result.grid))

    def test_generated_round_trip(self) -> None:
        for size in (3, 4, 5):
            for seed in range(3):
                puzzle = generate_kenken(KenKenConfig(size=size, difficulty=Difficulty.MEDIUM, seed=seed))
                result = solve(puzzle.without_solution(), timeout=30)
                self.assertEqual(result.status, SolveStatus.SOLVED, (size, seed))
                self.assertTrue(is_solved(puzzle, result.grid))

    def test_zero_timeout(self) -> None:
        result = solve(small_puzzle(), timeout=0)
        self.assertEqual(result.status, SolveStatus.TIMED_OUT)
        self.assertIsNone(result.grid)

    def test_full_grid_needs_no_search(self) -> None:
        result = solve(small_puzzle(), copy_grid(SOLUTION), timeout=0)
        self.assertEqual(result.status, SolveStatus.SOLVED)
        self.assertEqual(result.nodes, 0)

    def test_inconsistent_givens(self) -> None:
        grid = small_puzzle().empty_grid()
        grid[0][0] = 2
        grid[0][1] = 2
        self.assertEqual(solve(small_puzzle(), grid).status, SolveStatus.INFEASIBLE)

    def test_cages_must_cover_grid(self) -> None:
        puzzle = KenKenPuzzle(size=3, cages=small_puzzle().cages[:-1])
        self.assertEqual(solve(puzzle).status, SolveStatus.INFEASIBLE)

    def test_input_grid_is_not_modified(self) -> None:
        grid = small_puzzle().empty_grid()
        grid[0][0] = 1
        before = copy_grid(grid)
        result = solve(small_puzzle(), grid, timeout=10)
        self.assertEqual(grid, before)
        self.assertEqual(result.grid, SOLUTION)


class KenKenHintTests(unittest.TestCase):
    def test_cage_completion_comes_first(self) -> None:
        grid = copy_grid(SOLUTION)
        grid[0][0] = 0
        hints = get_hints(small_puzzle(), grid)
        self.assertEqual(hints[0].id, "cage-0")
        self.assertEqual(hints[0].title, "Cage completion: R1C1 = 1")
        self.assertIn("single-0-0", [hint.id for hint in hints])

    def test_single_cell_cage_is_a_naked_single(self) -> None:
        puzzle = small_puzzle()
        hints = get_hints(puzzle, puzzle.empty_grid())
        self.assertEqual(hints[0].id, "single-2-2")
        self.assertEqual(explain_step(puzzle, puzzle.empty_grid()).step, "Naked single at R3C3")

    def test_candidates(self) -> None:
        puzzle = small_puzzle()
        grid = puzzle.empty_grid()
        self.assertEqual(cell_candidates(puzzle, grid, 1, 0), [2, 3])
        self.assertEqual(cell_candidates(puzzle, grid, 0, 2), [1, 3])

    def test_fallback_hint(self) -> None:
        puzzle = whole_grid_cage(40)
        hints = get_hints(puzzle, puzzle.empty_grid())
        self.assertEqual([hint.id for hint in hints], ["scan"])

    def test_hint_limit(self) -> None:
        puzzle = small_puzzle()
        grid = copy_grid(SOLUTION)
        for r in range(3):
            grid[r][r] = 0
        self.assertLessEqual(len(get_hints(puzzle, grid, limit=2)), 2)


if __name__ == "__main__":
    unittest.main()
