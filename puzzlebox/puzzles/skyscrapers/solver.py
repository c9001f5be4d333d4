"""Backtracking Skyscrapers solver (MRV, Latin sets, edge prefix bounds)."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ...core.constants import DEFAULT_SOLVE_TIMEOUT, EMPTY
from ...core.models import Cell, Grid, SkyscrapersPuzzle, SolveResult, copy_grid
from ...engine.latin import column, latin_violations
from ...engine.search import BacktrackingSearch, infeasible_result, solved_result
from ...utils.logger import get_logger
from .validator import diagonal_violations, edge_lines, line_feasible, shape_violations

LOGGER = get_logger(__name__)


def lines_feasible(puzzle: SkyscrapersPuzzle, grid: Sequence[Sequence[int]], row: int, col: int) -> bool:
    """Check the four clues that read through ``(row, col)``."""

    n, mode = puzzle.size, puzzle.visibility
    across = list(grid[row])
    down = column(grid, col)
    return (
        line_feasible(across, puzzle.left[row], mode, n)
        and line_feasible(across[::-1], puzzle.right[row], mode, n)
        and line_feasible(down, puzzle.top[col], mode, n)
        and line_feasible(down[::-1], puzzle.bottom[col], mode, n)
    )


def candidates(puzzle: SkyscrapersPuzzle, grid: Grid, row: int, col: int) -> List[int]:
    """Heights that keep the row, column, diagonals and edge clues satisfiable.

    ``grid`` is restored before returning.
    """

    n = puzzle.size
    used = set(grid[row]) | set(column(grid, col))
    if puzzle.diagonals:
        if row == col:
            used |= {grid[i][i] for i in range(n)}
        if row + col == n - 1:
            used |= {grid[i][n - 1 - i] for i in range(n)}
    values = []
    for value in range(1, n + 1):
        if value in used:
            continue
        grid[row][col] = value
        if lines_feasible(puzzle, grid, row, col):
            values.append(value)
    grid[row][col] = EMPTY
    return values


class SkyscrapersSearch(BacktrackingSearch):
    name = "skyscrapers"

    def __init__(self, puzzle: SkyscrapersPuzzle, grid: Grid, timeout: Optional[float]) -> None:
        super().__init__(timeout)
        self.puzzle = puzzle
        self.grid = copy_grid(grid)

    def _select(self) -> Optional[Tuple[Cell, List[int]]]:
        best: Optional[Cell] = None
        best_values: List[int] = []
        n = self.puzzle.size
        for r in range(n):
            for c in range(n):
                if self.grid[r][c] != EMPTY:
                    continue
                values = candidates(self.puzzle, self.grid, r, c)
                if best is None or len(values) < len(best_values):
                    best, best_values = (r, c), values
                    if len(values) <= 1:
                        return best, best_values
        if best is None:
            return None
        return best, best_values

    def _search(self) -> Optional[Grid]:
        selected = self._select()
        if selected is None:
            return copy_grid(self.grid)
        (r, c), values = selected
        self._expand()
        for value in values:
            self.grid[r][c] = value
            found = self._search()
            if found is not None:
                return found
        self.grid[r][c] = EMPTY
        return None


def _givens_consistent(puzzle: SkyscrapersPuzzle, grid: Grid) -> bool:
    if shape_violations(puzzle, grid) or latin_violations(grid) or diagonal_violations(puzzle, grid):
        return False
    return all(
        line_feasible(line, clue, puzzle.visibility, puzzle.size)
        for _, _, clue, line in edge_lines(puzzle, grid)
    )


def _agrees_with_solution(puzzle: SkyscrapersPuzzle, grid: Grid) -> bool:
    return all(
        value in (EMPTY, puzzle.solution[r][c]) for r, row in enumerate(grid) for c, value in enumerate(row)
    )


def solve(
    puzzle: SkyscrapersPuzzle,
    grid: Optional[Grid] = None,
    timeout: Optional[float] = DEFAULT_SOLVE_TIMEOUT,
    use_solution: bool = True,
) -> SolveResult:
    """Complete ``grid`` into heights matching every edge clue.

    An attached solution that agrees with the givens is returned directly
    unless ``use_solution`` is false.
    """

    start = copy_grid(grid) if grid is not None else puzzle.empty_grid()
    if not _givens_consistent(puzzle, start):
        LOGGER.debug("Skyscrapers givens are inconsistent")
        return infeasible_result()
    if use_solution and puzzle.solution is not None and _agrees_with_solution(puzzle, start):
        LOGGER.debug("Skyscrapers solve short-circuited to the stored solution")
        return solved_result(puzzle.solution)
    result = SkyscrapersSearch(puzzle, start, timeout).run()
    LOGGER.info(
        "Skyscrapers %dx%d solve: %s (%d nodes)", puzzle.size, puzzle.size, result.status.value, result.nodes
    )
    return result
