"""Backtracking KenKen solver with MRV cell choice and cage-aware pruning."""

from __future__ import annotations

from typing import List, Optional, Sequence, Set, Tuple

from ...core.constants import DEFAULT_SOLVE_TIMEOUT, EMPTY, Operation
from ...core.models import Cell, Grid, KenKenPuzzle, SolveResult, copy_grid
from ...engine.latin import latin_violations
from ...engine.search import BacktrackingSearch, infeasible_result
from ...utils.logger import get_logger
from .validator import apply_operation, cage_feasible, cage_violations, shape_violations

LOGGER = get_logger(__name__)


class KenKenSearch(BacktrackingSearch):
    name = "kenken"

    def __init__(self, puzzle: KenKenPuzzle, grid: Grid, timeout: Optional[float]) -> None:
        super().__init__(timeout)
        n = puzzle.size
        self.puzzle = puzzle
        self.n = n
        self.grid = copy_grid(grid)
        self.cage_of = [[-1] * n for _ in range(n)]
        for index, cage in enumerate(puzzle.cages):
            for r, c in cage.cells:
                self.cage_of[r][c] = index
        self.row_used: List[Set[int]] = [set() for _ in range(n)]
        self.col_used: List[Set[int]] = [set() for _ in range(n)]
        self.placed: List[List[int]] = [[] for _ in puzzle.cages]
        for r in range(n):
            for c in range(n):
                value = self.grid[r][c]
                if value != EMPTY:
                    self._place(r, c, value)

    def _place(self, r: int, c: int, value: int) -> None:
        self.grid[r][c] = value
        self.row_used[r].add(value)
        self.col_used[c].add(value)
        self.placed[self.cage_of[r][c]].append(value)

    def _clear(self, r: int, c: int, value: int) -> None:
        self.grid[r][c] = EMPTY
        self.row_used[r].discard(value)
        self.col_used[c].discard(value)
        self.placed[self.cage_of[r][c]].remove(value)

    def candidates(self, r: int, c: int) -> List[int]:
        index = self.cage_of[r][c]
        cage = self.puzzle.cages[index]
        placed = self.placed[index]
        missing = len(cage.cells) - len(placed) - 1
        values = [
            v
            for v in range(1, self.n + 1)
            if v not in self.row_used[r]
            and v not in self.col_used[c]
            and cage_feasible(cage.op, cage.target, placed + [v], missing, self.n)
        ]
        if cage.op in (Operation.ADD, Operation.MUL):
            values.sort(key=lambda v: abs(cage.target - apply_operation(cage.op, placed + [v])))
        return values

    def _select(self) -> Optional[Tuple[Cell, Sequence[int]]]:
        """Empty cell with the fewest candidates, or ``None`` when the grid is full."""

        best: Optional[Cell] = None
        best_values: Sequence[int] = ()
        for r in range(self.n):
            for c in range(self.n):
                if self.grid[r][c] != EMPTY:
                    continue
                values = self.candidates(r, c)
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
            self._place(r, c, value)
            found = self._search()
            if found is not None:
                return found
            self._clear(r, c, value)
        return None


def solve(
    puzzle: KenKenPuzzle,
    grid: Optional[Grid] = None,
    timeout: Optional[float] = DEFAULT_SOLVE_TIMEOUT,
) -> SolveResult:
    """Complete ``grid`` (or an empty grid) into a full KenKen solution.

    Given values are kept; inconsistent givens return ``INFEASIBLE`` without
    searching. Neither ``puzzle`` nor ``grid`` is modified.
    """

    start = grid if grid is not None else puzzle.empty_grid()
    if _inconsistent(puzzle, start):
        LOGGER.debug("KenKen givens are inconsistent")
        return infeasible_result()
    result = KenKenSearch(puzzle, start, timeout).run()
    LOGGER.info("KenKen %dx%d solve: %s (%d nodes)", puzzle.size, puzzle.size, result.status.value, result.nodes)
    return result


def _inconsistent(puzzle: KenKenPuzzle, grid: Grid) -> bool:
    if shape_violations(puzzle, grid):
        return True
    covered = sorted(cell for cage in puzzle.cages for cell in cage.cells)
    if covered != [(r, c) for r in range(puzzle.size) for c in range(puzzle.size)]:
        return True
    return bool(latin_violations(grid) or cage_violations(puzzle, grid, allow_partial=True))
