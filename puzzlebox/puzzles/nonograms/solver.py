"""Row-by-row Nonogram search over enumerated line patterns.

Every row and column clue is expanded into the full list of 0/1 lines that
satisfy it. The search assigns whole rows, always picking the row with the
fewest patterns still compatible with the surviving column patterns, and
filters each column's list down to the patterns that agree with the row.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from ...core.constants import CROSS, DEFAULT_SOLVE_TIMEOUT, FILLED, UNKNOWN_CELL
from ...core.models import Grid, NonogramPuzzle, SolveResult, copy_grid
from ...engine.latin import column
from ...engine.search import BacktrackingSearch, infeasible_result, solved_result
from ...utils.logger import get_logger
from .validator import shape_violations

LOGGER = get_logger(__name__)

Pattern = Tuple[int, ...]


def _fits(value: int, state: int) -> bool:
    if state == FILLED:
        return value == FILLED
    if state == CROSS:
        return value != FILLED
    return True


def matches_givens(pattern: Pattern, given: Sequence[int]) -> bool:
    return all(_fits(value, state) for value, state in zip(pattern, given))


def line_patterns(
    length: int,
    runs: Sequence[int],
    given: Optional[Sequence[int]] = None,
    check: Optional[Callable[[], None]] = None,
) -> List[Pattern]:
    """All 0/1 lines of ``length`` whose runs are exactly ``runs``.

    The free space ``length - (sum(runs) + len(runs) - 1)`` is distributed
    over the gaps, leading gap first. Placements that contradict a filled or
    crossed cell of ``given`` are cut as soon as they are laid down, and
    ``check`` (when set) runs before every placement step so a caller can
    abort a long enumeration.
    """

    given = given if given is not None else (UNKNOWN_CELL,) * length
    if not runs:
        blank = (0,) * length
        return [blank] if matches_givens(blank, given) else []
    free = length - (sum(runs) + len(runs) - 1)
    if free < 0:
        return []
    patterns: List[Pattern] = []

    def place(index: int, prefix: List[int], slack: int) -> None:
        if check is not None:
            check()
        start = len(prefix)
        if index == len(runs):
            if all(_fits(0, state) for state in given[start:]):
                patterns.append(tuple(prefix + [0] * (length - start)))
            return
        for gap in range(slack + 1):
            segment = [0] * gap + [FILLED] * runs[index]
            if index < len(runs) - 1:
                segment.append(0)
            if all(_fits(value, given[start + i]) for i, value in enumerate(segment)):
                place(index + 1, prefix + segment, slack - gap)

    place(0, [], free)
    return patterns


class NonogramSearch(BacktrackingSearch):
    name = "nonogram"

    def __init__(self, puzzle: NonogramPuzzle, grid: Grid, timeout: Optional[float]) -> None:
        super().__init__(timeout)
        self.puzzle = puzzle
        self.grid = grid
        self.row_patterns: List[List[Pattern]] = []
        self.assigned: List[Optional[Pattern]] = [None] * puzzle.height

    def _search(self) -> Optional[Grid]:
        check = self.deadline.check
        self.row_patterns = [
            line_patterns(self.puzzle.width, runs, self.grid[r], check) for r, runs in enumerate(self.puzzle.rows)
        ]
        col_patterns = [
            line_patterns(self.puzzle.height, runs, column(self.grid, c), check)
            for c, runs in enumerate(self.puzzle.cols)
        ]
        if any(not patterns for patterns in self.row_patterns + col_patterns):
            return None
        return self._assign(col_patterns)

    def _assign(self, col_patterns: List[List[Pattern]]) -> Optional[Grid]:
        open_rows = [r for r in range(self.puzzle.height) if self.assigned[r] is None]
        if not open_rows:
            return [list(pattern) for pattern in self.assigned]

        best_row = -1
        best: List[Pattern] = []
        for r in open_rows:
            allowed = [{p[r] for p in patterns} for patterns in col_patterns]
            options = [p for p in self.row_patterns[r] if all(v in allowed[c] for c, v in enumerate(p))]
            if best_row < 0 or len(options) < len(best):
                best_row, best = r, options
                if len(options) <= 1:
                    break
        if not best:
            return None

        self._expand()
        for pattern in best:
            narrowed = []
            for c, patterns in enumerate(col_patterns):
                keep = [p for p in patterns if p[best_row] == pattern[c]]
                if not keep:
                    break
                narrowed.append(keep)
            else:
                self.assigned[best_row] = pattern
                found = self._assign(narrowed)
                if found is not None:
                    return found
                self.assigned[best_row] = None
        return None


def _agrees_with_solution(puzzle: NonogramPuzzle, grid: Grid) -> bool:
    for given_row, solution_row in zip(grid, puzzle.solution):
        if not matches_givens(solution_row, given_row):
            return False
    return True


def solve(
    puzzle: NonogramPuzzle,
    grid: Optional[Grid] = None,
    timeout: Optional[float] = DEFAULT_SOLVE_TIMEOUT,
    use_solution: bool = True,
) -> SolveResult:
    """Find a 0/1 picture matching every clue and the filled/crossed cells of ``grid``.

    When the puzzle carries its solution and ``grid`` does not contradict
    it, the stored solution is returned without searching unless
    ``use_solution`` is false.
    """

    start = copy_grid(grid) if grid is not None else puzzle.empty_grid()
    if shape_violations(puzzle, start):
        return infeasible_result()
    if use_solution and puzzle.solution is not None and _agrees_with_solution(puzzle, start):
        LOGGER.debug("Nonogram solve short-circuited to the stored solution")
        return solved_result(puzzle.solution)
    result = NonogramSearch(puzzle, start, timeout).run()
    LOGGER.info(
        "Nonogram %dx%d solve: %s (%d nodes)", puzzle.width, puzzle.height, result.status.value, result.nodes
    )
    return result
