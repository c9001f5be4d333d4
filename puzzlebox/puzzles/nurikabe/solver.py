"""Randomized depth-first Nurikabe solver.

Cells are decided nearest-clue first. Each node re-checks the board: no 2x2
sea, no island joining two clues or outgrowing its clue, and no region that
is already closed off (no undecided neighbour) in a state it can never leave,
such as an island whose size differs from its clue or a sea pocket cut off
from the rest of the sea.
"""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from ...core.constants import DEFAULT_SOLVE_TIMEOUT, ISLAND, SEA, UNDECIDED
from ...core.models import Cell, Grid, NurikabePuzzle, SolveResult, copy_grid
from ...core.random_source import XorShift32
from ...engine.regions import components, neighbors4, uniform_blocks
from ...engine.search import BacktrackingSearch, infeasible_result
from ...utils.logger import get_logger
from .validator import clues_in, shape_violations

LOGGER = get_logger(__name__)

DEFAULT_ISLAND_BIAS = 0.65


class NurikabeSearch(BacktrackingSearch):
    name = "nurikabe"

    def __init__(
        self,
        puzzle: NurikabePuzzle,
        marks: Grid,
        timeout: Optional[float],
        rng: random.Random,
        island_bias: float = DEFAULT_ISLAND_BIAS,
    ) -> None:
        super().__init__(timeout)
        self.puzzle = puzzle
        self.marks = copy_grid(marks)
        self.rng = rng
        self.island_bias = island_bias
        self.island_total = sum(puzzle.clues[r][c] for r, c in puzzle.clue_cells())
        self.order = self._cell_order()

    def _cell_order(self) -> List[Cell]:
        """Cells sorted by Manhattan distance to the nearest clue, row-major on ties."""

        clue_cells = self.puzzle.clue_cells()

        def distance(cell: Cell) -> float:
            if not clue_cells:
                return 0
            return min(abs(cell[0] - r) + abs(cell[1] - c) for r, c in clue_cells)

        cells = [(r, c) for r in range(self.puzzle.height) for c in range(self.puzzle.width)]
        return sorted(cells, key=lambda cell: (distance(cell), cell))

    def _closed(self, region: List[Cell]) -> bool:
        height, width = self.puzzle.height, self.puzzle.width
        return not any(
            self.marks[nr][nc] == UNDECIDED for r, c in region for nr, nc in neighbors4(r, c, height, width)
        )

    def consistent(self) -> bool:
        marks = self.marks
        if uniform_blocks(marks, SEA):
            return False
        if sum(row.count(ISLAND) for row in marks) > self.island_total:
            return False
        for island in components(marks, ISLAND):
            labels = clues_in(self.puzzle, island)
            if len(labels) > 1 or (labels and len(island) > labels[0]):
                return False
            if self._closed(island) and (not labels or len(island) != labels[0]):
                return False
        seas = components(marks, SEA)
        if len(seas) > 1 and any(self._closed(sea) for sea in seas):
            return False
        if not any(UNDECIDED in row for row in marks):
            return len(seas) == 1
        return True

    def _next_cell(self) -> Optional[Cell]:
        for r, c in self.order:
            if self.marks[r][c] == UNDECIDED:
                return r, c
        return None

    def _search(self) -> Optional[Grid]:
        if not self.consistent():
            return None
        cell = self._next_cell()
        if cell is None:
            return copy_grid(self.marks)
        self._expand()
        r, c = cell
        order: Tuple[int, int] = (ISLAND, SEA) if self.rng.random() < self.island_bias else (SEA, ISLAND)
        for value in order:
            self.marks[r][c] = value
            found = self._search()
            if found is not None:
                return found
        self.marks[r][c] = UNDECIDED
        return None


def solve(
    puzzle: NurikabePuzzle,
    grid: Optional[Grid] = None,
    timeout: Optional[float] = DEFAULT_SOLVE_TIMEOUT,
    seed: Optional[int] = None,
    island_bias: float = DEFAULT_ISLAND_BIAS,
) -> SolveResult:
    """Decide every cell as island or sea.

    ``seed`` makes the island/sea branch order reproducible through
    :class:`XorShift32`; without it the order comes from ``random.Random()``.
    Clue cells are always islands; a given sea mark on a clue is infeasible.
    """

    marks = copy_grid(grid) if grid is not None else puzzle.empty_grid()
    if shape_violations(puzzle, marks):
        return infeasible_result()
    for r, c in puzzle.clue_cells():
        if marks[r][c] == SEA:
            return infeasible_result()
        marks[r][c] = ISLAND
    rng = XorShift32(seed) if seed is not None else random.Random()
    result = NurikabeSearch(puzzle, marks, timeout, rng, island_bias).run()
    LOGGER.info(
        "Nurikabe %dx%d solve: %s (%d nodes)", puzzle.width, puzzle.height, result.status.value, result.nodes
    )
    return result
