"""KenKen hints from naked singles and nearly finished cages, with a scanning fallback."""

from __future__ import annotations

from typing import Dict, List, Optional

from ...core.constants import EMPTY
from ...core.models import Cell, Explanation, Grid, Hint, KenKenPuzzle, explain_from_hints
from .validator import apply_operation, cage_feasible, cage_values, shape_violations


def _cage_index(puzzle: KenKenPuzzle) -> Dict[Cell, int]:
    index = {}
    for i, cage in enumerate(puzzle.cages):
        for cell in cage.cells:
            index[cell] = i
    return index


def cell_candidates(
    puzzle: KenKenPuzzle, grid: Grid, row: int, col: int, cage_of: Optional[Dict[Cell, int]] = None
) -> List[int]:
    """Values that keep the row, the column and the cell's cage satisfiable."""

    n = puzzle.size
    cage_of = cage_of if cage_of is not None else _cage_index(puzzle)
    used = set(grid[row]) | {grid[r][col] for r in range(n)}
    cage = puzzle.cages[cage_of[(row, col)]]
    placed = cage_values(cage, grid)
    missing = len(cage.cells) - len(placed) - 1
    return [
        v
        for v in range(1, n + 1)
        if v not in used and cage_feasible(cage.op, cage.target, placed + [v], missing, n)
    ]


def get_hints(puzzle: KenKenPuzzle, grid: Grid, limit: int = 5) -> List[Hint]:
    """Ranked hints: cage completions first, then naked singles, then a scan tip."""

    if shape_violations(puzzle, grid):
        return []
    hints: List[Hint] = []

    for index, cage in enumerate(puzzle.cages):
        empty = [(r, c) for r, c in cage.cells if grid[r][c] == EMPTY]
        if len(empty) != 1 or len(cage.cells) < 2:
            continue
        r, c = empty[0]
        placed = cage_values(cage, grid)
        forced = [
            v for v in range(1, puzzle.size + 1) if apply_operation(cage.op, placed + [v]) == cage.target
        ]
        if len(forced) == 1:
            hints.append(
                Hint(
                    id=f"cage-{index}",
                    title=f"Cage completion: R{r + 1}C{c + 1} = {forced[0]}",
                    body=f"Only {forced[0]} makes the cage reach {cage.target} ({cage.op.value}).",
                )
            )

    cage_of = _cage_index(puzzle)
    for r in range(puzzle.size):
        for c in range(puzzle.size):
            if grid[r][c] != EMPTY or (r, c) not in cage_of:
                continue
            values = cell_candidates(puzzle, grid, r, c, cage_of)
            if len(values) == 1:
                hints.append(
                    Hint(
                        id=f"single-{r}-{c}",
                        title=f"Naked single at R{r + 1}C{c + 1}",
                        body=f"Only {values[0]} fits the row, column and cage.",
                    )
                )

    if not hints:
        hints.append(
            Hint(
                id="scan",
                title="Scan cages",
                body="Look for small cages or cages with a single empty cell.",
            )
        )
    return hints[:limit]


def explain_step(puzzle: KenKenPuzzle, grid: Grid) -> Explanation:
    return explain_from_hints(get_hints(puzzle, grid, limit=1))
