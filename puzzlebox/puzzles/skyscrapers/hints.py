"""Skyscrapers hints built from the edge clues and the Latin candidates of each cell."""

from __future__ import annotations

from typing import List, Tuple

from ...core.constants import EMPTY, Visibility
from ...core.models import Cell, Explanation, Grid, Hint, SkyscrapersPuzzle, copy_grid, explain_from_hints
from .solver import candidates
from .validator import shape_violations


def _clue_cells(puzzle: SkyscrapersPuzzle) -> List[Tuple[str, int, int, List[Cell]]]:
    """Every non-zero clue with the cells it reads, nearest first."""

    n = puzzle.size
    found = []
    for i in range(n):
        found.append(("top", i, puzzle.top[i], [(r, i) for r in range(n)]))
        found.append(("bottom", i, puzzle.bottom[i], [(r, i) for r in reversed(range(n))]))
        found.append(("left", i, puzzle.left[i], [(i, c) for c in range(n)]))
        found.append(("right", i, puzzle.right[i], [(i, c) for c in reversed(range(n))]))
    return [entry for entry in found if entry[2] > 0]


def get_hints(puzzle: SkyscrapersPuzzle, grid: Grid, limit: int = 5) -> List[Hint]:
    """Ranked hints: edge-forced cells first, then naked singles, then a fallback."""

    if shape_violations(puzzle, grid):
        return []
    n = puzzle.size
    only_tallest = 1 if puzzle.visibility == Visibility.COUNT else n
    staircase = n if puzzle.visibility == Visibility.COUNT else n * (n + 1) // 2
    hints: List[Hint] = []

    for edge, index, clue, cells in _clue_cells(puzzle):
        if clue == only_tallest:
            r, c = cells[0]
            if grid[r][c] == EMPTY:
                hints.append(
                    Hint(
                        id=f"edge-{edge}-{index}",
                        title=f"{edge.capitalize()} clue {clue} puts {n} at R{r + 1}C{c + 1}",
                        body="Only the tallest building is visible, so it stands next to the clue.",
                    )
                )
        elif clue == staircase and any(grid[r][c] == EMPTY for r, c in cells):
            hints.append(
                Hint(
                    id=f"staircase-{edge}-{index}",
                    title=f"{edge.capitalize()} clue {clue} is a staircase",
                    body=f"Every building is visible, so heights rise 1..{n} away from the clue.",
                )
            )

    scratch = copy_grid(grid)
    for r in range(n):
        for c in range(n):
            if grid[r][c] != EMPTY:
                continue
            values = candidates(puzzle, scratch, r, c)
            if len(values) == 1:
                hints.append(
                    Hint(
                        id=f"single-{r}-{c}",
                        title=f"Naked single at R{r + 1}C{c + 1}",
                        body=f"Only {values[0]} fits the row, column and edge clues.",
                    )
                )

    if not hints:
        hints.append(
            Hint(
                id="scan",
                title="Scan the edges",
                body="High clues force low buildings near the edge; low clues force tall ones.",
            )
        )
    return hints[:limit]


def explain_step(puzzle: SkyscrapersPuzzle, grid: Grid) -> Explanation:
    return explain_from_hints(get_hints(puzzle, grid, limit=1))
