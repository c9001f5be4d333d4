"""Nonogram hints from finished and forced lines, then run overlaps."""

from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

from ...core.constants import FILLED, UNKNOWN_CELL
from ...core.models import Explanation, Grid, Hint, NonogramPuzzle, explain_from_hints
from ...engine.latin import column
from .validator import runs_of, shape_violations


def _lines(puzzle: NonogramPuzzle, grid: Grid) -> Iterator[Tuple[str, int, Sequence[int], Sequence[int]]]:
    for r, runs in enumerate(puzzle.rows):
        yield "Row", r, runs, grid[r]
    for c, runs in enumerate(puzzle.cols):
        yield "Column", c, runs, column(grid, c)


def overlap_cells(length: int, runs: Sequence[int]) -> List[int]:
    """Indices covered by a run however far left or right the runs are pushed."""

    free = length - (sum(runs) + len(runs) - 1)
    if free < 0:
        return []
    cells: List[int] = []
    earliest = 0
    for run in runs:
        cells.extend(range(earliest + free, earliest + run))
        earliest += run + 1
    return cells


def get_hints(puzzle: NonogramPuzzle, grid: Grid, limit: int = 5) -> List[Hint]:
    """Ranked hints: finished lines, forced lines, overlaps, then a progress note."""

    if shape_violations(puzzle, grid):
        return []
    complete: List[Hint] = []
    forced: List[Hint] = []
    overlaps: List[Hint] = []

    for kind, index, runs, line in _lines(puzzle, grid):
        label = f"{kind} {index + 1}"
        if UNKNOWN_CELL not in line:
            continue
        if runs_of(line) == tuple(runs):
            complete.append(
                Hint(
                    id=f"complete-{kind.lower()}-{index}",
                    title=f"{label} is complete",
                    body="Cross out the remaining cells.",
                )
            )
            continue
        needed = sum(runs) + len(runs) - 1 if runs else 0
        if not runs or needed == len(line):
            body = "Cross out every cell." if not runs else f"The clue {list(runs)} fills the whole line."
            forced.append(Hint(id=f"fill-{kind.lower()}-{index}", title=f"{label} is forced", body=body))
            continue
        unknown = [i for i, cell in enumerate(line) if cell == UNKNOWN_CELL]
        if sum(runs) == line.count(FILLED) + len(unknown):
            cells = ", ".join(str(i + 1) for i in unknown)
            forced.append(
                Hint(
                    id=f"fill-{kind.lower()}-{index}",
                    title=f"{label} is forced",
                    body=f"Only enough open cells remain for the clue: fill cells {cells}.",
                )
            )
            continue
        pending = [i for i in overlap_cells(len(line), runs) if line[i] != FILLED]
        if pending:
            overlaps.append(
                Hint(
                    id=f"overlap-{kind.lower()}-{index}",
                    title=f"Overlap in {label}",
                    body=f"Cells {', '.join(str(i + 1) for i in pending)} are covered by every placement.",
                )
            )

    hints = complete + forced + overlaps
    if not hints:
        filled = sum(row.count(FILLED) for row in grid)
        total = sum(sum(runs) for runs in puzzle.rows)
        hints.append(Hint(id="progress", title="Keep going", body=f"{filled} of {total} cells are filled."))
    return hints[:limit]


def explain_step(puzzle: NonogramPuzzle, grid: Grid) -> Explanation:
    return explain_from_hints(get_hints(puzzle, grid, limit=1))
