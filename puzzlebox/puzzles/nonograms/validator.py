"""Run extraction and Nonogram line checks."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Sequence, Tuple

from ...core.constants import CROSS, FILLED, UNKNOWN_CELL
from ...core.models import Grid, NonogramPuzzle, ValidationResult
from ...engine.latin import column

Runs = Tuple[int, ...]


def runs_of(line: Sequence[int]) -> Runs:
    """Lengths of consecutive filled cells in reading order; unknown and crossed cells break runs."""

    runs: List[int] = []
    current = 0
    for cell in line:
        if cell == FILLED:
            current += 1
        elif current:
            runs.append(current)
            current = 0
    if current:
        runs.append(current)
    return tuple(runs)


def line_fits(line: Sequence[int], runs: Sequence[int]) -> bool:
    """True when some placement of ``runs`` agrees with every filled and crossed cell of ``line``."""

    length = len(line)

    @lru_cache(maxsize=None)
    def fits(pos: int, index: int) -> bool:
        if index == len(runs):
            return FILLED not in line[pos:]
        run = runs[index]
        for start in range(pos, length - run + 1):
            if start > pos and line[start - 1] == FILLED:
                break
            end = start + run
            if CROSS in line[start:end] or (end < length and line[end] == FILLED):
                continue
            if fits(min(end + 1, length), index + 1):
                return True
        return False

    return fits(0, 0)


def line_problem(line: Sequence[int], expected: Sequence[int]) -> str:
    """Why a possibly partial line already contradicts its clue, or ``""``."""

    if UNKNOWN_CELL not in line:
        runs = runs_of(line)
        return "" if runs == tuple(expected) else f"reads {list(runs)} instead of {list(expected)}"
    if not line_fits(tuple(line), tuple(expected)):
        return f"no placement of {list(expected)} fits"
    return ""


def shape_violations(puzzle: NonogramPuzzle, grid: Sequence[Sequence[int]]) -> List[str]:
    if len(grid) != puzzle.height or any(len(row) != puzzle.width for row in grid):
        return [f"Grid must be {puzzle.width}x{puzzle.height}"]
    for r, row in enumerate(grid):
        for c, value in enumerate(row):
            if value not in (CROSS, UNKNOWN_CELL, FILLED):
                return [f"Invalid cell state {value} at R{r + 1}C{c + 1}"]
    return []


def validate_move(puzzle: NonogramPuzzle, grid: Grid) -> ValidationResult:
    violations = shape_violations(puzzle, grid)
    if violations:
        return ValidationResult.from_violations(violations)
    for r, expected in enumerate(puzzle.rows):
        problem = line_problem(grid[r], expected)
        if problem:
            violations.append(f"Row {r + 1}: {problem}")
    for c, expected in enumerate(puzzle.cols):
        problem = line_problem(column(grid, c), expected)
        if problem:
            violations.append(f"Column {c + 1}: {problem}")
    return ValidationResult.from_violations(violations)


def is_solved(puzzle: NonogramPuzzle, grid: Grid) -> bool:
    """Every row and column reads exactly its clue. Unknown cells count as empty."""

    if shape_violations(puzzle, grid):
        return False
    if any(runs_of(grid[r]) != expected for r, expected in enumerate(puzzle.rows)):
        return False
    return all(runs_of(column(grid, c)) == expected for c, expected in enumerate(puzzle.cols))
