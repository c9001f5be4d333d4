"""Visibility rules for Skyscrapers edge clues.

A line is always read from the clue's edge inward: top clues read columns
top-down, bottom clues bottom-up, left clues read rows left to right and right
clues right to left. ``COUNT`` clues count the strict running maxima, ``SUM``
clues add their heights.
"""

from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

from ...core.constants import EMPTY, Visibility
from ...core.models import Grid, SkyscrapersPuzzle, ValidationResult
from ...engine.latin import column, has_duplicates, is_complete, latin_violations

EdgeLine = Tuple[str, int, int, List[int]]


def visible_heights(line: Sequence[int]) -> List[int]:
    tallest = 0
    seen: List[int] = []
    for height in line:
        if height > tallest:
            tallest = height
            seen.append(height)
    return seen


def visibility(line: Sequence[int], mode: Visibility) -> int:
    seen = visible_heights(line)
    return len(seen) if mode == Visibility.COUNT else sum(seen)


def line_feasible(line: Sequence[int], clue: int, mode: Visibility, n: int) -> bool:
    """Could a partially filled ``line`` still meet ``clue``?

    Only the filled prefix before the first empty cell is scored. Once the
    tallest building ``n`` is in that prefix nothing behind it is visible, so
    the score is final. Otherwise at least one more building will be seen
    (``n`` itself, in sum mode contributing ``n``), and at most one per
    remaining cell, each taller than the prefix maximum.
    """

    if clue <= 0:
        return True
    tallest = 0
    score = 0
    length = 0
    for height in line:
        if height == EMPTY:
            break
        length += 1
        if height > tallest:
            tallest = height
            score += 1 if mode == Visibility.COUNT else height
    if length == len(line) or tallest == n:
        return score == clue
    remaining = len(line) - length
    if mode == Visibility.COUNT:
        return score + 1 <= clue <= score + min(remaining, n - tallest)
    taller = list(range(n, tallest, -1))[:remaining]
    return score + n <= clue <= score + sum(taller)


def edge_lines(puzzle: SkyscrapersPuzzle, grid: Sequence[Sequence[int]]) -> Iterator[EdgeLine]:
    """Yield ``(edge, index, clue, line read from that edge)`` for every clue."""

    n = puzzle.size
    for c in range(n):
        col = column(grid, c)
        yield "top", c, puzzle.top[c], col
        yield "bottom", c, puzzle.bottom[c], col[::-1]
    for r in range(n):
        row = list(grid[r])
        yield "left", r, puzzle.left[r], row
        yield "right", r, puzzle.right[r], row[::-1]


def diagonals(grid: Sequence[Sequence[int]]) -> Tuple[List[int], List[int]]:
    n = len(grid)
    return [grid[i][i] for i in range(n)], [grid[i][n - 1 - i] for i in range(n)]


def shape_violations(puzzle: SkyscrapersPuzzle, grid: Sequence[Sequence[int]]) -> List[str]:
    n = puzzle.size
    if len(grid) != n or any(len(row) != n for row in grid):
        return [f"Grid must be {n}x{n}"]
    for name in ("top", "bottom", "left", "right"):
        if len(getattr(puzzle, name)) != n:
            return [f"Edge clue '{name}' must have {n} entries"]
    for r, row in enumerate(grid):
        for c, value in enumerate(row):
            if not 0 <= value <= n:
                return [f"Value {value} at R{r + 1}C{c + 1} is outside 1..{n}"]
    return []


def edge_violations(puzzle: SkyscrapersPuzzle, grid: Sequence[Sequence[int]]) -> List[str]:
    """Complete lines whose visibility differs from their clue; incomplete lines pass."""

    violations: List[str] = []
    for edge, index, clue, line in edge_lines(puzzle, grid):
        if clue <= 0 or EMPTY in line:
            continue
        seen = visibility(line, puzzle.visibility)
        if seen != clue:
            violations.append(f"{edge.capitalize()} clue {index + 1} expects {clue}, sees {seen}")
    return violations


def diagonal_violations(puzzle: SkyscrapersPuzzle, grid: Sequence[Sequence[int]]) -> List[str]:
    if not puzzle.diagonals:
        return []
    main, anti = diagonals(grid)
    violations = []
    if has_duplicates(main):
        violations.append("Main diagonal repeats a value")
    if has_duplicates(anti):
        violations.append("Anti-diagonal repeats a value")
    return violations


def validate_move(puzzle: SkyscrapersPuzzle, grid: Grid) -> ValidationResult:
    violations = shape_violations(puzzle, grid)
    if not violations:
        violations = (
            latin_violations(grid) + diagonal_violations(puzzle, grid) + edge_violations(puzzle, grid)
        )
    return ValidationResult.from_violations(violations)


def is_solved(puzzle: SkyscrapersPuzzle, grid: Grid) -> bool:
    if shape_violations(puzzle, grid) or not is_complete(grid, puzzle.size):
        return False
    return not (
        latin_violations(grid) or diagonal_violations(puzzle, grid) or edge_violations(puzzle, grid)
    )

