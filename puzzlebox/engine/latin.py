"""Latin square construction and validation shared by KenKen and Skyscrapers."""

from __future__ import annotations

import random
from typing import Iterable, List, Sequence

from ..core.constants import EMPTY
from ..core.exceptions import InvalidArgumentError
from ..core.models import Grid


def latin_square(n: int, rng: random.Random) -> Grid:
    """Build a random ``n x n`` Latin square.

    The cyclic square ``((c + r) mod n) + 1`` is Latin, and permuting whole
    rows or whole columns keeps it Latin, so the shuffles below never need a
    repair step.
    """

    if n < 1:
        raise InvalidArgumentError(f"Latin square size must be positive, got {n}")
    base = [[((c + r) % n) + 1 for c in range(n)] for r in range(n)]
    row_order = list(range(n))
    col_order = list(range(n))
    rng.shuffle(row_order)
    rng.shuffle(col_order)
    return [[base[ri][ci] for ci in col_order] for ri in row_order]


def column(grid: Sequence[Sequence[int]], index: int) -> List[int]:
    return [row[index] for row in grid]


def has_duplicates(values: Iterable[int], empty: int = EMPTY) -> bool:
    seen = set()
    for value in values:
        if value == empty:
            continue
        if value in seen:
            return True
        seen.add(value)
    return False


def latin_violations(grid: Sequence[Sequence[int]]) -> List[str]:
    """Describe every row or column holding a repeated non-empty value."""

    violations: List[str] = []
    n = len(grid)
    for r in range(n):
        if has_duplicates(grid[r]):
            violations.append(f"Row {r + 1} repeats a value")
    for c in range(len(grid[0]) if n else 0):
        if has_duplicates(column(grid, c)):
            violations.append(f"Column {c + 1} repeats a value")
    return violations


def is_latin(grid: Sequence[Sequence[int]]) -> bool:
    """True when no row or column repeats a non-empty value (partial grids allowed)."""

    return not latin_violations(grid)


def is_complete(grid: Sequence[Sequence[int]], n: int) -> bool:
    return len(grid) == n and all(len(row) == n and all(1 <= v <= n for v in row) for row in grid)
