"""Orthogonal adjacency, flood fill and 2x2 block helpers for region puzzles."""

from __future__ import annotations

from collections import deque
from typing import Iterator, List, Sequence, Tuple

from ..core.constants import ORTHOGONAL_STEPS
from ..core.models import Cell


def neighbors4(row: int, col: int, height: int, width: int) -> Iterator[Cell]:
    for dr, dc in ORTHOGONAL_STEPS:
        nr, nc = row + dr, col + dc
        if 0 <= nr < height and 0 <= nc < width:
            yield nr, nc


def flood_fill(grid: Sequence[Sequence[int]], start: Cell, value: int, seen: List[List[bool]]) -> List[Cell]:
    """Collect the connected component of ``value`` cells containing ``start``."""

    height, width = len(grid), len(grid[0])
    component: List[Cell] = []
    queue = deque([start])
    seen[start[0]][start[1]] = True
    while queue:
        r, c = queue.popleft()
        component.append((r, c))
        for nr, nc in neighbors4(r, c, height, width):
            if seen[nr][nc] or grid[nr][nc] != value:
                continue
            seen[nr][nc] = True
            queue.append((nr, nc))
    return component


def components(grid: Sequence[Sequence[int]], value: int) -> List[List[Cell]]:
    """All maximal orthogonally connected components of ``value`` cells."""

    height = len(grid)
    width = len(grid[0]) if height else 0
    seen = [[False] * width for _ in range(height)]
    found: List[List[Cell]] = []
    for r in range(height):
        for c in range(width):
            if grid[r][c] == value and not seen[r][c]:
                found.append(flood_fill(grid, (r, c), value, seen))
    return found


def count_cells(grid: Sequence[Sequence[int]], value: int) -> int:
    return sum(row.count(value) for row in grid)


def is_connected(grid: Sequence[Sequence[int]], value: int) -> bool:
    """True when the ``value`` cells form exactly one component (and exist)."""

    return len(components(grid, value)) == 1


def uniform_blocks(grid: Sequence[Sequence[int]], value: int) -> List[Tuple[int, int]]:
    """Top-left corners of every 2x2 block whose four cells all equal ``value``."""

    blocks: List[Tuple[int, int]] = []
    for r in range(len(grid) - 1):
        for c in range(len(grid[0]) - 1):
            if (
                grid[r][c] == value
                and grid[r][c + 1] == value
                and grid[r + 1][c] == value
                and grid[r + 1][c + 1] == value
            ):
                blocks.append((r, c))
    return blocks


def would_complete_block(grid: Sequence[Sequence[int]], row: int, col: int, value: int) -> bool:
    """True if setting ``(row, col)`` to ``value`` completes a uniform 2x2 block."""

    height, width = len(grid), len(grid[0])
    for r0 in (row - 1, row):
        for c0 in (col - 1, col):
            if r0 < 0 or c0 < 0 or r0 + 1 >= height or c0 + 1 >= width:
                continue
            if all(
                (r, c) == (row, col) or grid[r][c] == value
                for r in (r0, r0 + 1)
                for c in (c0, c0 + 1)
            ):
                return True
    return False
