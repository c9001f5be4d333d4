"""Pretty-print helpers for puzzle grids."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..core.constants import CROSS, EMPTY, FILLED, ISLAND, NO_CLUE, SEA, UNDECIDED
from ..core.models import NurikabePuzzle

NONOGRAM_SYMBOLS: Dict[int, str] = {
    FILLED: "#",
    CROSS: "x",
}

NURIKABE_SYMBOLS: Dict[int, str] = {
    SEA: "~",
    ISLAND: "o",
    UNDECIDED: ".",
}


def _render_rows(rows: Sequence[Sequence[str]]) -> str:
    width = len(rows[0]) if rows else 0
    lines = ["    " + " ".join(f"{c:>2}" for c in range(width))]
    lines.append("    " + "-" * (3 * width - 1))
    for r, row in enumerate(rows):
        lines.append(f"{r:>2} | " + " ".join(f"{symbol:>2}" for symbol in row))
    return "\n".join(lines)


def format_grid(grid: Sequence[Sequence[int]], symbols: Optional[Dict[int, str]] = None, blank: int = EMPTY) -> str:
    """Render a grid with column/row headers. Unmapped values print as numbers."""

    symbols = symbols or {}
    rows = [[symbols.get(value, "." if value == blank else str(value)) for value in row] for row in grid]
    return _render_rows(rows)


def format_nurikabe(puzzle: NurikabePuzzle, marks: Optional[Sequence[Sequence[int]]] = None) -> str:
    """Clues over the marks: numbers where a clue sits, mark symbols elsewhere."""

    marks = marks if marks is not None else puzzle.empty_grid()
    merged: List[List[str]] = [
        [
            str(puzzle.clues[r][c]) if puzzle.clues[r][c] != NO_CLUE else NURIKABE_SYMBOLS[marks[r][c]]
            for c in range(puzzle.width)
        ]
        for r in range(puzzle.height)
    ]
    return _render_rows(merged)
