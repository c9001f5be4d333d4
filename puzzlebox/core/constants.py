"""Shared constants and enumerations for the puzzle engines."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class Difficulty(str, Enum):
    """Puzzle difficulty levels."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class Operation(str, Enum):
    """KenKen cage operators."""

    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"


class Visibility(str, Enum):
    """How Skyscrapers edge clues are computed from a line of heights."""

    COUNT = "count"
    SUM = "sum"


class Density(str, Enum):
    """Fill density presets for random Nonogram solutions."""

    SPARSE = "sparse"
    NORMAL = "normal"
    DENSE = "dense"

    @property
    def probability(self) -> float:
        return DENSITY_PROBABILITY[self]


class SolveStatus(str, Enum):
    """Terminal states of a backtracking search."""

    SOLVED = "SOLVED"
    INFEASIBLE = "INFEASIBLE"
    TIMED_OUT = "TIMED_OUT"


DENSITY_PROBABILITY: Dict[Density, float] = {
    Density.SPARSE: 0.33,
    Density.NORMAL: 0.45,
    Density.DENSE: 0.58,
}

ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

# Wall-clock budget (seconds) used when callers do not pass one.
DEFAULT_SOLVE_TIMEOUT = 1.5

# Latin-style grids (KenKen, Skyscrapers)
EMPTY = 0

# Nonogram cell states
CROSS = -1
UNKNOWN_CELL = 0
FILLED = 1

# Nurikabe marks
UNDECIDED = -1
SEA = 0
ISLAND = 1
NO_CLUE = -1

