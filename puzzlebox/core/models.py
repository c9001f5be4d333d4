"""Data models shared by the puzzle generators and solvers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import EMPTY, NO_CLUE, UNDECIDED, UNKNOWN_CELL, Operation, SolveStatus, Visibility

Cell = Tuple[int, int]
Grid = List[List[int]]
FrozenGrid = Tuple[Tuple[int, ...], ...]


def freeze_grid(grid: Optional[Iterable[Iterable[int]]]) -> Optional[FrozenGrid]:
    if grid is None:
        return None
    return tuple(tuple(int(v) for v in row) for row in grid)


def copy_grid(grid: Iterable[Iterable[int]]) -> Grid:
    return [list(row) for row in grid]


def filled_grid(height: int, width: int, value: int) -> Grid:
    return [[value] * width for _ in range(height)]


@dataclass(frozen=True)
class Cage:
    """A KenKen region: cells, an arithmetic operator and a target."""

    cells: Tuple[Cell, ...]
    op: Operation
    target: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", tuple((int(r), int(c)) for r, c in self.cells))
        object.__setattr__(self, "op", Operation(self.op))


@dataclass(frozen=True)
class KenKenPuzzle:
    size: int
    cages: Tuple[Cage, ...]
    solution: Optional[FrozenGrid] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "cages", tuple(self.cages))
        object.__setattr__(self, "solution", freeze_grid(self.solution))

    def empty_grid(self) -> Grid:
        return filled_grid(self.size, self.size, EMPTY)

    def without_solution(self) -> "KenKenPuzzle":
        return replace(self, solution=None)


@dataclass(frozen=True)
class NonogramPuzzle:
    rows: Tuple[Tuple[int, ...], ...]
    cols: Tuple[Tuple[int, ...], ...]
    solution: Optional[FrozenGrid] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "rows", tuple(tuple(int(v) for v in runs) for runs in self.rows))
        object.__setattr__(self, "cols", tuple(tuple(int(v) for v in runs) for runs in self.cols))
        object.__setattr__(self, "solution", freeze_grid(self.solution))

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.cols)

    def empty_grid(self) -> Grid:
        return filled_grid(self.height, self.width, UNKNOWN_CELL)

    def without_solution(self) -> "NonogramPuzzle":
        return replace(self, solution=None)


@dataclass(frozen=True)
class SkyscrapersPuzzle:
    size: int
    top: Tuple[int, ...]
    bottom: Tuple[int, ...]
    left: Tuple[int, ...]
    right: Tuple[int, ...]
    visibility: Visibility = Visibility.COUNT
    diagonals: bool = False
    solution: Optional[FrozenGrid] = None

    def __post_init__(self) -> None:
        for name in ("top", "bottom", "left", "right"):
            object.__setattr__(self, name, tuple(int(v) for v in getattr(self, name)))
        object.__setattr__(self, "visibility", Visibility(self.visibility))
        object.__setattr__(self, "solution", freeze_grid(self.solution))

    def empty_grid(self) -> Grid:
        return filled_grid(self.size, self.size, EMPTY)

    def without_solution(self) -> "SkyscrapersPuzzle":
        return replace(self, solution=None)


@dataclass(frozen=True)
class NurikabePuzzle:
    width: int
    height: int
    clues: FrozenGrid
    solution: Optional[FrozenGrid] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "clues", freeze_grid(self.clues))
        object.__setattr__(self, "solution", freeze_grid(self.solution))

    def clue_cells(self) -> List[Cell]:
        return [
            (r, c)
            for r in range(self.height)
            for c in range(self.width)
            if self.clues[r][c] != NO_CLUE
        ]

    def empty_grid(self) -> Grid:
        return filled_grid(self.height, self.width, UNDECIDED)

    def without_solution(self) -> "NurikabePuzzle":
        return replace(self, solution=None)


@dataclass
class SolveResult:
    """Outcome of one solve call. ``grid`` is a fresh copy owned by the caller."""

    status: SolveStatus
    grid: Optional[Grid] = None
    nodes: int = 0
    elapsed: float = 0.0

    @property
    def solved(self) -> bool:
        return self.status == SolveStatus.SOLVED


@dataclass
class ValidationResult:
    ok: bool
    violations: List[str] = field(default_factory=list)

    @classmethod
    def from_violations(cls, violations: Sequence[str]) -> "ValidationResult":
        return cls(ok=not violations, violations=list(violations))


@dataclass(frozen=True)
class Hint:
    id: str
    title: str
    body: Optional[str] = None


@dataclass(frozen=True)
class Explanation:
    step: str
    details: Optional[str] = None


def explain_from_hints(hints: Sequence[Hint]) -> Explanation:
    if not hints:
        return Explanation(step="No step", details="No obvious techniques available.")
    best = hints[0]
    return Explanation(step=best.title, details=best.body)
