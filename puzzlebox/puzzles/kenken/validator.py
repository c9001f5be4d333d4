"""KenKen rule checks usable on partial grids and inside the solver."""

from __future__ import annotations

from math import prod
from typing import List, Optional, Sequence

from ...core.constants import EMPTY, Operation
from ...core.models import Cage, Grid, KenKenPuzzle, ValidationResult
from ...engine.latin import is_complete, latin_violations


def apply_operation(op: Operation, values: Sequence[int]) -> Optional[int]:
    """Evaluate a cage operator, or ``None`` when it is undefined for ``values``."""

    if op == Operation.ADD:
        return sum(values)
    if op == Operation.MUL:
        return prod(values)
    if len(values) != 2:
        return None
    hi, lo = max(values), min(values)
    if op == Operation.SUB:
        return hi - lo
    if lo == 0 or hi % lo:
        return None
    return hi // lo


def cage_feasible(op: Operation, target: int, values: Sequence[int], missing: int, n: int) -> bool:
    """Can a cage with ``values`` placed and ``missing`` empty cells still reach ``target``?

    Bounds treat each missing cell as any value in ``1..n`` and ignore the
    Latin interaction between cells, so they may accept a hopeless branch but
    never reject a feasible one.
    """

    if missing == 0:
        return apply_operation(op, values) == target
    if op == Operation.ADD:
        total = sum(values)
        return total + missing <= target <= total + missing * n
    if op == Operation.MUL:
        product = prod(values)
        return target % product == 0 and target <= product * n ** missing
    if len(values) + missing != 2:
        return False
    if not values:
        return True
    (value,) = values
    return any(apply_operation(op, (value, other)) == target for other in range(1, n + 1))


def cage_values(cage: Cage, grid: Sequence[Sequence[int]]) -> List[int]:
    return [grid[r][c] for r, c in cage.cells if grid[r][c] != EMPTY]


def cage_violations(puzzle: KenKenPuzzle, grid: Sequence[Sequence[int]], allow_partial: bool = True) -> List[str]:
    violations: List[str] = []
    n = puzzle.size
    for index, cage in enumerate(puzzle.cages):
        values = cage_values(cage, grid)
        missing = len(cage.cells) - len(values)
        if missing and not allow_partial:
            violations.append(f"Cage {index + 1} is incomplete")
            continue
        if not values:
            continue
        if not cage_feasible(cage.op, cage.target, values, missing, n):
            violations.append(f"Cage {index + 1} cannot make {cage.target} ({cage.op.value})")
    return violations


def shape_violations(puzzle: KenKenPuzzle, grid: Sequence[Sequence[int]]) -> List[str]:
    n = puzzle.size
    if len(grid) != n or any(len(row) != n for row in grid):
        return [f"Grid must be {n}x{n}"]
    for r, row in enumerate(grid):
        for c, value in enumerate(row):
            if not 0 <= value <= n:
                return [f"Value {value} at R{r + 1}C{c + 1} is outside 1..{n}"]
    return []


def validate_move(puzzle: KenKenPuzzle, grid: Grid) -> ValidationResult:
    violations = shape_violations(puzzle, grid)
    if not violations:
        violations = latin_violations(grid) + cage_violations(puzzle, grid, allow_partial=True)
    return ValidationResult.from_violations(violations)


def is_solved(puzzle: KenKenPuzzle, grid: Grid) -> bool:
    if shape_violations(puzzle, grid) or not is_complete(grid, puzzle.size):
        return False
    return not latin_violations(grid) and not cage_violations(puzzle, grid, allow_partial=False)
