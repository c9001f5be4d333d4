"""Nurikabe rule checks over island/sea marks.

Marks are ``UNDECIDED`` (-1), ``SEA`` (0) or ``ISLAND`` (1). Island checks
look at the components formed by cells already marked island: such a
component may still grow, so before the grid is decided it is only rejected
when it joins two clues or outgrows its clue.
"""

from __future__ import annotations

from typing import List, Sequence

from ...core.constants import ISLAND, NO_CLUE, SEA, UNDECIDED
from ...core.models import Cell, Grid, NurikabePuzzle, ValidationResult
from ...engine.regions import components, count_cells, uniform_blocks


def clues_in(puzzle: NurikabePuzzle, cells: Sequence[Cell]) -> List[int]:
    return [puzzle.clues[r][c] for r, c in cells if puzzle.clues[r][c] != NO_CLUE]


def shape_violations(puzzle: NurikabePuzzle, marks: Sequence[Sequence[int]]) -> List[str]:
    if len(marks) != puzzle.height or any(len(row) != puzzle.width for row in marks):
        return [f"Grid must be {puzzle.width}x{puzzle.height}"]
    for r, row in enumerate(marks):
        for c, value in enumerate(row):
            if value not in (UNDECIDED, SEA, ISLAND):
                return [f"Invalid mark {value} at R{r + 1}C{c + 1}"]
    return []


def sea_violations(marks: Sequence[Sequence[int]]) -> List[str]:
    violations = [f"2x2 sea block at R{r + 1}C{c + 1}" for r, c in uniform_blocks(marks, SEA)]
    if count_cells(marks, UNDECIDED) == 0 and len(components(marks, SEA)) != 1:
        violations.append("Sea is not a single connected region")
    return violations


def island_violations(puzzle: NurikabePuzzle, marks: Sequence[Sequence[int]]) -> List[str]:
    violations: List[str] = []
    decided = count_cells(marks, UNDECIDED) == 0
    for r, c in puzzle.clue_cells():
        if marks[r][c] == SEA:
            violations.append(f"Clue at R{r + 1}C{c + 1} is marked as sea")
    for island in components(marks, ISLAND):
        labels = clues_in(puzzle, island)
        r, c = min(island)
        where = f"Island at R{r + 1}C{c + 1}"
        if len(labels) > 1:
            violations.append(f"{where} joins {len(labels)} clues")
        elif labels and len(island) > labels[0]:
            violations.append(f"{where} is larger than its clue {labels[0]}")
        elif decided and not labels:
            violations.append(f"{where} has no clue")
        elif decided and len(island) != labels[0]:
            violations.append(f"{where} has {len(island)} cells, expected {labels[0]}")
    return violations


def validate_move(puzzle: NurikabePuzzle, marks: Grid) -> ValidationResult:
    violations = shape_violations(puzzle, marks)
    if not violations:
        violations = sea_violations(marks) + island_violations(puzzle, marks)
    return ValidationResult.from_violations(violations)


def is_solved(puzzle: NurikabePuzzle, marks: Grid) -> bool:
    if shape_violations(puzzle, marks) or count_cells(marks, UNDECIDED):
        return False
    return not sea_violations(marks) and not island_violations(puzzle, marks)
