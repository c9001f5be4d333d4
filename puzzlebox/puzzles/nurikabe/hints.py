"""Nurikabe deductions ranked from the most local (neighbours of a 1) to the rule reminders."""

from __future__ import annotations

from typing import Dict, List, Set

from ...core.constants import ISLAND, SEA, UNDECIDED
from ...core.models import Cell, Explanation, Grid, Hint, NurikabePuzzle, explain_from_hints
from ...engine.regions import components, neighbors4
from .validator import clues_in, shape_violations

RULE_HINTS = (
    Hint(id="rule-separate", title="Keep clues apart", body="Two numbered cells never share an island."),
    Hint(id="rule-pools", title="No pools", body="The sea may never fill a 2x2 block."),
    Hint(id="rule-complete", title="Complete islands", body="Wall off an island once it reaches its size."),
)


def _cell(cell: Cell) -> str:
    return f"R{cell[0] + 1}C{cell[1] + 1}"


def get_hints(puzzle: NurikabePuzzle, marks: Grid, limit: int = 5) -> List[Hint]:
    """Ranked deductions about undecided cells, falling back to the rules summary."""

    if shape_violations(puzzle, marks):
        return []
    height, width = puzzle.height, puzzle.width
    hints: List[Hint] = []
    emitted: Set[Cell] = set()

    def sea_hint(cell: Cell, hint_id: str, title: str, body: str) -> None:
        if cell not in emitted:
            emitted.add(cell)
            hints.append(Hint(id=hint_id, title=title, body=body))

    for r, c in puzzle.clue_cells():
        if puzzle.clues[r][c] != 1:
            continue
        for nr, nc in neighbors4(r, c, height, width):
            if marks[nr][nc] == UNDECIDED:
                sea_hint(
                    (nr, nc),
                    f"one-{nr}-{nc}",
                    f"{_cell((nr, nc))} is sea",
                    f"The 1 at {_cell((r, c))} is a complete island.",
                )

    owner: Dict[Cell, int] = {}
    islands = components(marks, ISLAND)
    for index, island in enumerate(islands):
        labels = clues_in(puzzle, island)
        for cell in island:
            owner[cell] = index
        if len(labels) == 1 and len(island) == labels[0]:
            for r, c in island:
                for nr, nc in neighbors4(r, c, height, width):
                    if marks[nr][nc] == UNDECIDED:
                        sea_hint(
                            (nr, nc),
                            f"complete-{nr}-{nc}",
                            f"{_cell((nr, nc))} is sea",
                            f"The island at {_cell(min(island))} already has {labels[0]} cells.",
                        )

    for r in range(height):
        for c in range(width):
            if marks[r][c] != UNDECIDED:
                continue
            clued = {
                owner[cell]
                for cell in neighbors4(r, c, height, width)
                if cell in owner and clues_in(puzzle, islands[owner[cell]])
            }
            if len(clued) > 1:
                sea_hint((r, c), f"between-{r}-{c}", f"{_cell((r, c))} is sea", "It touches two numbered islands.")

    for r in range(height - 1):
        for c in range(width - 1):
            block = [(r, c), (r, c + 1), (r + 1, c), (r + 1, c + 1)]
            open_cells = [cell for cell in block if marks[cell[0]][cell[1]] == UNDECIDED]
            seas = [cell for cell in block if marks[cell[0]][cell[1]] == SEA]
            if len(seas) == 3 and len(open_cells) == 1 and open_cells[0] not in emitted:
                cell = open_cells[0]
                emitted.add(cell)
                hints.append(
                    Hint(
                        id=f"pool-{cell[0]}-{cell[1]}",
                        title=f"{_cell(cell)} is island",
                        body="Otherwise the sea forms a 2x2 pool.",
                    )
                )

    if not hints:
        hints.extend(RULE_HINTS)
    return hints[:limit]


def explain_step(puzzle: NurikabePuzzle, marks: Grid) -> Explanation:
    return explain_from_hints(get_hints(puzzle, marks, limit=1))
