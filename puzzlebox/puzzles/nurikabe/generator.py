"""Nurikabe generation by carving a connected sea out of an all-island board.

The sea starts at one random cell and grows through a random frontier,
skipping any cell that would complete a 2x2 sea block. Whatever is left
forms the islands; each island is labelled at one random cell with its size.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ...core.constants import ISLAND, NO_CLUE, SEA
from ...core.exceptions import GenerationError, InvalidArgumentError
from ...core.models import Grid, NurikabePuzzle, filled_grid
from ...engine.regions import components, is_connected, neighbors4, would_complete_block
from ...utils.logger import get_logger

LOGGER = get_logger(__name__)

MIN_DIMENSION = 2
MAX_DIMENSION = 30
MIN_ISLAND_RATIO = 0.2
MAX_ISLAND_RATIO = 0.8

SIZE_PRESETS: Dict[str, Tuple[int, int]] = {
    "5x5": (5, 5),
    "7x7": (7, 7),
    "10x10": (10, 10),
    "12x12": (12, 12),
    "15x15": (15, 15),
}


@dataclass
class NurikabeConfig:
    width: int = 7
    height: int = 7
    island_ratio: float = 0.55
    seed: Optional[int] = None
    max_attempts: int = 40

    @classmethod
    def from_size(cls, size: str, **kwargs) -> "NurikabeConfig":
        if size in SIZE_PRESETS:
            width, height = SIZE_PRESETS[size]
        else:
            try:
                width, height = (int(part) for part in size.lower().split("x"))
            except ValueError as exc:
                raise InvalidArgumentError(f"Size must look like WxH, got {size!r}") from exc
        return cls(width=width, height=height, **kwargs)

    def validate(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not MIN_DIMENSION <= value <= MAX_DIMENSION:
                raise InvalidArgumentError(
                    f"Nurikabe {name} must be between {MIN_DIMENSION} and {MAX_DIMENSION}, got {value}"
                )
        if self.max_attempts < 1:
            raise InvalidArgumentError("max_attempts must be at least 1")

    def rng(self) -> random.Random:
        return random.Random(self.seed)

    @property
    def sea_target(self) -> int:
        ratio = min(MAX_ISLAND_RATIO, max(MIN_ISLAND_RATIO, self.island_ratio))
        cells = self.width * self.height
        return min(cells - 1, max(1, math.floor(cells * (1 - ratio))))


def carve_sea(width: int, height: int, target: int, rng: random.Random) -> Grid:
    """Mark up to ``target`` cells as sea, growing one connected region."""

    marks = filled_grid(height, width, ISLAND)
    r0, c0 = rng.randrange(height), rng.randrange(width)
    marks[r0][c0] = SEA
    carved = 1
    frontier = list(neighbors4(r0, c0, height, width))
    steps = 0
    while carved < target and frontier and steps < width * height * 30:
        steps += 1
        r, c = frontier.pop(rng.randrange(len(frontier)))
        if marks[r][c] == SEA or would_complete_block(marks, r, c, SEA):
            continue
        marks[r][c] = SEA
        carved += 1
        frontier.extend(cell for cell in neighbors4(r, c, height, width) if marks[cell[0]][cell[1]] != SEA)
    return marks


def derive_clues(solution: Grid, rng: random.Random) -> Grid:
    """Label one random cell of every island with the island's size."""

    clues = filled_grid(len(solution), len(solution[0]), NO_CLUE)
    for island in components(solution, ISLAND):
        r, c = rng.choice(island)
        clues[r][c] = len(island)
    return clues


def generate_nurikabe(config: Optional[NurikabeConfig] = None) -> NurikabePuzzle:
    config = config or NurikabeConfig()
    config.validate()
    rng = config.rng()
    target = config.sea_target

    for attempt in range(1, config.max_attempts + 1):
        solution = carve_sea(config.width, config.height, target, rng)
        if not is_connected(solution, SEA) or not components(solution, ISLAND):
            LOGGER.debug("Nurikabe attempt %s/%s rejected", attempt, config.max_attempts)
            continue
        clues = derive_clues(solution, rng)
        LOGGER.info(
            "Generated %dx%d Nurikabe with %d islands",
            config.width,
            config.height,
            sum(1 for row in clues for value in row if value != NO_CLUE),
        )
        return NurikabePuzzle(width=config.width, height=config.height, clues=clues, solution=solution)
    raise GenerationError(f"Could not carve a connected sea after {config.max_attempts} attempts")
