"""Random Nonogram pictures and their row/column run clues."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ...core.constants import FILLED, Density
from ...core.exceptions import InvalidArgumentError
from ...core.models import Grid, NonogramPuzzle
from ...engine.latin import column
from ...utils.logger import get_logger
from .validator import runs_of

LOGGER = get_logger(__name__)

MAX_DIMENSION = 40

SIZE_PRESETS: Dict[str, Tuple[int, int]] = {
    "5x5": (5, 5),
    "10x10": (10, 10),
    "15x15": (15, 15),
    "20x20": (20, 20),
}


def parse_size(text: str) -> Tuple[int, int]:
    """Parse ``"WxH"`` (presets included) into ``(width, height)``."""

    if text in SIZE_PRESETS:
        return SIZE_PRESETS[text]
    try:
        width, height = (int(part) for part in text.lower().split("x"))
    except ValueError as exc:
        raise InvalidArgumentError(f"Size must look like WxH, got {text!r}") from exc
    return width, height


@dataclass
class NonogramConfig:
    width: int = 10
    height: int = 10
    density: Density = Density.NORMAL
    seed: Optional[int] = None

    @classmethod
    def from_size(cls, size: str, **kwargs) -> "NonogramConfig":
        width, height = parse_size(size)
        return cls(width=width, height=height, **kwargs)

    def validate(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not 1 <= value <= MAX_DIMENSION:
                raise InvalidArgumentError(f"Nonogram {name} must be between 1 and {MAX_DIMENSION}, got {value}")
        try:
            self.density = Density(self.density)
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown density: {self.density!r}") from exc

    def rng(self) -> random.Random:
        return random.Random(self.seed)


def random_picture(width: int, height: int, probability: float, rng: random.Random) -> Grid:
    """Random 0/1 picture in which every row and every column has a filled cell."""

    grid = [[FILLED if rng.random() < probability else 0 for _ in range(width)] for _ in range(height)]
    for row in grid:
        if FILLED not in row:
            row[rng.randrange(width)] = FILLED
    for c in range(width):
        if FILLED not in column(grid, c):
            grid[rng.randrange(height)][c] = FILLED
    return grid


def derive_clues(solution: Grid) -> NonogramPuzzle:
    width = len(solution[0]) if solution else 0
    rows = tuple(runs_of(row) for row in solution)
    cols = tuple(runs_of(column(solution, c)) for c in range(width))
    return NonogramPuzzle(rows=rows, cols=cols, solution=solution)


def generate_nonogram(config: Optional[NonogramConfig] = None) -> NonogramPuzzle:
    config = config or NonogramConfig()
    config.validate()
    solution = random_picture(config.width, config.height, config.density.probability, config.rng())
    puzzle = derive_clues(solution)
    LOGGER.info("Generated %dx%d Nonogram (%s)", config.width, config.height, config.density.value)
    return puzzle
