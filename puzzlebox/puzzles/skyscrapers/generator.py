"""Skyscrapers generation: Latin solution, derived edge clues, random clue mask."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ...core.constants import Difficulty, Visibility
from ...core.exceptions import GenerationError, InvalidArgumentError
from ...core.models import Grid, SkyscrapersPuzzle
from ...engine.latin import column, latin_square
from ...engine.uniqueness import count_skyscrapers_solutions
from ...utils.logger import get_logger
from .validator import visibility

LOGGER = get_logger(__name__)

MIN_SIZE = 3
MAX_SIZE = 9
DIAGONAL_MIN_SIZE = 4

KEEP_RATIO: Dict[Difficulty, float] = {
    Difficulty.EASY: 0.9,
    Difficulty.MEDIUM: 0.65,
    Difficulty.HARD: 0.45,
}

EdgeClues = Tuple[Tuple[int, ...], Tuple[int, ...], Tuple[int, ...], Tuple[int, ...]]


@dataclass
class SkyscrapersConfig:
    size: int = 5
    difficulty: Difficulty = Difficulty.MEDIUM
    visibility: Visibility = Visibility.COUNT
    diagonals: bool = False
    seed: Optional[int] = None
    keep_ratio: Optional[float] = None
    ensure_unique: bool = False
    mask_attempts: int = 10
    retry_limit: int = 10
    uniqueness_timeout: float = 10.0

    def validate(self) -> None:
        if not MIN_SIZE <= self.size <= MAX_SIZE:
            raise InvalidArgumentError(
                f"Skyscrapers size must be between {MIN_SIZE} and {MAX_SIZE}, got {self.size}"
            )
        try:
            self.difficulty = Difficulty(self.difficulty)
            self.visibility = Visibility(self.visibility)
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown difficulty or visibility: {exc}") from exc
        if self.diagonals and self.size < DIAGONAL_MIN_SIZE:
            raise InvalidArgumentError(f"Diagonal Skyscrapers need size >= {DIAGONAL_MIN_SIZE}, got {self.size}")
        if self.keep_ratio is not None and not 0.0 <= self.keep_ratio <= 1.0:
            raise InvalidArgumentError(f"keep_ratio must be within [0, 1], got {self.keep_ratio}")
        if self.retry_limit < 1 or self.mask_attempts < 1:
            raise InvalidArgumentError("retry_limit and mask_attempts must be at least 1")

    def rng(self) -> random.Random:
        return random.Random(self.seed)

    @property
    def effective_keep_ratio(self) -> float:
        return self.keep_ratio if self.keep_ratio is not None else KEEP_RATIO[self.difficulty]


def derive_edge_clues(solution: Sequence[Sequence[int]], mode: Visibility) -> EdgeClues:
    n = len(solution)
    top = tuple(visibility(column(solution, c), mode) for c in range(n))
    bottom = tuple(visibility(column(solution, c)[::-1], mode) for c in range(n))
    left = tuple(visibility(row, mode) for row in solution)
    right = tuple(visibility(list(row)[::-1], mode) for row in solution)
    return top, bottom, left, right


def mask_clues(clues: EdgeClues, keep_ratio: float, rng: random.Random) -> EdgeClues:
    """Hide each clue independently, keeping it with probability ``keep_ratio``."""

    top, bottom, left, right = (
        tuple(value if rng.random() < keep_ratio else 0 for value in edge) for edge in clues
    )
    return top, bottom, left, right


def diagonal_latin_square(n: int, rng: random.Random, attempts: int = 50) -> Grid:
    """Random Latin square whose two main diagonals also hold distinct values.

    Row and column shuffles of the cyclic square cannot produce these for even
    ``n``, so cells are filled by randomized backtracking, restarted whenever
    a single pass exceeds its node budget.
    """

    if n < DIAGONAL_MIN_SIZE:
        raise InvalidArgumentError(f"Diagonal Skyscrapers need size >= {DIAGONAL_MIN_SIZE}, got {n}")
    for _ in range(attempts):
        grid = [[0] * n for _ in range(n)]
        budget = [n ** 4]
        if _fill_diagonal(grid, 0, rng, budget):
            return grid
    raise GenerationError(f"No Latin square with distinct diagonals found for size {n}")


def _fill_diagonal(grid: Grid, index: int, rng: random.Random, budget: List[int]) -> bool:
    n = len(grid)
    if index == n * n:
        return True
    budget[0] -= 1
    if budget[0] < 0:
        return False
    r, c = divmod(index, n)
    used = set(grid[r][:c]) | {grid[i][c] for i in range(r)}
    if r == c:
        used |= {grid[i][i] for i in range(r)}
    if r + c == n - 1:
        used |= {grid[i][n - 1 - i] for i in range(r)}
    values = [v for v in range(1, n + 1) if v not in used]
    rng.shuffle(values)
    for value in values:
        grid[r][c] = value
        if _fill_diagonal(grid, index + 1, rng, budget):
            return True
    grid[r][c] = 0
    return False


def _puzzle(config: SkyscrapersConfig, solution: Grid, clues: EdgeClues) -> SkyscrapersPuzzle:
    top, bottom, left, right = clues
    return SkyscrapersPuzzle(
        size=config.size,
        top=top,
        bottom=bottom,
        left=left,
        right=right,
        visibility=config.visibility,
        diagonals=config.diagonals,
        solution=solution,
    )


def generate_skyscrapers(config: Optional[SkyscrapersConfig] = None) -> SkyscrapersPuzzle:
    """Generate a Skyscrapers instance with its solution attached.

    Without ``ensure_unique`` the mask is purely probabilistic and the
    result may admit several solutions. With it, each solution gets
    ``mask_attempts`` masks and then the full clue set before a new solution
    is drawn.
    """

    config = config or SkyscrapersConfig()
    config.validate()
    rng = config.rng()
    keep = config.effective_keep_ratio

    for attempt in range(1, config.retry_limit + 1):
        if config.diagonals:
            solution = diagonal_latin_square(config.size, rng)
        else:
            solution = latin_square(config.size, rng)
        full = derive_edge_clues(solution, config.visibility)
        if not config.ensure_unique:
            puzzle = _puzzle(config, solution, mask_clues(full, keep, rng))
            LOGGER.info("Generated %dx%d Skyscrapers (%s)", config.size, config.size, config.visibility.value)
            return puzzle

        candidates = [mask_clues(full, keep, rng) for _ in range(config.mask_attempts)] + [full]
        for clues in candidates:
            puzzle = _puzzle(config, solution, clues)
            if count_skyscrapers_solutions(puzzle, limit=2, timeout=config.uniqueness_timeout) == 1:
                LOGGER.info(
                    "Generated unique %dx%d Skyscrapers (attempt %d)", config.size, config.size, attempt
                )
                return puzzle
        LOGGER.warning("Skyscrapers attempt %s/%s found no unique clue set", attempt, config.retry_limit)
    raise GenerationError(f"Could not generate a unique Skyscrapers puzzle after {config.retry_limit} attempts")
