"""KenKen generation: random Latin square, grown cages, operator selection.

Cages are grown in row-major order. Each unseen cell starts a cage whose
target size jitters around the difficulty's average; the cage then absorbs a
random unseen orthogonal neighbour until it reaches that size or runs out of
frontier. The operator is chosen from an ordered rule table.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from math import prod
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ...core.constants import Difficulty, Operation
from ...core.exceptions import GenerationError, InvalidArgumentError
from ...core.models import Cage, Cell, Grid, KenKenPuzzle
from ...engine.latin import latin_square
from ...engine.regions import neighbors4
from ...engine.uniqueness import count_kenken_solutions
from ...utils.logger import get_logger

LOGGER = get_logger(__name__)

MIN_SIZE = 3
MAX_SIZE = 9

AVERAGE_CAGE_SIZE: Dict[Difficulty, float] = {
    Difficulty.EASY: 2.0,
    Difficulty.MEDIUM: 2.3,
    Difficulty.HARD: 2.7,
}

PREFERRED_OPERATIONS: Dict[Difficulty, Tuple[Operation, ...]] = {
    Difficulty.EASY: (Operation.ADD,),
    Difficulty.MEDIUM: (Operation.ADD, Operation.SUB),
    Difficulty.HARD: (Operation.MUL, Operation.ADD, Operation.DIV, Operation.SUB),
}

FALLBACK_ORDER: Tuple[Operation, ...] = (Operation.ADD, Operation.MUL, Operation.SUB, Operation.DIV)


def _is_pair(values: Sequence[int]) -> bool:
    return len(values) == 2


def _divides(values: Sequence[int]) -> bool:
    return len(values) == 2 and max(values) % min(values) == 0


# operation -> (applies to these values?, resulting target)
OPERATION_RULES: Dict[Operation, Tuple[Callable[[Sequence[int]], bool], Callable[[Sequence[int]], int]]] = {
    Operation.ADD: (lambda values: True, sum),
    Operation.MUL: (lambda values: True, prod),
    Operation.SUB: (_is_pair, lambda values: max(values) - min(values)),
    Operation.DIV: (_divides, lambda values: max(values) // min(values)),
}


@dataclass
class KenKenConfig:
    size: int = 4
    difficulty: Difficulty = Difficulty.EASY
    seed: Optional[int] = None
    operators: Optional[Sequence[Operation]] = None
    ensure_unique: bool = False
    retry_limit: int = 20
    uniqueness_timeout: float = 10.0

    def validate(self) -> None:
        if not MIN_SIZE <= self.size <= MAX_SIZE:
            raise InvalidArgumentError(
                f"KenKen size must be between {MIN_SIZE} and {MAX_SIZE}, got {self.size}"
            )
        try:
            self.difficulty = Difficulty(self.difficulty)
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown difficulty: {self.difficulty!r}") from exc
        if self.operators is not None:
            try:
                self.operators = tuple(Operation(op) for op in self.operators)
            except ValueError as exc:
                raise InvalidArgumentError(f"Unknown cage operator in {self.operators!r}") from exc
        if self.retry_limit < 1:
            raise InvalidArgumentError("retry_limit must be at least 1")

    def rng(self) -> random.Random:
        return random.Random(self.seed)

    @property
    def average_cage_size(self) -> float:
        return AVERAGE_CAGE_SIZE[self.difficulty]

    @property
    def preferred_operations(self) -> Tuple[Operation, ...]:
        if self.operators:
            return tuple(self.operators)
        return PREFERRED_OPERATIONS[self.difficulty]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def choose_operation(values: Sequence[int], preferred: Sequence[Operation]) -> Tuple[Operation, int]:
    """First rule (preferred ones, then the fallback order) that applies to ``values``."""

    for op in (*preferred, *FALLBACK_ORDER):
        applies, compute = OPERATION_RULES[op]
        if applies(values):
            return op, compute(values)
    return Operation.ADD, sum(values)


def partition_cages(n: int, average: float, rng: random.Random) -> List[List[Cell]]:
    """Split an ``n x n`` grid into orthogonally connected cell groups."""

    seen = [[False] * n for _ in range(n)]
    groups: List[List[Cell]] = []
    for r in range(n):
        for c in range(n):
            if seen[r][c]:
                continue
            seen[r][c] = True
            cells: List[Cell] = [(r, c)]
            target = max(1, min(n, _round_half_up(average + (rng.random() - 0.5))))
            while len(cells) < target:
                frontier = [nb for cell in cells for nb in neighbors4(cell[0], cell[1], n, n)]
                rng.shuffle(frontier)
                frontier = [(fr, fc) for fr, fc in frontier if not seen[fr][fc]]
                if not frontier:
                    break
                fr, fc = frontier[0]
                seen[fr][fc] = True
                cells.append((fr, fc))
            groups.append(cells)
    return groups


def derive_cages(
    solution: Sequence[Sequence[int]],
    groups: Sequence[Sequence[Cell]],
    preferred: Sequence[Operation],
) -> Tuple[Cage, ...]:
    cages = []
    for cells in groups:
        values = [solution[r][c] for r, c in cells]
        op, target = choose_operation(values, preferred)
        cages.append(Cage(cells=tuple(cells), op=op, target=target))
    return tuple(cages)


def _build(config: KenKenConfig, rng: random.Random) -> KenKenPuzzle:
    solution: Grid = latin_square(config.size, rng)
    groups = partition_cages(config.size, config.average_cage_size, rng)
    cages = derive_cages(solution, groups, config.preferred_operations)
    return KenKenPuzzle(size=config.size, cages=cages, solution=solution)


def generate_kenken(config: Optional[KenKenConfig] = None) -> KenKenPuzzle:
    """Generate a KenKen instance with its solution attached.

    With ``ensure_unique`` the cage layout is redrawn until CP-SAT proves a
    single solution, giving up with :class:`GenerationError` after
    ``retry_limit`` attempts.
    """

    config = config or KenKenConfig()
    config.validate()
    rng = config.rng()

    if not config.ensure_unique:
        puzzle = _build(config, rng)
        LOGGER.info("Generated %dx%d KenKen with %d cages", config.size, config.size, len(puzzle.cages))
        return puzzle

    for attempt in range(1, config.retry_limit + 1):
        puzzle = _build(config, rng)
        count = count_kenken_solutions(puzzle, limit=2, timeout=config.uniqueness_timeout)
        if count == 1:
            LOGGER.info(
                "Generated unique %dx%d KenKen with %d cages (attempt %d)",
                config.size,
                config.size,
                len(puzzle.cages),
                attempt,
            )
            return puzzle
        LOGGER.warning("KenKen attempt %s/%s is not unique (%s solutions)", attempt, config.retry_limit, count)
    raise GenerationError(f"Could not generate a unique KenKen after {config.retry_limit} attempts")
