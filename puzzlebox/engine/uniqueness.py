"""Solution counting with OR-Tools CP-SAT.

The backtracking solvers stop at the first solution; proving that a puzzle
has exactly one is left to CP-SAT, which enumerates solutions until a limit
is reached. Used by the generators' ``ensure_unique`` option.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ortools.sat.python import cp_model

from ..core.constants import Operation, Visibility
from ..core.models import Cell, KenKenPuzzle, SkyscrapersPuzzle
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class SolutionCounter(cp_model.CpSolverSolutionCallback):
    """Counts solutions and stops the search once ``limit`` is reached."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit
        self.count = 0

    def on_solution_callback(self) -> None:
        self.count += 1
        if self.count >= self.limit:
            self.stop_search()


def _latin_model(n: int) -> Tuple[cp_model.CpModel, Dict[Cell, cp_model.IntVar]]:
    model = cp_model.CpModel()
    cells: Dict[Cell, cp_model.IntVar] = {
        (r, c): model.new_int_var(1, n, f"x_{r}_{c}") for r in range(n) for c in range(n)
    }
    for i in range(n):
        model.add_all_different([cells[(i, c)] for c in range(n)])
        model.add_all_different([cells[(r, i)] for r in range(n)])
    return model, cells


def _count(model: cp_model.CpModel, limit: int, timeout: float, label: str) -> int:
    """Number of solutions capped at ``limit``.

    When time runs out before the count is settled the puzzle cannot be
    proved unique, so ``limit`` is returned.
    """

    solver = cp_model.CpSolver()
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1
    solver.parameters.max_time_in_seconds = timeout
    counter = SolutionCounter(limit)
    status = solver.solve(model, counter)
    if counter.count < limit and status not in (cp_model.OPTIMAL, cp_model.INFEASIBLE):
        LOGGER.warning("%s uniqueness check inconclusive (status=%s)", label, solver.status_name(status))
        return limit
    LOGGER.debug("%s uniqueness check: %d solution(s) in %.2fs", label, counter.count, solver.wall_time)
    return counter.count


def _add_cage(
    model: cp_model.CpModel, index: int, cells: List[cp_model.IntVar], op: Operation, target: int, n: int
) -> None:
    if op == Operation.ADD:
        model.add(sum(cells) == target)
    elif op == Operation.MUL:
        product = cells[0]
        for k, var in enumerate(cells[1:], start=2):
            step = model.new_int_var(1, n ** k, f"cage{index}_prod{k}")
            model.add_multiplication_equality(step, [product, var])
            product = step
        model.add(product == target)
    elif op == Operation.SUB:
        model.add_abs_equality(model.new_int_var(target, target, f"cage{index}_diff"), cells[0] - cells[1])
    else:
        first_larger = model.new_bool_var(f"cage{index}_order")
        model.add(cells[0] == target * cells[1]).only_enforce_if(first_larger)
        model.add(cells[1] == target * cells[0]).only_enforce_if(~first_larger)


def count_kenken_solutions(puzzle: KenKenPuzzle, limit: int = 2, timeout: float = 10.0) -> int:
    if any(cage.op in (Operation.SUB, Operation.DIV) and len(cage.cells) != 2 for cage in puzzle.cages):
        return 0
    model, cells = _latin_model(puzzle.size)
    for index, cage in enumerate(puzzle.cages):
        _add_cage(model, index, [cells[cell] for cell in cage.cells], cage.op, cage.target, puzzle.size)
    return _count(model, limit, timeout, "KenKen")


def _add_visibility(
    model: cp_model.CpModel, name: str, line: Sequence[cp_model.IntVar], clue: int, mode: Visibility, n: int
) -> None:
    """Constrain the buildings seen along ``line`` (read from its first cell)."""

    tallest = line[0]
    seen = [line[0]] if mode == Visibility.SUM else [1]
    for i, height in enumerate(line[1:], start=1):
        visible = model.new_bool_var(f"{name}_vis{i}")
        model.add(height > tallest).only_enforce_if(visible)
        model.add(height <= tallest).only_enforce_if(~visible)
        if mode == Visibility.COUNT:
            seen.append(visible)
        else:
            contribution = model.new_int_var(0, n, f"{name}_h{i}")
            model.add(contribution == height).only_enforce_if(visible)
            model.add(contribution == 0).only_enforce_if(~visible)
            seen.append(contribution)
        running = model.new_int_var(1, n, f"{name}_max{i}")
        model.add_max_equality(running, [tallest, height])
        tallest = running
    model.add(sum(seen) == clue)


def count_skyscrapers_solutions(puzzle: SkyscrapersPuzzle, limit: int = 2, timeout: float = 10.0) -> int:
    n = puzzle.size
    model, cells = _latin_model(n)
    if puzzle.diagonals:
        model.add_all_different([cells[(i, i)] for i in range(n)])
        model.add_all_different([cells[(i, n - 1 - i)] for i in range(n)])
    for i in range(n):
        column = [cells[(r, i)] for r in range(n)]
        row = [cells[(i, c)] for c in range(n)]
        edges = (
            ("top", puzzle.top[i], column),
            ("bottom", puzzle.bottom[i], column[::-1]),
            ("left", puzzle.left[i], row),
            ("right", puzzle.right[i], row[::-1]),
        )
        for edge, clue, line in edges:
            if clue > 0:
                _add_visibility(model, f"{edge}{i}", line, clue, puzzle.visibility, n)
    return _count(model, limit, timeout, "Skyscrapers")
