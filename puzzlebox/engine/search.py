"""Deadline handling and the shared skeleton of the backtracking solvers."""

from __future__ import annotations

import time
from typing import Optional

from ..core.constants import SolveStatus
from ..core.exceptions import InvalidArgumentError
from ..core.models import Grid, SolveResult
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class SearchTimeout(Exception):
    """Raised inside a search to unwind once the deadline has passed."""


class Deadline:
    """Wall-clock budget measured with ``time.monotonic``. ``None`` means unlimited."""

    def __init__(self, timeout: Optional[float]) -> None:
        if timeout is not None and timeout < 0:
            raise InvalidArgumentError(f"timeout must be non-negative, got {timeout}")
        self.timeout = timeout
        self.started = time.monotonic()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def expired(self) -> bool:
        return self.timeout is not None and self.elapsed >= self.timeout

    def check(self) -> None:
        if self.expired():
            raise SearchTimeout()


class BacktrackingSearch:
    """Depth-first search skeleton: subclasses implement :meth:`_search`.

    ``_search`` returns the completed grid or ``None`` once every candidate
    is exhausted, and must call :meth:`_expand` before each recursive
    expansion so the deadline is honoured.
    """

    name = "search"

    def __init__(self, timeout: Optional[float]) -> None:
        self.deadline = Deadline(timeout)
        self.nodes = 0

    def _expand(self) -> None:
        self.deadline.check()
        self.nodes += 1

    def _search(self) -> Optional[Grid]:
        raise NotImplementedError

    def run(self) -> SolveResult:
        try:
            grid = self._search()
        except SearchTimeout:
            status = SolveStatus.TIMED_OUT
            grid = None
        else:
            status = SolveStatus.SOLVED if grid is not None else SolveStatus.INFEASIBLE
        result = SolveResult(status=status, grid=grid, nodes=self.nodes, elapsed=self.deadline.elapsed)
        LOGGER.debug(
            "%s finished: %s after %d nodes in %.3fs",
            self.name,
            status.value,
            result.nodes,
            result.elapsed,
        )
        return result


def solved_result(grid: Grid) -> SolveResult:
    """Result for the short-circuit path where a stored solution is returned."""

    return SolveResult(status=SolveStatus.SOLVED, grid=[list(row) for row in grid])


def infeasible_result() -> SolveResult:
    return SolveResult(status=SolveStatus.INFEASIBLE)
