"""Request/response front end that runs engine calls off the caller's thread.

Requests are plain dicts, so they can come straight from a JSON channel::

    {"req_id": 7, "kind": "solve", "plugin": "kenken", "puzzle": {...}, "timeout": 2.0}

Every request produces exactly one response echoing ``req_id`` and ``kind``::

    {"req_id": 7, "kind": "solve", "ok": True, "result": {...}}
    {"req_id": 7, "kind": "solve", "ok": False, "error": "..."}

Responses may complete in any order; callers match them by ``req_id``.
"""

from __future__ import annotations

import inspect
from concurrent.futures import Executor, Future, ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..core.constants import DEFAULT_SOLVE_TIMEOUT
from ..core.exceptions import InvalidArgumentError, PuzzleError
from ..io.codec import grid_from_payload, to_jsonable
from ..utils.logger import get_logger
from .registry import PuzzlePlugin, get_plugin

LOGGER = get_logger(__name__)

Request = Mapping[str, Any]
Response = Dict[str, Any]


class PuzzleWorker:
    """Dispatch engine requests onto an executor.

    The worker owns (and shuts down) the executor it creates; an injected
    executor is left to its owner.
    """

    def __init__(self, max_workers: int = 2, executor: Optional[Executor] = None) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="puzzlebox")
        self._handlers: Dict[str, Callable[[PuzzlePlugin, Request], Any]] = {
            "generate": self._generate,
            "solve": self._solve,
            "validate": self._validate,
            "hint": self._hint,
            "explain": self._explain,
            "is_solved": self._is_solved,
        }

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------
    def handle(self, request: Request) -> Response:
        """Run one request synchronously. Failures become ``ok: False`` responses."""

        req_id = request.get("req_id") if isinstance(request, Mapping) else None
        kind = request.get("kind") if isinstance(request, Mapping) else None
        try:
            if not isinstance(request, Mapping):
                raise InvalidArgumentError("Request must be an object")
            handler = self._handlers.get(kind)
            if handler is None:
                raise InvalidArgumentError(f"Unknown request kind {kind!r}")
            plugin = get_plugin(request.get("plugin", ""))
            result = handler(plugin, request)
        except PuzzleError as exc:
            LOGGER.warning("Request %s (%s) failed: %s", req_id, kind, exc)
            return {"req_id": req_id, "kind": kind, "ok": False, "error": str(exc)}
        except Exception as exc:
            LOGGER.exception("Request %s (%s) crashed", req_id, kind)
            return {"req_id": req_id, "kind": kind, "ok": False, "error": f"{type(exc).__name__}: {exc}"}
        return {"req_id": req_id, "kind": kind, "ok": True, "result": result}

    def submit(self, request: Request) -> "Future[Response]":
        return self._executor.submit(self.handle, request)

    def run_batch(self, requests: Sequence[Request]) -> List[Response]:
        """Run ``requests`` concurrently; responses come back in request order."""

        futures = {self.submit(request): index for index, request in enumerate(requests)}
        responses: List[Optional[Response]] = [None] * len(requests)
        for future in as_completed(futures):
            responses[futures[future]] = future.result()
        return [response for response in responses if response is not None]

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "PuzzleWorker":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    @staticmethod
    def _puzzle(plugin: PuzzlePlugin, request: Request) -> Any:
        payload = request.get("puzzle")
        if payload is None:
            raise InvalidArgumentError(f"{request.get('kind')} request needs a 'puzzle' payload")
        return plugin.decode(payload)

    def _grid(self, plugin: PuzzlePlugin, request: Request, puzzle: Any) -> List[List[int]]:
        grid = grid_from_payload(request.get("grid"))
        return grid if grid is not None else plugin.create_initial_state(puzzle)

    def _generate(self, plugin: PuzzlePlugin, request: Request) -> Any:
        params = request.get("params") or {}
        if not isinstance(params, Mapping):
            raise InvalidArgumentError("generate params must be an object")
        return plugin.encode(plugin.generate(plugin.make_config(**params)))

    def _solve(self, plugin: PuzzlePlugin, request: Request) -> Any:
        puzzle = self._puzzle(plugin, request)
        options = dict(request.get("options") or {})
        timeout = request.get("timeout", DEFAULT_SOLVE_TIMEOUT)
        grid = grid_from_payload(request.get("grid"))
        try:
            inspect.signature(plugin.solve).bind(puzzle, grid, timeout=timeout, **options)
        except TypeError as exc:
            raise InvalidArgumentError(f"Bad {plugin.name} solve options: {exc}") from exc
        return to_jsonable(plugin.solve(puzzle, grid, timeout=timeout, **options))

    def _validate(self, plugin: PuzzlePlugin, request: Request) -> Any:
        puzzle = self._puzzle(plugin, request)
        return to_jsonable(plugin.validate_move(puzzle, self._grid(plugin, request, puzzle)))

    def _hint(self, plugin: PuzzlePlugin, request: Request) -> Any:
        puzzle = self._puzzle(plugin, request)
        return to_jsonable(plugin.get_hints(puzzle, self._grid(plugin, request, puzzle)))

    def _explain(self, plugin: PuzzlePlugin, request: Request) -> Any:
        puzzle = self._puzzle(plugin, request)
        return to_jsonable(plugin.explain_step(puzzle, self._grid(plugin, request, puzzle)))

    def _is_solved(self, plugin: PuzzlePlugin, request: Request) -> Any:
        puzzle = self._puzzle(plugin, request)
        return plugin.is_solved(puzzle, self._grid(plugin, request, puzzle))
