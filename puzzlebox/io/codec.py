"""JSON payload codec for puzzle instances and engine results.

Payloads use plain dicts and lists so they can go straight through
``json.dumps``. Decoders check structure only (keys, list shapes, integer
values) and raise :class:`MalformedPuzzleError` with the offending path;
whether the clues describe a solvable puzzle is the solver's business.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Type, Union

from ..core.constants import Operation, Visibility
from ..core.exceptions import MalformedPuzzleError
from ..core.models import (
    Cage,
    Explanation,
    Hint,
    KenKenPuzzle,
    NonogramPuzzle,
    NurikabePuzzle,
    SkyscrapersPuzzle,
    SolveResult,
    ValidationResult,
)

Puzzle = Union[KenKenPuzzle, NonogramPuzzle, NurikabePuzzle, SkyscrapersPuzzle]
Payload = Dict[str, Any]


# ----------------------------------------------------------------------
# Structural helpers
# ----------------------------------------------------------------------
def _require(payload: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(payload, Mapping):
        raise MalformedPuzzleError(f"{where} must be an object")
    if key not in payload:
        raise MalformedPuzzleError(f"{where}.{key} is missing")
    return payload[key]


def _int(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedPuzzleError(f"{where} must be an integer, got {value!r}")
    return value


def _int_list(value: Any, where: str) -> List[int]:
    if not isinstance(value, list):
        raise MalformedPuzzleError(f"{where} must be a list")
    return [_int(item, f"{where}[{i}]") for i, item in enumerate(value)]


def _grid(value: Any, where: str, height: int, width: int) -> List[List[int]]:
    if not isinstance(value, list) or len(value) != height:
        raise MalformedPuzzleError(f"{where} must have {height} rows")
    rows = [_int_list(row, f"{where}[{r}]") for r, row in enumerate(value)]
    if any(len(row) != width for row in rows):
        raise MalformedPuzzleError(f"{where} rows must have {width} cells")
    return rows


def _optional_grid(payload: Mapping[str, Any], height: int, width: int, where: str) -> Optional[List[List[int]]]:
    if payload.get("solution") is None:
        return None
    return _grid(payload["solution"], f"{where}.solution", height, width)


def _grid_out(grid: Optional[Sequence[Sequence[int]]]) -> Optional[List[List[int]]]:
    return None if grid is None else [list(row) for row in grid]


def _with_solution(payload: Payload, solution: Optional[Sequence[Sequence[int]]]) -> Payload:
    if solution is not None:
        payload["solution"] = _grid_out(solution)
    return payload


# ----------------------------------------------------------------------
# KenKen
# ----------------------------------------------------------------------
def kenken_to_dict(puzzle: KenKenPuzzle) -> Payload:
    payload: Payload = {
        "size": puzzle.size,
        "cages": [
            {
                "cells": [{"r": r, "c": c} for r, c in cage.cells],
                "op": cage.op.value,
                "target": cage.target,
            }
            for cage in puzzle.cages
        ],
    }
    return _with_solution(payload, puzzle.solution)


def kenken_from_dict(payload: Mapping[str, Any]) -> KenKenPuzzle:
    size = _int(_require(payload, "size", "kenken"), "kenken.size")
    raw_cages = _require(payload, "cages", "kenken")
    if not isinstance(raw_cages, list):
        raise MalformedPuzzleError("kenken.cages must be a list")
    cages = []
    for i, raw in enumerate(raw_cages):
        where = f"kenken.cages[{i}]"
        cells_raw = _require(raw, "cells", where)
        if not isinstance(cells_raw, list) or not cells_raw:
            raise MalformedPuzzleError(f"{where}.cells must be a non-empty list")
        cells = []
        for j, cell in enumerate(cells_raw):
            r = _int(_require(cell, "r", f"{where}.cells[{j}]"), f"{where}.cells[{j}].r")
            c = _int(_require(cell, "c", f"{where}.cells[{j}]"), f"{where}.cells[{j}].c")
            if not (0 <= r < size and 0 <= c < size):
                raise MalformedPuzzleError(f"{where}.cells[{j}] is outside the {size}x{size} grid")
            cells.append((r, c))
        try:
            op = Operation(_require(raw, "op", where))
        except ValueError as exc:
            raise MalformedPuzzleError(f"{where}.op is not one of add/sub/mul/div") from exc
        target = _int(_require(raw, "target", where), f"{where}.target")
        cages.append(Cage(cells=tuple(cells), op=op, target=target))
    return KenKenPuzzle(size=size, cages=tuple(cages), solution=_optional_grid(payload, size, size, "kenken"))


# ----------------------------------------------------------------------
# Nonograms
# ----------------------------------------------------------------------
def nonogram_to_dict(puzzle: NonogramPuzzle) -> Payload:
    payload: Payload = {
        "rows": [list(runs) for runs in puzzle.rows],
        "cols": [list(runs) for runs in puzzle.cols],
    }
    return _with_solution(payload, puzzle.solution)


def nonogram_from_dict(payload: Mapping[str, Any]) -> NonogramPuzzle:
    lines = {}
    for key in ("rows", "cols"):
        raw = _require(payload, key, "nonogram")
        if not isinstance(raw, list) or not raw:
            raise MalformedPuzzleError(f"nonogram.{key} must be a non-empty list")
        lines[key] = [_int_list(runs, f"nonogram.{key}[{i}]") for i, runs in enumerate(raw)]
        if any(run <= 0 for runs in lines[key] for run in runs):
            raise MalformedPuzzleError(f"nonogram.{key} runs must be positive")
    height, width = len(lines["rows"]), len(lines["cols"])
    return NonogramPuzzle(
        rows=lines["rows"],
        cols=lines["cols"],
        solution=_optional_grid(payload, height, width, "nonogram"),
    )


# ----------------------------------------------------------------------
# Nurikabe
# ----------------------------------------------------------------------
def nurikabe_to_dict(puzzle: NurikabePuzzle) -> Payload:
    payload: Payload = {
        "width": puzzle.width,
        "height": puzzle.height,
        "clues": _grid_out(puzzle.clues),
    }
    return _with_solution(payload, puzzle.solution)


def nurikabe_from_dict(payload: Mapping[str, Any]) -> NurikabePuzzle:
    width = _int(_require(payload, "width", "nurikabe"), "nurikabe.width")
    height = _int(_require(payload, "height", "nurikabe"), "nurikabe.height")
    if width < 1 or height < 1:
        raise MalformedPuzzleError("nurikabe dimensions must be positive")
    clues = _grid(_require(payload, "clues", "nurikabe"), "nurikabe.clues", height, width)
    return NurikabePuzzle(
        width=width,
        height=height,
        clues=clues,
        solution=_optional_grid(payload, height, width, "nurikabe"),
    )


# ----------------------------------------------------------------------
# Skyscrapers
# ----------------------------------------------------------------------
def skyscrapers_to_dict(puzzle: SkyscrapersPuzzle) -> Payload:
    payload: Payload = {
        "size": puzzle.size,
        "top": list(puzzle.top),
        "bottom": list(puzzle.bottom),
        "left": list(puzzle.left),
        "right": list(puzzle.right),
        "mode": {"visibility": puzzle.visibility.value, "diagonals": puzzle.diagonals},
    }
    return _with_solution(payload, puzzle.solution)


def skyscrapers_from_dict(payload: Mapping[str, Any]) -> SkyscrapersPuzzle:
    size = _int(_require(payload, "size", "skyscrapers"), "skyscrapers.size")
    edges = {}
    for key in ("top", "bottom", "left", "right"):
        edges[key] = _int_list(_require(payload, key, "skyscrapers"), f"skyscrapers.{key}")
        if len(edges[key]) != size:
            raise MalformedPuzzleError(f"skyscrapers.{key} must have {size} entries")
    mode = payload.get("mode") or {}
    if not isinstance(mode, Mapping):
        raise MalformedPuzzleError("skyscrapers.mode must be an object")
    try:
        visibility = Visibility(mode.get("visibility", Visibility.COUNT.value))
    except ValueError as exc:
        raise MalformedPuzzleError("skyscrapers.mode.visibility must be 'count' or 'sum'") from exc
    return SkyscrapersPuzzle(
        size=size,
        visibility=visibility,
        diagonals=bool(mode.get("diagonals", False)),
        solution=_optional_grid(payload, size, size, "skyscrapers"),
        **edges,
    )


# ----------------------------------------------------------------------
# Dispatch and results
# ----------------------------------------------------------------------
ENCODERS: Dict[Type[Any], Callable[[Any], Payload]] = {
    KenKenPuzzle: kenken_to_dict,
    NonogramPuzzle: nonogram_to_dict,
    NurikabePuzzle: nurikabe_to_dict,
    SkyscrapersPuzzle: skyscrapers_to_dict,
}


def to_jsonable(value: Any) -> Any:
    """Convert puzzles and engine results to JSON-ready structures."""

    encoder = ENCODERS.get(type(value))
    if encoder is not None:
        return encoder(value)
    if isinstance(value, SolveResult):
        return {
            "status": value.status.value,
            "grid": _grid_out(value.grid),
            "nodes": value.nodes,
            "elapsed": round(value.elapsed, 6),
        }
    if isinstance(value, (ValidationResult, Hint, Explanation)):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def grid_from_payload(value: Any, where: str = "grid") -> Optional[List[List[int]]]:
    """Decode an optional player grid; shape checks are left to the validators."""

    if value is None:
        return None
    if not isinstance(value, list):
        raise MalformedPuzzleError(f"{where} must be a list of rows")
    return [_int_list(row, f"{where}[{r}]") for r, row in enumerate(value)]
