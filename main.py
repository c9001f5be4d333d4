"""CLI entrypoint for the logic puzzle generators and solvers."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from puzzlebox.core.constants import DEFAULT_SOLVE_TIMEOUT, Density, Difficulty, Visibility
from puzzlebox.core.exceptions import InvalidArgumentError, PuzzleError
from puzzlebox.core.models import NurikabePuzzle
from puzzlebox.engine.registry import PuzzlePlugin, available_plugins, get_plugin
from puzzlebox.io.codec import grid_from_payload, to_jsonable
from puzzlebox.utils.logger import configure_logging, get_logger
from puzzlebox.utils.pretty import NONOGRAM_SYMBOLS, format_grid, format_nurikabe

LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate and solve KenKen, Nonogram, Nurikabe and Skyscrapers puzzles",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument("--pretty", action="store_true", help="Also print the grid as text on stderr")
    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Generate a new puzzle")
    generate.add_argument("--type", choices=available_plugins(), required=True, help="Puzzle type")
    generate.add_argument(
        "--size",
        type=str,
        default=None,
        help="Side length for KenKen/Skyscrapers, WxH (or a preset such as 10x10) otherwise",
    )
    generate.add_argument(
        "--difficulty",
        type=str,
        choices=[d.value for d in Difficulty],
        default=None,
        help="Difficulty level (KenKen, Skyscrapers)",
    )
    generate.add_argument(
        "--density",
        type=str,
        choices=[d.value for d in Density],
        default=None,
        help="Fill density for Nonograms",
    )
    generate.add_argument(
        "--visibility",
        type=str,
        choices=[v.value for v in Visibility],
        default=None,
        help="Skyscrapers clue mode",
    )
    generate.add_argument("--diagonals", action="store_true", help="Skyscrapers: diagonals must be distinct too")
    generate.add_argument("--island-ratio", type=float, default=None, help="Nurikabe island share (0.2-0.8)")
    generate.add_argument("--unique", action="store_true", help="Prove uniqueness with CP-SAT (KenKen, Skyscrapers)")
    generate.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")

    for name, help_text in (
        ("solve", "Solve a puzzle read from JSON"),
        ("hint", "List hints for a puzzle state"),
        ("validate", "Check a puzzle state against the rules"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("--type", choices=available_plugins(), help="Puzzle type (read from the file if omitted)")
        sub.add_argument("--puzzle", type=Path, required=True, help="Puzzle JSON (as written by 'generate')")
        sub.add_argument("--grid", type=Path, help="Optional JSON file with the current grid")
        if name == "solve":
            sub.add_argument("--timeout", type=float, default=DEFAULT_SOLVE_TIMEOUT, help="Search budget in seconds")
            sub.add_argument("--seed", type=int, default=None, help="Nurikabe branch-order seed")
            sub.add_argument(
                "--search",
                action="store_true",
                help="Ignore a stored solution and always search (Nonograms, Skyscrapers)",
            )
    return parser


def generation_params(args: argparse.Namespace) -> Dict[str, Any]:
    params: Dict[str, Any] = {"seed": args.seed}
    if args.size is not None and args.type in ("kenken", "skyscrapers"):
        if not args.size.isdigit():
            raise InvalidArgumentError(f"--size must be a number for {args.type}, got {args.size!r}")
        params["size"] = int(args.size)
    elif args.size is not None:
        params["size"] = args.size
    if args.type in ("kenken", "skyscrapers"):
        if args.difficulty:
            params["difficulty"] = Difficulty(args.difficulty)
        params["ensure_unique"] = args.unique
    if args.type == "skyscrapers":
        params["diagonals"] = args.diagonals
        if args.visibility:
            params["visibility"] = Visibility(args.visibility)
    if args.type == "nonograms" and args.density:
        params["density"] = Density(args.density)
    if args.type == "nurikabe" and args.island_ratio is not None:
        params["island_ratio"] = args.island_ratio
    return params


def load_puzzle(args: argparse.Namespace) -> Tuple[PuzzlePlugin, Any]:
    data = json.loads(args.puzzle.read_text(encoding="utf-8"))
    kind = args.type
    if isinstance(data, dict) and "puzzle" in data:
        kind = kind or data.get("type")
        data = data["puzzle"]
    if not kind:
        raise InvalidArgumentError("--type is required when the puzzle file does not name its type")
    plugin = get_plugin(kind)
    return plugin, plugin.decode(data)


def load_grid(path: Optional[Path]) -> Optional[List[List[int]]]:
    if path is None:
        return None
    return grid_from_payload(json.loads(path.read_text(encoding="utf-8")))


def render(plugin: PuzzlePlugin, puzzle: Any, grid: Optional[List[List[int]]]) -> str:
    if isinstance(puzzle, NurikabePuzzle):
        return format_nurikabe(puzzle, grid)
    symbols = NONOGRAM_SYMBOLS if plugin.name == "nonograms" else None
    return format_grid(grid if grid is not None else puzzle.empty_grid(), symbols)


def run(args: argparse.Namespace) -> Dict[str, Any]:
    if args.command == "generate":
        plugin = get_plugin(args.type)
        puzzle = plugin.generate(plugin.make_config(**generation_params(args)))
        if args.pretty:
            print(render(plugin, puzzle, puzzle.solution), file=sys.stderr)
        return {"type": plugin.name, "puzzle": plugin.encode(puzzle)}

    plugin, puzzle = load_puzzle(args)
    grid = load_grid(args.grid)
    if args.command == "solve":
        options: Dict[str, Any] = {}
        if plugin.name == "nurikabe":
            options["seed"] = args.seed
        elif plugin.name in ("nonograms", "skyscrapers"):
            options["use_solution"] = not args.search
        result = plugin.solve(puzzle, grid, timeout=args.timeout, **options)
        if args.pretty and result.grid is not None:
            print(render(plugin, puzzle, result.grid), file=sys.stderr)
        return {"type": plugin.name, "result": to_jsonable(result)}

    state = grid if grid is not None else plugin.create_initial_state(puzzle)
    if args.command == "hint":
        return {"type": plugin.name, "hints": to_jsonable(plugin.get_hints(puzzle, state))}
    validation = plugin.validate_move(puzzle, state)
    return {
        "type": plugin.name,
        "validation": to_jsonable(validation),
        "solved": plugin.is_solved(puzzle, state),
    }


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level, stream=sys.stderr)

    try:
        payload = run(args)
    except PuzzleError as exc:
        LOGGER.error("%s", exc)
        parser.exit(2, f"error: {exc}\n")

    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)


if __name__ == "__main__":  # pragma: no cover
    main()
