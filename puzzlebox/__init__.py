"""Logic puzzle generators and solvers: KenKen, Nonograms, Nurikabe, Skyscrapers.

This package exposes the public API surface via:

- ``puzzlebox.puzzles.<type>.generator``: ``generate_*`` functions and their config dataclasses.
- ``puzzlebox.puzzles.<type>.solver``: ``solve`` with a wall-clock timeout.
- ``puzzlebox.engine.registry``: one ``PuzzlePlugin`` per type, looked up by name.
- ``puzzlebox.engine.worker.PuzzleWorker``: dict requests answered on a thread pool.
"""

from .core.constants import Density, Difficulty, Operation, SolveStatus, Visibility
from .core.exceptions import GenerationError, InvalidArgumentError, MalformedPuzzleError, PuzzleError
from .core.models import (
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
from .engine.registry import PuzzlePlugin, available_plugins, get_plugin, register_plugin
from .engine.worker import PuzzleWorker
from .puzzles.kenken.generator import KenKenConfig, generate_kenken
from .puzzles.nonograms.generator import NonogramConfig, generate_nonogram
from .puzzles.nurikabe.generator import NurikabeConfig, generate_nurikabe
from .puzzles.skyscrapers.generator import SkyscrapersConfig, generate_skyscrapers

__all__ = [
    "Cage",
    "Density",
    "Difficulty",
    "Explanation",
    "GenerationError",
    "Hint",
    "InvalidArgumentError",
    "KenKenConfig",
    "KenKenPuzzle",
    "MalformedPuzzleError",
    "NonogramConfig",
    "NonogramPuzzle",
    "NurikabeConfig",
    "NurikabePuzzle",
    "Operation",
    "PuzzleError",
    "PuzzlePlugin",
    "PuzzleWorker",
    "SkyscrapersConfig",
    "SkyscrapersPuzzle",
    "SolveResult",
    "SolveStatus",
    "ValidationResult",
    "Visibility",
    "available_plugins",
    "generate_kenken",
    "generate_nonogram",
    "generate_nurikabe",
    "generate_skyscrapers",
    "get_plugin",
    "register_plugin",
]

__version__ = "0.1.0"
