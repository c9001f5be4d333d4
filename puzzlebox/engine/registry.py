"""Registry of puzzle plugins keyed by a short type name.

A plugin bundles everything a host needs to drive one puzzle type: its
generator config class, the generate/solve entry points, the player-facing
checks and hints, and the payload codec.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from ..core.exceptions import InvalidArgumentError
from ..io import codec
from ..puzzles.kenken import generator as kenken_generator
from ..puzzles.kenken import hints as kenken_hints
from ..puzzles.kenken import solver as kenken_solver
from ..puzzles.kenken import validator as kenken_validator
from ..puzzles.nonograms import generator as nonogram_generator
from ..puzzles.nonograms import hints as nonogram_hints
from ..puzzles.nonograms import solver as nonogram_solver
from ..puzzles.nonograms import validator as nonogram_validator
from ..puzzles.nurikabe import generator as nurikabe_generator
from ..puzzles.nurikabe import hints as nurikabe_hints
from ..puzzles.nurikabe import solver as nurikabe_solver
from ..puzzles.nurikabe import validator as nurikabe_validator
from ..puzzles.skyscrapers import generator as skyscrapers_generator
from ..puzzles.skyscrapers import hints as skyscrapers_hints
from ..puzzles.skyscrapers import solver as skyscrapers_solver
from ..puzzles.skyscrapers import validator as skyscrapers_validator
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class PuzzlePlugin:
    name: str
    config_type: type
    generate: Callable[..., Any]
    solve: Callable[..., Any]
    validate_move: Callable[..., Any]
    is_solved: Callable[..., bool]
    get_hints: Callable[..., Any]
    explain_step: Callable[..., Any]
    encode: Callable[[Any], Dict[str, Any]]
    decode: Callable[[Dict[str, Any]], Any]

    def make_config(self, **params: Any) -> Any:
        """Build the generator config; ``size="WxH"`` is accepted where the config has ``from_size``."""

        size = params.get("size")
        try:
            if isinstance(size, str) and hasattr(self.config_type, "from_size"):
                rest = {key: value for key, value in params.items() if key != "size"}
                return self.config_type.from_size(size, **rest)
            return self.config_type(**params)
        except TypeError as exc:
            raise InvalidArgumentError(f"Bad {self.name} parameters: {exc}") from exc

    def create_initial_state(self, puzzle: Any) -> List[List[int]]:
        return puzzle.empty_grid()


_PLUGINS: Dict[str, PuzzlePlugin] = {}


def register_plugin(plugin: PuzzlePlugin, replace: bool = False) -> None:
    if plugin.name in _PLUGINS and not replace:
        raise InvalidArgumentError(f"Plugin {plugin.name!r} is already registered")
    _PLUGINS[plugin.name] = plugin
    LOGGER.debug("Registered puzzle plugin %s", plugin.name)


def get_plugin(name: str) -> PuzzlePlugin:
    try:
        return _PLUGINS[name]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown puzzle type {name!r}; available: {', '.join(available_plugins())}"
        ) from None


def available_plugins() -> List[str]:
    return sorted(_PLUGINS)


def _register_builtins() -> None:
    register_plugin(
        PuzzlePlugin(
            name="kenken",
            config_type=kenken_generator.KenKenConfig,
            generate=kenken_generator.generate_kenken,
            solve=kenken_solver.solve,
            validate_move=kenken_validator.validate_move,
            is_solved=kenken_validator.is_solved,
            get_hints=kenken_hints.get_hints,
            explain_step=kenken_hints.explain_step,
            encode=codec.kenken_to_dict,
            decode=codec.kenken_from_dict,
        )
    )
    register_plugin(
        PuzzlePlugin(
            name="nonograms",
            config_type=nonogram_generator.NonogramConfig,
            generate=nonogram_generator.generate_nonogram,
            solve=nonogram_solver.solve,
            validate_move=nonogram_validator.validate_move,
            is_solved=nonogram_validator.is_solved,
            get_hints=nonogram_hints.get_hints,
            explain_step=nonogram_hints.explain_step,
            encode=codec.nonogram_to_dict,
            decode=codec.nonogram_from_dict,
        )
    )
    register_plugin(
        PuzzlePlugin(
            name="nurikabe",
            config_type=nurikabe_generator.NurikabeConfig,
            generate=nurikabe_generator.generate_nurikabe,
            solve=nurikabe_solver.solve,
            validate_move=nurikabe_validator.validate_move,
            is_solved=nurikabe_validator.is_solved,
            get_hints=nurikabe_hints.get_hints,
            explain_step=nurikabe_hints.explain_step,
            encode=codec.nurikabe_to_dict,
            decode=codec.nurikabe_from_dict,
        )
    )
    register_plugin(
        PuzzlePlugin(
            name="skyscrapers",
            config_type=skyscrapers_generator.SkyscrapersConfig,
            generate=skyscrapers_generator.generate_skyscrapers,
            solve=skyscrapers_solver.solve,
            validate_move=skyscrapers_validator.validate_move,
            is_solved=skyscrapers_validator.is_solved,
            get_hints=skyscrapers_hints.get_hints,
            explain_step=skyscrapers_hints.explain_step,
            encode=codec.skyscrapers_to_dict,
            decode=codec.skyscrapers_from_dict,
        )
    )


_register_builtins()
