"""Custom exception hierarchy for puzzle generation and solving."""


class PuzzleError(Exception):
    """Base exception for puzzle engine failures."""


class InvalidArgumentError(PuzzleError, ValueError):
    """Raised for unsupported sizes, difficulties or other bad parameters."""


class MalformedPuzzleError(InvalidArgumentError):
    """Raised when a puzzle payload does not have the expected structure."""


class GenerationError(PuzzleError):
    """Raised when a generator exhausts its retry budget."""
