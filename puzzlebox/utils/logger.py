"""Logging utilities shared by the generators, solvers and worker."""

from __future__ import annotations

import logging
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def configure_logging(level: int = logging.INFO, stream: Optional[IO[str]] = None) -> None:
    """Configure root logging with the project formatter.

    Searches run many short attempts, so per-node chatter stays at DEBUG and
    only completed generations and solves are reported at INFO. Hosts that
    embed the engine may skip this and configure logging themselves.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "puzzlebox")
