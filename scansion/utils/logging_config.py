"""Attach a console handler to the ``scansion`` logger hierarchy.

Library code only emits records; :func:`configure_logging` is called by the
command line entry point (and may be called by notebooks) to make dictionary
loads and classification summaries visible.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional, Union

LOG_LEVEL_ENV = "SCANSION_LOG_LEVEL"
PACKAGE_LOGGER = "scansion"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

LevelLike = Union[str, int, None]


def resolve_level(level: LevelLike, default: int = logging.WARNING) -> int:
    """Turn ``"debug"``, ``"10"`` or ``10`` into a logging level number."""

    if level is None or level == "":
        return default
    if isinstance(level, int):
        return level
    text = str(level).strip()
    if text.isdigit():
        return int(text)
    resolved = logging.getLevelName(text.upper())
    return resolved if isinstance(resolved, int) else default


def _owned_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if getattr(handler, "_scansion_console", False):
            return handler
    return None


def configure_logging(
    level: LevelLike = None,
    *,
    stream: Optional[IO[str]] = None,
    fmt: str = DEFAULT_FORMAT,
) -> int:
    """Route ``scansion`` records to ``stream`` (stderr by default).

    ``level`` falls back to ``SCANSION_LOG_LEVEL`` and then to ``WARNING``.
    Repeated calls update the level and stream of the same handler rather
    than stacking handlers. Returns the level that was applied.
    """

    resolved = resolve_level(level if level is not None else os.environ.get(LOG_LEVEL_ENV))
    logger = logging.getLogger(PACKAGE_LOGGER)

    handler = _owned_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler._scansion_console = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    elif stream is not None and isinstance(handler, logging.StreamHandler):
        handler.setStream(stream)

    handler.setFormatter(logging.Formatter(fmt))
    handler.setLevel(resolved)
    logger.setLevel(resolved)
    return resolved


def reset_logging() -> None:
    """Remove the handler installed by :func:`configure_logging`."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    handler = _owned_handler(logger)
    if handler is not None:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "reset_logging", "resolve_level"]
