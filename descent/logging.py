"""Logging helpers for the descent package.

Every module obtains its logger through :func:`get_logger` so that all
solver output shares one handler configuration. The initial level can be set
with the ``DESCENT_LOG_LEVEL`` environment variable.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

_LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
_ENV_VAR = "DESCENT_LOG_LEVEL"


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return int(level)


_DEFAULT_LEVEL = _coerce_level(os.getenv(_ENV_VAR, "WARNING"))
_format = _LOG_FORMAT
_stream: Optional[object] = None

# Loggers handed out so far, keyed by full dotted name
_loggers: dict[str, logging.Logger] = {}


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached ``descent.*`` logger for ``name``.

    Args:
        name: Usually ``__name__`` of the calling module. Names outside the
            ``descent`` namespace are prefixed with ``descent.``. If None the
            package root logger is returned.

    Returns:
        A logger writing ``[LEVEL] name: message`` lines to stderr.

    Example:
        >>> from descent.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("starting heavy ball run")
    """
    if name is None or name == "descent":
        logger_name = "descent"
    elif name.startswith("descent."):
        logger_name = name
    else:
        logger_name = f"descent.{name}"

    cached = _loggers.get(logger_name)
    if cached is not None:
        return cached

    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)
        handler = logging.StreamHandler(_stream if _stream is not None else sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_format))
        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Change the level of every descent logger, present and future.

    Args:
        level: A ``logging`` constant or its name (``"DEBUG"``, ``"INFO"``...).
    """
    global _DEFAULT_LEVEL
    level = _coerce_level(level)
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Replace the handlers of all descent loggers.

    Typically called once by an application before running solvers, e.g. to
    route iteration reports to stdout at INFO level.

    Args:
        level: Logging level (default WARNING).
        format_string: Formatter pattern; defaults to ``[LEVEL] name: message``.
        stream: Destination stream (default ``sys.stderr``).
    """
    global _DEFAULT_LEVEL, _format, _stream
    level = _coerce_level(level)
    _format = format_string or _LOG_FORMAT
    _stream = stream
    formatter = logging.Formatter(_format)
    if stream is None:
        stream = sys.stderr

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _DEFAULT_LEVEL = level


__all__ = ["configure_logging", "get_logger", "set_log_level"]
