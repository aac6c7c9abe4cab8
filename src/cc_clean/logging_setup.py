"""Centralized logging bootstrap for cc-clean.

// [LAW:single-enforcer] Logger handler wiring is enforced in this module only.
// [LAW:one-source-of-truth] Runtime log level/path are derived here and returned to callers.

Stdout carries the rendered transcript, so handlers only ever write to stderr
or to a file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path


@dataclass(frozen=True)
class LoggingRuntime:
    """Resolved runtime logging configuration."""

    level_name: str
    level: int
    file_path: str  # empty when file logging is off


_RUNTIME: LoggingRuntime | None = None


def _parse_level(raw: str) -> tuple[str, int]:
    normalized = str(raw or "WARNING").strip().upper()
    level = getattr(logging, normalized, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    level_name = logging.getLevelName(level)
    return str(level_name), int(level)


def _make_stream_handler(level: int) -> logging.Handler:
    # StreamHandler() defaults to sys.stderr.
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s %(message)s"))
    return handler


def _make_file_handler(level: int, file_path: str) -> logging.Handler:
    handler = RotatingFileHandler(
        file_path,
        maxBytes=20 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


def configure(level: str | None = None) -> LoggingRuntime:
    """Configure the cc_clean logger hierarchy.

    Level comes from ``level``, else CC_CLEAN_LOG_LEVEL, else WARNING.
    A rotating file handler is added when CC_CLEAN_LOG_FILE is set.

    Idempotent: repeated calls return the originally configured runtime.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level_name, level_int = _parse_level(level or os.environ.get("CC_CLEAN_LOG_LEVEL", "WARNING"))
    file_path = os.environ.get("CC_CLEAN_LOG_FILE", "")

    # [LAW:single-enforcer] All cc_clean module loggers propagate to this one logger.
    logger = logging.getLogger("cc_clean")
    logger.setLevel(level_int)
    logger.propagate = False
    logger.handlers.clear()
    logger.addHandler(_make_stream_handler(level_int))
    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_make_file_handler(level_int, file_path))

    logging.captureWarnings(True)

    _RUNTIME = LoggingRuntime(level_name=level_name, level=level_int, file_path=file_path)
    return _RUNTIME


def get_runtime() -> LoggingRuntime | None:
    """Return configured logging runtime, if configure() has run."""
    return _RUNTIME


def reset() -> None:
    """Forget the configured runtime and detach handlers. For tests."""
    global _RUNTIME
    _RUNTIME = None
    logger = logging.getLogger("cc_clean")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
