"""Logging helpers shared by the library and the command line."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "galleria"

logger = logging.getLogger(LOGGER_NAME)

_INSTALLED_HANDLERS: set[str] = set()


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger or one of its children."""

    if not name:
        return logger
    return logger.getChild(name)


def ensure_console_logger(
    target: logging.Logger,
    handler_name: str,
    *,
    level: int = logging.INFO,
) -> None:
    """Attach a single stderr handler named *handler_name* to *target*."""

    if handler_name in _INSTALLED_HANDLERS:
        target.setLevel(level)
        return
    for handler in target.handlers:
        if getattr(handler, "name", None) == handler_name:
            _INSTALLED_HANDLERS.add(handler_name)
            target.setLevel(level)
            return
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.name = handler_name
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    target.addHandler(handler)
    target.setLevel(level)
    _INSTALLED_HANDLERS.add(handler_name)


__all__ = ["LOGGER_NAME", "ensure_console_logger", "get_logger", "logger"]
