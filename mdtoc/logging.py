"""Logging utilities for mdtoc."""

from __future__ import annotations

import logging

_LOGGER_NAME = "mdtoc"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the mdtoc hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Configure the mdtoc logger with a single stderr handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[mdtoc] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
