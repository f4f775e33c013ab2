"""Logging setup for command-line use.

Library modules only create loggers under the ``chromakit`` namespace;
handlers are attached here, by the application.
"""

from __future__ import annotations

import logging

_CONFIGURED = False


def setup_logging(level: str | int = "WARNING") -> logging.Logger:
    """Attach a stderr handler to the ``chromakit`` logger (once)."""
    global _CONFIGURED  # noqa: PLW0603

    logger = logging.getLogger("chromakit")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(level)

    if not _CONFIGURED:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        logger.addHandler(handler)
        _CONFIGURED = True

    return logger
