"""Logging configuration for the storefront backend.

All modules log through children of the ``storefront`` logger so the level
and handlers are configured in one place.
"""

import logging
import sys

__all__ = ["setup_logging", "get_logger"]

ROOT_LOGGER = "storefront"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler to the ``storefront`` logger.

    Args:
        level: Level name (``DEBUG``, ``INFO``, ...). Unknown names fall back to INFO.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Idempotent across app reloads
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger namespaced under ``storefront.``."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
