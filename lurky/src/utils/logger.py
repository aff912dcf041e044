"""
Lurky - Logging
================
Pre-configured logger factory shared by every Lurky module.

Verbosity comes from ``settings.LOG_LEVEL`` when set, otherwise from
``settings.ENV``:
  • ``"dev"``  → DEBUG level
  • ``"prod"`` → WARNING level

Usage:
    from lurky.src.utils.logger import get_logger
    logger = get_logger(__name__)
    logger.info("[RAG] Pipeline total: %.1fms", total_ms)
"""

import logging
import sys

from lurky.config.settings import settings

_ENV_LEVEL_MAP = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
}

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_default_level() -> int:
    """Translate ``LOG_LEVEL`` (name or number) or fall back to the ENV map."""
    if settings.LOG_LEVEL:
        raw = settings.LOG_LEVEL.strip().upper()
        if raw.isdigit():
            return int(raw)
        level = logging.getLevelName(raw)
        if isinstance(level, int):
            return level
    return _ENV_LEVEL_MAP.get(settings.ENV, logging.INFO)


_DEFAULT_LEVEL = _resolve_default_level()


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Return a named logger writing to stdout with the shared format.

    Args:
        name:  Typically ``__name__`` of the calling module.
        level: Explicit level override.  If *None*, the configured
               default is used.
    """
    resolved_level = level if level is not None else _DEFAULT_LEVEL
    logger = logging.getLogger(name)

    # Handlers are attached once per logger name
    if not logger.handlers:
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(resolved_level)
        handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(handler)

        logger.propagate = False

    return logger
