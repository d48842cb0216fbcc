# src/specguard/logging.py
"""
Logging helpers for specguard.

Library modules call `get_logger(__name__)` and never configure handlers on
the root logger. Verbosity is driven by environment variables so the CLI can
flip it without threading a flag through every call:

    SPECGUARD_LOG_LEVEL=DEBUG   explicit level for the "specguard" logger tree
    SPECGUARD_VERBOSE=1         DEBUG level + tracebacks in log_exception()
"""

from __future__ import annotations

import logging
import os
from typing import Optional

_ROOT_NAME = "specguard"
_configured = False


def _is_verbose() -> bool:
    return os.environ.get("SPECGUARD_VERBOSE", "").lower() in ("1", "true", "yes")


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    root = logging.getLogger(_ROOT_NAME)
    root.addHandler(logging.NullHandler())

    level_name = os.environ.get("SPECGUARD_LOG_LEVEL")
    if _is_verbose():
        level_name = "DEBUG"
    if level_name:
        level = logging.getLevelName(level_name.upper())
        if isinstance(level, int):
            root.setLevel(level)
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
            root.addHandler(handler)
    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger inside the specguard namespace."""
    _configure_root()
    if not name or name == _ROOT_NAME:
        return logging.getLogger(_ROOT_NAME)
    if not name.startswith(_ROOT_NAME + "."):
        name = f"{_ROOT_NAME}.{name}"
    return logging.getLogger(name)


def log_exception(logger: logging.Logger, message: str, exc: BaseException) -> None:
    """
    Log a handled exception.

    Verbose mode keeps the traceback; otherwise a single debug line is
    enough since the caller is already surfacing the error.
    """
    if _is_verbose():
        logger.debug("%s: %s", message, exc, exc_info=exc)
    else:
        logger.debug("%s: %s: %s", message, type(exc).__name__, exc)
