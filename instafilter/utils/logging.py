"""Logging helpers for Instafilter."""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER: Optional[logging.Logger] = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or a child of it when *name* is given."""

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("instafilter")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(logging.INFO)
    if name is None:
        return _LOGGER
    return _LOGGER.getChild(name)


def set_level(level: Union[int, str]) -> None:
    """Change the level of the package logger (names like ``"DEBUG"`` accepted)."""

    if isinstance(level, str):
        level = level.upper()
    get_logger().setLevel(level)
