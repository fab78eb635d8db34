"""Logging utilities for snapgeom.

All loggers live below the ``snapgeom`` logger so applications can tune the
library with one call, and nothing here touches the process root logger.
Obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = 'snapgeom'
HANDLER_NAME = 'snapgeom.stdout'
_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')


def _ensure_package_root() -> logging.Logger:
    """Give the 'snapgeom' logger exactly one stream handler named HANDLER_NAME.

    NullHandlers attached by the package ``__init__`` are replaced; handlers
    added by applications or test runners are left alone. The logger does
    not propagate to the root logger.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        for h in list(root.handlers):
            if isinstance(h, logging.NullHandler):
                root.removeHandler(h)
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(level: Union[str, int] = 'INFO') -> logging.Logger:
    """Set the level of the whole 'snapgeom' logger family and return its root."""
    root = _ensure_package_root()
    root.setLevel(_to_level(level))
    return root


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'snapgeom' namespace.

    Without an explicit level the logger is left at NOTSET so it inherits
    whatever configure_logging() set on the package root.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f'{ROOT_LOGGER_NAME}.{name}'
    _ensure_package_root()
    log = logging.getLogger(name)
    log.setLevel(_to_level(level) if level is not None else logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging', 'ROOT_LOGGER_NAME', 'HANDLER_NAME']
