"""Logging setup for the orderflow logger hierarchy.

Modules log through ``logging.getLogger(__name__)``, so every logger in
the project lives under the ``orderflow`` namespace.  The domain layer
never logs; application handlers do.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any

_LOGGER_PREFIX = "orderflow"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False
_lock = threading.Lock()


def configure_logging(*, level: int = logging.WARNING, stream: Any = None) -> None:
    """Attach one stream handler to the orderflow logger.

    Only the first call adds the handler; every call sets the level, so a
    later ``--verbose`` still takes effect.
    """
    global _configured
    root_logger = logging.getLogger(_LOGGER_PREFIX)
    with _lock:
        root_logger.setLevel(level)
        if _configured:
            return
        _configured = True

        root_logger.propagate = False
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root_logger.addHandler(handler)


def reset_logging() -> None:
    """Reset logging configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
