# nfl_rivalry/log.py
"""Process-wide logging setup."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Install one stream handler on the root logger.

    Safe to call more than once (tests build several apps); existing handlers
    installed here are replaced rather than stacked.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for h in list(root.handlers):
        if getattr(h, "_nfl_rivalry", False):
            root.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._nfl_rivalry = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    return logging.getLogger("nfl_rivalry")
