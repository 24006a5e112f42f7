# nfl_rivalry/store.py
"""
Persistence for the single squares pool.

The pool is one JSON blob stored under a fixed key in a small JSON document.
A missing, unreadable or malformed document reads as "no saved game".
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Optional

from .models import SquaresGame

logger = logging.getLogger(__name__)

STORAGE_KEY = "sbSquaresGame"


class SquaresStore:
    """Load/save/clear the squares pool at a file path."""

    def __init__(self, path: str, key: str = STORAGE_KEY) -> None:
        """Bind to a file path and the key the pool is stored under."""
        self.path = path
        self.key = key

    def load(self) -> Optional[SquaresGame]:
        """Return the saved pool, or None when absent or unreadable."""
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                doc = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable squares store %s: %s", self.path, e)
            return None

        raw = doc.get(self.key) if isinstance(doc, dict) else None
        if raw is None:
            return None

        try:
            return SquaresGame.from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Ignoring malformed squares game in %s: %s", self.path, e)
            return None

    def save(self, game: SquaresGame) -> None:
        """Write the pool, replacing the previous document atomically."""
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp = tempfile.mkstemp(prefix=".squares-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump({self.key: game.to_dict()}, fh)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def clear(self) -> None:
        """Delete the stored pool; a missing file is fine."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
