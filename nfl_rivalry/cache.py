# nfl_rivalry/cache.py
"""
In-process TTL cache for the parsed dataset and scoreboard payloads.

Per process only: several gunicorn workers each hold their own copy. Request
threads and the score poller share one instance, so the store is lock-guarded.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, TypeVar

T = TypeVar("T")


@dataclass
class _Slot:
    stored_at: float
    value: Any


class TTLCache:
    """Key/value store whose entries expire after a per-call TTL."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Start empty; clock is injectable for tests."""
        self._slots: Dict[str, _Slot] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get_or_set(self, key: str, ttl_seconds: float, loader: Callable[[], T]) -> T:
        """
        Return the value under key while it is younger than ttl_seconds,
        else call loader and keep its result.

        loader runs without the lock held, so two threads that miss together
        may both load; the later result is kept. If loader raises, the error
        propagates and the old slot stays as it was. None results are never
        served from the cache.
        """
        now = self._clock()
        with self._lock:
            slot = self._slots.get(key)

        if slot is not None and slot.value is not None and now - slot.stored_at < ttl_seconds:
            return slot.value

        fresh = loader()
        with self._lock:
            self._slots[key] = _Slot(stored_at=now, value=fresh)
        return fresh

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._slots.clear()
