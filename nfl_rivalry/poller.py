# nfl_rivalry/poller.py
"""
Cancellable repeating timer for live score polling.

One background daemon thread per running poller. The callback runs right away
on start() and then once per interval until it returns True (game over) or
stop() is called.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ScorePoller:
    """Run a callback on a fixed interval until told to stop."""

    def __init__(self, callback: Callable[[], bool], interval_seconds: float = 60) -> None:
        self._callback = callback
        self.interval_seconds = interval_seconds
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        t = self._thread
        return t is not None and t.is_alive() and not self._stop.is_set()

    def start(self) -> bool:
        """
        Start polling. Returns False when a poll loop is already running.
        """
        with self._lock:
            if self.running:
                return False
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop,), name="score-poller", daemon=True
            )
            self._thread.start()
        logger.info("Score polling started (every %ss)", self.interval_seconds)
        return True

    def stop(self, timeout: float = 5.0) -> None:
        """Cancel the loop and wait briefly for the thread to exit."""
        with self._lock:
            thread = self._thread
            self._stop.set()
            self._thread = None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            logger.info("Score polling stopped")

    def _run(self, stop: threading.Event) -> None:
        while not stop.is_set():
            try:
                done = self._callback()
            except Exception:
                logger.exception("Score poll failed; will retry in %ss", self.interval_seconds)
                done = False

            if done:
                logger.info("Score polling finished: game complete")
                stop.set()
                break

            stop.wait(self.interval_seconds)
