# nfl_rivalry/services/squares_service.py
"""
Squares pool lifecycle.

Responsibilities:
  - own the single SquaresGame for this process
  - persist it after every mutation
  - fetch live scores (manually or via the poller) and apply winner detection
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

from .. import squares
from ..errors import ScoreSourceError, SquaresStateError
from ..models import ScoreSnapshot, SquaresGame, WinnerRecord
from ..poller import ScorePoller
from ..store import SquaresStore
from .scores_service import ScoresService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefreshResult:
    """What one score fetch produced."""
    snapshot: Optional[ScoreSnapshot]
    recorded: Sequence[WinnerRecord] = ()
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scores": self.snapshot.to_dict() if self.snapshot else None,
            "newWinners": [w.to_dict() for w in self.recorded],
            "warning": self.warning,
        }


class SquaresService:
    """Single owner of the squares pool, its persistence and its poller."""

    def __init__(self, store: SquaresStore, scores: ScoresService, poll_interval: float = 60) -> None:
        """Load any saved pool; polling starts only on request."""
        self.store = store
        self.scores = scores
        self._lock = threading.RLock()
        self._game: Optional[SquaresGame] = store.load()
        self._snapshot: Optional[ScoreSnapshot] = None
        self._last_warning: Optional[str] = None
        self._poller = ScorePoller(self._poll_once, interval_seconds=poll_interval)

    # -------------------------
    # State
    # -------------------------

    @property
    def tracking(self) -> bool:
        return self._poller.running

    def current(self) -> Optional[SquaresGame]:
        """The pool, or None when none has been created."""
        with self._lock:
            return self._game

    def _require(self) -> SquaresGame:
        if self._game is None:
            raise SquaresStateError()
        return self._game

    def _save(self) -> None:
        self.store.save(self._require())

    def state(self) -> Dict[str, Any]:
        """JSON-ready view of the pool plus live tracking info."""
        with self._lock:
            game = self._game
            if game is None:
                return {"game": None, "status": "uninitialized", "tracking": False}

            pool = squares.calculate_payouts(game.wager)
            return {
                "game": game.to_dict(),
                "status": game.status,
                "assigned": squares.count_assigned(game.grid),
                "prizePool": pool["total"],
                "payouts": pool["payouts"],
                "prizes": {label: squares.prize_for(label, game.wager) for label in game.winners},
                "tracking": self.tracking,
                "scores": self._snapshot.to_dict() if self._snapshot else None,
                "warning": self._last_warning,
            }

    # -------------------------
    # Mutations
    # -------------------------

    def create(self, team_a: str, team_b: str, wager=1.0) -> SquaresGame:
        """Replace any existing pool with a fresh one."""
        game = squares.create_game(team_a, team_b, wager)
        self._poller.stop()
        with self._lock:
            self._game = game
            self._snapshot = None
            self._last_warning = None
            self._save()
        logger.info("Created squares pool %s: %s vs %s ($%.2f/square)", game.id, game.team_a, game.team_b, game.wager)
        return game

    def assign(self, row: int, col: int, name: str) -> SquaresGame:
        """Put a name in one cell and persist."""
        with self._lock:
            game = self._require()
            squares.assign_cell(game, row, col, name)
            self._save()
            return game

    def bulk(self, names: Iterable[str]) -> int:
        """Fill cells row-major from names; returns the number written."""
        with self._lock:
            game = self._require()
            written = squares.bulk_assign(game, names)
            self._save()
            return written

    def set_wager(self, wager) -> SquaresGame:
        """Change the per-square wager and persist."""
        with self._lock:
            game = self._require()
            squares.set_wager(game, wager)
            self._save()
            return game

    def reset(self) -> None:
        """Stop tracking and forget the pool."""
        self._poller.stop()
        with self._lock:
            self._game = None
            self._snapshot = None
            self._last_warning = None
            self.store.clear()
        logger.info("Squares pool reset")

    # -------------------------
    # Live scores
    # -------------------------

    def refresh(self) -> RefreshResult:
        """
        Fetch the latest scores and record any new period winners.

        Safe to call while the poller is running: winners are recorded at most
        once per label, so overlapping fetches cannot double-record.

        Raises:
            SquaresStateError if there is no pool.
            ScoreSourceError if the score source fails.
        """
        with self._lock:
            game = self._require()
            pool_id, team_a, team_b = game.id, game.team_a, game.team_b
            event_id = game.external_game_id

        if not event_id:
            event_id = self.scores.find_game(team_a, team_b)
            if not event_id:
                msg = (
                    f"Could not find a matching game for {team_a} vs {team_b} on the current "
                    f"scoreboard. The game may not be scheduled today."
                )
                with self._lock:
                    self._last_warning = msg
                return RefreshResult(snapshot=None, warning=msg)

        snapshot = self.scores.fetch_snapshot(event_id)

        with self._lock:
            game = self._game
            if game is None or game.id != pool_id:
                # pool replaced or reset while the fetch was in flight
                return RefreshResult(snapshot=snapshot, warning="Squares pool changed during refresh")

            game.external_game_id = event_id
            result = squares.detect_winners(game, snapshot)
            self._snapshot = snapshot
            self._last_warning = result.failure
            self._save()

        if snapshot.is_complete:
            self._poller.stop()

        return RefreshResult(snapshot=snapshot, recorded=result.recorded, warning=result.failure)

    def _poll_once(self) -> bool:
        """Poller callback; True tells the poller to stop."""
        try:
            result = self.refresh()
        except SquaresStateError:
            return True
        except ScoreSourceError as e:
            with self._lock:
                self._last_warning = e.message
            return False
        return bool(result.snapshot and result.snapshot.is_complete)

    def start_tracking(self) -> bool:
        """Start polling live scores; False when already polling."""
        with self._lock:
            self._require()
        return self._poller.start()

    def stop_tracking(self) -> None:
        """Stop polling; recorded winners are kept."""
        self._poller.stop()

    def shutdown(self) -> None:
        """Process-exit hook: stop the poller without waiting long."""
        self._poller.stop(timeout=1.0)
