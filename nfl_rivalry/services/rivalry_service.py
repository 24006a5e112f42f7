# nfl_rivalry/services/rivalry_service.py
"""
Historical dataset access.

Responsibilities:
  - load the scores CSV once per TTL window
  - hand out matchup sets and the team picker list
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..analytics import filter_matchup
from ..cache import TTLCache
from ..errors import DataUnavailableError
from ..games_loader import load_games_csv, team_options
from ..models import GameRecord


@dataclass
class RivalryService:
    """Service responsible for the in-memory game list."""

    cache: TTLCache
    csv_path: str
    data_ttl: int

    def games(self) -> List[GameRecord]:
        """
        All parsed games (cached).

        Raises:
            DataUnavailableError when the CSV cannot be read.
        """
        return self.cache.get_or_set(
            key=f"games:{self.csv_path}",
            ttl_seconds=self.data_ttl,
            loader=lambda: load_games_csv(self.csv_path),
        )

    def matchup(self, team_a: str, team_b: str) -> List[GameRecord]:
        return filter_matchup(self.games(), team_a, team_b)

    def team_options(self) -> List[str]:
        return team_options(self.games())

    def read_raw_csv(self) -> str:
        """
        The dataset file as text, for clients that parse it themselves.

        Raises:
            DataUnavailableError when the file cannot be read.
        """
        try:
            with open(self.csv_path, "r", encoding="utf-8") as fh:
                return fh.read()
        except OSError as e:
            raise DataUnavailableError() from e
