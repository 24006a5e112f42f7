# nfl_rivalry/services/scores_service.py
"""
Live score logic.

Responsibilities:
  - fetch the scoreboard payload (cached briefly)
  - locate the event for a squares pool (team match or "Super Bowl" name)
  - fetch an event summary and normalize it into a ScoreSnapshot
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from ..cache import TTLCache
from ..errors import ScoreSourceError
from ..espn_client import ESPNClient
from ..models import ScoreSnapshot
from ..squares import match_team

logger = logging.getLogger(__name__)


def safe_int(v, default=0) -> int:
    """Convert a value to int safely; return default on failures."""
    try:
        return int(float(v))
    except Exception:
        return default


def get_nested(obj: Any, path: list, default=None):
    """Safely access nested dict keys / list indexes by path; return default if missing."""
    cur = obj
    for k in path:
        if isinstance(k, int):
            if not isinstance(cur, list) or not -len(cur) <= k < len(cur):
                return default
            cur = cur[k]
        else:
            if not isinstance(cur, dict):
                return default
            cur = cur.get(k)
    return cur if cur is not None else default


def parse_scores(summary: Dict[str, Any]) -> Optional[ScoreSnapshot]:
    """
    Normalize an event summary payload into a ScoreSnapshot.

    Returns None when the payload carries no competition.
    """
    competition = get_nested(summary, ["header", "competitions", 0])
    if not isinstance(competition, dict):
        return None

    competitors = [c for c in (competition.get("competitors") or []) if isinstance(c, dict)]
    home = next((c for c in competitors if c.get("homeAway") == "home"), None)
    away = next((c for c in competitors if c.get("homeAway") == "away"), None)
    if home is None:
        home = competitors[0] if competitors else {}
    if away is None:
        away = competitors[1] if len(competitors) > 1 else {}

    def linescores(c: Dict[str, Any]) -> List[int]:
        return [safe_int(ls.get("displayValue"), 0) for ls in (c.get("linescores") or []) if isinstance(ls, dict)]

    status = competition.get("status") or {}
    status_type = status.get("type") or {}

    return ScoreSnapshot(
        home_team=get_nested(home, ["team", "displayName"], "Home"),
        away_team=get_nested(away, ["team", "displayName"], "Away"),
        home_abbr=get_nested(home, ["team", "abbreviation"], "HME"),
        away_abbr=get_nested(away, ["team", "abbreviation"], "AWY"),
        home_linescores=tuple(linescores(home)),
        away_linescores=tuple(linescores(away)),
        period=safe_int(status.get("period"), 0),
        state=str(status_type.get("state") or ""),
        status_detail=str(status_type.get("shortDetail") or status_type.get("detail") or ""),
    )


@dataclass
class ScoresService:
    """Service responsible for finding an event and reading its scores."""

    client: ESPNClient
    cache: TTLCache
    scoreboard_ttl: int

    def _scoreboard_payload(self) -> Dict[str, Any]:
        """Fetch scoreboard payload using cached loading."""
        return self.cache.get_or_set(
            key="espn:scoreboard",
            ttl_seconds=self.scoreboard_ttl,
            loader=self.client.scoreboard,
        )

    def find_game(self, team_a: str, team_b: str) -> Optional[str]:
        """
        Return the ESPN event id for the pool's matchup, or None.

        An event qualifies when its name mentions the Super Bowl or when its two
        competitors match both team labels.

        Raises:
            ScoreSourceError when the scoreboard cannot be fetched.
        """
        try:
            payload = self._scoreboard_payload()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Scoreboard fetch failed: %s", e)
            raise ScoreSourceError(f"Scoreboard fetch failed: {e}") from e

        events = payload.get("events") if isinstance(payload, dict) else None
        for event in events if isinstance(events, list) else []:
            if not isinstance(event, dict):
                continue

            name = str(event.get("name") or "").lower()
            competitors = get_nested(event, ["competitions", 0, "competitors"], [])
            event_teams = [get_nested(c, ["team", "displayName"], "") for c in competitors if isinstance(c, dict)]

            is_super_bowl = "super bowl" in name
            teams_match = any(match_team(team_a, t) for t in event_teams) and any(
                match_team(team_b, t) for t in event_teams
            )

            if is_super_bowl or teams_match:
                event_id = event.get("id")
                if event_id:
                    logger.info("Matched %s vs %s to ESPN event %s", team_a, team_b, event_id)
                    return str(event_id)

        return None

    def fetch_snapshot(self, event_id: str) -> ScoreSnapshot:
        """
        Fetch and parse the current scores for an event.

        Raises:
            ScoreSourceError on transport errors or an unusable payload.
        """
        try:
            summary = self.client.summary(event_id)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Summary fetch failed for event %s: %s", event_id, e)
            raise ScoreSourceError(f"Summary fetch failed: {e}") from e

        snapshot = parse_scores(summary)
        if snapshot is None:
            raise ScoreSourceError("Could not parse game data from ESPN")
        return snapshot
