# nfl_rivalry/espn_client.py
"""
Thin HTTP client wrapper for ESPN's public NFL site API.
"""

from __future__ import annotations

import requests
from typing import Any, Dict, Optional


class ESPNClient:
    """A minimal client for retrieving JSON from the ESPN NFL API base."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None) -> None:
        """Store the base URL and build request headers."""
        self.base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._headers = {"User-Agent": "nfl-rivalry-dashboard/1.0"}

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None, timeout: int = 10) -> Dict[str, Any]:
        """
        Execute a GET request to base_url + path and return parsed JSON.

        Raises:
            requests.HTTPError on non-2xx responses.
        """
        url = f"{self.base_url}{path}"
        r = self._session.get(url, params=params, timeout=timeout, headers=self._headers)
        r.raise_for_status()
        return r.json()

    def scoreboard(self) -> Dict[str, Any]:
        """Fetch the current NFL scoreboard (all events for the current week)."""
        return self.get_json("/scoreboard")

    def summary(self, event_id: str) -> Dict[str, Any]:
        """Fetch the game summary (boxscore, linescores, status) for an event id."""
        return self.get_json("/summary", params={"event": event_id})
