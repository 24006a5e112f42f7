# nfl_rivalry/config.py
"""
Configuration for the NFL rivalry dashboard.

This module centralizes all tunable settings (dataset location, ESPN API base,
cache TTLs, polling interval, squares persistence, access tokens and logging).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
import secrets
from typing import List


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, returning default on missing/invalid values."""
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_json(name: str, default):
    """
    Read a JSON environment variable and parse it.

    Intended for:
      - AUTH_TOKENS_JSON: ["token-one", "token-two"]

    Returns default on missing/invalid JSON.
    """
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return json.loads(raw)
    except Exception:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    """
    Read a comma-delimited string list from the environment.

    Example:
      AUTH_TOKENS="abc123,def456"
    """
    raw = os.getenv(name)
    if not raw:
        return default
    out = [x.strip() for x in raw.split(",") if x.strip()]
    return out or default


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable app configuration.

    Notes on auth config:
      - auth_tokens: access tokens accepted as `Authorization: Bearer <token>`
        or exchanged for a session via /auth/login. An empty list means no
        token can authenticate, so gated routes always answer 401.
    """

    # Dataset
    data_csv_path: str = os.getenv("DATA_CSV_PATH", "data/1926-2024_COMBINED_NFL_SCORES.csv")
    data_cache_ttl_seconds: int = _env_int("DATA_CACHE_TTL_SECONDS", 3600)

    # Live scores
    espn_api_base: str = os.getenv(
        "ESPN_API_BASE", "https://site.api.espn.com/apis/site/v2/sports/football/nfl"
    )
    scoreboard_cache_ttl_seconds: int = _env_int("SCOREBOARD_CACHE_TTL_SECONDS", 30)
    poll_interval_seconds: int = _env_int("POLL_INTERVAL_SECONDS", 60)

    # Squares persistence
    squares_store_path: str = os.getenv("SQUARES_STORE_PATH", "data/squares.json")

    # View defaults
    limit_recent: int = _env_int("LIMIT_RECENT", 10)
    limit_blowouts: int = _env_int("LIMIT_BLOWOUTS", 3)

    # Auth / sessions
    # Unset SECRET_KEY => random per-process key; sessions do not survive a restart.
    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY") or secrets.token_hex(32))
    auth_tokens: List[str] = field(default_factory=list)

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        """
        Fill access tokens from optional env vars when none were passed in.

        Supported env options:
          - AUTH_TOKENS (comma list)
          - AUTH_TOKENS_JSON (JSON list)
        """
        # dataclass frozen => use object.__setattr__
        if self.auth_tokens:
            return

        tokens = _env_json("AUTH_TOKENS_JSON", None)
        if isinstance(tokens, list) and all(isinstance(x, str) for x in tokens):
            object.__setattr__(self, "auth_tokens", [t for t in tokens if t.strip()])
        else:
            object.__setattr__(self, "auth_tokens", _env_list("AUTH_TOKENS", []))
