# nfl_rivalry/games_loader.py
"""
Dataset ingress.

Responsibilities:
  - read the combined scores CSV (Date, DOW, WT, LT, WTS, LTS, Type, Season)
  - turn raw rows into GameRecord objects
  - list the franchises a user can pick from
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd
from dateutil import parser as date_parser

from .errors import DataUnavailableError
from .franchises import CURRENT_TEAMS, normalize_name
from .models import GameRecord, Score

logger = logging.getLogger(__name__)

REGULAR_SEASON = "Regular Season"
PLAYOFF = "Playoff"

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_int(v: Any) -> Score:
    """
    Parse the leading integer of a value.

    "24" -> 24, "24*" -> 24, "" / "abc" / None -> NaN. Never raises; NaN is the
    dataset's only tolerated malformed value and callers guard arithmetic on it.
    """
    if isinstance(v, bool):
        return math.nan
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if math.isfinite(v) else math.nan
    m = _INT_PREFIX_RE.match(str(v) if v is not None else "")
    return int(m.group(1)) if m else math.nan


def parse_date(raw: str) -> Optional[date]:
    """Best-effort parse of a dataset date string; None when unparseable."""
    if not raw:
        return None
    try:
        return date_parser.parse(raw).date()
    except (ValueError, OverflowError):
        return None


def _text(row: Mapping[str, Any], key: str) -> str:
    v = row.get(key)
    if v is None:
        return ""
    if isinstance(v, float) and math.isnan(v):
        return ""
    return str(v).strip()


def parse_games(rows: Iterable[Mapping[str, Any]]) -> List[GameRecord]:
    """
    Convert raw dataset rows into GameRecord objects.

    Rows missing a date or either team are dropped. Output keeps input order.
    """
    out: List[GameRecord] = []
    skipped = 0

    for row in rows:
        raw_date = _text(row, "Date")
        wt = _text(row, "WT")
        lt = _text(row, "LT")
        if not raw_date or not wt or not lt:
            skipped += 1
            continue

        out.append(
            GameRecord(
                date=raw_date,
                dow=_text(row, "DOW"),
                winner=wt,
                loser=lt,
                winner_norm=normalize_name(wt),
                loser_norm=normalize_name(lt),
                winner_score=parse_int(row.get("WTS")),
                loser_score=parse_int(row.get("LTS")),
                game_type=_text(row, "Type") or REGULAR_SEASON,
                season=parse_int(row.get("Season")),
                played_on=parse_date(raw_date),
            )
        )

    if skipped:
        logger.info("Skipped %d dataset rows missing date or team names", skipped)

    return out


def load_games_csv(path: str) -> List[GameRecord]:
    """
    Read the combined scores CSV and parse it.

    Raises:
        DataUnavailableError if the file is missing or unreadable.
    """
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        logger.error("Could not read game data from %s: %s", path, e)
        raise DataUnavailableError() from e

    frame.columns = [str(c).strip() for c in frame.columns]
    games = parse_games(frame.to_dict(orient="records"))
    logger.info("Loaded %d games from %s", len(games), path)
    return games


def unique_teams(games: Iterable[GameRecord]) -> List[str]:
    """Every normalized franchise name present in the data, sorted."""
    teams = set()
    for g in games:
        teams.add(g.winner_norm)
        teams.add(g.loser_norm)
    return sorted(teams)


def team_options(games: Iterable[GameRecord]) -> List[str]:
    """Current franchises first, then defunct/historical clubs found in the data."""
    current = set(CURRENT_TEAMS)
    historical = [t for t in unique_teams(games) if t not in current]
    return list(CURRENT_TEAMS) + historical
