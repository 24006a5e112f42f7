# nfl_rivalry/models.py
"""
Domain models for the rivalry dashboard and the squares game.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

Score = Union[int, float]  # float only for the NaN sentinel


def is_number(v: Any) -> bool:
    """True for finite ints/floats (bools excluded)."""
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


@dataclass(frozen=True)
class GameRecord:
    """One historical game, as parsed from a dataset row."""
    date: str
    dow: str
    winner: str
    loser: str
    winner_norm: str
    loser_norm: str
    winner_score: Score
    loser_score: Score
    game_type: str
    season: Score
    played_on: Optional[date] = None

    @property
    def has_scores(self) -> bool:
        return is_number(self.winner_score) and is_number(self.loser_score)

    @property
    def margin(self) -> Score:
        return self.winner_score - self.loser_score

    @property
    def total_points(self) -> Score:
        return self.winner_score + self.loser_score

    @property
    def is_tie(self) -> bool:
        # NaN never equals anything, so games without scores are never ties
        return self.winner_score == self.loser_score

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe primitives (NaN sentinels become None)."""
        return {
            "date": self.date,
            "dow": self.dow,
            "winner": self.winner,
            "loser": self.loser,
            "winnerNorm": self.winner_norm,
            "loserNorm": self.loser_norm,
            "winnerScore": self.winner_score if is_number(self.winner_score) else None,
            "loserScore": self.loser_score if is_number(self.loser_score) else None,
            "type": self.game_type,
            "season": self.season if is_number(self.season) else None,
            "margin": self.margin if self.has_scores else None,
            "totalPoints": self.total_points if self.has_scores else None,
            "isTie": self.is_tie,
        }


@dataclass(frozen=True)
class RecordSummary:
    """Head-to-head record between two franchises."""
    total_games: int
    a_wins: int
    b_wins: int
    ties: int
    a_avg_win_score: str = "0"
    a_avg_loss_score: str = "0"
    b_avg_win_score: str = "0"
    b_avg_loss_score: str = "0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalGames": self.total_games,
            "aWins": self.a_wins,
            "bWins": self.b_wins,
            "ties": self.ties,
            "aAvgWinScore": self.a_avg_win_score,
            "aAvgLossScore": self.a_avg_loss_score,
            "bAvgWinScore": self.b_avg_win_score,
            "bAvgLossScore": self.b_avg_loss_score,
        }


@dataclass(frozen=True)
class CurrentStreak:
    """The streak still alive at the most recent game (team=None when none)."""
    team: Optional[str]
    count: int


@dataclass(frozen=True)
class StreakSummary:
    a_longest: int
    b_longest: int
    current: CurrentStreak

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aLongest": self.a_longest,
            "bLongest": self.b_longest,
            "currentStreak": {"team": self.current.team, "count": self.current.count},
        }


@dataclass(frozen=True)
class RecentForm:
    """Win/tie counts over the most recent games of a series."""
    games: int
    a_wins: int
    b_wins: int
    ties: int


@dataclass(frozen=True)
class TimelinePoint:
    """A single game shaped for charting, signed from team A's perspective."""
    date: str
    season: Optional[int]
    margin: Optional[int]
    total_points: Optional[int]
    winner: str
    wt: str
    lt: str
    wts: Optional[int]
    lts: Optional[int]
    game_type: str
    dow: str
    is_tie: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "season": self.season,
            "margin": self.margin,
            "totalPoints": self.total_points,
            "winner": self.winner,
            "wt": self.wt,
            "lt": self.lt,
            "wts": self.wts,
            "lts": self.lts,
            "type": self.game_type,
            "dow": self.dow,
            "isTie": self.is_tie,
        }


@dataclass(frozen=True)
class RivalryViewModel:
    """All data needed to render a rivalry page or its JSON payload."""
    team_a: str
    team_b: str
    colors_a: Dict[str, str]
    colors_b: Dict[str, str]
    games: int
    record: RecordSummary
    by_type: Dict[str, RecordSummary]
    by_day: Sequence[tuple]
    blowouts: Sequence[GameRecord]
    streaks: StreakSummary
    recent: Sequence[GameRecord]
    recent_form: RecentForm
    timeline: Sequence[TimelinePoint]
    leader: Optional[str]
    share_text: str


# ---------------------------
# Squares
# ---------------------------

@dataclass(frozen=True)
class WinnerRecord:
    """The square that wins a period."""
    label: str
    row: int
    col: int
    digit_a: int
    digit_b: int
    score_a: int
    score_b: int
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quarter": self.label,
            "row": self.row,
            "col": self.col,
            "digitA": self.digit_a,
            "digitB": self.digit_b,
            "scoreA": self.score_a,
            "scoreB": self.score_b,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WinnerRecord":
        return cls(
            label=str(d["quarter"]),
            row=int(d["row"]),
            col=int(d["col"]),
            digit_a=int(d["digitA"]),
            digit_b=int(d["digitB"]),
            score_a=int(d["scoreA"]),
            score_b=int(d["scoreB"]),
            name=str(d["name"]),
        )


STATUS_CONFIGURED = "configured"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETE = "complete"


@dataclass
class SquaresGame:
    """
    Session-scoped squares pool.

    team_a owns the rows (row_digits), team_b the columns (col_digits).
    grid[row][col] holds the participant name, "" when unclaimed.
    """
    id: str
    team_a: str
    team_b: str
    row_digits: List[int]
    col_digits: List[int]
    grid: List[List[str]]
    wager: float
    created_at: str
    winners: Dict[str, WinnerRecord] = field(default_factory=dict)
    external_game_id: Optional[str] = None
    status: str = STATUS_CONFIGURED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "teamA": self.team_a,
            "teamB": self.team_b,
            "rowDigits": list(self.row_digits),
            "colDigits": list(self.col_digits),
            "grid": [list(r) for r in self.grid],
            "wager": self.wager,
            "winners": {k: w.to_dict() for k, w in self.winners.items()},
            "gameId": self.external_game_id,
            "status": self.status,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SquaresGame":
        """
        Rebuild a game from its persisted form.

        Raises KeyError/TypeError/ValueError on malformed input; callers decide
        whether that means "no saved game".
        """
        row_digits = [int(x) for x in d["rowDigits"]]
        col_digits = [int(x) for x in d["colDigits"]]
        if sorted(row_digits) != list(range(10)) or sorted(col_digits) != list(range(10)):
            raise ValueError("digit axes must be permutations of 0-9")

        grid = [[str(c) for c in row] for row in d["grid"]]
        if len(grid) != 10 or any(len(row) != 10 for row in grid):
            raise ValueError("grid must be 10x10")

        winners = {str(k): WinnerRecord.from_dict(v) for k, v in (d.get("winners") or {}).items()}
        game_id = d.get("gameId")

        return cls(
            id=str(d["id"]),
            team_a=str(d["teamA"]),
            team_b=str(d["teamB"]),
            row_digits=row_digits,
            col_digits=col_digits,
            grid=grid,
            wager=float(d["wager"]),
            created_at=str(d.get("createdAt") or ""),
            winners=winners,
            external_game_id=str(game_id) if game_id else None,
            status=str(d.get("status") or STATUS_CONFIGURED),
        )


@dataclass(frozen=True)
class ScoreSnapshot:
    """Simplified live score state for one event."""
    home_team: str
    away_team: str
    home_abbr: str
    away_abbr: str
    home_linescores: Sequence[int]
    away_linescores: Sequence[int]
    period: int
    state: str  # "pre" | "in" | "post"
    status_detail: str

    @property
    def home_total(self) -> int:
        return sum(self.home_linescores)

    @property
    def away_total(self) -> int:
        return sum(self.away_linescores)

    @property
    def is_complete(self) -> bool:
        return self.state == "post"

    @property
    def is_in_progress(self) -> bool:
        return self.state == "in"

    @property
    def is_pre_game(self) -> bool:
        return self.state == "pre"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "homeTeam": self.home_team,
            "awayTeam": self.away_team,
            "homeAbbr": self.home_abbr,
            "awayAbbr": self.away_abbr,
            "homeLinescores": list(self.home_linescores),
            "awayLinescores": list(self.away_linescores),
            "homeTotalScore": self.home_total,
            "awayTotalScore": self.away_total,
            "quarter": self.period,
            "status": self.state,
            "statusDetail": self.status_detail,
            "isComplete": self.is_complete,
            "isInProgress": self.is_in_progress,
            "isPreGame": self.is_pre_game,
        }


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of applying a score snapshot to a squares game."""
    recorded: Sequence[WinnerRecord] = ()
    failure: Optional[str] = None
