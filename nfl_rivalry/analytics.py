# nfl_rivalry/analytics.py
"""
Head-to-head matchup analytics.

Every function here is pure: it takes a list of GameRecord objects (usually a
matchup set from filter_matchup) plus the two canonical franchise names, and
returns new values without touching its input.

Team A / team B are the caller's ordering; "a_*" fields always refer to team A.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .games_loader import PLAYOFF, REGULAR_SEASON
from .models import (
    CurrentStreak,
    GameRecord,
    RecentForm,
    RecordSummary,
    StreakSummary,
    TimelinePoint,
    is_number,
)

WEEK_ORDER = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def _date_key(g: GameRecord) -> date:
    """Sort key; unparseable dates sort first."""
    return g.played_on or date.min


def _avg(total: float, count: int) -> str:
    """Mean to one decimal place, or "0" when nothing was counted."""
    if count <= 0:
        return "0"
    return f"{total / count:.1f}"


def filter_matchup(games: Iterable[GameRecord], team_a: str, team_b: str) -> List[GameRecord]:
    """Games between the two franchises, in either winner/loser orientation."""
    return [
        g for g in games
        if (g.winner_norm == team_a and g.loser_norm == team_b)
        or (g.winner_norm == team_b and g.loser_norm == team_a)
    ]


def compute_record(games: Sequence[GameRecord], team_a: str, team_b: str) -> RecordSummary:
    """
    All-time record for team A vs team B.

    Averages are each side's mean score in the games it won (and lost). Games
    whose scores are missing still count toward wins/ties but not averages.
    """
    a_wins = b_wins = ties = 0
    a_win_pts = a_loss_pts = b_win_pts = b_loss_pts = 0
    a_win_n = a_loss_n = b_win_n = b_loss_n = 0

    for g in games:
        if g.is_tie:
            ties += 1
            continue

        scored = g.has_scores
        if g.winner_norm == team_a:
            a_wins += 1
            if scored:
                a_win_pts += g.winner_score
                b_loss_pts += g.loser_score
                a_win_n += 1
                b_loss_n += 1
        else:
            b_wins += 1
            if scored:
                b_win_pts += g.winner_score
                a_loss_pts += g.loser_score
                b_win_n += 1
                a_loss_n += 1

    return RecordSummary(
        total_games=len(games),
        a_wins=a_wins,
        b_wins=b_wins,
        ties=ties,
        a_avg_win_score=_avg(a_win_pts, a_win_n),
        a_avg_loss_score=_avg(a_loss_pts, a_loss_n),
        b_avg_win_score=_avg(b_win_pts, b_win_n),
        b_avg_loss_score=_avg(b_loss_pts, b_loss_n),
    )


def compute_record_by_type(games: Sequence[GameRecord], team_a: str, team_b: str) -> Dict[str, RecordSummary]:
    """Record split into regular season and playoff games."""
    regular = [g for g in games if g.game_type == REGULAR_SEASON]
    playoff = [g for g in games if g.game_type == PLAYOFF]
    return {
        "regular": compute_record(regular, team_a, team_b),
        "playoff": compute_record(playoff, team_a, team_b),
    }


def compute_record_by_day(games: Sequence[GameRecord], team_a: str, team_b: str) -> Dict[str, RecordSummary]:
    """Record per day-of-week label, keyed in first-seen order."""
    days: Dict[str, List[GameRecord]] = {}
    for g in games:
        days.setdefault(g.dow, []).append(g)
    return {day: compute_record(day_games, team_a, team_b) for day, day_games in days.items()}


def ordered_days(by_day: Dict[str, RecordSummary]) -> List[Tuple[str, RecordSummary]]:
    """by_day entries in Sun..Sat order; labels outside the week follow, sorted."""
    known = [(d, by_day[d]) for d in WEEK_ORDER if d in by_day]
    extra = sorted((d, r) for d, r in by_day.items() if d not in WEEK_ORDER)
    return known + extra


def biggest_blowouts(games: Sequence[GameRecord], n: int = 3) -> List[GameRecord]:
    """Top n games by winning margin (ties and unscored games excluded)."""
    decided = [g for g in games if not g.is_tie and g.has_scores]
    # sorted() is stable, so equal margins keep input order
    return sorted(decided, key=lambda g: g.margin, reverse=True)[:max(n, 0)]


def compute_streaks(games: Sequence[GameRecord], team_a: str, team_b: str) -> StreakSummary:
    """
    Longest winning runs for each side and the run still active at the end.

    A tie ends both runs.
    """
    a_longest = b_longest = 0
    a_current = b_current = 0

    for g in sorted(games, key=_date_key):
        if g.is_tie:
            a_current = b_current = 0
        elif g.winner_norm == team_a:
            a_current += 1
            b_current = 0
            a_longest = max(a_longest, a_current)
        else:
            b_current += 1
            a_current = 0
            b_longest = max(b_longest, b_current)

    if a_current > 0:
        current = CurrentStreak(team=team_a, count=a_current)
    elif b_current > 0:
        current = CurrentStreak(team=team_b, count=b_current)
    else:
        current = CurrentStreak(team=None, count=0)

    return StreakSummary(a_longest=a_longest, b_longest=b_longest, current=current)


def recent_games(games: Sequence[GameRecord], n: int = 10) -> List[GameRecord]:
    """The n most recent games, newest first."""
    return sorted(games, key=_date_key, reverse=True)[:max(n, 0)]


def recent_form(games: Sequence[GameRecord], team_a: str, team_b: str, n: int = 10) -> RecentForm:
    """Wins and ties for each side across the n most recent meetings."""
    recent = recent_games(games, n)
    a_wins = sum(1 for g in recent if not g.is_tie and g.winner_norm == team_a)
    b_wins = sum(1 for g in recent if not g.is_tie and g.winner_norm == team_b)
    ties = sum(1 for g in recent if g.is_tie)
    return RecentForm(games=len(recent), a_wins=a_wins, b_wins=b_wins, ties=ties)


def _opt_int(v) -> Optional[int]:
    return int(v) if is_number(v) else None


def prepare_timeline(games: Sequence[GameRecord], team_a: str) -> List[TimelinePoint]:
    """
    Chart points in chronological order.

    margin is positive when team A won, negative when the opponent won,
    0 on a tie and None when the scores are missing.
    """
    points: List[TimelinePoint] = []
    for g in sorted(games, key=_date_key):
        a_won = g.winner_norm == team_a
        if g.has_scores:
            margin: Optional[int] = int(g.margin) if a_won else -int(g.margin)
            total: Optional[int] = int(g.total_points)
        else:
            margin = total = None

        if g.is_tie:
            winner = "Tie"
        else:
            winner = team_a if a_won else g.winner_norm

        points.append(
            TimelinePoint(
                date=g.date,
                season=_opt_int(g.season),
                margin=margin,
                total_points=total,
                winner=winner,
                wt=g.winner,
                lt=g.loser,
                wts=_opt_int(g.winner_score),
                lts=_opt_int(g.loser_score),
                game_type=g.game_type,
                dow=g.dow,
                is_tie=g.is_tie,
            )
        )
    return points


def filter_timeline(
    points: Sequence[TimelinePoint],
    include_regular: bool = True,
    include_playoff: bool = True,
) -> List[TimelinePoint]:
    """Keep only the game types the chart should show."""
    out = []
    for p in points:
        if p.game_type == PLAYOFF:
            if include_playoff:
                out.append(p)
        elif include_regular:
            out.append(p)
    return out


def series_leader(record: RecordSummary, team_a: str, team_b: str) -> Optional[str]:
    """The franchise ahead in the series, or None when level."""
    if record.a_wins > record.b_wins:
        return team_a
    if record.b_wins > record.a_wins:
        return team_b
    return None


def share_text(record: RecordSummary, team_a: str, team_b: str) -> str:
    """Plain-text summary suitable for sharing a rivalry."""
    ties = f" - {record.ties}T" if record.ties > 0 else ""
    leader = series_leader(record, team_a, team_b)
    lead_line = f"{leader} leads the series!" if leader else "The series is tied!"

    return "\n".join(
        [
            f"NFL Rivalry: {team_a} vs {team_b}",
            f"All-Time Record: {team_a} {record.a_wins}W - {record.b_wins}W{ties}",
            f"{record.total_games} total games played",
            lead_line,
            "",
            "#NFL #Rivalry #HeadToHead",
        ]
    )
