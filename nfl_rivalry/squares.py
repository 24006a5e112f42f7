# nfl_rivalry/squares.py
"""
Super Bowl Squares game logic.

Responsibilities:
  - create a 10x10 pool with shuffled digit headers per axis
  - assign names to cells (single and bulk)
  - resolve the winning square for a pair of cumulative scores
  - record winners at most once per period label
  - payout table
  - winner detection from a live score snapshot
"""

from __future__ import annotations

import logging
import random
import re
import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import SquaresValidationError
from .franchises import normalize_name
from .models import (
    STATUS_COMPLETE,
    STATUS_IN_PROGRESS,
    DetectionResult,
    ScoreSnapshot,
    SquaresGame,
    WinnerRecord,
)

logger = logging.getLogger(__name__)

GRID_SIZE = 10
UNASSIGNED = "(unassigned)"
FINAL = "Final"
REGULATION_LABELS = ("Q1", "Q2", "Q3", "Q4")

# Share of the total pool paid per period. Periods not listed pay nothing.
DEFAULT_PAYOUTS: Dict[str, float] = {
    "Q1": 0.2,
    "Q2": 0.2,
    "Q3": 0.2,
    FINAL: 0.4,
}

_BULK_SPLIT_RE = re.compile(r"[,\n]")
_NON_ALNUM_RE = re.compile(r"[^0-9a-z ]+")
_SPACES_RE = re.compile(r"\s+")


def shuffle_digits(rng: Optional[random.Random] = None) -> List[int]:
    """
    Fisher-Yates shuffle of 0..9.

    Every one of the 10! orderings is equally likely given a uniform rng.
    """
    rng = rng or random.SystemRandom()
    a = list(range(GRID_SIZE))
    for i in range(len(a) - 1, 0, -1):
        j = rng.randrange(i + 1)
        a[i], a[j] = a[j], a[i]
    return a


def validate_wager(wager) -> float:
    """Coerce a wager to a positive finite float or raise SquaresValidationError."""
    try:
        value = float(wager)
    except (TypeError, ValueError):
        raise SquaresValidationError("Wager must be a number") from None
    if not value > 0 or value == float("inf"):
        raise SquaresValidationError("Wager must be a positive amount")
    return value


def create_game(team_a: str, team_b: str, wager=1.0, rng: Optional[random.Random] = None) -> SquaresGame:
    """
    Start a new pool.

    team_a labels the rows and team_b the columns. Raises SquaresValidationError
    for blank team labels or a non-positive wager.
    """
    a = (team_a or "").strip()
    b = (team_b or "").strip()
    if not a or not b:
        raise SquaresValidationError("Both team names are required")

    return SquaresGame(
        id=uuid.uuid4().hex,
        team_a=a,
        team_b=b,
        row_digits=shuffle_digits(rng),
        col_digits=shuffle_digits(rng),
        grid=[["" for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)],
        wager=validate_wager(wager),
        created_at=datetime.now(tz=timezone.utc).isoformat(),
    )


def set_wager(game: SquaresGame, wager) -> None:
    """Change the per-square wager; the old value stays on invalid input."""
    game.wager = validate_wager(wager)


def _check_cell(row: int, col: int) -> Tuple[int, int]:
    """Validate and coerce grid coordinates."""
    try:
        r, c = int(row), int(col)
    except (TypeError, ValueError):
        raise SquaresValidationError("Row and column must be integers") from None
    if not (0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE):
        raise SquaresValidationError(f"Cell ({r}, {c}) is outside the 10x10 grid")
    return r, c


def assign_cell(game: SquaresGame, row: int, col: int, name: str) -> None:
    """Put a name in a cell, replacing any previous occupant."""
    r, c = _check_cell(row, col)
    game.grid[r][c] = (name or "").strip()


def parse_bulk_names(text: str) -> List[str]:
    """Split comma- or newline-separated names, dropping blanks."""
    return [n.strip() for n in _BULK_SPLIT_RE.split(text or "") if n.strip()]


def bulk_assign(game: SquaresGame, names: Iterable[str]) -> int:
    """
    Fill cells row-major with the given names.

    Stops when names run out; cells past that point keep their occupants.
    Returns the number of cells written.
    """
    cleaned = [str(n).strip() for n in names if str(n).strip()]
    written = 0
    for idx, name in enumerate(cleaned[:GRID_SIZE * GRID_SIZE]):
        r, c = divmod(idx, GRID_SIZE)
        game.grid[r][c] = name
        written += 1
    return written


def count_assigned(grid: Sequence[Sequence[str]]) -> int:
    """Number of claimed cells."""
    return sum(1 for row in grid for cell in row if cell.strip())


def find_winner(game: SquaresGame, score_a: int, score_b: int, label: str) -> WinnerRecord:
    """
    The square matching the last digits of both cumulative scores.

    Pure: does not record anything on the game.
    """
    digit_a = int(score_a) % 10
    digit_b = int(score_b) % 10
    row = game.row_digits.index(digit_a)
    col = game.col_digits.index(digit_b)
    name = game.grid[row][col].strip() or UNASSIGNED

    return WinnerRecord(
        label=label,
        row=row,
        col=col,
        digit_a=digit_a,
        digit_b=digit_b,
        score_a=int(score_a),
        score_b=int(score_b),
        name=name,
    )


def record_winner(game: SquaresGame, winner: WinnerRecord) -> bool:
    """
    Record a period winner unless that label already has one.

    Returns True when the winner was recorded.
    """
    if winner.label in game.winners:
        return False

    game.winners[winner.label] = winner
    if winner.label == FINAL:
        game.status = STATUS_COMPLETE
    elif game.status != STATUS_COMPLETE:
        game.status = STATUS_IN_PROGRESS
    logger.info(
        "Squares %s winner: %s (%s %d - %s %d)",
        winner.label, winner.name, game.team_a, winner.score_a, game.team_b, winner.score_b,
    )
    return True


def calculate_payouts(wager) -> Dict[str, object]:
    """
    Prize pool and per-period payouts.

    Each payout is rounded to cents on its own; the parts are not forced to
    add up to the rounded total.
    """
    total = float(wager) * GRID_SIZE * GRID_SIZE
    payouts = {label: round(total * pct, 2) for label, pct in DEFAULT_PAYOUTS.items()}
    return {"total": total, "payouts": payouts}


def prize_for(label: str, wager) -> float:
    """Prize for a period label; labels without a payout share win 0."""
    return calculate_payouts(wager)["payouts"].get(label, 0.0)  # type: ignore[union-attr]


def period_label(index: int) -> str:
    """0..3 -> Q1..Q4, 4 -> OT, 5 -> OT2, 6 -> OT3 ..."""
    if index < len(REGULATION_LABELS):
        return REGULATION_LABELS[index]
    ot = index - len(REGULATION_LABELS) + 1
    return "OT" if ot == 1 else f"OT{ot}"


def completed_periods(snapshot: ScoreSnapshot) -> int:
    """
    Number of periods whose scoring is final.

    Once the game is over every reported period is complete; while it is live
    only the periods before the current one are.
    """
    reported = min(len(snapshot.home_linescores), len(snapshot.away_linescores))
    if snapshot.is_complete:
        return reported
    if snapshot.is_in_progress:
        return max(0, min(reported, snapshot.period - 1))
    return 0


# ---------------------------
# Team-name matching
# ---------------------------

def normalize_label(s: str) -> str:
    """Casefold, spell out '&', drop punctuation, collapse whitespace."""
    t = (s or "").casefold().replace("&", " and ")
    t = _NON_ALNUM_RE.sub(" ", t)
    return _SPACES_RE.sub(" ", t).strip()


def match_team(label: str, feed_name: str) -> bool:
    """
    Whether a user-entered team label refers to a live-feed team name.

    True on an exact normalized match, a match after franchise normalization,
    or when one name is a whole-word suffix of the other ("Chiefs" matches
    "Kansas City Chiefs"; "City" does not).
    """
    a = normalize_label(label)
    b = normalize_label(feed_name)
    if not a or not b:
        return False
    if a == b:
        return True
    if normalize_label(normalize_name(label.strip())) == normalize_label(normalize_name(feed_name.strip())):
        return True
    return b.endswith(" " + a) or a.endswith(" " + b)


def orient_scores(game: SquaresGame, snapshot: ScoreSnapshot) -> Optional[Tuple[List[int], List[int]]]:
    """
    Per-period scores as (team_a, team_b), or None when the feed teams
    cannot be matched to the pool's labels unambiguously.
    """
    a_home = match_team(game.team_a, snapshot.home_team) and match_team(game.team_b, snapshot.away_team)
    a_away = match_team(game.team_a, snapshot.away_team) and match_team(game.team_b, snapshot.home_team)

    if a_home and not a_away:
        return list(snapshot.home_linescores), list(snapshot.away_linescores)
    if a_away and not a_home:
        return list(snapshot.away_linescores), list(snapshot.home_linescores)
    return None


def detect_winners(game: SquaresGame, snapshot: ScoreSnapshot) -> DetectionResult:
    """
    Record winners for every completed period, plus Final once the game ends.

    Labels that already have a winner are skipped, so applying the same (or an
    older) snapshot again changes nothing. When the feed's teams cannot be
    matched to team_a/team_b nothing is recorded and a failure is reported.
    """
    oriented = orient_scores(game, snapshot)
    if oriented is None:
        msg = (
            f"Could not match live teams '{snapshot.home_team}' / '{snapshot.away_team}' "
            f"to '{game.team_a}' / '{game.team_b}'"
        )
        logger.warning(msg)
        return DetectionResult(recorded=(), failure=msg)

    a_scores, b_scores = oriented
    recorded: List[WinnerRecord] = []

    if not snapshot.is_pre_game and game.status != STATUS_COMPLETE:
        game.status = STATUS_IN_PROGRESS

    for idx in range(completed_periods(snapshot)):
        label = period_label(idx)
        if label in game.winners:
            continue
        winner = find_winner(game, sum(a_scores[:idx + 1]), sum(b_scores[:idx + 1]), label)
        if record_winner(game, winner):
            recorded.append(winner)

    if snapshot.is_complete and FINAL not in game.winners:
        winner = find_winner(game, sum(a_scores), sum(b_scores), FINAL)
        if record_winner(game, winner):
            recorded.append(winner)

    return DetectionResult(recorded=tuple(recorded), failure=None)
