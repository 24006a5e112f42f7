"""Shared fixtures: a small scores CSV, game builders and a fake ESPN client."""

import pytest
import requests

from nfl_rivalry.franchises import normalize_name
from nfl_rivalry.games_loader import parse_date
from nfl_rivalry.models import GameRecord, SquaresGame


SAMPLE_CSV = """Date,DOW,WT,LT,WTS,LTS,Type,Season
1970-11-01,Sun,Oakland Raiders,Kansas City Chiefs,17,17,Regular Season,1970
2019-09-15,Sun,Kansas City Chiefs,Oakland Raiders,28,10,Regular Season,2019
2020-10-11,Sun,Las Vegas Raiders,Kansas City Chiefs,40,32,Regular Season,2020
2020-11-22,Sun,Kansas City Chiefs,Las Vegas Raiders,35,31,Regular Season,2020
2023-12-25,Mon,Las Vegas Raiders,Kansas City Chiefs,20,14,Regular Season,2023
2024-01-13,Sat,Kansas City Chiefs,Miami Dolphins,26,7,Playoff,2023
,Sun,Kansas City Chiefs,Denver Broncos,10,3,Regular Season,2000
1945-10-07,Sun,Boston Yanks,Pittsburgh Steelers,28,7,Regular Season,1945
2000-01-01,Sat,Kansas City Chiefs,Las Vegas Raiders,abc,3,,1999
"""

KC = "Kansas City Chiefs"
LV = "Las Vegas Raiders"


@pytest.fixture
def sample_csv(tmp_path):
    path = tmp_path / "scores.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return str(path)


def make_game(date, winner, loser, ws, ls, game_type="Regular Season", dow="Sun"):
    """A GameRecord as the loader would build it."""
    return GameRecord(
        date=date,
        dow=dow,
        winner=winner,
        loser=loser,
        winner_norm=normalize_name(winner),
        loser_norm=normalize_name(loser),
        winner_score=ws,
        loser_score=ls,
        game_type=game_type,
        season=int(date[:4]),
        played_on=parse_date(date),
    )


def make_pool(team_a="Kansas City Chiefs", team_b="Philadelphia Eagles", wager=1.0):
    """A squares pool with identity digit axes, so digit d sits at index d."""
    return SquaresGame(
        id="pool1",
        team_a=team_a,
        team_b=team_b,
        row_digits=list(range(10)),
        col_digits=list(range(10)),
        grid=[[f"r{r}c{c}" for c in range(10)] for r in range(10)],
        wager=wager,
        created_at="2025-02-09T23:30:00+00:00",
    )


def _competitor(name, abbr, home_away, lines):
    return {
        "homeAway": home_away,
        "team": {"displayName": name, "abbreviation": abbr},
        "linescores": [{"displayValue": str(v)} for v in lines],
    }


def summary_payload(home, away, home_lines, away_lines, period, state, detail=""):
    """An ESPN /summary payload trimmed to the fields the parser reads."""
    return {
        "header": {
            "competitions": [
                {
                    "competitors": [
                        _competitor(home[0], home[1], "home", home_lines),
                        _competitor(away[0], away[1], "away", away_lines),
                    ],
                    "status": {"period": period, "type": {"state": state, "shortDetail": detail}},
                }
            ]
        }
    }


def scoreboard_event(event_id, name, teams):
    return {
        "id": event_id,
        "name": name,
        "competitions": [{"competitors": [{"team": {"displayName": t}} for t in teams]}],
    }


class FakeESPNClient:
    """Stands in for ESPNClient; records calls and never touches the network."""

    def __init__(self, events=None, summaries=None, error=None):
        self.events = events or []
        self.summaries = summaries or {}
        self.error = error
        self.scoreboard_calls = 0
        self.summary_calls = []

    def scoreboard(self):
        self.scoreboard_calls += 1
        if self.error:
            raise self.error
        return {"events": self.events}

    def summary(self, event_id):
        self.summary_calls.append(event_id)
        if self.error:
            raise self.error
        if event_id not in self.summaries:
            raise requests.HTTPError(f"404 for event {event_id}")
        return self.summaries[event_id]


SUPER_BOWL_ID = "401671889"

# Chiefs away, Eagles home; cumulative KC 7/17/20/27, PHI 3/17/17/23
FINAL_SUMMARY = summary_payload(
    ("Philadelphia Eagles", "PHI"),
    ("Kansas City Chiefs", "KC"),
    [3, 14, 0, 6],
    [7, 10, 3, 7],
    period=4,
    state="post",
    detail="Final",
)


@pytest.fixture
def super_bowl_client():
    return FakeESPNClient(
        events=[
            scoreboard_event("401671000", "Buffalo Bills at Miami Dolphins", ["Buffalo Bills", "Miami Dolphins"]),
            scoreboard_event(
                SUPER_BOWL_ID,
                "Kansas City Chiefs at Philadelphia Eagles",
                ["Philadelphia Eagles", "Kansas City Chiefs"],
            ),
        ],
        summaries={SUPER_BOWL_ID: FINAL_SUMMARY},
    )
