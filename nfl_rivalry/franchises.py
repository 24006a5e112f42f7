# nfl_rivalry/franchises.py
"""
Franchise lineage and team branding.

Historical names in the dataset (relocations, renames, wartime mergers) are
mapped to the current franchise so a rivalry covers the whole history of both
clubs. Defunct clubs with no modern successor map to themselves.
"""

from __future__ import annotations

from typing import Dict, List

FRANCHISE_MAP: Dict[str, str] = {
    # Arizona Cardinals
    "Chicago Cardinals": "Arizona Cardinals",
    "St. Louis Cardinals": "Arizona Cardinals",
    "Phoenix Cardinals": "Arizona Cardinals",
    "Chi/Pit Cards/Steelers": "Arizona Cardinals",  # 1944 Card-Pitt

    # Indianapolis Colts
    "Baltimore Colts": "Indianapolis Colts",

    # Detroit Lions
    "Portsmouth Spartans": "Detroit Lions",

    # Washington Commanders
    "Boston Braves": "Washington Commanders",
    "Boston Redskins": "Washington Commanders",
    "Washington Redskins": "Washington Commanders",
    "Washington Football Team": "Washington Commanders",

    # Tennessee Titans
    "Houston Oilers": "Tennessee Titans",
    "Tennessee Oilers": "Tennessee Titans",

    # New England Patriots
    "Boston Patriots": "New England Patriots",

    # Las Vegas Raiders
    "Oakland Raiders": "Las Vegas Raiders",
    "Los Angeles Raiders": "Las Vegas Raiders",

    # Los Angeles Chargers
    "San Diego Chargers": "Los Angeles Chargers",

    # Los Angeles Rams
    "Cleveland Rams": "Los Angeles Rams",
    "St. Louis Rams": "Los Angeles Rams",

    # Pittsburgh Steelers
    "Pittsburgh Pirates": "Pittsburgh Steelers",

    # 1943 Steagles, credited to the Eagles
    "Phi/Pit Eagles/Steelers": "Philadelphia Eagles",

    # Boston Yanks lineage (folded, no successor)
    "Boston Yanks": "Boston Yanks",
    "New York Bulldogs": "New York Bulldogs",
    "New York Yanks": "New York Yanks",
    "Bos/Bkn Yanks/Tigers": "Bos/Bkn Yanks/Tigers",

    # New York Jets (AFL)
    "New York Titans": "New York Jets",

    # Kansas City Chiefs
    "Dallas Texans": "Kansas City Chiefs",
}

# Primary/secondary colours keyed by current franchise name.
TEAM_COLORS: Dict[str, Dict[str, str]] = {
    "Arizona Cardinals": {"primary": "#97233F", "secondary": "#FFB612"},
    "Atlanta Falcons": {"primary": "#A71930", "secondary": "#000000"},
    "Baltimore Ravens": {"primary": "#241773", "secondary": "#9E7C0C"},
    "Buffalo Bills": {"primary": "#00338D", "secondary": "#C60C30"},
    "Carolina Panthers": {"primary": "#0085CA", "secondary": "#101820"},
    "Chicago Bears": {"primary": "#0B162A", "secondary": "#C83803"},
    "Cincinnati Bengals": {"primary": "#FB4F14", "secondary": "#000000"},
    "Cleveland Browns": {"primary": "#311D00", "secondary": "#FF3C00"},
    "Dallas Cowboys": {"primary": "#003594", "secondary": "#869397"},
    "Denver Broncos": {"primary": "#FB4F14", "secondary": "#002244"},
    "Detroit Lions": {"primary": "#0076B6", "secondary": "#B0B7BC"},
    "Green Bay Packers": {"primary": "#203731", "secondary": "#FFB612"},
    "Houston Texans": {"primary": "#03202F", "secondary": "#A71930"},
    "Indianapolis Colts": {"primary": "#002C5F", "secondary": "#A2AAAD"},
    "Jacksonville Jaguars": {"primary": "#006778", "secondary": "#9F792C"},
    "Kansas City Chiefs": {"primary": "#E31837", "secondary": "#FFB81C"},
    "Las Vegas Raiders": {"primary": "#000000", "secondary": "#A5ACAF"},
    "Los Angeles Chargers": {"primary": "#0080C6", "secondary": "#FFC20E"},
    "Los Angeles Rams": {"primary": "#003594", "secondary": "#FFA300"},
    "Miami Dolphins": {"primary": "#008E97", "secondary": "#FC4C02"},
    "Minnesota Vikings": {"primary": "#4F2683", "secondary": "#FFC62F"},
    "New England Patriots": {"primary": "#002244", "secondary": "#C60C30"},
    "New Orleans Saints": {"primary": "#D3BC8D", "secondary": "#101820"},
    "New York Giants": {"primary": "#0B2265", "secondary": "#A71930"},
    "New York Jets": {"primary": "#125740", "secondary": "#000000"},
    "Philadelphia Eagles": {"primary": "#004C54", "secondary": "#A5ACAF"},
    "Pittsburgh Steelers": {"primary": "#FFB612", "secondary": "#101820"},
    "San Francisco 49ers": {"primary": "#AA0000", "secondary": "#B3995D"},
    "Seattle Seahawks": {"primary": "#002244", "secondary": "#69BE28"},
    "Tampa Bay Buccaneers": {"primary": "#D50A0A", "secondary": "#FF7900"},
    "Tennessee Titans": {"primary": "#0C2340", "secondary": "#4B92DB"},
    "Washington Commanders": {"primary": "#5A1414", "secondary": "#FFB612"},
}

DEFAULT_COLORS: Dict[str, str] = {"primary": "#013369", "secondary": "#D50A0A"}

CURRENT_TEAMS: List[str] = sorted(TEAM_COLORS)


def normalize_name(name: str) -> str:
    """Return the current franchise for a (possibly historical) team name."""
    return FRANCHISE_MAP.get(name, name)


def team_colors(name: str) -> Dict[str, str]:
    """Colours for a raw or current team name, falling back to league colours."""
    return dict(TEAM_COLORS.get(normalize_name(name), DEFAULT_COLORS))
