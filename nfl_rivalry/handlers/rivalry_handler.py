# nfl_rivalry/handlers/rivalry_handler.py
"""
Handler/controller responsible for building the rivalry view model.

Keeps Flask routes simple by concentrating assembly logic here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .. import analytics
from ..franchises import team_colors
from ..models import RivalryViewModel
from ..services.rivalry_service import RivalryService


@dataclass
class RivalryHandler:
    """Orchestrates the dataset service and analytics into a single view model."""

    rivalry_service: RivalryService
    recent_limit: int = 10
    blowout_limit: int = 3

    def build(
        self,
        team_a: str,
        team_b: str,
        recent_limit: int | None = None,
        include_regular: bool = True,
        include_playoff: bool = True,
    ) -> RivalryViewModel:
        """
        Build a rivalry view model for the current request.

        Args:
            team_a: canonical franchise name (first side).
            team_b: canonical franchise name (second side).
            recent_limit: size of the recent-games window.
            include_regular: keep regular season games on the timeline.
            include_playoff: keep playoff games on the timeline.

        Returns:
            RivalryViewModel ready for template rendering or JSON.
        """
        n_recent = self.recent_limit if recent_limit is None else recent_limit
        games = self.rivalry_service.matchup(team_a, team_b)
        record = analytics.compute_record(games, team_a, team_b)

        timeline = analytics.filter_timeline(
            analytics.prepare_timeline(games, team_a),
            include_regular=include_regular,
            include_playoff=include_playoff,
        )

        return RivalryViewModel(
            team_a=team_a,
            team_b=team_b,
            colors_a=team_colors(team_a),
            colors_b=team_colors(team_b),
            games=len(games),
            record=record,
            by_type=analytics.compute_record_by_type(games, team_a, team_b),
            by_day=analytics.ordered_days(analytics.compute_record_by_day(games, team_a, team_b)),
            blowouts=analytics.biggest_blowouts(games, self.blowout_limit),
            streaks=analytics.compute_streaks(games, team_a, team_b),
            recent=analytics.recent_games(games, n_recent),
            recent_form=analytics.recent_form(games, team_a, team_b, n_recent),
            timeline=timeline,
            leader=analytics.series_leader(record, team_a, team_b),
            share_text=analytics.share_text(record, team_a, team_b),
        )

    def build_context(self, team_a: str, team_b: str) -> Dict[str, Any]:
        """
        Build a plain dict suitable for render_template(**context).
        """
        vm = self.build(team_a, team_b)
        return dict(vm.__dict__)
