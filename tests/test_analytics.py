"""Tests for head-to-head matchup analytics."""

import math

import pytest

from conftest import KC, LV, make_game
from nfl_rivalry import analytics
from nfl_rivalry.games_loader import load_games_csv


A = "Team A"
B = "Team B"


@pytest.fixture
def matchup(sample_csv):
    return analytics.filter_matchup(load_games_csv(sample_csv), KC, LV)


class TestFilterMatchup:

    def test_includes_historical_names_in_both_orientations(self, matchup):
        assert len(matchup) == 6
        assert {g.winner for g in matchup} >= {"Oakland Raiders", "Las Vegas Raiders", KC}

    def test_is_symmetric(self, sample_csv):
        games = load_games_csv(sample_csv)
        assert analytics.filter_matchup(games, KC, LV) == analytics.filter_matchup(games, LV, KC)

    def test_unknown_pair_is_empty(self, sample_csv):
        assert analytics.filter_matchup(load_games_csv(sample_csv), KC, "Boston Yanks") == []


class TestComputeRecord:

    def test_wins_and_ties(self, matchup):
        r = analytics.compute_record(matchup, KC, LV)
        assert (r.a_wins, r.b_wins, r.ties) == (3, 2, 1)
        assert r.total_games == r.a_wins + r.b_wins + r.ties

    def test_averages_skip_unscored_games(self, matchup):
        r = analytics.compute_record(matchup, KC, LV)
        assert r.a_avg_win_score == "31.5"
        assert r.a_avg_loss_score == "23.0"
        assert r.b_avg_win_score == "30.0"
        assert r.b_avg_loss_score == "20.5"

    def test_swapping_sides_swaps_the_record(self, matchup):
        ab = analytics.compute_record(matchup, KC, LV)
        ba = analytics.compute_record(matchup, LV, KC)
        assert (ab.a_wins, ab.b_wins, ab.ties) == (ba.b_wins, ba.a_wins, ba.ties)
        assert ab.a_avg_win_score == ba.b_avg_win_score

    def test_empty_matchup(self):
        r = analytics.compute_record([], A, B)
        assert (r.total_games, r.a_wins, r.b_wins, r.ties) == (0, 0, 0, 0)
        assert r.a_avg_win_score == "0"
        assert r.to_dict()["bAvgLossScore"] == "0"


class TestRecordSplits:

    def test_by_type(self):
        games = [
            make_game("2020-01-01", A, B, 10, 3),
            make_game("2020-02-01", B, A, 24, 21, game_type="Playoff"),
        ]
        split = analytics.compute_record_by_type(games, A, B)
        assert split["regular"].a_wins == 1
        assert split["playoff"].b_wins == 1
        assert split["playoff"].a_wins == 0

    def test_by_day_is_ordered_sunday_first(self, matchup):
        days = analytics.ordered_days(analytics.compute_record_by_day(matchup, KC, LV))
        assert [d for d, _ in days] == ["Sun", "Mon", "Sat"]
        assert sum(r.total_games for _, r in days) == len(matchup)

    def test_unknown_day_labels_follow_the_week(self):
        games = [
            make_game("2020-01-01", A, B, 10, 3, dow="Xyz"),
            make_game("2020-01-02", A, B, 10, 3, dow="Thu"),
        ]
        days = analytics.ordered_days(analytics.compute_record_by_day(games, A, B))
        assert [d for d, _ in days] == ["Thu", "Xyz"]


class TestBlowouts:

    def test_largest_margins_first_excluding_ties(self):
        games = [
            make_game("2020-01-01", A, B, 10, 7),
            make_game("2020-02-01", B, A, 31, 10),
            make_game("2020-03-01", A, B, 14, 14),
            make_game("2020-04-01", A, B, 20, 6),
        ]
        top = analytics.biggest_blowouts(games, n=2)
        assert [g.margin for g in top] == [21, 14]

    def test_unscored_games_are_excluded(self, matchup):
        top = analytics.biggest_blowouts(matchup, n=10)
        assert all(g.has_scores for g in top)
        assert [g.margin for g in top] == [18, 8, 6, 4]

    def test_equal_margins_keep_input_order(self):
        first = make_game("2020-01-01", A, B, 10, 3)
        second = make_game("2019-01-01", B, A, 17, 10)
        assert analytics.biggest_blowouts([first, second], n=2) == [first, second]


class TestStreaks:

    def test_example_sequence(self):
        games = [
            make_game("2020-01-01", A, B, 10, 3),
            make_game("2020-02-01", A, B, 10, 3),
            make_game("2020-03-01", B, A, 10, 3),
            make_game("2020-04-01", A, B, 7, 7),
            make_game("2020-05-01", A, B, 10, 3),
        ]
        s = analytics.compute_streaks(games, A, B)
        assert s.a_longest == 2
        assert s.b_longest == 1
        assert (s.current.team, s.current.count) == (A, 1)

    def test_input_order_does_not_matter(self):
        games = [
            make_game("2020-03-01", B, A, 10, 3),
            make_game("2020-01-01", A, B, 10, 3),
            make_game("2020-02-01", A, B, 10, 3),
        ]
        s = analytics.compute_streaks(games, A, B)
        assert s.a_longest == 2
        assert (s.current.team, s.current.count) == (B, 1)

    def test_tie_at_the_end_leaves_no_current_streak(self):
        games = [make_game("2020-01-01", A, B, 10, 3), make_game("2020-02-01", A, B, 3, 3)]
        s = analytics.compute_streaks(games, A, B)
        assert s.current.team is None
        assert s.current.count == 0
        assert s.to_dict()["currentStreak"] == {"team": None, "count": 0}

    def test_real_matchup(self, matchup):
        s = analytics.compute_streaks(matchup, KC, LV)
        assert (s.a_longest, s.b_longest) == (2, 1)
        assert (s.current.team, s.current.count) == (LV, 1)


class TestRecent:

    def test_newest_first(self, matchup):
        recent = analytics.recent_games(matchup, n=2)
        assert [g.date for g in recent] == ["2023-12-25", "2020-11-22"]

    def test_form(self, matchup):
        form = analytics.recent_form(matchup, KC, LV, n=3)
        assert (form.games, form.a_wins, form.b_wins, form.ties) == (3, 1, 2, 0)

    def test_window_larger_than_series(self, matchup):
        assert len(analytics.recent_games(matchup, n=50)) == 6


class TestTimeline:

    def test_chronological_and_signed_from_team_a(self, matchup):
        points = analytics.prepare_timeline(matchup, KC)
        assert [p.date for p in points] == sorted(p.date for p in points)
        by_date = {p.date: p for p in points}
        assert by_date["2019-09-15"].margin == 18
        assert by_date["2020-10-11"].margin == -8
        assert by_date["1970-11-01"].margin == 0
        assert by_date["1970-11-01"].winner == "Tie"

    def test_unscored_game_has_no_margin(self, matchup):
        point = {p.date: p for p in analytics.prepare_timeline(matchup, KC)}["2000-01-01"]
        assert point.margin is None
        assert point.total_points is None
        assert point.winner == KC

    def test_filter_by_type(self):
        games = [
            make_game("2020-01-01", A, B, 10, 3),
            make_game("2020-02-01", A, B, 24, 21, game_type="Playoff"),
        ]
        points = analytics.prepare_timeline(games, A)
        assert len(analytics.filter_timeline(points, include_regular=False)) == 1
        assert len(analytics.filter_timeline(points, include_playoff=False)) == 1
        assert analytics.filter_timeline(points, False, False) == []

    def test_to_dict_is_json_safe(self, matchup):
        for p in analytics.prepare_timeline(matchup, KC):
            d = p.to_dict()
            for v in d.values():
                assert not (isinstance(v, float) and math.isnan(v))


class TestShareText:

    def test_leader_and_ties(self, matchup):
        record = analytics.compute_record(matchup, KC, LV)
        lines = analytics.share_text(record, KC, LV).split("\n")
        assert lines[0] == f"NFL Rivalry: {KC} vs {LV}"
        assert lines[1] == f"All-Time Record: {KC} 3W - 2W - 1T"
        assert lines[2] == "6 total games played"
        assert lines[3] == f"{KC} leads the series!"
        assert lines[-1] == "#NFL #Rivalry #HeadToHead"

    def test_level_series(self):
        games = [make_game("2020-01-01", A, B, 10, 3), make_game("2020-02-01", B, A, 10, 3)]
        record = analytics.compute_record(games, A, B)
        text = analytics.share_text(record, A, B)
        assert "The series is tied!" in text
        assert "T\n" not in text
        assert analytics.series_leader(record, A, B) is None
