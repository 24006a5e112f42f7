"""Tests for the squares pool lifecycle: persistence, refresh and tracking."""

import time

import pytest

from conftest import SUPER_BOWL_ID, FakeESPNClient, scoreboard_event, summary_payload
from nfl_rivalry.cache import TTLCache
from nfl_rivalry.errors import SquaresStateError, SquaresValidationError
from nfl_rivalry.models import STATUS_COMPLETE, STATUS_IN_PROGRESS
from nfl_rivalry.services import ScoresService, SquaresService
from nfl_rivalry.store import SquaresStore


def build(tmp_path, client, poll_interval=0.01):
    scores = ScoresService(client=client, cache=TTLCache(), scoreboard_ttl=0)
    store = SquaresStore(str(tmp_path / "squares.json"))
    return SquaresService(store=store, scores=scores, poll_interval=poll_interval)


class TestMutations:

    def test_no_pool_state(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        assert svc.state() == {"game": None, "status": "uninitialized", "tracking": False}

    def test_actions_without_a_pool(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        with pytest.raises(SquaresStateError):
            svc.assign(0, 0, "Dana")
        with pytest.raises(SquaresStateError):
            svc.refresh()
        with pytest.raises(SquaresStateError):
            svc.start_tracking()

    def test_create_assign_and_reload(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        svc.create("Kansas City Chiefs", "Philadelphia Eagles", wager=5)
        svc.assign(1, 2, "Dana")
        assert svc.bulk(["Ann", "Bo"]) == 2

        reloaded = build(tmp_path, super_bowl_client)
        game = reloaded.current()
        assert game.grid[1][2] == "Dana"
        assert game.grid[0][:2] == ["Ann", "Bo"]
        assert reloaded.state()["prizePool"] == 500

    def test_invalid_wager_keeps_the_old_one(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        svc.create("A", "B", wager=2)
        with pytest.raises(SquaresValidationError):
            svc.set_wager(0)
        assert svc.current().wager == 2

    def test_reset_forgets_the_pool(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        svc.create("A", "B")
        svc.reset()
        assert svc.current() is None
        assert build(tmp_path, super_bowl_client).current() is None


class TestRefresh:

    def test_final_scores_record_every_winner(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        svc.create("Kansas City Chiefs", "Philadelphia Eagles")

        result = svc.refresh()

        assert result.warning is None
        assert [w.label for w in result.recorded] == ["Q1", "Q2", "Q3", "Q4", "Final"]
        state = svc.state()
        assert state["status"] == STATUS_COMPLETE
        assert state["game"]["gameId"] == SUPER_BOWL_ID
        assert state["scores"]["awayTotalScore"] == 27
        assert state["prizes"]["Final"] == 40
        assert state["prizes"]["Q4"] == 0

    def test_winners_survive_a_restart(self, tmp_path, super_bowl_client):
        build(tmp_path, super_bowl_client).create("Chiefs", "Eagles")
        svc = build(tmp_path, super_bowl_client)
        svc.refresh()
        assert set(build(tmp_path, super_bowl_client).current().winners) == {"Q1", "Q2", "Q3", "Q4", "Final"}

    def test_second_refresh_records_nothing(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        svc.create("Chiefs", "Eagles")
        svc.refresh()
        assert svc.refresh().recorded == ()

    def test_event_id_is_looked_up_once(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        svc.create("Chiefs", "Eagles")
        svc.refresh()
        svc.refresh()
        assert super_bowl_client.scoreboard_calls == 1
        assert super_bowl_client.summary_calls == [SUPER_BOWL_ID, SUPER_BOWL_ID]

    def test_no_game_on_scoreboard(self, tmp_path):
        client = FakeESPNClient(events=[scoreboard_event("1", "Bills at Dolphins", ["Buffalo Bills", "Miami Dolphins"])])
        svc = build(tmp_path, client)
        svc.create("Chiefs", "Eagles")

        result = svc.refresh()

        assert result.snapshot is None
        assert "Could not find a matching game" in result.warning
        assert svc.state()["warning"] == result.warning
        assert client.summary_calls == []

    def test_live_game_is_in_progress(self, tmp_path):
        live = summary_payload(
            ("Philadelphia Eagles", "PHI"), ("Kansas City Chiefs", "KC"), [3, 14], [7, 3], period=2, state="in"
        )
        client = FakeESPNClient(
            events=[scoreboard_event("7", "Chiefs at Eagles", ["Philadelphia Eagles", "Kansas City Chiefs"])],
            summaries={"7": live},
        )
        svc = build(tmp_path, client)
        svc.create("Chiefs", "Eagles")

        result = svc.refresh()

        assert [w.label for w in result.recorded] == ["Q1"]
        assert svc.state()["status"] == STATUS_IN_PROGRESS


class TestTracking:

    def test_polling_stops_when_game_is_final(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        svc.create("Chiefs", "Eagles")

        assert svc.start_tracking() is True

        deadline = time.time() + 2.0
        while svc.tracking and time.time() < deadline:
            time.sleep(0.01)

        assert not svc.tracking
        assert svc.current().status == STATUS_COMPLETE

    def test_stop_tracking(self, tmp_path):
        live = summary_payload(("Philadelphia Eagles", "PHI"), ("Kansas City Chiefs", "KC"), [], [], 1, "in")
        client = FakeESPNClient(
            events=[scoreboard_event("7", "Chiefs at Eagles", ["Philadelphia Eagles", "Kansas City Chiefs"])],
            summaries={"7": live},
        )
        svc = build(tmp_path, client, poll_interval=30)
        svc.create("Chiefs", "Eagles")
        svc.start_tracking()
        assert svc.tracking
        svc.stop_tracking()
        assert not svc.tracking

    def test_creating_a_new_pool_stops_tracking(self, tmp_path):
        live = summary_payload(("Philadelphia Eagles", "PHI"), ("Kansas City Chiefs", "KC"), [], [], 1, "in")
        client = FakeESPNClient(
            events=[scoreboard_event("7", "Chiefs at Eagles", ["Philadelphia Eagles", "Kansas City Chiefs"])],
            summaries={"7": live},
        )
        svc = build(tmp_path, client, poll_interval=30)
        svc.create("Chiefs", "Eagles")
        svc.start_tracking()
        svc.create("Bills", "Dolphins")
        assert not svc.tracking
        svc.shutdown()


class TestPoolReplacedDuringRefresh:

    def test_scores_for_the_old_pool_are_not_applied(self, tmp_path, super_bowl_client):
        svc = build(tmp_path, super_bowl_client)
        svc.create("Chiefs", "Eagles")
        fetch_summary = super_bowl_client.summary

        def summary_then_recreate(event_id):
            payload = fetch_summary(event_id)
            svc.create("Chiefs", "Eagles")
            return payload

        super_bowl_client.summary = summary_then_recreate

        result = svc.refresh()

        assert result.warning == "Squares pool changed during refresh"
        assert result.recorded == ()
        game = svc.current()
        assert game.winners == {}
        assert game.external_game_id is None
        assert build(tmp_path, super_bowl_client).current().winners == {}
