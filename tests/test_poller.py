"""Tests for the background score poller."""

import threading
import time

from nfl_rivalry.poller import ScorePoller


def wait_until(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestScorePoller:

    def test_stops_when_callback_reports_done(self):
        calls = []

        def callback():
            calls.append(1)
            return len(calls) >= 3

        poller = ScorePoller(callback, interval_seconds=0.01)
        assert poller.start() is True
        assert wait_until(lambda: not poller.running)
        time.sleep(0.05)
        assert len(calls) == 3

    def test_second_start_is_refused(self):
        poller = ScorePoller(lambda: False, interval_seconds=10)
        try:
            assert poller.start() is True
            assert poller.start() is False
            assert poller.running
        finally:
            poller.stop()
        assert not poller.running

    def test_stop_interrupts_the_wait(self):
        ran = threading.Event()

        def callback():
            ran.set()
            return False

        poller = ScorePoller(callback, interval_seconds=30)
        poller.start()
        assert ran.wait(2.0)
        started = time.time()
        poller.stop()
        assert time.time() - started < 2.0

    def test_callback_errors_do_not_kill_the_loop(self):
        calls = []

        def callback():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("feed hiccup")
            return True

        poller = ScorePoller(callback, interval_seconds=0.01)
        poller.start()
        assert wait_until(lambda: len(calls) >= 2 and not poller.running)

    def test_can_restart_after_stop(self):
        poller = ScorePoller(lambda: False, interval_seconds=10)
        poller.start()
        poller.stop()
        try:
            assert poller.start() is True
        finally:
            poller.stop()
