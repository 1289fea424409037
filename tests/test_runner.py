"""Tests for the polling runner."""

import time
from datetime import timedelta

from focus_timeline.config import TrackerSettings
from focus_timeline.runner import TrackerRunner
from focus_timeline.tracker import ActivityTracker

from conftest import FakeLoadSampler, FakeResolver


def _tracker(timeline_path, census, resolver=None) -> ActivityTracker:
    return ActivityTracker(
        timeline_path,
        TrackerSettings(sample_interval=timedelta(milliseconds=10)),
        resolver=resolver or FakeResolver(),
        census=census,
        load_sampler=FakeLoadSampler(),
    )


class TestForegroundRun:
    def test_interval_defaults_to_settings(self, timeline_path, census):
        """Test the polling interval comes from the tracker settings."""
        runner = TrackerRunner(_tracker(timeline_path, census))
        assert runner.interval == 0.01
        assert TrackerRunner(runner.tracker, interval=2.0).interval == 2.0

    def test_returns_immediately_when_stopped(self, timeline_path, census):
        """Test run() does nothing once stop() has been called."""
        runner = TrackerRunner(_tracker(timeline_path, census))
        runner.stop()
        runner.run()
        assert census.calls == 0

    def test_tick_errors_do_not_stop_loop(self, timeline_path, census):
        """Test an exception from a tick is logged and polling continues."""
        calls = []

        class ExplodingResolver:
            def resolve(self):
                calls.append(1)
                if len(calls) >= 3:
                    runner.stop()
                raise RuntimeError("boom")

        tracker = _tracker(timeline_path, census, resolver=ExplodingResolver())
        runner = TrackerRunner(tracker, interval=0.001)
        runner.run()
        assert len(calls) == 3


class TestBackgroundRun:
    def test_start_stop(self, timeline_path, census):
        """Test the runner can be started and stopped."""
        runner = TrackerRunner(_tracker(timeline_path, census))
        assert not runner.is_running

        runner.start()
        assert runner.is_running

        runner.stop()
        assert not runner.is_running

    def test_start_idempotent(self, timeline_path, census):
        """Test starting twice keeps a single daemon thread."""
        runner = TrackerRunner(_tracker(timeline_path, census))
        runner.start()
        thread1 = runner._thread
        runner.start()
        thread2 = runner._thread
        try:
            assert thread1 is thread2
            assert thread1.daemon is True
            assert thread1.name == "TrackerRunner"
        finally:
            runner.stop()

    def test_restart_after_stop(self, timeline_path, census):
        """Test a stopped runner can be started again."""
        runner = TrackerRunner(_tracker(timeline_path, census))
        runner.start()
        runner.stop()
        runner.start()
        try:
            assert runner.is_running
        finally:
            runner.stop()

    def test_stop_without_start(self, timeline_path, census):
        """Test stopping an idle runner is harmless."""
        TrackerRunner(_tracker(timeline_path, census)).stop()

    def test_runner_ticks_tracker(self, timeline_path, census):
        """Test the background loop feeds the tracker."""
        resolver = FakeResolver()
        resolver.show("Code")
        tracker = _tracker(timeline_path, census, resolver=resolver)
        runner = TrackerRunner(tracker)
        runner.start()
        try:
            deadline = time.monotonic() + 2.0
            while census.calls < 2 and time.monotonic() < deadline:
                time.sleep(0.01)
        finally:
            runner.stop()
        assert census.calls >= 2
        assert tracker.read_timeline()[-1].app_name == "Code"
