"""Shared fakes and fixtures for focus_timeline tests."""

from __future__ import annotations

from typing import Optional

import pytest

from focus_timeline.config import TrackerSettings
from focus_timeline.models import CensusEntry, ForegroundApp
from focus_timeline.tracker import ActivityTracker


class FakeResolver:
    """Foreground resolver returning whatever the test sets."""

    def __init__(self, app: Optional[ForegroundApp] = None) -> None:
        self.app = app

    def show(self, name: Optional[str], stable_id: str = "") -> None:
        self.app = None if name is None else ForegroundApp(stable_id or name, name)

    def resolve(self) -> Optional[ForegroundApp]:
        return self.app


class FakeCensus:
    def __init__(self, entries: list[CensusEntry]) -> None:
        self.entries = entries
        self.calls = 0

    def sample(self) -> list[CensusEntry]:
        self.calls += 1
        return list(self.entries)


class FakeLoadSampler:
    def __init__(self, cpu: float = 12.5, memory: float = 40.0) -> None:
        self.cpu = cpu
        self.memory = memory

    def cpu_usage(self) -> float:
        return self.cpu

    def memory_usage(self) -> float:
        return self.memory


class FakeClock:
    """Manually advanced clock usable for both monotonic and wall time."""

    def __init__(self, start: float = 0) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def monotonic(self) -> float:
        return self.now

    def wall(self) -> int:
        return int(self.now)


@pytest.fixture
def census() -> FakeCensus:
    return FakeCensus(
        [
            CensusEntry("systemd", 0.1, 0.2),
            CensusEntry("firefox", 8.0, 12.0),
            CensusEntry("Code", 20.0, 6.5),
            CensusEntry("Slack", 1.5, 3.0),
        ]
    )


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(start=1_700_000_000)


@pytest.fixture
def timeline_path(tmp_path):
    return tmp_path / "timeline.json"


@pytest.fixture
def tracker(timeline_path, resolver, census, clock) -> ActivityTracker:
    return ActivityTracker(
        timeline_path,
        TrackerSettings(),
        resolver=resolver,
        census=census,
        load_sampler=FakeLoadSampler(),
        monotonic=clock.monotonic,
        wall_clock=clock.wall,
    )
