"""Domain models for tracked foreground activity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(slots=True, frozen=True)
class ForegroundApp:
    """The application currently owning the foreground window."""

    stable_id: str  # bundle id or executable path
    display_name: str


@dataclass(slots=True, frozen=True)
class CensusEntry:
    """One running process as seen by the process census."""

    name: str
    cpu_percent: float  # may exceed 100.0 on multi-core saturation
    memory_percent: float


@dataclass(slots=True, frozen=True)
class ProcessSnapshot:
    """The matched foreground process for a single tick."""

    name: str
    cpu_percent: float
    memory_percent: float
    active_seconds: int


@dataclass(slots=True)
class AccumulatorEntry:
    last_seen: float  # monotonic seconds
    total_seconds: int = 0


@dataclass(slots=True, frozen=True)
class CurrentSegment:
    """The still-open timeline segment."""

    app_name: str
    start_timestamp: int


@dataclass(slots=True, frozen=True)
class TimelineEntry:
    """A finalized block of time spent in a single application."""

    app_name: str
    start_time: int
    end_time: int

    def __post_init__(self) -> None:
        if self.end_time < self.start_time:
            raise ValueError(
                f"end_time ({self.end_time}) precedes start_time ({self.start_time})"
            )

    @property
    def duration_seconds(self) -> int:
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "app_name": self.app_name,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimelineEntry":
        app_name = data["app_name"]
        if not isinstance(app_name, str):
            raise ValueError("app_name must be a string")
        return cls(
            app_name=app_name,
            start_time=_timestamp(data, "start_time"),
            end_time=_timestamp(data, "end_time"),
        )


def _timestamp(data: Mapping[str, Any], key: str) -> int:
    value = data[key]
    # bool is an int subclass; reject it along with floats and strings.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    if value < 0:
        raise ValueError(f"{key} must not be negative")
    return value
