"""Configuration models and helpers for the focus tracker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(slots=True)
class TrackerSettings:
    """Runtime configuration for the activity tracker and its host loop."""

    sample_interval: timedelta = timedelta(seconds=1)
    gap_threshold: timedelta = timedelta(seconds=5)
    cpu_sample_interval: timedelta = timedelta(milliseconds=100)
    accumulator_capacity: int = 256

    def __post_init__(self) -> None:
        if self.sample_interval <= timedelta(0):
            raise ValueError("sample_interval must be positive")
        if self.gap_threshold <= timedelta(0):
            raise ValueError("gap_threshold must be positive")
        if self.cpu_sample_interval <= timedelta(0):
            raise ValueError("cpu_sample_interval must be positive")
        if self.accumulator_capacity < 1:
            raise ValueError("accumulator_capacity must be at least 1")

    @classmethod
    def from_intervals(
        cls,
        sample_seconds: float,
        gap_seconds: float | None = None,
        capacity: int | None = None,
    ) -> "TrackerSettings":
        defaults = cls()
        gap = (
            timedelta(seconds=gap_seconds)
            if gap_seconds is not None
            else defaults.gap_threshold
        )
        return cls(
            sample_interval=timedelta(seconds=sample_seconds),
            gap_threshold=gap,
            cpu_sample_interval=defaults.cpu_sample_interval,
            accumulator_capacity=capacity if capacity is not None else defaults.accumulator_capacity,
        )
