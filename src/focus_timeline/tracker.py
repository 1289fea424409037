"""The activity tracker: one object owning all mutable tracking state."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from .accumulator import DurationAccumulator
from .config import TrackerSettings
from .matching import match_process
from .models import ProcessSnapshot, TimelineEntry
from .probes import (
    ForegroundResolver,
    ProcessCensus,
    PsutilProcessCensus,
    SystemLoadSampler,
    default_foreground_resolver,
)
from .segmenter import TimelineSegmenter
from .store import TimelineStore

logger = logging.getLogger(__name__)


def _unix_seconds() -> int:
    return int(time.time())


class ActivityTracker:
    """
    Host-facing API: ``cpu_usage``, ``memory_usage``, ``tick`` and ``read_timeline``.

    Each resource (census, accumulator, current segment, timeline) has its
    own lock. Operations needing several take them in that order.

    Nothing here schedules itself; the host decides how often to call
    ``tick``. Every tick that closes a segment rewrites the timeline file
    synchronously while holding the timeline lock.
    """

    def __init__(
        self,
        timeline_path: Path,
        settings: Optional[TrackerSettings] = None,
        *,
        resolver: Optional[ForegroundResolver] = None,
        census: Optional[ProcessCensus] = None,
        load_sampler: Optional[SystemLoadSampler] = None,
        monotonic: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], int] = _unix_seconds,
    ) -> None:
        self.settings = settings or TrackerSettings()
        self._resolver = resolver or default_foreground_resolver()
        self._census = census or PsutilProcessCensus()
        self._load_sampler = load_sampler or SystemLoadSampler(
            self.settings.cpu_sample_interval.total_seconds()
        )
        self._monotonic = monotonic
        self._wall_clock = wall_clock

        self._accumulator = DurationAccumulator(
            gap_threshold=self.settings.gap_threshold.total_seconds(),
            capacity=self.settings.accumulator_capacity,
        )
        self._segmenter = TimelineSegmenter()
        self._store = TimelineStore(timeline_path)
        self._store.load()

        self._census_lock = threading.Lock()
        self._accumulator_lock = threading.Lock()
        self._segment_lock = threading.Lock()
        self._timeline_lock = threading.Lock()

    @property
    def timeline_path(self) -> Path:
        return self._store.path

    def cpu_usage(self) -> float:
        """Average CPU utilization across cores. Blocks for the sampling interval."""
        with self._census_lock:
            return self._load_sampler.cpu_usage()

    def memory_usage(self) -> float:
        with self._census_lock:
            return self._load_sampler.memory_usage()

    def tick(self) -> Optional[ProcessSnapshot]:
        """Sample once; return the matched foreground process or None."""
        foreground = self._resolver.resolve()
        if foreground is None:
            logger.debug("No foreground application this tick.")
            return None

        with self._census_lock:
            census = self._census.sample()
        matched = match_process(foreground, census)
        if matched is None:
            logger.debug(
                "No process matched foreground %s (%s)",
                foreground.display_name,
                foreground.stable_id,
            )
            return None

        with self._accumulator_lock:
            active_seconds = self._accumulator.update(matched.name, self._monotonic())

        with self._segment_lock:
            finished = self._segmenter.observe(matched.name, self._wall_clock())
            if finished is not None:
                with self._timeline_lock:
                    self._store.append(finished)

        return ProcessSnapshot(
            name=matched.name,
            cpu_percent=matched.cpu_percent,
            memory_percent=matched.memory_percent,
            active_seconds=active_seconds,
        )

    def read_timeline(self) -> list[TimelineEntry]:
        """Stored entries plus the still-open segment, if any."""
        with self._segment_lock:
            segment = self._segmenter.current
            now = self._wall_clock()
            with self._timeline_lock:
                return self._store.snapshot_with_live_segment(segment, now)
