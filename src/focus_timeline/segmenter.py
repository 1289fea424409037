"""Split the stream of matched applications into timeline segments."""

from __future__ import annotations

import logging
from typing import Optional

from .models import CurrentSegment, TimelineEntry

logger = logging.getLogger(__name__)


class TimelineSegmenter:
    """
    Two-state machine: idle (no open segment) or tracking one application.

    ``observe`` is fed once per matched tick. A tick with a different
    application closes the open segment and opens a new one at ``now``. Ticks
    without a match never reach the segmenter, so brief resolver misses do
    not fragment the timeline.
    """

    def __init__(self) -> None:
        self._current: Optional[CurrentSegment] = None

    @property
    def current(self) -> Optional[CurrentSegment]:
        return self._current

    @property
    def is_tracking(self) -> bool:
        return self._current is not None

    def observe(self, app_name: str, now: int) -> Optional[TimelineEntry]:
        """Advance the state machine; return the segment closed by this tick, if any."""
        current = self._current
        if current is None:
            self._current = CurrentSegment(app_name=app_name, start_timestamp=now)
            logger.info("Tracking %s", app_name)
            return None

        if current.app_name == app_name:
            return None

        finished: Optional[TimelineEntry] = None
        if now > current.start_timestamp:
            finished = TimelineEntry(
                app_name=current.app_name,
                start_time=current.start_timestamp,
                end_time=now,
            )
        else:
            logger.debug(
                "Dropping zero-length segment for %s at %d", current.app_name, now
            )
        # Start times never decrease, even if the wall clock steps back.
        start = max(now, current.start_timestamp)
        self._current = CurrentSegment(app_name=app_name, start_timestamp=start)
        logger.info("Switched from %s to %s", current.app_name, app_name)
        return finished
