"""Per-process active duration counters."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Optional

from .models import AccumulatorEntry

logger = logging.getLogger(__name__)


class DurationAccumulator:
    """
    Tracks how many seconds each process has been in the foreground.

    Consecutive observations closer together than ``gap_threshold`` add the
    elapsed whole seconds to the process total. A longer gap counts as a
    tracking interruption: the total is left alone but not reset.

    At most ``capacity`` names are kept; the least recently seen one is
    evicted when a new name would exceed it.
    """

    def __init__(self, gap_threshold: float = 5.0, capacity: int = 256) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.gap_threshold = gap_threshold
        self.capacity = capacity
        self._entries: OrderedDict[str, AccumulatorEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def get(self, name: str) -> Optional[AccumulatorEntry]:
        return self._entries.get(name)

    def update(self, name: str, now: float) -> int:
        """Record an observation of ``name`` at monotonic time ``now``."""
        entry = self._entries.get(name)
        if entry is None:
            entry = AccumulatorEntry(last_seen=now)
            self._entries[name] = entry
            self._evict()
        else:
            elapsed = now - entry.last_seen
            if 0 <= elapsed < self.gap_threshold:
                entry.total_seconds += int(elapsed)
            entry.last_seen = now
            self._entries.move_to_end(name)
        return entry.total_seconds

    def _evict(self) -> None:
        while len(self._entries) > self.capacity:
            name, _ = self._entries.popitem(last=False)
            logger.debug("Evicted duration counter for %s", name)
