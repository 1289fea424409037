"""JSON persistence for the finalized timeline."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from .models import CurrentSegment, TimelineEntry

logger = logging.getLogger(__name__)


def load_timeline(path: Path) -> list[TimelineEntry]:
    """
    Read a timeline file.

    Missing, unreadable or corrupt files yield an empty timeline; items that
    are not valid entries are skipped. This never raises for bad data.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        logger.info("No timeline at %s; starting empty.", path)
        return []
    except OSError:
        logger.exception("Failed to read timeline %s; starting empty.", path)
        return []

    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError):
        logger.warning("Timeline %s is not valid JSON; starting empty.", path)
        return []
    if not isinstance(data, list):
        logger.warning("Timeline %s is not a JSON array; starting empty.", path)
        return []

    entries: list[TimelineEntry] = []
    for index, item in enumerate(data):
        try:
            entries.append(TimelineEntry.from_dict(item))
        except (KeyError, TypeError, ValueError, OverflowError):
            logger.warning("Skipping malformed timeline item %d in %s", index, path)
    return entries


def write_timeline(path: Path, entries: Iterable[TimelineEntry]) -> None:
    """Atomically replace ``path`` with the given entries as a JSON array."""
    payload = json.dumps([entry.to_dict() for entry in entries], indent=2)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class TimelineStore:
    """Owns the in-memory timeline and mirrors it to a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._entries: list[TimelineEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[TimelineEntry]:
        return list(self._entries)

    def load(self) -> list[TimelineEntry]:
        self._entries = load_timeline(self.path)
        logger.debug("Loaded %d timeline entries from %s", len(self._entries), self.path)
        return list(self._entries)

    def save(self, entries: Optional[Iterable[TimelineEntry]] = None) -> bool:
        """
        Rewrite the whole file, optionally replacing the in-memory entries first.

        Returns False (and logs) if the write failed; the in-memory timeline
        stays authoritative until the next successful save.
        """
        if entries is not None:
            self._entries = list(entries)
        try:
            write_timeline(self.path, self._entries)
        except OSError:
            logger.exception(
                "Failed to save timeline to %s; keeping %d entries in memory.",
                self.path,
                len(self._entries),
            )
            return False
        return True

    def append(self, entry: TimelineEntry) -> bool:
        self._entries.append(entry)
        return self.save()

    def snapshot_with_live_segment(
        self, segment: Optional[CurrentSegment], now: int
    ) -> list[TimelineEntry]:
        """Stored entries plus a synthesized entry for the open segment."""
        snapshot = list(self._entries)
        if segment is None:
            return snapshot
        live = TimelineEntry(
            app_name=segment.app_name,
            start_time=segment.start_timestamp,
            end_time=max(now, segment.start_timestamp),
        )
        if snapshot:
            last = snapshot[-1]
            if (last.app_name, last.end_time) == (live.app_name, live.end_time):
                return snapshot
        snapshot.append(live)
        return snapshot
