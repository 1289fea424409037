"""Map the foreground application onto a running process."""

from __future__ import annotations

from typing import Iterable, Optional

from .models import CensusEntry, ForegroundApp


def matches(foreground: ForegroundApp, process_name: str) -> bool:
    """Return True if ``process_name`` plausibly owns the foreground window.

    Any of these, compared case-insensitively, is enough:

    * the window name equals the process name;
    * one of the two names contains the other;
    * the stable id (bundle id or executable path) contains the process name.
    """
    candidate = process_name.lower()
    if not candidate:
        return False
    window_name = foreground.display_name.lower()
    stable_id = foreground.stable_id.lower()

    if candidate == window_name:
        return True
    if window_name and (window_name in candidate or candidate in window_name):
        return True
    return candidate in stable_id


def match_process(
    foreground: Optional[ForegroundApp], census: Iterable[CensusEntry]
) -> Optional[CensusEntry]:
    """Return the first census entry that matches the foreground app.

    First match wins in census enumeration order. That order is
    platform-defined, so overlapping names may resolve differently across runs.
    """
    if foreground is None:
        return None
    for entry in census:
        if matches(foreground, entry.name):
            return entry
    return None
