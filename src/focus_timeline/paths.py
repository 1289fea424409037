"""Helpers for locating the timeline file and logs."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "FocusTimeline"
APP_AUTHOR = "FocusTimeline"

# Overrides the platform data directory, mostly useful for portable installs.
DATA_DIR_ENV = "FOCUS_TIMELINE_DATA_DIR"


def get_data_dir() -> Path:
    """Return the directory holding the timeline, creating it if needed."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        path = Path(override).expanduser()
    else:
        dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
        path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_timeline_path() -> Path:
    return get_data_dir() / "timeline.json"


def get_log_path() -> Path:
    return get_data_dir() / "tracker.log"
