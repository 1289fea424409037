"""Console rendering of the timeline."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

import typer

from .models import TimelineEntry


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_entry(entry: TimelineEntry) -> str:
    start = datetime.fromtimestamp(entry.start_time).strftime("%Y-%m-%d %H:%M:%S")
    end = datetime.fromtimestamp(entry.end_time).strftime("%H:%M:%S")
    return (
        f"{start} - {end}  {format_duration(entry.duration_seconds)}  {entry.app_name}"
    )


def print_timeline(entries: Iterable[TimelineEntry]) -> None:
    entries = list(entries)
    if not entries:
        typer.echo("No activity recorded yet.")
        return
    for entry in entries:
        typer.echo(format_entry(entry))
