"""Command-line interface for the focus tracker."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import TrackerSettings
from .paths import get_log_path, get_timeline_path

app = typer.Typer(help="Track time spent in the foreground application.")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


@app.callback(no_args_is_help=True)
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    log_file: bool = typer.Option(
        False, "--log-file", help="Also write logs to the tracker log file."
    ),
) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(get_log_path(), encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
    )


@app.command()
def collect(
    timeline_path: Optional[Path] = typer.Option(
        None,
        "--timeline",
        path_type=Path,
        help="Location of the timeline JSON file.",
    ),
    sample_seconds: float = typer.Option(
        1.0,
        "--interval",
        min=0.1,
        help="Sampling interval in seconds.",
    ),
    gap_seconds: float = typer.Option(
        5.0,
        "--gap",
        min=1.0,
        help="Seconds between samples after which active time stops accruing.",
    ),
) -> None:
    """Track the foreground application until interrupted."""
    from .runner import TrackerRunner
    from .tracker import ActivityTracker

    settings = TrackerSettings.from_intervals(
        sample_seconds=sample_seconds, gap_seconds=gap_seconds
    )
    tracker = ActivityTracker(
        timeline_path=timeline_path or get_timeline_path(), settings=settings
    )
    runner = TrackerRunner(tracker)
    try:
        runner.run()
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Tracker interrupted.")
        runner.stop()


@app.command()
def timeline(
    timeline_path: Optional[Path] = typer.Option(
        None,
        "--timeline",
        path_type=Path,
        help="Location of the timeline JSON file.",
    ),
) -> None:
    """Print the recorded timeline."""
    from .reporting import print_timeline
    from .store import load_timeline

    print_timeline(load_timeline(timeline_path or get_timeline_path()))


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8766, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    timeline_path: Optional[Path] = typer.Option(
        None, "--timeline", path_type=Path, help="Location of the timeline JSON file."
    ),
    sample_seconds: float = typer.Option(
        1.0,
        "--interval",
        min=0.1,
        help="Sampling interval in seconds.",
    ),
    gap_seconds: float = typer.Option(
        5.0,
        "--gap",
        min=1.0,
        help="Seconds between samples after which active time stops accruing.",
    ),
) -> None:
    """Serve the tracker API with the background tracker running."""
    import uvicorn

    from .webapp import create_app

    settings = TrackerSettings.from_intervals(
        sample_seconds=sample_seconds, gap_seconds=gap_seconds
    )
    api = create_app(
        timeline_path=timeline_path or get_timeline_path(), settings=settings
    )
    log_level = "debug" if logging.getLogger().isEnabledFor(logging.DEBUG) else "info"
    uvicorn.run(api, host=host, port=port, log_level=log_level)
