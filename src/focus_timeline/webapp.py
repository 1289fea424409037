"""FastAPI application exposing the tracker to a local UI."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from .config import TrackerSettings
from .models import ProcessSnapshot, TimelineEntry
from .paths import get_timeline_path
from .runner import TrackerRunner
from .tracker import ActivityTracker

logger = logging.getLogger(__name__)


class UsagePayload(BaseModel):
    percent: float


class ProcessPayload(BaseModel):
    name: str
    cpu_percent: float
    memory_percent: float
    active_seconds: int

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_snapshot(cls, snapshot: ProcessSnapshot) -> "ProcessPayload":
        return cls(
            name=snapshot.name,
            cpu_percent=snapshot.cpu_percent,
            memory_percent=snapshot.memory_percent,
            active_seconds=snapshot.active_seconds,
        )


class TickPayload(BaseModel):
    process: Optional[ProcessPayload] = None


class TimelineEntryPayload(BaseModel):
    app_name: str
    start_time: int
    end_time: int
    duration_seconds: int

    @classmethod
    def from_entry(cls, entry: TimelineEntry) -> "TimelineEntryPayload":
        return cls(
            app_name=entry.app_name,
            start_time=entry.start_time,
            end_time=entry.end_time,
            duration_seconds=entry.duration_seconds,
        )


class TimelinePayload(BaseModel):
    entries: list[TimelineEntryPayload]


def create_app(
    *,
    timeline_path: Optional[Path] = None,
    settings: Optional[TrackerSettings] = None,
    tracker: Optional[ActivityTracker] = None,
    run_tracker: bool = True,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    if tracker is None:
        tracker = ActivityTracker(
            timeline_path=Path(timeline_path or get_timeline_path()),
            settings=settings or TrackerSettings(),
        )
    runner = TrackerRunner(tracker)

    app = FastAPI(title="Focus Timeline", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.tracker = tracker
    app.state.tracker_runner = runner

    @app.on_event("startup")
    async def _startup() -> None:
        if run_tracker:
            runner.start()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        runner.stop()

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        current: ActivityTracker = request.app.state.tracker
        return {
            "tracker_running": request.app.state.tracker_runner.is_running,
            "timeline_path": str(current.timeline_path),
            "sample_seconds": current.settings.sample_interval.total_seconds(),
            "gap_seconds": current.settings.gap_threshold.total_seconds(),
        }

    # Plain ``def`` so the blocking CPU sample runs in the threadpool.
    @app.get("/api/cpu", response_model=UsagePayload)
    def cpu(request: Request) -> UsagePayload:
        return UsagePayload(percent=request.app.state.tracker.cpu_usage())

    @app.get("/api/memory", response_model=UsagePayload)
    def memory(request: Request) -> UsagePayload:
        return UsagePayload(percent=request.app.state.tracker.memory_usage())

    @app.post("/api/tick", response_model=TickPayload)
    def tick(request: Request) -> TickPayload:
        snapshot = request.app.state.tracker.tick()
        if snapshot is None:
            return TickPayload()
        return TickPayload(process=ProcessPayload.from_snapshot(snapshot))

    @app.get("/api/timeline", response_model=TimelinePayload)
    def timeline(request: Request) -> TimelinePayload:
        entries = request.app.state.tracker.read_timeline()
        return TimelinePayload(
            entries=[TimelineEntryPayload.from_entry(entry) for entry in entries]
        )

    return app
