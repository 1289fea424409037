"""Polling loop that drives the tracker at a fixed cadence."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .tracker import ActivityTracker

logger = logging.getLogger(__name__)


class TrackerRunner:
    """
    Ticks an ``ActivityTracker`` every ``interval`` seconds until stopped.

    ``run`` polls in the calling thread (the ``collect`` command); ``start``
    does the same in a daemon thread (the HTTP API). Both end when ``stop``
    is called. A tick that raises is logged and polling carries on.
    """

    def __init__(
        self, tracker: ActivityTracker, interval: Optional[float] = None
    ) -> None:
        self.tracker = tracker
        self.interval = (
            interval
            if interval is not None
            else tracker.settings.sample_interval.total_seconds()
        )
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._thread_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def run(self) -> None:
        logger.info(
            "Polling every %.1fs; timeline at %s",
            self.interval,
            self.tracker.timeline_path,
        )
        while not self._stopped.is_set():
            self._tick_once()
            self._stopped.wait(self.interval)
        logger.info("Polling stopped.")

    def start(self) -> None:
        with self._thread_lock:
            if self.is_running:
                return
            self._stopped.clear()
            self._thread = threading.Thread(
                target=self.run, daemon=True, name="TrackerRunner"
            )
            self._thread.start()

    def stop(self, timeout: Optional[float] = 10.0) -> None:
        self._stopped.set()
        with self._thread_lock:
            thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def _tick_once(self) -> None:
        try:
            snapshot = self.tracker.tick()
        except Exception:
            logger.exception("Tracker tick failed; continuing.")
            return
        if snapshot is not None:
            logger.debug(
                "Foreground: %s cpu=%.1f%% mem=%.1f%% active=%ds",
                snapshot.name,
                snapshot.cpu_percent,
                snapshot.memory_percent,
                snapshot.active_seconds,
            )
