"""Platform probes: foreground window lookup, process census and system load."""

from __future__ import annotations

import ctypes
import logging
import subprocess
import sys
from typing import Optional, Protocol

import psutil

from .models import CensusEntry, ForegroundApp

logger = logging.getLogger(__name__)

_SUBPROCESS_TIMEOUT = 2.0


class ForegroundResolver(Protocol):
    def resolve(self) -> Optional[ForegroundApp]:
        """Return the foreground application, or None if it cannot be determined."""
        ...


class ProcessCensus(Protocol):
    def sample(self) -> list[CensusEntry]:
        """Return every running process visible to this user."""
        ...


def _process_identity(pid: int) -> tuple[Optional[str], Optional[str]]:
    """Return (executable path, process name) for a pid, if still alive."""
    try:
        process = psutil.Process(pid)
        name = process.name()
        try:
            exe = process.exe() or None
        except psutil.AccessDenied:
            exe = None
        return exe, name
    except (psutil.Error, ProcessLookupError):
        return None, None


class WindowsForegroundResolver:
    """Retrieves the foreground window title and owning executable."""

    def __init__(self) -> None:
        from ctypes import wintypes

        self._wintypes = wintypes
        self._user32 = ctypes.windll.user32  # type: ignore[attr-defined]

    def resolve(self) -> Optional[ForegroundApp]:
        hwnd = self._user32.GetForegroundWindow()
        if not hwnd:
            return None

        length = self._user32.GetWindowTextLengthW(hwnd)
        buffer = ctypes.create_unicode_buffer(length + 1)
        self._user32.GetWindowTextW(hwnd, buffer, length + 1)
        window_title = buffer.value.strip()

        pid = self._wintypes.DWORD()
        self._user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
        if not pid.value:
            return None
        exe, name = _process_identity(pid.value)
        if name is None:
            return None
        return ForegroundApp(stable_id=exe or name, display_name=window_title or name)


class MacForegroundResolver:
    """Asks System Events for the frontmost application's bundle id and name."""

    _SCRIPT = (
        'tell application "System Events"\n'
        "  set frontApp to first application process whose frontmost is true\n"
        '  return (bundle identifier of frontApp) & "|||" & (name of frontApp)\n'
        "end tell"
    )

    def resolve(self) -> Optional[ForegroundApp]:
        try:
            output = subprocess.check_output(
                ["osascript", "-e", self._SCRIPT],
                stderr=subprocess.DEVNULL,
                timeout=_SUBPROCESS_TIMEOUT,
            )
        except (subprocess.SubprocessError, OSError):
            logger.debug("osascript foreground lookup failed", exc_info=True)
            return None

        result = output.decode("utf-8", errors="replace").strip()
        if "|||" not in result:
            return None
        bundle_id, name = result.split("|||", 1)
        name = name.strip()
        if not name:
            return None
        return ForegroundApp(stable_id=bundle_id.strip() or name, display_name=name)


class X11ForegroundResolver:
    """Resolves the active X11 window through ``xprop``."""

    def resolve(self) -> Optional[ForegroundApp]:
        try:
            window_id = self._xprop("-root", "_NET_ACTIVE_WINDOW").split()[-1]
            if window_id in ("0x0", "0"):
                return None
            title_output = self._xprop("-id", window_id, "WM_NAME")
            pid_output = self._xprop("-id", window_id, "_NET_WM_PID")
            pid = int(pid_output.split()[-1])
        except (subprocess.SubprocessError, OSError, ValueError, IndexError):
            logger.debug("xprop foreground lookup failed", exc_info=True)
            return None

        title = title_output.split('"', 1)[1].rsplit('"', 1)[0] if '"' in title_output else ""
        exe, name = _process_identity(pid)
        if name is None:
            return None
        return ForegroundApp(stable_id=exe or name, display_name=title.strip() or name)

    @staticmethod
    def _xprop(*args: str) -> str:
        output = subprocess.check_output(
            ["xprop", *args],
            stderr=subprocess.DEVNULL,
            timeout=_SUBPROCESS_TIMEOUT,
        )
        return output.decode("utf-8", errors="replace")


class NullForegroundResolver:
    """Used on platforms without a foreground lookup; never matches anything."""

    def resolve(self) -> Optional[ForegroundApp]:
        return None


def default_foreground_resolver() -> ForegroundResolver:
    if sys.platform.startswith("win"):
        return WindowsForegroundResolver()
    if sys.platform == "darwin":
        return MacForegroundResolver()
    if sys.platform.startswith("linux"):
        return X11ForegroundResolver()
    logger.warning("No foreground window support for platform %s", sys.platform)
    return NullForegroundResolver()


class PsutilProcessCensus:
    """Enumerates running processes with their CPU and memory share."""

    _ATTRS = ["name", "cpu_percent", "memory_percent"]

    def sample(self) -> list[CensusEntry]:
        entries: list[CensusEntry] = []
        try:
            for proc in psutil.process_iter(attrs=self._ATTRS):
                try:
                    info = proc.info
                    entries.append(
                        CensusEntry(
                            name=info.get("name") or "",
                            cpu_percent=float(info.get("cpu_percent") or 0.0),
                            memory_percent=float(info.get("memory_percent") or 0.0),
                        )
                    )
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                    continue
        except (psutil.Error, OSError):
            logger.exception("Process enumeration failed after %d entries", len(entries))
        return entries


class SystemLoadSampler:
    """Whole-system CPU and memory utilization."""

    def __init__(self, cpu_interval: float = 0.1) -> None:
        self.cpu_interval = cpu_interval

    def cpu_usage(self) -> float:
        """
        Average utilization across all cores, 0-100.

        Blocks the caller for ``cpu_interval`` seconds between two counter
        refreshes; a single read of the cumulative counters is meaningless.
        """
        per_core = psutil.cpu_percent(interval=self.cpu_interval, percpu=True)
        if not per_core:
            return 0.0
        return sum(per_core) / len(per_core)

    def memory_usage(self) -> float:
        mem = psutil.virtual_memory()
        if not mem.total:
            return 0.0
        return mem.used / mem.total * 100.0
