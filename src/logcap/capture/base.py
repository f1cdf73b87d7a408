"""
Core types for log capture sessions.

A session owns the capture process(es) spawned for one target and the
append-only file their output is written to.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Union

SubsystemFilter = Union[str, list[str]]

SUBSYSTEM_FILTER_PRESETS = ("app", "all", "swiftui")


class TargetKind(str, Enum):
    SIMULATOR = "simulator"
    DEVICE = "device"


class CaptureMode(str, Enum):
    """
    How a capture attaches to its target.

    STRUCTURED_ONLY attaches to the live structured log stream and leaves the
    running app alone. CONSOLE_AND_STRUCTURED relaunches the app with its
    console attached, which restarts the app process on the target.
    """

    STRUCTURED_ONLY = "structured-only"
    CONSOLE_AND_STRUCTURED = "console+structured"


@dataclass
class LogSession:
    """
    One capture session.

    Example:
        LogSession(
            session_id="5f0c...",
            target_kind=TargetKind.SIMULATOR,
            target_id="SIM-UUID-1",
            bundle_id="com.example.App",
            capture_mode=CaptureMode.STRUCTURED_ONLY,
            log_file_path=Path("/tmp/xcodemcp_sim_log_5f0c....log"),
        )
    """

    session_id: str
    target_kind: TargetKind
    target_id: str
    bundle_id: str
    capture_mode: CaptureMode
    log_file_path: Path
    processes: list[asyncio.subprocess.Process] = field(default_factory=list)
    sink: Any = None
    completions: list[asyncio.Task] = field(default_factory=list)
    subsystem_filter: SubsystemFilter = "app"
    launch_args: list[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def is_running(self) -> bool:
        """True while at least one owned process has not exited."""
        return any(proc.returncode is None for proc in self.processes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize session info for API responses."""
        return {
            "session_id": self.session_id,
            "target_kind": self.target_kind.value,
            "target_id": self.target_id,
            "bundle_id": self.bundle_id,
            "capture_mode": self.capture_mode.value,
            "log_file_path": str(self.log_file_path),
            "subsystem_filter": self.subsystem_filter,
            "started_at": self.started_at.isoformat(),
            "running": self.is_running,
            "pids": [proc.pid for proc in self.processes],
        }
