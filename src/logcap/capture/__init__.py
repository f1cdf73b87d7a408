"""
Log capture sessions for simulators and physical devices.

A capture session owns a long-running external process (a simulator log
stream or a console-attached app launch) and buffers everything it prints
into an append-only file in the temp directory until the session is stopped.
"""

from logcap.capture.base import CaptureMode, LogSession, TargetKind
from logcap.capture.controller import CaptureController
from logcap.capture.errors import (
    CaptureError,
    FileAccessFailure,
    InvalidCaptureRequest,
    RetentionSweepFailure,
    SessionNotFound,
    SpawnFailure,
)
from logcap.capture.launcher import ProcessLauncher
from logcap.capture.registry import SessionRegistry
from logcap.capture.store import LogFileStore
from logcap.capture.sweeper import RetentionSweeper

__all__ = [
    "CaptureController",
    "CaptureError",
    "CaptureMode",
    "FileAccessFailure",
    "InvalidCaptureRequest",
    "LogFileStore",
    "LogSession",
    "ProcessLauncher",
    "RetentionSweepFailure",
    "RetentionSweeper",
    "SessionNotFound",
    "SessionRegistry",
    "SpawnFailure",
    "TargetKind",
]
