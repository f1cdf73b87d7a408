"""
Pydantic models for the capture HTTP API.
"""

from typing import Any, Union

from pydantic import BaseModel, Field

from logcap.capture.base import CaptureMode, TargetKind


# ─── Requests ────────────────────────────────────────────────────────


class StartCaptureRequest(BaseModel):
    """POST /captures request body."""

    target_kind: TargetKind = TargetKind.SIMULATOR
    target_id: str = Field(min_length=1)
    bundle_id: str = Field(min_length=1)
    capture_mode: CaptureMode | None = None
    subsystem_filter: Union[str, list[str]] = "app"
    launch_args: list[str] = Field(default_factory=list)


class StopCaptureRequest(BaseModel):
    """POST /captures/{session_id}/stop optional body."""

    target_kind: TargetKind | None = None


# ─── Responses ───────────────────────────────────────────────────────


class StartCaptureResponse(BaseModel):
    session_id: str
    log_file_path: str
    message: str


class StopCaptureResponse(BaseModel):
    session_id: str
    log_content: str
    message: str


class CaptureErrorResponse(BaseModel):
    error: str
    kind: str
    message: str | None = None


class SessionInfo(BaseModel):
    """Serialized session info for API responses."""

    session_id: str
    target_kind: TargetKind
    target_id: str
    bundle_id: str
    capture_mode: CaptureMode
    log_file_path: str
    subsystem_filter: Union[str, list[str]]
    started_at: str
    running: bool
    pids: list[Any] = Field(default_factory=list)


class SessionListResponse(BaseModel):
    """GET /captures response."""

    sessions: list[SessionInfo]
    count: int
