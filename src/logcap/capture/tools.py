"""
Value-returning start/stop operations.

These wrap CaptureController and never raise for capture errors: every call
returns either a success payload or a single error value, together with the
agent-facing message text.

    {"session_id": ..., "log_file_path": ..., "message": ...}
    {"session_id": ..., "log_content": ..., "message": ...}
    {"error": ..., "kind": ..., "message": ...}
"""

from typing import Any, Sequence

from logcap.capture.base import SubsystemFilter, TargetKind
from logcap.capture.controller import CaptureController
from logcap.capture.errors import CaptureError, SessionNotFound
from logcap.capture.formatting import (
    format_start_error,
    format_start_success,
    format_stop_error,
    format_stop_success,
    not_found_message,
)


def _kind_or_default(value: TargetKind | str | None) -> TargetKind:
    try:
        return TargetKind(value) if value is not None else TargetKind.SIMULATOR
    except ValueError:
        return TargetKind.SIMULATOR


async def start_log_capture(
    controller: CaptureController,
    target_kind: TargetKind | str,
    target_id: str,
    bundle_id: str,
    capture_mode: str | None = None,
    subsystem_filter: SubsystemFilter = "app",
    launch_args: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Start a capture and return ``{session_id, ...}`` or ``{error, ...}``."""
    try:
        session = await controller.start(
            target_kind,
            target_id,
            bundle_id,
            capture_mode=capture_mode,
            subsystem_filter=subsystem_filter,
            launch_args=launch_args,
        )
    except CaptureError as e:
        kind = _kind_or_default(target_kind)
        return {
            "error": str(e),
            "kind": e.kind,
            "message": format_start_error(kind, str(e)),
        }

    return {
        "session_id": session.session_id,
        "log_file_path": str(session.log_file_path),
        "message": format_start_success(
            session.session_id, session.target_kind, session.capture_mode
        ),
    }


async def stop_log_capture(
    controller: CaptureController,
    session_id: str,
    target_kind: TargetKind | str | None = None,
) -> dict[str, Any]:
    """Stop a capture and return ``{log_content, ...}`` or ``{error, ...}``."""
    session = controller.registry.lookup(session_id)
    if target_kind is not None:
        kind = _kind_or_default(target_kind)
    elif session is not None:
        kind = session.target_kind
    else:
        kind = TargetKind.SIMULATOR

    try:
        content = await controller.stop(session_id, target_kind=target_kind)
    except SessionNotFound as e:
        message = not_found_message(session_id, kind)
        return {
            "error": message,
            "kind": e.kind,
            "message": format_stop_error(session_id, kind, message),
        }
    except CaptureError as e:
        return {
            "error": str(e),
            "kind": e.kind,
            "message": format_stop_error(session_id, kind, str(e)),
        }

    return {
        "session_id": session_id,
        "log_content": content,
        "message": format_stop_success(session_id, kind, content),
    }
