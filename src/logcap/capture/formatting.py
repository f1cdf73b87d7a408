"""Agent-facing text for capture results."""

from logcap.capture.base import CaptureMode, TargetKind


def format_start_success(session_id: str, kind: TargetKind, mode: CaptureMode) -> str:
    if kind is TargetKind.DEVICE:
        return (
            "✅ Device log capture started successfully\n\n"
            f"Session ID: {session_id}\n\n"
            "Note: The app has been launched on the device with console output "
            "capture enabled.\n\n"
            "Next Steps:\n"
            "1. Interact with your app on the device\n"
            f"2. Use stop_device_log_cap({{ logSessionId: '{session_id}' }}) "
            "to stop capture and retrieve logs"
        )

    if mode is CaptureMode.CONSOLE_AND_STRUCTURED:
        note = "Your app was relaunched to capture console output."
    else:
        note = "Only structured logs are being captured."
    return (
        f"Log capture started successfully. Session ID: {session_id}.\n\n"
        f"Note: {note}\n\n"
        "Next Steps:\n"
        "1.  Interact with your simulator and app.\n"
        f"2.  Use 'stop_sim_log_cap' with session ID '{session_id}' "
        "to stop capture and retrieve logs."
    )


def format_start_error(kind: TargetKind, message: str) -> str:
    if kind is TargetKind.DEVICE:
        return f"Failed to start device log capture: {message}"
    return f"Error starting log capture: {message}"


def format_stop_success(session_id: str, kind: TargetKind, content: str) -> str:
    if kind is TargetKind.DEVICE:
        return (
            "✅ Device log capture session stopped successfully\n\n"
            f"Session ID: {session_id}\n\n"
            f"--- Captured Logs ---\n{content}"
        )
    return (
        f"Log capture session {session_id} stopped successfully. "
        f"Log content follows:\n\n{content}"
    )


def format_stop_error(session_id: str, kind: TargetKind, message: str) -> str:
    if kind is TargetKind.DEVICE:
        return f"Failed to stop device log capture session {session_id}: {message}"
    return f"Error stopping log capture session {session_id}: {message}"


def not_found_message(session_id: str, kind: TargetKind) -> str:
    if kind is TargetKind.DEVICE:
        return f"Device log capture session not found: {session_id}"
    return f"Log capture session not found: {session_id}"
