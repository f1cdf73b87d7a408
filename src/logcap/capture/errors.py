"""Error taxonomy for log capture sessions."""


class CaptureError(Exception):
    """Base class for capture failures surfaced to callers."""

    kind = "capture_error"


class InvalidCaptureRequest(CaptureError):
    """Raised before any side effect when start parameters are unusable."""

    kind = "invalid_request"


class SpawnFailure(CaptureError):
    """The external capture process could not be launched."""

    kind = "spawn_failure"


class FileAccessFailure(CaptureError):
    """The session log file could not be created or read back."""

    kind = "file_access_failure"


class SessionNotFound(CaptureError):
    """Stop was called with an unknown or already-stopped session id."""

    kind = "session_not_found"

    def __init__(self, session_id: str, message: str | None = None):
        self.session_id = session_id
        super().__init__(message or f"Log capture session not found: {session_id}")


class RetentionSweepFailure(CaptureError):
    """Per-file housekeeping error. Logged by the sweeper, never raised to callers."""

    kind = "retention_sweep_failure"


class RegistryInvariantError(RuntimeError):
    """A session id was inserted twice. Indicates a bug, not a user error."""
