"""
Append-only log files for capture sessions.

Each session writes to <temp_dir>/<prefix><session_id>.log. The file starts
with a one-line header naming the bundle and target, so an orphaned file is
still self-describing when inspected without the registry:

    --- Log capture for bundle ID: com.example.App on simulator: SIM-UUID-1 ---

Files are never deleted here; the RetentionSweeper removes them by age.
"""

from pathlib import Path

from logcap.capture.base import TargetKind
from logcap.capture.errors import FileAccessFailure
from logcap.config import CONFIG
from logcap.logger import get_logger

logger = get_logger(__name__)


class LogSink:
    """Unbuffered append-mode writer shared by a session's stream pumps."""

    def __init__(self, path: Path):
        self.path = path
        self._fh = open(path, "ab", buffering=0)

    @property
    def closed(self) -> bool:
        return self._fh.closed

    def write(self, chunk: bytes) -> bool:
        """Append a chunk. Returns False once the sink has been closed."""
        if self._fh.closed:
            return False
        self._fh.write(chunk)
        return True

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()


class LogFileStore:
    """Creates, opens and reads back session log files."""

    def __init__(self, temp_dir: str | Path | None = None):
        self.temp_dir = Path(temp_dir) if temp_dir else CONFIG.temp_dir
        self._prefixes = {
            TargetKind.SIMULATOR: CONFIG.simulator_log_prefix,
            TargetKind.DEVICE: CONFIG.device_log_prefix,
        }

    @property
    def prefixes(self) -> tuple[str, ...]:
        return tuple(self._prefixes.values())

    def path_for(self, session_id: str, kind: TargetKind) -> Path:
        return self.temp_dir / (
            f"{self._prefixes[kind]}{session_id}{CONFIG.log_file_extension}"
        )

    @staticmethod
    def header_for(kind: TargetKind, bundle_id: str, target_id: str) -> str:
        if kind is TargetKind.DEVICE:
            return (
                f"\n--- Device log capture for bundle ID: {bundle_id} "
                f"on device: {target_id} ---\n"
            )
        return (
            f"\n--- Log capture for bundle ID: {bundle_id} "
            f"on simulator: {target_id} ---\n"
        )

    def create(
        self, session_id: str, kind: TargetKind, bundle_id: str, target_id: str
    ) -> Path:
        """
        Create the session file and write its header.

        Raises:
            FileAccessFailure: If the directory or file cannot be written.
        """
        path = self.path_for(session_id, kind)
        try:
            self.temp_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"")
            with open(path, "ab") as f:
                f.write(self.header_for(kind, bundle_id, target_id).encode("utf-8"))
        except OSError as e:
            raise FileAccessFailure(f"Could not create log file {path}: {e}") from e

        logger.debug(f"Created log file {path}")
        return path

    def open_sink(self, path: Path) -> LogSink:
        try:
            return LogSink(path)
        except OSError as e:
            raise FileAccessFailure(f"Could not open log file {path}: {e}") from e

    def read_all(self, path: Path) -> str:
        """
        Read the full file content as text.

        Raises:
            FileAccessFailure: If the file is gone or unreadable.
        """
        if not path.exists():
            raise FileAccessFailure(f"Log file not found: {path}")
        try:
            return path.read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            raise FileAccessFailure(f"Could not read log file {path}: {e}") from e
