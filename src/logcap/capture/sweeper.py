"""
Retention sweep for capture log files.

Runs inline before every new capture session and deletes files matching the
capture naming convention whose modification time is older than the
retention window. Cleanup timing therefore follows session creation: with no
new sessions, stale files stay on disk.
"""

import time
from pathlib import Path
from typing import Callable, Iterable

from logcap.capture.errors import RetentionSweepFailure
from logcap.config import CONFIG
from logcap.logger import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class RetentionSweeper:
    """Deletes capture files older than ``retention_days``. Never raises."""

    def __init__(
        self,
        temp_dir: str | Path | None = None,
        prefixes: Iterable[str] | None = None,
        retention_days: int | None = None,
        extension: str | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.temp_dir = Path(temp_dir) if temp_dir else CONFIG.temp_dir
        self.prefixes = tuple(prefixes) if prefixes else CONFIG.log_prefixes
        self.retention_days = (
            retention_days if retention_days is not None else CONFIG.retention_days
        )
        self.extension = extension or CONFIG.log_file_extension
        self._clock = clock

    @property
    def retention_seconds(self) -> float:
        return self.retention_days * SECONDS_PER_DAY

    def matches(self, name: str) -> bool:
        return name.endswith(self.extension) and name.startswith(self.prefixes)

    def sweep(self) -> list[Path]:
        """
        Delete expired capture files.

        Returns:
            Paths that were deleted on this pass.
        """
        try:
            names = [p.name for p in self.temp_dir.iterdir()]
        except OSError as e:
            logger.warning(f"Could not read temp dir for log cleanup: {e}")
            return []

        now = self._clock()
        deleted: list[Path] = []

        for name in names:
            if not self.matches(name):
                continue
            path = self.temp_dir / name
            try:
                if self._expired(path, now):
                    path.unlink(missing_ok=True)
                    deleted.append(path)
                    logger.info(f"Deleted old log file: {path}")
            except FileNotFoundError:
                # Removed by a concurrent sweep
                continue
            except OSError as e:
                failure = RetentionSweepFailure(f"{path}: {e}")
                logger.warning(f"Error during log cleanup for {failure}")

        return deleted

    def _expired(self, path: Path, now: float) -> bool:
        return now - path.stat().st_mtime > self.retention_seconds
