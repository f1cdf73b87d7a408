# src/logcap/config.py

import os
import tempfile
from pathlib import Path

PROJECT_DIR = Path(__file__).resolve().parent.parent.parent


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_list(name: str) -> list[str]:
    value = os.getenv(name) or ""
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    # Application Configuration
    TITLE = "logcap"
    HOST = "127.0.0.1"
    PORT = 25315

    # Capture files
    RETENTION_DAYS = 3
    LOG_FILE_EXTENSION = ".log"
    SIMULATOR_LOG_PREFIX = "xcodemcp_sim_log_"
    DEVICE_LOG_PREFIX = "xcodemcp_device_log_"

    # One-shot auxiliary commands (doctor checks)
    COMMAND_TIMEOUT = 30.0

    def __init__(self):
        self.reload()

    def reload(self):
        """Re-read environment overrides on top of the class defaults."""
        self.host = os.getenv("LOGCAP_HOST", self.HOST)
        self.port = _env_int("LOGCAP_PORT", self.PORT)
        self.retention_days = _env_int("LOGCAP_RETENTION_DAYS", self.RETENTION_DAYS)
        self.temp_dir = Path(os.getenv("LOGCAP_TEMP_DIR") or tempfile.gettempdir())
        self.log_file_extension = self.LOG_FILE_EXTENSION
        self.simulator_log_prefix = self.SIMULATOR_LOG_PREFIX
        self.device_log_prefix = self.DEVICE_LOG_PREFIX
        self.command_timeout = _env_float(
            "LOGCAP_COMMAND_TIMEOUT", self.COMMAND_TIMEOUT
        )
        # Browser origins allowed to call the API. Empty disables CORS.
        self.cors_origins = _env_list("LOGCAP_CORS_ORIGINS")

    @property
    def log_prefixes(self) -> tuple[str, ...]:
        return (self.simulator_log_prefix, self.device_log_prefix)


CONFIG = Config()
