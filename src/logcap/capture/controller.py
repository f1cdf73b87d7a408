"""
Capture controller: the public start/stop surface for log capture.

Session states:
    Starting -> Active -> Stopped

Starting covers the retention sweep, file creation and process spawn. A
failure there never registers the session. Active lasts until stop() is
called, whether or not the capture process has already exited. Stopped is
terminal: the registry entry is gone and the file stays on disk until a
later sweep removes it.
"""

import asyncio
import uuid
from typing import Any, Sequence

from logcap.capture.base import (
    SUBSYSTEM_FILTER_PRESETS,
    CaptureMode,
    LogSession,
    SubsystemFilter,
    TargetKind,
)
from logcap.capture.errors import (
    InvalidCaptureRequest,
    RegistryInvariantError,
    SessionNotFound,
    SpawnFailure,
)
from logcap.capture.launcher import ProcessLauncher, build_capture_commands
from logcap.capture.registry import SessionRegistry
from logcap.capture.store import LogFileStore
from logcap.capture.sweeper import RetentionSweeper
from logcap.logger import get_logger

logger = get_logger(__name__)

SHUTDOWN_DRAIN_TIMEOUT = 2.0


def _coerce_kind(value: TargetKind | str) -> TargetKind:
    try:
        return TargetKind(value)
    except ValueError:
        raise InvalidCaptureRequest(f"Unknown target kind: {value}") from None


def _coerce_mode(kind: TargetKind, value: CaptureMode | str | None) -> CaptureMode:
    if value is None:
        if kind is TargetKind.DEVICE:
            return CaptureMode.CONSOLE_AND_STRUCTURED
        return CaptureMode.STRUCTURED_ONLY
    try:
        mode = CaptureMode(value)
    except ValueError:
        raise InvalidCaptureRequest(f"Unknown capture mode: {value}") from None
    if kind is TargetKind.DEVICE and mode is CaptureMode.STRUCTURED_ONLY:
        raise InvalidCaptureRequest(
            "Device targets are always console-attached; "
            f"'{CaptureMode.STRUCTURED_ONLY.value}' is only available for simulators"
        )
    return mode


def _check_subsystem_filter(value: SubsystemFilter) -> SubsystemFilter:
    if isinstance(value, str):
        if value not in SUBSYSTEM_FILTER_PRESETS:
            raise InvalidCaptureRequest(
                f"Unknown subsystem filter '{value}'. "
                f"Use one of {', '.join(SUBSYSTEM_FILTER_PRESETS)} or a list of subsystems"
            )
        return value
    subsystems = [s for s in value if isinstance(s, str) and s.strip()]
    if len(subsystems) != len(list(value)):
        raise InvalidCaptureRequest("Subsystem names must be non-empty strings")
    return subsystems


class CaptureController:
    """
    Orchestrates capture sessions for simulators and devices.

    The registry is injected so each server (or test) owns an isolated one.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        store: LogFileStore | None = None,
        sweeper: RetentionSweeper | None = None,
        launcher: ProcessLauncher | None = None,
    ):
        self.registry = registry
        self.store = store or LogFileStore()
        self.sweeper = sweeper or RetentionSweeper(
            temp_dir=self.store.temp_dir, prefixes=self.store.prefixes
        )
        self.launcher = launcher or ProcessLauncher()

    async def start(
        self,
        target_kind: TargetKind | str,
        target_id: str,
        bundle_id: str,
        capture_mode: CaptureMode | str | None = None,
        subsystem_filter: SubsystemFilter = "app",
        launch_args: Sequence[str] | None = None,
    ) -> LogSession:
        """
        Start a capture session.

        Returns:
            The registered LogSession.

        Raises:
            InvalidCaptureRequest: Bad parameters; nothing was touched.
            FileAccessFailure: The log file could not be created; nothing spawned.
            SpawnFailure: The capture process could not be launched.
        """
        kind = _coerce_kind(target_kind)
        if not target_id or not target_id.strip():
            raise InvalidCaptureRequest(f"A {kind.value} identifier is required")
        if not bundle_id or not bundle_id.strip():
            raise InvalidCaptureRequest("A bundle identifier is required")
        mode = _coerce_mode(kind, capture_mode)
        subsystem_filter = _check_subsystem_filter(subsystem_filter)
        launch_args = list(launch_args or [])

        try:
            self.sweeper.sweep()
        except Exception as e:
            logger.warning(f"Log retention sweep failed: {e}")

        session_id = str(uuid.uuid4())
        log_file_path = self.store.create(session_id, kind, bundle_id, target_id)
        sink = self.store.open_sink(log_file_path)

        commands = build_capture_commands(
            kind, mode, target_id, bundle_id, subsystem_filter, launch_args
        )
        try:
            processes, completions = await self.launcher.launch(
                session_id, commands, sink
            )
        except SpawnFailure as e:
            sink.close()
            logger.error(f"Failed to start log capture: {e}")
            raise

        session = LogSession(
            session_id=session_id,
            target_kind=kind,
            target_id=target_id,
            bundle_id=bundle_id,
            capture_mode=mode,
            log_file_path=log_file_path,
            processes=processes,
            sink=sink,
            completions=completions,
            subsystem_filter=subsystem_filter,
            launch_args=launch_args,
        )
        try:
            self.registry.insert(session)
        except RegistryInvariantError:
            for proc in processes:
                self.launcher.terminate(proc)
            sink.close()
            raise

        logger.info(
            f"Log capture started with session ID: {session_id} "
            f"({kind.value} {target_id}, {bundle_id}, {mode.value})"
        )
        return session

    async def stop(
        self, session_id: str, target_kind: TargetKind | str | None = None
    ) -> str:
        """
        Stop a capture session and return everything captured so far.

        The registry entry is removed before anything that can fail, so a
        read failure still leaves the session stopped.

        Args:
            session_id: Id returned by start().
            target_kind: When given, sessions of the other kind are treated
                as not found and left running.

        Raises:
            SessionNotFound: Unknown or already-stopped session.
            FileAccessFailure: The file could not be read back.
        """
        if target_kind is not None:
            kind = _coerce_kind(target_kind)
            existing = self.registry.lookup(session_id)
            if existing is not None and existing.target_kind is not kind:
                logger.warning(
                    f"Session {session_id} belongs to a {existing.target_kind.value}, "
                    f"not a {kind.value}"
                )
                raise SessionNotFound(session_id)

        session = self.registry.remove(session_id)
        if session is None:
            raise SessionNotFound(session_id)

        logger.info(f"Attempting to stop log capture session: {session_id}")
        for proc in session.processes:
            self.launcher.terminate(proc)
        if session.sink is not None:
            session.sink.close()

        logger.info(
            f"Log capture session {session_id} stopped. "
            f"Log file retained at: {session.log_file_path}"
        )
        content = self.store.read_all(session.log_file_path)
        logger.info(f"Successfully read log content from {session.log_file_path}")
        return content

    def list_sessions(self) -> list[dict[str, Any]]:
        return self.registry.list_sessions()

    async def shutdown(self) -> None:
        """Terminate all capture processes. Registry entries and files are left alone."""
        pending: list[asyncio.Task] = []
        for session in self.registry.sessions():
            for proc in session.processes:
                self.launcher.terminate(proc)
            pending.extend(t for t in session.completions if not t.done())

        if pending:
            await asyncio.wait(pending, timeout=SHUTDOWN_DRAIN_TIMEOUT)

        for session in self.registry.sessions():
            if session.sink is not None:
                session.sink.close()
        logger.info(f"Capture controller shut down ({len(self.registry)} sessions)")
