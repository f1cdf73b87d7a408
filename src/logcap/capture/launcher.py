"""
Process launcher for capture sessions.

Builds the platform capture commands, spawns them with asyncio and pumps
their stdout/stderr into the session's LogSink as bytes arrive.

Commands:
    simulator, structured-only:
        xcrun simctl spawn <sim> log stream --level=debug [--predicate ...]
    simulator, console+structured:
        xcrun simctl launch --console-pty --terminate-running-process <sim> <bundle> [args]
        followed by the structured stream command above
    device:
        xcrun devicectl device process launch --console --terminate-existing
            --device <dev> <bundle> [args]
"""

import asyncio
from dataclasses import dataclass
from typing import Sequence

from logcap.capture.base import CaptureMode, SubsystemFilter, TargetKind
from logcap.capture.errors import SpawnFailure
from logcap.logger import get_logger

logger = get_logger(__name__)

SWIFTUI_SUBSYSTEM = "com.apple.SwiftUI"
READ_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class CaptureCommand:
    description: str
    argv: list[str]


def build_log_predicate(bundle_id: str, subsystem_filter: SubsystemFilter) -> str | None:
    """
    Build the `log stream --predicate` expression for a subsystem filter.

    Returns None when no filtering is wanted ("all").
    """
    if subsystem_filter == "all":
        return None
    if subsystem_filter == "app":
        return f'subsystem == "{bundle_id}"'
    if subsystem_filter == "swiftui":
        return f'subsystem == "{bundle_id}" OR subsystem == "{SWIFTUI_SUBSYSTEM}"'

    # Custom list, always including the app's own subsystem
    subsystems = list(dict.fromkeys([bundle_id, *subsystem_filter]))
    return " OR ".join(f'subsystem == "{s}"' for s in subsystems)


def build_capture_commands(
    kind: TargetKind,
    mode: CaptureMode,
    target_id: str,
    bundle_id: str,
    subsystem_filter: SubsystemFilter = "app",
    launch_args: Sequence[str] = (),
) -> list[CaptureCommand]:
    """Return the commands a session must spawn, in launch order."""
    if kind is TargetKind.DEVICE:
        return [
            CaptureCommand(
                "Device Log Capture",
                [
                    "xcrun",
                    "devicectl",
                    "device",
                    "process",
                    "launch",
                    "--console",
                    "--terminate-existing",
                    "--device",
                    target_id,
                    bundle_id,
                    *launch_args,
                ],
            )
        ]

    commands = []
    if mode is CaptureMode.CONSOLE_AND_STRUCTURED:
        commands.append(
            CaptureCommand(
                "Console Log Capture",
                [
                    "xcrun",
                    "simctl",
                    "launch",
                    "--console-pty",
                    "--terminate-running-process",
                    target_id,
                    bundle_id,
                    *launch_args,
                ],
            )
        )

    stream_cmd = [
        "xcrun",
        "simctl",
        "spawn",
        target_id,
        "log",
        "stream",
        "--level=debug",
    ]
    predicate = build_log_predicate(bundle_id, subsystem_filter)
    if predicate:
        stream_cmd.extend(["--predicate", predicate])
    commands.append(CaptureCommand("OS Log Capture", stream_cmd))
    return commands


class ProcessLauncher:
    """Spawns capture processes and wires their output into a sink."""

    async def spawn(self, command: CaptureCommand) -> asyncio.subprocess.Process:
        """
        Start one capture process with piped output.

        Raises:
            SpawnFailure: If the executable cannot be started.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *command.argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise SpawnFailure(f"Failed to start {command.description}: {e}") from e

        logger.debug(f"{command.description} started (pid={proc.pid})")
        return proc

    async def launch(
        self, session_id: str, commands: Sequence[CaptureCommand], sink
    ) -> tuple[list[asyncio.subprocess.Process], list[asyncio.Task]]:
        """
        Spawn every command and attach its streams to ``sink``.

        If a later command fails, processes already started for this launch
        are terminated before SpawnFailure propagates.

        Returns:
            (processes, completions) where each completion resolves once the
            matching process has exited and its output is drained.
        """
        processes: list[asyncio.subprocess.Process] = []
        try:
            for command in commands:
                processes.append(await self.spawn(command))
        except SpawnFailure:
            for proc in processes:
                self.terminate(proc)
            raise

        completions = [
            asyncio.create_task(
                self._watch(session_id, command.description, proc, sink),
                name=f"logcap-{session_id}-{index}",
            )
            for index, (command, proc) in enumerate(zip(commands, processes))
        ]
        return processes, completions

    @staticmethod
    def terminate(proc: asyncio.subprocess.Process) -> bool:
        """
        Send SIGTERM if the process is still running. Never escalates.

        Returns:
            True if a signal was sent.
        """
        if proc.returncode is not None:
            return False
        try:
            proc.terminate()
        except ProcessLookupError:
            return False
        return True

    async def _watch(
        self, session_id: str, description: str, proc: asyncio.subprocess.Process, sink
    ) -> int:
        pumps = [
            self._pump(stream, sink)
            for stream in (proc.stdout, proc.stderr)
            if stream is not None
        ]
        await asyncio.gather(*pumps)
        code = await proc.wait()
        logger.info(
            f"A log capture process for session {session_id} "
            f"({description}) exited with code {code}."
        )
        return code

    @staticmethod
    async def _pump(stream: asyncio.StreamReader, sink) -> None:
        """Copy chunks into the sink until EOF. Once the sink is closed or
        fails, keep reading and discard so the process never blocks on a
        full pipe."""
        discarding = False
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                return
            if discarding:
                continue
            try:
                if not sink.write(chunk):
                    discarding = True
            except OSError as e:
                logger.warning(f"Failed to write captured output to {sink.path}: {e}")
                discarding = True
