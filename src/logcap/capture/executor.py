"""
One-shot command execution for auxiliary calls (tool presence checks and the
like). Long-lived capture processes are spawned by ProcessLauncher instead.
"""

import asyncio
from dataclasses import dataclass
from typing import Sequence

from logcap.config import CONFIG
from logcap.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    success: bool
    output: str
    error: str | None = None
    returncode: int | None = None


async def execute(
    argv: Sequence[str], description: str, timeout: float | None = None
) -> CommandResult:
    """
    Run a command to completion and capture its output.

    Never raises for command failures; they are reported in the result.
    """
    timeout = timeout if timeout is not None else CONFIG.command_timeout
    logger.debug(f"{description}: {' '.join(argv)}")

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        return CommandResult(success=False, output="", error=f"{description}: {e}")

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        return CommandResult(
            success=False,
            output="",
            error=f"{description}: timed out after {timeout:g}s",
            returncode=proc.returncode,
        )

    output = stdout.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        err = stderr.decode("utf-8", errors="replace").strip()
        return CommandResult(
            success=False,
            output=output,
            error=err or f"{description} exited with code {proc.returncode}",
            returncode=proc.returncode,
        )
    return CommandResult(success=True, output=output, returncode=proc.returncode)
