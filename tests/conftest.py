"""Shared pytest fixtures and configuration."""

import itertools

import pytest

from logcap.capture.controller import CaptureController
from logcap.capture.errors import SpawnFailure
from logcap.capture.launcher import ProcessLauncher
from logcap.capture.registry import SessionRegistry
from logcap.capture.store import LogFileStore
from logcap.capture.sweeper import RetentionSweeper

_pids = itertools.count(40000)


class FakeProcess:
    """Stands in for asyncio.subprocess.Process without spawning anything."""

    def __init__(self, returncode=None):
        self.pid = next(_pids)
        self.returncode = returncode
        self.terminate_calls = 0

    def terminate(self):
        self.terminate_calls += 1


class FakeLauncher(ProcessLauncher):
    """Records launched commands and hands back FakeProcess objects."""

    def __init__(self, fail_on: str | None = None):
        self.launched = []
        self.spawned = []
        self.fail_on = fail_on

    async def spawn(self, command):
        if self.fail_on and self.fail_on == command.description:
            raise SpawnFailure(f"Failed to start {command.description}: boom")
        proc = FakeProcess()
        self.launched.append(command)
        self.spawned.append(proc)
        return proc

    async def launch(self, session_id, commands, sink):
        processes = []
        try:
            for command in commands:
                processes.append(await self.spawn(command))
        except SpawnFailure:
            for proc in processes:
                self.terminate(proc)
            raise
        return processes, []


@pytest.fixture
def temp_dir(tmp_path):
    path = tmp_path / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def store(temp_dir):
    return LogFileStore(temp_dir=temp_dir)


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def fake_launcher():
    return FakeLauncher()


@pytest.fixture
def controller(registry, store, fake_launcher):
    sweeper = RetentionSweeper(temp_dir=store.temp_dir, prefixes=store.prefixes)
    return CaptureController(
        registry, store=store, sweeper=sweeper, launcher=fake_launcher
    )
