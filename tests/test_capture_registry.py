"""
Unit tests for the session registry.
"""

from pathlib import Path

import pytest

from logcap.capture.base import CaptureMode, LogSession, TargetKind
from logcap.capture.errors import RegistryInvariantError
from logcap.capture.registry import SessionRegistry

from conftest import FakeProcess


def make_session(session_id="s-1", target_id="SIM-1", processes=None):
    return LogSession(
        session_id=session_id,
        target_kind=TargetKind.SIMULATOR,
        target_id=target_id,
        bundle_id="com.example.App",
        capture_mode=CaptureMode.STRUCTURED_ONLY,
        log_file_path=Path(f"/tmp/xcodemcp_sim_log_{session_id}.log"),
        processes=processes if processes is not None else [FakeProcess()],
    )


class TestLogSession:
    def test_is_running_while_any_process_alive(self):
        session = make_session(processes=[FakeProcess(returncode=0), FakeProcess()])
        assert session.is_running

    def test_not_running_after_all_exit(self):
        session = make_session(processes=[FakeProcess(returncode=0)])
        assert not session.is_running

    def test_to_dict(self):
        session = make_session()
        d = session.to_dict()
        assert d["session_id"] == "s-1"
        assert d["target_kind"] == "simulator"
        assert d["capture_mode"] == "structured-only"
        assert d["log_file_path"].endswith("xcodemcp_sim_log_s-1.log")
        assert d["running"] is True
        assert len(d["pids"]) == 1


class TestSessionRegistry:
    def setup_method(self):
        self.registry = SessionRegistry()

    def test_insert_and_lookup(self):
        session = make_session()
        self.registry.insert(session)

        assert "s-1" in self.registry
        assert self.registry.lookup("s-1") is session
        assert len(self.registry) == 1

    def test_insert_duplicate_is_invariant_violation(self):
        self.registry.insert(make_session())
        with pytest.raises(RegistryInvariantError):
            self.registry.insert(make_session())
        assert len(self.registry) == 1

    def test_lookup_unknown(self):
        assert self.registry.lookup("nothing") is None

    def test_remove_returns_session(self):
        session = make_session()
        self.registry.insert(session)

        removed = self.registry.remove("s-1")
        assert removed is session
        assert "s-1" not in self.registry

    def test_remove_twice(self):
        self.registry.insert(make_session())
        assert self.registry.remove("s-1") is not None
        assert self.registry.remove("s-1") is None

    def test_same_target_sessions_are_independent(self):
        self.registry.insert(make_session("a", target_id="SIM-1"))
        self.registry.insert(make_session("b", target_id="SIM-1"))

        assert len(self.registry) == 2
        self.registry.remove("a")
        assert "b" in self.registry

    def test_list_sessions(self):
        self.registry.insert(make_session("a"))
        self.registry.insert(make_session("b"))

        listed = self.registry.list_sessions()
        assert [s["session_id"] for s in listed] == ["a", "b"]

    def test_registries_are_isolated(self):
        other = SessionRegistry()
        self.registry.insert(make_session())
        assert len(other) == 0
