"""
Unit tests for the retention sweeper.
"""

import os
import time

from logcap.capture.sweeper import SECONDS_PER_DAY, RetentionSweeper


def touch(path, age_seconds, now):
    path.write_text("x")
    mtime = now - age_seconds
    os.utime(path, (mtime, mtime))
    return path


class TestRetentionSweeper:
    def setup_method(self):
        self.now = time.time()

    def make_sweeper(self, temp_dir, days=3):
        return RetentionSweeper(
            temp_dir=temp_dir,
            prefixes=("xcodemcp_sim_log_", "xcodemcp_device_log_"),
            retention_days=days,
            clock=lambda: self.now,
        )

    def test_deletes_files_older_than_window(self, temp_dir):
        old = touch(temp_dir / "xcodemcp_sim_log_old.log", 4 * SECONDS_PER_DAY, self.now)
        sweeper = self.make_sweeper(temp_dir)

        deleted = sweeper.sweep()

        assert deleted == [old]
        assert not old.exists()

    def test_keeps_files_inside_window(self, temp_dir):
        fresh = touch(temp_dir / "xcodemcp_sim_log_new.log", 2 * SECONDS_PER_DAY, self.now)
        edge = touch(
            temp_dir / "xcodemcp_device_log_edge.log", 3 * SECONDS_PER_DAY - 60, self.now
        )

        assert self.make_sweeper(temp_dir).sweep() == []
        assert fresh.exists()
        assert edge.exists()

    def test_deletes_device_files_too(self, temp_dir):
        old = touch(
            temp_dir / "xcodemcp_device_log_old.log", 10 * SECONDS_PER_DAY, self.now
        )
        self.make_sweeper(temp_dir).sweep()
        assert not old.exists()

    def test_ignores_non_matching_names(self, temp_dir):
        other_prefix = touch(temp_dir / "something_else.log", 30 * SECONDS_PER_DAY, self.now)
        other_ext = touch(
            temp_dir / "xcodemcp_sim_log_x.txt", 30 * SECONDS_PER_DAY, self.now
        )

        self.make_sweeper(temp_dir).sweep()

        assert other_prefix.exists()
        assert other_ext.exists()

    def test_unreadable_directory_is_absorbed(self, tmp_path):
        sweeper = self.make_sweeper(tmp_path / "missing")
        assert sweeper.sweep() == []

    def test_per_file_failure_does_not_stop_sweep(self, temp_dir, monkeypatch):
        bad = touch(temp_dir / "xcodemcp_sim_log_bad.log", 5 * SECONDS_PER_DAY, self.now)
        good = touch(temp_dir / "xcodemcp_sim_log_good.log", 5 * SECONDS_PER_DAY, self.now)
        sweeper = self.make_sweeper(temp_dir)

        original = sweeper._expired

        def flaky(path, now):
            if path.name == bad.name:
                raise PermissionError("denied")
            return original(path, now)

        monkeypatch.setattr(sweeper, "_expired", flaky)

        deleted = sweeper.sweep()

        assert deleted == [good]
        assert bad.exists()
        assert not good.exists()

    def test_file_already_gone_is_not_an_error(self, temp_dir, monkeypatch):
        touch(temp_dir / "xcodemcp_sim_log_gone.log", 5 * SECONDS_PER_DAY, self.now)
        sweeper = self.make_sweeper(temp_dir)

        def vanished(path, now):
            raise FileNotFoundError(path)

        monkeypatch.setattr(sweeper, "_expired", vanished)
        assert sweeper.sweep() == []
