"""Tests for the exclusive lock: bounded wait, release on every exit path."""

import threading
import time

import pytest

from pluginctl.core.errors import LockTimeoutError
from pluginctl.core.locking import exclusive_lock


class TestExclusiveLock:
    def test_acquire_and_release(self, tmp_path):
        path = tmp_path / "x.lock"
        with exclusive_lock(path, timeout=0.5):
            assert path.exists()
        with exclusive_lock(path, timeout=0.5):
            pass

    def test_times_out_while_held(self, tmp_path):
        path = tmp_path / "x.lock"
        with exclusive_lock(path, timeout=0.5):
            start = time.monotonic()
            with pytest.raises(LockTimeoutError) as exc:
                with exclusive_lock(path, timeout=0.2):
                    pass
            assert time.monotonic() - start >= 0.2
        assert exc.value.timeout == 0.2

    def test_released_after_exception(self, tmp_path):
        path = tmp_path / "x.lock"
        with pytest.raises(RuntimeError):
            with exclusive_lock(path, timeout=0.5):
                raise RuntimeError("boom")
        with exclusive_lock(path, timeout=0.1):
            pass

    def test_waits_for_holder(self, tmp_path):
        path = tmp_path / "x.lock"
        held = threading.Event()

        def holder():
            with exclusive_lock(path, timeout=1):
                held.set()
                time.sleep(0.2)

        t = threading.Thread(target=holder)
        t.start()
        held.wait()
        with exclusive_lock(path, timeout=2):
            pass
        t.join()

    def test_creates_parent_directory(self, tmp_path):
        with exclusive_lock(tmp_path / "a" / "b" / "x.lock", timeout=0.1):
            pass
