"""Scoped exclusive lock shared by every mutating lifecycle operation."""

from __future__ import annotations

import fcntl
import logging
import os
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .errors import LockTimeoutError

log = logging.getLogger(__name__)

POLL_INTERVAL = 0.05


@contextmanager
def exclusive_lock(path: Path, timeout: float = 10.0) -> Iterator[None]:
    """Hold an ``flock`` on *path* for the duration of the block.

    Polls with a non-blocking request until *timeout* seconds have passed,
    then raises LockTimeoutError. The lock is released on every exit path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(str(path), os.O_RDWR | os.O_CREAT, 0o644)
    deadline = time.monotonic() + max(timeout, 0.0)
    try:
        while True:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise LockTimeoutError(path, timeout) from None
                time.sleep(POLL_INTERVAL)
        log.debug("acquired %s", path)
        try:
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            log.debug("released %s", path)
    finally:
        os.close(fd)
