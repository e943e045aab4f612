"""File locks guarding the canonical store.

Readers take a shared ``flock`` and the consolidation batch takes an exclusive
one on a sidecar ``.lock`` file next to the store. Locks are per open file
description, so two ``StoreLock`` instances conflict even inside one process.
"""

from __future__ import annotations

import fcntl
import os
import time
from pathlib import Path
from typing import Any

from roundlog.shared.exceptions import StoreLockTimeout

_POLL_INTERVAL = 0.05


class StoreLock:
    """Shared or exclusive store lock context manager."""

    def __init__(self, lock_file: Path, exclusive: bool, timeout: float) -> None:
        """Initialize store lock.

        Parameters
        ----------
        lock_file
            Sidecar lock file path (created if missing)
        exclusive
            Take ``LOCK_EX`` instead of ``LOCK_SH``
        timeout
            Seconds to keep retrying before giving up
        """
        self.lock_file = lock_file
        self.exclusive = exclusive
        self.timeout = timeout
        self.lock_fd: int | None = None

    @property
    def mode(self) -> str:
        return "exclusive" if self.exclusive else "shared"

    def __enter__(self) -> StoreLock:
        """Acquire lock."""
        self.lock_file.parent.mkdir(parents=True, exist_ok=True)
        self.lock_fd = os.open(self.lock_file, os.O_CREAT | os.O_RDWR, 0o644)

        operation = fcntl.LOCK_EX if self.exclusive else fcntl.LOCK_SH
        start_time = time.monotonic()

        while True:
            try:
                fcntl.flock(self.lock_fd, operation | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() - start_time > self.timeout:
                    os.close(self.lock_fd)
                    self.lock_fd = None
                    raise StoreLockTimeout(
                        f"Failed to acquire {self.mode} lock on {self.lock_file} "
                        f"after {self.timeout}s timeout"
                    )
                time.sleep(_POLL_INTERVAL)

        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Release lock."""
        if self.lock_fd is not None:
            try:
                fcntl.flock(self.lock_fd, fcntl.LOCK_UN)
            finally:
                os.close(self.lock_fd)
                self.lock_fd = None
