from __future__ import annotations

import logging
import os
import socket
import threading
import time
import uuid
from pathlib import Path
from typing import Any

"""Advisory processing lock.

Two runs must not rewrite the same workbook at once. The lock is a file
created with O_EXCL holding an ownership token ``<host> <pid> <uuid>``.
While held, a heartbeat thread keeps the file's mtime fresh, and release()
only removes the file if it still carries this holder's token.

A waiter reclaims an existing lock when its holder is provably gone: same
host and the recorded pid no longer exists (POSIX only), or no heartbeat
for ``stale_after_seconds``.
"""

__all__ = [
    "LockTimeoutError",
    "ProcessingLock",
    "pid_alive",
]

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1
HEARTBEAT_SECONDS = 2.0
STALE_AFTER_SECONDS = 60.0


class LockTimeoutError(Exception):
    """Raised when the processing lock could not be acquired in time."""


def pid_alive(pid: int) -> bool:
    """True if a process with ``pid`` exists on this host."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # exists, owned by someone else
        return True
    return True


class ProcessingLock:
    def __init__(
        self,
        path: Path,
        timeout_seconds: float = 30.0,
        heartbeat_seconds: float = HEARTBEAT_SECONDS,
        stale_after_seconds: float = STALE_AFTER_SECONDS,
    ) -> None:
        self.path = path
        self.timeout_seconds = timeout_seconds
        self.heartbeat_seconds = heartbeat_seconds
        self.stale_after_seconds = stale_after_seconds
        self.token = f"{socket.gethostname()} {os.getpid()} {uuid.uuid4().hex}"
        self._held = False
        self._stop = threading.Event()
        self._heartbeat: threading.Thread | None = None

    @property
    def held(self) -> bool:
        return self._held

    def _read_token(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None

    def _try_create(self) -> bool:
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            return False
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(f"{self.token}\n")
        return True

    def _is_stale(self, token: str) -> bool:
        parts = token.split()
        if len(parts) == 3 and parts[0] == socket.gethostname() and parts[1].isdigit() and os.name == "posix":
            return not pid_alive(int(parts[1]))
        try:
            age = time.time() - self.path.stat().st_mtime
        except FileNotFoundError:
            return False
        return age > self.stale_after_seconds

    def _reclaim_if_stale(self) -> None:
        token = self._read_token()
        if token is None or not self._is_stale(token):
            return
        # the file may have been replaced since it was read
        if self._read_token() != token:
            return
        logger.warning("removing stale lock %s (holder %r)", self.path, token)
        self.path.unlink(missing_ok=True)

    def _beat(self) -> None:
        while not self._stop.wait(self.heartbeat_seconds):
            if self._read_token() != self.token:
                logger.error("lock %s was taken over by another holder", self.path)
                return
            try:
                os.utime(self.path)
            except FileNotFoundError:
                return

    def acquire(self) -> None:
        if self._held:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        deadline = time.monotonic() + self.timeout_seconds
        while True:
            self._reclaim_if_stale()
            if self._try_create():
                self._held = True
                self._stop.clear()
                self._heartbeat = threading.Thread(target=self._beat, name="trupath-lock-heartbeat", daemon=True)
                self._heartbeat.start()
                logger.debug("lock acquired: %s", self.path)
                return
            if time.monotonic() >= deadline:
                raise LockTimeoutError(
                    f"could not acquire lock {self.path} within {self.timeout_seconds}s"
                )
            time.sleep(POLL_INTERVAL)

    def release(self) -> None:
        if not self._held:
            return
        self._stop.set()
        if self._heartbeat is not None:
            self._heartbeat.join()
            self._heartbeat = None
        self._held = False
        current = self._read_token()
        if current != self.token:
            logger.warning("lock %s no longer ours (holder %r); leaving it", self.path, current)
            return
        self.path.unlink(missing_ok=True)
        logger.debug("lock released: %s", self.path)

    def __enter__(self) -> ProcessingLock:
        self.acquire()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.release()
