"""Lock files that serialise writes against one album directory."""

from __future__ import annotations

import os
import time
from pathlib import Path
from types import TracebackType

from ..config import LOCK_DIR_NAME, LOCK_EXPIRE_SEC, LOCK_POLL_SEC, LOCK_TIMEOUT_SEC, WORK_DIR_NAME
from ..errors import LockTimeoutError, PersistenceError
from ..utils.logging import get_logger

LOGGER = get_logger("lock")


class FileLock:
    """Exclusive ``<album>/.galleria/locks/<name>.lock`` file.

    The lock file is created with ``O_EXCL``. A lock older than
    :data:`LOCK_EXPIRE_SEC` is considered abandoned by a crashed process and
    is broken. Holders in other processes are not otherwise detected.
    """

    def __init__(
        self,
        root: Path,
        name: str,
        *,
        timeout: float = LOCK_TIMEOUT_SEC,
        expire: float = LOCK_EXPIRE_SEC,
    ) -> None:
        self.path = root / WORK_DIR_NAME / LOCK_DIR_NAME / f"{name}.lock"
        self._timeout = timeout
        self._expire = expire
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Could not create lock directory {self.path.parent}: {exc}") from exc

        deadline = time.monotonic() + self._timeout
        while True:
            try:
                fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
            except FileExistsError:
                if self._break_if_stale():
                    continue
                if time.monotonic() >= deadline:
                    raise LockTimeoutError(f"Timed out waiting for {self.path}") from None
                time.sleep(LOCK_POLL_SEC)
                continue
            except OSError as exc:
                raise PersistenceError(f"Could not create lock {self.path}: {exc}") from exc
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(str(os.getpid()))
            self._held = True
            return

    def release(self) -> None:
        if not self._held:
            return
        self._held = False
        try:
            self.path.unlink()
        except FileNotFoundError:
            LOGGER.warning("Lock %s vanished before release", self.path)

    def _break_if_stale(self) -> bool:
        try:
            age = time.time() - self.path.stat().st_mtime
        except FileNotFoundError:
            return True
        if age < self._expire:
            return False
        LOGGER.warning("Breaking stale lock %s (%.0fs old)", self.path, age)
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        return True

    def __enter__(self) -> "FileLock":
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


__all__ = ["FileLock"]
