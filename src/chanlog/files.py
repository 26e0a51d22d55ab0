"""
Reference counted file handles shared between channels.

A ``SharedFileHandle`` is open exactly while at least one channel uses it.
Handles are keyed by resolved path and kept around after they close, so a
channel that is re-enabled later reopens the same handle object.
"""

from __future__ import annotations

import gzip
import shutil
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, TextIO

from .diagnostics import get_logger
from .rotation import RotationTimer, date_stamp, normalize_period

logger = get_logger("files")


@dataclass(frozen=True)
class RotationPolicy:
    """Where dated files live and what happens to rotated-out ones."""

    directory: Path
    file_name: str
    period: str = "daily"
    keep_old: int = 1
    compress_old: bool = True
    monday_first: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "period", normalize_period(self.period))

    def path_for(self, when: datetime | None = None) -> Path:
        return self.directory / f"{date_stamp(when)}-{self.file_name}.log"

    def archived_files(self) -> list[Path]:
        pattern = f"????-??-??-{self.file_name}.log*"
        return sorted(p for p in self.directory.glob(pattern) if p.is_file())


class SharedFileHandle:
    """One open append-mode file used by any number of channels."""

    def __init__(self, path: Path, policy: RotationPolicy | None = None) -> None:
        self.path = path
        self.policy = policy
        self.users = 0
        self.timer: RotationTimer | None = None
        self._stream: TextIO | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"SharedFileHandle(path={str(self.path)!r}, users={self.users}, open={self.is_open})"

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self) -> None:
        with self._lock:
            if self._stream is None:
                self._stream = open(self.path, "a", encoding="utf-8")
                logger.debug("file_opened", path=str(self.path))

    def close(self) -> None:
        with self._lock:
            if self._stream is not None:
                self._stream.close()
                self._stream = None
                logger.debug("file_closed", path=str(self.path))

    def write(self, text: str) -> None:
        with self._lock:
            if self._stream is None:
                raise ValueError(f"Log file is closed: {self.path}")
            self._stream.write(text)
            self._stream.flush()

    def switch_to(self, path: Path) -> Path:
        """Close the current file and continue in ``path``. Returns the old path."""
        with self._lock:
            old_path = self.path
            if self._stream is not None:
                self._stream.close()
                self._stream = open(path, "a", encoding="utf-8")
            self.path = path
        logger.debug("file_rotated", old_path=str(old_path), path=str(path))
        return old_path


class FileHandleRegistry:
    """Hands out ``SharedFileHandle`` objects and counts their users."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._handles: dict[str, SharedFileHandle] = {}
        self._clock = clock
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._handles)

    def get(self, path: str | Path) -> SharedFileHandle | None:
        return self._handles.get(str(path))

    def open_handles(self) -> list[SharedFileHandle]:
        return [handle for handle in self._handles.values() if handle.is_open]

    def acquire(self, path: Path, policy: RotationPolicy | None = None) -> SharedFileHandle:
        """Get the handle for ``path``, opening it if needed, and count one more user."""
        with self._lock:
            handle = self._handles.get(str(path))
            if handle is None:
                handle = SharedFileHandle(path, policy)
                self._handles[str(path)] = handle
            elif handle.policy is None and policy is not None:
                handle.policy = policy
            return self._retain_locked(handle)

    def retain(self, handle: SharedFileHandle) -> SharedFileHandle:
        """Count one more user of ``handle``, reopening it if it was closed.

        Returns the handle now in use: a closed rotating handle whose new dated
        path is already owned by another handle is merged into that one.
        """
        with self._lock:
            return self._retain_locked(handle)

    def release(self, handle: SharedFileHandle) -> None:
        """Count one user less; the last one closes the file and stops rotation."""
        with self._lock:
            if handle.users == 0:
                return
            handle.users -= 1
            if handle.users == 0:
                if handle.timer is not None:
                    handle.timer.cancel()
                handle.close()

    def close_all(self) -> None:
        with self._lock:
            for handle in self._handles.values():
                if handle.timer is not None:
                    handle.timer.cancel()
                handle.users = 0
                handle.close()
            self._handles.clear()

    def _retain_locked(self, handle: SharedFileHandle) -> SharedFileHandle:
        if handle.users > 0:
            handle.users += 1
            return handle
        policy = handle.policy
        if policy is not None:
            # The date may have moved on while the handle was closed.
            current = policy.path_for(self._clock())
            if current != handle.path:
                owner = self._handles.get(str(current))
                if owner is not None and owner is not handle:
                    self._forget(handle)
                    return self._retain_locked(owner)
                self._rekey(handle, current)
                handle.path = current
        handle.users = 1
        handle.path.parent.mkdir(parents=True, exist_ok=True)
        handle.open()
        if policy is not None:
            if handle.timer is None:
                handle.timer = RotationTimer(
                    policy.period,
                    lambda: self.rotate(handle),
                    monday_first=policy.monday_first,
                    clock=self._clock,
                )
            handle.timer.start()
        return handle

    def _forget(self, handle: SharedFileHandle) -> None:
        if self._handles.get(str(handle.path)) is handle:
            del self._handles[str(handle.path)]
        if handle.timer is not None:
            handle.timer.cancel()

    def _rekey(self, handle: SharedFileHandle, path: Path) -> None:
        if self._handles.get(str(handle.path)) is handle:
            del self._handles[str(handle.path)]
        self._handles.setdefault(str(path), handle)

    def rotate(self, handle: SharedFileHandle) -> None:
        """Move ``handle`` to the file for the current period and archive the old one."""
        policy = handle.policy
        if policy is None:
            return
        with self._lock:
            if handle.users == 0:
                return
            new_path = policy.path_for(self._clock())
            if new_path == handle.path:
                return
            self._rekey(handle, new_path)
            old_path = handle.switch_to(new_path)
        archive(old_path, policy, current=new_path)


def archive(path: Path, policy: RotationPolicy, current: Path) -> None:
    """Compress ``path`` and prune old files. Failures are logged, not raised."""
    try:
        if policy.compress_old and path.exists():
            target = path.with_name(path.name + ".gz")
            with open(path, "rb") as src, gzip.open(target, "wb") as dst:
                shutil.copyfileobj(src, dst)
            path.unlink()

        rotated = [p for p in policy.archived_files() if p != current]
        excess = len(rotated) - max(policy.keep_old, 0)
        for old in rotated[: max(excess, 0)]:
            old.unlink()
            logger.debug("file_pruned", path=str(old))
    except OSError as exc:
        logger.warning("archive_failed", path=str(path), error=str(exc))
