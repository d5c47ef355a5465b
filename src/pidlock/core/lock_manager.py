"""Lock manager for cross-process resource locking.

Provides PID-based file locking so that only one process at a time works
on a named resource. Includes stale lock detection for crash recovery.

Two strategies share one interface:

- PosixLockStrategy: each process creates '<resource>#<pid>.lock'
  atomically (O_CREAT | O_EXCL) and records its start time in it. Lock
  files of other PIDs are checked against the liveness oracle; files whose
  owner is gone, or whose PID now belongs to a different process, are
  deleted. Among live lock files the oldest one holds the lock; on a tie
  with our own file, we yield.
- WindowsLockStrategy: a single '<resource>.lock' held open for the
  lifetime of the lock. Windows refuses to delete a file another process
  has open, so a file that can be deleted was left by a dead process.

The strategy for the running platform is picked once at import time.
"""

import logging
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path

from ..constants import EMPTY_LOCK_GRACE_NS, LOCK_EXTENSION, MAX_STALE_RETRIES, PID_SEPARATOR
from ..errors import LockError, StaleLockError
from ..models import LockFile, LockOwner
from ..services.filesystem import LocalFileSystem
from .paths import (
    parse_lock_file_name,
    pid_lock_file_name,
    plain_lock_file_name,
    resolve_directory,
    validate_resource_name,
)
from .process_info import StartTimeLookup, get_process_start_time

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike[str]


class LockStrategy(ABC):
    """Platform-specific way of taking a lock on a named resource."""

    def __init__(
        self,
        fs: LocalFileSystem | None = None,
        max_stale_retries: int = MAX_STALE_RETRIES,
    ) -> None:
        self.fs = fs or LocalFileSystem()
        self.max_stale_retries = max_stale_retries

    @abstractmethod
    def lock_file_path(
        self, directory: PathLike, resource_name: str, pid: int | None = None
    ) -> Path:
        """Compute the lock file path for a resource.

        Raises:
            InvalidResourceNameError: If resource_name is not a valid name
        """

    @abstractmethod
    def try_acquire(
        self,
        directory: PathLike,
        resource_name: str,
        pid: int | None = None,
        start_time_of: StartTimeLookup = get_process_start_time,
    ) -> LockFile | None:
        """Attempt to take the lock once.

        Returns:
            LockFile if acquired, None if a live process holds the lock
        """

    @abstractmethod
    def inspect(
        self,
        directory: PathLike,
        resource_name: str | None = None,
        start_time_of: StartTimeLookup = get_process_start_time,
    ) -> list[LockOwner]:
        """Describe the lock files in a directory without changing them."""

    def _start_time(self, pid: int, start_time_of: StartTimeLookup) -> str:
        start_time = start_time_of(pid)
        if start_time is None:
            raise LockError(f"Unable to determine start time for process {pid}")
        return start_time

    def _retries_exhausted(self, lock_path: Path) -> StaleLockError:
        return StaleLockError(
            f"Failed to acquire {lock_path.name} after {self.max_stale_retries} attempts"
            " to clear a stale lock"
        )


class PosixLockStrategy(LockStrategy):
    """Per-PID lock files validated by process start time (Linux, macOS)."""

    def lock_file_path(
        self, directory: PathLike, resource_name: str, pid: int | None = None
    ) -> Path:
        validate_resource_name(resource_name)
        if pid is None:
            pid = os.getpid()
        return resolve_directory(directory) / pid_lock_file_name(resource_name, pid)

    def try_acquire(
        self,
        directory: PathLike,
        resource_name: str,
        pid: int | None = None,
        start_time_of: StartTimeLookup = get_process_start_time,
    ) -> LockFile | None:
        if pid is None:
            pid = os.getpid()
        lock_path = self.lock_file_path(directory, resource_name, pid)
        start_time = self._start_time(pid, start_time_of)

        dirty = False
        for _ in range(self.max_stale_retries):
            if self.fs.create_exclusive(lock_path, start_time):
                break

            recorded = self.fs.read_text(lock_path)
            if recorded == start_time:
                logger.debug(f"{lock_path.name} is already held by this process")
                return None
            if recorded is not None:
                # Same PID, different start time: left by an earlier process
                logger.info(f"Removing stale lock {lock_path.name} (PID {pid} was reused)")
                if self.fs.delete(lock_path):
                    dirty = True
        else:
            raise self._retries_exhausted(lock_path)

        acquired = False
        try:
            holds_lock, removed_stale = self._resolve_competitors(
                lock_path, resource_name, pid, start_time_of
            )
            if not holds_lock:
                return None
            acquired = True
        finally:
            if not acquired:
                self.fs.delete(lock_path)

        return LockFile.acquired(lock_path, dirty or removed_stale, self.fs)

    def _resolve_competitors(
        self,
        lock_path: Path,
        resource_name: str,
        pid: int,
        start_time_of: StartTimeLookup,
    ) -> tuple[bool, bool]:
        """Check lock files of other PIDs against our own.

        Stale lock files are deleted. A live lock file that is older than ours,
        or has the same modification time, holds the lock. On a tie every
        contender yields: one of them may already hold the lock, and
        contenders still deciding simply try again.

        Returns:
            Tuple of (we hold the lock, a stale lock file was removed)
        """
        own_mtime = self.fs.modified_time_ns(lock_path)
        if own_mtime is None:
            raise LockError(f"Lock file {lock_path} disappeared during acquisition")

        holder = None
        removed_stale = False

        for name in self.fs.list_names(lock_path.parent):
            parsed = parse_lock_file_name(name)
            if parsed is None:
                continue
            other_resource, other_pid = parsed
            if other_resource != resource_name or other_pid == pid:
                continue

            other_path = lock_path.parent / name
            recorded = self.fs.read_text(other_path)
            other_mtime = self.fs.modified_time_ns(other_path)
            if recorded is None or other_mtime is None:
                # Deleted since the directory was listed
                continue

            if recorded == "":
                # Created but not written yet
                if other_mtime > own_mtime:
                    continue
                if own_mtime - other_mtime < EMPTY_LOCK_GRACE_NS:
                    logger.debug(f"{name} is still being created; not taking the lock")
                    return False, removed_stale

            current = start_time_of(other_pid)
            if current is None or current != recorded:
                logger.info(f"Removing stale lock {name} (PID {other_pid} is gone or was reused)")
                if self.fs.delete(other_path):
                    removed_stale = True
                continue

            if other_mtime <= own_mtime:
                holder = other_pid

        if holder is not None:
            logger.debug(f"Lock on {resource_name!r} is held by PID {holder}")
            return False, removed_stale
        return True, removed_stale

    def inspect(
        self,
        directory: PathLike,
        resource_name: str | None = None,
        start_time_of: StartTimeLookup = get_process_start_time,
    ) -> list[LockOwner]:
        if resource_name is not None:
            validate_resource_name(resource_name)
        folder = resolve_directory(directory)

        owners = []
        for name in self.fs.list_names(folder):
            parsed = parse_lock_file_name(name)
            if parsed is None:
                continue
            other_resource, other_pid = parsed
            if resource_name is not None and other_resource != resource_name:
                continue

            recorded = self.fs.read_text(folder / name)
            if recorded is None:
                continue
            current = start_time_of(other_pid)
            owners.append(
                LockOwner(
                    path=folder / name,
                    resource_name=other_resource,
                    pid=other_pid,
                    recorded_start_time=recorded,
                    current_start_time=current,
                    live=current is not None and current == recorded,
                )
            )
        return owners


class WindowsLockStrategy(LockStrategy):
    """Single lock file held open for the lifetime of the lock (Windows)."""

    def lock_file_path(
        self, directory: PathLike, resource_name: str, pid: int | None = None
    ) -> Path:
        # The open handle ties the lock to its process, so the PID is not needed
        validate_resource_name(resource_name)
        return resolve_directory(directory) / plain_lock_file_name(resource_name)

    def try_acquire(
        self,
        directory: PathLike,
        resource_name: str,
        pid: int | None = None,
        start_time_of: StartTimeLookup = get_process_start_time,
    ) -> LockFile | None:
        lock_path = self.lock_file_path(directory, resource_name)
        # The open handle belongs to this process whatever PID was passed
        start_time = self._start_time(os.getpid(), start_time_of)

        dirty = False
        for _ in range(self.max_stale_retries):
            if self.fs.exists(lock_path):
                try:
                    removed = self.fs.delete(lock_path)
                except PermissionError:
                    logger.debug(f"{lock_path.name} is held open by another process")
                    return None
                if removed:
                    logger.info(f"Removed stale lock {lock_path.name}")
                    dirty = True

            handle = self.fs.open_exclusive(lock_path)
            if handle is None:
                # Another process created it between the delete and the open
                continue

            try:
                self.fs.write(handle, start_time)
            except OSError:
                self.fs.close(handle)
                self.fs.delete(lock_path)
                raise
            return LockFile.acquired(lock_path, dirty, self.fs, handle=handle)

        raise self._retries_exhausted(lock_path)

    def inspect(
        self,
        directory: PathLike,
        resource_name: str | None = None,
        start_time_of: StartTimeLookup = get_process_start_time,
    ) -> list[LockOwner]:
        if resource_name is not None:
            validate_resource_name(resource_name)
        folder = resolve_directory(directory)

        owners = []
        for name in self.fs.list_names(folder):
            if not name.endswith(LOCK_EXTENSION) or PID_SEPARATOR in name:
                continue
            name_resource = name[: -len(LOCK_EXTENSION)]
            if resource_name is not None and name_resource != resource_name:
                continue

            recorded = self.fs.read_text(folder / name)
            if recorded is None:
                continue
            # Without a PID the owner cannot be looked up; an existing file
            # counts as held until an acquisition proves otherwise.
            owners.append(
                LockOwner(
                    path=folder / name,
                    resource_name=name_resource,
                    recorded_start_time=recorded,
                    live=True,
                )
            )
        return owners


_PLATFORM_STRATEGY: type[LockStrategy] = (
    WindowsLockStrategy if sys.platform == "win32" else PosixLockStrategy
)


def default_strategy(
    fs: LocalFileSystem | None = None,
    max_stale_retries: int = MAX_STALE_RETRIES,
) -> LockStrategy:
    """Create the lock strategy for the running platform."""
    return _PLATFORM_STRATEGY(fs=fs, max_stale_retries=max_stale_retries)


def get_lock_file_path(directory: PathLike, resource_name: str, pid: int | None = None) -> Path:
    """Get the lock file path for a resource.

    Args:
        directory: Folder holding the lock file (made absolute)
        resource_name: Name of the locked resource
        pid: Owning process (defaults to the current one; ignored on Windows)

    Returns:
        '<directory>/<resource_name>#<pid>.lock', or
        '<directory>/<resource_name>.lock' on Windows

    Raises:
        InvalidResourceNameError: If resource_name is not a valid name
    """
    return default_strategy().lock_file_path(directory, resource_name, pid)


def try_acquire(
    directory: PathLike,
    resource_name: str,
    pid: int | None = None,
    *,
    start_time_of: StartTimeLookup = get_process_start_time,
    strategy: LockStrategy | None = None,
) -> LockFile | None:
    """Attempt to acquire the lock on a resource without waiting.

    Args:
        directory: Folder holding the lock file
        resource_name: Name of the locked resource
        pid: Process to acquire on behalf of (defaults to the current one)
        start_time_of: Liveness oracle mapping a PID to its start time
        strategy: Lock strategy (defaults to the platform's)

    Returns:
        LockFile if acquired, None if a live process holds the lock

    Raises:
        InvalidResourceNameError: If resource_name is not a valid name
        StaleLockError: If stale locks kept reappearing
        OSError: On I/O failures unrelated to contention
    """
    strategy = strategy or default_strategy()
    return strategy.try_acquire(directory, resource_name, pid, start_time_of)


def inspect_locks(
    directory: PathLike,
    resource_name: str | None = None,
    *,
    start_time_of: StartTimeLookup = get_process_start_time,
    strategy: LockStrategy | None = None,
) -> list[LockOwner]:
    """List lock files in a directory and whether their owners are alive.

    Args:
        directory: Folder to scan
        resource_name: Only report locks for this resource

    Returns:
        One LockOwner per lock file, sorted by file name
    """
    strategy = strategy or default_strategy()
    return strategy.inspect(directory, resource_name, start_time_of)
