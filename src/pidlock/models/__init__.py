"""Pydantic data models for pidlock.

- LockFile: handle for an acquired lock
- LockOwner: lock file found on disk, with owner liveness

Example:
    >>> from pidlock import try_acquire
    >>> lock = try_acquire("/tmp/locks", "build")
    >>> if lock is not None:
    ...     lock.release()
"""

from .lock import LockFile, LockOwner

__all__ = [
    "LockFile",
    "LockOwner",
]
