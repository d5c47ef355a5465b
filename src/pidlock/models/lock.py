"""Lock models.

LockFile is the handle returned by a successful acquisition. LockOwner is a
read-only description of a lock file found on disk.
"""

from pathlib import Path
from types import TracebackType

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..errors import LockReleasedError
from ..services.filesystem import LocalFileSystem


class LockFile(BaseModel):
    """An acquired lock on a named resource.

    Attributes:
        file_path: Absolute path of the lock file.
        dirty_when_acquired: True if a stale lock file left by a dead
            process was removed to take this lock. State guarded by the
            lock may be inconsistent and worth checking.
        is_released: True once release() has run. Terminal.
    """

    model_config = ConfigDict(validate_assignment=True)

    file_path: Path = Field(description="Absolute path of the lock file")
    dirty_when_acquired: bool = Field(default=False, description="Stale lock was cleared")
    is_released: bool = Field(default=False, description="Lock has been released")

    _fs: LocalFileSystem = PrivateAttr(default_factory=LocalFileSystem)
    _handle: int | None = PrivateAttr(default=None)

    @classmethod
    def acquired(
        cls,
        file_path: Path,
        dirty_when_acquired: bool,
        fs: LocalFileSystem,
        handle: int | None = None,
    ) -> "LockFile":
        """Wrap a freshly acquired lock file.

        Args:
            file_path: Path of the lock file now owned by the caller
            dirty_when_acquired: Whether a stale lock was removed first
            fs: File system used to delete the file on release
            handle: Open descriptor to hold until release (Windows)
        """
        lock = cls(file_path=file_path, dirty_when_acquired=dirty_when_acquired)
        lock._fs = fs
        lock._handle = handle
        return lock

    def release(self) -> None:
        """Unlock and delete the lock file.

        Raises:
            LockReleasedError: If the lock was already released
        """
        if self.is_released:
            raise LockReleasedError(f"The lock for file {self.file_path.name} is already released.")

        if self._handle is not None:
            self._fs.close(self._handle)
            self._handle = None

        self._fs.delete(self.file_path)
        self.is_released = True

    def __enter__(self) -> "LockFile":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self.is_released:
            self.release()


class LockOwner(BaseModel):
    """A lock file found on disk and the liveness of its owner."""

    path: Path
    resource_name: str
    pid: int | None = Field(default=None, description="Owning PID (None for Windows locks)")
    recorded_start_time: str | None = Field(
        default=None, description="Start time written into the lock file"
    )
    current_start_time: str | None = Field(
        default=None, description="Start time of the running process with that PID"
    )
    live: bool = Field(description="Owner is running with a matching start time")
