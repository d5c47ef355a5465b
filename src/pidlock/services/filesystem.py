"""File system operations used by the lock strategies.

Lock acquisition only sequences calls against this class; tests swap in a
subclass to simulate platform behavior (e.g. a Windows file that cannot be
deleted while another process holds it open).
"""

import os
from pathlib import Path


class LocalFileSystem:
    """Thin wrapper over os/pathlib calls on the local disk."""

    def create_exclusive(self, path: Path, content: str) -> bool:
        """Atomically create a file and write content to it.

        Uses O_CREAT | O_EXCL flags for atomicity - if file exists,
        open() fails immediately rather than overwriting.

        Returns:
            True if the file was created, False if it already exists
        """
        fd = self.open_exclusive(path)
        if fd is None:
            return False
        try:
            os.write(fd, content.encode())
        except OSError:
            os.close(fd)
            path.unlink(missing_ok=True)
            raise
        os.close(fd)
        return True

    def open_exclusive(self, path: Path) -> int | None:
        """Create a file exclusively and return its open descriptor.

        Returns:
            File descriptor, or None if the file already exists
        """
        try:
            return os.open(str(path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            return None

    def write(self, fd: int, content: str) -> None:
        """Write content to an open descriptor."""
        os.write(fd, content.encode())

    def close(self, fd: int) -> None:
        """Close an open descriptor."""
        os.close(fd)

    def read_text(self, path: Path) -> str | None:
        """Read a file, returning None if it does not exist."""
        try:
            return path.read_text()
        except FileNotFoundError:
            return None

    def delete(self, path: Path) -> bool:
        """Delete a file.

        Returns:
            True if the file was removed, False if it was already gone
        """
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def exists(self, path: Path) -> bool:
        return path.exists()

    def modified_time_ns(self, path: Path) -> int | None:
        """Get modification time in nanoseconds, or None if the file is gone."""
        try:
            return path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    def set_times(self, path: Path, accessed: float, modified: float) -> None:
        """Set access and modification times (seconds since the epoch)."""
        os.utime(path, (accessed, modified))

    def list_names(self, directory: Path) -> list[str]:
        """List file names in a directory, sorted."""
        return sorted(entry.name for entry in directory.iterdir())
