"""Tests for pidlock data models."""

from pathlib import Path

import pytest

from pidlock import LockFile, LockOwner, LockReleasedError
from pidlock.services import LocalFileSystem


@pytest.fixture
def lock_path(tmp_path: Path) -> Path:
    path = tmp_path / "test#1.lock"
    path.write_text("start")
    return path


class TestLockFile:
    """Tests for LockFile."""

    def test_defaults(self, lock_path: Path) -> None:
        lock = LockFile(file_path=lock_path)
        assert lock.dirty_when_acquired is False
        assert lock.is_released is False

    def test_release_deletes_file(self, lock_path: Path) -> None:
        lock = LockFile.acquired(lock_path, True, LocalFileSystem())
        lock.release()
        assert not lock_path.exists()
        assert lock.is_released is True
        assert lock.dirty_when_acquired is True

    def test_double_release_fails(self, lock_path: Path) -> None:
        lock = LockFile.acquired(lock_path, False, LocalFileSystem())
        lock.release()
        with pytest.raises(LockReleasedError, match="already released"):
            lock.release()

    def test_release_closes_handle(self, lock_path: Path) -> None:
        closed: list[int] = []

        class RecordingFileSystem(LocalFileSystem):
            def close(self, fd: int) -> None:
                closed.append(fd)
                super().close(fd)

        fd = LocalFileSystem().open_exclusive(lock_path.with_name("test.lock"))
        assert fd is not None
        lock = LockFile.acquired(lock_path.with_name("test.lock"), False, RecordingFileSystem(), fd)

        lock.release()

        assert closed == [fd]
        assert not lock_path.with_name("test.lock").exists()

    def test_context_manager_releases(self, lock_path: Path) -> None:
        with LockFile.acquired(lock_path, False, LocalFileSystem()) as lock:
            assert lock_path.exists()
        assert lock.is_released is True
        assert not lock_path.exists()

    def test_context_manager_after_manual_release(self, lock_path: Path) -> None:
        """Leaving the block after an explicit release does not fail."""
        with LockFile.acquired(lock_path, False, LocalFileSystem()) as lock:
            lock.release()
        assert lock.is_released is True

    def test_serializes_public_fields(self, lock_path: Path) -> None:
        lock = LockFile.acquired(lock_path, True, LocalFileSystem())
        assert lock.model_dump(mode="json") == {
            "file_path": str(lock_path),
            "dirty_when_acquired": True,
            "is_released": False,
        }


class TestLockOwner:
    """Tests for LockOwner."""

    def test_windows_owner_has_no_pid(self, tmp_path: Path) -> None:
        owner = LockOwner(path=tmp_path / "test.lock", resource_name="test", live=True)
        assert owner.pid is None
        assert owner.recorded_start_time is None

    def test_json_round_trip(self, tmp_path: Path) -> None:
        owner = LockOwner(
            path=tmp_path / "test#5.lock",
            resource_name="test",
            pid=5,
            recorded_start_time="100",
            current_start_time="200",
            live=False,
        )
        assert LockOwner.model_validate_json(owner.model_dump_json()) == owner
