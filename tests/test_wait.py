"""Tests for CLI-level lock polling."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from pidlock.commands import wait_for_lock


def test_single_attempt_without_timeout(lock_dir: Path) -> None:
    strategy = MagicMock()
    strategy.try_acquire.return_value = None

    assert wait_for_lock(lock_dir, "test", strategy, timeout=0, poll_interval=1) is None
    strategy.try_acquire.assert_called_once_with(lock_dir, "test")


def test_retries_until_acquired(lock_dir: Path) -> None:
    lock = MagicMock()
    strategy = MagicMock()
    strategy.try_acquire.side_effect = [None, None, lock]

    with patch("pidlock.commands.run.time.sleep") as sleep:
        assert wait_for_lock(lock_dir, "test", strategy, timeout=60, poll_interval=0.5) is lock

    assert strategy.try_acquire.call_count == 3
    assert sleep.call_count == 2


def test_gives_up_after_timeout(lock_dir: Path) -> None:
    strategy = MagicMock()
    strategy.try_acquire.return_value = None

    assert wait_for_lock(lock_dir, "test", strategy, timeout=0.05, poll_interval=0.01) is None
    assert strategy.try_acquire.call_count >= 2
