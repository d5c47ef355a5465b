"""Shared test fixtures for pidlock tests."""

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pidlock.logging import LOGGER_NAME

SELF_START_TIME = "self-start"


class FakeProcessTable:
    """Liveness oracle backed by a dict of pid -> start time."""

    def __init__(self) -> None:
        self.start_times: dict[int, str] = {os.getpid(): SELF_START_TIME}
        self.queried: list[int] = []

    def __call__(self, pid: int) -> str | None:
        self.queried.append(pid)
        return self.start_times.get(pid)


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def lock_dir(tmp_path: Path) -> Path:
    """Create an empty lock directory."""
    d = tmp_path / "locks"
    d.mkdir()
    return d


@pytest.fixture
def process_table() -> FakeProcessTable:
    """Oracle knowing only the current process."""
    return FakeProcessTable()


@pytest.fixture(autouse=True)
def reset_pidlock_logger() -> Generator[None, None, None]:
    """Undo handlers installed by CLI tests so caplog keeps working."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
