"""Run command: execute a command while holding a lock."""

import logging
import subprocess
import time
from pathlib import Path

import typer

from ..config import load_config
from ..core import LockStrategy, default_strategy
from ..errors import ConfigError, InvalidResourceNameError, LockError
from ..models import LockFile
from ..output import get_output_context

logger = logging.getLogger(__name__)


def wait_for_lock(
    directory: Path,
    resource: str,
    strategy: LockStrategy,
    timeout: float,
    poll_interval: float,
) -> LockFile | None:
    """Try to acquire a lock until it succeeds or the timeout passes.

    Args:
        directory: Directory holding the lock files
        resource: Resource name
        strategy: Lock strategy to acquire with
        timeout: Seconds to keep trying (0 = a single attempt)
        poll_interval: Seconds to sleep between attempts

    Returns:
        LockFile if acquired, None if still held when the timeout passed
    """
    deadline = time.monotonic() + timeout
    while True:
        lock = strategy.try_acquire(directory, resource)
        if lock is not None:
            return lock
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return None
        logger.debug(f"Lock on {resource!r} is held, retrying in {poll_interval}s")
        time.sleep(min(poll_interval, remaining))


def run(
    directory: Path = typer.Argument(..., help="Directory holding the lock files"),
    resource: str = typer.Argument(..., help="Resource name"),
    command: list[str] = typer.Argument(..., help="Command to run while holding the lock"),
    wait: float | None = typer.Option(
        None,
        "--wait",
        "-w",
        min=0,
        help="Seconds to wait for a held lock (overrides pidlock.toml)",
    ),
) -> None:
    """Run a command while holding the lock on a resource."""
    ctx = get_output_context()

    try:
        config = load_config(directory)
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(2) from None

    directory.mkdir(parents=True, exist_ok=True)
    timeout = config.wait.timeout if wait is None else wait
    strategy = default_strategy(max_stale_retries=config.lock.max_stale_retries)

    try:
        lock = wait_for_lock(directory, resource, strategy, timeout, config.wait.poll_interval)
    except InvalidResourceNameError as e:
        ctx.error(str(e))
        raise typer.Exit(2) from None
    except LockError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    if lock is None:
        ctx.error(f"Lock on {resource!r} is held by another process", {"resource": resource})
        raise typer.Exit(1)

    if lock.dirty_when_acquired:
        logger.warning(
            f"Cleared a stale lock on {resource!r}; state left by the previous holder "
            "may be inconsistent"
        )

    with lock:
        logger.info(f"Acquired {lock.file_path.name}, running: {' '.join(command)}")
        try:
            result = subprocess.run(command)
        except FileNotFoundError:
            ctx.error(f"Command not found: {command[0]}")
            raise typer.Exit(127) from None

    raise typer.Exit(result.returncode)
