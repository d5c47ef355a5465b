"""Path command implementation."""

from pathlib import Path

import typer

from ..core import get_lock_file_path
from ..errors import InvalidResourceNameError
from ..output import get_output_context


def path(
    directory: Path = typer.Argument(..., help="Directory holding the lock files"),
    resource: str = typer.Argument(..., help="Resource name"),
    pid: int | None = typer.Option(
        None,
        "--pid",
        "-p",
        help="Owning process (defaults to this process; ignored on Windows)",
    ),
) -> None:
    """Print the lock file path for a resource."""
    ctx = get_output_context()

    try:
        lock_path = get_lock_file_path(directory, resource, pid)
    except InvalidResourceNameError as e:
        ctx.error(str(e))
        raise typer.Exit(2) from None

    ctx.result({"path": str(lock_path)}, str(lock_path))
