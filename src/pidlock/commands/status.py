"""Status command for lock overview."""

from pathlib import Path

import typer
from rich.table import Table

from ..core import inspect_locks
from ..errors import InvalidResourceNameError
from ..output import get_output_context


def status(
    directory: Path = typer.Argument(..., help="Directory holding the lock files"),
    resource: str | None = typer.Option(
        None,
        "--resource",
        "-r",
        help="Only show locks for this resource",
    ),
) -> None:
    """Show lock files in a directory and whether their owners are alive."""
    ctx = get_output_context()

    if not directory.is_dir():
        ctx.error(f"Directory not found: {directory}")
        raise typer.Exit(1)

    try:
        owners = inspect_locks(directory, resource)
    except InvalidResourceNameError as e:
        ctx.error(str(e))
        raise typer.Exit(2) from None

    if not owners:
        ctx.result([], "No lock files found")
        return

    table = Table(title=f"Locks in {directory}")
    table.add_column("Resource")
    table.add_column("PID", justify="right")
    table.add_column("Recorded start")
    table.add_column("Current start")
    table.add_column("State")

    for owner in owners:
        table.add_row(
            owner.resource_name,
            str(owner.pid) if owner.pid is not None else "-",
            owner.recorded_start_time or "-",
            owner.current_start_time or "-",
            "[green]live[/green]" if owner.live else "[yellow]stale[/yellow]",
        )

    ctx.table(table, [owner.model_dump(mode="json") for owner in owners])
