"""Init command implementation."""

from pathlib import Path

import typer

from ..config import write_config_template
from ..constants import CONFIG_FILE
from ..output import get_output_context


def init(
    directory: Path = typer.Argument(..., help="Directory that will hold the lock files"),
) -> None:
    """Create a lock directory with a pidlock.toml template."""
    ctx = get_output_context()

    if directory.exists() and not directory.is_dir():
        ctx.error(f"Not a directory: {directory}")
        raise typer.Exit(2)

    directory.mkdir(parents=True, exist_ok=True)
    config_path = directory / CONFIG_FILE

    if config_path.exists():
        ctx.print(f"[yellow]Config already exists:[/yellow] {config_path}")
        ctx.print_json({"config": str(config_path), "created": False})
        return

    write_config_template(directory)
    ctx.success(f"Created config template: {config_path}", {"config": str(config_path)})
