"""pidlock CLI: inspect and hold process-exclusive resource locks."""

import typer
from rich.console import Console

from pidlock import __version__

from .commands import init, path, run, status
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pidlock {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="pidlock",
    help="Advisory process-exclusive file locks with stale lock recovery",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """pidlock - process-exclusive resource locks."""
    configure_logging(verbosity=verbose, quiet=quiet, no_color=no_color)
    set_output_context(OutputContext(console=Console(no_color=no_color), json_mode=json_output))


app.command()(init)
app.command()(path)
app.command()(status)
app.command()(run)


if __name__ == "__main__":
    app()
