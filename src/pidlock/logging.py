"""Logging configuration for the pidlock CLI.

Library modules only create loggers under the "pidlock" namespace; handlers
are attached here, by the CLI, and nowhere else.
"""

import logging
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "pidlock"


def resolve_level(verbosity: int = 0, quiet: bool = False, debug: bool = False) -> int:
    """Map CLI flags to a log level.

    Flag precedence: quiet > debug > verbosity. Lock contention and stale
    lock removal are logged at INFO, the details of each decision at DEBUG.
    """
    if quiet:
        return logging.WARNING
    if debug or verbosity >= 1:
        return logging.DEBUG
    return logging.INFO


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
    stream: TextIO | None = None,
    debug: bool = False,
) -> Console:
    """Configure pidlock logging based on CLI options.

    Args:
        verbosity: Number of -v flags (0=normal, 1+=debug)
        quiet: Only show warnings and errors
        no_color: Disable colored output
        stream: Output stream for logs (defaults to stderr)
        debug: Enable debug logging with timestamps and source paths

    Returns:
        Configured Rich console for output
    """
    level = resolve_level(verbosity, quiet, debug)
    detailed = debug or verbosity >= 2

    console = Console(
        file=stream,
        stderr=stream is None,
        force_terminal=not no_color,
        no_color=no_color,
    )
    handler = RichHandler(
        console=console,
        show_time=detailed,
        show_path=detailed,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    return console
