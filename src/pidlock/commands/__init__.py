"""CLI command implementations for pidlock.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .init import init
from .path import path
from .run import run, wait_for_lock
from .status import status

__all__ = [
    "init",
    "path",
    "run",
    "status",
    "wait_for_lock",
]
