"""Resource name validation and lock file naming."""

import os
import re
from pathlib import Path

from ..constants import LOCK_EXTENSION, PID_SEPARATOR
from ..errors import InvalidResourceNameError

RESOURCE_NAME_PATTERN = re.compile(r"[A-Za-z](?:[A-Za-z0-9.-]*[A-Za-z0-9])?")
LOCK_FILE_NAME_PATTERN = re.compile(r"^(.+)#([0-9]+)\.lock$")


def validate_resource_name(resource_name: str) -> str:
    """Check a resource name against the naming grammar.

    Names start with a letter, end with a letter or digit, and may contain
    '.' and '-' in between.

    Raises:
        InvalidResourceNameError: If the name does not match
    """
    if not RESOURCE_NAME_PATTERN.fullmatch(resource_name):
        raise InvalidResourceNameError(
            f"The resource name {resource_name!r} is invalid. It must be an alphanumeric"
            " string with only '-' or '.' It must start with an alphabetical character"
            " and end with an alphanumeric character."
        )
    return resource_name


def resolve_directory(directory: str | os.PathLike[str]) -> Path:
    """Make a directory absolute without touching the disk."""
    return Path(os.path.abspath(directory))


def pid_lock_file_name(resource_name: str, pid: int) -> str:
    return f"{resource_name}{PID_SEPARATOR}{pid}{LOCK_EXTENSION}"


def plain_lock_file_name(resource_name: str) -> str:
    return f"{resource_name}{LOCK_EXTENSION}"


def parse_lock_file_name(name: str) -> tuple[str, int] | None:
    """Split a '<resource>#<pid>.lock' file name.

    Returns:
        (resource_name, pid), or None if the name is not a pid lock file
    """
    match = LOCK_FILE_NAME_PATTERN.match(name)
    if match is None:
        return None
    return match.group(1), int(match.group(2))
