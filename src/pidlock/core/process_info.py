"""Process liveness lookup.

A process start time is used as a fingerprint: if the pid recorded in a
lock file is running but started at a different time than the one written
into the file, the pid has been recycled and the lock is stale.

On Linux the start time is read from /proc/<pid>/stat. Elsewhere psutil
reports the process creation time.
"""

import logging
import sys
from collections.abc import Callable
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)

StartTimeLookup = Callable[[int], str | None]

PROC_ROOT = Path("/proc")
# Fields following the process name up to and including starttime (field 22)
_FIELDS_AFTER_NAME = 20


def get_process_start_time_from_proc_stat(stat: str) -> str | None:
    """Extract the start time (field 22) from a /proc/<pid>/stat record.

    The second field is the executable name in parentheses and may itself
    contain spaces and ')' characters, so fields are counted from the last
    ')' in the record.

    Args:
        stat: Contents of /proc/<pid>/stat

    Returns:
        Start time token, or None if the record has too few fields
    """
    name_end = stat.rfind(")")
    if name_end == -1:
        return None

    fields = stat[name_end + 1 :].split()
    if len(fields) < _FIELDS_AFTER_NAME:
        return None
    return fields[_FIELDS_AFTER_NAME - 1]


def get_linux_process_start_time(pid: int) -> str | None:
    """Read a process start time from procfs."""
    try:
        stat = (PROC_ROOT / str(pid) / "stat").read_text()
    except (FileNotFoundError, ProcessLookupError):
        return None

    start_time = get_process_start_time_from_proc_stat(stat)
    if start_time is None:
        logger.debug(f"Could not parse /proc/{pid}/stat")
    return start_time


def get_psutil_process_start_time(pid: int) -> str | None:
    """Get a process creation time through psutil (macOS, Windows)."""
    try:
        return repr(psutil.Process(pid).create_time())
    except (psutil.NoSuchProcess, psutil.ZombieProcess):
        return None


def get_process_start_time(pid: int) -> str | None:
    """Get the start time fingerprint of a running process.

    Args:
        pid: Process ID to look up

    Returns:
        Opaque start time token, or None if no such process is running
    """
    if sys.platform.startswith("linux"):
        return get_linux_process_start_time(pid)
    return get_psutil_process_start_time(pid)
