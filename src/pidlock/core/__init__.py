"""Core locking logic for pidlock.

- paths: Resource name grammar and lock file naming
- process_info: Process start time lookup (liveness oracle)
- lock_manager: Platform lock strategies, acquisition and inspection
"""

from .lock_manager import (
    LockStrategy,
    PosixLockStrategy,
    WindowsLockStrategy,
    default_strategy,
    get_lock_file_path,
    inspect_locks,
    try_acquire,
)
from .paths import parse_lock_file_name, validate_resource_name
from .process_info import (
    StartTimeLookup,
    get_process_start_time,
    get_process_start_time_from_proc_stat,
)

__all__ = [
    "LockStrategy",
    "PosixLockStrategy",
    "StartTimeLookup",
    "WindowsLockStrategy",
    "default_strategy",
    "get_lock_file_path",
    "get_process_start_time",
    "get_process_start_time_from_proc_stat",
    "inspect_locks",
    "parse_lock_file_name",
    "try_acquire",
    "validate_resource_name",
]
