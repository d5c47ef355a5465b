"""pidlock: advisory, process-exclusive file locks with stale lock recovery."""

from .core import (
    get_lock_file_path,
    get_process_start_time,
    get_process_start_time_from_proc_stat,
    inspect_locks,
    try_acquire,
)
from .errors import (
    ConfigError,
    InvalidResourceNameError,
    LockError,
    LockReleasedError,
    StaleLockError,
)
from .models import LockFile, LockOwner

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "InvalidResourceNameError",
    "LockError",
    "LockFile",
    "LockOwner",
    "LockReleasedError",
    "StaleLockError",
    "__version__",
    "get_lock_file_path",
    "get_process_start_time",
    "get_process_start_time_from_proc_stat",
    "inspect_locks",
    "try_acquire",
]
