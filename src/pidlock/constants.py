"""Constants for pidlock."""

LOCK_EXTENSION = ".lock"
PID_SEPARATOR = "#"
CONFIG_FILE = "pidlock.toml"

MAX_STALE_RETRIES = 3  # Max retries when clearing stale locks
# An unwritten lock file this much older than ours may still be mid-creation
EMPTY_LOCK_GRACE_NS = 1_000_000_000

# CLI wait defaults (seconds)
DEFAULT_WAIT_TIMEOUT = 0.0
DEFAULT_POLL_INTERVAL = 0.5
