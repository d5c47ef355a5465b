"""Errors raised by pidlock."""


class LockError(Exception):
    """Base exception for lock acquisition and management errors."""


class InvalidResourceNameError(LockError, ValueError):
    """Raised when a resource name does not match the allowed grammar."""


class LockReleasedError(LockError):
    """Raised when releasing a lock that was already released."""


class StaleLockError(LockError):
    """Raised when stale lock files keep reappearing during acquisition."""


class ConfigError(LockError):
    """Raised when pidlock.toml is unreadable or invalid."""
