"""Configuration management for pidlock."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import CONFIG_FILE, DEFAULT_POLL_INTERVAL, DEFAULT_WAIT_TIMEOUT, MAX_STALE_RETRIES
from .errors import ConfigError


class LockConfig(BaseModel):
    """Settings for lock acquisition."""

    max_stale_retries: int = Field(
        default=MAX_STALE_RETRIES,
        ge=1,
        le=10,
        description="Attempts to clear a stale lock before giving up",
    )


class WaitConfig(BaseModel):
    """Settings for CLI commands that wait for a held lock."""

    timeout: float = Field(
        default=DEFAULT_WAIT_TIMEOUT, ge=0, description="Seconds to wait (0 = fail at once)"
    )
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between attempts"
    )


class PidlockConfig(BaseModel):
    """Root configuration for pidlock."""

    lock: LockConfig = Field(default_factory=LockConfig)
    wait: WaitConfig = Field(default_factory=WaitConfig)


def load_config(lock_dir: Path) -> PidlockConfig:
    """Load config from <lock_dir>/pidlock.toml.

    Args:
        lock_dir: Directory holding the lock files

    Returns:
        Loaded configuration, or defaults if pidlock.toml doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or has invalid values
    """
    config_path = lock_dir / CONFIG_FILE
    if not config_path.exists():
        return PidlockConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return PidlockConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid {config_path}: {e}") from e


def write_config_template(lock_dir: Path) -> Path:
    """Write default pidlock.toml template.

    Args:
        lock_dir: Directory holding the lock files

    Returns:
        Path to the written config file
    """
    config_path = lock_dir / CONFIG_FILE
    template = {
        "lock": {"max_stale_retries": MAX_STALE_RETRIES},
        "wait": {"timeout": DEFAULT_WAIT_TIMEOUT, "poll_interval": DEFAULT_POLL_INTERVAL},
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
