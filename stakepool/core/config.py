"""Pool configuration."""
import os
import platform
from pathlib import Path
from typing import Optional, Union
import yaml
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from .accounts import DEFAULT_LOCK_DURATION

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def get_default_state_dir() -> Path:
    """Get platform-specific state directory."""
    if os.name == 'nt':  # Windows
        return Path(os.getenv('APPDATA', Path.home())) / 'stake-pool'
    elif platform.system() == 'Darwin':  # macOS
        return Path.home() / 'Library' / 'Application Support' / 'stake-pool'
    else:  # Linux and others
        return Path.home() / '.config' / 'stake-pool'


def get_state_dir() -> Path:
    """State directory, honouring STAKE_POOL_STATE_DIR."""
    override = os.getenv("STAKE_POOL_STATE_DIR")
    return Path(override) if override else get_default_state_dir()


class PoolConfig(BaseModel):
    """Stake pool configuration."""
    pool_account: str = "pool"
    lock_duration: int = Field(default=DEFAULT_LOCK_DURATION, ge=0)  # seconds, applied when a pool is created
    state_dir: Path = Field(default_factory=get_state_dir)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{value}'. Use one of: {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("pool_account")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("pool_account must be a non-empty string")
        return value


def _read_yaml(path: Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load config {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"Config {path} must be a mapping, ignoring it")
        return {}
    return data


def load_config(path: Optional[Union[str, Path]] = None,
                state_dir: Optional[Union[str, Path]] = None) -> PoolConfig:
    """Build the configuration from YAML, environment and explicit overrides.

    Precedence, lowest first: defaults, YAML file, environment variables,
    arguments.

    Args:
        path: YAML file; defaults to STAKE_POOL_CONFIG or <state_dir>/config.yaml
        state_dir: Directory holding pool state

    Returns:
        Validated configuration
    """
    base_dir = Path(state_dir) if state_dir else get_state_dir()
    if path is None:
        path = os.getenv("STAKE_POOL_CONFIG") or base_dir / "config.yaml"
    path = Path(path)

    data = _read_yaml(path) if path.exists() else {}

    if os.getenv("STAKE_POOL_STATE_DIR"):
        data["state_dir"] = os.environ["STAKE_POOL_STATE_DIR"]
    if os.getenv("STAKE_POOL_LOG_LEVEL"):
        data["log_level"] = os.environ["STAKE_POOL_LOG_LEVEL"]
    if os.getenv("STAKE_POOL_LOCK_DURATION"):
        data["lock_duration"] = os.environ["STAKE_POOL_LOCK_DURATION"]
    if state_dir:
        data["state_dir"] = state_dir

    return PoolConfig(**data)
