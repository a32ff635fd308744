"""
Configuration management for cidrfold.

Loads command line defaults from environment variables or a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _load_env_file() -> None:
    """Load the first .env file found in the usual locations."""
    env_locations = [
        Path.home() / ".cidrfold" / ".env",
        Path.home() / ".config" / "cidrfold" / ".env",
        Path.cwd() / ".env",
    ]
    for env_path in env_locations:
        if env_path.exists():
            load_dotenv(env_path)
            break


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


@dataclass
class ToolConfig:
    """Defaults for the command line tools."""

    # Default gap tolerance for fuzzy collapsing (0 = exact)
    max_gap: int = 0

    # Default number of addresses printed by `ip iterate`
    iter_limit: int = 1024

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    @classmethod
    def from_env(cls) -> "ToolConfig":
        """Load configuration from environment variables."""
        _load_env_file()
        return cls(
            max_gap=_int_from_env("CIDRFOLD_MAX_GAP", 0),
            iter_limit=_int_from_env("CIDRFOLD_ITER_LIMIT", 1024),
            log_level=os.getenv("CIDRFOLD_LOG_LEVEL", "WARNING"),
            log_file=os.getenv("CIDRFOLD_LOG_FILE") or None,
        )


# Global config instance
_config: ToolConfig | None = None


def get_config() -> ToolConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ToolConfig.from_env()
    return _config


def set_config(config: ToolConfig | None) -> None:
    """Set the global configuration instance (None forces a reload)."""
    global _config
    _config = config
