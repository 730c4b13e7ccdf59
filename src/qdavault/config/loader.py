"""Configuration loading with environment variable merging."""

import os
import tomllib
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from qdavault.config.models import Configuration
from qdavault.exceptions import ConfigError

# Environment variable -> key in the [qdavault] section
ENV_OVERRIDES: dict[str, str] = {
    "QDAVAULT_DB_PATH": "db_path",
    "QDAVAULT_STORAGE_ROOT": "storage_root",
    "QDAVAULT_LOG_FILE": "log_file",
}


def get_config_path(config_arg: Path | None = None) -> Path:
    """
    Get configuration file path with priority order.

    Priority:
    1. Command-line argument
    2. QDAVAULT_CONFIG environment variable
    3. ~/.qdavault/config.toml (platform app directory)
    4. ./qdavault.toml (current working directory)

    Args:
        config_arg: Optional path from command-line argument

    Returns:
        Path to configuration file (may not exist)
    """
    # 1. Command-line argument
    if config_arg:
        return config_arg

    # 2. Environment variable
    env_config = os.getenv("QDAVAULT_CONFIG")
    if env_config:
        return Path(env_config)

    # 3. User app directory
    app_dir = Path(typer.get_app_dir("qdavault"))
    user_config = app_dir / "config.toml"
    if user_config.exists():
        return user_config

    # 4. Current directory
    cwd_config = Path("qdavault.toml")
    if cwd_config.exists():
        return cwd_config

    # Default (may not exist)
    return user_config


def load_config(config_path: Path | None = None) -> Configuration:
    """
    Load and validate configuration from TOML file and environment variables.

    A missing config file is fine: defaults and environment variables apply.
    Environment variables override config file values:
    - QDAVAULT_DB_PATH
    - QDAVAULT_STORAGE_ROOT
    - QDAVAULT_LOG_FILE

    Args:
        config_path: Optional path to config file

    Returns:
        Validated Configuration object

    Raises:
        ConfigError: If the config file is unreadable or invalid
    """
    path = get_config_path(config_path)

    data: dict[str, Any] = {}
    if path.is_file():
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config file {path}: {e}") from e

    section = data.get("qdavault", {})
    if not isinstance(section, dict):
        raise ConfigError(f"Invalid configuration in {path}: [qdavault] must be a table")

    for env_var, key in ENV_OVERRIDES.items():
        if value := os.getenv(env_var):
            section[key] = value
    data["qdavault"] = section

    try:
        return Configuration(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
