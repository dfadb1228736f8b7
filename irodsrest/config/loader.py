"""Configuration loading and parsing."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional


DEFAULT_CONFIG_NAME = "irodsrest.yaml"


class ConfigError(Exception):
    """Configuration-related errors."""
    pass


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and parse configuration file.

    Args:
        config_path: Path to irodsrest.yaml file. If None, searches current directory.

    Returns:
        Parsed configuration dictionary

    Raises:
        ConfigError: If config file cannot be loaded or parsed
    """
    # Determine config file path
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
    else:
        config_path = Path(config_path).expanduser()

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}\n"
            f"Create {DEFAULT_CONFIG_NAME} with an 'irods' section (host, port, username)."
        )

    # Load YAML
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}")

    if not isinstance(config, dict):
        raise ConfigError("Configuration file must contain a YAML dictionary")

    # Ensure sections exist so callers can index them
    config.setdefault('irods', {})
    config.setdefault('logging', {})

    return config


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Look up a nested value by dotted path, e.g. 'irods.secret_file'.

    Returns default when any segment is missing or not a mapping.
    """
    value = config
    for key in path.split('.'):
        if not isinstance(value, dict) or key not in value:
            return default
        value = value[key]
    return value
