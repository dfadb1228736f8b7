"""Configuration validation."""

import logging
from pathlib import Path
from typing import Dict, Any, List

logger = logging.getLogger(__name__)


VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


def validate_config(config: Dict[str, Any], require_connection: bool = True) -> None:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary from loader
        require_connection: Check irods.host, irods.port and irods.username

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    irods = config.get('irods', {})
    if not isinstance(irods, dict):
        errors.append("irods must be a dictionary")
    else:
        # Validate irods connection fields
        if require_connection:
            errors.extend(_validate_connection(irods))

        # Validate secret file location
        errors.extend(_validate_secret_file(irods))

    # Validate logging section
    errors.extend(_validate_logging(config.get('logging', {})))

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _validate_connection(section: Dict[str, Any]) -> List[str]:
    """Validate irods connection fields."""
    errors = []

    if not section.get('host'):
        errors.append("irods.host is required")
    if not section.get('username'):
        errors.append("irods.username is required")

    port = section.get('port')
    if port is None:
        errors.append("irods.port is required")
    elif not isinstance(port, int) or isinstance(port, bool) or not 1 <= port <= 65535:
        errors.append("irods.port must be an integer between 1 and 65535")

    password = section.get('password')
    if password is not None and not isinstance(password, str):
        errors.append("irods.password must be a string")

    zone = section.get('zone')
    if zone is not None and not isinstance(zone, str):
        errors.append("irods.zone must be a string")

    return errors


def _validate_secret_file(section: Dict[str, Any]) -> List[str]:
    """Validate the optional secret file path."""
    secret_file = section.get('secret_file')
    if secret_file is None:
        return []
    if not isinstance(secret_file, str):
        return ["irods.secret_file must be a path string"]

    if section.get('password') is None:
        path = Path(secret_file).expanduser()
        if not path.exists():
            # Written later by "irodsrest encode"
            logger.warning(f"irods.secret_file not found: {path}")

    return []


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging section."""
    errors = []

    if not isinstance(section, dict):
        return ["logging must be a dictionary"]

    level = section.get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        errors.append(f"logging.level must be one of: {', '.join(VALID_LOG_LEVELS)}")

    console = section.get('console', True)
    if not isinstance(console, bool):
        errors.append("logging.console must be true or false")

    log_file = section.get('file')
    if log_file is not None and not isinstance(log_file, str):
        errors.append("logging.file must be a path string or null")

    return errors
