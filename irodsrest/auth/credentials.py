"""
Credential resolution for iRODS REST connections.

When no password is supplied, the password is recovered from the
obfuscated ~/.irods/.irodsA file. Decode failures propagate to the
caller; no connection should be attempted without a credential.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from irodsrest.config.validator import validate_config
from irodsrest.obfuscation.decoder import obfi_decode

logger = logging.getLogger(__name__)

REST_PATH = "/irods-rest/rest"


def resolve_password(password: Optional[str] = None,
                     secret_file: Optional[Union[str, Path]] = None) -> str:
    """
    Return the explicit password, or the one stored in the secret file.

    Args:
        password: Explicit password (wins if given)
        secret_file: Secret file path (default: ~/.irods/.irodsA)

    Returns:
        Password to authenticate with

    Raises:
        ObfuscationError: If the secret file cannot be read or decoded
    """
    if password is not None:
        return password

    logger.debug("No password supplied, reading obfuscated secret file")
    return obfi_decode(secret_file)


@dataclass(frozen=True)
class IrodsContext:
    """Connection settings for the iRODS REST service."""
    server: str
    port: int
    username: str
    password: str
    zone: Optional[str] = None

    @classmethod
    def create(cls, server: str, port: int, username: str,
               password: Optional[str] = None,
               secret_file: Optional[Union[str, Path]] = None,
               zone: Optional[str] = None) -> "IrodsContext":
        """
        Build a context, resolving the password up front.

        Raises:
            ObfuscationError: If no password is given and the secret file
                cannot be decoded
        """
        resolved = resolve_password(password, secret_file)
        return cls(server=server, port=int(port), username=username,
                   password=resolved, zone=zone)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "IrodsContext":
        """
        Build a context from the 'irods' section of a loaded config.

        Raises:
            ValidationError: If host, port or username is missing or invalid
            ObfuscationError: If the password must come from the secret file
                and cannot be decoded
        """
        validate_config(config)
        section = config.get('irods', {})
        return cls.create(
            server=section['host'],
            port=section['port'],
            username=section['username'],
            password=section.get('password'),
            secret_file=section.get('secret_file'),
            zone=section.get('zone'),
        )

    @property
    def rest_url_prefix(self) -> str:
        return f"http://{self.server}:{self.port}{REST_PATH}"

    @property
    def home_collection(self) -> Optional[str]:
        if not self.zone:
            return None
        return f"/{self.zone}/home/{self.username}"

    def __repr__(self) -> str:
        return (
            f"IrodsContext(server={self.server!r}, port={self.port}, "
            f"username={self.username!r}, password='***', zone={self.zone!r})"
        )
