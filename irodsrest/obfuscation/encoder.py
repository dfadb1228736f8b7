"""
Write obfuscated passwords in the .irodsA format.

Inverse of the decoder, as the native ``iinit`` client stores the
password: '.', five encoded header characters, the key selector byte,
then the encoded password.
"""

import logging
import os
import secrets
import time
from pathlib import Path
from typing import Optional, Union

from irodsrest.obfuscation.decoder import OWNER_ID_MASK, default_secret_path
from irodsrest.obfuscation.errors import SecretFileError
from irodsrest.obfuscation.header import LEADING_BYTE, header_characters
from irodsrest.obfuscation.rotation import RotationEngine
from irodsrest.obfuscation.tables import SEQ_CONSTANTS, WHEEL, key_byte, seq_constant

logger = logging.getLogger(__name__)

SECRET_FILE_MODE = 0o600


def obfi_encode(plaintext: Union[str, bytes], mtime: int, uid: int,
                key_index: Optional[int] = None) -> bytes:
    """
    Obfuscate a password for a secret file with the given metadata.

    Args:
        plaintext: Password to obfuscate
        mtime: Modification time the file will carry (seconds since epoch)
        uid: Numeric uid of the file owner
        key_index: Seq table index in [0, 15] (random if omitted)

    Returns:
        Obfuscated bytes ready to be written to the secret file

    Raises:
        InvalidKeyIndexError: If key_index is outside [0, 15]
    """
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8", errors="surrogateescape")
    if key_index is None:
        key_index = secrets.randbelow(len(SEQ_CONSTANTS))

    seq = seq_constant(key_index)
    owner_id = uid & OWNER_ID_MASK
    rotation = RotationEngine()

    out = bytearray([LEADING_BYTE])
    for code in header_characters(key_index, mtime):
        out.append(WHEEL.shift(code, rotation.next_offset(seq, owner_id)))

    # selector byte does not consume an offset
    out.append(key_byte(key_index))

    for code in plaintext:
        out.append(WHEEL.shift(code, rotation.next_offset(seq, owner_id)))

    return bytes(out)


def write_secret_file(plaintext: str, path: Optional[Union[str, Path]] = None,
                      key_index: Optional[int] = None) -> Path:
    """
    Obfuscate a password and store it in the secret file.

    The file's modification time is pinned to the time encoded in the
    header.

    Args:
        plaintext: Password to store
        path: Secret file path (default: ~/.irods/.irodsA)
        key_index: Seq table index (random if omitted)

    Returns:
        Path of the written file

    Raises:
        SecretFileError: If the file cannot be written
    """
    path = Path(path).expanduser() if path else default_secret_path()
    now = int(time.time())
    uid = os.getuid() if hasattr(os, "getuid") else 0

    blob = obfi_encode(plaintext, mtime=now, uid=uid, key_index=key_index)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SECRET_FILE_MODE)
        with os.fdopen(fd, "wb") as f:
            f.write(blob)
        os.chmod(path, SECRET_FILE_MODE)
        os.utime(path, (now, now))
    except OSError as e:
        raise SecretFileError(f"Cannot write secret file {path}: {e}") from e

    logger.info(f"Stored obfuscated password in {path}")
    return path
