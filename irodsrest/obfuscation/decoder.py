"""
Decode the obfuscated iRODS password file (~/.irods/.irodsA).

Reproduces the native clients' obfiDecode(): the key selector picks a
seq constant, the header is checked against the file's modification
time, and every remaining byte is rotated back along the wheel by an
offset derived from the seq constant and the file owner's uid.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from irodsrest.obfuscation.errors import ObfuscationError, SecretFileError
from irodsrest.obfuscation.header import (
    HeaderInfo,
    check_header,
    validate_header,
)
from irodsrest.obfuscation.rotation import RotationEngine
from irodsrest.obfuscation.tables import KEY_BYTE_POSITION, WHEEL, select_key

logger = logging.getLogger(__name__)

DEFAULT_SECRET_FILE = Path("~/.irods/.irodsA")

OWNER_ID_MASK = 0xF5F
TIME_MASK = 0xFFFF

# Plaintext starts after the header and the key selector byte
BODY_START = KEY_BYTE_POSITION + 1


@dataclass(frozen=True)
class FileMetadata:
    """Modification time and owner of the secret file."""
    mtime: int
    uid: int

    @property
    def time_value(self) -> int:
        return self.mtime & TIME_MASK

    @property
    def owner_id(self) -> int:
        return self.uid & OWNER_ID_MASK

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileMetadata":
        """
        Read metadata for a secret file.

        Raises:
            SecretFileError: If the file cannot be stat'ed
        """
        try:
            st = Path(path).stat()
        except OSError as e:
            raise SecretFileError(f"Cannot read metadata for {path}: {e}") from e
        return cls.from_stat(st)

    @classmethod
    def from_stat(cls, st: os.stat_result) -> "FileMetadata":
        return cls(mtime=int(st.st_mtime), uid=st.st_uid)


@dataclass(frozen=True)
class CipherContext:
    """Per-call cipher parameters."""
    key_index: int
    seq_constant: int
    owner_id: int

    @classmethod
    def from_blob(cls, blob: bytes, metadata: FileMetadata) -> "CipherContext":
        key_index, seq = select_key(blob)
        return cls(key_index=key_index, seq_constant=seq, owner_id=metadata.owner_id)


@dataclass
class DecodeReport:
    """Diagnostic view of an obfuscated blob, produced without raising."""
    context: Optional[CipherContext]
    header: Optional[HeaderInfo]
    metadata: FileMetadata
    problems: List[str]
    length: int

    @property
    def valid(self) -> bool:
        return not self.problems


def default_secret_path() -> Path:
    return DEFAULT_SECRET_FILE.expanduser()


def decode_body(body: bytes, context: CipherContext, rotation: RotationEngine) -> bytes:
    """
    Rotate body bytes back along the wheel.

    The rotation cursor advances for every byte, including bytes that are
    not on the wheel and are copied through unchanged.

    Args:
        body: Bytes following the key selector
        context: Cipher parameters for this call
        rotation: Engine already advanced past the header

    Returns:
        Plaintext bytes
    """
    out = bytearray()
    for code in body:
        offset = rotation.next_offset(context.seq_constant, context.owner_id)
        out.append(WHEEL.shift(code, -offset))
    return bytes(out)


def decode_bytes(blob: bytes, metadata: FileMetadata) -> bytes:
    """
    Decode obfuscated bytes to the raw plaintext bytes.

    Args:
        blob: Contents of the secret file
        metadata: Modification time and uid of the secret file

    Returns:
        Plaintext bytes

    Raises:
        TooShortError: If blob is shorter than 7 bytes
        InvalidKeyIndexError: If the key selector is out of range
        NotEncryptedError: If the header does not validate
    """
    blob = bytes(blob)
    context = CipherContext.from_blob(blob, metadata)
    rotation = RotationEngine()

    validate_header(
        blob,
        context.key_index,
        context.seq_constant,
        context.owner_id,
        metadata.time_value,
        rotation,
    )

    return decode_body(blob[BODY_START:], context, rotation)


def decode_blob(blob: bytes, metadata: FileMetadata) -> str:
    """
    Decode obfuscated bytes to the plaintext password.

    Bytes that are not valid UTF-8 are kept as surrogate escapes so the
    result encodes back to the exact plaintext bytes.
    """
    return decode_bytes(blob, metadata).decode("utf-8", errors="surrogateescape")


def inspect_blob(blob: bytes, metadata: FileMetadata) -> DecodeReport:
    """
    Run key selection and header checks, collecting problems instead of raising.

    Args:
        blob: Contents of the secret file
        metadata: Modification time and uid of the secret file

    Returns:
        DecodeReport describing the key, header and any problems
    """
    blob = bytes(blob)
    try:
        context = CipherContext.from_blob(blob, metadata)
    except ObfuscationError as e:
        return DecodeReport(context=None, header=None, metadata=metadata,
                            problems=[str(e)], length=len(blob))

    result = check_header(
        blob,
        context.key_index,
        context.seq_constant,
        context.owner_id,
        metadata.time_value,
        RotationEngine(),
    )
    return DecodeReport(context=context, header=result.header, metadata=metadata,
                        problems=result.problems, length=len(blob))


def read_secret_file(path: Optional[Union[str, Path]] = None):
    """
    Read the secret file contents and metadata.

    Args:
        path: Secret file path (default: ~/.irods/.irodsA)

    Returns:
        Tuple of (blob, FileMetadata)

    Raises:
        SecretFileError: If the file or its metadata cannot be read
    """
    path = Path(path).expanduser() if path else default_secret_path()

    # content and metadata come from the same open file
    try:
        with open(path, "rb") as f:
            blob = f.read()
            metadata = FileMetadata.from_stat(os.fstat(f.fileno()))
    except OSError as e:
        raise SecretFileError(f"Cannot read secret file {path}: {e}") from e

    logger.debug(f"Read {len(blob)} bytes from {path}")
    return blob, metadata


def obfi_decode(path: Optional[Union[str, Path]] = None) -> str:
    """
    Read and decode the obfuscated password file.

    Args:
        path: Secret file path (default: ~/.irods/.irodsA)

    Returns:
        Plaintext password

    Raises:
        SecretFileError: If the file cannot be read
        TooShortError, InvalidKeyIndexError, NotEncryptedError: If decoding fails
    """
    blob, metadata = read_secret_file(path)
    password = decode_blob(blob, metadata)
    logger.info(f"Decoded password from {path or default_secret_path()}")
    return password
