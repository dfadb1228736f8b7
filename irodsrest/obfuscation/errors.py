"""Error taxonomy for .irodsA deobfuscation."""

from enum import Enum
from typing import List, Optional


class DecodeFailure(Enum):
    """Classify why a secret could not be decoded."""
    TOO_SHORT = "too_short"                  # fewer than 7 bytes
    INVALID_KEY_INDEX = "invalid_key_index"  # key byte outside 'e'..'t'
    NOT_ENCRYPTED = "not_encrypted"          # header or timestamp mismatch
    IO_FAILURE = "io_failure"                # secret file unreadable


class ObfuscationError(Exception):
    """
    Base exception for obfuscation failures.

    Every failure is deterministic for a given file, so none of these
    are worth retrying.
    """
    reason: DecodeFailure = DecodeFailure.NOT_ENCRYPTED


class TooShortError(ObfuscationError):
    """Obfuscated text is too short to carry a header and key byte."""
    reason = DecodeFailure.TOO_SHORT


class InvalidKeyIndexError(ObfuscationError):
    """Key selector byte does not map into the seq table."""
    reason = DecodeFailure.INVALID_KEY_INDEX

    def __init__(self, message: str, key_index: Optional[int] = None):
        super().__init__(message)
        self.key_index = key_index


class NotEncryptedError(ObfuscationError):
    """Header did not validate, the text does not look obfuscated."""
    reason = DecodeFailure.NOT_ENCRYPTED

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        super().__init__(message)
        self.problems = list(problems or [])


class SecretFileError(ObfuscationError):
    """Secret file or its metadata could not be read or written."""
    reason = DecodeFailure.IO_FAILURE
