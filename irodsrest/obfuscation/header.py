"""
Header validation for obfuscated .irodsA text.

The first six bytes are a leading '.', then five wheel-encoded header
characters: a sentinel derived from the key index and four nibbles of
the low 16 bits of the time the secret was written. None of it is part
of the plaintext.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from irodsrest.obfuscation.errors import NotEncryptedError
from irodsrest.obfuscation.rotation import RotationEngine
from irodsrest.obfuscation.tables import WHEEL
from irodsrest.obfuscation.time_check import obfi_time_check

logger = logging.getLogger(__name__)

LEADING_BYTE = ord(".")
HEADER_LENGTH = 6
SENTINEL_BASE = ord("S")
NIBBLE_BASE = ord("a")


def expected_sentinel(key_index: int) -> int:
    """Sentinel character code the header must decode to for key_index."""
    return SENTINEL_BASE - (key_index & 0x7) * 2


def header_characters(key_index: int, time_value: int) -> bytes:
    """
    Build the plain header characters for key_index and a 16-bit time.

    Args:
        key_index: Key index in [0, 15]
        time_value: Time value (only the low 16 bits are kept)

    Returns:
        Five header bytes before wheel encoding
    """
    t = time_value & 0xFFFF
    return bytes([
        expected_sentinel(key_index),
        ((t >> 4) & 0xF) + NIBBLE_BASE,
        (t & 0xF) + NIBBLE_BASE,
        ((t >> 12) & 0xF) + NIBBLE_BASE,
        ((t >> 8) & 0xF) + NIBBLE_BASE,
    ])


@dataclass(frozen=True)
class HeaderInfo:
    """Decoded view of the six header bytes."""
    leading_byte: int
    decoded: bytes

    @property
    def sentinel(self) -> int:
        return self.decoded[0]

    @property
    def encoded_time(self) -> int:
        d = [c - NIBBLE_BASE for c in self.decoded]
        return (d[1] << 4) + d[2] + (d[3] << 12) + (d[4] << 8)

    def problems(self, key_index: int, time_value: int) -> List[str]:
        """
        Collect every reason this header does not validate.

        Args:
            key_index: Key index read from the selector byte
            time_value: File modification time & 0xFFFF

        Returns:
            List of problem descriptions (empty if the header is valid)
        """
        problems = []

        if self.leading_byte != LEADING_BYTE:
            problems.append(f"leading byte is {chr(self.leading_byte)!r}, expected '.'")

        sentinel = expected_sentinel(key_index)
        if self.sentinel != sentinel:
            problems.append(
                f"sentinel decodes to {chr(self.sentinel)!r}, expected {chr(sentinel)!r}"
            )

        if not obfi_time_check(self.encoded_time, time_value):
            problems.append(
                f"encoded time {self.encoded_time} does not match file time {time_value}"
            )

        return problems


@dataclass
class HeaderCheck:
    """Header plus the outcome of validating it."""
    header: HeaderInfo
    problems: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.problems


def read_header(blob: bytes, seq_constant: int, owner_id: int,
                rotation: RotationEngine) -> HeaderInfo:
    """
    Decode bytes 2-6 through the wheel.

    Consumes five offsets from ``rotation``; the body decoder continues
    from the same engine.
    """
    decoded = bytearray()
    for code in blob[1:HEADER_LENGTH]:
        offset = rotation.next_offset(seq_constant, owner_id)
        decoded.append(WHEEL.shift(code, -offset))
    return HeaderInfo(leading_byte=blob[0], decoded=bytes(decoded))


def check_header(blob: bytes, key_index: int, seq_constant: int, owner_id: int,
                 time_value: int, rotation: RotationEngine) -> HeaderCheck:
    """Decode the header and collect validation problems without raising."""
    header = read_header(blob, seq_constant, owner_id, rotation)
    return HeaderCheck(header=header, problems=header.problems(key_index, time_value))


def validate_header(blob: bytes, key_index: int, seq_constant: int, owner_id: int,
                    time_value: int, rotation: RotationEngine) -> HeaderInfo:
    """
    Decode and validate the header.

    Legacy client comments describe handing back the input unchanged on
    failure. This raises instead, matching what the legacy control flow
    actually does.

    Returns:
        The decoded HeaderInfo

    Raises:
        NotEncryptedError: If the leading byte, sentinel or time check fails
    """
    result = check_header(blob, key_index, seq_constant, owner_id, time_value, rotation)
    if not result.valid:
        logger.debug(f"Header rejected: {'; '.join(result.problems)}")
        raise NotEncryptedError(
            "Password is not encrypted: " + "; ".join(result.problems),
            problems=result.problems,
        )
    return result.header
