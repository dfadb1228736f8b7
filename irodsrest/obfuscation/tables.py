"""
Fixed lookup tables for the legacy obfuscation cipher.

The wheel order and the seq constants are load-bearing: they define both
the encode and decode mapping and must match the native iRODS clients
byte for byte.
"""

import string
from typing import Optional, Tuple, Union

from irodsrest.obfuscation.errors import TooShortError, InvalidKeyIndexError

# ASCII offset of the key selector byte ('e' selects index 0)
KEY_BYTE_BASE = 101

# 0-indexed position of the key selector byte in the obfuscated text
KEY_BYTE_POSITION = 6

SEQ_CONSTANTS: Tuple[int, ...] = (
    0xd768b678,
    0xedfdaf56,
    0x2420231b,
    0x987098d8,
    0xc1bdfeee,
    0xf572341f,
    0x478def3a,
    0xa830d343,
    0x774dfa2a,
    0x6720731e,
    0x346fa320,
    0x6ffdf43a,
    0x7723a320,
    0xdf67d02e,
    0x86ad240a,
    0xe76d342e,
)


class WheelTable:
    """
    Ordered substitution alphabet of 77 characters.

    Digits, uppercase, lowercase, then the 15 punctuation characters
    with ASCII codes 33 through 47.
    """

    def __init__(self):
        chars = (
            string.digits
            + string.ascii_uppercase
            + string.ascii_lowercase
            + "".join(chr(code) for code in range(33, 48))
        )
        self._chars = chars
        self._codes = bytes(chars, "ascii")
        self._positions = {code: i for i, code in enumerate(self._codes)}

    def __len__(self) -> int:
        return len(self._chars)

    def __iter__(self):
        return iter(self._chars)

    def index_of(self, char: Union[str, int]) -> Optional[int]:
        """
        Look up the wheel position of a character.

        Args:
            char: Single character or its byte value

        Returns:
            Position in [0, 76], or None if the character is not on the wheel
        """
        code = ord(char) if isinstance(char, str) else char
        return self._positions.get(code)

    def at(self, position: int) -> str:
        """Character at ``position mod 77`` (always non-negative)."""
        return self._chars[position % len(self._chars)]

    def code_at(self, position: int) -> int:
        """Byte value at ``position mod 77``."""
        return self._codes[position % len(self._codes)]

    def shift(self, code: int, delta: int) -> int:
        """
        Rotate a byte along the wheel.

        Bytes that are not on the wheel come back unchanged.

        Args:
            code: Byte value to substitute
            delta: Positions to move (negative to decode)

        Returns:
            Substituted byte value
        """
        position = self._positions.get(code)
        if position is None:
            return code
        return self.code_at(position + delta)


WHEEL = WheelTable()


def seq_constant(key_index: int) -> int:
    """
    Return the 32-bit seq constant for a key index.

    Raises:
        InvalidKeyIndexError: If key_index is outside [0, 15]
    """
    if key_index < 0 or key_index >= len(SEQ_CONSTANTS):
        raise InvalidKeyIndexError(
            f"Key index {key_index} outside [0, {len(SEQ_CONSTANTS) - 1}]",
            key_index=key_index,
        )
    return SEQ_CONSTANTS[key_index]


def key_byte(key_index: int) -> int:
    """
    Byte value that selects key_index when stored at position 7.

    Raises:
        InvalidKeyIndexError: If key_index is outside [0, 15]
    """
    if not 0 <= key_index < len(SEQ_CONSTANTS):
        raise InvalidKeyIndexError(
            f"Key index {key_index} outside [0, {len(SEQ_CONSTANTS) - 1}]",
            key_index=key_index,
        )
    return KEY_BYTE_BASE + key_index


def select_key(blob: bytes) -> Tuple[int, int]:
    """
    Read the key selector from obfuscated text.

    Args:
        blob: Raw obfuscated bytes

    Returns:
        Tuple of (key_index, seq_constant)

    Raises:
        TooShortError: If blob has fewer than 7 bytes
        InvalidKeyIndexError: If the selector byte maps outside [0, 15]
    """
    if len(blob) <= KEY_BYTE_POSITION:
        raise TooShortError(
            f"Obfuscated text is {len(blob)} bytes, need at least {KEY_BYTE_POSITION + 1}"
        )

    rval = blob[KEY_BYTE_POSITION] - KEY_BYTE_BASE
    return rval, seq_constant(rval)
