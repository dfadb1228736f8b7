"""Legacy .irodsA password obfuscation (obfiDecode/obfiEncode)."""

from irodsrest.obfuscation.errors import (
    DecodeFailure,
    ObfuscationError,
    TooShortError,
    InvalidKeyIndexError,
    NotEncryptedError,
    SecretFileError,
)
from irodsrest.obfuscation.decoder import (
    FileMetadata,
    CipherContext,
    decode_blob,
    decode_bytes,
    inspect_blob,
    obfi_decode,
    default_secret_path,
)
from irodsrest.obfuscation.encoder import obfi_encode, write_secret_file

__all__ = [
    "DecodeFailure",
    "ObfuscationError",
    "TooShortError",
    "InvalidKeyIndexError",
    "NotEncryptedError",
    "SecretFileError",
    "FileMetadata",
    "CipherContext",
    "decode_blob",
    "decode_bytes",
    "inspect_blob",
    "obfi_decode",
    "default_secret_path",
    "obfi_encode",
    "write_secret_file",
]
