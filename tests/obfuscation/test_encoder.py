import os
import stat
import sys

import pytest

from irodsrest.obfuscation import encoder
from irodsrest.obfuscation.decoder import FileMetadata, decode_blob, obfi_decode
from irodsrest.obfuscation.encoder import obfi_encode, write_secret_file
from irodsrest.obfuscation.errors import InvalidKeyIndexError, SecretFileError


@pytest.mark.unit
def test_encode_matches_hand_computed_vectors(abc_blob, space_blob, rods_blob):
    assert obfi_encode("abc", mtime=0, uid=0, key_index=0) == abc_blob
    assert obfi_encode("a b", mtime=0, uid=0, key_index=0) == space_blob
    assert obfi_encode("rods pass!", mtime=1700000000, uid=1000, key_index=5) == rods_blob


@pytest.mark.unit
def test_encode_layout():
    blob = obfi_encode("x", mtime=42, uid=7, key_index=12)
    assert blob[:1] == b"."
    assert blob[6] == ord("e") + 12
    assert len(blob) == 8


@pytest.mark.unit
def test_random_key_index_decodes(monkeypatch):
    monkeypatch.setattr(encoder.secrets, "randbelow", lambda n: 11)
    blob = obfi_encode("p@ss w0rd", mtime=1700000000, uid=501)
    assert blob[6] == ord("e") + 11
    assert decode_blob(blob, FileMetadata(mtime=1700000005, uid=501)) == "p@ss w0rd"


@pytest.mark.unit
def test_uid_is_masked_like_decoder():
    blob = obfi_encode("rods", mtime=100, uid=0x1F5F, key_index=4)
    assert blob == obfi_encode("rods", mtime=100, uid=0xF5F, key_index=4)


@pytest.mark.unit
def test_non_utf8_bytes_survive():
    blob = obfi_encode(b"caf\xe9", mtime=0, uid=0, key_index=1)
    password = decode_blob(blob, FileMetadata(mtime=0, uid=0))
    assert password.encode("utf-8", errors="surrogateescape") == b"caf\xe9"


@pytest.mark.unit
@pytest.mark.parametrize("key_index", [-1, 16])
def test_encode_rejects_bad_key_index(key_index):
    with pytest.raises(InvalidKeyIndexError):
        obfi_encode("rods", mtime=0, uid=0, key_index=key_index)


@pytest.mark.integration
def test_write_secret_file_round_trip(tmp_path):
    path = write_secret_file("rods", tmp_path / ".irods" / ".irodsA", key_index=6)

    assert path.exists()
    assert path.read_bytes()[6] == ord("e") + 6
    assert obfi_decode(path) == "rods"


@pytest.mark.integration
@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_write_secret_file_is_private(tmp_path):
    path = write_secret_file("rods", tmp_path / ".irodsA")
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


@pytest.mark.integration
def test_write_secret_file_io_failure(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    with pytest.raises(SecretFileError):
        write_secret_file("rods", blocker / ".irodsA")
