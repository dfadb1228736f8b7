"""
Shared pytest fixtures and utilities for the irodsrest test suite.
"""

import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest
import yaml

from irodsrest.obfuscation.decoder import FileMetadata


# Hand-computed vectors: key index 0 (seq 0xd768b678), uid 0, mtime 0
ABC_BLOB = b'.qpz"ler"$'
SPACE_BLOB = b'.qpz"ler #'

# Key index 5, uid 1000 (masked to 840), mtime 1700000000 (low 16 bits 61696)
RODS_BLOB = b'.gWj)Xjo*h\' .W",w'


@pytest.fixture
def abc_blob() -> bytes:
    """Decodes to "abc" with zero_metadata."""
    return ABC_BLOB


@pytest.fixture
def space_blob() -> bytes:
    """Decodes to "a b" with zero_metadata; the space is off the wheel."""
    return SPACE_BLOB


@pytest.fixture
def zero_metadata() -> FileMetadata:
    return FileMetadata(mtime=0, uid=0)


@pytest.fixture
def rods_blob() -> bytes:
    """Decodes to "rods pass!" with rods_metadata."""
    return RODS_BLOB


@pytest.fixture
def rods_metadata() -> FileMetadata:
    return FileMetadata(mtime=1700000000, uid=1000)


@pytest.fixture
def current_uid() -> int:
    """Numeric uid that owns files created by the tests."""
    return os.getuid() if hasattr(os, "getuid") else 0


@pytest.fixture
def make_secret_file(tmp_path: Path) -> Callable[..., Path]:
    """
    Write raw bytes to a secret file and pin its mtime.

    Usage:
        path = make_secret_file(blob, mtime=1700000000)
    """

    def _builder(blob: bytes, mtime: int = 1700000000, name: str = ".irodsA") -> Path:
        path = tmp_path / ".irods" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(blob)
        os.utime(path, (mtime, mtime))
        return path

    return _builder


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[[Optional[Dict[str, Any]]], Path]:
    """
    Create a minimal irodsrest.yaml in a temp directory.

    Usage:
        path = make_config({"irods": {"password": "rods"}})
    """

    def _builder(overrides: Optional[Dict[str, Any]] = None) -> Path:
        base = {
            "irods": {
                "host": "localhost",
                "port": 8080,
                "username": "rods",
                "zone": "tempZone",
            },
            "logging": {"level": "WARNING", "console": False},
        }
        for section, values in (overrides or {}).items():
            base.setdefault(section, {}).update(values)

        cfg_path = tmp_path / "irodsrest.yaml"
        cfg_path.write_text(yaml.safe_dump(base))
        return cfg_path

    return _builder

