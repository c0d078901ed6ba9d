"""
Unit tests for key file disk I/O.
"""

import os
from unittest.mock import patch

import pytest

from locksmith.core.exceptions import KeyFileExistsError, MalformedKeyFileError
from locksmith.security.keyfile import create_key_file, delete_key_file, read_key_file


# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture
def master_key():
    return b"\x00" * 32


@pytest.fixture
def key_path(tmp_path):
    return tmp_path / "app.key"


# ==============================================================================
# Tests: Create / read
# ==============================================================================

def test_create_then_read(key_path, master_key):
    cipher_key = create_key_file(key_path, master_key)
    assert key_path.is_file()
    assert read_key_file(key_path, master_key) == cipher_key


def test_create_accepts_str_path(key_path, master_key):
    cipher_key = create_key_file(str(key_path), master_key)
    assert read_key_file(str(key_path), master_key) == cipher_key


def test_create_makes_parent_directories(tmp_path, master_key):
    path = tmp_path / "nested" / "dir" / "app.key"
    create_key_file(path, master_key)
    assert path.is_file()


def test_create_leaves_no_temp_files(key_path, master_key):
    create_key_file(key_path, master_key)
    assert sorted(os.listdir(key_path.parent)) == ["app.key"]


def test_create_refuses_existing_file(key_path, master_key):
    """The first file must be left untouched."""
    create_key_file(key_path, master_key)
    before = key_path.read_bytes()

    with pytest.raises(KeyFileExistsError, match="key file must not exist"):
        create_key_file(key_path, master_key)

    assert key_path.read_bytes() == before


def test_create_refuses_directory(tmp_path, master_key):
    with pytest.raises(KeyFileExistsError):
        create_key_file(tmp_path, master_key)


def test_create_loses_race_without_overwriting(key_path, master_key):
    """Another process creating the file between check and link wins."""
    with patch("locksmith.security.keyfile.os.link", side_effect=FileExistsError):
        with pytest.raises(KeyFileExistsError):
            create_key_file(key_path, master_key)

    # the temporary file is cleaned up and nothing was written at the target
    assert os.listdir(key_path.parent) == []


def test_read_missing_file(key_path, master_key):
    with pytest.raises(MalformedKeyFileError, match="cannot read key file"):
        read_key_file(key_path, master_key)


def test_read_directory_is_malformed(tmp_path, master_key):
    with pytest.raises(MalformedKeyFileError, match="directory"):
        read_key_file(tmp_path, master_key)


def test_read_with_wrong_master_key(key_path, master_key):
    create_key_file(key_path, master_key)
    with pytest.raises(MalformedKeyFileError):
        read_key_file(key_path, b"\x01" * 32)


def test_read_corrupt_file(key_path, master_key):
    key_path.write_bytes(b"\x00" * 100)
    with pytest.raises(MalformedKeyFileError):
        read_key_file(key_path, master_key)


# ==============================================================================
# Tests: Delete
# ==============================================================================

def test_delete_existing(key_path, master_key):
    create_key_file(key_path, master_key)
    assert delete_key_file(key_path) is True
    assert not key_path.exists()


def test_delete_missing(key_path):
    assert delete_key_file(key_path) is False


def test_delete_directory_is_malformed(tmp_path):
    with pytest.raises(MalformedKeyFileError):
        delete_key_file(tmp_path)
    assert tmp_path.is_dir()


# ==============================================================================
# Tests: Filesystem errors
# ==============================================================================

def test_create_under_regular_file_is_malformed(tmp_path, master_key):
    """A parent path that is a regular file cannot hold a key file."""
    blocker = tmp_path / "notadir"
    blocker.write_bytes(b"plain file")

    with pytest.raises(MalformedKeyFileError, match="cannot create key file") as excinfo:
        create_key_file(blocker / "app.key", master_key)

    assert isinstance(excinfo.value.__cause__, OSError)
    assert blocker.read_bytes() == b"plain file"


def test_create_write_failure_is_malformed(key_path, master_key):
    with patch("locksmith.security.keyfile.os.fsync", side_effect=OSError(28, "No space left on device")):
        with pytest.raises(MalformedKeyFileError, match="cannot create key file"):
            create_key_file(key_path, master_key)

    assert os.listdir(key_path.parent) == []
