"""Key file disk I/O.

Key files are written whole and never updated in place. Creation goes
through a temporary file in the target directory that is hard-linked into
place, so a crash never leaves a partial key file and a second creator racing
for the same path fails instead of overwriting the first one.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from locksmith.core.exceptions import KeyFileExistsError, MalformedKeyFileError
from .envelope import decode_key_file, encode_key_file


logger = logging.getLogger(__name__)


def _ensure_not_directory(path: Path) -> None:
    if path.is_dir():
        raise MalformedKeyFileError(str(path), "path is a directory")


def create_key_file(path: str | os.PathLike, master_key: bytes) -> bytes:
    """
    Generate a new key file at ``path`` and return its cipher key.

    Raises :class:`KeyFileExistsError` if anything already exists at ``path``.
    """
    path = Path(path)
    if path.exists():
        raise KeyFileExistsError(str(path))

    data, cipher_key = encode_key_file(master_key)

    directory = path.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    except OSError as e:
        raise MalformedKeyFileError(str(path), "cannot create key file") from e
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        # link() refuses to replace an existing file
        os.link(tmp_path, path)
    except FileExistsError as e:
        raise KeyFileExistsError(str(path)) from e
    except OSError as e:
        raise MalformedKeyFileError(str(path), "cannot create key file") from e
    finally:
        tmp_path.unlink(missing_ok=True)

    logger.info("created key file %s", path)
    return cipher_key


def read_key_file(path: str | os.PathLike, master_key: bytes) -> bytes:
    """Read the key file at ``path`` and return the unwrapped cipher key."""
    path = Path(path)
    _ensure_not_directory(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise MalformedKeyFileError(str(path), "cannot read key file") from e
    cipher_key = decode_key_file(master_key, data, str(path))
    logger.debug("loaded key file %s", path)
    return cipher_key


def delete_key_file(path: str | os.PathLike) -> bool:
    """Delete the key file at ``path``; return whether one was there."""
    path = Path(path)
    _ensure_not_directory(path)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    logger.warning("deleted key file %s", path)
    return True
