"""
Key manager: encrypts and decrypts strings with a cipher key kept in a key file.

The cipher key is created or loaded lazily on first use and then cached for
the lifetime of the :class:`Cipher` instance. Callers that store mixed
plaintext/ciphertext values (configuration files, environment variables) can
prefix ciphertext with :data:`CIPHER_MARK` and use :meth:`Cipher.decrypt_if_marked`
to read either form.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from locksmith.core.exceptions import InvalidKeyError, KeyFileExistsError
from locksmith.core.paths import default_key_path
from . import aes
from .envelope import CIPHER_MARK
from .keyfile import create_key_file, delete_key_file, read_key_file


logger = logging.getLogger(__name__)


class Cipher:
    """
    Encrypt and decrypt data with a cipher key stored in an encrypted key file.

    - ``master_key`` must be exactly 32 bytes; it only ever wraps the key file
    - ``filename`` defaults to ``<executable name>.key`` next to the running
      program (see :func:`locksmith.core.paths.default_key_path`)
    """

    def __init__(self, master_key: bytes, filename: Optional[str | os.PathLike] = None):
        if not isinstance(master_key, (bytes, bytearray)) or len(master_key) != aes.KEY_SIZE:
            raise InvalidKeyError(f"master key must be {aes.KEY_SIZE} bytes")
        self._master_key = bytes(master_key)
        self._filename = str(filename) if filename is not None else default_key_path()
        self._key: Optional[bytes] = None
        self._lock = threading.Lock()

    @property
    def filename(self) -> str:
        """The path of the key file."""
        return self._filename

    # ------------------------------------------------------------------
    # Key lifecycle
    # ------------------------------------------------------------------

    def load_key(self) -> bytes:
        """
        Return the cipher key, creating the key file first if it does not exist.

        The key is read at most once per instance; concurrent callers wait for
        the first one to finish.
        """
        key = self._key
        if key is not None:
            return key

        with self._lock:
            if self._key is None:
                self._key = self._fetch_key()
            return self._key

    def _fetch_key(self) -> bytes:
        path = Path(self._filename)
        # directories are rejected by read_key_file before anything is created
        if not path.is_dir() and not path.exists():
            logger.info("no key file at %s; generating a new cipher key", path)
            try:
                create_key_file(path, self._master_key)
            except KeyFileExistsError:
                # another process created it first; use theirs
                logger.info("key file %s was created concurrently; loading it", path)
        return read_key_file(path, self._master_key)

    def reset(self) -> None:
        """
        Delete the key file and forget the cached cipher key.

        The next encrypt or decrypt generates a fresh key file. This is
        destructive: anything encrypted under the old key can no longer be
        decrypted.
        """
        with self._lock:
            delete_key_file(self._filename)
            self._key = None

    # ------------------------------------------------------------------
    # Byte-level encryption
    # ------------------------------------------------------------------

    def encrypt_bytes(self, data: bytes) -> bytes:
        """Encrypt raw bytes; the result is ``iv || ciphertext``."""
        return aes.encrypt_bytes(self.load_key(), data)

    def decrypt_bytes(self, blob: bytes) -> bytes:
        return aes.decrypt_bytes(self.load_key(), blob)

    # ------------------------------------------------------------------
    # String encryption
    # ------------------------------------------------------------------

    def encrypt(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` and return base64 text without a marker."""
        return aes.encrypt_text(self.load_key(), plaintext)

    def encrypt_marked(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` and prefix the result with :data:`CIPHER_MARK`."""
        return CIPHER_MARK + self.encrypt(plaintext)

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt base64 text produced by :meth:`encrypt`.

        A leading :data:`CIPHER_MARK` is stripped first; base64 never contains
        one so this cannot misread unmarked input.
        """
        if ciphertext.startswith(CIPHER_MARK):
            ciphertext = ciphertext[len(CIPHER_MARK):]
        return aes.decrypt_text(self.load_key(), ciphertext)

    def decrypt_if_marked(self, data: Optional[str]) -> Optional[str]:
        """Decrypt ``data`` only if it starts with :data:`CIPHER_MARK`; otherwise return it as is."""
        if self.is_encrypted(data):
            return self.decrypt(data)
        return data

    @staticmethod
    def is_encrypted(data: Optional[str]) -> bool:
        """Return ``True`` if ``data`` starts with :data:`CIPHER_MARK`."""
        return data is not None and data.startswith(CIPHER_MARK)
