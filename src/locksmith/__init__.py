"""Locksmith: cipher keys kept in an encrypted, obfuscated key file."""

from .core.exceptions import (
    LocksmithError,
    MalformedKeyFileError,
    CipherError,
    InvalidKeyError,
    PathResolutionError,
    KeyFileExistsError,
    ConfigurationError,
)
from .security.cipher import Cipher
from .security.envelope import CIPHER_MARK

__version__ = "0.1.0"

__all__ = [
    "Cipher",
    "CIPHER_MARK",
    "LocksmithError",
    "MalformedKeyFileError",
    "CipherError",
    "InvalidKeyError",
    "PathResolutionError",
    "KeyFileExistsError",
    "ConfigurationError",
]
