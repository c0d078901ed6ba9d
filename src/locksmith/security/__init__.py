"""Security helpers: the key file envelope and the Cipher key manager.

This package provides:
- AES-256-CBC encryption of bytes and base64 text
- encoding/decoding of the doubly wrapped key file
- the Cipher key manager that owns a key file and a master key
- Argon2id master key derivation and OS keyring storage
"""

from .aes import generate_key, encrypt_bytes, decrypt_bytes, encrypt_text, decrypt_text
from .envelope import (
    CIPHER_MARK,
    KEY_FILE_START_MARK,
    KEY_FILE_CIPHER_MARK,
    encode_key_file,
    decode_key_file,
)
from .keyfile import create_key_file, read_key_file, delete_key_file
from .cipher import Cipher
from .kdf import generate_salt, derive_master_key
from .keystore import save_key, load_key, delete_key

__all__ = [
    "generate_key",
    "encrypt_bytes",
    "decrypt_bytes",
    "encrypt_text",
    "decrypt_text",
    "CIPHER_MARK",
    "KEY_FILE_START_MARK",
    "KEY_FILE_CIPHER_MARK",
    "encode_key_file",
    "decode_key_file",
    "create_key_file",
    "read_key_file",
    "delete_key_file",
    "Cipher",
    "generate_salt",
    "derive_master_key",
    "save_key",
    "load_key",
    "delete_key",
]
