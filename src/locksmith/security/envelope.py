"""Key file envelope codec.

The key file is two nested AES-256-CBC envelopes (each blob is ``iv || ct``,
see :mod:`locksmith.security.aes`).

Outer plaintext, encrypted with the master key:
- 16 bytes: start mark b'KEY:aes-256-cbc;'
- 256 bytes: random prefix
- 32 bytes: intermediate key
- N bytes: inner envelope ciphertext

Inner plaintext, encrypted with the intermediate key:
- 12 bytes: cipher mark b'aes-256-cbc;'
- 32 bytes: cipher key
- 256 bytes: random suffix

The prefix and suffix only disguise the layout; they add no strength. The
format has no version field besides the two marks, so any change to it is
a breaking change.
"""
import os
from typing import Optional, Tuple

from locksmith.core.exceptions import CipherError, InvalidKeyError, MalformedKeyFileError
from .aes import CIPHER_NAME, BLOCK_SIZE, IV_SIZE, KEY_SIZE, decrypt_bytes, encrypt_bytes, generate_key


PAD_SIZE = 256

CIPHER_MARK = CIPHER_NAME + ";"
KEY_FILE_START_MARK = ("KEY:" + CIPHER_MARK).encode("ascii")
KEY_FILE_CIPHER_MARK = CIPHER_MARK.encode("ascii")

# outer plaintext offsets
INTERMEDIATE_KEY_OFFSET = len(KEY_FILE_START_MARK) + PAD_SIZE
INNER_ENVELOPE_OFFSET = INTERMEDIATE_KEY_OFFSET + KEY_SIZE

# inner plaintext offsets
CIPHER_KEY_OFFSET = len(KEY_FILE_CIPHER_MARK)
INNER_PLAINTEXT_SIZE = CIPHER_KEY_OFFSET + KEY_SIZE + PAD_SIZE
# PKCS#7 always adds at least one byte of padding
INNER_ENVELOPE_SIZE = IV_SIZE + (INNER_PLAINTEXT_SIZE // BLOCK_SIZE + 1) * BLOCK_SIZE


def encode_key_file(master_key: bytes, *, cipher_key: Optional[bytes] = None) -> Tuple[bytes, bytes]:
    """
    Build the bytes of a new key file.

    Generates the prefix, cipher key, intermediate key and suffix, wraps the
    cipher key with the intermediate key and the whole outer envelope with
    ``master_key``. Returns ``(file_bytes, cipher_key)``.

    ``cipher_key`` may be passed to wrap an existing key instead of a fresh one.
    """
    prefix = os.urandom(PAD_SIZE)
    if cipher_key is None:
        cipher_key = generate_key()
    elif len(cipher_key) != KEY_SIZE:
        raise InvalidKeyError(f"cipher key must be {KEY_SIZE} bytes")
    intermediate_key = generate_key()
    suffix = os.urandom(PAD_SIZE)

    inner = encrypt_bytes(intermediate_key, KEY_FILE_CIPHER_MARK + cipher_key + suffix)
    outer = encrypt_bytes(master_key, KEY_FILE_START_MARK + prefix + intermediate_key + inner)
    return outer, bytes(cipher_key)


def decode_key_file(master_key: bytes, data: bytes, filename: str = "") -> bytes:
    """
    Unwrap the cipher key from key file bytes.

    Every structural or cryptographic failure raises
    :class:`MalformedKeyFileError`; ``filename`` is only used in the message.
    """
    try:
        contents = decrypt_bytes(master_key, data)
    except CipherError as e:
        raise MalformedKeyFileError(filename, "outer envelope does not decrypt") from e

    if contents[: len(KEY_FILE_START_MARK)] != KEY_FILE_START_MARK:
        raise MalformedKeyFileError(filename, "start mark mismatch")
    if len(contents) != INNER_ENVELOPE_OFFSET + INNER_ENVELOPE_SIZE:
        raise MalformedKeyFileError(filename, "unexpected outer envelope size")

    intermediate_key = contents[INTERMEDIATE_KEY_OFFSET:INNER_ENVELOPE_OFFSET]
    encrypted_cipher_contents = contents[INNER_ENVELOPE_OFFSET:]

    try:
        cipher_contents = decrypt_bytes(intermediate_key, encrypted_cipher_contents)
    except CipherError as e:
        raise MalformedKeyFileError(filename, "inner envelope does not decrypt") from e

    # both the size and the mark must match
    if (
        len(cipher_contents) != INNER_PLAINTEXT_SIZE
        or cipher_contents[:CIPHER_KEY_OFFSET] != KEY_FILE_CIPHER_MARK
    ):
        raise MalformedKeyFileError(filename, "cipher mark or size mismatch")

    return cipher_contents[CIPHER_KEY_OFFSET : CIPHER_KEY_OFFSET + KEY_SIZE]
