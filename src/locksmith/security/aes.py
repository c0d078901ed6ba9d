"""AES-256-CBC byte and text primitive.

Blob layout: 16-byte random IV followed by the CBC ciphertext of the
PKCS#7-padded input. Text helpers layer UTF-8 and strict base64 on top of the
byte functions; they never change the byte format.

CBC gives confidentiality only. Nothing here detects tampering beyond what
padding validation happens to catch.
"""
import base64
import binascii
import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from locksmith.core.exceptions import CipherError, InvalidKeyError


CIPHER_NAME = "aes-256-cbc"
KEY_SIZE = 32
IV_SIZE = 16
BLOCK_SIZE = 16


def generate_key() -> bytes:
    return os.urandom(KEY_SIZE)


def _check_key(key: bytes) -> None:
    if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_SIZE:
        raise InvalidKeyError(f"{CIPHER_NAME} requires a {KEY_SIZE}-byte key")


def encrypt_bytes(key: bytes, data: bytes) -> bytes:
    """Encrypt ``data`` under ``key`` and return ``iv || ciphertext``."""
    _check_key(key)
    iv = os.urandom(IV_SIZE)

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(data) + padder.finalize()

    encryptor = Cipher(algorithms.AES(bytes(key)), modes.CBC(iv)).encryptor()
    return iv + encryptor.update(padded) + encryptor.finalize()


def decrypt_bytes(key: bytes, blob: bytes) -> bytes:
    """Decrypt an ``iv || ciphertext`` blob produced by :func:`encrypt_bytes`."""
    _check_key(key)
    if len(blob) < IV_SIZE + BLOCK_SIZE:
        raise CipherError("ciphertext too short to contain IV and one block")
    iv, ct = blob[:IV_SIZE], blob[IV_SIZE:]
    if len(ct) % BLOCK_SIZE:
        raise CipherError("ciphertext is not a multiple of the block size")

    decryptor = Cipher(algorithms.AES(bytes(key)), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ct) + decryptor.finalize()

    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise CipherError("bad decrypt (invalid padding)") from e


def encrypt_text(key: bytes, text: str) -> str:
    """Encrypt ``text`` and return the blob as a base64 string."""
    blob = encrypt_bytes(key, text.encode("utf-8"))
    return base64.b64encode(blob).decode("ascii")


def decrypt_text(key: bytes, data: str) -> str:
    """Decrypt a base64 string produced by :func:`encrypt_text`."""
    try:
        blob = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CipherError("ciphertext is not valid base64") from e

    plaintext = decrypt_bytes(key, blob)
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CipherError("decrypted data is not valid UTF-8") from e
