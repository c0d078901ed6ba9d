"""Argon2id derivation of master keys from passphrases.

A :class:`~locksmith.security.cipher.Cipher` needs a raw 32-byte master key.
Applications that only have a passphrase derive one here; the salt and cost
parameters must be stored by the caller to derive the same key again.
"""
from __future__ import annotations

import os

from argon2.low_level import Type, hash_secret_raw

from .aes import KEY_SIZE


DEFAULT_TIME_COST = 3
DEFAULT_MEMORY_COST = 65536  # KiB
DEFAULT_PARALLELISM = 1


def generate_salt(length: int = 16) -> bytes:
    """Return a cryptographically secure random salt."""
    return os.urandom(length)


def derive_master_key(
    passphrase: bytes | str,
    salt: bytes,
    time_cost: int = DEFAULT_TIME_COST,
    memory_cost: int = DEFAULT_MEMORY_COST,
    parallelism: int = DEFAULT_PARALLELISM,
    key_len: int = KEY_SIZE,
) -> bytes:
    """
    Derive a master key from a passphrase using Argon2id.
    Returns raw derived key bytes.
    """
    if isinstance(passphrase, str):
        passphrase = passphrase.encode("utf-8")

    return hash_secret_raw(
        secret=passphrase,
        salt=salt,
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=key_len,
        type=Type.ID,
    )

