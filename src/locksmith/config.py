"""Environment-driven settings for building a :class:`Cipher`.

The master key is looked up in this order, first match wins:

- ``LOCKSMITH_MASTER_KEY``: base64 of the raw 32-byte master key
- ``LOCKSMITH_MASTER_PASSWORD`` with ``LOCKSMITH_MASTER_SALT`` (hex): Argon2id
  derivation via :mod:`locksmith.security.kdf`
- ``LOCKSMITH_KEYRING_SERVICE`` / ``LOCKSMITH_KEYRING_ACCOUNT``: a key saved
  with :func:`locksmith.security.keystore.save_key`

``LOCKSMITH_KEY_FILE`` overrides the default key file location.
"""

from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from locksmith.core.exceptions import ConfigurationError
from locksmith.security.aes import KEY_SIZE
from locksmith.security.cipher import Cipher
from locksmith.security.kdf import derive_master_key
from locksmith.security.keystore import load_key


ENV_PREFIX = "LOCKSMITH_"


@dataclass
class Settings:
    """Where the master key and key file come from."""

    master_key_b64: Optional[str] = None
    master_password: Optional[str] = None
    master_salt_hex: Optional[str] = None
    keyring_service: Optional[str] = None
    keyring_account: Optional[str] = None
    key_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            # empty values count as unset
            return env.get(ENV_PREFIX + name) or None

        return cls(
            master_key_b64=get("MASTER_KEY"),
            master_password=get("MASTER_PASSWORD"),
            master_salt_hex=get("MASTER_SALT"),
            keyring_service=get("KEYRING_SERVICE"),
            keyring_account=get("KEYRING_ACCOUNT"),
            key_file=get("KEY_FILE"),
        )

    def resolve_master_key(self) -> bytes:
        """Return the raw master key from the first configured source."""
        if self.master_key_b64:
            try:
                key = base64.b64decode(self.master_key_b64, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ConfigurationError("LOCKSMITH_MASTER_KEY is not valid base64") from e
            if len(key) != KEY_SIZE:
                raise ConfigurationError(f"LOCKSMITH_MASTER_KEY must decode to {KEY_SIZE} bytes")
            return key

        if self.master_password:
            if not self.master_salt_hex:
                raise ConfigurationError("LOCKSMITH_MASTER_PASSWORD requires LOCKSMITH_MASTER_SALT")
            try:
                salt = bytes.fromhex(self.master_salt_hex)
            except ValueError as e:
                raise ConfigurationError("LOCKSMITH_MASTER_SALT is not valid hex") from e
            return derive_master_key(self.master_password, salt)

        if self.keyring_service and self.keyring_account:
            key = load_key(self.keyring_service, self.keyring_account)
            if key is None:
                raise ConfigurationError(
                    f"no master key in keyring for {self.keyring_service}/{self.keyring_account}"
                )
            if len(key) != KEY_SIZE:
                raise ConfigurationError(
                    f"keyring entry {self.keyring_service}/{self.keyring_account} is not a {KEY_SIZE}-byte key"
                )
            return key

        raise ConfigurationError("no master key configured")


def build_cipher(settings: Optional[Settings] = None) -> Cipher:
    """Create a :class:`Cipher` from ``settings`` (defaults to the environment)."""
    if settings is None:
        settings = Settings.from_env()
    return Cipher(settings.resolve_master_key(), settings.key_file)
