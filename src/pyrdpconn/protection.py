"""Protection of secret byte fields.

The serializer only sees raw bytes.  When a :class:`Protector` is passed to
it, fields flagged ``protected`` are protected on the way out and recovered
on the way in.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

import keyring
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from keyring.errors import KeyringError

from .errors import ProtectionError

logger = logging.getLogger("pyrdpconn.protection")

MASTER_PWD_ENV = "PYRDPCONN_MASTER_PWD"
KEYRING_SERVICE = "pyrdpconn"
KEYRING_USER = "master"

_SALT_LEN = 16
_NONCE_LEN = 12


class Protector(Protocol):
    """Protocol for secret protectors."""

    def protect(self, data: bytes) -> bytes:
        """Return an opaque protected form of *data*."""

    def unprotect(self, data: bytes) -> bytes:
        """Recover the bytes passed to :meth:`protect`."""


class AesGcmProtector:
    """AES-GCM protector keyed by a scrypt-derived master password."""

    def __init__(self, master_key: bytes | str | None = None) -> None:
        self._password = self._discover_password(master_key)

    @staticmethod
    def _discover_password(master_key: bytes | str | None) -> bytes | None:
        if master_key is not None:
            return master_key if isinstance(master_key, bytes) else master_key.encode()
        if os.environ.get(MASTER_PWD_ENV):
            return os.environ[MASTER_PWD_ENV].encode()
        try:
            val = keyring.get_password(KEYRING_SERVICE, KEYRING_USER)
        except KeyringError as exc:
            logger.debug("keyring lookup failed: %s", exc)
            return None
        return val.encode() if val else None

    @property
    def unlocked(self) -> bool:
        return self._password is not None

    def _derive_key(self, salt: bytes) -> bytes:
        if self._password is None:
            raise ProtectionError("No master password available")
        kdf = Scrypt(salt=salt, length=32, n=2 ** 15, r=8, p=1)
        return kdf.derive(self._password)

    def protect(self, data: bytes) -> bytes:
        salt = os.urandom(_SALT_LEN)
        nonce = os.urandom(_NONCE_LEN)
        cipher = AESGCM(self._derive_key(salt)).encrypt(nonce, bytes(data), None)
        return salt + nonce + cipher

    def unprotect(self, data: bytes) -> bytes:
        if len(data) < _SALT_LEN + _NONCE_LEN:
            raise ProtectionError("protected data is truncated")
        salt = data[:_SALT_LEN]
        nonce = data[_SALT_LEN : _SALT_LEN + _NONCE_LEN]
        cipher = data[_SALT_LEN + _NONCE_LEN :]
        try:
            return AESGCM(self._derive_key(salt)).decrypt(nonce, cipher, None)
        except InvalidTag as exc:
            logger.error("failed to unprotect value: wrong key or corrupt data")
            raise ProtectionError("failed to unprotect value") from exc


def store_master_password(password: str) -> None:
    """Store *password* in the system keyring for later discovery."""

    try:
        keyring.set_password(KEYRING_SERVICE, KEYRING_USER, password)
    except KeyringError as exc:
        raise ProtectionError(f"keyring unavailable: {exc}") from exc


def encode_password(text: str) -> bytes:
    """Return *text* in the UTF-16 LE form stored by the Windows client."""

    return text.encode("utf-16-le")


def decode_password(data: bytes) -> str:
    try:
        return bytes(data).decode("utf-16-le")
    except UnicodeDecodeError as exc:
        raise ProtectionError(f"password is not UTF-16 text: {exc}") from exc


__all__ = [
    "Protector",
    "AesGcmProtector",
    "store_master_password",
    "encode_password",
    "decode_password",
    "MASTER_PWD_ENV",
]
