"""Passphrase-based at-rest encryption for rendered indexes."""

from __future__ import annotations

import base64
import binascii
import os
from pathlib import Path

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

ENCRYPTED_PREFIX = "CODEINDEX_ENCRYPTED_V1:"
SALT_SIZE = 16
NONCE_SIZE = 12
KDF_ITERATIONS = 200_000


class DecryptionError(ValueError):
    """Raised when an encrypted index cannot be decrypted."""


def _derive_key(passphrase: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=KDF_ITERATIONS)
    return kdf.derive(passphrase.encode("utf-8"))


def encrypt(plaintext: bytes | str, passphrase: str) -> str:
    """Return ``ENCRYPTED_PREFIX`` followed by base64(salt | nonce | ciphertext)."""
    if not passphrase:
        raise ValueError("Encryption requires a non-empty passphrase")
    data = plaintext.encode("utf-8") if isinstance(plaintext, str) else plaintext
    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = AESGCM(_derive_key(passphrase, salt)).encrypt(nonce, data, None)
    return ENCRYPTED_PREFIX + base64.b64encode(salt + nonce + ciphertext).decode("ascii")


def decrypt(data: bytes | str, passphrase: str) -> bytes:
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    text = text.strip()
    if not text.startswith(ENCRYPTED_PREFIX):
        raise DecryptionError("Invalid encrypted data: missing prefix")
    try:
        raw = base64.b64decode(text[len(ENCRYPTED_PREFIX) :], validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecryptionError(f"Invalid encrypted data: {exc}") from exc
    # GCM appends a 16-byte tag, so anything shorter cannot be valid.
    if len(raw) < SALT_SIZE + NONCE_SIZE + 16:
        raise DecryptionError("Invalid encrypted data: too short")

    salt = raw[:SALT_SIZE]
    nonce = raw[SALT_SIZE : SALT_SIZE + NONCE_SIZE]
    ciphertext = raw[SALT_SIZE + NONCE_SIZE :]
    try:
        return AESGCM(_derive_key(passphrase, salt)).decrypt(nonce, ciphertext, None)
    except InvalidTag as exc:
        raise DecryptionError("Failed to decrypt (wrong passphrase or corrupted data)") from exc


def is_encrypted(data: bytes | str) -> bool:
    prefix = ENCRYPTED_PREFIX.encode("ascii") if isinstance(data, bytes) else ENCRYPTED_PREFIX
    return data.startswith(prefix)  # type: ignore[arg-type]


def decrypt_file(path: Path, passphrase: str) -> bytes:
    return decrypt(Path(path).read_bytes(), passphrase)


__all__ = [
    "DecryptionError",
    "ENCRYPTED_PREFIX",
    "decrypt",
    "decrypt_file",
    "encrypt",
    "is_encrypted",
]
