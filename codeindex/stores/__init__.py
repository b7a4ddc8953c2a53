"""Persistence collaborators: output locations and at-rest encryption."""

from .encryption import ENCRYPTED_PREFIX, DecryptionError, decrypt, decrypt_file, encrypt, is_encrypted
from .output import ENCRYPTED_SUFFIX, OUTPUT_DIRNAME, OutputStore

__all__ = [
    "DecryptionError",
    "ENCRYPTED_PREFIX",
    "ENCRYPTED_SUFFIX",
    "OUTPUT_DIRNAME",
    "OutputStore",
    "decrypt",
    "decrypt_file",
    "encrypt",
    "is_encrypted",
]
