"""password-based encryption of secret keys (Argon2id + AES-256-GCM)."""
import base64
import binascii
import os
from typing import Tuple

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..domain.errors import DecryptionError

# argon2id work factor: one pass, 64 MiB, 4 lanes
ARGON2_TIME_COST = 1
ARGON2_MEMORY_COST = 64 * 1024  # KiB
ARGON2_PARALLELISM = 4
KEY_LENGTH = 32

SALT_LENGTH = 16
NONCE_LENGTH = 12


def derive_key(password: str, salt: bytes) -> bytes:
    """derive a 32-byte symmetric key from a password and salt."""
    return hash_secret_raw(
        secret=password.encode("utf-8"),
        salt=salt,
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST,
        parallelism=ARGON2_PARALLELISM,
        hash_len=KEY_LENGTH,
        type=Type.ID,
    )


def encrypt(plaintext: bytes, password: str) -> Tuple[str, bytes]:
    """
    encrypt a payload under a password.

    a fresh random salt and nonce are drawn on every call. the nonce is
    prepended to the ciphertext before base64 encoding.

    args:
        plaintext: bytes to protect
        password: user password

    returns:
        (base64 ciphertext, salt)
    """
    salt = os.urandom(SALT_LENGTH)
    key = derive_key(password, salt)
    nonce = os.urandom(NONCE_LENGTH)
    sealed = AESGCM(key).encrypt(nonce, plaintext, None)
    return base64.b64encode(nonce + sealed).decode("ascii"), salt


def decrypt(ciphertext_b64: str, password: str, salt: bytes) -> bytes:
    """
    decrypt a payload produced by encrypt().

    raises:
        DecryptionError: on wrong password, tampering or malformed input
    """
    try:
        raw = base64.b64decode(ciphertext_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptionError("Encrypted key is not valid base64") from e

    if len(raw) < NONCE_LENGTH:
        raise DecryptionError("Encrypted key is too short")

    nonce, sealed = raw[:NONCE_LENGTH], raw[NONCE_LENGTH:]
    try:
        key = derive_key(password, salt)
    except HashingError as e:
        raise DecryptionError("Stored salt cannot be used for key derivation") from e

    try:
        return AESGCM(key).decrypt(nonce, sealed, None)
    except InvalidTag as e:
        raise DecryptionError(
            "Failed to decrypt secret key (wrong password or corrupted data)"
        ) from e
