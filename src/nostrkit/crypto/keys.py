"""bech32 key encodings (nsec/npub) and secp256k1 key helpers."""
import re
from typing import Tuple

import bech32
from coincurve import PrivateKey

from ..domain.errors import InvalidKeyError, KeyFormatError

SECRET_KEY_PREFIX = "nsec"
PUBLIC_KEY_PREFIX = "npub"

_HEX_KEY_RE = re.compile(r"^[0-9a-fA-F]{64}$")


def decode_bech32(text: str, expected_prefix: str) -> str:
    """
    decode a bech32 string into lowercase hex.

    args:
        text: bech32 text, e.g. "nsec1..."
        expected_prefix: required human-readable part

    raises:
        KeyFormatError: if the checksum is invalid or the prefix does not match
    """
    hrp, data = bech32.bech32_decode(text.strip())
    if hrp is None or data is None:
        raise KeyFormatError(f"Invalid {expected_prefix} format: bad checksum or characters")

    if hrp != expected_prefix:
        raise KeyFormatError(f"Invalid prefix: expected {expected_prefix}, got {hrp}")

    converted = bech32.convertbits(data, 5, 8, False)
    if converted is None:
        raise KeyFormatError(f"Invalid {expected_prefix} payload: failed to convert bits")

    return bytes(converted).hex()


def decode_bech32_secret_key(text: str) -> str:
    """decode an nsec string into hex."""
    return decode_bech32(text, SECRET_KEY_PREFIX)


def encode_bech32(prefix: str, hex_input: str) -> str:
    """encode hex bytes as bech32 under the given prefix."""
    try:
        raw = bytes.fromhex(hex_input.strip())
    except ValueError as e:
        raise KeyFormatError(f"Invalid hex input: {e}") from e

    data = bech32.convertbits(raw, 8, 5, True)
    return bech32.bech32_encode(prefix, data)


def hex_to_nsec(secret_key_hex: str) -> str:
    return encode_bech32(SECRET_KEY_PREFIX, secret_key_hex)


def hex_to_npub(public_key_hex: str) -> str:
    return encode_bech32(PUBLIC_KEY_PREFIX, public_key_hex)


def parse_secret_key(text: str) -> str:
    """
    accept a secret key as nsec or 64-char hex and return lowercase hex.

    raises:
        KeyFormatError: if the input is neither form
    """
    candidate = text.strip()
    if candidate.lower().startswith(SECRET_KEY_PREFIX + "1"):
        return decode_bech32_secret_key(candidate)
    if _HEX_KEY_RE.match(candidate):
        return candidate.lower()
    raise KeyFormatError("Secret key must be in nsec or 64-character hex format")


def derive_public_key(secret_key_hex: str) -> str:
    """
    derive the x-only public key (hex) for a secret key.

    raises:
        InvalidKeyError: if the secret is not 32 bytes or out of curve range
    """
    try:
        secret = bytes.fromhex(secret_key_hex.strip())
    except ValueError as e:
        raise InvalidKeyError("Invalid private key provided") from e

    if len(secret) != 32:
        raise InvalidKeyError("Invalid private key provided: expected 32 bytes")

    try:
        private_key = PrivateKey(secret)
    except ValueError as e:
        raise InvalidKeyError("Invalid private key provided") from e

    # drop the parity byte of the compressed point
    return private_key.public_key.format(compressed=True)[1:].hex()


def generate_keypair() -> Tuple[str, str]:
    """generate a new (secret hex, public hex) pair."""
    private_key = PrivateKey()
    secret_hex = private_key.secret.hex()
    return secret_hex, derive_public_key(secret_hex)
