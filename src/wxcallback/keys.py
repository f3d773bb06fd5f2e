"""Key material and random value helpers for wxcallback."""

import base64
import binascii
import hashlib
import secrets
import string

from .types import ENCODING_AES_KEY_LENGTH, InvalidKeyError

RANDOM_STRING_ALPHABET = string.ascii_letters + string.digits


def decode_encoding_aes_key(encoding_aes_key: str) -> bytes:
    """
    Decode the platform's EncodingAESKey into a 32-byte AES key.

    The platform hands out the key as 43 base64 characters with the trailing
    "=" stripped.

    Args:
        encoding_aes_key: 43-character EncodingAESKey

    Returns:
        32-byte AES key

    Raises:
        InvalidKeyError: If the key is not a valid EncodingAESKey
    """
    if len(encoding_aes_key) != ENCODING_AES_KEY_LENGTH:
        raise InvalidKeyError(
            f"EncodingAESKey must be {ENCODING_AES_KEY_LENGTH} characters, "
            f"got {len(encoding_aes_key)}",
            field="encoding_aes_key",
        )
    try:
        key = base64.b64decode(encoding_aes_key + "=", validate=True)
    except binascii.Error as e:
        raise InvalidKeyError("EncodingAESKey is not valid base64", field="encoding_aes_key") from e
    if len(key) != 32:
        raise InvalidKeyError(
            f"EncodingAESKey must decode to 32 bytes, got {len(key)}",
            field="encoding_aes_key",
        )
    return key


def refund_key_from_api_key(api_key: str) -> bytes:
    """Derive the refund-notification AES key: lowercase hex MD5 of the merchant API key."""
    return hashlib.md5(api_key.encode("utf-8")).hexdigest().lower().encode("ascii")


def random_string(length: int = 16) -> str:
    """
    Generate a random alphanumeric string.

    Used for protocol-level nonces on outbound replies. Draws from `secrets`,
    so it is also safe where unpredictability matters.
    """
    return "".join(secrets.choice(RANDOM_STRING_ALPHABET) for _ in range(length))
