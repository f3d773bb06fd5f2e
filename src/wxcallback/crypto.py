"""Encryption and decryption for callback messages."""

import base64
import binascii
import logging
import os
from typing import Callable, Union

from . import padding
from .cipher import CBCCipher, ECBCipher
from .keys import refund_key_from_api_key
from .types import (
    FRAME_HEADER_SIZE,
    LENGTH_PREFIX_SIZE,
    NONCE_SIZE,
    AlignmentError,
    DecodeError,
    FramingError,
    SenderMismatchError,
)

logger = logging.getLogger(__name__)


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def _b64decode(text: Union[str, bytes]) -> bytes:
    try:
        return base64.b64decode(_to_bytes(text), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError("Ciphertext is not valid base64", field="ciphertext") from e


class PrpCrypto:
    """
    Message codec for encrypted callbacks.

    Plaintext frame before padding:
        [0..15]   random nonce (16 bytes)
        [16..19]  payload length (4 bytes, big-endian uint32)
        [20..]    payload (UTF-8 XML)
        [..]      app id (remaining bytes)

    The frame is padded to 32 bytes, encrypted with AES-CBC (IV = key[:16])
    and base64 encoded.
    """

    def __init__(
        self,
        key: bytes,
        random_bytes: Callable[[int], bytes] = os.urandom,
    ) -> None:
        """
        Initialize the codec.

        Args:
            key: 32-byte AES key
            random_bytes: Source of nonce bytes; must be cryptographically secure
        """
        self._cipher = CBCCipher(key)
        self._random_bytes = random_bytes

    def encrypt(self, text: Union[str, bytes], app_id: str) -> str:
        """
        Encrypt a payload for the given app id.

        Args:
            text: Plaintext XML
            app_id: Application or corp id appended to the frame

        Returns:
            Base64 ciphertext
        """
        payload = _to_bytes(text)
        nonce = self._random_bytes(NONCE_SIZE)
        if len(nonce) != NONCE_SIZE:
            raise ValueError(f"Random source returned {len(nonce)} bytes, expected {NONCE_SIZE}")

        frame = (
            nonce
            + len(payload).to_bytes(LENGTH_PREFIX_SIZE, byteorder="big")
            + payload
            + app_id.encode("utf-8")
        )
        ciphertext = self._cipher.encrypt(padding.encode(frame))
        return base64.b64encode(ciphertext).decode("ascii")

    def decrypt(self, text: Union[str, bytes], app_id: str) -> str:
        """
        Decrypt a ciphertext and check it was framed for app_id.

        Args:
            text: Base64 ciphertext
            app_id: Expected application or corp id

        Returns:
            Plaintext XML

        Raises:
            DecodeError: If the ciphertext is not valid base64 or not block-aligned
            FramingError: If the decrypted frame is malformed
            SenderMismatchError: If the frame was built for another app id
        """
        ciphertext = _b64decode(text)
        try:
            plaintext = self._cipher.decrypt(ciphertext)
        except AlignmentError as e:
            raise DecodeError(str(e), field="ciphertext") from e

        plaintext = padding.decode(plaintext)
        if len(plaintext) < FRAME_HEADER_SIZE:
            raise FramingError(
                f"Plaintext too short: {len(plaintext)} bytes (minimum {FRAME_HEADER_SIZE})",
                field="length",
            )

        content = plaintext[NONCE_SIZE:]
        xml_length = int.from_bytes(content[:LENGTH_PREFIX_SIZE], byteorder="big")
        if len(content) < LENGTH_PREFIX_SIZE + xml_length:
            raise FramingError(
                f"Declared length {xml_length} exceeds remaining {len(content) - LENGTH_PREFIX_SIZE} bytes",
                field="length",
            )

        xml_content = content[LENGTH_PREFIX_SIZE : LENGTH_PREFIX_SIZE + xml_length]
        from_id = content[LENGTH_PREFIX_SIZE + xml_length :]

        try:
            from_id_text = from_id.decode("utf-8")
        except UnicodeDecodeError:
            from_id_text = from_id.decode("latin-1")
        if from_id_text != app_id:
            logger.warning("Rejected message framed for another app id")
            raise SenderMismatchError(expected=app_id)

        try:
            return xml_content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FramingError("Payload is not valid UTF-8", field="payload") from e


class RefundCrypto:
    """
    Codec for refund notifications.

    No nonce or length framing: the body is padded to 32 bytes and
    encrypted with AES-ECB.
    """

    def __init__(self, key: bytes) -> None:
        self._cipher = ECBCipher(key)

    @classmethod
    def from_api_key(cls, api_key: str) -> "RefundCrypto":
        """Create a codec keyed by the merchant API key."""
        return cls(refund_key_from_api_key(api_key))

    def encrypt(self, text: Union[str, bytes]) -> str:
        """Encrypt a body and return base64 ciphertext."""
        ciphertext = self._cipher.encrypt(padding.encode(_to_bytes(text)))
        return base64.b64encode(ciphertext).decode("ascii")

    def decrypt(self, text: Union[str, bytes]) -> str:
        """
        Decrypt base64 ciphertext.

        Raises:
            DecodeError: If the ciphertext is malformed
        """
        ciphertext = _b64decode(text)
        try:
            plaintext = self._cipher.decrypt(ciphertext)
        except AlignmentError as e:
            raise DecodeError(str(e), field="ciphertext") from e
        try:
            return padding.decode(plaintext).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("Decrypted body is not valid UTF-8", field="ciphertext") from e
