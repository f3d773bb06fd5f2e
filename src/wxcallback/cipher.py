"""
AES block ciphers for wxcallback.

Both ciphers operate on whole blocks only. Padding is the caller's job:
`padding.encode` before `encrypt`, `padding.decode` after `decrypt`.
"""

from abc import ABC, abstractmethod
from typing import Optional

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .types import (
    AES_BLOCK_SIZE,
    IV_SIZE,
    VALID_KEY_SIZES,
    AlignmentError,
    InvalidKeyError,
)


class BlockCipher(ABC):
    """Abstract base class for block-aligned encrypt/decrypt."""

    block_size = AES_BLOCK_SIZE

    def __init__(self, key: bytes) -> None:
        if len(key) not in VALID_KEY_SIZES:
            raise InvalidKeyError(
                f"AES key must be one of {VALID_KEY_SIZES} bytes, got {len(key)}",
                field="key",
            )
        self._cipher = Cipher(algorithms.AES(bytes(key)), self._mode(key))

    @abstractmethod
    def _mode(self, key: bytes) -> modes.Mode:
        """Return the cipher mode for this key."""
        pass

    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt block-aligned plaintext."""
        self._check_alignment(plaintext, "plaintext")
        encryptor = self._cipher.encryptor()
        return encryptor.update(plaintext) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt block-aligned ciphertext."""
        self._check_alignment(ciphertext, "ciphertext")
        decryptor = self._cipher.decryptor()
        return decryptor.update(ciphertext) + decryptor.finalize()

    def _check_alignment(self, data: bytes, field: str) -> None:
        if len(data) % self.block_size != 0:
            raise AlignmentError(
                f"Input length {len(data)} is not a multiple of {self.block_size}",
                field=field,
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class CBCCipher(BlockCipher):
    """
    AES in CBC mode.

    The message protocol uses the first 16 bytes of the key as IV, which is
    what happens when no IV is given.
    """

    def __init__(self, key: bytes, iv: Optional[bytes] = None) -> None:
        self._iv = iv
        super().__init__(key)

    def _mode(self, key: bytes) -> modes.Mode:
        iv = key[:IV_SIZE] if self._iv is None else self._iv
        if len(iv) != IV_SIZE:
            raise InvalidKeyError(
                f"IV must be {IV_SIZE} bytes, got {len(iv)}",
                field="iv",
            )
        return modes.CBC(bytes(iv))


class ECBCipher(BlockCipher):
    """AES in ECB mode, used by refund notifications."""

    def _mode(self, key: bytes) -> modes.Mode:
        return modes.ECB()
