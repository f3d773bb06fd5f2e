"""
Block padding for the message protocol.

Same scheme as PKCS#7, but over 32-byte blocks instead of the AES block
size. `decode` is lenient: an out-of-range marker leaves the input
untouched instead of raising, so corrupt plaintext surfaces later as a
framing error. `decode_strict` rejects it.
"""

from .types import PADDING_BLOCK_SIZE, PaddingError


def encode(data: bytes, block_size: int = PADDING_BLOCK_SIZE) -> bytes:
    """
    Pad data to a multiple of block_size.

    Always appends between 1 and block_size bytes, each equal to the pad
    length.

    Args:
        data: Bytes to pad
        block_size: Padding block size (default 32)

    Returns:
        Padded bytes
    """
    pad = block_size - len(data) % block_size
    if pad == 0:
        pad = block_size
    return data + bytes([pad]) * pad


def decode(data: bytes, block_size: int = PADDING_BLOCK_SIZE) -> bytes:
    """
    Strip padding added by `encode`.

    If the last byte is not a valid pad length, the data is returned as is.

    Args:
        data: Padded bytes
        block_size: Padding block size (default 32)

    Returns:
        Unpadded bytes
    """
    if not data:
        return data
    pad = data[-1]
    if pad < 1 or pad > block_size or pad > len(data):
        return data
    return data[:-pad]


def decode_strict(data: bytes, block_size: int = PADDING_BLOCK_SIZE) -> bytes:
    """
    Strip padding, raising on any malformed marker.

    Raises:
        PaddingError: If the data is empty, the marker is out of range or
            the padding bytes disagree with the marker
    """
    if not data:
        raise PaddingError("Cannot unpad empty data", field="padding")
    pad = data[-1]
    if pad < 1 or pad > block_size or pad > len(data):
        raise PaddingError(f"Invalid padding length: {pad}", field="padding")
    if data[-pad:] != bytes([pad]) * pad:
        raise PaddingError("Invalid padding bytes", field="padding")
    return data[:-pad]
