"""Type definitions for wxcallback."""

from typing import Optional


# Framing constants
NONCE_SIZE = 16
LENGTH_PREFIX_SIZE = 4
FRAME_HEADER_SIZE = NONCE_SIZE + LENGTH_PREFIX_SIZE

# Padding block size used by the wire protocol (not the AES block size)
PADDING_BLOCK_SIZE = 32

# Cipher constants
AES_BLOCK_SIZE = 16
IV_SIZE = 16
VALID_KEY_SIZES = (16, 24, 32)

# EncodingAESKey is 43 base64 characters without the trailing "="
ENCODING_AES_KEY_LENGTH = 43

# Platform error codes
INVALID_SIGNATURE_ERRCODE = -40001
INVALID_APPID_ERRCODE = -40005


# Exception types
class WeChatCallbackError(Exception):
    """Base exception for wxcallback errors."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidSignatureError(WeChatCallbackError):
    """Webhook or client data signature did not match."""

    errcode = INVALID_SIGNATURE_ERRCODE

    def __init__(self, field: str = "signature") -> None:
        super().__init__("Invalid signature", field=field)


class InvalidKeyError(WeChatCallbackError):
    """Key material has an invalid length or encoding."""
    pass


class AlignmentError(WeChatCallbackError):
    """Cipher input is not a multiple of the block size."""
    pass


class PaddingError(WeChatCallbackError):
    """Padding marker is out of range or inconsistent."""
    pass


class DecodeError(WeChatCallbackError):
    """Ciphertext could not be decoded."""
    pass


class FramingError(WeChatCallbackError):
    """Decrypted plaintext does not follow the frame layout."""
    pass


class SenderMismatchError(WeChatCallbackError):
    """Decrypted message is addressed to another application."""

    errcode = INVALID_APPID_ERRCODE

    def __init__(self, expected: str) -> None:
        # the decrypted sender id may hold payload bytes; keep it out of the error
        self.expected = expected
        super().__init__(f"Sender id mismatch: expected {expected!r}", field="app_id")


class ParseError(WeChatCallbackError):
    """Message XML could not be parsed."""

    def __init__(self, raw_data: bytes, reason: str) -> None:
        self.raw_data = raw_data
        super().__init__(f"Parse message error: {reason}", field="xml")


class EmptyPayloadError(WeChatCallbackError):
    """Message payload is empty."""

    def __init__(self) -> None:
        super().__init__("Empty message data", field="xml")


class UnsupportedReplyError(WeChatCallbackError):
    """Reply type is not supported by the encoder."""

    def __init__(self, reply_type: str) -> None:
        self.reply_type = reply_type
        super().__init__(f"Unsupported reply type: {reply_type}", field="reply_type")


class InvalidEnvelopeError(WeChatCallbackError):
    """Encrypted XML envelope is missing required fields."""
    pass
