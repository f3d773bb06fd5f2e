"""
wxcallback - Callback message security for WeChat-style webhooks

Signature checks, AES message framing (PrpCrypto), XML message parsing and
reply encoding.
"""

from .cipher import BlockCipher, CBCCipher, ECBCipher
from .padding import encode as pad, decode as unpad, decode_strict as unpad_strict
from .signature import (
    Signer,
    signature,
    check_signature,
    msg_signature,
    check_msg_signature,
    check_wxa_signature,
)
from .keys import decode_encoding_aes_key, refund_key_from_api_key, random_string
from .crypto import PrpCrypto, RefundCrypto
from .envelope import (
    EncryptedEnvelope,
    encode_envelope,
    decode_envelope,
    is_encrypted_envelope,
)
from .messages import (
    RawEnvelope,
    MessageHeader,
    Message,
    TextMessage,
    ImageMessage,
    VoiceMessage,
    VideoMessage,
    ShortVideoMessage,
    LocationMessage,
    LinkMessage,
    MiniProgramPageMessage,
    UnknownMessage,
)
from .events import (
    Event,
    SubscribeEvent,
    UnsubscribeEvent,
    ScanEvent,
    LocationEvent,
    ClickEvent,
    ViewEvent,
    MassSendJobFinishEvent,
    TemplateSendJobFinishEvent,
    UnknownEvent,
)
from .parser import parse_message, parse_raw_envelope, MessageParser
from .replies import (
    Reply,
    Article,
    TextReply,
    ImageReply,
    VoiceReply,
    VideoReply,
    MusicReply,
    NewsReply,
    render_reply,
    create_reply,
)
from .client import CallbackConfig, WeChatCallback
from .types import (
    PADDING_BLOCK_SIZE,
    NONCE_SIZE,
    WeChatCallbackError,
    InvalidSignatureError,
    InvalidKeyError,
    AlignmentError,
    PaddingError,
    DecodeError,
    FramingError,
    SenderMismatchError,
    ParseError,
    EmptyPayloadError,
    UnsupportedReplyError,
    InvalidEnvelopeError,
)

__version__ = "0.1.0"

__all__ = [
    # Cipher
    "BlockCipher",
    "CBCCipher",
    "ECBCipher",
    # Padding
    "pad",
    "unpad",
    "unpad_strict",
    # Signature
    "Signer",
    "signature",
    "check_signature",
    "msg_signature",
    "check_msg_signature",
    "check_wxa_signature",
    # Keys
    "decode_encoding_aes_key",
    "refund_key_from_api_key",
    "random_string",
    # Crypto
    "PrpCrypto",
    "RefundCrypto",
    # Envelope
    "EncryptedEnvelope",
    "encode_envelope",
    "decode_envelope",
    "is_encrypted_envelope",
    # Messages
    "RawEnvelope",
    "MessageHeader",
    "Message",
    "TextMessage",
    "ImageMessage",
    "VoiceMessage",
    "VideoMessage",
    "ShortVideoMessage",
    "LocationMessage",
    "LinkMessage",
    "MiniProgramPageMessage",
    "UnknownMessage",
    # Events
    "Event",
    "SubscribeEvent",
    "UnsubscribeEvent",
    "ScanEvent",
    "LocationEvent",
    "ClickEvent",
    "ViewEvent",
    "MassSendJobFinishEvent",
    "TemplateSendJobFinishEvent",
    "UnknownEvent",
    # Parser
    "parse_message",
    "parse_raw_envelope",
    "MessageParser",
    # Replies
    "Reply",
    "Article",
    "TextReply",
    "ImageReply",
    "VoiceReply",
    "VideoReply",
    "MusicReply",
    "NewsReply",
    "render_reply",
    "create_reply",
    # Client
    "CallbackConfig",
    "WeChatCallback",
    # Constants
    "PADDING_BLOCK_SIZE",
    "NONCE_SIZE",
    # Errors
    "WeChatCallbackError",
    "InvalidSignatureError",
    "InvalidKeyError",
    "AlignmentError",
    "PaddingError",
    "DecodeError",
    "FramingError",
    "SenderMismatchError",
    "ParseError",
    "EmptyPayloadError",
    "UnsupportedReplyError",
    "InvalidEnvelopeError",
]
