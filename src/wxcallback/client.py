"""
Callback handling for WeChat-style webhooks.

WeChatCallback ties signature checks, the message codec, the parser and
the reply encoder together for one configured application.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .crypto import PrpCrypto
from .envelope import EncryptedEnvelope, decode_envelope, encode_envelope
from .events import Event
from .keys import decode_encoding_aes_key, random_string
from .messages import Message
from .parser import parse_message
from .replies import Reply, render_reply
from .signature import check_msg_signature, check_signature, msg_signature
from .types import (
    ENCODING_AES_KEY_LENGTH,
    EmptyPayloadError,
    InvalidKeyError,
    InvalidSignatureError,
)

logger = logging.getLogger(__name__)


@dataclass
class CallbackConfig:
    """Configuration for a callback endpoint."""

    token: str
    """Token configured on the platform, used for signatures."""

    app_id: str
    """App id (or corp id) the encrypted frames are addressed to."""

    encoding_aes_key: Optional[str] = field(default=None, repr=False)
    """43-character EncodingAESKey; None for plain-text mode."""

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("token must not be empty")
        if not self.app_id:
            raise ValueError("app_id must not be empty")
        if self.encoding_aes_key is not None and len(self.encoding_aes_key) != ENCODING_AES_KEY_LENGTH:
            raise InvalidKeyError(
                f"EncodingAESKey must be {ENCODING_AES_KEY_LENGTH} characters",
                field="encoding_aes_key",
            )

    @property
    def encrypted(self) -> bool:
        """Whether messages are exchanged in encrypted mode."""
        return self.encoding_aes_key is not None


class WeChatCallback:
    """
    Verifies, decrypts and parses inbound callbacks, and encodes replies.

    Example usage:
        ```python
        callback = WeChatCallback(CallbackConfig(
            token="mytoken",
            app_id="wx1234567890abcdef",
            encoding_aes_key="abcdefghijklmnopqrstuvwxyz0123456789ABCDEFG",
        ))

        message = callback.verify_and_parse(
            body, signature, timestamp, nonce, msg_signature=msg_signature,
        )
        reply = create_reply(message, content="hello")
        return callback.encode_and_maybe_encrypt(reply)
        ```
    """

    def __init__(
        self,
        config: CallbackConfig,
        random_bytes: Optional[Callable[[int], bytes]] = None,
    ) -> None:
        """
        Initialize the callback handler.

        Args:
            config: Endpoint configuration.
            random_bytes: Optional nonce source for the message codec (default: os.urandom).
        """
        self.config = config
        self._crypto: Optional[PrpCrypto] = None
        if config.encrypted:
            key = decode_encoding_aes_key(config.encoding_aes_key)
            if random_bytes is None:
                self._crypto = PrpCrypto(key)
            else:
                self._crypto = PrpCrypto(key, random_bytes=random_bytes)

    @property
    def encrypted(self) -> bool:
        return self._crypto is not None

    def verify_and_parse(
        self,
        raw_body: Optional[Union[bytes, str]],
        signature: str,
        timestamp: str,
        nonce: str,
        msg_signature: Optional[str] = None,
    ) -> Union[Message, Event]:
        """
        Authenticate an inbound callback and parse its message.

        In plain mode `signature` is checked over (token, timestamp, nonce).
        In encrypted mode `msg_signature` (falling back to `signature`) is
        checked over (token, timestamp, nonce, ciphertext) before the body
        is decrypted. The body may be the encrypted XML envelope or the bare
        base64 ciphertext.

        Raises:
            InvalidSignatureError: If the signature does not match
            InvalidEnvelopeError: If an encrypted body has no <Encrypt>
            DecodeError, FramingError, SenderMismatchError: If decryption fails
            EmptyPayloadError: If raw_body is None or empty
            ParseError: If the message XML is invalid
        """
        if not raw_body:
            raise EmptyPayloadError()

        if self._crypto is None:
            try:
                check_signature(self.config.token, signature, timestamp, nonce)
            except InvalidSignatureError:
                logger.warning("Rejected callback with invalid signature")
                raise
            return parse_message(raw_body)

        encrypted = self._extract_ciphertext(raw_body)
        try:
            check_msg_signature(
                self.config.token,
                msg_signature if msg_signature is not None else signature,
                timestamp,
                nonce,
                encrypted,
            )
        except InvalidSignatureError:
            logger.warning("Rejected encrypted callback with invalid msg_signature")
            raise

        xml = self._crypto.decrypt(encrypted, self.config.app_id)
        return parse_message(xml)

    def encode_and_maybe_encrypt(
        self,
        reply: Optional[Reply],
        timestamp: Optional[str] = None,
        nonce: Optional[str] = None,
    ) -> bytes:
        """
        Encode a reply for the callback response body.

        Args:
            reply: Reply to send, or None for an empty response.
            timestamp: Envelope timestamp (default: now). Encrypted mode only.
            nonce: Envelope nonce (default: random). Encrypted mode only.

        Returns:
            Response body bytes

        Raises:
            UnsupportedReplyError: If reply is not a known reply variant
        """
        if reply is None:
            return b""

        xml = render_reply(reply)
        if self._crypto is None:
            return xml.encode("utf-8")

        timestamp = timestamp or str(int(time.time()))
        nonce = nonce or random_string(10)
        encrypted = self._crypto.encrypt(xml, self.config.app_id)
        envelope = EncryptedEnvelope(
            encrypt=encrypted,
            msg_signature=msg_signature(self.config.token, timestamp, nonce, encrypted),
            timestamp=timestamp,
            nonce=nonce,
        )
        logger.debug("Encrypted %s reply", reply.type)
        return encode_envelope(envelope).encode("utf-8")

    def verify_url(self, signature: str, timestamp: str, nonce: str, echo_str: str) -> str:
        """
        Answer the server URL verification handshake.

        Plain mode returns echo_str once the signature checks out. Encrypted
        mode checks the signature over echo_str and returns its decryption.

        Raises:
            InvalidSignatureError: If the signature does not match
        """
        if self._crypto is None:
            check_signature(self.config.token, signature, timestamp, nonce)
            return echo_str

        check_msg_signature(self.config.token, signature, timestamp, nonce, echo_str)
        return self._crypto.decrypt(echo_str, self.config.app_id)

    @staticmethod
    def _extract_ciphertext(raw_body: Union[bytes, str]) -> str:
        text = raw_body.decode("utf-8", errors="replace") if isinstance(raw_body, bytes) else raw_body
        if text.lstrip().startswith("<"):
            return decode_envelope(text).encrypt
        text = text.strip()
        if not text:
            raise EmptyPayloadError()
        return text
