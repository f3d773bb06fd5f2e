"""Encrypted XML envelope encoding and decoding."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Union

from .types import InvalidEnvelopeError


@dataclass(frozen=True)
class EncryptedEnvelope:
    """Encrypted callback envelope."""
    encrypt: str
    msg_signature: str = ""
    timestamp: str = ""
    nonce: str = ""
    to_user_name: str = ""


def encode_envelope(envelope: EncryptedEnvelope) -> str:
    """
    Encode an outbound encrypted envelope.

    Format:
        <xml>
          <Encrypt><![CDATA[...]]></Encrypt>
          <MsgSignature><![CDATA[...]]></MsgSignature>
          <TimeStamp>...</TimeStamp>
          <Nonce><![CDATA[...]]></Nonce>
        </xml>

    Args:
        envelope: EncryptedEnvelope to encode

    Returns:
        XML string
    """
    return (
        "<xml>"
        f"<Encrypt><![CDATA[{envelope.encrypt}]]></Encrypt>"
        f"<MsgSignature><![CDATA[{envelope.msg_signature}]]></MsgSignature>"
        f"<TimeStamp>{envelope.timestamp}</TimeStamp>"
        f"<Nonce><![CDATA[{envelope.nonce}]]></Nonce>"
        "</xml>"
    )


def decode_envelope(data: Union[bytes, str]) -> EncryptedEnvelope:
    """
    Decode an inbound encrypted envelope.

    Inbound bodies carry only <ToUserName> and <Encrypt>; the signature,
    timestamp and nonce travel as query parameters. Outbound-style
    envelopes are accepted too.

    Args:
        data: Request body

    Returns:
        Decoded EncryptedEnvelope

    Raises:
        InvalidEnvelopeError: If the body is not XML or has no <Encrypt>
    """
    if not data:
        raise InvalidEnvelopeError("Empty envelope", field="Encrypt")
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise InvalidEnvelopeError(f"Invalid envelope XML: {e}", field="xml") from e

    encrypt = (root.findtext("Encrypt") or "").strip()
    if not encrypt:
        raise InvalidEnvelopeError("Missing Encrypt field", field="Encrypt")

    return EncryptedEnvelope(
        encrypt=encrypt,
        msg_signature=(root.findtext("MsgSignature") or "").strip(),
        timestamp=(root.findtext("TimeStamp") or "").strip(),
        nonce=(root.findtext("Nonce") or "").strip(),
        to_user_name=(root.findtext("ToUserName") or "").strip(),
    )


def is_encrypted_envelope(data: Union[bytes, str]) -> bool:
    """Check whether a body looks like an encrypted envelope."""
    try:
        decode_envelope(data)
    except InvalidEnvelopeError:
        return False
    return True
