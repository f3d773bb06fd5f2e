"""Tests for the encrypted XML envelope."""

import pytest

from wxcallback.envelope import (
    EncryptedEnvelope,
    encode_envelope,
    decode_envelope,
    is_encrypted_envelope,
)
from wxcallback.types import InvalidEnvelopeError


class TestEnvelope:
    """Test envelope encoding and decoding."""

    def test_round_trip(self):
        """An encoded envelope decodes to the same fields."""
        envelope = EncryptedEnvelope(encrypt="Y2lwaGVy", msg_signature="abc", timestamp="1409659589", nonce="n1")
        assert decode_envelope(encode_envelope(envelope)) == envelope

    def test_inbound_body(self):
        """Inbound bodies only carry ToUserName and Encrypt."""
        body = b"<xml><ToUserName><![CDATA[gh_account]]></ToUserName><Encrypt><![CDATA[Y2lwaGVy]]></Encrypt></xml>"
        envelope = decode_envelope(body)
        assert envelope.encrypt == "Y2lwaGVy"
        assert envelope.to_user_name == "gh_account"
        assert envelope.msg_signature == ""

    @pytest.mark.parametrize("body", [b"", b"not xml", b"<xml><ToUserName>x</ToUserName></xml>"])
    def test_invalid_bodies(self, body: bytes):
        """Bodies without an Encrypt element are rejected."""
        with pytest.raises(InvalidEnvelopeError):
            decode_envelope(body)
        assert not is_encrypted_envelope(body)

    def test_is_encrypted_envelope(self):
        assert is_encrypted_envelope("<xml><Encrypt>abc</Encrypt></xml>")
