"""Tests for key helpers."""

import hashlib

import pytest

from wxcallback.keys import (
    decode_encoding_aes_key,
    refund_key_from_api_key,
    random_string,
    RANDOM_STRING_ALPHABET,
)
from wxcallback.types import InvalidKeyError
from .test_vectors import ENCODING_AES_KEY


class TestEncodingAESKey:
    """Test EncodingAESKey decoding."""

    def test_decodes_to_32_bytes(self):
        """A 43-character key decodes to a 32-byte AES key."""
        assert len(decode_encoding_aes_key(ENCODING_AES_KEY)) == 32

    @pytest.mark.parametrize("value", ["", "abc", ENCODING_AES_KEY + "=", ENCODING_AES_KEY[:-1]])
    def test_wrong_length(self, value: str):
        """Keys that are not 43 characters are rejected."""
        with pytest.raises(InvalidKeyError):
            decode_encoding_aes_key(value)

    def test_invalid_characters(self):
        """Non-base64 characters are rejected."""
        with pytest.raises(InvalidKeyError) as exc_info:
            decode_encoding_aes_key("!" * 43)
        assert exc_info.value.field == "encoding_aes_key"


class TestRefundKey:
    """Test refund key derivation."""

    def test_md5_hex_of_api_key(self):
        """The key is the lowercase hex MD5 of the API key."""
        key = refund_key_from_api_key("apikey")
        assert key == hashlib.md5(b"apikey").hexdigest().encode()
        assert len(key) == 32


class TestRandomString:
    """Test random string generation."""

    @pytest.mark.parametrize("length", [0, 8, 16, 32, 64])
    def test_length(self, length: int):
        """Output has the requested length."""
        assert len(random_string(length)) == length

    def test_alphabet(self):
        """Output is alphanumeric."""
        assert all(c in RANDOM_STRING_ALPHABET for c in random_string(200))

    def test_values_differ(self):
        """Two calls produce different values."""
        assert random_string(16) != random_string(16)
