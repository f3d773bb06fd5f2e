"""
Signature checks for webhook callbacks and mini-program data.

Webhook signatures are SHA-1 over the lexicographically sorted tokens,
joined without a delimiter. Mini-program `rawData` signatures are SHA-1 over
`rawData + session_key`.
"""

import hashlib
import hmac
from typing import Iterable

from .types import InvalidSignatureError


class Signer:
    """Accumulates tokens and produces their sorted SHA-1 signature."""

    def __init__(self, delimiter: str = "") -> None:
        self.delimiter = delimiter
        self._data: list[str] = []

    def add_data(self, *tokens: str) -> None:
        """Add tokens to sign."""
        self._data.extend(str(token) for token in tokens)

    def signature(self) -> str:
        """Return the lowercase hex SHA-1 signature of the sorted tokens."""
        to_sign = self.delimiter.join(sorted(self._data))
        return hashlib.sha1(to_sign.encode("utf-8")).hexdigest()


def signature(tokens: Iterable[str], delimiter: str = "") -> str:
    """
    Compute the order-independent signature of a set of tokens.

    Args:
        tokens: Tokens to sign
        delimiter: String placed between sorted tokens (empty for webhooks)

    Returns:
        Lowercase hex SHA-1 digest
    """
    signer = Signer(delimiter)
    signer.add_data(*tokens)
    return signer.signature()


def _compare(expected: str, actual: str) -> bool:
    return hmac.compare_digest(expected.encode("utf-8"), (actual or "").encode("utf-8"))


def check_signature(token: str, signature_: str, timestamp: str, nonce: str) -> None:
    """
    Check a plain-mode webhook signature.

    Args:
        token: Shared token configured on the platform
        signature_: `signature` query parameter
        timestamp: `timestamp` query parameter
        nonce: `nonce` query parameter

    Raises:
        InvalidSignatureError: If the signature does not match
    """
    expected = signature([token, timestamp, nonce])
    if not _compare(expected, signature_):
        raise InvalidSignatureError(field="signature")


def msg_signature(token: str, timestamp: str, nonce: str, encrypted: str) -> str:
    """Compute the encrypted-mode `msg_signature` over the ciphertext."""
    return signature([token, timestamp, nonce, encrypted])


def check_msg_signature(
    token: str,
    signature_: str,
    timestamp: str,
    nonce: str,
    encrypted: str,
) -> None:
    """
    Check an encrypted-mode `msg_signature`.

    Raises:
        InvalidSignatureError: If the signature does not match
    """
    expected = msg_signature(token, timestamp, nonce, encrypted)
    if not _compare(expected, signature_):
        raise InvalidSignatureError(field="msg_signature")


def check_wxa_signature(session_key: str, raw_data: str, client_signature: str) -> None:
    """
    Check the signature a mini-program client sent alongside `rawData`.

    Args:
        session_key: Session key issued for the user
        raw_data: `rawData` string as sent by the client
        client_signature: `signature` sent by the client

    Raises:
        InvalidSignatureError: If the signature does not match
    """
    expected = hashlib.sha1((raw_data + session_key).encode("utf-8")).hexdigest()
    if not _compare(expected, client_signature):
        raise InvalidSignatureError(field="client_signature")
