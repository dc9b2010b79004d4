"""Kraken private-endpoint request signing (API-Sign header)."""

import base64
import binascii
import hashlib
import hmac


class InvalidCredentials(Exception):
    """Raised when the API secret cannot be used as a signing key."""


def decode_secret(secret_b64: str) -> bytes:
    try:
        key = base64.b64decode(secret_b64.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidCredentials("API secret is not valid Base64") from e
    if not key:
        raise InvalidCredentials("API secret is empty")
    return key


def sign(path: str, post_body: str, nonce: str, secret_b64: str) -> str:
    """Compute the API-Sign value for a private request.

    HMAC-SHA512 keyed with the decoded secret, over the URI path followed
    by SHA256(nonce + POST body). Returned as Base64.
    """
    key = decode_secret(secret_b64)
    digest = hashlib.sha256((nonce + post_body).encode("utf-8")).digest()
    mac = hmac.new(key, path.encode("utf-8") + digest, hashlib.sha512)
    return base64.b64encode(mac.digest()).decode("ascii")
