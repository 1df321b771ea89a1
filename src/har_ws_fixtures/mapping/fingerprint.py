"""Request fingerprints: SHA-1 over the canonical encoding.

Fingerprint format (fixture contract, do not change):
    sha1(serialize(value).encode("utf-8")).hexdigest()  -> 40 lowercase hex chars

SHA-1 is used for its width and stability, not for security. Consumers of
existing fixture files look requests up by this exact string.
"""
from __future__ import annotations

import hashlib

from .canonical import DecodedValue, serialize
from .decoding import decode_json

FINGERPRINT_LENGTH = 40

__all__ = ["FINGERPRINT_LENGTH", "fingerprint", "fingerprint_text"]


def fingerprint(value: DecodedValue) -> str:
    """Return the hex SHA-1 digest of ``serialize(value)``.

    The correlation id is excluded by the serializer, so a request and its
    replay with a different id share the same fingerprint.
    """
    # surrogatepass keeps the digest total for lone surrogates from \uXXXX escapes
    data = serialize(value).encode("utf-8", "surrogatepass")
    return hashlib.sha1(data).hexdigest()


def fingerprint_text(body: str) -> str:
    """Decode a JSON text and fingerprint the result.

    Raises:
        ValueError: ``body`` is not valid JSON.
    """
    return fingerprint(decode_json(body))
