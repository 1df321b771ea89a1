"""Pure fingerprinting and pairing logic.

Everything in this package works on already-read channel frames: no file or
network I/O. The public entry points are re-exported from the top-level
`fixture.py` facade.

Modules:
    canonical: Order-independent text encoding of decoded JSON values
    decoding: Strict JSON decoding of frame bodies
    fingerprint: SHA-1 digest over the canonical encoding
    pairing: Outbound/inbound matching by correlation id
    pairing_context: Per-pass decode cache and counters

Design Invariants:
    - Deterministic output for identical inputs
    - The ``id`` key never contributes to a fingerprint or a response body
"""
from __future__ import annotations

from . import canonical as canonical  # noqa: F401
from . import fingerprint as fingerprint  # noqa: F401

__all__ = ["canonical", "fingerprint"]
