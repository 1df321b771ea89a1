"""Canonical, order-independent text encoding of decoded JSON values.

The output is only ever fed to a hash function. It is deliberately not JSON:
strings are written raw, containers have no brackets and object keys are
emitted in sorted order so that two bodies differing only in key order (or in
their correlation id) encode identically.

Encoding rules:
    null / unknown kind  -> ``null``
    bool                 -> ``true`` / ``false``
    str                  -> raw characters, no quoting or escaping
    int / float          -> shortest round-trip decimal of the double, never
                            in exponent form (``1.0`` -> ``1``)
    list                 -> elements joined by ``,``
    dict                 -> ``id`` dropped, keys sorted, each key followed by
                            ``.`` (dict value) or ``:`` (anything else) and the
                            encoded value, pairs joined by ``|``

Example:
    {"id": 2, "a": {"c": 2, "b": 1}}  ->  ``a.b:1|c:2``

Design Invariant:
    Delimiters occurring inside string values are NOT escaped. Existing
    fixture tables are keyed by digests of this exact encoding, so the
    ambiguity is kept rather than fixed silently.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Union

ITEM_DELIMITER = "|"
ARRAY_DELIMITER = ","
OBJECT_DELIMITER = "."
KEY_VALUE_DELIMITER = ":"

# Reserved correlation-id key; never part of a fingerprint or response body.
CORRELATION_ID_KEY = "id"

DecodedValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

__all__ = [
    "ITEM_DELIMITER",
    "ARRAY_DELIMITER",
    "OBJECT_DELIMITER",
    "KEY_VALUE_DELIMITER",
    "CORRELATION_ID_KEY",
    "DecodedValue",
    "format_number",
    "serialize",
]


def format_number(value: Union[int, float]) -> str:
    """Format a JSON number the way the fixture tables expect.

    JSON numbers are treated as IEEE-754 doubles (integers included), printed
    with the fewest digits that round-trip and without an exponent.

    >>> format_number(1.0), format_number(0.1), format_number(1e21)
    ('1', '0.1', '1000000000000000000000')
    """
    try:
        as_double = float(value)
    except OverflowError:
        # integer beyond the double range: exact digits
        return format(Decimal(value), "f")
    # repr() yields the shortest round-trip digits; Decimal drops the exponent.
    return format(Decimal(repr(as_double)).normalize(), "f")


def _serialize_list(items: List[Any]) -> str:
    return ARRAY_DELIMITER.join(serialize(item) for item in items)


def _serialize_dict(obj: Dict[str, Any]) -> str:
    # Code point order of str equals the byte order of their UTF-8 encodings.
    keys = sorted(k for k in obj if k != CORRELATION_ID_KEY)
    parts = []
    for key in keys:
        value = obj[key]
        sep = OBJECT_DELIMITER if isinstance(value, dict) else KEY_VALUE_DELIMITER
        parts.append(f"{key}{sep}{serialize(value)}")
    return ITEM_DELIMITER.join(parts)


def serialize(value: Any) -> str:
    """Return the canonical encoding of ``value`` (see module docstring)."""
    # bool first: it is a subclass of int.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, list):
        return _serialize_list(value)
    if isinstance(value, dict):
        return _serialize_dict(value)
    return "null"
