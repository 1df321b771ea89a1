"""Strict JSON decoding of frame bodies.

``json.loads`` is more permissive than the capture format: it accepts the
``NaN``/``Infinity`` literals and integers of any size. Both are rejected here
so every decoded number is a finite double, which the canonical encoding
relies on.
"""
from __future__ import annotations

import json
import math
from typing import Any, Union

from .canonical import DecodedValue

__all__ = ["decode_json"]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON number literal {name!r}")


def _parse_int(text: str) -> Union[int, float]:
    # JSON numbers are doubles: the literal -0 keeps its sign
    if text == "-0":
        return -0.0
    value = int(text)
    try:
        float(value)
    except OverflowError:
        raise ValueError(f"number {text[:32]}... out of range for a double") from None
    return value


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text[:32]} out of range for a double")
    return value


def decode_json(text: str) -> DecodedValue:
    """Decode ``text`` or raise ``ValueError`` (``json.JSONDecodeError`` included)."""
    return json.loads(
        text,
        parse_constant=_reject_constant,
        parse_int=_parse_int,
        parse_float=_parse_float,
    )
