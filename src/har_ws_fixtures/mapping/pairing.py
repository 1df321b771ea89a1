"""Request/response pairing for one WebSocket channel.

Walks the channel frames in capture order. Every outbound frame whose body is
a JSON object carrying a correlation id becomes a request: it is fingerprinted
(id excluded) and recorded immediately with an empty response, then the frames
after it are scanned for the first inbound object with an equal id. That
frame's body, minus the id, is re-encoded as compact JSON and stored as the
response.

Processing Steps (per outbound frame at position i):
    1. Decode body (failure: MessageDecodeError, or skip in lenient mode)
    2. Skip when not an object or no ``id`` key
    3. result[fingerprint] = ""
    4. Scan positions i+1.. for inbound frames; skip non-objects / no ``id``
    5. First equal id wins; later duplicates are ignored
    6. No match: entry keeps the empty string

Public Functions:
    pair_messages: Build the fingerprint -> response table for a channel
    ids_equal: Type-aware structural equality for correlation ids
    encode_response: Compact, key-sorted JSON of an inbound body without id

Design Notes:
    - Pure and deterministic; the same frames always give the same table
    - Two requests with the same fingerprint share one entry; the later request
      resets it to "" before its own scan, so the last one wins
    - Strict decoding is the default so a malformed capture never yields a
      silently partial fixture
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Sequence

from ..models.har import DirectedMessage
from .canonical import CORRELATION_ID_KEY, format_number
from .decoding import decode_json
from .fingerprint import fingerprint
from .pairing_context import PairingContext

logger = logging.getLogger(__name__)

__all__ = [
    "MessageDecodeError",
    "pair_messages",
    "ids_equal",
    "encode_response",
]

_UNDECODABLE = object()


class MessageDecodeError(ValueError):
    """A frame body is not valid JSON.

    Attributes:
        index: Position of the frame within the channel
        direction: Direction label of the frame
    """

    def __init__(self, index: int, direction: Any, reason: str):
        self.index = index
        self.direction = getattr(direction, "value", direction)
        super().__init__(
            f"message {index} ({self.direction}) is not valid JSON: {reason}"
        )


def ids_equal(left: Any, right: Any) -> bool:
    """Compare two correlation ids by JSON value.

    Booleans, numbers, strings and null only ever equal their own kind
    (``1`` never equals ``"1"`` or ``true``); numbers compare as doubles, so
    ``1`` equals ``1.0``. Arrays and objects compare element-wise.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return float(left) == float(right)
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            ids_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            ids_equal(left[k], right[k]) for k in left
        )
    if left is None or right is None:
        return left is None and right is None
    return type(left) is type(right) and left == right


_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _encode_string(text: str) -> str:
    encoded = json.dumps(text, ensure_ascii=False)
    for raw, escaped in _HTML_ESCAPES.items():
        encoded = encoded.replace(raw, escaped)
    return encoded


def _encode_number(value: Any) -> str:
    try:
        as_double = float(value)
    except OverflowError:
        return format_number(value)
    magnitude = abs(as_double)
    if magnitude != 0 and (magnitude < 1e-6 or magnitude >= 1e21):
        text = repr(as_double)
        # 1e-07 -> 1e-7
        if len(text) >= 4 and text[-4] == "e" and text[-3] == "-" and text[-2] == "0":
            text = text[:-2] + text[-1]
        return text
    return format_number(as_double)


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return _encode_string(value)
    if isinstance(value, (int, float)):
        return _encode_number(value)
    if isinstance(value, list):
        return "[" + ",".join(_encode_value(item) for item in value) + "]"
    if isinstance(value, dict):
        items = (f"{_encode_string(k)}:{_encode_value(value[k])}" for k in sorted(value))
        return "{" + ",".join(items) + "}"
    return "null"


def encode_response(body: Dict[str, Any]) -> str:
    """Return ``body`` without its correlation id as compact, key-sorted JSON.

    Numbers are written as doubles (``1.0`` -> ``1``, ``1e-07`` -> ``1e-7``)
    and ``<``, ``>``, ``&``, U+2028 and U+2029 are written as ``\\uXXXX``
    escapes, matching the response text of fixtures already in use.
    """
    stripped = {k: v for k, v in body.items() if k != CORRELATION_ID_KEY}
    return _encode_value(stripped)


def _decode(ctx: PairingContext, messages: Sequence[DirectedMessage], index: int) -> Any:
    """Decode the body at ``index`` once per pass.

    Returns the decoded value, or ``_UNDECODABLE`` in lenient mode when the
    body is not valid JSON.
    """
    if index in ctx.decoded:
        return ctx.decoded[index]
    if index in ctx.undecodable:
        return _UNDECODABLE
    message = messages[index]
    try:
        value = decode_json(message.body)
    except ValueError as e:
        if ctx.strict:
            raise MessageDecodeError(index, message.direction, str(e)) from e
        logger.warning(
            "Skipping undecodable %s message %d: %s",
            getattr(message.direction, "value", message.direction),
            index,
            e,
        )
        ctx.undecodable.add(index)
        return _UNDECODABLE
    ctx.decoded[index] = value
    return value


def _find_response(
    ctx: PairingContext,
    messages: Sequence[DirectedMessage],
    start: int,
    correlation_id: Any,
) -> str | None:
    for index in range(start, len(messages)):
        if not messages[index].is_inbound:
            continue
        body = _decode(ctx, messages, index)
        if not isinstance(body, dict) or CORRELATION_ID_KEY not in body:
            continue
        if ids_equal(body[CORRELATION_ID_KEY], correlation_id):
            logger.debug("Request id=%r answered by message %d", correlation_id, index)
            return encode_response(body)
    return None


def pair_messages(
    messages: Sequence[DirectedMessage], *, strict: bool = True
) -> Dict[str, str]:
    """Pair outbound requests with their first matching inbound response.

    Args:
        messages: Channel frames in capture order.
        strict: When True (default) an undecodable body aborts the pass with
            ``MessageDecodeError``; when False it is logged and skipped.

    Returns:
        Mapping of request fingerprint to response text ("" when no response
        was captured). Outbound frames without a correlation id are omitted.

    Raises:
        MessageDecodeError: strict mode and a body reached by the pass is not
            valid JSON.
    """
    ctx = PairingContext(strict=strict)
    pairs: Dict[str, str] = {}

    for index, message in enumerate(messages):
        if not message.is_outbound:
            continue
        request = _decode(ctx, messages, index)
        if not isinstance(request, dict) or CORRELATION_ID_KEY not in request:
            ctx.skipped += 1
            logger.debug("Message %d is not a correlated request; skipping", index)
            continue

        correlation_id = request[CORRELATION_ID_KEY]
        key = fingerprint(request)
        pairs[key] = ""
        ctx.requests += 1

        response = _find_response(ctx, messages, index + 1, correlation_id)
        if response is None:
            logger.debug("Request %d (id=%r) has no response", index, correlation_id)
            continue
        pairs[key] = response
        ctx.matched += 1

    logger.info(
        "Paired %d message(s): requests=%d matched=%d unmatched=%d skipped=%d entries=%d",
        len(messages),
        ctx.requests,
        ctx.matched,
        ctx.unmatched,
        ctx.skipped,
        len(pairs),
    )
    return pairs
