"""Fixture table assembly, rendering and storage.

This module is the public facade over the `mapping` package. It turns the
frames of one channel into the final fixture table and takes care of writing
that table out.

The `store_fixture` function uses an atomic write pattern (write to a
temporary file then rename) so an interrupted run never leaves a truncated
fixture behind for a test suite to pick up.
"""
from __future__ import annotations

import json
import os
from typing import Dict, Mapping, Sequence

from .mapping.pairing import pair_messages
from .models.har import DirectedMessage

DEFAULT_INDENT = 2


def assemble_fixture(pairs: Mapping[str, str]) -> Dict[str, str]:
    """Return the completed fixture table for one pairing pass.

    The table is handed over as a fresh dict; key order carries no meaning.
    """
    return dict(pairs)


def build_fixture(
    messages: Sequence[DirectedMessage], *, strict: bool = True
) -> Dict[str, str]:
    """Pair a channel's frames and assemble the resulting fixture table.

    Raises:
        MessageDecodeError: strict mode and a frame body is not valid JSON.
    """
    return assemble_fixture(pair_messages(messages, strict=strict))


def render_fixture(table: Mapping[str, str], indent: int = DEFAULT_INDENT) -> str:
    """Render the table as indented JSON with sorted keys for stable diffs."""
    return json.dumps(dict(table), indent=indent, sort_keys=True, ensure_ascii=False)


def store_fixture(path: str, table: Mapping[str, str], indent: int = DEFAULT_INDENT) -> None:
    """Atomically write the rendered table to ``path``.

    Args:
        path: Destination file; parent directories are created as needed.
        table: Fixture table to render.
        indent: JSON indentation width.
    """
    tmp_path = f"{path}.tmp"
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(render_fixture(table, indent=indent))
        f.write("\n")
    os.replace(tmp_path, path)


__all__ = [
    "DEFAULT_INDENT",
    "assemble_fixture",
    "build_fixture",
    "render_fixture",
    "store_fixture",
]
