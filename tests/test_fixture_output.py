from __future__ import annotations

import json
import os

import pytest

from har_ws_fixtures.fixture import (
    assemble_fixture,
    build_fixture,
    render_fixture,
    store_fixture,
)
from har_ws_fixtures.mapping.pairing import MessageDecodeError
from har_ws_fixtures.models.har import DirectedMessage, Direction

FP_OP_X = "4788c4d4fa40c1db7b9431fa3be8780b4d3285c5"
FP_NESTED = "daaec21cc9951acf27d4aa45c364a8680b07e1f5"


def _messages():
    return [
        DirectedMessage(direction=Direction.OUTBOUND, body='{"id":1,"op":"x"}'),
        DirectedMessage(direction=Direction.OUTBOUND, body='{"a":{"c":2,"b":1},"id":2}'),
        DirectedMessage(direction=Direction.INBOUND, body='{"id":1,"ok":true}'),
    ]


def test_build_fixture_end_to_end():
    assert build_fixture(_messages()) == {FP_OP_X: '{"ok":true}', FP_NESTED: ""}


def test_build_fixture_strictness_is_forwarded():
    messages = _messages() + [DirectedMessage(direction=Direction.OUTBOUND, body="oops")]
    with pytest.raises(MessageDecodeError):
        build_fixture(messages)
    assert build_fixture(messages, strict=False) == {FP_OP_X: '{"ok":true}', FP_NESTED: ""}


def test_assemble_returns_independent_copy():
    pairs = {FP_OP_X: ""}
    table = assemble_fixture(pairs)
    pairs[FP_NESTED] = "x"
    assert table == {FP_OP_X: ""}


def test_render_sorted_and_indented():
    text = render_fixture({FP_OP_X: '{"ok":true}', FP_NESTED: ""})
    assert text == (
        "{\n"
        f'  "{FP_OP_X}": "{{\\"ok\\":true}}",\n'
        f'  "{FP_NESTED}": ""\n'
        "}"
    )


def test_render_custom_indent_and_unicode():
    text = render_fixture({FP_OP_X: '{"name":"café"}'}, indent=4)
    assert text.startswith('{\n    "')
    assert "café" in text


def test_render_empty_table():
    assert render_fixture({}) == "{}"


def test_store_fixture_writes_atomically(tmp_path):
    path = tmp_path / "fixtures" / "ws.json"
    table = {FP_OP_X: '{"ok":true}'}
    store_fixture(str(path), table)
    assert json.loads(path.read_text(encoding="utf-8")) == table
    assert not os.path.exists(f"{path}.tmp")


def test_store_fixture_overwrites(tmp_path):
    path = tmp_path / "ws.json"
    path.write_text("stale", encoding="utf-8")
    store_fixture(str(path), {})
    assert json.loads(path.read_text(encoding="utf-8")) == {}
