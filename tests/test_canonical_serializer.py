from __future__ import annotations

import json
import random

import pytest

from har_ws_fixtures.mapping.canonical import format_number, serialize
from har_ws_fixtures.mapping.decoding import decode_json


def test_request_with_id_serializes_without_it():
    assert serialize({"id": 1, "op": "x"}) == "op:x"


def test_nested_object_uses_object_delimiter():
    assert serialize({"id": 2, "a": {"b": 1, "c": 2}}) == "a.b:1|c:2"


def test_key_order_does_not_matter():
    texts = [
        '{"id":2,"a":{"b":1,"c":2}}',
        '{"a":{"c":2,"b":1},"id":2}',
        '{"a":{"b":1,"c":2},"id":2}',
    ]
    encoded = {serialize(json.loads(t)) for t in texts}
    assert encoded == {"a.b:1|c:2"}


def test_shuffled_keys_give_identical_output():
    base = {f"k{i}": i for i in range(20)}
    base["nested"] = {"z": [1, 2], "y": {"x": None}}
    expected = serialize(base)
    rng = random.Random(1234)
    for _ in range(10):
        items = list(base.items())
        rng.shuffle(items)
        assert serialize(dict(items)) == expected


def test_id_only_object_is_empty():
    assert serialize({"id": "abc"}) == ""


def test_id_exclusion_matches_object_without_id():
    with_id = {"id": 9, "method": "subscribe", "params": ["trades", "BTC"]}
    without_id = {"method": "subscribe", "params": ["trades", "BTC"]}
    assert serialize(with_id) == serialize(without_id)
    assert serialize(with_id) == "method:subscribe|params:trades,BTC"


def test_nested_ids_are_excluded_too():
    value = {"items": [{"id": 1, "n": "a"}, {"n": "b", "id": 2}], "meta": {"id": 3, "v": True}}
    assert serialize(value) == "items:n:a,n:b|meta.v:true"


def test_scalars_and_arrays():
    assert serialize([1, "a", True, False, None]) == "1,a,true,false,null"
    assert serialize([]) == ""
    assert serialize([[1, 2], [3]]) == "1,2,3"
    assert serialize("plain") == "plain"
    assert serialize(None) == "null"


def test_unknown_kind_falls_back_to_null():
    assert serialize(object()) == "null"


def test_keys_sorted_bytewise():
    assert serialize({"b": 1, "B": 2, "a": 3, "_": 4}) == "B:2|_:4|a:3|b:1"


def test_delimiters_inside_strings_are_not_escaped():
    # Accepted ambiguity: both values encode identically.
    assert serialize({"a": "b|c:d"}) == "a:b|c:d"
    assert serialize({"a": "b|c:d"}) == serialize({"a": "b", "c": "d"})


def test_bool_is_not_treated_as_number():
    assert serialize({"flag": True, "count": 1}) == "count:1|flag:true"


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (1, "1"),
        (1.0, "1"),
        (-3, "-3"),
        (1.5, "1.5"),
        (100, "100"),
        (100.0, "100"),
        (0.1, "0.1"),
        (0.1 + 0.2, "0.30000000000000004"),
        (1e21, "1000000000000000000000"),
        (1e-7, "0.0000001"),
        (-0.0, "-0"),
        (12345678901234567890, "12345678901234567000"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_integer_beyond_double_range_keeps_exact_digits():
    value = json.loads('{"a":1' + "0" * 400 + "}")
    assert serialize(value) == "a:1" + "0" * 400


def test_negative_zero_literal_keeps_sign():
    assert serialize(decode_json('{"v":-0}')) == "v:-0"
    assert serialize(decode_json('{"v":-0.0}')) == "v:-0"
    assert serialize(decode_json('{"v":0}')) == "v:0"
