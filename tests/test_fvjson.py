import io

import pytest

from swssdb.fvjson import (
    JsonLoadError,
    KeyOpFieldsValues,
    build_json,
    load_json_from_file,
    read_json,
)

HEADER_EXAMPLE = """
[
    {
        "QOS_TABLE:TC_TO_QUEUE_MAP_TABLE:AZURE": {
            "5": "1",
            "6": "1"
        },
        "OP": "SET"
    },
    {
        "QOS_TABLE:DSCP_TO_TC_MAP_TABLE:AZURE": {
            "7":"5",
            "6":"5",
            "3":"3",
            "8":"7",
            "9":"8"
        },
        "OP": "SET"
    }
]
"""


def test_build_json_is_flat_compact_array():
    assert build_json([("a", "b"), ("c", "d")]) == '["a","b","c","d"]'


def test_build_json_empty():
    assert build_json([]) == "[]"


def test_round_trip_keeps_order():
    fvs = [("z", "1"), ("a", "2"), ("m", "")]
    assert read_json(build_json(fvs)) == fvs


def test_read_json_odd_length_raises():
    with pytest.raises(ValueError):
        read_json('["a","b","c"]')


def test_read_json_non_string_raises():
    with pytest.raises(ValueError):
        read_json('["a",1]')


def test_load_header_example():
    items = load_json_from_file(io.StringIO(HEADER_EXAMPLE))
    assert len(items) == 2
    first, second = items
    assert first.key == "QOS_TABLE:TC_TO_QUEUE_MAP_TABLE:AZURE"
    assert first.op == "SET"
    assert first.fields_values == [("5", "1"), ("6", "1")]
    assert second.key == "QOS_TABLE:DSCP_TO_TC_MAP_TABLE:AZURE"
    assert dict(second.fields_values) == {"7": "5", "6": "5", "3": "3", "8": "7", "9": "8"}


def test_numbers_become_strings():
    doc = '[{"T:k": {"n": 42, "s": "x"}, "OP": "DEL"}]'
    items = load_json_from_file(io.StringIO(doc))
    assert items == [KeyOpFieldsValues("T:k", "DEL", [("n", "42"), ("s", "x")])]


def test_invalid_op_is_skipped():
    doc = '[{"T:a": {"f": "v"}, "OP": "PUT"}, {"T:b": {"f": "v"}, "OP": "SET"}]'
    items = load_json_from_file(io.StringIO(doc))
    assert [item.key for item in items] == ["T:b"]


def test_root_must_be_array():
    with pytest.raises(JsonLoadError):
        load_json_from_file(io.StringIO('{"a": 1}'))


def test_children_must_be_objects():
    with pytest.raises(JsonLoadError):
        load_json_from_file(io.StringIO('["x"]'))


def test_children_must_have_two_entries():
    with pytest.raises(JsonLoadError):
        load_json_from_file(io.StringIO('[{"T:a": {}, "OP": "SET", "X": "Y"}]'))


def test_syntax_error():
    with pytest.raises(JsonLoadError):
        load_json_from_file(io.StringIO("[{"))