"""Tests for binary payload detection."""

import pytest

from socketio_emitter.errors import EncodingError
from socketio_emitter.protocol.binary import has_binary


@pytest.mark.parametrize(
    "data",
    [
        (),
        ("hello",),
        (1, 2.5, None, True),
        ([1, "two", [3, {"four": 4}]],),
        ({"nested": {"deeper": ["text", None]}},),
        ("bytes-looking string \x00\x01",),
    ],
)
def test_no_binary(data):
    """Payloads without raw bytes anywhere are plain events."""
    assert has_binary(*data) is False


@pytest.mark.parametrize(
    "data",
    [
        (b"\x01\x02",),
        (bytearray(b"abc"),),
        (memoryview(b"abc"),),
        ([b"x"],),
        ({"file": b"x"},),
        ({"a": [1, {"b": (2, b"deep")}]},),
        ("text", b"second argument"),
    ],
)
def test_binary_at_any_depth(data):
    """Raw bytes anywhere in lists, tuples or mapping values count."""
    assert has_binary(*data) is True


def test_scalar_sibling_does_not_hide_later_bytes():
    """A scalar before the bytes in the same list must not stop the scan."""
    assert has_binary(["text", 42, None, b"payload"])
    assert has_binary({"first": "text", "second": b"payload"})
    assert has_binary(7, "x", [None, [b"y"]])


def test_mapping_keys_are_not_inspected():
    """Only mapping values are scanned."""
    assert has_binary({b"key": "value"}) is False


def test_unwalkable_payload_raises_encoding_error():
    """Self-referencing structures cannot be scanned or packed."""
    loop = {}
    loop["self"] = loop
    with pytest.raises(EncodingError) as exc:
        has_binary(loop)
    assert isinstance(exc.value.__cause__, RecursionError)
