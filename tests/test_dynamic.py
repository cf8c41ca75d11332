import pytest

from lagrangekit.dynamic import DynamicMessage, Float32, SInt, SInt32, SInt64


def test_encode_source_case():
    got = DynamicMessage({1: 2, 3: 4}).encode()
    assert got == bytes([1 << 3, 2, 3 << 3, 4])


def test_fields_are_sorted():
    message = DynamicMessage()
    message[3] = 4
    message[1] = 2
    assert message.encode() == bytes([1 << 3, 2, 3 << 3, 4])


@pytest.mark.parametrize(
    "value, expected",
    [
        (1, b"\x01"),
        (114514, b"\xd2\xfe\x06"),
        (2**64 - 1, b"\xff" * 9 + b"\x01"),
        (-1, b"\xff" * 9 + b"\x01"),
    ],
)
def test_uvarint_values(value, expected):
    assert DynamicMessage({1: value}).encode() == b"\x08" + expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (SInt(1), b"\x02"),
        (SInt32(-1), b"\x01"),
        (SInt64(-2), b"\x03"),
        (SInt64(2**63 - 1), b"\xfe" + b"\xff" * 8 + b"\x01"),
    ],
)
def test_zigzag_values(value, expected):
    assert DynamicMessage({1: value}).encode() == b"\x08" + expected


def test_bool():
    assert DynamicMessage({1: True, 2: False}).encode() == b"\x08\x01\x10\x00"


def test_float32_and_float64():
    assert DynamicMessage({1: Float32(1.0)}).encode() == b"\x0d\x00\x00\x80\x3f"
    assert DynamicMessage({1: 1.0}).encode() == b"\x09" + b"\x00" * 6 + b"\xf0\x3f"


def test_string_and_bytes():
    assert DynamicMessage({2: "hi"}).encode() == b"\x12\x02hi"
    assert DynamicMessage({2: b"\x00\x01"}).encode() == b"\x12\x02\x00\x01"


def test_repeated_varints():
    assert DynamicMessage({1: [1, 2]}).encode() == b"\x08\x01\x08\x02"
    assert DynamicMessage({1: []}).encode() == b""


def test_nested_message():
    inner = DynamicMessage({1: 1})
    assert DynamicMessage({1: inner}).encode() == b"\x0a\x02\x08\x01"


def test_unsupported_values_are_skipped():
    assert DynamicMessage({1: None, 2: 5}).encode() == b"\x10\x05"


def test_empty_message():
    assert DynamicMessage().encode() == b""