"""Schema-less protobuf encoding of field-number-to-value mappings."""

from __future__ import annotations

import struct

_MASK64 = 0xFFFFFFFFFFFFFFFF


class SInt(int):
    """An integer written with zigzag encoding."""


class SInt32(int):
    """A 32-bit integer written with zigzag encoding."""


class SInt64(int):
    """A 64-bit integer written with zigzag encoding."""


class Float32(float):
    """A float written as a 32-bit fixed-width value."""


def _uvarint(value: int) -> bytes:
    value &= _MASK64
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _svarint(value: int) -> bytes:
    return _uvarint((value << 1) ^ (value >> 63))


class DynamicMessage(dict):
    """Maps protobuf field numbers to values and encodes them in field order.

    Booleans and integers become varints, :class:`SInt` and friends zigzag
    varints, :class:`Float32` and floats fixed-width values, strings, bytes and
    nested messages length-delimited fields, and lists of integers repeated
    varints. Values of other types are left out.
    """

    def encode(self) -> bytes:
        """Return the protobuf wire encoding of this message."""
        out = bytearray()
        for field in sorted(self):
            out += _encode_field((field << 3) & _MASK64, self[field])
        return bytes(out)


def _length_delimited(key: int, payload: bytes) -> bytes:
    return _uvarint(key | 2) + _uvarint(len(payload)) + payload


def _encode_field(key: int, value: object) -> bytes:
    if isinstance(value, bool):
        return _uvarint(key) + _uvarint(int(value))
    if isinstance(value, (SInt, SInt32, SInt64)):
        return _uvarint(key) + _svarint(int(value))
    if isinstance(value, int):
        return _uvarint(key) + _uvarint(value)
    if isinstance(value, Float32):
        return _uvarint(key | 5) + struct.pack("<f", value)
    if isinstance(value, float):
        return _uvarint(key | 1) + struct.pack("<d", value)
    if isinstance(value, str):
        return _length_delimited(key, value.encode("utf-8"))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _length_delimited(key, bytes(value))
    if isinstance(value, DynamicMessage):
        return _length_delimited(key, value.encode())
    if isinstance(value, (list, tuple)):
        return b"".join(_uvarint(key) + _uvarint(int(item)) for item in value)
    return b""