import io
import socket

import pytest

from lagrangekit.builder import Builder
from lagrangekit.reader import NetworkReader, Reader


class _ErrorStream:
    def read(self, size=-1):
        raise OSError("unexpected EOF")


class _ShortStream:
    def __init__(self, data):
        self.data = data
        self.pos = 0

    def read(self, size=-1):
        if self.pos >= len(self.data):
            return b""
        byte = self.data[self.pos:self.pos + 1]
        self.pos += 1
        return byte


def test_empty_buffer():
    r = Reader(b"")
    assert r.read_u8() == 0
    assert r.read_u16() == 0
    assert r.read_u32() == 0
    assert r.read_u64() == 0
    assert r.read_bytes(10) == b""


def test_incomplete_data():
    assert Reader(b"\x01").read_u16() == 0
    assert Reader(b"\x01\x02").read_u32() == 0
    assert Reader(b"\x01\x02\x03").read_bytes(10) == b""


def test_failed_read_does_not_advance_buffer():
    r = Reader(b"\x01\x02")
    assert r.read_u32() == 0
    assert r.read_u16() == 0x0102


def test_error_stream():
    r = Reader.from_stream(_ErrorStream())
    assert r.read_u8() == 0
    assert r.read_u16() == 0
    assert r.read_u32() == 0
    assert r.read_bytes(10) == b""
    assert r.read_all() == b""


def test_normal_data():
    r = Reader(bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08]))
    assert r.read_u8() == 0x01
    assert r.read_u16() == 0x0203
    assert r.read_u32() == 0x04050607
    assert r.read_byte() == 0x08
    with pytest.raises(EOFError):
        r.read_byte()


def test_short_stream():
    r = Reader.from_stream(_ShortStream(b"\x01\x02\x03\x04"))
    assert r.read_bytes(10) == b""


def test_stream_reads_across_short_reads():
    r = Reader.from_stream(_ShortStream(b"\x01\x02\x03\x04rest"))
    assert r.read_u32() == 0x01020304
    assert r.read_all() == b"rest"


def test_signed_reads():
    r = Reader(b"\xff\xff\xfe\xff\xff\xff\xff" + b"\xff" * 8)
    assert r.read_i8() == -1
    assert r.read_i16() == -2
    assert r.read_i32() == -1
    assert r.read_i64() == -1


def test_read_all_and_text_empty_the_buffer():
    r = Reader(b"abcdef")
    r.skip_bytes(2)
    assert r.read_text() == "cdef"
    assert len(r) == 0
    assert r.read_all() == b""


def test_length_prefixed_reads():
    assert Reader(b"\x00\x05abc").read_bytes_with_length("u16", True) == b"abc"
    assert Reader(b"\x03abc").read_string_with_length("u8", False) == "abc"
    r = Reader(b"\x00\x00\x00\x02xyz")
    r.skip_bytes_with_length("u32", False)
    assert r.read_string(1) == "z"


def test_invalid_prefix():
    with pytest.raises(ValueError):
        Reader(b"\x00\x01a").read_bytes_with_length("u24", False)


def test_read_tlv_round_trip():
    data = (
        Builder()
        .write_u16(2)
        .write_u16(0x0001).write_len_bytes(b"one")
        .write_u16(0x0106).write_len_bytes(b"")
        .to_bytes()
    )
    assert Reader(data).read_tlv() == {0x0001: b"one", 0x0106: b""}


def test_varints():
    assert Reader(b"\x96\x01").read_uvarint() == 150
    assert Reader(b"\x03").read_varint() == -2
    assert Reader(b"\x04").read_varint() == 2


def test_varint_overflow_and_eof():
    with pytest.raises(ValueError):
        Reader(b"\xff" * 10).read_uvarint()
    with pytest.raises(EOFError):
        Reader(b"\x80").read_uvarint()


def test_stream_reader_has_no_length():
    with pytest.raises(TypeError):
        len(Reader.from_stream(io.BytesIO(b"abc")))


def test_network_reader():
    left, right = socket.socketpair()
    try:
        left.sendall(b"\x07\xff\xff\xff\xfeabc")
        reader = NetworkReader(right)
        assert reader.read_byte() == 7
        assert reader.read_int32() == -2
        assert reader.read_bytes(3) == b"abc"
        left.close()
        with pytest.raises(EOFError):
            reader.read_bytes(1)
    finally:
        right.close()