import io
import secrets

import pytest

from lagrangekit.builder import Builder
from lagrangekit.tea import TeaCipher

RANDOM = secrets.token_bytes(4096)


def test_to_bytes_returns_written_data():
    for i in range(4096):
        expected = RANDOM[:i]
        assert Builder().write_bytes(expected).to_bytes() == expected


def test_pack_is_deterministic():
    for i in range(256):
        expected = RANDOM[:i]
        first = Builder().write_bytes(expected).pack(0x2333)
        for _ in range(16):
            assert Builder().write_bytes(expected).pack(0x2333) == first


def test_tea_key_encrypts_output():
    key = secrets.token_bytes(16)
    data = Builder(key).write_bytes(b"payload").to_bytes()
    assert data != b"payload"
    assert TeaCipher(key).decrypt(data) == b"payload"


def test_key_of_other_length_leaves_output_plain():
    assert Builder(b"abc").write_bytes(b"payload").to_bytes() == b"payload"


def test_pack_layout():
    assert Builder().write_bytes(b"ab").pack(0x2333) == b"\x23\x33\x00\x02ab"


def test_pack_with_tea():
    key = secrets.token_bytes(16)
    packed = Builder(key).write_bytes(b"hello").pack(0x0102)
    assert packed[:2] == b"\x01\x02"
    assert int.from_bytes(packed[2:4], "big") == len(packed) - 4
    assert TeaCipher(key).decrypt(packed[4:]) == b"hello"


def test_integer_writers():
    data = (
        Builder()
        .write_u8(0x01)
        .write_u16(0x0203)
        .write_u32(0x04050607)
        .write_u64(0x08090A0B0C0D0E0F)
        .to_bytes()
    )
    assert data == bytes(range(1, 16))


def test_signed_writers():
    data = Builder().write_i8(-1).write_i16(-2).write_i32(1).write_i64(-1).to_bytes()
    assert data == b"\xff" + b"\xff\xfe" + b"\x00\x00\x00\x01" + b"\xff" * 8


def test_float_and_double():
    assert Builder().write_float(1.0).to_bytes() == b"\x3f\x80\x00\x00"
    assert Builder().write_double(1.0).to_bytes() == b"\x3f\xf0" + bytes(6)


def test_write_bool():
    assert Builder().write_bool(True).write_bool(False).to_bytes() == b"10"


def test_write_packet_bytes():
    assert Builder().write_packet_bytes(b"ab", "u16", True).to_bytes() == b"\x00\x04ab"
    assert Builder().write_packet_bytes(b"ab", "u8", False).to_bytes() == b"\x02ab"
    assert Builder().write_packet_string("ab", "u32", True).to_bytes() == b"\x00\x00\x00\x06ab"


def test_write_packet_bytes_bad_prefix():
    with pytest.raises(ValueError):
        Builder().write_packet_bytes(b"ab", "u12", False)


def test_len_bytes_and_string():
    assert Builder().write_len_bytes(b"xyz").to_bytes() == b"\x00\x03xyz"
    assert Builder().write_len_string("xyz").to_bytes() == b"\x00\x03xyz"


def test_write_tlv():
    data = Builder().write_tlv(b"\x00\x01", b"\x00\x02\x03").to_bytes()
    assert data == b"\x00\x02\x00\x01\x00\x02\x03"


def test_write_struct_defaults_to_big_endian():
    assert Builder().write_struct("HI", 1, 2).to_bytes() == b"\x00\x01\x00\x00\x00\x02"
    assert Builder().write_struct("<H", 1).to_bytes() == b"\x01\x00"


def test_write_and_read_from():
    b = Builder()
    assert b.write(b"abc") == 3
    assert b.read_from(io.BytesIO(RANDOM)) == len(RANDOM)
    assert b.to_bytes() == b"abc" + RANDOM
    assert len(b) == 3 + len(RANDOM)


def test_encrypt_and_write():
    key = secrets.token_bytes(16)
    data = Builder().encrypt_and_write(key, b"inner").to_bytes()
    assert TeaCipher(key).decrypt(data) == b"inner"