"""Big-endian packet builder with optional TEA encryption of its output."""

from __future__ import annotations

import struct
from typing import BinaryIO

from lagrangekit.tea import TeaCipher

_CHUNK = 64 * 1024
_LENGTH_PREFIXES = {"u8": 1, "u16": 2, "u32": 4, "u64": 8}


def _prefix_size(prefix: str) -> int:
    try:
        return _LENGTH_PREFIXES[prefix]
    except KeyError:
        raise ValueError(f"invalid length prefix: {prefix!r}") from None


class Builder:
    """Accumulates binary data; a 16-byte key makes the output TEA encrypted."""

    def __init__(self, key: bytes = b"") -> None:
        self._buffer = bytearray()
        self._cipher = TeaCipher(key) if len(key) == 16 else None

    def __len__(self) -> int:
        return len(self._buffer)

    def _output(self) -> bytes:
        if self._cipher is not None:
            return self._cipher.encrypt(self._buffer)
        return bytes(self._buffer)

    def to_bytes(self) -> bytes:
        """Return the data written so far, encrypted if a key was given."""
        return self._output()

    def pack(self, typ: int) -> bytes:
        """Return the data as a TLV: 16-bit type, 16-bit length, payload."""
        payload = self._output()
        return struct.pack(">HH", typ & 0xFFFF, len(payload) & 0xFFFF) + payload

    def write_bool(self, v: bool) -> Builder:
        return self.write_u8(ord("1") if v else ord("0"))

    def write_packet_bytes(self, v: bytes, prefix: str, with_prefix: bool) -> Builder:
        """Write ``v`` after its length, sized by ``prefix`` (u8, u16, u32 or u64).

        With ``with_prefix`` the length counts the prefix itself.
        """
        size = _prefix_size(prefix)
        n = len(v) + (size if with_prefix else 0)
        self._buffer += (n & ((1 << (8 * size)) - 1)).to_bytes(size, "big")
        self._buffer += v
        return self

    def write_packet_string(self, s: str, prefix: str, with_prefix: bool) -> Builder:
        return self.write_packet_bytes(s.encode("utf-8"), prefix, with_prefix)

    def write(self, p: bytes) -> int:
        """Append ``p`` and return the number of bytes written."""
        self._buffer += p
        return len(p)

    def encrypt_and_write(self, key: bytes, data: bytes) -> Builder:
        """Append ``data`` TEA-encrypted with ``key``."""
        self._buffer += TeaCipher(key).encrypt(data)
        return self

    def read_from(self, r: BinaryIO) -> int:
        """Append everything readable from ``r`` and return its length."""
        total = 0
        while True:
            chunk = r.read(_CHUNK)
            if not chunk:
                return total
            self._buffer += chunk
            total += len(chunk)

    def write_len_bytes(self, v: bytes) -> Builder:
        self.write_u16(len(v))
        self._buffer += v
        return self

    def write_bytes(self, v: bytes) -> Builder:
        self._buffer += v
        return self

    def write_len_string(self, v: str) -> Builder:
        return self.write_len_bytes(v.encode("utf-8"))

    def write_struct(self, fmt: str, *args: object) -> Builder:
        """Append ``struct.pack(fmt, *args)``, big endian unless ``fmt`` says otherwise."""
        if not fmt or fmt[0] not in "@=<>!":
            fmt = ">" + fmt
        self._buffer += struct.pack(fmt, *args)
        return self

    def _write_uint(self, v: int, size: int) -> Builder:
        self._buffer += (v & ((1 << (8 * size)) - 1)).to_bytes(size, "big")
        return self

    def write_u8(self, v: int) -> Builder:
        return self._write_uint(v, 1)

    def write_u16(self, v: int) -> Builder:
        return self._write_uint(v, 2)

    def write_u32(self, v: int) -> Builder:
        return self._write_uint(v, 4)

    def write_u64(self, v: int) -> Builder:
        return self._write_uint(v, 8)

    def write_i8(self, v: int) -> Builder:
        return self._write_uint(v, 1)

    def write_i16(self, v: int) -> Builder:
        return self._write_uint(v, 2)

    def write_i32(self, v: int) -> Builder:
        return self._write_uint(v, 4)

    def write_i64(self, v: int) -> Builder:
        return self._write_uint(v, 8)

    def write_float(self, v: float) -> Builder:
        self._buffer += struct.pack(">f", v)
        return self

    def write_double(self, v: float) -> Builder:
        self._buffer += struct.pack(">d", v)
        return self

    def write_tlv(self, *args: bytes) -> Builder:
        """Write the number of TLVs, then each TLV as given."""
        self.write_u16(len(args))
        for tlv in args:
            self._buffer += tlv
        return self