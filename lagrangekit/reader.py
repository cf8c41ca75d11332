"""Big-endian binary readers over byte strings, streams and sockets."""

from __future__ import annotations

import socket
from typing import BinaryIO

_CHUNK = 64 * 1024
_LENGTH_PREFIXES = {"u8": 1, "u16": 2, "u32": 4, "u64": 8}
_MAX_VARINT_LEN = 10


class Reader:
    """Reads big-endian values from a byte string or a stream.

    Reads past the end give zero or empty results rather than raising,
    except :meth:`read_byte` and the varint readers, which raise EOFError.
    """

    def __init__(self, buffer: bytes = b"") -> None:
        self._buffer = bytes(buffer)
        self._pos = 0
        self._stream: BinaryIO | None = None

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> Reader:
        """Return a reader that pulls its data from ``stream``."""
        reader = cls()
        reader._stream = stream
        return reader

    def __len__(self) -> int:
        if self._stream is not None:
            raise TypeError("the length of a stream reader is unknown")
        return max(len(self._buffer) - self._pos, 0)

    def _read_stream(self, size: int | None) -> bytes:
        """Read ``size`` bytes, or everything when None; b"" if the stream fails."""
        assert self._stream is not None
        parts = []
        remaining = size
        try:
            while remaining is None or remaining > 0:
                chunk = self._stream.read(_CHUNK if remaining is None else remaining)
                if not chunk:
                    break
                parts.append(chunk)
                if remaining is not None:
                    remaining -= len(chunk)
        except OSError:
            return b""
        return b"".join(parts)

    def _take(self, size: int) -> bytes | None:
        if self._stream is not None:
            data = self._read_stream(size)
            return data if len(data) == size else None
        end = self._pos + size
        if end > len(self._buffer):
            return None
        data = self._buffer[self._pos:end]
        self._pos = end
        return data

    def read_byte(self) -> int:
        """Return the next byte, raising EOFError at the end."""
        data = self._take(1)
        if data is None:
            raise EOFError("no more data")
        return data[0]

    def read_all(self) -> bytes:
        """Return all remaining data; b"" if the stream fails."""
        if self._stream is not None:
            return self._read_stream(None)
        data = self._buffer[self._pos:]
        self._buffer = b""
        self._pos = 0
        return data

    def read_text(self) -> str:
        """Return all remaining data decoded as UTF-8."""
        return self.read_all().decode("utf-8", "replace")

    def _read_uint(self, size: int) -> int:
        data = self._take(size)
        return 0 if data is None else int.from_bytes(data, "big")

    def _read_int(self, size: int) -> int:
        data = self._take(size)
        return 0 if data is None else int.from_bytes(data, "big", signed=True)

    def read_u8(self) -> int:
        return self._read_uint(1)

    def read_u16(self) -> int:
        return self._read_uint(2)

    def read_u32(self) -> int:
        return self._read_uint(4)

    def read_u64(self) -> int:
        return self._read_uint(8)

    def read_i8(self) -> int:
        return self._read_int(1)

    def read_i16(self) -> int:
        return self._read_int(2)

    def read_i32(self) -> int:
        return self._read_int(4)

    def read_i64(self) -> int:
        return self._read_int(8)

    def skip_bytes(self, length: int) -> None:
        if length < 0:
            raise ValueError("cannot skip a negative number of bytes")
        if self._stream is not None:
            self._read_stream(length)
        else:
            self._pos += length

    def read_bytes(self, length: int) -> bytes:
        """Return the next ``length`` bytes, or b"" if fewer are left."""
        if length < 0:
            raise ValueError("cannot read a negative number of bytes")
        data = self._take(length)
        return b"" if data is None else data

    def read_string(self, length: int) -> str:
        return self.read_bytes(length).decode("utf-8", "replace")

    def _prefixed_length(self, prefix: str, with_prefix: bool) -> int:
        try:
            size = _LENGTH_PREFIXES[prefix]
        except KeyError:
            raise ValueError(f"invalid length prefix: {prefix!r}") from None
        length = self._read_uint(size)
        return length - size if with_prefix else length

    def skip_bytes_with_length(self, prefix: str, with_prefix: bool) -> None:
        """Skip a block whose length comes first, sized by ``prefix``."""
        self.skip_bytes(self._prefixed_length(prefix, with_prefix))

    def read_bytes_with_length(self, prefix: str, with_prefix: bool) -> bytes:
        """Read a block whose length comes first, sized by ``prefix``.

        With ``with_prefix`` the stored length counts the prefix itself.
        """
        return self.read_bytes(self._prefixed_length(prefix, with_prefix))

    def read_string_with_length(self, prefix: str, with_prefix: bool) -> str:
        return self.read_bytes_with_length(prefix, with_prefix).decode("utf-8", "replace")

    def read_tlv(self) -> dict[int, bytes]:
        """Read a 16-bit count, then that many tag, length, value triples."""
        result = {}
        for _ in range(self.read_u16()):
            tag = self.read_u16()
            result[tag] = self.read_bytes(self.read_u16())
        return result

    def read_uvarint(self) -> int:
        """Read an unsigned LEB128 varint of at most 64 bits."""
        value = 0
        shift = 0
        for i in range(_MAX_VARINT_LEN):
            byte = self.read_byte()
            if byte < 0x80:
                if i == _MAX_VARINT_LEN - 1 and byte > 1:
                    raise ValueError("varint overflows a 64-bit integer")
                return value | (byte << shift)
            value |= (byte & 0x7F) << shift
            shift += 7
        raise ValueError("varint overflows a 64-bit integer")

    def read_varint(self) -> int:
        """Read a zigzag-encoded signed varint."""
        raw = self.read_uvarint()
        value = raw >> 1
        return ~value if raw & 1 else value


class NetworkReader:
    """Reads exact amounts of data from a connected socket."""

    def __init__(self, conn: socket.socket) -> None:
        self._conn = conn

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_bytes(self, length: int) -> bytes:
        """Read exactly ``length`` bytes, raising EOFError if the peer closes."""
        buf = bytearray()
        while len(buf) < length:
            chunk = self._conn.recv(length - len(buf))
            if not chunk:
                raise EOFError("connection closed")
            buf += chunk
        return bytes(buf)

    def read_int32(self) -> int:
        return int.from_bytes(self.read_bytes(4), "big", signed=True)