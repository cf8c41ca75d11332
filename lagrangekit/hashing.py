"""Digest helpers over byte strings and seekable streams, and random values."""

from __future__ import annotations

import hashlib
import random
import secrets
import struct
from typing import BinaryIO, Iterator

_CHUNK = 64 * 1024
_MASK32 = 0xFFFFFFFF


def md5_digest(v: bytes) -> bytes:
    """Return the MD5 digest of ``v``."""
    return hashlib.md5(v).digest()


def sha256_digest(v: bytes) -> bytes:
    """Return the SHA-256 digest of ``v``."""
    return hashlib.sha256(v).digest()


def sha1_digest(v: bytes) -> bytes:
    """Return the SHA-1 digest of ``v``."""
    return hashlib.sha1(v).digest()


def _chunks(r: BinaryIO, limit: int | None = None) -> Iterator[bytes]:
    remaining = limit
    while remaining is None or remaining > 0:
        size = _CHUNK if remaining is None else min(_CHUNK, remaining)
        chunk = r.read(size)
        if not chunk:
            return
        if remaining is not None:
            remaining -= len(chunk)
        yield chunk


def _digest_stream(r: BinaryIO, hashers: list, limit: int | None = None) -> int:
    """Feed the whole stream into ``hashers`` from the start, then rewind it."""
    r.seek(0)
    length = 0
    try:
        for chunk in _chunks(r, limit):
            length += len(chunk)
            for h in hashers:
                h.update(chunk)
    finally:
        r.seek(0)
    return length


def compute_md5_and_length(r: BinaryIO) -> tuple[bytes, int]:
    """Return the MD5 digest and the 32-bit length of a seekable stream."""
    h = hashlib.md5()
    length = _digest_stream(r, [h])
    return h.digest(), length & _MASK32


def compute_md5_and_length_with_limit(r: BinaryIO, limit: int) -> tuple[bytes, int]:
    """Like :func:`compute_md5_and_length`, reading at most ``limit`` bytes."""
    h = hashlib.md5()
    length = _digest_stream(r, [h], max(limit, 0))
    return h.digest(), length & _MASK32


def compute_sha1_and_length(r: BinaryIO) -> tuple[bytes, int]:
    """Return the SHA-1 digest and the 32-bit length of a seekable stream."""
    h = hashlib.sha1()
    length = _digest_stream(r, [h])
    return h.digest(), length & _MASK32


def compute_md5_and_sha1_and_length(r: BinaryIO) -> tuple[bytes, bytes, int]:
    """Return the MD5 digest, SHA-1 digest and length of a seekable stream."""
    md5 = hashlib.md5()
    sha1 = hashlib.sha1()
    length = _digest_stream(r, [md5, sha1])
    return md5.digest(), sha1.digest(), length


def _rotl(x: int, n: int) -> int:
    return ((x << n) | (x >> (32 - n))) & _MASK32


class _Sha1:
    """SHA-1 whose intermediate chaining state can be inspected."""

    def __init__(self) -> None:
        self._h = [0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0]
        self._pending = b""
        self._length = 0

    def update(self, data: bytes) -> None:
        self._length += len(data)
        buf = self._pending + bytes(data)
        full = len(buf) - len(buf) % 64
        for offset in range(0, full, 64):
            self._h = self._compress(self._h, buf[offset:offset + 64])
        self._pending = buf[full:]

    def state(self) -> bytes:
        """The chaining words, little endian, for the full blocks seen so far."""
        return struct.pack("<5I", *self._h)

    def digest(self) -> bytes:
        tail = self._pending + b"\x80"
        tail += b"\x00" * ((56 - len(tail)) % 64)
        tail += struct.pack(">Q", (self._length * 8) & 0xFFFFFFFFFFFFFFFF)
        h = list(self._h)
        for offset in range(0, len(tail), 64):
            h = self._compress(h, tail[offset:offset + 64])
        return struct.pack(">5I", *h)

    @staticmethod
    def _compress(h: list[int], chunk: bytes) -> list[int]:
        w = list(struct.unpack(">16I", chunk))
        for i in range(16, 80):
            w.append(_rotl(w[i - 3] ^ w[i - 8] ^ w[i - 14] ^ w[i - 16], 1))
        a, b, c, d, e = h
        for i, word in enumerate(w):
            if i < 20:
                f, k = (b & c) | (~b & d), 0x5A827999
            elif i < 40:
                f, k = b ^ c ^ d, 0x6ED9EBA1
            elif i < 60:
                f, k = (b & c) | (b & d) | (c & d), 0x8F1BBCDC
            else:
                f, k = b ^ c ^ d, 0xCA62C1D6
            temp = (_rotl(a, 5) + (f & _MASK32) + e + k + word) & _MASK32
            a, b, c, d, e = temp, a, _rotl(b, 30), c, d
        return [(x + y) & _MASK32 for x, y in zip(h, (a, b, c, d, e))]


def _read_full(r: BinaryIO, size: int) -> bytes:
    parts = []
    remaining = size
    while remaining > 0:
        chunk = r.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def compute_block_sha1(r: BinaryIO, block_size: int) -> list[bytes]:
    """Return the SHA-1 state after each full block, then the final digest.

    Each state holds the five chaining words in little-endian order.
    """
    if block_size <= 0:
        raise ValueError("block size must be positive")
    r.seek(0)
    result = []
    h = _Sha1()
    try:
        while True:
            block = _read_full(r, block_size)
            h.update(block)
            if len(block) != block_size:
                break
            result.append(h.state())
    finally:
        r.seek(0)
    result.append(h.digest())
    return result


def random_bytes(size: int) -> bytes:
    """Return ``size`` cryptographically random bytes."""
    return secrets.token_bytes(size)


def rand_u32() -> int:
    """Return a pseudo-random unsigned 32-bit integer."""
    return random.getrandbits(32)