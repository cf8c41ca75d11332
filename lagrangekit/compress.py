"""Zlib and gzip helpers and IPv4 address formatting."""

from __future__ import annotations

import gzip
import socket
import struct
import zlib


def zlib_compress(data: bytes) -> bytes:
    """Compress ``data`` into a zlib stream at the default level."""
    return zlib.compress(data)


def zlib_uncompress(src: bytes) -> bytes:
    """Decompress a zlib stream; returns b"" if ``src`` is not one."""
    try:
        return zlib.decompress(src)
    except zlib.error:
        return b""


def gzip_compress(data: bytes) -> bytes:
    """Compress ``data`` into a gzip stream with no timestamp."""
    return gzip.compress(data, mtime=0)


def gzip_uncompress(src: bytes) -> bytes:
    """Decompress a gzip stream; returns b"" if ``src`` is not one."""
    try:
        return gzip.decompress(src)
    except (OSError, EOFError, zlib.error):
        return b""


def uint32_to_ipv4_address(i: int) -> str:
    """Format a little-endian packed IPv4 address as dotted decimal."""
    return socket.inet_ntoa(struct.pack("<I", i & 0xFFFFFFFF))