"""Small input/output, string and time helpers."""

from __future__ import annotations

import binascii
import contextlib
import secrets
import sys
import threading
import time
from datetime import datetime
from typing import Any


class StringInterner:
    """Keeps one shared instance of every string it has seen."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._strings: dict[str, str] = {}

    def intern(self, s: str) -> str:
        """Return the stored instance equal to ``s``, storing ``s`` if new."""
        with self._lock:
            return self._strings.setdefault(s, s)


def read_line() -> str:
    """Read one line from standard input, stripped.

    Returns an empty string when the input ends before a newline.
    """
    try:
        line = sys.stdin.readline()
    except (OSError, ValueError):
        return ""
    if not line.endswith("\n"):
        return ""
    return line.strip()


def close_io(reader: Any) -> None:
    """Close ``reader`` if it can be closed, ignoring any failure."""
    close = getattr(reader, "close", None)
    if callable(close):
        with contextlib.suppress(Exception):
            close()


def new_uuid() -> str:
    """Return a random version 4 UUID in its canonical text form."""
    u = bytearray(secrets.token_bytes(16))
    u[6] = (u[6] & 0x0F) | 0x40
    u[8] = (u[8] & 0x3F) | 0x80
    h = u.hex()
    return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}"


def must_parse_hex_str(s: str) -> bytes:
    """Decode a hexadecimal string, raising ValueError if it is malformed."""
    try:
        return binascii.unhexlify(s)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid hex string: {s!r}") from exc


def new_trace() -> str:
    """Return a random trace identifier of the form ``00-<32 hex>-<16 hex>-01``."""
    random_part = secrets.token_bytes(24)
    return f"00-{random_part[:16].hex()}-{random_part[16:].hex()}-01"


def timestamp() -> int:
    """Return the current Unix time in whole seconds."""
    return int(time.time())


def uin_timestamp(uin: int) -> str:
    """Return ``<uin>_<MMDDhhmmss><YY>_<milliseconds>`` for the current time."""
    now = datetime.now()
    return f"{uin}_{now:%m%d%H%M%S}{now.year % 100:02d}_{now.microsecond // 1000}"