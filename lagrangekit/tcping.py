"""Measure reachability and latency of a TCP endpoint."""

from __future__ import annotations

import socket
import time
from dataclasses import dataclass

_FAILED_MS = 9999
_DIAL_TIMEOUT = 10.0
_PAUSE = 0.1


@dataclass
class PingResult:
    """Outcome of a series of TCP connection attempts."""

    packets_sent: int
    packets_loss: int
    avg_time_mill: int


def _split_address(ipport: str) -> tuple[str, int]:
    host, sep, port = ipport.rpartition(":")
    if not sep or not port:
        raise ValueError(f"missing port in address {ipport!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, int(port)


def _tcping(ipport: str) -> int:
    """Return the milliseconds taken to open a connection to ``ipport``."""
    start = time.monotonic_ns()
    with socket.create_connection(_split_address(ipport), timeout=_DIAL_TIMEOUT):
        pass
    return (time.monotonic_ns() - start) // 1_000_000


def run_tcp_ping_loop(ipport: str, count: int) -> PingResult:
    """Connect to ``ipport`` ``count`` times and report losses and mean time.

    The mean is 9999 when no attempt succeeded.
    """
    result = PingResult(packets_sent=count, packets_loss=count, avg_time_mill=_FAILED_MS)
    if count <= 0:
        return result
    durations = []
    for _ in range(count):
        try:
            durations.append(_tcping(ipport))
        except (OSError, ValueError):
            pass
        else:
            result.packets_loss -= 1
        time.sleep(_PAUSE)
    if durations:
        result.avg_time_mill = sum(durations) // len(durations)
    return result