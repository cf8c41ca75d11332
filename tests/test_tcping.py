import socket

import pytest

from lagrangekit.tcping import PingResult, run_tcp_ping_loop


@pytest.fixture
def listening_address():
    server = socket.create_server(("127.0.0.1", 0), backlog=16)
    host, port = server.getsockname()
    yield f"{host}:{port}"
    server.close()


@pytest.fixture
def closed_address():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    host, port = sock.getsockname()
    sock.close()
    return f"{host}:{port}"


def test_zero_count():
    assert run_tcp_ping_loop("127.0.0.1:1", 0) == PingResult(0, 0, 9999)


def test_negative_count():
    assert run_tcp_ping_loop("127.0.0.1:1", -2) == PingResult(-2, -2, 9999)


def test_reachable_endpoint(listening_address):
    result = run_tcp_ping_loop(listening_address, 2)
    assert result.packets_sent == 2
    assert result.packets_loss == 0
    assert 0 <= result.avg_time_mill < 9999


def test_unreachable_endpoint(closed_address):
    result = run_tcp_ping_loop(closed_address, 2)
    assert result == PingResult(2, 2, 9999)


@pytest.mark.parametrize("address", ["no-port-here", "127.0.0.1:", "127.0.0.1:notaport"])
def test_malformed_address_counts_as_loss(address):
    assert run_tcp_ping_loop(address, 1) == PingResult(1, 1, 9999)