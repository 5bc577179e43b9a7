"""Tests for connectivity probes."""

import socket
from unittest.mock import MagicMock, patch

from api_manager.core.config import ConnectivityConfig
from api_manager.core.connectivity import SocketConnectivityProbe, StaticConnectivityProbe


class TestSocketConnectivityProbe:

    def test_from_config(self):
        probe = SocketConnectivityProbe.from_config(ConnectivityConfig(host="8.8.8.8", port=443, timeout=2))
        assert (probe.host, probe.port, probe.timeout) == ("8.8.8.8", 443, 2)

    def test_connected(self):
        with patch("api_manager.core.connectivity.socket.create_connection") as create:
            create.return_value = MagicMock()
            assert SocketConnectivityProbe().is_connected() is True
            create.assert_called_once_with(("1.1.1.1", 53), timeout=1.5)

    def test_not_connected(self):
        with patch("api_manager.core.connectivity.socket.create_connection",
                   side_effect=socket.timeout("timed out")):
            assert SocketConnectivityProbe().is_connected() is False

    def test_dns_failure(self):
        with patch("api_manager.core.connectivity.socket.create_connection",
                   side_effect=socket.gaierror("no dns")):
            assert SocketConnectivityProbe(host="nowhere.invalid").is_connected() is False


def test_static_probe_is_settable():
    probe = StaticConnectivityProbe()
    assert probe.is_connected() is True
    probe.connected = False
    assert probe.is_connected() is False
