"""
Проверка наличия сети.

ApiManager опрашивает probe перед каждой попыткой и не кеширует ответ.
"""

import logging
import socket
from abc import ABC, abstractmethod

from .config import ConnectivityConfig

logger = logging.getLogger(__name__)


class ConnectivityProbe(ABC):
    """Синхронная проверка: есть ли маршрут в сеть."""

    @abstractmethod
    def is_connected(self) -> bool:
        pass


class SocketConnectivityProbe(ConnectivityProbe):
    """
    Открывает и сразу закрывает TCP соединение с host:port.

    Examples:
        >>> probe = SocketConnectivityProbe()  # 1.1.1.1:53
        >>> probe = SocketConnectivityProbe(host="api.example.com", port=443, timeout=3)
    """

    def __init__(self, host: str = "1.1.1.1", port: int = 53, timeout: float = 1.5):
        self.host = host
        self.port = port
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ConnectivityConfig) -> "SocketConnectivityProbe":
        return cls(host=config.host, port=config.port, timeout=config.timeout)

    def is_connected(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError as e:
            logger.debug("Connectivity probe to %s:%s failed: %s", self.host, self.port, e)
            return False


class StaticConnectivityProbe(ConnectivityProbe):
    """Probe with a fixed, settable answer."""

    def __init__(self, connected: bool = True):
        self.connected = connected

    def is_connected(self) -> bool:
        return self.connected
