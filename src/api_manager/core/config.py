"""
Система конфигурации для API Manager.

Все конфиги immutable (frozen dataclasses). Изменяемые во время работы
значения (base_url, allow_logs, delegate) живут на самом ApiManager.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

SUPPORTED_BACKENDS = ("httpx", "requests")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов транспорта. ApiManager сам таймаутов не вводит.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)
        write: Таймаут отправки (сек), по умолчанию равен read
        pool: Ожидание свободного соединения в пуле (сек)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
        >>> TimeoutConfig(connect=3, read=60, write=120)
    """
    connect: float = 5.0
    read: float = 30.0
    write: Optional[float] = None
    pool: Optional[float] = None

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")
        if self.write is not None and self.write <= 0:
            raise ValueError("write timeout must be positive")
        if self.pool is not None and self.pool <= 0:
            raise ValueError("pool timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONNECTIVITY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ConnectivityConfig:
    """
    Куда стучится SocketConnectivityProbe.

    Args:
        host: Хост для TCP проверки
        port: Порт
        timeout: Таймаут проверки (сек)
    """
    host: str = "1.1.1.1"
    port: int = 53
    timeout: float = 1.5

    def __post_init__(self):
        """Валидация."""
        if not self.host:
            raise ValueError("connectivity host must not be empty")
        if not 0 < self.port < 65536:
            raise ValueError("connectivity port must be in 1..65535")
        if self.timeout <= 0:
            raise ValueError("connectivity timeout must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ApiManagerConfig:
    """
    Главная конфигурация ApiManager.

    Args:
        base_url: Базовый URL. Путь запроса дописывается к нему как есть,
            без добавления или удаления слешей
        allow_logs: Писать диагностику каждого запроса
        timeout: Конфигурация таймаутов
        verify_ssl: Проверять SSL сертификаты
        backend: Транспорт по умолчанию: "httpx" или "requests"
        upload_chunk_size: Размер чанка upload (байты), шаг отчёта о прогрессе
        connectivity: Параметры проверки сети
        logging: Конфигурация логирования (None = только NullHandler)

    Examples:
        >>> config = ApiManagerConfig(base_url="https://api.example.com")
        >>> config = ApiManagerConfig.create(base_url="https://api.example.com", allow_logs=True)
    """
    base_url: str = ""
    allow_logs: bool = False
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    verify_ssl: bool = True
    backend: str = "httpx"
    upload_chunk_size: int = 64 * 1024
    connectivity: ConnectivityConfig = field(default_factory=ConnectivityConfig)
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация."""
        if self.base_url is None:
            object.__setattr__(self, 'base_url', "")
        if self.backend not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"backend must be one of {', '.join(SUPPORTED_BACKENDS)}, got {self.backend!r}"
            )
        if self.upload_chunk_size <= 0:
            raise ValueError("upload_chunk_size must be positive")

    @classmethod
    def create(
        cls,
        base_url: str = "",
        allow_logs: bool = False,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 30,
        connect_timeout: Optional[float] = None,
        verify_ssl: bool = True,
        backend: str = "httpx",
        logging: Optional['LoggingConfig'] = None,
        **kwargs
    ) -> 'ApiManagerConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            allow_logs: Включить диагностические логи
            timeout: Таймаут (число, (connect, read) или TimeoutConfig)
            connect_timeout: Таймаут подключения (переопределяет timeout)
            verify_ssl: Проверять SSL
            backend: "httpx" или "requests"
            logging: Конфигурация логирования

        Examples:
            >>> config = ApiManagerConfig.create(timeout=60)
            >>> config = ApiManagerConfig.create(timeout=(5, 60), backend="requests")
        """
        if isinstance(timeout, TimeoutConfig):
            timeout_cfg = timeout
        elif isinstance(timeout, tuple):
            timeout_cfg = TimeoutConfig(connect=timeout[0], read=timeout[1])
        else:
            timeout_cfg = TimeoutConfig(read=timeout)

        if connect_timeout is not None:
            timeout_cfg = replace(timeout_cfg, connect=connect_timeout)

        return cls(
            base_url=base_url,
            allow_logs=allow_logs,
            timeout=timeout_cfg,
            verify_ssl=verify_ssl,
            backend=backend,
            logging=logging,
            **kwargs
        )

    def with_base_url(self, base_url: str) -> 'ApiManagerConfig':
        """Создать новый конфиг с другим base_url."""
        return replace(self, base_url=base_url)

    def with_logs(self, allow_logs: bool = True) -> 'ApiManagerConfig':
        """Создать новый конфиг с включёнными (или выключенными) логами."""
        return replace(self, allow_logs=allow_logs)
