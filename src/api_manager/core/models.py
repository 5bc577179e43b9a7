"""
Модели запросов и результата.

DataRequest и UploadRequest неизменяемы (frozen dataclasses), поэтому одно
и то же значение безопасно повторно отправлять при retry.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, NamedTuple, Optional, Union

from .headers import as_headers

# Reserved status for "not attempted: no connectivity". Never a valid HTTP status.
NOT_CONNECTED_STATUS = -1010

ProgressHandler = Callable[[float], None]


class HTTPMethod(str, Enum):
    """HTTP methods."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def coerce(cls, value: Union[str, "HTTPMethod"]) -> "HTTPMethod":
        """Accept an enum member or a method name in any case."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {value!r}") from None


class ParameterEncoding(str, Enum):
    """
    Способ кодирования параметров.

    URL: query string для GET/HEAD/DELETE, form body для остальных методов.
    JSON: JSON body.
    """
    URL = "url"
    JSON = "json"

    @classmethod
    def default_for(cls, method: HTTPMethod) -> "ParameterEncoding":
        if method in (HTTPMethod.GET, HTTPMethod.PATCH):
            return cls.URL
        return cls.JSON


# Methods whose URL-encoded parameters go to the query string instead of the body
QUERY_STRING_METHODS = frozenset({HTTPMethod.GET, HTTPMethod.HEAD, HTTPMethod.DELETE})


def _freeze_parameters(parameters: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if parameters is None:
        return None
    return MappingProxyType(dict(parameters))


def _freeze_headers(headers: Optional[Mapping[str, str]]) -> Optional[Mapping[str, str]]:
    # Read-only view over a private copy; lookups stay case-insensitive
    headers = as_headers(headers)
    if headers is None:
        return None
    return MappingProxyType(headers)


@dataclass(frozen=True)
class DataRequest:
    """
    Описание RESTful запроса.

    Args:
        path: Путь, дописывается к base_url без нормализации
        method: HTTP метод (enum или строка)
        parameters: Параметры (query или body, в зависимости от encoding)
        headers: Заголовки запроса
        encoding: Кодирование параметров. По умолчанию URL для GET/PATCH,
            JSON для остальных методов

    Examples:
        >>> DataRequest("/v1/items", "get", parameters={"page": 1})
        >>> DataRequest("/v1/items", HTTPMethod.POST, parameters={"name": "x"})
    """
    path: str
    method: HTTPMethod = HTTPMethod.GET
    parameters: Optional[Mapping[str, Any]] = None
    headers: Optional[Mapping[str, str]] = None
    encoding: Optional[ParameterEncoding] = None

    def __post_init__(self):
        """Валидация и заморозка."""
        if not isinstance(self.path, str):
            raise ValueError("path must be a string")

        method = HTTPMethod.coerce(self.method)
        object.__setattr__(self, 'method', method)
        object.__setattr__(self, 'parameters', _freeze_parameters(self.parameters))
        object.__setattr__(self, 'headers', _freeze_headers(self.headers))

        if self.encoding is None:
            object.__setattr__(self, 'encoding', ParameterEncoding.default_for(method))
        else:
            object.__setattr__(self, 'encoding', ParameterEncoding(self.encoding))


@dataclass(frozen=True)
class UploadRequest:
    """
    Описание загрузки бинарных данных (всегда PUT).

    Args:
        url: Абсолютный URL назначения, используется как есть
        data: Полезная нагрузка
        file_name: Имя файла (только для логов)
        mime_type: MIME тип, из него строятся заголовки по умолчанию
        progress_handler: Callback с долей загрузки от 0.0 до 1.0
    """
    url: str
    data: bytes
    file_name: str
    mime_type: str
    progress_handler: Optional[ProgressHandler] = field(default=None, compare=False)

    def __post_init__(self):
        """Валидация."""
        if not self.url:
            raise ValueError("url must not be empty")
        if not self.mime_type:
            raise ValueError("mime_type must not be empty")
        if not isinstance(self.data, bytes):
            object.__setattr__(self, 'data', bytes(self.data))

    @property
    def size(self) -> int:
        return len(self.data)

    def report_progress(self, fraction: float) -> None:
        """Forward progress to the caller's handler, if any."""
        if self.progress_handler is not None:
            self.progress_handler(fraction)


class Outcome(NamedTuple):
    """
    Normalized result of a call: ``(status, data)``.

    Both fields are optional. A connectivity failure is
    ``(NOT_CONNECTED_STATUS, None)``; a transport failure without a server
    response is ``(None, None)``; an error status from the server keeps both
    the status and the error payload.
    """
    status: Optional[int]
    data: Optional[bytes]

    @classmethod
    def not_connected(cls) -> "Outcome":
        return cls(NOT_CONNECTED_STATUS, None)

    @property
    def is_connected_failure(self) -> bool:
        return self.status == NOT_CONNECTED_STATUS

    @property
    def text(self) -> Optional[str]:
        if self.data is None:
            return None
        return self.data.decode("utf-8", errors="replace")

    def json(self) -> Optional[dict]:
        """Body as a JSON object, or None if absent, invalid or not an object."""
        if not self.data:
            return None
        try:
            value = json.loads(self.data)
        except ValueError:
            return None
        return value if isinstance(value, dict) else None
