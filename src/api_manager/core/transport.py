# src/api_manager/core/transport.py
"""
Транспорт: отправка запроса по сети.

ApiManager не знает про httpx или requests, он работает с Transport:
- HttpxTransport - httpx.AsyncClient, нативный async (по умолчанию)
- RequestsTransport - requests.Session в thread pool executor

Транспорт не выбрасывает сетевые ошибки: они классифицируются и
возвращаются в TransportResponse.error. Тело ответа читается полностью,
соединение освобождается до возврата.
"""

import asyncio
import functools
import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, Mapping, Optional

import httpx
import requests
from requests.adapters import HTTPAdapter

from .config import ApiManagerConfig, TimeoutConfig
from .exceptions import (
    ApiManagerException,
    ConfigurationError,
    EncodingError,
    classify_httpx_exception,
    classify_requests_exception,
)
from .headers import Headers
from .models import HTTPMethod, ParameterEncoding, QUERY_STRING_METHODS

ProgressCallback = Callable[[float], None]

DEFAULT_UPLOAD_CHUNK_SIZE = 64 * 1024


@dataclass
class TransportResponse:
    """
    Результат одной попытки.

    Attributes:
        status_code: HTTP статус, если сервер ответил
        content: Тело ответа, если есть
        url: Итоговый URL запроса (с query string)
        error: Классифицированная ошибка транспорта
    """
    status_code: Optional[int] = None
    content: Optional[bytes] = None
    url: Optional[str] = None
    error: Optional[ApiManagerException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class EncodedParameters:
    """
    Parameters laid out for the wire.

    Attributes:
        query: Параметры query string
        form: Параметры form body (application/x-www-form-urlencoded)
        content: Готовое тело (JSON)
        content_type: Content-Type для content
    """
    query: Optional[Dict[str, Any]] = None
    form: Optional[Dict[str, Any]] = None
    content: Optional[bytes] = None
    content_type: Optional[str] = None

    def apply_content_type(self, headers: Headers) -> Headers:
        """Copy of headers with Content-Type set, unless the caller chose one."""
        headers = headers.copy()
        if self.content_type and "Content-Type" not in headers:
            headers["Content-Type"] = self.content_type
        return headers


def encode_parameters(
    method: HTTPMethod,
    parameters: Optional[Mapping[str, Any]],
    encoding: ParameterEncoding,
) -> EncodedParameters:
    """
    Разложить параметры по query string или телу запроса.

    URL: query для GET/HEAD/DELETE, form body для остальных методов.
    JSON: JSON body.

    Raises:
        EncodingError: параметры не сериализуются в JSON

    Examples:
        >>> encode_parameters(HTTPMethod.GET, {"page": 1}, ParameterEncoding.URL).query
        {'page': 1}
        >>> encode_parameters(HTTPMethod.POST, {"a": 1}, ParameterEncoding.JSON).content
        b'{"a":1}'
    """
    if parameters is None:
        return EncodedParameters()

    # Копия: транспорт не должен менять параметры запроса между попытками
    params = dict(parameters)

    if encoding == ParameterEncoding.JSON:
        try:
            content = json.dumps(params, separators=(',', ':')).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise EncodingError(f"Parameters are not JSON serializable: {e}")
        return EncodedParameters(content=content, content_type="application/json")

    if method in QUERY_STRING_METHODS:
        return EncodedParameters(query=params)

    return EncodedParameters(form=params)


def _fraction(sent: int, total: int) -> float:
    return 1.0 if total <= 0 else min(sent / total, 1.0)


class Transport(ABC):
    """Сетевой коллаборатор ApiManager."""

    @abstractmethod
    async def send(
        self,
        url: str,
        method: HTTPMethod,
        parameters: Optional[Mapping[str, Any]],
        encoding: ParameterEncoding,
        headers: Headers,
    ) -> TransportResponse:
        """Выполнить data запрос."""
        pass

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        url: str,
        headers: Headers,
        progress: Optional[ProgressCallback] = None,
    ) -> TransportResponse:
        """Загрузить данные методом PUT."""
        pass

    async def close(self) -> None:
        """Освободить ресурсы."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTPX
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HttpxTransport(Transport):
    """
    Транспорт на базе httpx.AsyncClient.

    Клиент создаётся лениво при первом запросе.

    Example:
        >>> transport = HttpxTransport(timeout=TimeoutConfig(connect=3, read=10))
        >>> response = await transport.send(url, HTTPMethod.GET, None, ParameterEncoding.URL, Headers())
        >>> await transport.close()
    """

    def __init__(
        self,
        timeout: Optional[TimeoutConfig] = None,
        verify_ssl: bool = True,
        upload_chunk_size: int = DEFAULT_UPLOAD_CHUNK_SIZE,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            timeout: Конфигурация таймаутов
            verify_ssl: Проверять SSL сертификаты
            upload_chunk_size: Размер чанка upload (байты)
            client: Готовый httpx.AsyncClient (не закрывается транспортом)
        """
        timeout = timeout or TimeoutConfig()
        self._timeout = httpx.Timeout(
            connect=timeout.connect,
            read=timeout.read,
            write=timeout.write or timeout.read,
            pool=timeout.pool,
        )
        self._verify_ssl = verify_ssl
        self._upload_chunk_size = upload_chunk_size
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Получить или создать httpx клиент."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify_ssl,
            )
        return self._client

    async def send(self, url, method, parameters, encoding, headers) -> TransportResponse:
        try:
            encoded = encode_parameters(method, parameters, encoding)
        except EncodingError as e:
            e.url = url
            return TransportResponse(url=url, error=e)

        client = await self._get_client()
        try:
            # client.request читает тело целиком и закрывает поток ответа
            response = await client.request(
                method.value,
                url,
                params=encoded.query,
                data=encoded.form,
                content=encoded.content,
                headers=dict(encoded.apply_content_type(headers).items()),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return TransportResponse(url=url, error=classify_httpx_exception(e, url))

        return TransportResponse(
            status_code=response.status_code,
            content=response.content,
            url=str(response.request.url),
        )

    async def _stream(self, data: bytes, progress: Optional[ProgressCallback]) -> AsyncIterator[bytes]:
        total = len(data)
        if total == 0:
            if progress:
                progress(1.0)
            return
        view = memoryview(data)
        for offset in range(0, total, self._upload_chunk_size):
            chunk = bytes(view[offset:offset + self._upload_chunk_size])
            yield chunk
            if progress:
                progress(_fraction(offset + len(chunk), total))

    async def upload(self, data, url, headers, progress=None) -> TransportResponse:
        client = await self._get_client()
        request_headers = dict(headers.items())
        # Явный Content-Length: иначе httpx отправит chunked, а presigned PUT его не примет
        request_headers["Content-Length"] = str(len(data))
        try:
            response = await client.request(
                HTTPMethod.PUT.value,
                url,
                content=self._stream(data, progress),
                headers=request_headers,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return TransportResponse(url=url, error=classify_httpx_exception(e, url))

        return TransportResponse(
            status_code=response.status_code,
            content=response.content,
            url=str(response.request.url),
        )

    async def close(self) -> None:
        """Закрыть клиент и освободить ресурсы."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUESTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class _ProgressReader:
    """
    File-like обёртка над bytes для requests.

    requests берёт длину из __len__ (Content-Length), а http.client читает
    тело блоками через read(), каждый блок сообщает прогресс.
    """

    def __init__(self, data: bytes, progress: Optional[ProgressCallback]):
        self._data = data
        self._progress = progress
        self._offset = 0

    def __len__(self) -> int:
        return len(self._data) - self._offset

    def read(self, size: int = -1) -> bytes:
        total = len(self._data)
        if size is None or size < 0:
            size = total - self._offset
        chunk = self._data[self._offset:self._offset + size]
        self._offset += len(chunk)
        if chunk and self._progress:
            self._progress(_fraction(self._offset, total))
        return chunk


class RequestsTransport(Transport):
    """
    Транспорт на базе requests.Session.

    Блокирующие вызовы выполняются в thread pool executor, поэтому event
    loop не блокируется. Каждый поток executor получает свою сессию.

    Example:
        >>> transport = RequestsTransport(timeout=TimeoutConfig(connect=3, read=10))
    """

    def __init__(
        self,
        timeout: Optional[TimeoutConfig] = None,
        verify_ssl: bool = True,
    ):
        self._timeout = (timeout or TimeoutConfig()).as_tuple()
        self._verify_ssl = verify_ssl
        self._local = threading.local()
        self._sessions = []
        self._sessions_lock = threading.Lock()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        # Ретраи решает делегат ApiManager, не urllib3
        adapter = HTTPAdapter(max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        return session

    @property
    def session(self) -> requests.Session:
        """Thread-local сессия, создаётся лениво."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._create_session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    async def _run(self, func, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    def _perform(self, method: str, url: str, **kwargs) -> TransportResponse:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self._timeout,
                verify=self._verify_ssl,
                **kwargs
            )
        except requests.exceptions.RequestException as e:
            return TransportResponse(url=url, error=classify_requests_exception(e, url))

        try:
            return TransportResponse(
                status_code=response.status_code,
                content=response.content,
                url=response.request.url if response.request is not None else url,
            )
        finally:
            response.close()

    async def send(self, url, method, parameters, encoding, headers) -> TransportResponse:
        try:
            encoded = encode_parameters(method, parameters, encoding)
        except EncodingError as e:
            e.url = url
            return TransportResponse(url=url, error=e)

        return await self._run(
            self._perform,
            method.value,
            url,
            params=encoded.query,
            data=encoded.form if encoded.form is not None else encoded.content,
            headers=dict(encoded.apply_content_type(headers).items()),
        )

    async def upload(self, data, url, headers, progress=None) -> TransportResponse:
        if not data:
            body = b""
            if progress:
                progress(1.0)
        else:
            body = _ProgressReader(data, progress)

        return await self._run(
            self._perform,
            HTTPMethod.PUT.value,
            url,
            data=body,
            headers=dict(headers.items()),
        )

    async def close(self) -> None:
        """Закрывает все сессии (из всех потоков executor)."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()


def create_transport(config: ApiManagerConfig) -> Transport:
    """
    Транспорт по config.backend.

    Raises:
        ConfigurationError: неизвестный backend
    """
    if config.backend == "httpx":
        return HttpxTransport(
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            upload_chunk_size=config.upload_chunk_size,
        )
    if config.backend == "requests":
        return RequestsTransport(timeout=config.timeout, verify_ssl=config.verify_ssl)
    raise ConfigurationError(f"Unknown transport backend: {config.backend!r}")
