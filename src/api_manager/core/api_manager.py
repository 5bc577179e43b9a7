# src/api_manager/core/api_manager.py
"""
ApiManager - фасад для RESTful запросов и загрузки бинарных данных.

Цикл одной попытки:
    проверка сети -> заголовки -> транспорт -> (status, data) ->
    on_status -> should_retry -> возврат или следующая попытка

Retry - это цикл, а не рекурсия: счётчика и задержек нет, ограничивать
повторы должен делегат.
"""

import asyncio
import inspect
import time
import uuid
import warnings
from typing import Any, Optional, Set
from urllib.parse import urlparse

from .config import ApiManagerConfig
from .connectivity import ConnectivityProbe, SocketConnectivityProbe
from .delegate import DEFAULT_DELEGATE, ApiManagerDelegate, DelegateRef, RequestKind
from .headers import Headers, default_upload_headers, merge_headers
from .logging import ApiManagerLogger
from .logging.filters import reset_request_id, set_request_id
from .models import DataRequest, HTTPMethod, Outcome, UploadRequest
from .transport import Transport, TransportResponse, create_transport


class ApiManager:
    """
    Оркестратор запросов: сеть, заголовки, транспорт, retry.

    Конфигурация (base_url, allow_logs, delegate) изменяема, но задавать её
    следует при старте, а не параллельно с запросами в полёте.

    Example:
        >>> config = ApiManagerConfig(base_url="https://api.example.com")
        >>> async with ApiManager(config, delegate=my_delegate) as manager:
        ...     outcome = await manager.request(DataRequest("/v1/items", "GET"))
        ...     print(outcome.status, outcome.json())
    """

    def __init__(
        self,
        config: Optional[ApiManagerConfig] = None,
        *,
        transport: Optional[Transport] = None,
        connectivity: Optional[ConnectivityProbe] = None,
        delegate: Optional[ApiManagerDelegate] = None,
        logger: Optional[ApiManagerLogger] = None,
    ):
        """
        Args:
            config: ApiManagerConfig (по умолчанию пустой base_url, логи выключены)
            transport: Транспорт (по умолчанию по config.backend)
            connectivity: Проверка сети (по умолчанию SocketConnectivityProbe)
            delegate: Делегат, хранится по слабой ссылке
            logger: Логгер диагностики (по умолчанию из config.logging)
        """
        config = config or ApiManagerConfig()
        self._config = config
        self.base_url: str = config.base_url
        self.allow_logs: bool = config.allow_logs

        self._transport = transport or create_transport(config)
        self._connectivity = connectivity or SocketConnectivityProbe.from_config(config.connectivity)
        self._delegate_ref = DelegateRef(delegate)

        if logger is None:
            logger_name = "api_manager"
            if config.logging and config.base_url:
                domain = urlparse(config.base_url).netloc
                if domain:
                    logger_name = f"api_manager.{domain}"
            logger = ApiManagerLogger(config=config.logging, name=logger_name)
        self._logger = logger

        self._background_tasks: Set[asyncio.Task] = set()

    # ==================== Жизненный цикл ====================

    async def __aenter__(self) -> "ApiManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Дождаться фоновых вызовов, закрыть транспорт и логгер."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        await self._transport.close()
        self._logger.close()

    # ==================== Свойства ====================

    @property
    def config(self) -> ApiManagerConfig:
        """Конфигурация, с которой создан менеджер (read-only)."""
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def connectivity(self) -> ConnectivityProbe:
        return self._connectivity

    @property
    def delegate(self) -> Optional[ApiManagerDelegate]:
        """Текущий делегат, или None если не задан или уже собран GC."""
        return self._delegate_ref.peek()

    @delegate.setter
    def delegate(self, value: Optional[ApiManagerDelegate]) -> None:
        self._delegate_ref.set(value)

    @property
    def is_connected(self) -> bool:
        """Свежий ответ probe, без кеширования."""
        return self._connectivity.is_connected()

    # ==================== Запросы ====================

    async def request(self, request: DataRequest) -> Outcome:
        """
        Выполнить RESTful запрос.

        Никогда не выбрасывает исключений из-за сети или статуса ответа:
        любой исход приходит в Outcome.

        Args:
            request: Описание запроса

        Returns:
            Outcome(status, data). Без сети: (NOT_CONNECTED_STATUS, None)
        """
        token = set_request_id(uuid.uuid4().hex)
        try:
            attempt = 0
            while True:
                attempt += 1
                if not await self._check_connectivity():
                    self._debug("Not connected", method=request.method.value, path=request.path)
                    return Outcome.not_connected()

                headers = await self._resolve_request_headers(request)
                url = self.base_url + request.path

                started = time.monotonic()
                response = await self._transport.send(
                    url=url,
                    method=request.method,
                    parameters=request.parameters,
                    encoding=request.encoding,
                    headers=headers,
                )
                elapsed = time.monotonic() - started

                self._debug(
                    "Request finished",
                    method=request.method.value,
                    url=url,
                    headers=headers,
                    parameters=request.parameters or {},
                    encoding=request.encoding.value,
                    request_time=round(elapsed, 4),
                    status=response.status_code,
                    attempt=attempt,
                    **self._error_fields(response)
                )

                outcome = await self._handle_response(response, url)

                if not await self._should_retry(RequestKind.DATA, request, outcome.status):
                    return outcome

                self._debug("Retrying request", method=request.method.value, url=url,
                            status=outcome.status, attempt=attempt)
        finally:
            reset_request_id(token)

    async def upload(self, request: UploadRequest) -> Outcome:
        """
        Загрузить данные методом PUT на request.url.

        Прогресс передаётся в request.progress_handler и в лог.

        Returns:
            Outcome(status, data). Без сети: (NOT_CONNECTED_STATUS, None)
        """
        token = set_request_id(uuid.uuid4().hex)
        try:
            attempt = 0
            while True:
                attempt += 1
                if not await self._check_connectivity():
                    self._debug("Not connected", method=HTTPMethod.PUT.value, url=request.url)
                    return Outcome.not_connected()

                headers = await self._resolve_upload_headers(request)

                def on_progress(fraction: float) -> None:
                    request.report_progress(fraction)
                    self._debug("Upload progress", fraction=round(fraction, 4))

                started = time.monotonic()
                response = await self._transport.upload(
                    data=request.data,
                    url=request.url,
                    headers=headers,
                    progress=on_progress,
                )
                elapsed = time.monotonic() - started

                self._debug(
                    "Upload finished",
                    method=HTTPMethod.PUT.value,
                    url=request.url,
                    headers=headers,
                    file_name=request.file_name,
                    mime_type=request.mime_type,
                    size=request.size,
                    request_time=round(elapsed, 4),
                    status=response.status_code,
                    attempt=attempt,
                    **self._error_fields(response)
                )

                outcome = await self._handle_response(response, request.url)

                if not await self._should_retry(RequestKind.UPLOAD, request, outcome.status):
                    return outcome

                self._debug("Retrying upload", url=request.url, status=outcome.status, attempt=attempt)
        finally:
            reset_request_id(token)

    def request_nowait(self, request: DataRequest) -> "asyncio.Task[Outcome]":
        """
        Запустить request() в фоне и сразу вернуть управление.

        Должен вызываться из работающего event loop.
        """
        return self._spawn(self.request(request))

    def upload_nowait(self, request: UploadRequest) -> "asyncio.Task[Outcome]":
        """Запустить upload() в фоне и сразу вернуть управление."""
        return self._spawn(self.upload(request))

    # ==================== Внутренние методы ====================

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        # Держим ссылку, иначе задачу может собрать GC до завершения
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def _check_connectivity(self) -> bool:
        # Probe синхронный и может ходить в сеть: выполняем в executor
        loop = asyncio.get_running_loop()
        return bool(await loop.run_in_executor(None, self._connectivity.is_connected))

    async def _handle_response(self, response: TransportResponse, url: str) -> Outcome:
        """Привести ответ к Outcome и уведомить делегата о статусе."""
        outcome = Outcome(response.status_code, response.content)

        if response.status_code is not None:
            await self._call_delegate(
                "on_status", None, self._relative_url(response.url or url), response.status_code
            )

        return outcome

    def _relative_url(self, url: str) -> str:
        if not self.base_url:
            return url
        return url.replace(self.base_url, "")

    async def _resolve_request_headers(self, request: DataRequest) -> Headers:
        added = await self._call_delegate("added_headers", None)
        if added is None:
            return request.headers.copy() if request.headers is not None else Headers()
        return merge_headers(added, request.headers)

    async def _resolve_upload_headers(self, request: UploadRequest) -> Headers:
        upload_headers = await self._call_delegate(
            "default_upload_headers", default_upload_headers(request.mime_type), request.mime_type
        )
        added = await self._call_delegate("added_headers", None)
        if added is None:
            return Headers(upload_headers)
        return merge_headers(added, upload_headers)

    async def _should_retry(self, kind: RequestKind, request: Any, status_code: Optional[int]) -> bool:
        hook = "should_retry_request" if kind is RequestKind.DATA else "should_retry_upload"
        decision = await self._call_delegate(hook, False, request, status_code)
        if decision:
            self._debug("Retry requested", policy=kind.value, status=status_code)
        return bool(decision)

    async def _call_delegate(self, hook: str, default: Any, *args: Any) -> Any:
        """
        Вызвать хук делегата; awaitable результат дожидается.

        Без делегата (или если он собран GC) используется DEFAULT_DELEGATE.
        Исключение в хуке: warning + значение по умолчанию.
        """
        delegate = self._delegate_ref.get()
        method = getattr(delegate, hook, None)
        if method is None:
            method = getattr(DEFAULT_DELEGATE, hook)

        try:
            result = method(*args)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as e:
            warnings.warn(f"Delegate {delegate.__class__.__name__} error in {hook}: {e}")
            if self.allow_logs:
                self._logger.warning("Delegate hook failed", hook=hook, error=str(e),
                                     error_type=type(e).__name__)
            return default

    def _error_fields(self, response: TransportResponse) -> dict:
        if response.error is None:
            return {}
        return {"error": str(response.error), "error_type": type(response.error).__name__}

    def _debug(self, message: str, **fields: Any) -> None:
        """Диагностика, только при allow_logs."""
        if not self.allow_logs:
            return
        self._logger.debug(message, **fields)
