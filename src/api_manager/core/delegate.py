# src/api_manager/core/delegate.py
"""
Делегат ApiManager: политика retry, дополнительные заголовки, реакция на статус.

Менеджер хранит делегата по слабой ссылке (DelegateRef) и не продлевает
время его жизни. Если делегат собран GC, используется поведение по
умолчанию: без retry и без дополнительных заголовков.
"""

import weakref
from enum import Enum
from typing import Optional

from .headers import Headers, default_upload_headers
from .models import DataRequest, UploadRequest


class RequestKind(str, Enum):
    """Which retry policy is being asked."""
    DATA = "data"
    UPLOAD = "upload"


class ApiManagerDelegate:
    """
    Базовый класс делегата. Все хуки имеют реализацию по умолчанию,
    переопределяйте только нужные.

    Любой хук может быть корутиной: ApiManager дожидается awaitable результата.

    Example:
        >>> class SessionDelegate(ApiManagerDelegate):
        ...     def added_headers(self):
        ...         return Headers({"Authorization": f"Bearer {self.token}"})
        ...
        ...     def on_status(self, url, status_code):
        ...         if status_code == 401:
        ...             self.logout()
        ...
        ...     def should_retry_request(self, request, status_code):
        ...         return status_code == 401 and self.refresh_token()
    """

    def should_retry_request(self, request: DataRequest, status_code: Optional[int]) -> bool:
        """
        Вызывается один раз после каждой завершённой попытки data запроса.

        Returns:
            True чтобы отправить тот же запрос ещё раз
        """
        return False

    def should_retry_upload(self, request: UploadRequest, status_code: Optional[int]) -> bool:
        """Same as should_retry_request, for uploads."""
        return False

    def added_headers(self) -> Optional[Headers]:
        """Заголовки, добавляемые к каждому запросу (например, Authorization)."""
        return None

    def default_upload_headers(self, mime_type: str) -> Headers:
        """Заголовки upload запроса по умолчанию."""
        return default_upload_headers(mime_type)

    def on_status(self, url: str, status_code: int) -> None:
        """
        Уведомление о статусе ответа. Например, logout при 401.

        Args:
            url: URL запроса без base_url
            status_code: HTTP статус
        """
        pass


# Shared fallback used whenever no delegate is set or it has been collected
DEFAULT_DELEGATE = ApiManagerDelegate()


class DelegateRef:
    """
    Non-owning holder for the current delegate.

    Example:
        >>> ref = DelegateRef(my_delegate)
        >>> ref.get()  # my_delegate, or DEFAULT_DELEGATE once it is gone
    """

    def __init__(self, delegate: Optional[ApiManagerDelegate] = None):
        self._ref: Optional[weakref.ref] = None
        self.set(delegate)

    def set(self, delegate: Optional[ApiManagerDelegate]) -> None:
        self._ref = weakref.ref(delegate) if delegate is not None else None

    def peek(self) -> Optional[ApiManagerDelegate]:
        """Delegate if still alive, otherwise None."""
        if self._ref is None:
            return None
        return self._ref()

    def get(self) -> ApiManagerDelegate:
        delegate = self.peek()
        return delegate if delegate is not None else DEFAULT_DELEGATE
