"""
Иерархия исключений API Manager.

Классификация:
- ConfigurationError - невалидная конфигурация, выбрасывается сразу
- TransportError - сбой на уровне транспорта. НЕ выбрасывается из
  ApiManager.request()/upload(): переносится в TransportResponse.error
  и попадает в диагностический лог.
"""

from typing import Optional

import httpx
import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ApiManagerException(Exception):
    """Базовое исключение API Manager."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КОНФИГУРАЦИЯ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(ApiManagerException):
    """Ошибка конфигурации."""
    pass

class ConfigValidationError(ConfigurationError):
    """Raised when a configuration file is invalid."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(ApiManagerException):
    """
    Сбой транспорта: DNS, TLS, таймаут, кодирование.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
    """

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class TransportTimeoutError(TransportError):
    """Таймаут запроса (connect, read, write или pool)."""
    pass

class TransportConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - DNS resolution failed
    """
    pass

class ProxyError(TransportConnectionError):
    """Ошибка прокси."""
    pass

class TooManyRedirectsError(TransportError):
    """Превышено количество редиректов."""
    pass

class EncodingError(TransportError):
    """Parameters or payload could not be encoded into a request body."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_httpx_exception(exc: Exception, url: str) -> TransportError:
    """
    Конвертировать httpx исключения в наши.

    Examples:
        >>> err = classify_httpx_exception(httpx.ConnectTimeout("boom"), "https://x")
        >>> isinstance(err, TransportTimeoutError)
        True
    """
    if isinstance(exc, httpx.TimeoutException):
        return TransportTimeoutError(f"Request timeout: {exc}", url)

    elif isinstance(exc, httpx.ProxyError):
        return ProxyError(f"Proxy error: {exc}", url)

    elif isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
        return TransportConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, httpx.TooManyRedirects):
        return TooManyRedirectsError(f"Too many redirects: {exc}", url)

    elif isinstance(exc, (httpx.DecodingError, httpx.StreamError)):
        return EncodingError(f"Body error: {exc}", url)

    elif isinstance(exc, httpx.InvalidURL):
        return TransportError(f"Invalid URL: {exc}", url)

    else:
        return TransportError(str(exc) or type(exc).__name__, url)

def classify_requests_exception(exc: Exception, url: str) -> TransportError:
    """
    Конвертировать requests.exceptions в наши исключения.

    Examples:
        >>> err = classify_requests_exception(requests.exceptions.Timeout(), "https://x")
        >>> isinstance(err, TransportTimeoutError)
        True
    """
    if isinstance(exc, requests.exceptions.Timeout):
        return TransportTimeoutError("Request timeout", url)

    elif isinstance(exc, requests.exceptions.ProxyError):
        return ProxyError("Proxy error", url)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return TransportConnectionError("Connection error", url)

    elif isinstance(exc, requests.exceptions.TooManyRedirects):
        return TooManyRedirectsError("Too many redirects", url)

    elif isinstance(exc, (requests.exceptions.ContentDecodingError,
                          requests.exceptions.ChunkedEncodingError)):
        return EncodingError(f"Body error: {exc}", url)

    else:
        return TransportError(str(exc) or type(exc).__name__, url)
