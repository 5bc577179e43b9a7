"""Tests for exception hierarchy and classification."""

import httpx
import pytest
import requests

from api_manager.core.exceptions import (
    ApiManagerException,
    ConfigurationError,
    ConfigValidationError,
    EncodingError,
    ProxyError,
    TooManyRedirectsError,
    TransportConnectionError,
    TransportError,
    TransportTimeoutError,
    classify_httpx_exception,
    classify_requests_exception,
)

URL = "https://api.example.com/v1"


class TestHierarchy:

    def test_config_errors(self):
        assert issubclass(ConfigValidationError, ConfigurationError)
        assert issubclass(ConfigurationError, ApiManagerException)

    def test_transport_errors(self):
        assert issubclass(ProxyError, TransportConnectionError)
        for cls in (TransportTimeoutError, TransportConnectionError, TooManyRedirectsError, EncodingError):
            assert issubclass(cls, TransportError)

    def test_url_in_message(self):
        error = TransportError("boom", URL)
        assert error.url == URL
        assert str(error) == f"boom (url: {URL})"

    def test_without_url(self):
        assert str(TransportError("boom")) == "boom"


class TestClassifyHttpx:
    """httpx -> наши исключения."""

    @pytest.mark.parametrize("exc,expected", [
        (httpx.ConnectTimeout("t"), TransportTimeoutError),
        (httpx.ReadTimeout("t"), TransportTimeoutError),
        (httpx.ProxyError("p"), ProxyError),
        (httpx.ConnectError("c"), TransportConnectionError),
        (httpx.ReadError("r"), TransportConnectionError),
        (httpx.TooManyRedirects("r"), TooManyRedirectsError),
        (httpx.DecodingError("d"), EncodingError),
        (httpx.UnsupportedProtocol("u"), TransportError),
        (httpx.InvalidURL("bad"), TransportError),
    ])
    def test_classify(self, exc, expected):
        error = classify_httpx_exception(exc, URL)
        assert type(error) is expected
        assert error.url == URL


class TestClassifyRequests:
    """requests -> наши исключения."""

    @pytest.mark.parametrize("exc,expected", [
        (requests.exceptions.ConnectTimeout(), TransportTimeoutError),
        (requests.exceptions.ReadTimeout(), TransportTimeoutError),
        (requests.exceptions.ProxyError(), ProxyError),
        (requests.exceptions.ConnectionError(), TransportConnectionError),
        (requests.exceptions.TooManyRedirects(), TooManyRedirectsError),
        (requests.exceptions.ChunkedEncodingError(), EncodingError),
        (requests.exceptions.InvalidURL("bad"), TransportError),
    ])
    def test_classify(self, exc, expected):
        error = classify_requests_exception(exc, URL)
        assert type(error) is expected
        assert error.url == URL
