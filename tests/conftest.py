"""
Pytest configuration and fixtures for api-manager-core tests.
"""

from typing import List, Optional, Sequence

import pytest
import pytest_asyncio
import responses as responses_lib

from api_manager.core.api_manager import ApiManager
from api_manager.core.config import ApiManagerConfig
from api_manager.core.connectivity import StaticConnectivityProbe
from api_manager.core.headers import Headers
from api_manager.core.logging.config import LoggingConfig
from api_manager.core.transport import Transport, TransportResponse


class RecordingTransport(Transport):
    """
    Fake транспорт: записывает вызовы и отдаёт заранее заданные ответы.

    Ответы берутся по очереди; последний повторяется, если попыток больше.
    """

    def __init__(self, responses: Optional[Sequence[TransportResponse]] = None):
        self.responses: List[TransportResponse] = list(responses or [TransportResponse(200, b"{}")])
        self.calls: List[dict] = []
        self.closed = False

    def _next(self, url: str) -> TransportResponse:
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        response = self.responses[index]
        if response.url is None:
            response = TransportResponse(response.status_code, response.content, url, response.error)
        return response

    async def send(self, url, method, parameters, encoding, headers) -> TransportResponse:
        self.calls.append({
            "kind": "send",
            "url": url,
            "method": method,
            "parameters": parameters,
            "encoding": encoding,
            "headers": headers,
        })
        return self._next(url)

    async def upload(self, data, url, headers, progress=None) -> TransportResponse:
        self.calls.append({
            "kind": "upload",
            "url": url,
            "data": data,
            "headers": headers,
        })
        if progress:
            progress(0.5)
            progress(1.0)
        return self._next(url)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def connectivity():
    """Probe that reports 'connected' until told otherwise."""
    return StaticConnectivityProbe(connected=True)


@pytest.fixture
def transport():
    """Fake transport answering 200 with an empty JSON object."""
    return RecordingTransport()


@pytest_asyncio.fixture
async def manager(base_url, transport, connectivity):
    """ApiManager wired to the fake transport and static probe."""
    manager = ApiManager(
        ApiManagerConfig(base_url=base_url),
        transport=transport,
        connectivity=connectivity,
    )
    yield manager
    await manager.close()


@pytest.fixture
def logging_config():
    """LoggingConfig with console output only."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )


@pytest.fixture
def json_headers():
    return Headers({"Accept": "application/json"})


@pytest.fixture
def make_transport():
    """Factory: RecordingTransport с заданной последовательностью ответов."""
    return RecordingTransport
