"""
Integration tests: ApiManager + real transports with mocked HTTP.

httpx backend mocked with respx, requests backend with responses.
"""

import json
import logging

import httpx
import pytest
import respx

from api_manager import (
    ApiManager,
    ApiManagerConfig,
    ApiManagerDelegate,
    DataRequest,
    Headers,
    HttpxTransport,
    LoggingConfig,
    StaticConnectivityProbe,
    UploadRequest,
)

BASE_URL = "https://api.integration.test"


class SessionDelegate(ApiManagerDelegate):
    """Типичный делегат: токен, refresh при 401, logout при повторном 401."""

    def __init__(self):
        self.token = "expired"
        self.refreshed = False
        self.logged_out = False

    def added_headers(self):
        return Headers({"Authorization": f"Bearer {self.token}"})

    def on_status(self, url, status_code):
        if status_code == 401 and self.refreshed:
            self.logged_out = True

    def should_retry_request(self, request, status_code):
        if status_code == 401 and not self.refreshed:
            self.token = "fresh"
            self.refreshed = True
            return True
        return False


@pytest.mark.integration
class TestHttpxBackend:

    @pytest.mark.asyncio
    @respx.mock
    async def test_refresh_token_flow(self):
        route = respx.get(f"{BASE_URL}/v1/me").mock(side_effect=[
            httpx.Response(401, json={"error": "expired"}),
            httpx.Response(200, json={"id": 7}),
        ])
        delegate = SessionDelegate()

        async with ApiManager(
            ApiManagerConfig(base_url=BASE_URL),
            connectivity=StaticConnectivityProbe(True),
            delegate=delegate,
        ) as manager:
            outcome = await manager.request(DataRequest("/v1/me"))

        assert outcome.status == 200
        assert outcome.json() == {"id": 7}
        assert route.call_count == 2
        assert route.calls[0].request.headers["authorization"] == "Bearer expired"
        assert route.calls[1].request.headers["authorization"] == "Bearer fresh"
        assert not delegate.logged_out

    @pytest.mark.asyncio
    @respx.mock
    async def test_logout_on_second_401(self):
        respx.get(f"{BASE_URL}/v1/me").mock(return_value=httpx.Response(401))
        delegate = SessionDelegate()

        async with ApiManager(
            ApiManagerConfig(base_url=BASE_URL),
            connectivity=StaticConnectivityProbe(True),
            delegate=delegate,
        ) as manager:
            outcome = await manager.request(DataRequest("/v1/me"))

        assert outcome.status == 401
        assert delegate.logged_out

    @pytest.mark.asyncio
    @respx.mock
    async def test_json_logs(self, tmp_path):
        respx.post(f"{BASE_URL}/v1/items").mock(return_value=httpx.Response(201, json={"id": 1}))
        log_file = tmp_path / "api.log"
        config = ApiManagerConfig.create(
            base_url=BASE_URL,
            allow_logs=True,
            logging=LoggingConfig.create(
                format="json", enable_console=False, enable_file=True, file_path=str(log_file)
            ),
        )

        async with ApiManager(config, connectivity=StaticConnectivityProbe(True)) as manager:
            await manager.request(DataRequest(
                "/v1/items", "POST", parameters={"name": "x"},
                headers={"Authorization": "Bearer secret"},
            ))

        records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        finished = next(r for r in records if r["message"] == "Request finished")
        assert finished["logger"] == "api_manager.api.integration.test"
        assert finished["status"] == 201
        assert finished["headers"]["Authorization"] == "***REDACTED***"
        assert finished["request_id"]

    @pytest.mark.asyncio
    async def test_upload_progress_end_to_end(self):
        async def handler(request):
            return httpx.Response(200)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        fractions = []

        async with ApiManager(
            ApiManagerConfig(upload_chunk_size=2),
            transport=HttpxTransport(upload_chunk_size=2, client=client),
            connectivity=StaticConnectivityProbe(True),
        ) as manager:
            outcome = await manager.upload(UploadRequest(
                "https://s3.integration.test/b/k", b"abcd", "k.bin", "application/octet-stream",
                progress_handler=fractions.append,
            ))
        await client.aclose()

        assert outcome.status == 200
        assert fractions == [0.5, 1.0]


@pytest.mark.integration
class TestRequestsBackend:

    @pytest.mark.asyncio
    async def test_get_and_status_hook(self, mock_responses):
        mock_responses.add(mock_responses.GET, f"{BASE_URL}/v1/items", json=[1, 2], status=200)
        statuses = []

        class StatusDelegate(ApiManagerDelegate):
            def on_status(self, url, status_code):
                statuses.append((url, status_code))

        delegate = StatusDelegate()

        async with ApiManager(
            ApiManagerConfig(base_url=BASE_URL, backend="requests"),
            connectivity=StaticConnectivityProbe(True),
            delegate=delegate,
        ) as manager:
            outcome = await manager.request(DataRequest("/v1/items", parameters={"page": 1}))

        assert outcome.status == 200
        assert json.loads(outcome.data) == [1, 2]
        assert statuses == [("/v1/items?page=1", 200)]

    @pytest.mark.asyncio
    async def test_upload_default_headers(self, mock_responses):
        mock_responses.add(mock_responses.PUT, "https://s3.integration.test/b/a.png", status=200)

        async with ApiManager(
            ApiManagerConfig(backend="requests"),
            connectivity=StaticConnectivityProbe(True),
        ) as manager:
            outcome = await manager.upload(UploadRequest(
                "https://s3.integration.test/b/a.png", b"\x89PNG", "a.png", "image/png"
            ))

        request = mock_responses.calls[0].request
        assert outcome.status == 200
        assert request.headers["Content-Type"] == "image/png"
        assert request.headers["x-amz-acl"] == "public-read"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_offline_never_touches_network(caplog):
    async with ApiManager(
        ApiManagerConfig(base_url=BASE_URL, allow_logs=True),
        connectivity=StaticConnectivityProbe(False),
    ) as manager:
        with caplog.at_level(logging.DEBUG, logger="api_manager"), respx.mock(assert_all_called=False) as router:
            outcome = await manager.request(DataRequest("/v1"))

    assert outcome.is_connected_failure
    assert router.calls.call_count == 0
    assert any(r.getMessage() == "Not connected" for r in caplog.records)
