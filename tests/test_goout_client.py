# tests/test_goout_client.py
from http import HTTPStatus
from typing import Any, Dict, List, Optional

import httpx
import pytest

from factories import page_payload, schedule_payload
from goout_calendar.schemas.calendar import CalendarRequest
from goout_calendar.services.goout_client import GoOutClient, UpstreamError


class _FakeResponse:
    def __init__(self, status_code: int, json_data: Any, url: str = "https://goout.net/fake"):
        self.status_code = status_code
        self._json_data = json_data
        self.url = url
        # For debugging / error messages
        self.text = str(json_data)

    def json(self) -> Any:
        if isinstance(self._json_data, Exception):
            raise self._json_data
        return self._json_data


class _FakeAsyncClient:
    """
    Minimal stand-in for httpx.AsyncClient used in tests.

    Records every GET and answers with the queued responses in order.
    """

    requests: List[Dict[str, Any]] = []
    responses: List[_FakeResponse] = []

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    async def __aenter__(self) -> "_FakeAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> _FakeResponse:
        _FakeAsyncClient.requests.append({"url": url, "params": params, "timeout": self._timeout})
        return _FakeAsyncClient.responses.pop(0)


@pytest.fixture()
def fake_http(monkeypatch):
    _FakeAsyncClient.requests = []
    _FakeAsyncClient.responses = []
    monkeypatch.setattr(httpx, "AsyncClient", _FakeAsyncClient)
    return _FakeAsyncClient


def _request(**kwargs) -> CalendarRequest:
    return CalendarRequest(id=kwargs.pop("id", 43224), language=kwargs.pop("language", "cs"), **kwargs)


@pytest.mark.asyncio
async def test_fetch_page_builds_query(fake_http):
    fake_http.responses = [_FakeResponse(HTTPStatus.OK, page_payload([schedule_payload(1)]))]
    client = GoOutClient(base_url="https://goout.example/", source="tests", timeout_seconds=3.0)

    response = await client.fetch_page(_request(after="2024-01-01"), page=2)

    assert [s.id for s in response.schedule] == [1]
    (sent,) = fake_http.requests
    assert sent["url"] == "https://goout.example/services/feeder/v1/events.json"
    assert sent["timeout"] == 3.0
    assert sent["params"] == {
        "tag": "liked",
        "user": "43224",
        "page": "2",
        "language": "cs",
        "source": "tests",
        "after": "2024-01-01",
    }


@pytest.mark.asyncio
async def test_fetch_page_omits_after_when_not_given(fake_http):
    fake_http.responses = [_FakeResponse(HTTPStatus.OK, page_payload([]))]

    await GoOutClient().fetch_page(_request(), page=1)

    assert "after" not in fake_http.requests[0]["params"]


@pytest.mark.asyncio
async def test_fetch_page_raises_on_http_error(fake_http):
    fake_http.responses = [_FakeResponse(HTTPStatus.BAD_GATEWAY, {"error": "down"})]

    with pytest.raises(UpstreamError) as exc_info:
        await GoOutClient().fetch_page(_request(), page=1)

    assert "HTTP 502" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_page_raises_on_error_envelope(fake_http):
    fake_http.responses = [_FakeResponse(HTTPStatus.OK, {"status": 400, "message": "Bad user"})]

    with pytest.raises(UpstreamError) as exc_info:
        await GoOutClient().fetch_page(_request(), page=1)

    assert "Expected message OK" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_page_raises_on_malformed_json(fake_http):
    fake_http.responses = [_FakeResponse(HTTPStatus.OK, ValueError("not json"))]

    with pytest.raises(UpstreamError):
        await GoOutClient().fetch_page(_request(), page=1)


@pytest.mark.asyncio
async def test_fetch_page_raises_on_undecodable_schedule(fake_http):
    payload = page_payload([{"id": 1, "url": "https://goout.net/x"}])
    fake_http.responses = [_FakeResponse(HTTPStatus.OK, payload)]

    with pytest.raises(UpstreamError) as exc_info:
        await GoOutClient().fetch_page(_request(), page=1)

    assert "Malformed response" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_page_wraps_transport_errors(monkeypatch):
    class _FailingClient(_FakeAsyncClient):
        async def get(self, url, params=None):
            raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(httpx, "AsyncClient", _FailingClient)

    with pytest.raises(UpstreamError) as exc_info:
        await GoOutClient().fetch_page(_request(), page=1)

    assert "connection refused" in str(exc_info.value)
