"""Tests for the retrying JSON-over-HTTP client."""

import json

import httpx
import pytest
import respx

from services.transport.backoff_client import BackoffHttpClient, compute_backoff_delay
from utils.errors import RequestFailed

URL = "https://example.test/v1beta/models/m:generateContent"


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def _client(sleep, rng=lambda: 0.5, **kwargs):
    return BackoffHttpClient(httpx.AsyncClient(), sleep=sleep, rng=rng, **kwargs)


@pytest.mark.asyncio
@respx.mock
async def test_always_failing_endpoint_exhausts_attempts():
    route = respx.post(URL).mock(return_value=httpx.Response(500, text="backend exploded"))
    sleep = RecordingSleep()
    client = _client(sleep)

    with pytest.raises(RequestFailed) as exc:
        await client.execute(URL, {"q": 1}, max_attempts=5)

    assert route.call_count == 5
    assert exc.value.attempts == 5
    assert exc.value.status_code == 500
    assert "backend exploded" in exc.value.last_error
    assert exc.value.kind == "TransportError"
    assert sleep.delays == [1.5, 2.5, 4.5, 8.5]
    for attempt, delay in enumerate(sleep.delays):
        assert delay >= 2 ** attempt
    assert sleep.delays == sorted(sleep.delays)


@pytest.mark.asyncio
@respx.mock
async def test_success_on_third_attempt_stops_retrying():
    route = respx.post(URL).mock(
        side_effect=[
            httpx.Response(503, text="overloaded"),
            httpx.ConnectError,
            httpx.Response(200, json={"candidates": []}),
            httpx.Response(200, json={"unexpected": True}),
        ]
    )
    sleep = RecordingSleep()
    client = _client(sleep, rng=lambda: 0.0)

    body = await client.execute(URL, {"q": 1}, max_attempts=5)

    assert body == {"candidates": []}
    assert route.call_count == 3
    assert sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
@respx.mock
async def test_first_attempt_success_never_sleeps():
    respx.post(URL).mock(return_value=httpx.Response(200, json={"ok": True}))
    sleep = RecordingSleep()

    body = await _client(sleep).execute(URL, {})

    assert body == {"ok": True}
    assert sleep.delays == []


@pytest.mark.asyncio
@respx.mock
async def test_transport_error_is_reported_after_last_attempt():
    respx.post(URL).mock(side_effect=httpx.ConnectTimeout)
    sleep = RecordingSleep()

    with pytest.raises(RequestFailed) as exc:
        await _client(sleep).execute(URL, {}, max_attempts=2)

    assert exc.value.attempts == 2
    assert exc.value.status_code is None
    assert "ConnectTimeout" in exc.value.last_error
    assert len(sleep.delays) == 1


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json_counts_as_failed_attempt():
    route = respx.post(URL).mock(
        side_effect=[
            httpx.Response(200, text="<html>gateway</html>"),
            httpx.Response(200, json={"fine": 1}),
        ]
    )

    body = await _client(RecordingSleep()).execute(URL, {})

    assert body == {"fine": 1}
    assert route.call_count == 2


@pytest.mark.asyncio
@respx.mock
async def test_sends_json_body_and_configured_headers():
    route = respx.post(URL).mock(return_value=httpx.Response(200, json={}))
    client = _client(RecordingSleep(), headers={"x-goog-api-key": "secret"})

    await client.execute(URL, {"contents": [{"parts": [{"text": "hi"}]}]})

    request = route.calls.last.request
    assert request.headers["x-goog-api-key"] == "secret"
    assert json.loads(request.content) == {"contents": [{"parts": [{"text": "hi"}]}]}


@pytest.mark.asyncio
async def test_max_attempts_must_be_positive():
    client = _client(RecordingSleep())

    with pytest.raises(ValueError):
        await client.execute(URL, {}, max_attempts=0)


@pytest.mark.parametrize("attempt", range(5))
@pytest.mark.parametrize("jitter", [0.0, 0.25, 0.999])
def test_backoff_delay_bounds(attempt, jitter):
    delay = compute_backoff_delay(attempt, rng=lambda: jitter)

    assert 2 ** attempt <= delay < 2 ** attempt + 1
    assert delay == pytest.approx(2 ** attempt + jitter)


@pytest.mark.asyncio
async def test_aclose_only_closes_owned_client():
    shared = httpx.AsyncClient()
    await BackoffHttpClient(shared).aclose()
    assert not shared.is_closed

    owned = BackoffHttpClient()
    await owned.aclose()
    assert owned.client.is_closed

    await shared.aclose()
