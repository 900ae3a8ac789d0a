import json
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from roxy.health import Healthy
from roxy.http import BackendConfig, HttpBackend
from roxy.load_balancer import BackendOffline, InternalError

URL = "http://mock"
REQUEST = {"jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1}
RESULT = {"jsonrpc": "2.0", "id": 1, "result": "0x10"}


def scripted_send(responses, seen):
    """Build a replacement for AsyncClient.send that plays back responses."""
    queue = list(responses)

    async def send(self, request, **kwargs):
        seen.append(request)
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        status, body = item
        return httpx.Response(status, content=body, request=request)

    return send


def test_default_config():
    config = BackendConfig()
    assert config.timeout == timedelta(seconds=30)
    assert config.max_retries == 3
    assert config.max_batch_size == 100


@pytest.mark.asyncio
async def test_accessors_and_initial_health():
    async with HttpBackend("b1", URL, BackendConfig()) as backend:
        assert backend.name() == "b1"
        assert backend.rpc_url() == URL
        assert backend.health_status() == Healthy()
        assert backend.latency_ema() == timedelta(0)


@pytest.mark.asyncio
async def test_forward_success_posts_json():
    seen = []
    send = scripted_send([(200, json.dumps(RESULT).encode())], seen)
    async with HttpBackend("b1", URL, BackendConfig(max_retries=0)) as backend:
        with patch.object(httpx.AsyncClient, "send", new=send):
            result = await backend.forward(REQUEST)

    assert result == RESULT
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url).rstrip("/") == URL
    assert json.loads(seen[0].content) == REQUEST


@pytest.mark.asyncio
async def test_forward_error_status_raises_offline_after_retries():
    seen = []
    send = scripted_send([(500, b"")], seen)
    sleeper = AsyncMock()
    async with HttpBackend("b1", URL, BackendConfig(max_retries=2)) as backend:
        with patch.object(httpx.AsyncClient, "send", new=send), patch("asyncio.sleep", sleeper):
            with pytest.raises(BackendOffline) as info:
                await backend.forward(REQUEST)

    assert info.value.backend == "b1"
    assert len(seen) == 3
    assert [c.args[0] for c in sleeper.await_args_list] == [0.1, 0.2]


@pytest.mark.asyncio
async def test_forward_recovers_after_retry():
    seen = []
    send = scripted_send([(503, b""), (200, json.dumps(RESULT).encode())], seen)
    async with HttpBackend("b1", URL, BackendConfig(max_retries=3)) as backend:
        with patch.object(httpx.AsyncClient, "send", new=send), patch(
            "asyncio.sleep", AsyncMock()
        ):
            result = await backend.forward(REQUEST)

    assert result == RESULT
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_transport_error_becomes_offline():
    seen = []
    error = httpx.ConnectError("connection refused")
    send = scripted_send([error], seen)
    async with HttpBackend("b1", URL, BackendConfig(max_retries=0)) as backend:
        with patch.object(httpx.AsyncClient, "send", new=send):
            with pytest.raises(BackendOffline):
                await backend.forward(REQUEST)
        assert backend.latency_ema() == timedelta(0)
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_invalid_json_raises_internal_error():
    seen = []
    send = scripted_send([(200, b"not json")], seen)
    async with HttpBackend("b1", URL, BackendConfig(max_retries=0)) as backend:
        with patch.object(httpx.AsyncClient, "send", new=send):
            with pytest.raises(InternalError) as info:
                await backend.forward(REQUEST)

    assert str(info.value).startswith("failed to parse response")


@pytest.mark.asyncio
async def test_forward_after_close_fails():
    backend = HttpBackend("b1", URL, BackendConfig(max_retries=0))
    await backend.aclose()
    with pytest.raises(RuntimeError):
        await backend.forward(REQUEST)