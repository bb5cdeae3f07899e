import asyncio
import json

import httpx
import pytest

from chatrelay.client import strings
from chatrelay.client.gateway import CompletionClient
from chatrelay.client.store import ChatSessionStore
from chatrelay.core.config import ClientSettings
from chatrelay.core.errors import InvalidRequest
from chatrelay.main import app
from chatrelay.services.llm_gateway import MESSAGE_REQUIRED, get_completion_gateway


def _client(handler) -> CompletionClient:
    transport = httpx.MockTransport(handler)
    return CompletionClient(
        "http://gateway.test",
        client=httpx.AsyncClient(transport=transport, base_url="http://gateway.test"),
    )


@pytest.mark.anyio
async def test_request_completion_returns_response_text():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.read())))
        return httpx.Response(200, json={"response": "hi!"})

    client = _client(handler)
    assert await client.request_completion("hello") == "hi!"
    assert seen == [("/api/chat", {"message": "hello"})]


@pytest.mark.anyio
async def test_server_error_becomes_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "upstream down", "details": "x"})

    text = await _client(handler).request_completion("hello")
    assert text == strings.SERVER_ERROR.format(error="upstream down")


@pytest.mark.anyio
async def test_server_error_without_json_uses_reason_phrase():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    text = await _client(handler).request_completion("hello")
    assert text == strings.SERVER_ERROR.format(error="Bad Gateway")


@pytest.mark.anyio
async def test_network_failure_becomes_message():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert await _client(handler).request_completion("hello") == strings.NETWORK_ERROR


@pytest.mark.anyio
async def test_malformed_success_body_becomes_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    text = await _client(handler).request_completion("hello")
    assert text == strings.SERVER_ERROR.format(error="OK")


class _EchoGateway:
    async def complete(self, message):
        if not message:
            raise InvalidRequest(MESSAGE_REQUIRED)
        return f"echo: {message}"


@pytest.mark.anyio
async def test_round_trip_through_gateway_app():
    app.dependency_overrides[get_completion_gateway] = _EchoGateway
    try:
        transport = httpx.ASGITransport(app=app)
        async with CompletionClient(
            "http://testserver",
            client=httpx.AsyncClient(transport=transport, base_url="http://testserver"),
        ) as client:
            assert await client.request_completion("ping") == "echo: ping"
            assert await client.request_completion("") == strings.SERVER_ERROR.format(error=MESSAGE_REQUIRED)
    finally:
        app.dependency_overrides.clear()


async def _slow_server(delay: float, body: bytes):
    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        head = await reader.readuntil(b"\r\n\r\n")
        length = 0
        for line in head.decode("latin-1").split("\r\n"):
            if line.lower().startswith("content-length:"):
                length = int(line.split(":", 1)[1])
        await reader.readexactly(length)
        await asyncio.sleep(delay)
        try:
            writer.write(
                b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
                + f"Content-Length: {len(body)}\r\nConnection: close\r\n\r\n".encode()
                + body
            )
            await writer.drain()
        except ConnectionError:
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    return server, f"http://127.0.0.1:{port}"


def test_default_client_has_no_timeout():
    client = CompletionClient("http://gateway.test")
    assert client.timeout == httpx.Timeout(None)


def test_store_from_settings_uses_configured_timeout(tmp_path):
    settings = ClientSettings(_env_file=None, STORAGE_PATH=tmp_path / "storage.json", REQUEST_TIMEOUT=12.5)
    store = ChatSessionStore.from_settings(settings)
    assert store._gateway.timeout == httpx.Timeout(12.5)


@pytest.mark.anyio
async def test_slow_reply_is_delivered_without_timeout():
    server, url = await _slow_server(0.3, json.dumps({"response": "slow but fine"}).encode())
    async with server:
        async with CompletionClient(url) as client:
            assert await client.request_completion("hello") == "slow but fine"


@pytest.mark.anyio
async def test_configured_timeout_still_applies():
    server, url = await _slow_server(0.5, json.dumps({"response": "too late"}).encode())
    async with server:
        async with CompletionClient(url, timeout=0.05) as client:
            assert await client.request_completion("hello") == strings.NETWORK_ERROR
