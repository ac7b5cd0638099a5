"""Tests for MCP transports (HTTP and websocket) with mocks."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from agentbuilder.protocols.errors import TransportError
from agentbuilder.protocols.mcp.transport import (
    HTTPTransport,
    MCPTransport,
    WebSocketTransport,
    create_transport,
)


def _http(handler) -> HTTPTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HTTPTransport("http://x/mcp", headers={"Authorization": "Bearer t"}, client=client)


class TestMCPTransportProtocol:
    def test_http_satisfies_protocol(self) -> None:
        assert isinstance(HTTPTransport(url="http://localhost/mcp"), MCPTransport)

    def test_websocket_satisfies_protocol(self) -> None:
        assert isinstance(WebSocketTransport(url="ws://localhost:8080"), MCPTransport)


class TestCreateTransport:
    @pytest.mark.parametrize("url", ["http://x/mcp", "https://x/mcp", "HTTPS://x"])
    def test_http(self, url: str) -> None:
        assert isinstance(create_transport(url), HTTPTransport)

    @pytest.mark.parametrize("url", ["ws://x/mcp", "wss://x/mcp"])
    def test_websocket(self, url: str) -> None:
        assert isinstance(create_transport(url), WebSocketTransport)

    @pytest.mark.parametrize("url", ["ftp://x", "localhost:3000", ""])
    def test_unsupported(self, url: str) -> None:
        with pytest.raises(TransportError, match="Unsupported"):
            create_transport(url)

    def test_malformed_url(self) -> None:
        with pytest.raises(TransportError, match="Invalid MCP server URL"):
            create_transport("http://[::1/mcp")


class TestHTTPTransport:
    async def test_send_posts_json_and_queues_reply(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            body = json.loads(request.content)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": "ok"})

        transport = _http(handler)
        await transport.connect()
        await transport.send({"jsonrpc": "2.0", "method": "tools/x", "params": {}, "id": 7})

        assert await transport.receive() == {"jsonrpc": "2.0", "id": 7, "result": "ok"}
        assert seen[0].method == "POST"
        assert str(seen[0].url) == "http://x/mcp"
        assert seen[0].headers["Authorization"] == "Bearer t"
        assert seen[0].headers["Accept"] == "application/json"

    async def test_batch_body_queues_each_message(self) -> None:
        replies = [{"id": 1, "result": 1}, {"id": 2, "result": 2}]
        transport = _http(lambda _req: httpx.Response(200, json=replies))
        await transport.send({"id": 1})
        assert await transport.receive() == replies[0]
        assert await transport.receive() == replies[1]

    async def test_empty_body_queues_nothing(self) -> None:
        transport = _http(lambda _req: httpx.Response(202))
        await transport.send({"method": "notifications/initialized"})
        assert transport._inbox.empty()

    async def test_http_error_status(self) -> None:
        transport = _http(lambda _req: httpx.Response(500, text="boom"))
        with pytest.raises(TransportError, match="failed"):
            await transport.send({"id": 1})

    async def test_connection_refused(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError, match="refused"):
            await _http(refuse).send({"id": 1})

    async def test_timeout(self) -> None:
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(TransportError, match="timed out"):
            await _http(slow).send({"id": 1})

    async def test_non_json_body(self) -> None:
        transport = _http(lambda _req: httpx.Response(200, text="<html>"))
        with pytest.raises(TransportError, match="Malformed JSON"):
            await transport.send({"id": 1})

    async def test_error_status_with_envelope_is_queued(self) -> None:
        envelope = {"jsonrpc": "2.0", "id": 3, "error": {"code": -32000, "message": "backend down"}}
        transport = _http(lambda _req: httpx.Response(500, json=envelope))
        await transport.send({"jsonrpc": "2.0", "method": "tools/x", "params": {}, "id": 3})
        assert await transport.receive() == envelope

    async def test_error_status_with_foreign_json(self) -> None:
        transport = _http(lambda _req: httpx.Response(502, json={"detail": "bad gateway"}))
        with pytest.raises(TransportError, match="HTTP 502"):
            await transport.send({"id": 1})

    async def test_reply_without_id_fails_fast(self) -> None:
        transport = _http(lambda _req: httpx.Response(200, json={"jsonrpc": "2.0", "result": "ok"}))
        with pytest.raises(TransportError, match="Uncorrelated response"):
            await transport.send({"jsonrpc": "2.0", "method": "tools/t", "params": {}, "id": 1})
        assert transport._inbox.empty()

    async def test_non_object_message(self) -> None:
        transport = _http(lambda _req: httpx.Response(200, json=[1, 2]))
        with pytest.raises(TransportError, match="Malformed JSON-RPC"):
            await transport.send({"id": 1})

    async def test_send_without_connect_raises(self) -> None:
        transport = HTTPTransport("http://x/mcp")
        with pytest.raises(TransportError, match="not connected"):
            await transport.send({"id": 1})

    async def test_connect_and_close(self) -> None:
        transport = HTTPTransport("http://x/mcp", timeout=5)
        await transport.connect()
        assert transport._client is not None
        await transport.close()
        assert transport._client is None
        await transport.close()


class TestWebSocketTransport:
    async def test_connect_opens_websocket(self) -> None:
        mock_ws = AsyncMock()
        mock_module = MagicMock()
        mock_module.connect = AsyncMock(return_value=mock_ws)

        with patch.dict("sys.modules", {"websockets": mock_module}):
            transport = WebSocketTransport(url="ws://localhost:8080")
            await transport.connect()
            assert transport._ws is mock_ws

    async def test_connect_failure_raises_transport_error(self) -> None:
        mock_module = MagicMock()
        mock_module.exceptions.WebSocketException = type("WebSocketException", (Exception,), {})
        mock_module.connect = AsyncMock(side_effect=OSError("refused"))

        with patch.dict("sys.modules", {"websockets": mock_module}):
            transport = WebSocketTransport(url="ws://localhost:8080")
            with pytest.raises(TransportError, match="refused"):
                await transport.connect()

    async def test_send_writes_json(self) -> None:
        mock_ws = AsyncMock()
        transport = WebSocketTransport(url="ws://localhost:8080")
        transport._ws = mock_ws

        data = {"method": "test"}
        await transport.send(data)
        mock_ws.send.assert_awaited_once_with(json.dumps(data))

    async def test_receive_reads_json(self) -> None:
        expected = {"id": 1, "result": "ok"}
        mock_ws = AsyncMock()
        mock_ws.recv = AsyncMock(return_value=json.dumps(expected))

        transport = WebSocketTransport(url="ws://localhost:8080")
        transport._ws = mock_ws

        assert await transport.receive() == expected

    async def test_receive_malformed_raises(self) -> None:
        mock_ws = AsyncMock()
        mock_ws.recv = AsyncMock(return_value="not json")

        transport = WebSocketTransport(url="ws://localhost:8080")
        transport._ws = mock_ws

        with pytest.raises(TransportError, match="Malformed"):
            await transport.receive()

    async def test_receive_connection_lost(self) -> None:
        mock_ws = AsyncMock()
        mock_ws.recv = AsyncMock(side_effect=ConnectionResetError("reset"))

        transport = WebSocketTransport(url="ws://localhost:8080")
        transport._ws = mock_ws

        with pytest.raises(TransportError, match="reset"):
            await transport.receive()

    async def test_close_closes_websocket(self) -> None:
        mock_ws = AsyncMock()
        transport = WebSocketTransport(url="ws://localhost:8080")
        transport._ws = mock_ws

        await transport.close()
        mock_ws.close.assert_awaited_once()
        assert transport._ws is None

    async def test_send_without_connect_raises(self) -> None:
        transport = WebSocketTransport(url="ws://localhost:8080")
        with pytest.raises(TransportError, match="not connected"):
            await transport.send({"test": True})

    async def test_connect_without_websockets_raises(self) -> None:
        transport = WebSocketTransport(url="ws://localhost:8080")
        with (
            patch.dict("sys.modules", {"websockets": None}),
            pytest.raises(ImportError, match="websockets"),
        ):
            await transport.connect()
