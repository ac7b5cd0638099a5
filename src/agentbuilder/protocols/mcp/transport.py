"""MCP transports — HTTP and websocket communication layers.

Both kinds expose the four coroutines of :class:`MCPTransport` and move raw
JSON objects.  Which request a reply belongs to is decided by the
dispatcher; the HTTP transport only rejects a lone reply with no id.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

import httpx

from agentbuilder.protocols.errors import TransportError


@runtime_checkable
class MCPTransport(Protocol):
    """Duplex channel carrying JSON-RPC envelopes to one MCP server."""

    async def connect(self) -> None: ...
    async def send(self, data: dict[str, Any]) -> None: ...
    async def receive(self) -> dict[str, Any]: ...
    async def close(self) -> None: ...


class HTTPTransport:
    """Posts each JSON-RPC envelope to the server URL.

    The decoded body of every HTTP response is queued and handed out by
    :meth:`receive`, so the dispatcher sees HTTP replies the same way it sees
    websocket frames.  A JSON array body is treated as a batch of messages.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._headers = {"Accept": "application/json", **(headers or {})}
        self._client = client
        self._inbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    @property
    def url(self) -> str:
        return self._url

    async def connect(self) -> None:
        """Create the HTTP client (no request is made)."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)

    async def send(self, data: dict[str, Any]) -> None:
        """POST one envelope and queue whatever the server answered."""
        if self._client is None:
            msg = "Transport not connected"
            raise TransportError(msg)
        try:
            response = await self._client.post(self._url, json=data, headers=self._headers)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request to {self._url} timed out") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Request to {self._url} failed: {exc}") from exc

        messages = self._decode(response)
        if messages is None:
            return
        request_id = data.get("id")
        if request_id is not None and len(messages) == 1 and messages[0].get("id") is None:
            # A lone reply to a request that cannot be matched to it by id.
            raise TransportError(
                f"Uncorrelated response from {self._url} to id {request_id}: {messages[0]}"
            )
        for message in messages:
            self._inbox.put_nowait(message)

    def _decode(self, response: httpx.Response) -> list[dict[str, Any]] | None:
        """Decode the JSON-RPC messages of a reply; ``None`` for an empty 2xx body.

        An error status is accepted only when every message carries an id.
        """
        failed = f"Request to {self._url} failed: HTTP {response.status_code}"
        # 202/204 acknowledgements carry no message
        if not response.content:
            if response.is_error:
                raise TransportError(failed)
            return None
        try:
            payload = response.json()
        except ValueError as exc:
            if response.is_error:
                raise TransportError(failed) from exc
            raise TransportError(f"Malformed JSON from {self._url}") from exc

        messages = payload if isinstance(payload, list) else [payload]
        if not all(isinstance(message, dict) for message in messages):
            if response.is_error:
                raise TransportError(failed)
            raise TransportError(f"Malformed JSON-RPC message from {self._url}")
        if response.is_error and not (messages and all("id" in m for m in messages)):
            raise TransportError(failed)
        return messages

    async def receive(self) -> dict[str, Any]:
        """Return the next queued response message."""
        return await self._inbox.get()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class WebSocketTransport:
    """Full-duplex MCP channel over a ws:// or wss:// URL.

    Requires the ``websockets`` package (optional dependency ``ws``).
    """

    def __init__(self, url: str) -> None:
        self._url = url
        self._ws: Any = None  # websockets ClientConnection
        self._errors: tuple[type[BaseException], ...] = (OSError,)

    @property
    def url(self) -> str:
        return self._url

    async def connect(self) -> None:
        """Open the socket; failures surface as :class:`TransportError`."""
        try:
            import websockets  # type: ignore[import-untyped]
        except ImportError as exc:
            msg = "websockets package required — install with: pip install agentbuilder[ws]"
            raise ImportError(msg) from exc
        self._errors = (websockets.exceptions.WebSocketException, OSError)
        try:
            self._ws = await websockets.connect(self._url)
        except self._errors as exc:
            raise TransportError(f"Cannot connect to {self._url}: {exc}") from exc

    async def send(self, data: dict[str, Any]) -> None:
        """Write one envelope as a text frame."""
        if self._ws is None:
            msg = "Transport not connected"
            raise TransportError(msg)
        try:
            await self._ws.send(json.dumps(data))
        except self._errors as exc:
            raise TransportError(f"Send to {self._url} failed: {exc}") from exc

    async def receive(self) -> dict[str, Any]:
        """Read one frame and decode it as a JSON object."""
        if self._ws is None:
            msg = "Transport not connected"
            raise TransportError(msg)
        try:
            raw = await self._ws.recv()
        except self._errors as exc:
            raise TransportError(f"Receive from {self._url} failed: {exc}") from exc
        try:
            message = json.loads(raw)
        except ValueError as exc:
            raise TransportError(f"Malformed JSON from {self._url}") from exc
        if not isinstance(message, dict):
            raise TransportError(f"Malformed JSON-RPC message from {self._url}")
        return message

    async def close(self) -> None:
        """Close the socket if open; safe to repeat."""
        if self._ws is None:
            return
        ws, self._ws = self._ws, None
        try:
            await ws.close()
        except self._errors as exc:
            raise TransportError(f"Close of {self._url} failed: {exc}") from exc


def create_transport(
    url: str,
    *,
    timeout: float = 30.0,
    headers: dict[str, str] | None = None,
) -> MCPTransport:
    """Pick a transport from the URL scheme."""
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError as exc:
        raise TransportError(f"Invalid MCP server URL {url!r}: {exc}") from exc
    if scheme in ("http", "https"):
        return HTTPTransport(url, timeout=timeout, headers=headers)
    if scheme in ("ws", "wss"):
        return WebSocketTransport(url)
    msg = f"Unsupported MCP server URL {url!r}; expected http(s):// or ws(s)://"
    raise TransportError(msg)
