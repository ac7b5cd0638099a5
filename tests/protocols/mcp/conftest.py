"""Scripted in-memory transports for MCP client tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

Handler = Callable[[dict[str, Any]], Any]

WEATHER_TOOLS: list[dict[str, Any]] = [
    {
        "name": "get_weather",
        "description": "Get current weather for a location",
        "inputSchema": {
            "type": "object",
            "properties": {
                "location": {"type": "string", "description": "City name or coordinates"},
            },
            "required": ["location"],
        },
    },
    {
        "name": "search_web",
        "description": "Search the web for information",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "limit": {"type": "number", "description": "Number of results"},
            },
            "required": ["query"],
        },
    },
]


class ScriptedTransport:
    """Answers each sent request with whatever *handler* returns.

    The handler may return a message, a list of messages, ``None`` (no reply
    yet; push one later with :meth:`push`) or an exception to raise from
    ``send``.
    """

    def __init__(self, handler: Handler | None = None) -> None:
        self.handler = handler or (lambda _request: None)
        self.sent: list[dict[str, Any]] = []
        self.inbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.connected = False
        self.closed = False

    async def connect(self) -> None:
        self.connected = True

    async def send(self, data: dict[str, Any]) -> None:
        self.sent.append(data)
        out = self.handler(data)
        if isinstance(out, BaseException):
            raise out
        if out is None:
            return
        for message in out if isinstance(out, list) else [out]:
            self.push(message)

    async def receive(self) -> dict[str, Any]:
        return await self.inbox.get()

    async def close(self) -> None:
        self.closed = True

    def push(self, message: dict[str, Any]) -> None:
        self.inbox.put_nowait(message)

    @property
    def methods(self) -> list[str]:
        return [m["method"] for m in self.sent]


def mcp_handler(
    tools: list[dict[str, Any]] | None = None,
    results: dict[str, Any] | None = None,
) -> Handler:
    """A well-behaved server: handshake, ``tools/list`` and per-tool results.

    A result that is an ``Exception`` instance is raised from ``send``; a dict
    with an ``"error"`` key is sent as an error envelope.
    """
    tool_list = WEATHER_TOOLS if tools is None else tools
    tool_results = results or {}

    def handle(request: dict[str, Any]) -> Any:
        method = request["method"]
        if method == "initialize":
            return {"jsonrpc": "2.0", "id": request["id"], "result": {"capabilities": {}}}
        if method == "tools/list":
            return {"jsonrpc": "2.0", "id": request["id"], "result": {"tools": tool_list}}
        name = method.removeprefix("tools/")
        outcome = tool_results.get(name, {"ok": True})
        if isinstance(outcome, BaseException):
            return outcome
        if isinstance(outcome, dict) and "error" in outcome:
            return {"jsonrpc": "2.0", "id": request["id"], "error": outcome["error"]}
        return {"jsonrpc": "2.0", "id": request["id"], "result": outcome}

    return handle


async def wait_for_sent(transport: ScriptedTransport, count: int) -> None:
    """Yield to the loop until *count* requests have been sent."""
    for _ in range(100):
        if len(transport.sent) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"expected {count} sent requests, saw {len(transport.sent)}")


@pytest.fixture
def scripted() -> type[ScriptedTransport]:
    return ScriptedTransport


@pytest.fixture
def handler_factory() -> Callable[..., Handler]:
    return mcp_handler


@pytest.fixture
def sent_waiter() -> Callable[[ScriptedTransport, int], Any]:
    return wait_for_sent


@pytest.fixture
def weather_tools() -> list[dict[str, Any]]:
    return [dict(t) for t in WEATHER_TOOLS]
