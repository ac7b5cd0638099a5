"""MCPClient — the facade other code uses to reach remote tool servers.

Connects servers (handshake plus ``tools/list`` discovery), keeps them in a
:class:`ServerRegistry`, resolves tools through a :class:`ToolCatalog` and
invokes them through a :class:`RequestDispatcher`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from agentbuilder.config.models import ClientSettings
from agentbuilder.protocols.errors import (
    MCPError,
    ServerNotFoundError,
    ToolNotFoundError,
    TransportError,
)
from agentbuilder.protocols.mcp.catalog import ToolCatalog
from agentbuilder.protocols.mcp.dispatcher import RequestDispatcher
from agentbuilder.protocols.mcp.models import ServerStatus, Tool, ToolRef, ToolServer
from agentbuilder.protocols.mcp.registry import ServerRegistry
from agentbuilder.protocols.mcp.schema import validate_arguments
from agentbuilder.protocols.mcp.transport import MCPTransport, create_transport
from agentbuilder.utils.telemetry import (
    ATTR_SERVER_ID,
    ATTR_SERVER_STATUS,
    ATTR_SERVER_URL,
    ATTR_TOOL_COUNT,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from pydantic import JsonValue

    from agentbuilder.config.models import ServerConfig

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

TransportFactory = Callable[[str], MCPTransport]


class MCPClient:
    """Async context manager owning a set of tool-server connections.

    Construct one per application (or per test) and pass it where needed;
    there is no module-level instance.

    Usage::

        async with MCPClient(ClientSettings(timeout=10)) as client:
            server = await client.connect("weather", "Weather", "http://x/mcp")
            result = await client.invoke_tool("weather", "get_weather", {"location": "Paris"})

    A server whose handshake or discovery fails is still registered, with
    status ``error`` and no tools, so callers can tell "known but broken"
    apart from "never attempted".
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        registry: ServerRegistry | None = None,
        dispatcher: RequestDispatcher | None = None,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._registry = registry if registry is not None else ServerRegistry()
        self._catalog = ToolCatalog(self._registry)
        self._dispatcher = dispatcher or RequestDispatcher(timeout=self._settings.timeout)
        self._transport_factory = transport_factory or self._create_transport
        self._transports: dict[str, MCPTransport] = {}

    async def __aenter__(self) -> MCPClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self, server_id: str, name: str, url: str) -> ToolServer:
        """Handshake with the server at *url*, discover its tools and register it.

        Never raises for network or protocol failures; the returned server
        carries status ``error`` instead.  Reconnecting an existing id
        replaces it.
        """
        await self._drop_transport(server_id)

        with _tracer.start_as_current_span("mcp.connect") as span:
            span.set_attribute(ATTR_SERVER_ID, server_id)
            span.set_attribute(ATTR_SERVER_URL, url)
            logger.info("Connecting to MCP server %s (%s) at %s", name, server_id, url)
            try:
                transport = await self._open_transport(server_id, url)
                if self._settings.handshake:
                    await self._handshake(transport)
                tools = await self._discover(transport)
            except MCPError as exc:
                logger.warning("Failed to connect to MCP server %s at %s: %s", name, url, exc)
                await self._drop_transport(server_id)
                server = ToolServer(
                    id=server_id, name=name, url=url, status=ServerStatus.ERROR, error=str(exc)
                )
            else:
                server = ToolServer(
                    id=server_id, name=name, url=url, status=ServerStatus.CONNECTED, tools=tools
                )
                logger.info("Connected to %s with %d tool(s)", server_id, len(tools))

            span.set_attribute(ATTR_SERVER_STATUS, server.status.value)
            span.set_attribute(ATTR_TOOL_COUNT, len(server.tools))
            self._registry.register(server)
            return server

    async def connect_all(self, configs: Iterable[ServerConfig]) -> list[ToolServer]:
        """Connect each configured server in order."""
        return [await self.connect(c.id, c.name, c.url) for c in configs]

    async def disconnect(self, server_id: str) -> None:
        """Forget *server_id* and close its transport; unknown ids are ignored."""
        known = server_id in self._registry
        self._registry.unregister(server_id)
        await self._drop_transport(server_id)
        if known:
            logger.info("Disconnected from MCP server %s", server_id)

    async def close(self) -> None:
        """Close every open transport.  Registered servers are kept."""
        for server_id in list(self._transports):
            await self._drop_transport(server_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_servers(self) -> list[ToolServer]:
        return self._registry.list()

    def get_server(self, server_id: str) -> ToolServer | None:
        return self._registry.get(server_id)

    def list_all_tools(self) -> list[Tool]:
        return self._catalog.all_tools()

    def find_tool(self, name: str) -> tuple[ToolServer, Tool] | None:
        """First registered server exposing *name* wins."""
        return self._catalog.find_tool(name)

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    async def invoke_tool(
        self,
        server_id: str,
        tool_name: str,
        params: dict[str, Any] | None = None,
    ) -> JsonValue:
        """Call *tool_name* on *server_id* and return the server's result.

        Raises:
            ServerNotFoundError: *server_id* is not registered.
            TransportError: The server is not connected, or the round trip failed.
            ToolNotFoundError: The server does not advertise *tool_name*.
            ValidationError: *params* do not satisfy the tool's input schema.
            RemoteToolError: The server answered with an error object.
        """
        arguments = dict(params or {})
        server = self._registry.get(server_id)
        if server is None:
            raise ServerNotFoundError(server_id)
        if server.status is not ServerStatus.CONNECTED:
            msg = f"Server {server_id} is not connected (status: {server.status.value})"
            raise TransportError(msg)
        tool = server.get_tool(tool_name)
        if tool is None:
            raise ToolNotFoundError(server_id, tool_name)
        validate_arguments(tool_name, tool.input_schema, arguments)

        with _tracer.start_as_current_span("mcp.invoke") as span:
            span.set_attribute(ATTR_SERVER_ID, server_id)
            span.set_attribute(ATTR_TOOL_NAME, tool_name)
            logger.info("Calling tool %s on server %s", tool_name, server.name)
            try:
                transport = self._transports.get(server_id)
                if transport is None:
                    transport = await self._open_transport(server_id, server.url)
                return await self._dispatcher.invoke(transport, tool_name, arguments)
            except MCPError as exc:
                logger.warning("Tool call failed: %s on %s: %s", tool_name, server_id, exc)
                raise

    async def invoke_ref(
        self,
        ref: ToolRef | str,
        params: dict[str, Any] | None = None,
    ) -> JsonValue:
        """Invoke a tool by its ``serverId:toolName`` reference."""
        if isinstance(ref, str):
            ref = ToolRef.parse(ref)
        return await self.invoke_tool(ref.server_id, ref.tool_name, params)

    @staticmethod
    def prune_selection(selected: Iterable[ToolRef | str], server_id: str) -> list[str]:
        """Drop every reference to *server_id* from a tool selection."""
        prefix = f"{server_id}:"
        return [str(ref) for ref in selected if not str(ref).startswith(prefix)]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _create_transport(self, url: str) -> MCPTransport:
        return create_transport(
            url, timeout=self._settings.timeout, headers=self._settings.headers
        )

    async def _open_transport(self, server_id: str, url: str) -> MCPTransport:
        transport = self._transport_factory(url)
        await transport.connect()
        self._transports[server_id] = transport
        return transport

    async def _drop_transport(self, server_id: str) -> None:
        transport = self._transports.pop(server_id, None)
        if transport is None:
            return
        self._dispatcher.forget(transport)
        try:
            await transport.close()
        except MCPError as exc:
            logger.warning("Error closing transport for %s: %s", server_id, exc)

    async def _handshake(self, transport: MCPTransport) -> None:
        """Perform the ``initialize`` handshake."""
        await self._dispatcher.request(
            transport,
            "initialize",
            params={
                "protocolVersion": self._settings.protocol_version,
                "capabilities": {},
                "clientInfo": {
                    "name": self._settings.client_name,
                    "version": self._settings.client_version,
                },
            },
        )

    async def _discover(self, transport: MCPTransport) -> list[Tool]:
        """Send ``tools/list``; accepts ``{"tools": [...]}`` or a bare list."""
        result = await self._dispatcher.request(transport, "tools/list")
        raw_tools = result.get("tools", []) if isinstance(result, dict) else result
        if not isinstance(raw_tools, list):
            msg = "Malformed tools/list result"
            raise TransportError(msg)

        tools: list[Tool] = []
        seen: set[str] = set()
        for raw in raw_tools:
            try:
                tool = Tool.model_validate(raw)
            except PydanticValidationError as exc:
                raise TransportError(f"Malformed tool definition: {exc}") from exc
            if tool.name in seen:
                logger.debug("Ignoring duplicate tool %s", tool.name)
                continue
            seen.add(tool.name)
            tools.append(tool)
        return tools
