"""RequestDispatcher — JSON-RPC round trips with correlation by request id.

Every request gets the next integer id (starting at 1, never reset) and a
pending future.  Whoever is waiting reads from the transport, one reader per
transport at a time, and routes each incoming message to the future whose id
it carries.  Responses are therefore matched by id, never by arrival order,
and a response for an abandoned or timed-out call is simply discarded.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from agentbuilder.protocols.errors import RemoteToolError, TransportError, ValidationError
from agentbuilder.protocols.mcp.models import JsonRpcRequest, JsonRpcResponse
from agentbuilder.utils.telemetry import (
    ATTR_ERROR_CODE,
    ATTR_METHOD,
    ATTR_REQUEST_ID,
    get_tracer,
)

if TYPE_CHECKING:
    from pydantic import JsonValue

    from agentbuilder.protocols.mcp.transport import MCPTransport

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

RequestId = int | str


class RequestDispatcher:
    """Sends JSON-RPC requests over a transport and correlates the replies.

    One dispatcher serves every server of a client, so ids are unique per
    client rather than per server.  No call is ever retried.
    """

    def __init__(self, *, timeout: float = 30.0) -> None:
        self._timeout = timeout
        self._last_id = 0
        self._pending: dict[RequestId, tuple[MCPTransport, asyncio.Future[JsonRpcResponse]]] = {}
        self._readers: weakref.WeakKeyDictionary[MCPTransport, asyncio.Lock] = (
            weakref.WeakKeyDictionary()
        )

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def pending_ids(self) -> list[RequestId]:
        """Ids of requests still awaiting a response."""
        return list(self._pending)

    def next_id(self) -> int:
        """Reserve the next correlation id."""
        self._last_id += 1
        return self._last_id

    async def call(
        self,
        transport: MCPTransport,
        method: str,
        params: dict[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> JsonRpcResponse:
        """Send one request and wait for the response with the same id.

        Error envelopes are returned, not raised.  Transport failures,
        malformed responses and timeouts raise :class:`TransportError`.
        Cancelling the awaiting task abandons the call.
        """
        try:
            request = JsonRpcRequest(method=method, params=params or {}, id=self.next_id())
        except PydanticValidationError as exc:
            problems = [f"/{'/'.join(map(str, e['loc'][1:]))}: {e['msg']}" for e in exc.errors()]
            raise ValidationError(method, problems) from exc
        future: asyncio.Future[JsonRpcResponse] = asyncio.get_running_loop().create_future()
        self._pending[request.id] = (transport, future)
        limit = self._timeout if timeout is None else timeout

        with _tracer.start_as_current_span("mcp.request") as span:
            span.set_attribute(ATTR_METHOD, method)
            span.set_attribute(ATTR_REQUEST_ID, request.id)
            logger.debug("-> %s id=%s", method, request.id)
            try:
                response = await asyncio.wait_for(
                    self._exchange(transport, request, future), timeout=limit
                )
            except TimeoutError as exc:
                msg = f"{method} (id={request.id}) timed out after {limit}s"
                raise TransportError(msg) from exc
            finally:
                self._pending.pop(request.id, None)
            if response.error is not None:
                span.set_attribute(ATTR_ERROR_CODE, response.error.code)
            logger.debug("<- %s id=%s ok=%s", method, request.id, response.ok)
            return response

    async def request(
        self,
        transport: MCPTransport,
        method: str,
        params: dict[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> JsonValue:
        """Like :meth:`call` but returns ``result`` and raises on error envelopes."""
        response = await self.call(transport, method, params, timeout=timeout)
        if response.error is not None:
            error = response.error
            raise RemoteToolError(error.code, error.message, error.data)
        return response.result

    async def invoke(
        self,
        transport: MCPTransport,
        tool_name: str,
        params: dict[str, Any],
        *,
        timeout: float | None = None,
    ) -> JsonValue:
        """Invoke ``tools/<tool_name>`` and return its result."""
        return await self.request(transport, f"tools/{tool_name}", params, timeout=timeout)

    def forget(self, transport: MCPTransport) -> None:
        """Drop the reader lock kept for *transport*."""
        self._readers.pop(transport, None)

    async def _exchange(
        self,
        transport: MCPTransport,
        request: JsonRpcRequest,
        future: asyncio.Future[JsonRpcResponse],
    ) -> JsonRpcResponse:
        await transport.send(request.model_dump())
        lock = self._readers.setdefault(transport, asyncio.Lock())
        while not future.done():
            async with lock:
                if future.done():
                    break
                message = await transport.receive()
                self._route(transport, message)
        return future.result()

    def _route(self, transport: MCPTransport, message: dict[str, Any]) -> None:
        """Resolve the pending future matching the message id, if any."""
        request_id = message.get("id")
        entry = None
        if isinstance(request_id, int | str) and not isinstance(request_id, bool):
            entry = self._pending.get(request_id)
        if request_id is None and "error" in message:
            self._fail_sole_call(transport, message)
            return
        if entry is None or entry[0] is not transport or entry[1].done():
            logger.debug("Discarding message with uncorrelated id %r", request_id)
            return

        future = entry[1]
        try:
            response = JsonRpcResponse.model_validate(message)
        except PydanticValidationError as exc:
            detail = exc.errors()[0]["msg"] if exc.errors() else str(exc)
            future.set_exception(
                TransportError(f"Malformed response for id {request_id}: {detail}")
            )
            return
        future.set_result(response)

    def _fail_sole_call(self, transport: MCPTransport, message: dict[str, Any]) -> None:
        """Fail the only outstanding call on *transport* with an id-less error reply.

        Servers answer with ``"id": null`` when they could not read the request
        id.  With more than one call in flight the reply cannot be attributed
        and is discarded.
        """
        waiting = [
            (request_id, future)
            for request_id, (owner, future) in self._pending.items()
            if owner is transport and not future.done()
        ]
        if len(waiting) != 1:
            logger.debug("Discarding id-less error reply with %d calls in flight", len(waiting))
            return
        request_id, future = waiting[0]
        future.set_exception(
            TransportError(f"Uncorrelated error response for id {request_id}: {message['error']}")
        )
