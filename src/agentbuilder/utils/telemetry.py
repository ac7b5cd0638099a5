"""Tracing for MCP traffic.

Connects, discovery and every JSON-RPC round trip open a span through
:func:`get_tracer`.  Until :func:`configure_telemetry` installs a provider
the OpenTelemetry API hands out no-op tracers, so the client never needs
the SDK.  Exporting spans requires the ``otel`` extra::

    pip install agentbuilder[otel]
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from opentelemetry import trace

if TYPE_CHECKING:
    from agentbuilder.config.models import TelemetrySettings

# Span attribute keys
ATTR_SERVER_ID = "agentbuilder.mcp.server.id"
ATTR_SERVER_URL = "agentbuilder.mcp.server.url"
ATTR_SERVER_STATUS = "agentbuilder.mcp.server.status"
ATTR_TOOL_NAME = "agentbuilder.mcp.tool.name"
ATTR_TOOL_COUNT = "agentbuilder.mcp.tool.count"
ATTR_METHOD = "agentbuilder.mcp.method"
ATTR_REQUEST_ID = "agentbuilder.mcp.request.id"
ATTR_ERROR_CODE = "agentbuilder.mcp.error.code"

_INSTRUMENTATION_NAME = "agentbuilder"
_OTEL_HINT = "Install it with: pip install agentbuilder[otel]"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Tracer for *name*; a no-op until a provider is configured."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def build_tracer_provider(settings: TelemetrySettings) -> Any:
    """Create an SDK tracer provider for *settings* without installing it.

    Spans go to the OTLP/gRPC endpoint when one is set and to stdout
    otherwise.

    Raises
    ------
    ImportError
        If ``opentelemetry-sdk`` (or the OTLP exporter, when an endpoint is
        configured) is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = f"opentelemetry-sdk is required for tracing. {_OTEL_HINT}"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": settings.service_name}))
    if settings.otlp_endpoint:
        exporter = _otlp_exporter(settings.otlp_endpoint)
        provider.add_span_processor(BatchSpanProcessor(exporter))
    else:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    return provider


def configure_telemetry(settings: TelemetrySettings) -> None:
    """Install the tracer provider built from *settings*; call once at startup."""
    trace.set_tracer_provider(build_tracer_provider(settings))


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = f"opentelemetry-exporter-otlp is required for OTLP export. {_OTEL_HINT}"
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
