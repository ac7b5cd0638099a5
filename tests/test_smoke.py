"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import agentbuilder

    assert agentbuilder.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from agentbuilder.cli import main

    assert callable(main)


def test_lazy_import_from_package() -> None:
    import agentbuilder
    from agentbuilder.protocols.mcp.client import MCPClient

    assert agentbuilder.MCPClient is MCPClient


def test_public_exports() -> None:
    from agentbuilder.protocols import (
        MCPError,
        RemoteToolError,
        ServerNotFoundError,
        TransportError,
        ValidationError,
    )

    for exc in (RemoteToolError, ServerNotFoundError, TransportError, ValidationError):
        assert issubclass(exc, MCPError)
    assert not issubclass(TransportError, RemoteToolError)
