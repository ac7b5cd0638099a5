"""``agentbuilder servers`` — connect configured servers and report their state."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from agentbuilder.cli_commands._output import console, load_config, print_json, print_servers_table

if TYPE_CHECKING:
    from agentbuilder.protocols.mcp.models import ToolServer


@click.group()
def servers() -> None:
    """Inspect configured MCP servers."""


@servers.command("list")
@click.option(
    "--config",
    "config_path",
    default="agentbuilder.yaml",
    type=click.Path(dir_okay=False),
    help="Configuration file (defaults are used when it does not exist).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format.",
)
def list_servers(config_path: str, fmt: str) -> None:
    """Connect every configured server and show its status."""
    from agentbuilder.protocols.mcp.client import MCPClient

    config = load_config(config_path)
    if not config.servers:
        console.print("[yellow]No servers configured.[/yellow]")
        return

    async def _connect() -> list[ToolServer]:
        async with MCPClient(config.client) as client:
            return await client.connect_all(config.servers)

    results = asyncio.run(_connect())

    if fmt == "json":
        print_json([s.model_dump(mode="json") for s in results])
    else:
        print_servers_table(results)
