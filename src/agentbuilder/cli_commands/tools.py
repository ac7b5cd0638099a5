"""``agentbuilder tools`` — discover and call tools on an MCP server."""

from __future__ import annotations

import asyncio
from typing import Any

import click

from agentbuilder.cli_commands._output import (
    console,
    load_config,
    parse_params,
    print_json,
    print_tools_table,
)


@click.group()
def tools() -> None:
    """Discover and call tools."""


_config_option = click.option(
    "--config",
    "config_path",
    default="agentbuilder.yaml",
    type=click.Path(dir_okay=False),
    help="Configuration file for client settings.",
)


@tools.command("discover")
@click.argument("url")
@click.option("--id", "server_id", default="cli", help="Server id used in tool references.")
@click.option("--name", default="CLI Server", help="Human-readable server name.")
@_config_option
def discover(url: str, server_id: str, name: str, config_path: str) -> None:
    """Discover tools from the MCP server at URL."""
    from agentbuilder.protocols.mcp.client import MCPClient
    from agentbuilder.protocols.mcp.models import ServerStatus

    config = load_config(config_path)

    async def _discover() -> Any:
        async with MCPClient(config.client) as client:
            return await client.connect(server_id, name, url)

    server = asyncio.run(_discover())
    if server.status is not ServerStatus.CONNECTED:
        console.print(f"[red]Discovery error:[/red] {server.error}")
        raise SystemExit(1)

    if not server.tools:
        console.print("[yellow]No tools discovered.[/yellow]")
        return

    print_tools_table(server)


@tools.command("call")
@click.argument("url")
@click.argument("tool")
@click.option("--params", "raw_params", default="{}", help="Tool arguments as a JSON object.")
@_config_option
def call(url: str, tool: str, raw_params: str, config_path: str) -> None:
    """Call TOOL on the MCP server at URL and print the result."""
    from agentbuilder.protocols.errors import MCPError, TransportError
    from agentbuilder.protocols.mcp.client import MCPClient
    from agentbuilder.protocols.mcp.models import ServerStatus

    params = parse_params(raw_params)
    config = load_config(config_path)

    async def _call() -> Any:
        async with MCPClient(config.client) as client:
            server = await client.connect("cli", "CLI Server", url)
            if server.status is not ServerStatus.CONNECTED:
                msg = f"Cannot connect to {url}: {server.error}"
                raise TransportError(msg)
            return await client.invoke_tool(server.id, tool, params)

    try:
        result = asyncio.run(_call())
    except MCPError as exc:
        console.print(f"[red]Tool error:[/red] {exc}")
        raise SystemExit(1) from exc

    print_json(result)
