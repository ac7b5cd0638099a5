"""Shared CLI output formatters and config helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.table import Table

from agentbuilder.config import AppConfig, ConfigError, ConfigLoader
from agentbuilder.utils.telemetry import configure_telemetry

if TYPE_CHECKING:
    from agentbuilder.protocols.mcp.models import ToolServer

console = Console()

_STATUS_STYLE = {
    "connected": "green",
    "disconnected": "red",
    "error": "yellow",
}


def load_config(path: str) -> AppConfig:
    """Load the config file (defaults when absent) and start telemetry if enabled."""
    try:
        config = ConfigLoader(Path(path)).load_or_default()
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise SystemExit(1) from exc
    if config.telemetry.enabled:
        configure_telemetry(config.telemetry)
    return config


def print_servers_table(servers: list[ToolServer]) -> None:
    """Pretty-print tool servers and their connection state."""
    table = Table(title="MCP Servers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("URL")
    table.add_column("Status")
    table.add_column("Tools", justify="right")

    for server in servers:
        style = _STATUS_STYLE.get(server.status.value, "white")
        table.add_row(
            server.id,
            server.name,
            server.url,
            f"[{style}]{server.status.value}[/{style}]",
            str(len(server.tools)),
        )

    console.print(table)


def print_tools_table(server: ToolServer) -> None:
    """Pretty-print one server's tools with their required parameters."""
    table = Table(title=f"Tools on {server.name}")
    table.add_column("Reference", style="cyan")
    table.add_column("Description")
    table.add_column("Required")

    for tool in server.tools:
        required = ", ".join(tool.input_schema.get("required", [])) or "-"
        table.add_row(f"{server.id}:{tool.name}", _truncate(tool.description), required)

    console.print(table)


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


def parse_params(raw: str) -> dict[str, Any]:
    """Decode a ``--params`` JSON object."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--params") from exc
    if not isinstance(data, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--params")
    return data


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
