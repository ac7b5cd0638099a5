"""agentbuilder CLI entrypoint."""

from __future__ import annotations

import logging

import click

from agentbuilder import __version__


@click.group()
@click.version_option(version=__version__, prog_name="agentbuilder")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """agentbuilder — connect MCP tool servers and call their tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
from agentbuilder.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
