"""tools — print the gateway's capability listing."""

from __future__ import annotations

import json

import click

from poeditor_mcp import __version__
from poeditor_mcp.commands._base import PoeCommand
from poeditor_mcp.mcp.schema import describe
from poeditor_mcp.mcp.tools import build_catalog


@click.command(
    cls=PoeCommand,
    needs_token=False,
    examples="""\
  # Full listing with input schemas
  poeditor-mcp tools

  # Names only
  poeditor-mcp tools --names""",
)
@click.option("--names", is_flag=True, help="Print operation names only.")
def tools(names: bool) -> None:
    """Print every operation and its input schema as JSON (no token needed)."""
    catalog = build_catalog()
    if names:
        for operation in catalog:
            click.echo(operation.name)
        return

    from poeditor_mcp.mcp.server import SERVER_NAME

    listing = {
        "server": SERVER_NAME,
        "version": __version__,
        "tools": [describe(op) for op in catalog],
    }
    click.echo(json.dumps(listing, indent=2))
