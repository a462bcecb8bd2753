"""Root CLI group for poeditor-mcp with global flags and command registration."""

from __future__ import annotations

import click

from poeditor_mcp import __version__
from poeditor_mcp.commands import register_commands
from poeditor_mcp.commands._context import AppContext


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="poeditor-mcp")
@click.option("-v", "--verbose", is_flag=True, help="Debug-level logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_json: bool) -> None:
    """poeditor-mcp — MCP gateway for the POEditor translation API."""
    ctx.obj = AppContext(verbose=verbose, log_json=log_json)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
