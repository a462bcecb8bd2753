"""serve — start the MCP gateway."""

from __future__ import annotations

import anyio
import click

from poeditor_mcp.commands._base import PoeCommand
from poeditor_mcp.commands._context import AppContext


@click.command(
    cls=PoeCommand,
    examples="""\
  # SSE gateway on the default address (0.0.0.0:9142)
  POEDITOR_API_TOKEN=... poeditor-mcp serve

  # Custom host/port, tools only
  poeditor-mcp serve --host 127.0.0.1 --port 9000 --no-resources

  # Single local client over stdin/stdout
  poeditor-mcp serve --transport stdio""",
)
@click.option(
    "--transport",
    default=None,
    type=click.Choice(["sse", "stdio"]),
    help="MCP transport protocol. [default: sse]",
)
@click.option("--host", default=None, help="Bind address (SSE only).")
@click.option("--port", default=None, type=int, help="Listen port (SSE only).")
@click.option(
    "--resources/--no-resources",
    default=None,
    help="Expose projects as MCP resources. [default: on]",
)
@click.pass_obj
def serve(
    app: AppContext,
    transport: str | None,
    host: str | None,
    port: int | None,
    resources: bool | None,
) -> None:
    """Start the MCP gateway."""
    settings = app.load_settings(transport=transport, host=host, port=port, resources=resources)

    from poeditor_mcp.mcp.server import run_sse, run_stdio

    if settings.transport == "stdio":
        anyio.run(run_stdio, settings)
    else:
        run_sse(settings)
