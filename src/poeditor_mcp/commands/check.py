"""check — verify the configured API token against POEditor."""

from __future__ import annotations

import anyio
import click

from poeditor_mcp.commands._base import PoeCommand
from poeditor_mcp.commands._context import AppContext
from poeditor_mcp.services.result import OperationResult


@click.command(
    cls=PoeCommand,
    examples="""\
  # Validate the token from the environment
  POEDITOR_API_TOKEN=... poeditor-mcp check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Validate the API token; exits 1 when it is rejected."""
    settings = app.load_settings()

    from poeditor_mcp.mcp.server import client_from_settings
    from poeditor_mcp.services.projects import ProjectService

    async def _check() -> OperationResult:
        async with client_from_settings(settings) as client:
            return await ProjectService(client).check_configuration()

    result = anyio.run(_check)
    app.emit(result, failed=not (result.ok and result.data.get("valid")))
