"""Subcommand modules for poeditor-mcp.

Provides register_commands() which uses deferred imports to keep
``poeditor-mcp --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from poeditor_mcp.commands.check import check
    from poeditor_mcp.commands.serve import serve
    from poeditor_mcp.commands.tools import tools

    cli.add_command(serve)
    cli.add_command(tools)
    cli.add_command(check)
