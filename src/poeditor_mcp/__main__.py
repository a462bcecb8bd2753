"""Allow ``python -m poeditor_mcp``."""

from poeditor_mcp.cli import cli

cli()
