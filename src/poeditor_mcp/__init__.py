"""poeditor-mcp — MCP gateway for the POEditor translation API."""

__version__ = "1.0.0"
