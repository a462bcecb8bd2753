"""MCP adapter layer — catalog, dispatch, resources, sessions and transports."""
