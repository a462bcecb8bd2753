"""Service layer — operation handlers returning OperationResult.

Services may import from domain and infrastructure layers.
They must never import from commands or mcp.
"""
