"""Validation & dispatch pipeline.

``Dispatcher.handle`` is the single entry point for tool calls. It always
returns an :class:`OperationResult`: unknown names, malformed argument
objects, validation failures and handler exceptions all come back as failure
envelopes, so nothing short of cancellation escapes into the session.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from poeditor_mcp.services.result import OperationResult

if TYPE_CHECKING:
    from poeditor_mcp.infrastructure.poeditor import PoeditorClient
    from poeditor_mcp.mcp.catalog import OperationCatalog

logger = structlog.get_logger(__name__)


def format_validation_error(exc: ValidationError) -> tuple[str, list[dict[str, Any]]]:
    """Render a ``ValidationError`` as ``field: message; ...`` plus per-field details."""
    errors: list[dict[str, Any]] = []
    parts: list[str] = []
    for err in exc.errors(include_url=False, include_context=False, include_input=False):
        location = ".".join(str(p) for p in err["loc"]) or "(root)"
        errors.append({"field": location, "message": err["msg"], "type": err["type"]})
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts), errors


class Dispatcher:
    """Routes tool calls to catalog operations for one remote client."""

    def __init__(self, catalog: OperationCatalog, client: PoeditorClient) -> None:
        self._catalog = catalog
        self._client = client

    async def handle(self, name: str, arguments: Any = None) -> OperationResult:
        operation = self._catalog.find(name)
        if operation is None:
            logger.warning("dispatch.unknown_operation", op=name)
            return OperationResult.failure(name, "UNKNOWN_OPERATION", f"Unknown tool: {name}")

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            return OperationResult.failure(
                name,
                "INVALID_REQUEST",
                f"Arguments for {name} must be an object, got {type(arguments).__name__}",
            )

        try:
            params = operation.input_model.model_validate(dict(arguments))
        except ValidationError as exc:
            message, errors = format_validation_error(exc)
            logger.info("dispatch.invalid_input", op=name, errors=len(errors))
            return OperationResult.failure(
                name,
                "VALIDATION_ERROR",
                f"Invalid arguments for {name}: {message}",
                detail={"errors": errors},
            )

        logger.debug("dispatch.call", op=name)
        try:
            result = await operation.handler(params, self._client)
        except Exception as exc:
            logger.exception("dispatch.handler_error", op=name)
            return OperationResult.failure(name, "HANDLER_ERROR", str(exc) or type(exc).__name__)

        if isinstance(result, OperationResult):
            return result
        return OperationResult.success(name, dict(result))
