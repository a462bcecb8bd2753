"""BaseService — shared foundation for operation handlers.

Every service receives a :class:`PoeditorClient` at construction time and
returns :class:`OperationResult` from each public method. A failed primary
remote call becomes a failure result; nested per-item failures are reported
inside the payload by the fan-out orchestrator instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from poeditor_mcp.services.result import OperationResult

if TYPE_CHECKING:
    from poeditor_mcp.errors import GatewayError
    from poeditor_mcp.infrastructure.poeditor import PoeditorClient

logger = structlog.get_logger(__name__)


class BaseService:
    """Base for service classes.

    Usage::

        class TermService(BaseService):
            async def delete_term(self, params) -> OperationResult:
                try:
                    data = (await self._client.delete_terms(...)).unwrap()
                except GatewayError as exc:
                    return self._failed("delete_term_from_a_project", "delete term", exc)
                ...
    """

    def __init__(self, client: PoeditorClient) -> None:
        self._client = client

    @staticmethod
    def _failed(op: str, action: str, exc: GatewayError) -> OperationResult:
        """Failure result for a primary remote call, worded ``Failed to <action>: ...``."""
        logger.warning("operation.failed", op=op, error=str(exc), code=exc.code)
        detail = {}
        remote_code = getattr(exc, "remote_code", "")
        if remote_code:
            detail["remote_code"] = remote_code
        return OperationResult.failure(op, exc.code, f"Failed to {action}: {exc}", detail=detail)
