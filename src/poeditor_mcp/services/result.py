"""OperationResult and OperationError — the uniform response envelope.

INVARIANT: every tool call yields exactly one OperationResult, success or
failure. Failures are ordinary values delivered over the same channel as
successes; the MCP adapter and the CLI both consume this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class OperationError(BaseModel):
    """Structured error payload within an OperationResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class OperationResult(BaseModel):
    """Return type of every operation handler and of the dispatcher.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"export_project"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: OperationError | None = None

    @classmethod
    def success(
        cls, op: str, data: dict[str, Any], *, warnings: list[str] | None = None
    ) -> OperationResult:
        return cls(ok=True, op=op, data=data, warnings=warnings or [])

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
    ) -> OperationResult:
        error = OperationError(code=code, message=message, detail=detail or {})
        return cls(ok=False, op=op, error=error)

    def to_payload(self) -> dict[str, Any]:
        """JSON-friendly dict; empty ``warnings`` and absent ``error`` are omitted."""
        payload: dict[str, Any] = {"ok": self.ok, "op": self.op, "data": self.data}
        if self.warnings:
            payload["warnings"] = self.warnings
        if self.error is not None:
            payload["error"] = {"code": self.error.code, "message": self.error.message}
            if self.error.detail:
                payload["error"]["detail"] = self.error.detail
        return payload
