"""ExportService — one project exported into several languages at once."""

from __future__ import annotations

from typing import Any

import structlog

from poeditor_mcp.errors import RemoteApiError
from poeditor_mcp.services.base import BaseService
from poeditor_mcp.services.contracts import ExportProjectInput
from poeditor_mcp.services.fanout import fan_out
from poeditor_mcp.services.result import OperationResult

logger = structlog.get_logger(__name__)

EXPORT_URL_TTL = "10 minutes"


class ExportService(BaseService):
    async def export_project(self, params: ExportProjectInput) -> OperationResult:
        """Request a download URL per language; each language succeeds or fails alone."""
        op = "export_project"
        logger.info(
            "export.start",
            project_id=params.project_id,
            languages=params.language_codes,
            format=params.format,
        )

        async def _export(language_code: str) -> dict[str, Any]:
            response = await self._client.export_project(
                params.project_id,
                language_code,
                params.format,
                filters=params.filters,
                tags=params.tags,
                fallback_language=params.fallback_language,
            )
            url = response.unwrap().get("url")
            if not url:
                msg = "Export returned no download URL"
                raise RemoteApiError(msg, remote_code=response.response.code)
            return {"download_url": url}

        batch = await fan_out(params.language_codes, _export, label="export")

        exports: list[dict[str, Any]] = []
        for outcome in batch.items:
            if outcome.ok:
                exports.append(
                    {
                        "language_code": outcome.item,
                        "download_url": outcome.data["download_url"],
                        "format": params.format,
                        "success": True,
                        "expires_in": EXPORT_URL_TTL,
                    }
                )
            else:
                exports.append(
                    {"language_code": outcome.item, "success": False, "error": outcome.error}
                )

        logger.info("export.complete", project_id=params.project_id, **batch.summary())
        return OperationResult.success(
            op,
            {
                "exports": exports,
                "summary": batch.summary(),
                "note": f"Download URLs expire in {EXPORT_URL_TTL}",
            },
        )
