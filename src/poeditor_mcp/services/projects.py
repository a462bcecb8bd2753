"""ProjectService — configuration check and project listing."""

from __future__ import annotations

from typing import Any

import structlog

from poeditor_mcp.domain.types import Language, Project, project_record
from poeditor_mcp.errors import GatewayError, RemoteTransportError
from poeditor_mcp.services.base import BaseService
from poeditor_mcp.services.fanout import fan_out
from poeditor_mcp.services.result import OperationResult

logger = structlog.get_logger(__name__)


class ProjectService(BaseService):
    """Read-only project operations."""

    async def projects(self) -> list[Project]:
        """All projects visible to the token. Raises on remote failure."""
        result = (await self._client.list_projects()).unwrap()
        return [Project.model_validate(p) for p in result.get("projects") or []]

    async def languages(self, project_id: int) -> list[Language]:
        """Languages of one project. Raises on remote failure."""
        result = (await self._client.list_languages(project_id)).unwrap()
        return [Language.model_validate(lang) for lang in result.get("languages") or []]

    async def check_configuration(self) -> OperationResult:
        op = "check_configuration"
        try:
            response = await self._client.list_projects()
        except RemoteTransportError as exc:
            logger.warning("config.check_error", error=str(exc))
            return OperationResult.success(
                op, {"valid": False, "message": str(exc), "error": "CONNECTION_ERROR"}
            )

        if not response.ok:
            return OperationResult.success(
                op,
                {
                    "valid": False,
                    "message": response.response.message,
                    "error": response.response.code,
                },
            )

        count = len((response.result or {}).get("projects") or [])
        logger.info("config.check_ok", project_count=count)
        return OperationResult.success(
            op,
            {
                "valid": True,
                "message": "POEditor API token is valid and working",
                "project_count": count,
            },
        )

    async def list_projects_with_languages(self) -> OperationResult:
        op = "list_projects_with_languages"
        try:
            projects = await self.projects()
        except GatewayError as exc:
            return self._failed(op, "list projects", exc)

        async def _languages(project: Project) -> dict[str, Any]:
            return {"languages": await self.languages(project.id)}

        batch = await fan_out(projects, _languages, key=lambda p: str(p.id), label="languages")

        rows: list[dict[str, Any]] = []
        for project, outcome in zip(projects, batch.items, strict=True):
            if outcome.ok:
                rows.append(
                    project_record(project, outcome.data["languages"], with_counts=True)
                )
            else:
                row = project_record(project, [])
                row["error"] = outcome.error
                rows.append(row)

        warnings = [f"Failed to fetch languages for project {r.item}" for r in batch.failures()]
        return OperationResult.success(op, {"projects": rows, "total": len(rows)}, warnings=warnings)
