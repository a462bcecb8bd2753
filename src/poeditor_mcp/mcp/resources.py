"""MCP resource definitions — one resource per POEditor project.

URI: ``poeditor://project/{project_id}``.
Reading a project fetches the project itself (required) and its languages
(best effort). A languages failure leaves ``languages`` empty and adds a
warning; it never turns a found project into an error.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

import structlog
from mcp import types
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, ErrorData
from pydantic import AnyUrl, BaseModel

from poeditor_mcp.domain.types import Language, project_record
from poeditor_mcp.errors import GatewayError, MalformedResourceError, ResourceNotFoundError
from poeditor_mcp.services.projects import ProjectService

if TYPE_CHECKING:
    from mcp.server.lowlevel import Server

    from poeditor_mcp.infrastructure.poeditor import PoeditorClient

logger = structlog.get_logger(__name__)

SCHEME = "poeditor"
PROJECT_URI = re.compile(rf"^{SCHEME}://project/(\d+)$")
MIME_TYPE = "application/json"


class ResourceDescriptor(BaseModel):
    model_config = {"frozen": True}

    uri: str
    name: str
    description: str
    mime_type: str = MIME_TYPE


def project_uri(project_id: int) -> str:
    return f"{SCHEME}://project/{project_id}"


def parse_project_uri(uri: str) -> int:
    """Project id from a resource URI; raises :class:`MalformedResourceError`."""
    match = PROJECT_URI.match(uri)
    if match is None:
        msg = f"Invalid resource URI: {uri}. Expected format: {SCHEME}://project/{{project_id}}"
        raise MalformedResourceError(msg)
    return int(match.group(1))


class ResourceResolver:
    def __init__(self, client: PoeditorClient) -> None:
        self._projects = ProjectService(client)

    async def list_resources(self) -> list[ResourceDescriptor]:
        projects = await self._projects.projects()
        return [
            ResourceDescriptor(
                uri=project_uri(p.id),
                name=p.name,
                description=p.description or f"POEditor project: {p.name}",
            )
            for p in projects
        ]

    async def read(self, uri: str) -> dict[str, Any]:
        project_id = parse_project_uri(uri)

        project = next((p for p in await self._projects.projects() if p.id == project_id), None)
        if project is None:
            msg = f"Project {project_id} not found"
            raise ResourceNotFoundError(msg)

        warnings: list[str] = []
        languages: list[Language] = []
        try:
            languages = await self._projects.languages(project_id)
        except Exception as exc:
            logger.warning("resource.languages_failed", project_id=project_id, error=str(exc))
            warnings.append(f"Failed to fetch languages: {exc}")

        record = project_record(project, languages)
        record["warnings"] = warnings
        return record


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

RESOURCE_NOT_FOUND = -32002


def _to_error_data(exc: GatewayError, action: str) -> ErrorData:
    if isinstance(exc, MalformedResourceError):
        return ErrorData(code=INVALID_PARAMS, message=str(exc))
    if isinstance(exc, ResourceNotFoundError):
        return ErrorData(code=RESOURCE_NOT_FOUND, message=str(exc))
    return ErrorData(code=INTERNAL_ERROR, message=f"Failed to {action}: {exc}")


def register_resources(server: Server, resolver: ResourceResolver) -> None:
    """Register ``resources/list`` and ``resources/read``.

    Registering these handlers is what makes the server advertise the
    resources capability; skip this call to run a tools-only gateway.
    """

    @server.list_resources()  # type: ignore[untyped-decorator]
    async def list_resources() -> list[types.Resource]:
        try:
            descriptors = await resolver.list_resources()
        except GatewayError as exc:
            logger.error("resource.list_failed", error=str(exc))
            raise McpError(_to_error_data(exc, "list resources")) from exc
        return [
            types.Resource(
                uri=d.uri, name=d.name, description=d.description, mimeType=d.mime_type
            )
            for d in descriptors
        ]

    @server.read_resource()  # type: ignore[untyped-decorator]
    async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        try:
            record = await resolver.read(str(uri))
        except GatewayError as exc:
            logger.error("resource.read_failed", uri=str(uri), error=str(exc))
            raise McpError(_to_error_data(exc, "read resource")) from exc
        return [ReadResourceContents(content=json.dumps(record, indent=2), mime_type=MIME_TYPE)]
