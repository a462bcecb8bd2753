"""MCP tool definitions — 7 operations over the POEditor API.

Categories: Configuration (1), Projects (1), Terms (4), Export (1).
Each tool has a ``<name>_impl`` coroutine testable without an MCP session.
``build_catalog()`` registers them with their input models and
``register_tools()`` exposes the catalog on a low-level MCP server.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog
from mcp import types

from poeditor_mcp.mcp.catalog import Operation, OperationCatalog
from poeditor_mcp.mcp.schema import describe
from poeditor_mcp.services.contracts import (
    AddTermsInput,
    DeleteTermInput,
    EmptyInput,
    ExportProjectInput,
    ListTermsInput,
    UpdateTermsInput,
)
from poeditor_mcp.services.export import ExportService
from poeditor_mcp.services.projects import ProjectService
from poeditor_mcp.services.terms import TermService

if TYPE_CHECKING:
    from mcp.server.lowlevel import Server

    from poeditor_mcp.infrastructure.poeditor import PoeditorClient
    from poeditor_mcp.mcp.dispatch import Dispatcher
    from poeditor_mcp.services.result import OperationResult

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Configuration & projects
# ---------------------------------------------------------------------------


async def check_configuration_impl(_params: EmptyInput, client: PoeditorClient) -> OperationResult:
    return await ProjectService(client).check_configuration()


async def list_projects_with_languages_impl(
    _params: EmptyInput, client: PoeditorClient
) -> OperationResult:
    return await ProjectService(client).list_projects_with_languages()


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------


async def list_terms_of_a_project_impl(
    params: ListTermsInput, client: PoeditorClient
) -> OperationResult:
    return await TermService(client).list_terms(params)


async def add_terms_to_a_project_impl(
    params: AddTermsInput, client: PoeditorClient
) -> OperationResult:
    return await TermService(client).add_terms(params)


async def update_terms_of_a_project_impl(
    params: UpdateTermsInput, client: PoeditorClient
) -> OperationResult:
    return await TermService(client).update_terms(params)


async def delete_term_from_a_project_impl(
    params: DeleteTermInput, client: PoeditorClient
) -> OperationResult:
    return await TermService(client).delete_term(params)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


async def export_project_impl(params: ExportProjectInput, client: PoeditorClient) -> OperationResult:
    return await ExportService(client).export_project(params)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

OPERATIONS: tuple[Operation, ...] = (
    Operation(
        name="check_configuration",
        description="Validate that the POEditor API token is valid and working",
        input_model=EmptyInput,
        handler=check_configuration_impl,
    ),
    Operation(
        name="list_projects_with_languages",
        description=(
            "Get all translation projects with their available languages "
            "and translation progress"
        ),
        input_model=EmptyInput,
        handler=list_projects_with_languages_impl,
    ),
    Operation(
        name="list_terms_of_a_project",
        description=(
            "Get all terms and their translations for a specific project "
            "with optional filtering"
        ),
        input_model=ListTermsInput,
        handler=list_terms_of_a_project_impl,
    ),
    Operation(
        name="add_terms_to_a_project",
        description=(
            "Add new translation terms to a specific project, optionally with "
            "initial translations"
        ),
        input_model=AddTermsInput,
        handler=add_terms_to_a_project_impl,
    ),
    Operation(
        name="update_terms_of_a_project",
        description=(
            "Update existing terms (text, context, reference, plural, comment, tags) "
            "AND their translations"
        ),
        input_model=UpdateTermsInput,
        handler=update_terms_of_a_project_impl,
    ),
    Operation(
        name="delete_term_from_a_project",
        description="Delete a single term from a project (safe: one term at a time)",
        input_model=DeleteTermInput,
        handler=delete_term_from_a_project_impl,
    ),
    Operation(
        name="export_project",
        description="Export translations for a single project in multiple languages at once",
        input_model=ExportProjectInput,
        handler=export_project_impl,
    ),
)


def build_catalog() -> OperationCatalog:
    """The sealed catalog of all 7 tools, in listing order."""
    return OperationCatalog(OPERATIONS).seal()


def to_call_tool_result(result: OperationResult) -> types.CallToolResult:
    """Wrap an envelope as a tool result; failures set ``isError`` but travel the same way."""
    payload = result.to_payload()
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=json.dumps(payload, indent=2, default=str))],
        structuredContent=payload,
        isError=not result.ok,
    )


def register_tools(server: Server, catalog: OperationCatalog, dispatcher: Dispatcher) -> None:
    """Register ``tools/list`` and ``tools/call`` on a low-level MCP server."""

    @server.list_tools()  # type: ignore[untyped-decorator]
    async def list_tools() -> list[types.Tool]:
        return [types.Tool.model_validate(describe(op)) for op in catalog.list_operations()]

    # Arguments are validated by the dispatcher against the input models.
    @server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        logger.info("tool.call", op=name)
        result = await dispatcher.handle(name, arguments)
        return to_call_tool_result(result)
