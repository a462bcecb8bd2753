"""MCP server setup.

``create_server`` builds one low-level MCP server bound to one POEditor
client. The SSE app creates one of those per connection through the
:class:`SessionRegistry`; the stdio runner creates exactly one.

Transports: SSE (default, multi-client) on ``GET /sse`` + ``POST /message``,
or stdio for a single local client. ``GET /health`` reports liveness and the
number of live sessions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import anyio
import structlog
from mcp import types
from mcp.server.lowlevel import Server
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from poeditor_mcp import __version__
from poeditor_mcp.errors import SessionError
from poeditor_mcp.infrastructure.poeditor import PoeditorClient
from poeditor_mcp.mcp.dispatch import Dispatcher
from poeditor_mcp.mcp.resources import ResourceResolver, register_resources
from poeditor_mcp.mcp.sessions import SessionRegistry
from poeditor_mcp.mcp.tools import build_catalog, register_tools
from poeditor_mcp.mcp.transport import SESSION_PARAM, SseTransport

if TYPE_CHECKING:
    from starlette.types import Receive, Scope, Send

    from poeditor_mcp.config.settings import GatewaySettings
    from poeditor_mcp.mcp.catalog import OperationCatalog

__all__ = ["create_app", "create_server", "run_sse", "run_stdio"]

logger = structlog.get_logger(__name__)

SERVER_NAME = "poeditor-mcp-server"
SSE_PATH = "/sse"
MESSAGE_PATH = "/message"


def create_server(
    client: PoeditorClient,
    *,
    catalog: OperationCatalog | None = None,
    resources_enabled: bool = True,
) -> Server:
    """Create a protocol server that dispatches to *client*.

    The resources capability is only advertised when *resources_enabled* is
    set; tool handling is identical either way.
    """
    catalog = catalog or build_catalog()
    server: Server = Server(SERVER_NAME, version=__version__)
    register_tools(server, catalog, Dispatcher(catalog, client))
    if resources_enabled:
        register_resources(server, ResourceResolver(client))
    return server


def client_from_settings(settings: GatewaySettings) -> PoeditorClient:
    return PoeditorClient(
        settings.api_token.get_secret_value(),
        base_url=settings.api_url,
        timeout=settings.request_timeout,
    )


def registry_from_settings(settings: GatewaySettings) -> SessionRegistry:
    catalog = build_catalog()
    return SessionRegistry(
        client_factory=lambda: client_from_settings(settings),
        server_factory=lambda client: create_server(
            client, catalog=catalog, resources_enabled=settings.resources
        ),
    )


# ---------------------------------------------------------------------------
# HTTP surface
# ---------------------------------------------------------------------------


class SseEndpoint:
    """ASGI endpoint: each ``GET /sse`` is one session for the life of the stream."""

    def __init__(self, registry: SessionRegistry, message_path: str = MESSAGE_PATH) -> None:
        self._registry = registry
        self._message_path = message_path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        transport = SseTransport(self._message_path)
        session = self._registry.connect(transport)
        try:
            async with anyio.create_task_group() as tg:

                async def _serve() -> None:
                    try:
                        await session.run()
                    finally:
                        # Ends the event stream once the server stops.
                        await transport.write_stream.aclose()

                tg.start_soon(_serve)
                await EventSourceResponse(transport.events())(scope, receive, send)
                tg.cancel_scope.cancel()
        finally:
            await transport.aclose()


async def handle_message(request: Request) -> Response:
    registry: SessionRegistry = request.app.state.registry
    session_id = request.query_params.get(SESSION_PARAM, "")
    session = registry.get(session_id)
    if session is None:
        logger.warning("session.not_found", session_id=session_id)
        return JSONResponse({"error": "Session not found"}, status_code=404)

    body = await request.body()
    try:
        message = types.JSONRPCMessage.model_validate_json(body)
    except ValidationError as exc:
        logger.warning("message.invalid", session_id=session_id, error=str(exc))
        return JSONResponse({"error": "Could not parse message"}, status_code=400)

    try:
        await session.transport.deliver(message)
    except SessionError:
        return JSONResponse({"error": "Session not found"}, status_code=404)
    return Response("Accepted", status_code=202)


async def health(request: Request) -> Response:
    registry: SessionRegistry = request.app.state.registry
    return JSONResponse({"status": "ok", "service": SERVER_NAME, "sessions": len(registry)})


def create_app(
    settings: GatewaySettings | None = None,
    *,
    registry: SessionRegistry | None = None,
) -> Starlette:
    """The Starlette app serving SSE sessions, messages and health checks."""
    if registry is None:
        if settings is None:
            msg = "create_app needs settings or a registry"
            raise ValueError(msg)
        registry = registry_from_settings(settings)

    app = Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route(SSE_PATH, SseEndpoint(registry), methods=["GET"]),
            Route(MESSAGE_PATH, handle_message, methods=["POST"]),
        ]
    )
    app.state.registry = registry
    return app


# ---------------------------------------------------------------------------
# Runners
# ---------------------------------------------------------------------------


def run_sse(settings: GatewaySettings, **uvicorn_options: Any) -> None:
    import uvicorn

    app = create_app(settings)
    logger.info(
        "server.listening",
        url=f"http://{settings.host}:{settings.port}",
        sse=SSE_PATH,
        health="/health",
        resources=settings.resources,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None, **uvicorn_options)


async def run_stdio(settings: GatewaySettings) -> None:
    from mcp.server.stdio import stdio_server

    client = client_from_settings(settings)
    server = create_server(client, resources_enabled=settings.resources)
    async with client, stdio_server() as (read_stream, write_stream):
        logger.info("server.stdio_ready", resources=settings.resources)
        await server.run(read_stream, write_stream, server.create_initialization_options())
