"""Session registry — one protocol server per live transport.

The registry is the only process-wide mutable state in the gateway.
``connect`` and ``disconnect`` are its only mutators; every other caller
just looks sessions up to route an inbound message. Teardown is wired as a
transport close callback, so a closed stream can never leave an entry behind.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from poeditor_mcp.errors import SessionError

if TYPE_CHECKING:
    from mcp.server.lowlevel import Server

    from poeditor_mcp.infrastructure.poeditor import PoeditorClient
    from poeditor_mcp.mcp.transport import Transport

logger = structlog.get_logger(__name__)

ClientFactory = Callable[[], "PoeditorClient"]
ServerFactory = Callable[["PoeditorClient"], "Server"]


@dataclass
class Session:
    """A live client connection and the server instance bound to it."""

    id: str
    transport: Transport
    server: Server
    client: PoeditorClient

    async def run(self) -> None:
        """Serve this session until its inbound stream ends."""
        async with self.client:
            await self.server.run(
                self.transport.read_stream,
                self.transport.write_stream,
                self.server.create_initialization_options(),
            )


class SessionRegistry:
    def __init__(self, client_factory: ClientFactory, server_factory: ServerFactory) -> None:
        self._client_factory = client_factory
        self._server_factory = server_factory
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def connect(self, transport: Transport) -> Session:
        """Bind a fresh client and server to *transport* and register the session."""
        with self._lock:
            if transport.session_id in self._sessions:
                msg = f"Session {transport.session_id} is already registered"
                raise SessionError(msg)
            client = self._client_factory()
            session = Session(
                id=transport.session_id,
                transport=transport,
                server=self._server_factory(client),
                client=client,
            )
            self._sessions[session.id] = session
            live = len(self._sessions)

        transport.on_close(lambda: self.disconnect(session.id))
        logger.info("session.connected", session_id=session.id, live=live)
        return session

    def disconnect(self, session_id: str) -> Session | None:
        """Drop a session; unknown or already-removed ids are a no-op."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
            live = len(self._sessions)
        if session is not None:
            logger.info("session.closed", session_id=session_id, live=live)
        return session

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            return self._sessions.get(session_id)

    def session_ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
