"""SSE transport — one instance per connected client.

The server side of a session reads JSON-RPC messages from ``read_stream``
and writes replies to ``write_stream``. Inbound messages arrive through
``deliver()`` (called by the ``POST /message`` route); outbound messages are
drained by ``events()`` into the client's event stream.

The first event on every stream is ``endpoint``, carrying the URL the client
must post its messages to. The session id embedded in it is generated here.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Protocol
from uuid import uuid4

import anyio
import structlog
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from mcp import types
from mcp.shared.message import SessionMessage

from poeditor_mcp.errors import SessionError

logger = structlog.get_logger(__name__)

SESSION_PARAM = "sessionId"


class Transport(Protocol):
    """What the session registry and protocol server need from a transport."""

    session_id: str
    read_stream: MemoryObjectReceiveStream[SessionMessage | Exception]
    write_stream: MemoryObjectSendStream[SessionMessage]

    def on_close(self, callback: Callable[[], None]) -> None: ...

    async def deliver(self, message: types.JSONRPCMessage) -> None: ...


class SseTransport:
    def __init__(self, message_path: str) -> None:
        self.session_id = uuid4().hex
        self.endpoint = f"{message_path}?{SESSION_PARAM}={self.session_id}"
        self._inbound, self.read_stream = anyio.create_memory_object_stream[
            SessionMessage | Exception
        ](0)
        self.write_stream, self._outbound = anyio.create_memory_object_stream[SessionMessage](0)
        self._close_callbacks: list[Callable[[], None]] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def on_close(self, callback: Callable[[], None]) -> None:
        self._close_callbacks.append(callback)

    async def deliver(self, message: types.JSONRPCMessage) -> None:
        """Hand one inbound message to the session's server."""
        if self._closed:
            msg = f"Session {self.session_id} is closed"
            raise SessionError(msg)
        try:
            await self._inbound.send(SessionMessage(message=message))
        except (anyio.ClosedResourceError, anyio.BrokenResourceError) as exc:
            msg = f"Session {self.session_id} is closed"
            raise SessionError(msg) from exc

    async def events(self) -> AsyncIterator[dict[str, str]]:
        """Server-sent events for this session, ending when the server stops writing."""
        yield {"event": "endpoint", "data": self.endpoint}
        async with self._outbound:
            async for outbound in self._outbound:
                yield {
                    "event": "message",
                    "data": outbound.message.model_dump_json(by_alias=True, exclude_none=True),
                }

    async def aclose(self) -> None:
        """Close all streams and fire ``on_close`` callbacks exactly once."""
        if self._closed:
            return
        self._closed = True
        for stream in (self._inbound, self.read_stream, self.write_stream, self._outbound):
            await stream.aclose()
        callbacks, self._close_callbacks = self._close_callbacks, []
        for callback in callbacks:
            callback()
        logger.debug("transport.closed", session_id=self.session_id)
