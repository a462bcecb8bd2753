"""Exception hierarchy for the gateway.

Service handlers convert these into :class:`OperationResult` failures; the
resource adapter converts :class:`ResourceError` into MCP error responses.
Only a missing API token is allowed to stop the process, and that is raised
by configuration loading, not from here.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for all gateway errors."""

    code = "GATEWAY_ERROR"


class RemoteApiError(GatewayError):
    """The POEditor API answered with a non-success status."""

    code = "REMOTE_ERROR"

    def __init__(self, message: str, *, remote_code: str = "") -> None:
        super().__init__(message)
        self.remote_code = remote_code


class RemoteTransportError(GatewayError):
    """The POEditor API could not be reached or returned an unusable body."""

    code = "CONNECTION_ERROR"


class ResourceError(GatewayError):
    """Base class for resource resolution failures."""


class MalformedResourceError(ResourceError):
    code = "MALFORMED_URI"


class ResourceNotFoundError(ResourceError):
    code = "NOT_FOUND"


class SessionError(GatewayError):
    code = "SESSION_ERROR"
