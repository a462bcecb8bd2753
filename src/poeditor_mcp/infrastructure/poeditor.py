"""Async POEditor REST client.

Every endpoint is a form-encoded ``POST`` carrying the ``api_token``. Nested
values (term lists, tag lists) travel as JSON strings; the API answers with a
uniform ``{"response": {...}, "result": {...}}`` envelope that callers turn
into data or a :class:`RemoteApiError` via :meth:`ApiResponse.unwrap`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from poeditor_mcp.domain.types import ApiStatus
from poeditor_mcp.errors import RemoteApiError, RemoteTransportError

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.poeditor.com/v2"


class ApiStatusBlock(BaseModel):
    status: str
    code: str = ""
    message: str = ""


class ApiResponse(BaseModel):
    """Parsed reply envelope of one API call."""

    response: ApiStatusBlock
    result: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.response.status == ApiStatus.SUCCESS

    def unwrap(self) -> dict[str, Any]:
        """Return ``result`` or raise :class:`RemoteApiError` for a failed call."""
        if not self.ok:
            raise RemoteApiError(
                self.response.message or "Request failed", remote_code=self.response.code
            )
        return self.result or {}


class TermKey(BaseModel):
    """Identity of a term inside a project."""

    term: str
    context: str = ""


class TranslationPayload(BaseModel):
    term: str
    context: str = ""
    translation: dict[str, Any] = Field(default_factory=dict)


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value)
    return str(value)


def encode_form(params: Mapping[str, Any]) -> dict[str, str]:
    """Form-encode request parameters, dropping ``None`` values."""
    return {key: _encode(value) for key, value in params.items() if value is not None}


class PoeditorClient:
    """Thin async wrapper over the POEditor v2 API.

    One instance per session; close it with ``await client.aclose()`` or use
    it as an async context manager.
    """

    def __init__(
        self,
        api_token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> PoeditorClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, endpoint: str, params: Mapping[str, Any] | None = None) -> ApiResponse:
        form = {"api_token": self._api_token, **encode_form(params or {})}
        url = f"{self._base_url}{endpoint}"
        logger.debug("poeditor.request", endpoint=endpoint)
        try:
            response = await self._http.post(url, data=form)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            msg = f"HTTP error! status: {exc.response.status_code}"
            raise RemoteTransportError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"Request to {endpoint} failed: {exc}"
            raise RemoteTransportError(msg) from exc

        try:
            return ApiResponse.model_validate_json(response.content)
        except ValidationError as exc:
            msg = f"Invalid response from {endpoint}"
            raise RemoteTransportError(msg) from exc

    # --- Projects -----------------------------------------------------

    async def list_projects(self) -> ApiResponse:
        return await self._request("/projects/list")

    async def export_project(
        self,
        project_id: int,
        language_code: str,
        file_type: str,
        *,
        filters: str | Sequence[str] | None = None,
        tags: str | Sequence[str] | None = None,
        fallback_language: str | None = None,
    ) -> ApiResponse:
        return await self._request(
            "/projects/export",
            {
                "id": project_id,
                "language": language_code,
                "type": file_type,
                "filters": _as_param(filters),
                "tags": _as_param(tags),
                "fallback_language": fallback_language or None,
            },
        )

    # --- Languages ----------------------------------------------------

    async def list_languages(self, project_id: int) -> ApiResponse:
        return await self._request("/languages/list", {"id": project_id})

    async def update_language(
        self,
        project_id: int,
        language_code: str,
        translations: Sequence[TranslationPayload],
        *,
        fuzzy_trigger: bool | None = None,
    ) -> ApiResponse:
        return await self._request(
            "/languages/update",
            {
                "id": project_id,
                "language": language_code,
                "data": [t.model_dump() for t in translations],
                "fuzzy_trigger": fuzzy_trigger,
            },
        )

    # --- Terms --------------------------------------------------------

    async def list_terms(self, project_id: int, language_code: str | None = None) -> ApiResponse:
        return await self._request(
            "/terms/list", {"id": project_id, "language": language_code or None}
        )

    async def add_terms(self, project_id: int, terms: Sequence[Mapping[str, Any]]) -> ApiResponse:
        return await self._request("/terms/add", {"id": project_id, "data": _drop_none(terms)})

    async def update_terms(
        self,
        project_id: int,
        terms: Sequence[Mapping[str, Any]],
        *,
        fuzzy_trigger: bool | None = None,
    ) -> ApiResponse:
        return await self._request(
            "/terms/update",
            {"id": project_id, "data": _drop_none(terms), "fuzzy_trigger": fuzzy_trigger},
        )

    async def delete_terms(self, project_id: int, terms: Sequence[TermKey]) -> ApiResponse:
        return await self._request(
            "/terms/delete", {"id": project_id, "data": [t.model_dump() for t in terms]}
        )


def _as_param(value: str | Sequence[str] | None) -> str | list[str] | None:
    if not value:
        return None
    if isinstance(value, str):
        return value
    return list(value)


def _drop_none(rows: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
    return [{k: v for k, v in row.items() if v is not None} for row in rows]
