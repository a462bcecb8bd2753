"""Shared pytest fixtures and test helpers for poeditor-mcp tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from typing import Any

import pytest
from click.testing import CliRunner

from poeditor_mcp.config.logging import logger_levels
from poeditor_mcp.infrastructure.poeditor import ApiResponse

# ---------------------------------------------------------------------------
# API envelope helpers
# ---------------------------------------------------------------------------


def ok(result: dict[str, Any] | None = None) -> ApiResponse:
    """A successful API reply carrying *result*."""
    return ApiResponse.model_validate(
        {"response": {"status": "success", "code": "200", "message": "OK"}, "result": result or {}}
    )


def fail(message: str = "Invalid API Token", code: str = "4011") -> ApiResponse:
    """A failed API reply."""
    return ApiResponse.model_validate(
        {"response": {"status": "fail", "code": code, "message": message}}
    )


# A reply is an ApiResponse, an exception to raise, or a callable receiving the
# call's arguments and returning either of those.
Reply = ApiResponse | Exception | Callable[..., "ApiResponse | Exception"]


class FakePoeditorClient:
    """Scripted stand-in for :class:`PoeditorClient`.

    Every call is recorded in ``calls`` as ``(method, kwargs)``. Unscripted
    methods answer with an empty success.
    """

    def __init__(self, **replies: Reply) -> None:
        self.replies: dict[str, Reply] = dict(replies)
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def script(self, method: str, reply: Reply) -> None:
        self.replies[method] = reply

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        return [kwargs for name, kwargs in self.calls if name == method]

    async def _reply(self, method: str, **kwargs: Any) -> ApiResponse:
        self.calls.append((method, kwargs))
        reply = self.replies.get(method, ok())
        if not isinstance(reply, (ApiResponse, Exception)):
            reply = reply(**kwargs)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def __aenter__(self) -> FakePoeditorClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self.closed = True

    async def list_projects(self) -> ApiResponse:
        return await self._reply("list_projects")

    async def export_project(
        self,
        project_id: int,
        language_code: str,
        file_type: str,
        *,
        filters: Any = None,
        tags: Any = None,
        fallback_language: str | None = None,
    ) -> ApiResponse:
        return await self._reply(
            "export_project",
            project_id=project_id,
            language_code=language_code,
            file_type=file_type,
            filters=filters,
            tags=tags,
            fallback_language=fallback_language,
        )

    async def list_languages(self, project_id: int) -> ApiResponse:
        return await self._reply("list_languages", project_id=project_id)

    async def update_language(
        self,
        project_id: int,
        language_code: str,
        translations: Any,
        *,
        fuzzy_trigger: bool | None = None,
    ) -> ApiResponse:
        return await self._reply(
            "update_language",
            project_id=project_id,
            language_code=language_code,
            translations=list(translations),
            fuzzy_trigger=fuzzy_trigger,
        )

    async def list_terms(self, project_id: int, language_code: str | None = None) -> ApiResponse:
        return await self._reply("list_terms", project_id=project_id, language_code=language_code)

    async def add_terms(self, project_id: int, terms: Any) -> ApiResponse:
        return await self._reply("add_terms", project_id=project_id, terms=list(terms))

    async def update_terms(
        self, project_id: int, terms: Any, *, fuzzy_trigger: bool | None = None
    ) -> ApiResponse:
        return await self._reply(
            "update_terms", project_id=project_id, terms=list(terms), fuzzy_trigger=fuzzy_trigger
        )

    async def delete_terms(self, project_id: int, terms: Any) -> ApiResponse:
        return await self._reply("delete_terms", project_id=project_id, terms=list(terms))


PROJECTS = {
    "projects": [
        {
            "id": 1,
            "name": "Web App",
            "public": 0,
            "open": 0,
            "created": "2024-01-10T10:00:00+0000",
        },
        {
            "id": 2,
            "name": "Mobile",
            "public": 0,
            "open": 1,
            "created": "2024-02-11T10:00:00+0000",
        },
    ]
}

LANGUAGES = {
    "languages": [
        {"name": "English", "code": "en", "translations": 10, "percentage": 100, "updated": None},
        {"name": "Italian", "code": "it", "translations": 5, "percentage": 50, "updated": None},
    ]
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fake_client() -> FakePoeditorClient:
    return FakePoeditorClient()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Commands reconfigure the root logger; undo that after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    levels = {name: logging.getLogger(name).level for name in logger_levels(verbose=False)}
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def _token(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide an API token through the environment."""
    monkeypatch.setenv("POEDITOR_API_TOKEN", "test-token")


@pytest.fixture
def _no_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POEDITOR_API_TOKEN", raising=False)
