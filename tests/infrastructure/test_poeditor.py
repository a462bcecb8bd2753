"""Tests for the POEditor REST client (httpx MockTransport, no network)."""

from __future__ import annotations

import json
from collections.abc import Callable
from urllib.parse import parse_qs

import httpx
import pytest

from poeditor_mcp.errors import RemoteApiError, RemoteTransportError
from poeditor_mcp.infrastructure.poeditor import (
    ApiResponse,
    PoeditorClient,
    TermKey,
    TranslationPayload,
    encode_form,
)

pytestmark = pytest.mark.anyio

BASE_URL = "https://poeditor.test/v2"
SUCCESS = {"response": {"status": "success", "code": "200", "message": "OK"}}


class Recorder:
    """MockTransport handler that records requests and returns a fixed reply."""

    def __init__(self, reply: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._reply = reply or (lambda _request: httpx.Response(200, json={**SUCCESS, "result": {}}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._reply(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def form(self, index: int = -1) -> dict[str, str]:
        parsed = parse_qs(self.requests[index].content.decode(), keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}


def _client(recorder: Recorder) -> PoeditorClient:
    return PoeditorClient("secret", base_url=BASE_URL, transport=httpx.MockTransport(recorder))


class TestEncodeForm:
    def test_scalars_and_nesting(self) -> None:
        form = encode_form(
            {"id": 7, "flag": True, "off": False, "tags": ["a", "b"], "data": {"k": 1}, "gone": None}
        )
        assert form == {
            "id": "7",
            "flag": "1",
            "off": "0",
            "tags": '["a", "b"]',
            "data": '{"k": 1}',
        }


class TestRequests:
    async def test_list_projects(self) -> None:
        recorder = Recorder(
            lambda _r: httpx.Response(200, json={**SUCCESS, "result": {"projects": []}})
        )
        async with _client(recorder) as client:
            response = await client.list_projects()

        assert response.ok
        assert response.unwrap() == {"projects": []}
        assert recorder.last.method == "POST"
        assert str(recorder.last.url) == f"{BASE_URL}/projects/list"
        assert recorder.form() == {"api_token": "secret"}

    async def test_trailing_slash_in_base_url(self) -> None:
        recorder = Recorder()
        client = PoeditorClient(
            "secret", base_url=f"{BASE_URL}/", transport=httpx.MockTransport(recorder)
        )
        await client.list_languages(3)
        await client.aclose()
        assert str(recorder.last.url) == f"{BASE_URL}/languages/list"
        assert recorder.form() == {"api_token": "secret", "id": "3"}

    async def test_add_terms_drops_none_and_encodes_json(self) -> None:
        recorder = Recorder()
        async with _client(recorder) as client:
            await client.add_terms(5, [{"term": "hi", "context": "", "tags": None}])
        form = recorder.form()
        assert recorder.last.url.path == "/v2/terms/add"
        assert json.loads(form["data"]) == [{"term": "hi", "context": ""}]

    async def test_update_terms_fuzzy_trigger(self) -> None:
        recorder = Recorder()
        async with _client(recorder) as client:
            await client.update_terms(5, [{"term": "a", "context": ""}], fuzzy_trigger=True)
            await client.update_terms(5, [{"term": "a", "context": ""}])
        assert recorder.form(0)["fuzzy_trigger"] == "1"
        assert "fuzzy_trigger" not in recorder.form(1)

    async def test_update_language_payload(self) -> None:
        recorder = Recorder()
        payload = TranslationPayload(term="hi", translation={"content": "Ciao", "fuzzy": 0})
        async with _client(recorder) as client:
            await client.update_language(5, "it", [payload])
        form = recorder.form()
        assert form["language"] == "it"
        assert json.loads(form["data"]) == [
            {"term": "hi", "context": "", "translation": {"content": "Ciao", "fuzzy": 0}}
        ]

    async def test_delete_terms_payload(self) -> None:
        recorder = Recorder()
        async with _client(recorder) as client:
            await client.delete_terms(5, [TermKey(term="bye", context="footer")])
        assert json.loads(recorder.form()["data"]) == [{"term": "bye", "context": "footer"}]

    async def test_list_terms_language_optional(self) -> None:
        recorder = Recorder()
        async with _client(recorder) as client:
            await client.list_terms(5)
            await client.list_terms(5, "it")
        assert "language" not in recorder.form(0)
        assert recorder.form(1)["language"] == "it"

    async def test_export_list_params(self) -> None:
        recorder = Recorder()
        async with _client(recorder) as client:
            await client.export_project(
                5, "en", "json", filters=["translated", "proofread"], tags="v1"
            )
        form = recorder.form()
        assert form["type"] == "json"
        assert json.loads(form["filters"]) == ["translated", "proofread"]
        assert form["tags"] == "v1"
        assert "fallback_language" not in form


class TestErrors:
    async def test_http_status_error(self) -> None:
        recorder = Recorder(lambda _r: httpx.Response(500, text="oops"))
        async with _client(recorder) as client:
            with pytest.raises(RemoteTransportError, match="HTTP error! status: 500"):
                await client.list_projects()

    async def test_network_error(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(Recorder(refuse)) as client:
            with pytest.raises(RemoteTransportError, match="connection refused"):
                await client.list_projects()

    async def test_undecodable_body(self) -> None:
        recorder = Recorder(lambda _r: httpx.Response(200, text="<html>"))
        async with _client(recorder) as client:
            with pytest.raises(RemoteTransportError, match="Invalid response"):
                await client.list_projects()

    async def test_api_failure_unwrap(self) -> None:
        body = {"response": {"status": "fail", "code": "4011", "message": "Invalid API Token"}}
        recorder = Recorder(lambda _r: httpx.Response(200, json=body))
        async with _client(recorder) as client:
            response = await client.list_projects()
        assert not response.ok
        with pytest.raises(RemoteApiError, match="Invalid API Token") as exc_info:
            response.unwrap()
        assert exc_info.value.remote_code == "4011"
        assert exc_info.value.code == "REMOTE_ERROR"


class TestApiResponse:
    def test_success_without_result(self) -> None:
        assert ApiResponse.model_validate(SUCCESS).unwrap() == {}

    def test_failure_without_message(self) -> None:
        response = ApiResponse.model_validate({"response": {"status": "fail"}})
        with pytest.raises(RemoteApiError, match="Request failed"):
            response.unwrap()
