"""Tests for operation input models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from poeditor_mcp.domain.types import TranslationStatus
from poeditor_mcp.services.contracts import (
    AddTermsInput,
    DeleteTermInput,
    EmptyInput,
    ExportProjectInput,
    ListTermsInput,
    UpdateTermsInput,
)


class TestInputModels:
    def test_empty_input_ignores_extras(self) -> None:
        assert EmptyInput.model_validate({"anything": 1}) == EmptyInput()

    def test_list_terms_coerces_status(self) -> None:
        params = ListTermsInput.model_validate(
            {"project_id": 12, "translation_status": "fuzzy", "language_code": "it"}
        )
        assert params.project_id == 12
        assert params.translation_status is TranslationStatus.FUZZY

    @pytest.mark.parametrize("project_id", ["12", 12.0, True])
    def test_project_id_must_be_an_integer(self, project_id: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ListTermsInput.model_validate({"project_id": project_id})
        assert exc_info.value.errors()[0]["loc"] == ("project_id",)

    @pytest.mark.parametrize("flag", ["yes", "true", 1])
    def test_fuzzy_trigger_must_be_a_boolean(self, flag: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            UpdateTermsInput.model_validate(
                {"project_id": 1, "fuzzy_trigger": flag, "terms": [{"term": "a", "context": ""}]}
            )
        assert exc_info.value.errors()[0]["loc"] == ("fuzzy_trigger",)

    def test_term_text_must_be_a_string(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AddTermsInput.model_validate({"project_id": 1, "terms": [{"term": 42}]})
        assert exc_info.value.errors()[0]["loc"] == ("terms", 0, "term")

    def test_list_terms_rejects_unknown_status(self) -> None:
        with pytest.raises(ValidationError):
            ListTermsInput.model_validate({"project_id": 1, "translation_status": "done"})

    def test_add_terms_requires_term_text(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AddTermsInput.model_validate({"project_id": 1, "terms": [{"context": "x"}]})
        assert exc_info.value.errors()[0]["loc"] == ("terms", 0, "term")

    def test_update_terms_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            UpdateTermsInput.model_validate(
                {"project_id": 1, "terms": [{"term": "a", "context": "", "translation": "x"}]}
            )

    def test_update_terms_requires_context(self) -> None:
        with pytest.raises(ValidationError):
            UpdateTermsInput.model_validate({"project_id": 1, "terms": [{"term": "a"}]})

    def test_delete_requires_identity(self) -> None:
        with pytest.raises(ValidationError):
            DeleteTermInput.model_validate({"project_id": 1, "term": "a"})

    def test_export_requires_language_list(self) -> None:
        with pytest.raises(ValidationError):
            ExportProjectInput.model_validate(
                {"project_id": 1, "language_codes": "en", "format": "json"}
            )

    def test_inputs_are_frozen(self) -> None:
        params = DeleteTermInput(project_id=1, term="a", context="")
        with pytest.raises(ValidationError):
            params.term = "b"  # type: ignore[misc]
