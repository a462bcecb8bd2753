"""Record types returned by the POEditor API.

Remote payloads are parsed leniently: unknown keys are kept (``extra="allow"``)
so nothing the API adds is lost when a record is echoed back to a client.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiStatus(StrEnum):
    """Value of ``response.status`` in every API reply."""

    SUCCESS = "success"
    FAIL = "fail"


class TranslationStatus(StrEnum):
    """Local filters applied by ``list_terms_of_a_project``."""

    TRANSLATED = "translated"
    UNTRANSLATED = "untranslated"
    FUZZY = "fuzzy"
    NOT_FUZZY = "not_fuzzy"
    PROOFREAD = "proofread"
    NOT_PROOFREAD = "not_proofread"


class Project(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    description: str | None = None
    public: int = 0
    open: int = 0
    reference_language: str | None = None
    fallback_language: str | None = None
    terms: int = 0
    created: str | None = None


class Language(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    code: str
    translations: int = 0
    percentage: float = 0
    updated: str | None = None


class Translation(BaseModel):
    """A term's translation; ``content`` is a dict for plural forms."""

    model_config = ConfigDict(extra="allow")

    content: str | dict[str, str] = ""
    fuzzy: int = 0
    proofread: int = 0
    updated: str | None = None

    @property
    def has_content(self) -> bool:
        if isinstance(self.content, str):
            return len(self.content) > 0
        return bool(self.content.get("one") or self.content.get("other"))


class Term(BaseModel):
    model_config = ConfigDict(extra="allow")

    term: str
    context: str = ""
    plural: str = ""
    created: str | None = None
    updated: str | None = None
    translation: Translation | None = None
    reference: str = ""
    tags: list[str] = Field(default_factory=list)
    comment: str = ""

    @field_validator("context", "plural", "reference", "comment", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: Any) -> Any:
        return [] if value is None else value


def language_record(language: Language, *, with_counts: bool = False) -> dict[str, Any]:
    record: dict[str, Any] = {
        "code": language.code,
        "name": language.name,
        "percentage": language.percentage,
        "updated": language.updated,
    }
    if with_counts:
        record["translations"] = language.translations
    return record


def project_record(
    project: Project, languages: list[Language], *, with_counts: bool = False
) -> dict[str, Any]:
    """Flatten a project and its languages into the shape clients receive.

    *with_counts* keeps each language's ``translations`` count, which the
    tool listing reports and the resource reader leaves out.
    """
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description or "",
        "created": project.created,
        "terms": project.terms,
        "reference_language": project.reference_language or "",
        "fallback_language": project.fallback_language or "",
        "languages": [language_record(lang, with_counts=with_counts) for lang in languages],
    }
