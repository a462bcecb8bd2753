"""Declarative input shapes for every operation.

Each operation validates its raw arguments against one of these models, and
the capability listing advertised to clients is derived from the same
models, so a field added here shows up in ``tools/list`` with no second edit.
Per-field ``description`` text is what clients see.

Scalar fields use pydantic's strict types: ``"7"`` is not a project id and
``"yes"`` is not a boolean. Enum-valued fields still accept their string
values, and nested term objects accept plain mappings.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

from poeditor_mcp.domain.types import TranslationStatus


class OperationInput(BaseModel):
    """Base for operation inputs, immutable once validated."""

    model_config = ConfigDict(frozen=True)


class EmptyInput(OperationInput):
    """Input of operations that take no arguments."""


class ListTermsInput(OperationInput):
    project_id: StrictInt = Field(description="The project ID")
    language_code: StrictStr | None = Field(
        default=None, description="Return translations for specific language"
    )
    tags: StrictStr | list[StrictStr] | None = Field(default=None, description="Filter by tags")
    translation_status: TranslationStatus | None = Field(
        default=None, description="Filter by translation status"
    )
    reference_pattern: StrictStr | None = Field(
        default=None,
        description='Filter by reference pattern (e.g., "/components/", "Settings.tsx")',
    )


class NewTerm(OperationInput):
    term: StrictStr = Field(description="The term text")
    context: StrictStr | None = Field(default=None, description="Context for translators")
    reference: StrictStr | None = Field(default=None, description="Reference location in code")
    plural: StrictStr | None = Field(default=None, description="Plural form of the term")
    comment: StrictStr | None = Field(
        default=None, description="Developer comment for translators"
    )
    tags: StrictStr | list[StrictStr] | None = Field(
        default=None, description="Tags for organization"
    )
    translations: dict[str, StrictStr] | None = Field(
        default=None, description="Initial translations keyed by language code"
    )


class AddTermsInput(OperationInput):
    project_id: StrictInt = Field(description="The project ID")
    terms: list[NewTerm] = Field(description="Array of terms to add")


class TermUpdate(OperationInput):
    model_config = ConfigDict(extra="forbid")

    term: StrictStr = Field(description="Current term text to identify the term")
    context: StrictStr = Field(description="Current context to identify the term")
    new_term: StrictStr | None = Field(default=None, description="New term text")
    new_context: StrictStr | None = Field(default=None, description="New context")
    reference: StrictStr | None = Field(default=None, description="New reference location")
    plural: StrictStr | None = Field(default=None, description="New plural form")
    comment: StrictStr | None = Field(default=None, description="New comment")
    tags: StrictStr | list[StrictStr] | None = Field(
        default=None, description="New tags (replaces existing)"
    )
    translations: dict[str, StrictStr] | None = Field(
        default=None,
        description=(
            "Update translations as a record keyed by language code. "
            'Example: {"it": "Italian translation", "de": "German translation"}'
        ),
    )


class UpdateTermsInput(OperationInput):
    model_config = ConfigDict(extra="forbid")

    project_id: StrictInt = Field(description="The project ID")
    fuzzy_trigger: StrictBool | None = Field(
        default=None,
        description="Mark translations in other languages as fuzzy when term text changes",
    )
    terms: list[TermUpdate] = Field(
        description=(
            'Array of terms to update. Each term must have "term" and "context" fields '
            'to identify it, and "translations" as a record object like {"it": "text"}'
        )
    )


class DeleteTermInput(OperationInput):
    project_id: StrictInt = Field(description="The project ID")
    term: StrictStr = Field(description="The term text to delete")
    context: StrictStr = Field(description="The context to identify the exact term")


class ExportProjectInput(OperationInput):
    project_id: StrictInt = Field(description="The project ID")
    language_codes: list[StrictStr] = Field(description="Export multiple languages in one call")
    format: StrictStr = Field(
        description=(
            "File format: json, po, pot, mo, xls, xlsx, csv, ini, properties, "
            "android_strings, apple_strings, xliff, etc."
        )
    )
    filters: StrictStr | list[StrictStr] | None = Field(
        default=None, description="Filter by: translated, untranslated, fuzzy, proofread"
    )
    tags: StrictStr | list[StrictStr] | None = Field(default=None, description="Filter by tags")
    fallback_language: StrictStr | None = Field(
        default=None, description="Language code for fallback translations"
    )
