"""TermService — list, add, update and delete project terms.

Adding and updating is two-phase: one primary call carries the term
metadata for the whole batch, then every ``(term, language)`` translation is
pushed as its own sub-task through :func:`fan_out`. A failed primary call
fails the operation. A failed translation only shows up in
``translation_results`` and never undoes the terms already written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from poeditor_mcp.domain.types import Term, TranslationStatus
from poeditor_mcp.errors import GatewayError
from poeditor_mcp.infrastructure.poeditor import TermKey, TranslationPayload
from poeditor_mcp.services.base import BaseService
from poeditor_mcp.services.contracts import (
    AddTermsInput,
    DeleteTermInput,
    ListTermsInput,
    UpdateTermsInput,
)
from poeditor_mcp.services.fanout import BatchResult, fan_out
from poeditor_mcp.services.result import OperationResult

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TranslationJob:
    """One translation to write for one term in one language."""

    term: str
    context: str
    language: str
    content: str

    @property
    def key(self) -> str:
        return f"{self.term}|{self.context}|{self.language}"


def _matches_status(term: Term, status: TranslationStatus) -> bool:
    translation = term.translation
    if translation is None:
        return status == TranslationStatus.UNTRANSLATED
    match status:
        case TranslationStatus.TRANSLATED:
            return translation.has_content
        case TranslationStatus.UNTRANSLATED:
            return not translation.has_content
        case TranslationStatus.FUZZY:
            return translation.fuzzy == 1
        case TranslationStatus.NOT_FUZZY:
            return translation.fuzzy == 0
        case TranslationStatus.PROOFREAD:
            return translation.proofread == 1
        case TranslationStatus.NOT_PROOFREAD:
            return translation.proofread == 0
    return True


def _count_by_language(batch: BatchResult, jobs: list[TranslationJob]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for job, outcome in zip(jobs, batch.items, strict=True):
        if outcome.ok:
            counts[job.language] = counts.get(job.language, 0) + outcome.data.get("count", 0)
    return counts


class TermService(BaseService):
    """Term operations for a single project per call."""

    async def list_terms(self, params: ListTermsInput) -> OperationResult:
        op = "list_terms_of_a_project"
        try:
            result = (
                await self._client.list_terms(params.project_id, params.language_code)
            ).unwrap()
        except GatewayError as exc:
            return self._failed(op, "list terms", exc)

        terms = [Term.model_validate(t) for t in result.get("terms") or []]

        if params.tags:
            wanted = [params.tags] if isinstance(params.tags, str) else list(params.tags)
            terms = [t for t in terms if any(tag in wanted for tag in t.tags)]

        if params.reference_pattern:
            terms = [t for t in terms if params.reference_pattern in t.reference]

        # Status filters only mean something for a specific language.
        if params.translation_status and params.language_code:
            terms = [t for t in terms if _matches_status(t, params.translation_status)]

        return OperationResult.success(
            op,
            {
                "terms": [t.model_dump(mode="json") for t in terms],
                "total": len(terms),
                "filters_applied": {
                    "tags": params.tags,
                    "translation_status": params.translation_status,
                    "reference_pattern": params.reference_pattern,
                    "language_code": params.language_code,
                },
            },
        )

    async def add_terms(self, params: AddTermsInput) -> OperationResult:
        op = "add_terms_to_a_project"
        logger.info("terms.add", project_id=params.project_id, count=len(params.terms))
        rows = [
            {
                "term": t.term,
                "context": t.context or "",
                "reference": t.reference or "",
                "plural": t.plural or "",
                "comment": t.comment or "",
                "tags": t.tags,
            }
            for t in params.terms
        ]
        try:
            result = (await self._client.add_terms(params.project_id, rows)).unwrap()
        except GatewayError as exc:
            return self._failed(op, "add terms", exc)

        terms_added = (result.get("terms") or {}).get("added", 0)

        jobs = [
            TranslationJob(term=t.term, context=t.context or "", language=lang, content=text)
            for t in params.terms
            for lang, text in (t.translations or {}).items()
        ]
        batch = await self._write_translations(
            params.project_id, jobs, fuzzy=0, fuzzy_trigger=None, counted=("added",)
        )

        return OperationResult.success(
            op,
            {
                "terms_added": terms_added,
                "translations_added": _count_by_language(batch, jobs),
                "translation_results": batch.to_payload(),
                "success": True,
            },
            warnings=_failure_warnings(batch),
        )

    async def update_terms(self, params: UpdateTermsInput) -> OperationResult:
        op = "update_terms_of_a_project"
        rows: list[dict[str, Any]] = []
        for t in params.terms:
            row: dict[str, Any] = {"term": t.term, "context": t.context}
            if t.new_term:
                row["new_term"] = t.new_term
            if t.new_context:
                row["new_context"] = t.new_context
            for name in ("reference", "plural", "comment", "tags"):
                value = getattr(t, name)
                if value is not None:
                    row[name] = value
            rows.append(row)

        try:
            result = (
                await self._client.update_terms(
                    params.project_id, rows, fuzzy_trigger=params.fuzzy_trigger
                )
            ).unwrap()
        except GatewayError as exc:
            return self._failed(op, "update terms", exc)

        terms_updated = (result.get("terms") or {}).get("updated", 0)

        # Translations address the term by its new identity once renamed.
        jobs = [
            TranslationJob(
                term=t.new_term or t.term,
                context=t.new_context or t.context,
                language=lang,
                content=text,
            )
            for t in params.terms
            for lang, text in (t.translations or {}).items()
        ]
        batch = await self._write_translations(
            params.project_id,
            jobs,
            fuzzy=None,
            fuzzy_trigger=params.fuzzy_trigger,
            counted=("added", "updated"),
        )

        return OperationResult.success(
            op,
            {
                "terms_updated": terms_updated,
                "translations_updated": _count_by_language(batch, jobs),
                "translation_results": batch.to_payload(),
                "success": True,
            },
            warnings=_failure_warnings(batch),
        )

    async def delete_term(self, params: DeleteTermInput) -> OperationResult:
        op = "delete_term_from_a_project"
        try:
            result = (
                await self._client.delete_terms(
                    params.project_id, [TermKey(term=params.term, context=params.context)]
                )
            ).unwrap()
        except GatewayError as exc:
            return self._failed(op, "delete term", exc)

        deleted = (result.get("terms") or {}).get("deleted", 0) > 0
        message = (
            f'Successfully deleted term "{params.term}" with context "{params.context}"'
            if deleted
            else "Term not found or already deleted"
        )
        return OperationResult.success(
            op,
            {
                "deleted": deleted,
                "term": params.term,
                "context": params.context,
                "message": message,
            },
        )

    async def _write_translations(
        self,
        project_id: int,
        jobs: list[TranslationJob],
        *,
        fuzzy: int | None,
        fuzzy_trigger: bool | None,
        counted: tuple[str, ...],
    ) -> BatchResult:
        async def _write(job: TranslationJob) -> dict[str, Any]:
            translation: dict[str, Any] = {"content": job.content}
            if fuzzy is not None:
                translation["fuzzy"] = fuzzy
            payload = TranslationPayload(term=job.term, context=job.context, translation=translation)
            response = await self._client.update_language(
                project_id, job.language, [payload], fuzzy_trigger=fuzzy_trigger
            )
            stats = response.unwrap().get("translations") or {}
            count = sum(stats.get(name, 0) for name in counted)
            return {"language": job.language, "term": job.term, "count": count}

        return await fan_out(jobs, _write, key=lambda j: j.key, label="translations")


def _failure_warnings(batch: BatchResult) -> list[str]:
    return [f"Translation failed for {r.item}: {r.error}" for r in batch.failures()]
