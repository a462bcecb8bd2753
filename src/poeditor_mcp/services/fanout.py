"""Fan-out orchestrator — concurrent sub-tasks with per-item isolation.

All sub-tasks of a batch start together in one anyio task group. A sub-task
that raises is recorded as a failed :class:`ItemResult` and never cancels its
siblings; the returned :class:`BatchResult` has exactly one entry per input,
in input order, whatever order the sub-tasks finished in.

Cancellation (``BaseException``) is not captured: it still tears the whole
batch down.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

import anyio
import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ItemResult(BaseModel):
    """Outcome of one sub-task, keyed by a caller-chosen item identifier."""

    model_config = {"frozen": True}

    item: str
    ok: bool
    data: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class BatchResult(BaseModel):
    """Ordered outcomes of a fan-out batch."""

    model_config = {"frozen": True}

    items: list[ItemResult] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.items if r.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    def summary(self) -> dict[str, int]:
        return {"total": self.total, "successful": self.succeeded, "failed": self.failed}

    def failures(self) -> list[ItemResult]:
        return [r for r in self.items if not r.ok]

    def to_payload(self) -> dict[str, Any]:
        return {
            "items": [r.model_dump() for r in self.items],
            "summary": self.summary(),
        }


async def fan_out(
    items: Sequence[T],
    task: Callable[[T], Awaitable[dict[str, Any]]],
    *,
    key: Callable[[T], str] = str,
    label: str = "batch",
) -> BatchResult:
    """Run ``task`` over every item concurrently and collect isolated outcomes.

    Args:
        items: Independent units of work.
        task: Coroutine function returning the success payload for one item.
            Any ``Exception`` it raises marks only that item as failed.
        key: Maps an item to the identifier reported in its result.
        label: Name used in log events.
    """
    seq = list(items)
    results: list[ItemResult | None] = [None] * len(seq)

    async def _runner(index: int, item: T) -> None:
        item_id = key(item)
        try:
            data = await task(item)
        except Exception as exc:
            logger.warning("fanout.item_failed", batch=label, item=item_id, error=str(exc))
            results[index] = ItemResult(item=item_id, ok=False, error=str(exc) or type(exc).__name__)
            return
        results[index] = ItemResult(item=item_id, ok=True, data=data or {})

    async with anyio.create_task_group() as tg:
        for index, item in enumerate(seq):
            tg.start_soon(_runner, index, item)

    batch = BatchResult(items=[r for r in results if r is not None])
    logger.debug("fanout.complete", batch=label, **batch.summary())
    return batch
