"""Reconciliation planner: insert/update/skip decisions without side effects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from substance_import.config.importer import MAX_BATCH_SIZE
from substance_import.domain.errors import BatchTooLargeError, EmptyBatchError
from substance_import.domain.model import PlanAction

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from substance_import.domain.model import NormalizedSubstance


@dataclass(frozen=True, slots=True, kw_only=True)
class PlannedAction:
    index: int
    slug: str
    action: PlanAction
    exists: bool


def ensure_batch_size(size: int, *, max_batch_size: int = MAX_BATCH_SIZE) -> None:
    """Reject empty and oversized batches outright; nothing is ever truncated."""

    if size <= 0:
        raise EmptyBatchError("At least one item is required")
    if size > max_batch_size:
        raise BatchTooLargeError(size, max_batch_size)


def decide_action(*, exists: bool, overwrite: bool) -> PlanAction:
    if not exists:
        return PlanAction.INSERT
    return PlanAction.UPDATE if overwrite else PlanAction.SKIP


def plan(
    candidates: Sequence[NormalizedSubstance],
    existing_slugs: Collection[str],
    *,
    overwrite: bool,
    max_batch_size: int = MAX_BATCH_SIZE,
) -> list[PlannedAction]:
    if len(candidates) > max_batch_size:
        raise BatchTooLargeError(len(candidates), max_batch_size)
    actions: list[PlannedAction] = []
    for index, candidate in enumerate(candidates):
        exists = candidate.slug in existing_slugs
        actions.append(
            PlannedAction(
                index=index,
                slug=candidate.slug,
                action=decide_action(exists=exists, overwrite=overwrite),
                exists=exists,
            )
        )
    return actions
