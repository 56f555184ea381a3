"""Read-only passes over a batch: normalized preview and dry-run classification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from substance_import.config.importer import DEFAULT_ITEM_CONCURRENCY
from substance_import.domain.model import PlanAction

from .merge import MergeOptions, merge
from .plan import MAX_BATCH_SIZE, ensure_batch_size, plan
from .resolve import gather_bounded, resolve_candidate

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from substance_import.domain.model import CandidateName, NormalizedSubstance

    from .resolve import SourceSet

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class PreviewOptions:
    skip_secondary: bool = False
    max_batch_size: int = MAX_BATCH_SIZE
    concurrency: int = DEFAULT_ITEM_CONCURRENCY
    merge: MergeOptions = MergeOptions()


@dataclass(frozen=True, slots=True, kw_only=True)
class PreviewItem:
    index: int
    name: str
    normalized: NormalizedSubstance | None = None
    source_errors: tuple[str, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.normalized is not None and bool(self.normalized.slug)

    def as_dict(self) -> dict[str, object]:
        if not self.ok or self.normalized is None:
            return {"index": self.index, "name": self.name, "ok": False, "error": self.error}
        return {
            "index": self.index,
            "name": self.name,
            "ok": True,
            "normalized": self.normalized.as_dict(),
            "source_errors": list(self.source_errors),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class DryRunItem:
    index: int
    name: str
    slug: str | None = None
    action: PlanAction | None = None
    exists: bool = False
    normalized: NormalizedSubstance | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, object]:
        if self.action is None or self.normalized is None:
            return {"index": self.index, "name": self.name, "ok": False, "error": self.error}
        return {
            "index": self.index,
            "name": self.name,
            "slug": self.slug,
            "action": str(self.action),
            "exists": self.exists,
            "normalized": self.normalized.as_dict(),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class DryRunSummary:
    total: int
    will_insert: int
    will_update: int
    will_skip: int
    errors: int

    @classmethod
    def from_items(cls, items: Sequence[DryRunItem]) -> DryRunSummary:
        def count(action: PlanAction) -> int:
            return sum(1 for item in items if item.action is action)

        return cls(
            total=len(items),
            will_insert=count(PlanAction.INSERT),
            will_update=count(PlanAction.UPDATE),
            will_skip=count(PlanAction.SKIP),
            errors=sum(1 for item in items if item.action is None),
        )

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "will_insert": self.will_insert,
            "will_update": self.will_update,
            "will_skip": self.will_skip,
            "errors": self.errors,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class DryRunResult:
    items: list[DryRunItem]
    summary: DryRunSummary


async def preview_batch(
    candidates: Sequence[CandidateName],
    sources: SourceSet,
    options: PreviewOptions | None = None,
) -> list[PreviewItem]:
    """Resolve and merge every candidate without touching the catalog."""

    options = options or PreviewOptions()
    ensure_batch_size(len(candidates), max_batch_size=options.max_batch_size)

    async def preview_one(index: int, candidate: CandidateName) -> PreviewItem:
        try:
            resolution = await resolve_candidate(
                candidate, sources, skip_secondary=options.skip_secondary
            )
            normalized = merge(candidate, resolution.facts, options=options.merge)
        except Exception as exc:  # noqa: BLE001
            log.warning("Preview of item %s (%r) failed: %s", index, candidate.name, exc)
            return PreviewItem(index=index, name=candidate.name, error=str(exc))
        errors = tuple(str(error) for error in resolution.errors)
        if not normalized.slug:
            return PreviewItem(
                index=index,
                name=candidate.name,
                source_errors=errors,
                error=f"Name {candidate.name!r} does not produce a usable slug",
            )
        return PreviewItem(
            index=index, name=candidate.name, normalized=normalized, source_errors=errors
        )

    return await gather_bounded(candidates, preview_one, limit=options.concurrency)


def classify_previews(
    previews: Sequence[PreviewItem],
    existing_slugs: Collection[str],
    *,
    overwrite: bool,
    max_batch_size: int = MAX_BATCH_SIZE,
) -> DryRunResult:
    """Classify previewed items as insert/update/skip against known slugs."""

    usable = [item for item in previews if item.ok and item.normalized is not None]
    planned = plan(
        [item.normalized for item in usable if item.normalized is not None],
        existing_slugs,
        overwrite=overwrite,
        max_batch_size=max_batch_size,
    )
    planned_by_index = {
        item.index: action for item, action in zip(usable, planned, strict=True)
    }

    items: list[DryRunItem] = []
    for preview in previews:
        action = planned_by_index.get(preview.index)
        if action is None:
            items.append(DryRunItem(index=preview.index, name=preview.name, error=preview.error))
            continue
        items.append(
            DryRunItem(
                index=preview.index,
                name=preview.name,
                slug=action.slug,
                action=action.action,
                exists=action.exists,
                normalized=preview.normalized,
            )
        )
    return DryRunResult(items=items, summary=DryRunSummary.from_items(items))
