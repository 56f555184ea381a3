"""Commit engine: resolve, merge, decide and persist each candidate of a batch.

Items are processed independently with bounded fan-out. Any exception inside
one item is caught at the item boundary and reported as ``failed``. Audit
writes go through an :class:`~substance_import.domain.ports.AuditTrail`, whose
failures never reach this module. The summary is always counted from the
finished result list.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from substance_import.config.importer import DEFAULT_ITEM_CONCURRENCY
from substance_import.domain.errors import EmptySlugError, SourceResolutionError
from substance_import.domain.model import (
    CatalogEntry,
    ImportAction,
    ImportRun,
    ImportRunItem,
    PlanAction,
)

from .merge import MergeOptions, merge
from .plan import MAX_BATCH_SIZE, decide_action, ensure_batch_size
from .resolve import gather_bounded, resolve_candidate

if TYPE_CHECKING:
    import uuid
    from collections.abc import Callable, Sequence

    from substance_import.domain.model import (
        CandidateName,
        NormalizedSubstance,
        VerificationStatus,
    )
    from substance_import.domain.ports import AuditTrail, CatalogUnitOfWork

    from .resolve import SourceSet

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class CommitOptions:
    overwrite: bool = False
    skip_secondary: bool = False
    triggered_by: str = "cli"
    max_batch_size: int = MAX_BATCH_SIZE
    concurrency: int = DEFAULT_ITEM_CONCURRENCY


@dataclass(frozen=True, slots=True, kw_only=True)
class ItemResult:
    index: int
    name: str
    action: ImportAction
    slug: str | None = None
    canonical_id: str | None = None
    confidence_score: int | None = None
    verification_status: VerificationStatus | None = None
    sources: tuple[str, ...] = ()
    error: str | None = None

    @classmethod
    def failure(cls, index: int, name: str, error: str) -> ItemResult:
        return cls(index=index, name=name, action=ImportAction.FAILED, error=error)

    def audit_item(self, run_id: uuid.UUID) -> ImportRunItem:
        return ImportRunItem(
            run_id=run_id,
            position=self.index,
            substance_name=self.name,
            substance_slug=self.slug,
            canonical_id=self.canonical_id,
            action=self.action,
            confidence_score=self.confidence_score,
            error_message=self.error,
            sources=list(self.sources),
        )

    def as_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "index": self.index,
            "name": self.name,
            "slug": self.slug,
            "action": str(self.action),
            "confidence_score": self.confidence_score,
            "verification_status": (
                str(self.verification_status) if self.verification_status else None
            ),
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True, slots=True, kw_only=True)
class CommitSummary:
    total: int
    inserted: int
    updated: int
    skipped: int
    failed: int
    average_confidence: float | None

    @classmethod
    def from_results(cls, results: Sequence[ItemResult]) -> CommitSummary:
        def count(action: ImportAction) -> int:
            return sum(1 for result in results if result.action is action)

        scores = [
            result.confidence_score
            for result in results
            if result.action is not ImportAction.FAILED and result.confidence_score is not None
        ]
        return cls(
            total=len(results),
            inserted=count(ImportAction.INSERTED),
            updated=count(ImportAction.UPDATED),
            skipped=count(ImportAction.SKIPPED),
            failed=count(ImportAction.FAILED),
            average_confidence=round(sum(scores) / len(scores), 1) if scores else None,
        )

    def as_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "inserted": self.inserted,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "average_confidence": self.average_confidence,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class CommitResult:
    run_id: uuid.UUID
    results: list[ItemResult]
    summary: CommitSummary
    elapsed_seconds: float


class CommitEngine:
    def __init__(
        self,
        *,
        sources: SourceSet,
        unit_of_work_factory: Callable[[], CatalogUnitOfWork],
        audit: AuditTrail,
        merge_options: MergeOptions | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sources = sources
        self._unit_of_work_factory = unit_of_work_factory
        self._audit = audit
        self._merge_options = merge_options or MergeOptions()
        self._clock = clock

    async def commit(
        self,
        candidates: Sequence[CandidateName],
        options: CommitOptions | None = None,
    ) -> CommitResult:
        options = options or CommitOptions()
        ensure_batch_size(len(candidates), max_batch_size=options.max_batch_size)

        started = self._clock()
        run = ImportRun(
            triggered_by=options.triggered_by,
            total_items=len(candidates),
            adapters=self._sources.kinds,
            overwrite=options.overwrite,
        )
        self._audit.open_run(run)
        log.info(
            "Starting import run %s: items=%s, overwrite=%s, skip_secondary=%s",
            run.id,
            len(candidates),
            options.overwrite,
            options.skip_secondary,
        )

        async def process(index: int, candidate: CandidateName) -> ItemResult:
            return await self._process_item(index, candidate, run, options)

        results = await gather_bounded(candidates, process, limit=options.concurrency)
        results.sort(key=lambda result: result.index)
        summary = CommitSummary.from_results(results)

        run.finish(
            inserted=summary.inserted,
            updated=summary.updated,
            skipped=summary.skipped,
            failed=summary.failed,
        )
        self._audit.finish_run(run)
        elapsed = self._clock() - started
        log.info(
            "Finished import run %s in %.2fs: inserted=%s, updated=%s, skipped=%s, failed=%s",
            run.id,
            elapsed,
            summary.inserted,
            summary.updated,
            summary.skipped,
            summary.failed,
        )
        return CommitResult(run_id=run.id, results=results, summary=summary, elapsed_seconds=elapsed)

    async def _process_item(
        self,
        index: int,
        candidate: CandidateName,
        run: ImportRun,
        options: CommitOptions,
    ) -> ItemResult:
        try:
            result = await self._commit_item(index, candidate, run.id, options)
        except Exception as exc:  # noqa: BLE001
            log.warning("Item %s (%r) failed: %s", index, candidate.name, exc)
            result = ItemResult.failure(index, candidate.name, str(exc) or type(exc).__name__)
        self._audit.record_item(result.audit_item(run.id))
        return result

    async def _commit_item(
        self,
        index: int,
        candidate: CandidateName,
        run_id: uuid.UUID,
        options: CommitOptions,
    ) -> ItemResult:
        resolution = await resolve_candidate(
            candidate, self._sources, skip_secondary=options.skip_secondary
        )
        if resolution.all_sources_failed:
            raise SourceResolutionError("; ".join(str(error) for error in resolution.errors))
        normalized = merge(candidate, resolution.facts, options=self._merge_options)
        if not normalized.slug:
            raise EmptySlugError(candidate.name)
        action = self._write(normalized, run_id, overwrite=options.overwrite)
        return ItemResult(
            index=index,
            name=normalized.name,
            action=action,
            slug=normalized.slug,
            canonical_id=normalized.canonical_id,
            confidence_score=normalized.confidence_score,
            verification_status=normalized.verification_status,
            sources=tuple(str(kind) for kind in normalized.source_kinds),
        )

    def _write(
        self,
        normalized: NormalizedSubstance,
        run_id: uuid.UUID,
        *,
        overwrite: bool,
    ) -> ImportAction:
        with self._unit_of_work_factory() as uow:
            catalog = uow.repositories.catalog
            existing = catalog.get_by_slug(normalized.slug)
            match decide_action(exists=existing is not None, overwrite=overwrite):
                case PlanAction.INSERT:
                    catalog.add(CatalogEntry.from_normalized(normalized, import_run_id=run_id))
                    uow.commit()
                    return ImportAction.INSERTED
                case PlanAction.UPDATE if existing is not None:
                    existing.apply_import(normalized, import_run_id=run_id)
                    uow.commit()
                    return ImportAction.UPDATED
                case _:
                    return ImportAction.SKIPPED
