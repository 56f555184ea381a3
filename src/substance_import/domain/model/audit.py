"""Audit records describing import runs and their per-item outcomes."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from .enums import ImportAction, RunStatus


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class ImportRun:
    """One committed batch. Counts are filled in when the run is finished."""

    triggered_by: str
    total_items: int
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    adapters: list[str] = field(default_factory=list[str])
    overwrite: bool = False
    dry_run: bool = False
    status: RunStatus = RunStatus.RUNNING
    inserted_count: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    created_at: datetime = field(default_factory=_utcnow)
    finished_at: datetime | None = None

    def finish(self, *, inserted: int, updated: int, skipped: int, failed: int) -> None:
        self.inserted_count = inserted
        self.updated_count = updated
        self.skipped_count = skipped
        self.failed_count = failed
        self.status = RunStatus.DONE
        self.finished_at = _utcnow()

    def as_dict(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "triggered_by": self.triggered_by,
            "adapters": list(self.adapters),
            "overwrite": self.overwrite,
            "dry_run": self.dry_run,
            "status": str(self.status),
            "total_items": self.total_items,
            "inserted": self.inserted_count,
            "updated": self.updated_count,
            "skipped": self.skipped_count,
            "failed": self.failed_count,
            "created_at": self.created_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


@dataclass(eq=False, kw_only=True)
class ImportRunItem:
    """Outcome of one candidate within an import run."""

    run_id: uuid.UUID
    position: int
    substance_name: str
    action: ImportAction
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    substance_slug: str | None = None
    canonical_id: str | None = None
    confidence_score: int | None = None
    error_message: str | None = None
    sources: list[str] = field(default_factory=list[str])
    created_at: datetime = field(default_factory=_utcnow)

    def as_dict(self) -> dict[str, object]:
        return {
            "run_id": str(self.run_id),
            "index": self.position,
            "name": self.substance_name,
            "slug": self.substance_slug,
            "canonical_id": self.canonical_id,
            "action": str(self.action),
            "confidence_score": self.confidence_score,
            "error": self.error_message,
            "sources": list(self.sources),
            "created_at": self.created_at.isoformat(),
        }
