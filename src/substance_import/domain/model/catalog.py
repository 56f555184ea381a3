"""Persisted catalog entries for substances."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .enums import CatalogStatus, VerificationStatus

if TYPE_CHECKING:
    from .normalized import NormalizedSubstance


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class CatalogEntry:
    """One substance in the catalog, keyed by its unique slug.

    List and mapping attributes are replaced wholesale on change, never mutated in
    place, so the persistence layer always sees the new value.
    """

    slug: str
    name: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    status: CatalogStatus = CatalogStatus.DRAFT
    canonical_id: str | None = None
    confidence_score: int = 0
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED
    summary: str | None = None
    aliases: list[str] = field(default_factory=list[str])
    tags: list[str] = field(default_factory=list[str])
    categories: list[str] = field(default_factory=list[str])
    external_ids: dict[str, str | int] = field(default_factory=dict[str, str | int])
    sources: list[dict[str, object]] = field(default_factory=list[dict[str, object]])
    last_imported_at: datetime | None = None
    import_run_id: uuid.UUID | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_normalized(
        cls,
        substance: NormalizedSubstance,
        *,
        import_run_id: uuid.UUID | None = None,
    ) -> CatalogEntry:
        """Build a fresh draft entry from a merged record."""

        entry = cls(slug=substance.slug, name=substance.name)
        entry.categories = [substance.category] if substance.category else []
        entry.apply_import(substance, import_run_id=import_run_id)
        entry.created_at = entry.updated_at
        return entry

    def apply_import(
        self,
        substance: NormalizedSubstance,
        *,
        import_run_id: uuid.UUID | None = None,
    ) -> None:
        """Refresh imported fields in place; status and creation time are kept."""

        now = _utcnow()
        self.name = substance.name
        self.canonical_id = substance.canonical_id
        self.confidence_score = substance.confidence_score
        self.verification_status = substance.verification_status
        self.summary = substance.summary
        self.aliases = list(substance.aliases)
        self.tags = list(substance.tags)
        if substance.category and not self.categories:
            self.categories = [substance.category]
        self.external_ids = substance.external_ids.as_dict()
        self.sources = [citation.as_dict() for citation in substance.sources]
        self.last_imported_at = substance.last_imported_at
        self.import_run_id = import_run_id
        self.updated_at = now

    def as_record(self) -> dict[str, object]:
        """Plain JSON-compatible export of the entry."""

        return {
            "id": str(self.id),
            "slug": self.slug,
            "name": self.name,
            "status": str(self.status),
            "canonical_id": self.canonical_id,
            "confidence_score": self.confidence_score,
            "verification_status": str(self.verification_status),
            "summary": self.summary,
            "aliases": list(self.aliases),
            "tags": list(self.tags),
            "categories": list(self.categories),
            "external_ids": dict(self.external_ids),
            "sources": list(self.sources),
            "last_imported_at": self.last_imported_at.isoformat()
            if self.last_imported_at
            else None,
            "import_run_id": str(self.import_run_id) if self.import_run_id else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
