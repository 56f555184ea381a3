"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SourceKind(StrEnum):
    """External sources in fixed priority order (primary first)."""

    WIKIDATA = "wikidata"
    PUBCHEM = "pubchem"


class CatalogStatus(StrEnum):
    DRAFT = "draft"
    REVIEW = "review"
    PUBLISHED = "published"


class VerificationStatus(StrEnum):
    UNVERIFIED = "unverified"
    PARTIAL = "partial"
    VERIFIED = "verified"


class PlanAction(StrEnum):
    """Decision taken by the planner before anything is written."""

    INSERT = "insert"
    UPDATE = "update"
    SKIP = "skip"


class ImportAction(StrEnum):
    """Outcome recorded for one candidate of a committed batch."""

    INSERTED = "inserted"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


class RunStatus(StrEnum):
    RUNNING = "running"
    DONE = "done"


SOURCE_PRIORITY: tuple[SourceKind, ...] = (SourceKind.WIKIDATA, SourceKind.PUBCHEM)
