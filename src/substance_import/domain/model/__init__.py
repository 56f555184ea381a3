"""Domain model for the substance catalog import pipeline."""

from __future__ import annotations

from .audit import ImportRun, ImportRunItem
from .candidates import CandidateName
from .catalog import CatalogEntry
from .enums import (
    SOURCE_PRIORITY,
    CatalogStatus,
    ImportAction,
    PlanAction,
    RunStatus,
    SourceKind,
    VerificationStatus,
)
from .facts import EnrichmentFact, PrimaryFact, SourceFact
from .normalized import ExternalIdentifiers, NormalizedSubstance, SourceCitation

__all__ = [
    "SOURCE_PRIORITY",
    "CandidateName",
    "CatalogEntry",
    "CatalogStatus",
    "EnrichmentFact",
    "ExternalIdentifiers",
    "ImportAction",
    "ImportRun",
    "ImportRunItem",
    "NormalizedSubstance",
    "PlanAction",
    "PrimaryFact",
    "RunStatus",
    "SourceCitation",
    "SourceFact",
    "SourceKind",
    "VerificationStatus",
]
