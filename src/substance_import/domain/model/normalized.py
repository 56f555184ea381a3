"""Merged, normalized view of one candidate across all resolved sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import SourceKind, VerificationStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalIdentifiers:
    wikidata_qid: str | None = None
    pubchem_cid: int | None = None
    inchi_key: str | None = None
    cas_number: str | None = None
    chembl_id: str | None = None
    drugbank_id: str | None = None
    molecular_formula: str | None = None

    def as_dict(self) -> dict[str, str | int]:
        values = {
            "wikidata": self.wikidata_qid,
            "pubchem_cid": self.pubchem_cid,
            "inchi_key": self.inchi_key,
            "cas": self.cas_number,
            "chembl": self.chembl_id,
            "drugbank": self.drugbank_id,
            "molecular_formula": self.molecular_formula,
        }
        return {key: value for key, value in values.items() if value is not None}


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceCitation:
    source: SourceKind
    source_url: str
    retrieved_at: datetime
    fields: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, object]:
        return {
            "source": str(self.source),
            "source_url": self.source_url,
            "retrieved_at": self.retrieved_at.isoformat(),
            "fields": list(self.fields),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class NormalizedSubstance:
    name: str
    slug: str
    confidence_score: int
    verification_status: VerificationStatus
    last_imported_at: datetime
    canonical_id: str | None = None
    category: str | None = None
    summary: str | None = None
    aliases: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    external_ids: ExternalIdentifiers = field(default_factory=ExternalIdentifiers)
    sources: tuple[SourceCitation, ...] = ()

    @property
    def source_kinds(self) -> tuple[SourceKind, ...]:
        return tuple(citation.source for citation in self.sources)

    def as_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "slug": self.slug,
            "canonical_id": self.canonical_id,
            "confidence_score": self.confidence_score,
            "verification_status": str(self.verification_status),
            "category": self.category,
            "summary": self.summary,
            "aliases": list(self.aliases),
            "tags": list(self.tags),
            "external_ids": self.external_ids.as_dict(),
            "sources": [citation.as_dict() for citation in self.sources],
            "last_imported_at": self.last_imported_at.isoformat(),
        }
