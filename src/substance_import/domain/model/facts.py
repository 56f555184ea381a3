"""Per-source fact records.

Each source produces exactly one fact type; the merger pattern-matches on the
concrete class instead of probing optional attributes. Facts are ephemeral and
never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .enums import SourceKind

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class PrimaryFact:
    """Identity and classification facts from the knowledge graph (Wikidata)."""

    SOURCE: ClassVar[SourceKind] = SourceKind.WIKIDATA

    qid: str
    label: str
    source_url: str
    retrieved_at: datetime
    description: str | None = None
    aliases: tuple[str, ...] = ()
    class_labels: tuple[str, ...] = ()
    cas_number: str | None = None
    inchi: str | None = None
    inchi_key: str | None = None
    smiles: str | None = None
    pubchem_cid: int | None = None
    chembl_id: str | None = None
    drugbank_id: str | None = None

    @property
    def source(self) -> SourceKind:
        return self.SOURCE

    @property
    def has_description(self) -> bool:
        return bool(self.description)

    @property
    def has_chemistry(self) -> bool:
        return bool(self.inchi_key or self.smiles)


@dataclass(frozen=True, slots=True, kw_only=True)
class EnrichmentFact:
    """Chemical identifiers and synonyms from the compound database (PubChem)."""

    SOURCE: ClassVar[SourceKind] = SourceKind.PUBCHEM

    cid: int
    source_url: str
    retrieved_at: datetime
    title: str | None = None
    iupac_name: str | None = None
    molecular_formula: str | None = None
    molecular_weight: str | None = None
    smiles: str | None = None
    inchi: str | None = None
    inchi_key: str | None = None
    synonyms: tuple[str, ...] = ()
    description: str | None = None

    @property
    def source(self) -> SourceKind:
        return self.SOURCE

    @property
    def label(self) -> str:
        return self.title or self.iupac_name or ""

    @property
    def has_description(self) -> bool:
        return bool(self.description)

    @property
    def has_chemistry(self) -> bool:
        return bool(self.molecular_formula or self.inchi_key)


type SourceFact = PrimaryFact | EnrichmentFact
