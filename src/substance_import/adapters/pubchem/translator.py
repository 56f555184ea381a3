"""Translate PUG REST payloads into enrichment facts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from substance_import.config.pubchem import PUBCHEM_COMPOUND_URL
from substance_import.domain.model import EnrichmentFact
from substance_import.domain.tags import dedupe_casefold

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from .schema import CompoundProperties

MAX_SYNONYMS = 20


def translate_compound(
    properties: CompoundProperties,
    *,
    synonyms: Sequence[str],
    description: str | None,
    retrieved_at: datetime,
) -> EnrichmentFact:
    title = (properties.title or "").strip() or None
    exclude = [title] if title else []
    return EnrichmentFact(
        cid=properties.cid,
        source_url=f"{PUBCHEM_COMPOUND_URL}{properties.cid}",
        retrieved_at=retrieved_at,
        title=title,
        iupac_name=properties.iupac_name,
        molecular_formula=properties.molecular_formula,
        molecular_weight=properties.molecular_weight,
        smiles=properties.smiles,
        inchi=properties.inchi,
        inchi_key=properties.inchi_key,
        synonyms=tuple(dedupe_casefold(synonyms, exclude=exclude)[:MAX_SYNONYMS]),
        description=description,
    )
