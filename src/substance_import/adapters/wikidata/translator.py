"""Translate SPARQL bindings into domain facts."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from substance_import.config.wikidata import WIKIDATA_ENTITY_PREFIX, WIKIDATA_PAGE_URL
from substance_import.domain.model import PrimaryFact
from substance_import.domain.ports import SeedRow
from substance_import.domain.tags import dedupe_casefold

from .queries import LIST_SEPARATOR, MAX_ALIASES, MAX_CLASS_LABELS
from .schema import binding_value

if TYPE_CHECKING:
    from datetime import datetime

    from .schema import SparqlBinding

log = getLogger(__name__)


def qid_from_uri(uri: str) -> str:
    return uri.removeprefix(WIKIDATA_ENTITY_PREFIX)


def parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        log.debug("Ignoring non-numeric identifier %r", value)
        return None


def translate_entity(
    entity: SparqlBinding,
    alias_rows: list[SparqlBinding],
    class_rows: list[SparqlBinding],
    *,
    qid: str,
    retrieved_at: datetime,
) -> PrimaryFact | None:
    """Build a :class:`PrimaryFact`, or ``None`` when the item has no usable label."""

    label = binding_value(entity, "itemLabel")
    # The label service falls back to the bare id when no label exists.
    if label is None or label == qid:
        return None

    aliases = [value for row in alias_rows if (value := binding_value(row, "alias"))]
    classes = [value for row in class_rows if (value := binding_value(row, "classLabel"))]
    return PrimaryFact(
        qid=qid,
        label=label,
        source_url=f"{WIKIDATA_PAGE_URL}{qid}",
        retrieved_at=retrieved_at,
        description=binding_value(entity, "itemDescription"),
        aliases=tuple(dedupe_casefold(aliases, exclude=[label])[:MAX_ALIASES]),
        class_labels=tuple(dedupe_casefold(classes)[:MAX_CLASS_LABELS]),
        cas_number=binding_value(entity, "cas"),
        inchi=binding_value(entity, "inchi"),
        inchi_key=binding_value(entity, "inchiKey"),
        smiles=binding_value(entity, "smiles"),
        pubchem_cid=parse_int(binding_value(entity, "pubchemCid")),
        chembl_id=binding_value(entity, "chembl"),
        drugbank_id=binding_value(entity, "drugbank"),
    )


def translate_seed_row(binding: SparqlBinding) -> SeedRow | None:
    item = binding_value(binding, "item")
    label = binding_value(binding, "itemLabel")
    if item is None or label is None:
        return None
    return SeedRow(
        qid=qid_from_uri(item),
        label=label,
        aliases=_split(binding_value(binding, "aliases")),
        class_labels=_split(binding_value(binding, "classLabels")),
        pubchem_cid=parse_int(binding_value(binding, "pubchemCid")),
    )


def _split(value: str | None) -> tuple[str, ...]:
    if value is None:
        return ()
    return tuple(part.strip() for part in value.split(LIST_SEPARATOR) if part.strip())
