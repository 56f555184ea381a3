"""Field merger: fuse per-source facts for one candidate into a normalized record.

Facts arrive as a tagged union. The merger picks at most one fact per source
kind and dispatches on which kinds resolved, with one merge function per
pairing. Zero resolved sources never raises; the result carries confidence 0
and ``unverified`` so the candidate still surfaces for manual follow-up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from substance_import.domain.model import (
    EnrichmentFact,
    ExternalIdentifiers,
    NormalizedSubstance,
    PrimaryFact,
    SourceCitation,
)
from substance_import.domain.slug import slugify
from substance_import.domain.tags import dedupe_casefold, infer_tags

from .confidence import (
    ConfidenceWeights,
    Corroboration,
    score_confidence,
    verification_status,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from substance_import.domain.model import CandidateName, SourceFact

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeLimits:
    max_aliases: int = 30
    max_enrichment_aliases: int = 10


@dataclass(frozen=True, slots=True, kw_only=True)
class MergeOptions:
    limits: MergeLimits = MergeLimits()
    weights: ConfidenceWeights = ConfidenceWeights()


def merge(
    candidate: CandidateName,
    facts: Iterable[SourceFact],
    *,
    resolved_at: datetime | None = None,
    options: MergeOptions | None = None,
) -> NormalizedSubstance:
    options = options or MergeOptions()
    resolved_at = resolved_at or datetime.now(tz=UTC)
    primary, enrichment = _pick_facts(facts)

    match primary, enrichment:
        case None, None:
            return _merge_unresolved(candidate, resolved_at)
        case PrimaryFact(), None:
            return _merge_primary_only(candidate, primary, resolved_at, options)
        case None, EnrichmentFact():
            return _merge_enrichment_only(candidate, enrichment, resolved_at, options)
        case PrimaryFact(), EnrichmentFact():
            return _merge_pair(candidate, primary, enrichment, resolved_at, options)
        case _:  # pragma: no cover
            raise TypeError("Unexpected fact combination")


def identities_agree(primary: PrimaryFact, enrichment: EnrichmentFact) -> bool:
    """Return whether both sources describe the same compound."""

    if primary.inchi_key and enrichment.inchi_key:
        return primary.inchi_key.upper() == enrichment.inchi_key.upper()
    if primary.pubchem_cid is not None:
        return primary.pubchem_cid == enrichment.cid
    names = {
        value.casefold()
        for value in (enrichment.title, enrichment.iupac_name, *enrichment.synonyms)
        if value
    }
    return primary.label.casefold() in names


def primary_tags(primary: PrimaryFact) -> tuple[str, ...]:
    return infer_tags(primary.class_labels)


def enrichment_tags(enrichment: EnrichmentFact) -> tuple[str, ...]:
    return infer_tags([enrichment.description] if enrichment.description else [])


# Pairings ---------------------------------------------------------------------


def _merge_unresolved(candidate: CandidateName, resolved_at: datetime) -> NormalizedSubstance:
    name = candidate.name.strip()
    tags = dedupe_casefold(candidate.tags)
    corroboration = Corroboration(resolved_sources=0)
    return NormalizedSubstance(
        name=name,
        slug=slugify(name),
        confidence_score=score_confidence(corroboration),
        verification_status=verification_status(corroboration),
        last_imported_at=resolved_at,
        category=candidate.category or _first(tags),
        tags=tuple(tags),
    )


def _merge_primary_only(
    candidate: CandidateName,
    primary: PrimaryFact,
    resolved_at: datetime,
    options: MergeOptions,
) -> NormalizedSubstance:
    name = primary.label.strip() or candidate.name.strip()
    inferred = primary_tags(primary)
    corroboration = Corroboration(
        resolved_sources=1,
        has_description=primary.has_description,
        has_chemistry=primary.has_chemistry,
    )
    return NormalizedSubstance(
        name=name,
        slug=slugify(name),
        canonical_id=primary.inchi_key or primary.qid,
        confidence_score=score_confidence(corroboration, options.weights),
        verification_status=verification_status(corroboration),
        last_imported_at=resolved_at,
        category=candidate.category or _first(inferred),
        summary=primary.description or None,
        aliases=_aliases(name, primary.aliases, (), options.limits),
        tags=_tags(inferred, candidate.tags),
        external_ids=_primary_ids(primary),
        sources=(_primary_citation(primary),),
    )


def _merge_enrichment_only(
    candidate: CandidateName,
    enrichment: EnrichmentFact,
    resolved_at: datetime,
    options: MergeOptions,
) -> NormalizedSubstance:
    name = enrichment.label.strip() or candidate.name.strip()
    inferred = enrichment_tags(enrichment)
    corroboration = Corroboration(
        resolved_sources=1,
        has_description=enrichment.has_description,
        has_chemistry=enrichment.has_chemistry,
    )
    return NormalizedSubstance(
        name=name,
        slug=slugify(name),
        canonical_id=enrichment.inchi_key,
        confidence_score=score_confidence(corroboration, options.weights),
        verification_status=verification_status(corroboration),
        last_imported_at=resolved_at,
        category=candidate.category or _first(inferred),
        summary=enrichment.description or None,
        aliases=_aliases(name, (), enrichment.synonyms, options.limits),
        tags=_tags(inferred, candidate.tags),
        external_ids=ExternalIdentifiers(
            pubchem_cid=enrichment.cid,
            inchi_key=enrichment.inchi_key,
            molecular_formula=enrichment.molecular_formula,
        ),
        sources=(_enrichment_citation(enrichment),),
    )


def _merge_pair(
    candidate: CandidateName,
    primary: PrimaryFact,
    enrichment: EnrichmentFact,
    resolved_at: datetime,
    options: MergeOptions,
) -> NormalizedSubstance:
    name = primary.label.strip() or enrichment.label.strip() or candidate.name.strip()
    from_primary = primary_tags(primary)
    from_enrichment = enrichment_tags(enrichment)
    conflict = bool(from_primary and from_enrichment) and not (
        set(from_primary) & set(from_enrichment)
    )
    agree = identities_agree(primary, enrichment)
    if not agree:
        log.info(
            "Sources disagree on identity for %r (wikidata %s, pubchem %s)",
            candidate.name,
            primary.qid,
            enrichment.cid,
        )
    corroboration = Corroboration(
        resolved_sources=2,
        identity_agreement=agree,
        has_description=primary.has_description or enrichment.has_description,
        has_chemistry=primary.has_chemistry or enrichment.has_chemistry,
        classification_conflict=conflict,
    )
    inferred = dedupe_casefold([*from_primary, *from_enrichment])
    return NormalizedSubstance(
        name=name,
        slug=slugify(name),
        canonical_id=enrichment.inchi_key or primary.inchi_key or primary.qid,
        confidence_score=score_confidence(corroboration, options.weights),
        verification_status=verification_status(corroboration),
        last_imported_at=resolved_at,
        category=candidate.category or _first(inferred),
        summary=primary.description or enrichment.description or None,
        aliases=_aliases(name, primary.aliases, enrichment.synonyms, options.limits),
        tags=_tags(inferred, candidate.tags),
        external_ids=ExternalIdentifiers(
            wikidata_qid=primary.qid,
            pubchem_cid=enrichment.cid,
            inchi_key=enrichment.inchi_key or primary.inchi_key,
            cas_number=primary.cas_number,
            chembl_id=primary.chembl_id,
            drugbank_id=primary.drugbank_id,
            molecular_formula=enrichment.molecular_formula,
        ),
        sources=(_primary_citation(primary), _enrichment_citation(enrichment)),
    )


# Helpers ----------------------------------------------------------------------


def _pick_facts(facts: Iterable[SourceFact]) -> tuple[PrimaryFact | None, EnrichmentFact | None]:
    primary: PrimaryFact | None = None
    enrichment: EnrichmentFact | None = None
    for fact in facts:
        match fact:
            case PrimaryFact() if primary is None:
                primary = fact
            case EnrichmentFact() if enrichment is None:
                enrichment = fact
            case _:
                log.debug("Ignoring extra %s fact", fact.source)
    return primary, enrichment


def _aliases(
    name: str,
    primary_aliases: Iterable[str],
    enrichment_synonyms: Iterable[str],
    limits: MergeLimits,
) -> tuple[str, ...]:
    synonyms = list(enrichment_synonyms)[: limits.max_enrichment_aliases]
    merged = dedupe_casefold([*primary_aliases, *synonyms], exclude=[name])
    return tuple(merged[: limits.max_aliases])


def _tags(inferred: Iterable[str], hints: Iterable[str]) -> tuple[str, ...]:
    return tuple(dedupe_casefold([*inferred, *hints]))


def _first(values: Iterable[str]) -> str | None:
    return next(iter(values), None)


def _primary_ids(primary: PrimaryFact) -> ExternalIdentifiers:
    return ExternalIdentifiers(
        wikidata_qid=primary.qid,
        pubchem_cid=primary.pubchem_cid,
        inchi_key=primary.inchi_key,
        cas_number=primary.cas_number,
        chembl_id=primary.chembl_id,
        drugbank_id=primary.drugbank_id,
    )


def _primary_citation(primary: PrimaryFact) -> SourceCitation:
    fields = [
        label
        for label, present in (
            ("summary", primary.has_description),
            ("chemistry", primary.has_chemistry),
            ("aliases", bool(primary.aliases)),
            ("class", bool(primary.class_labels)),
            ("cas", bool(primary.cas_number)),
        )
        if present
    ]
    return SourceCitation(
        source=primary.source,
        source_url=primary.source_url,
        retrieved_at=primary.retrieved_at,
        fields=tuple(fields),
    )


def _enrichment_citation(enrichment: EnrichmentFact) -> SourceCitation:
    fields = [
        label
        for label, present in (
            ("summary", enrichment.has_description),
            ("chemistry", enrichment.has_chemistry),
            ("aliases", bool(enrichment.synonyms)),
        )
        if present
    ]
    return SourceCitation(
        source=enrichment.source,
        source_url=enrichment.source_url,
        retrieved_at=enrichment.retrieved_at,
        fields=tuple(fields),
    )
