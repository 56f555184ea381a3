"""Per-candidate source resolution.

Sources are queried strictly in sequence for one candidate: the primary source
first, the enrichment source only once the primary resolved, because the
enrichment lookup may depend on an identifier the primary record carries.
Any adapter exception means that source contributes nothing.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from substance_import.domain.model import (
        CandidateName,
        EnrichmentFact,
        PrimaryFact,
        SourceFact,
        SourceKind,
    )
    from substance_import.domain.ports import EnrichmentSource, PrimarySource

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SourceSet:
    primary: PrimarySource
    enrichment: EnrichmentSource | None = None

    @property
    def kinds(self) -> list[str]:
        adapters = [self.primary, self.enrichment]
        return [str(adapter.kind) for adapter in adapters if adapter is not None]


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceError:
    source: SourceKind
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"


@dataclass(frozen=True, slots=True, kw_only=True)
class Resolution:
    facts: tuple[SourceFact, ...] = ()
    errors: tuple[SourceError, ...] = ()

    @property
    def resolved(self) -> bool:
        return bool(self.facts)

    @property
    def all_sources_failed(self) -> bool:
        """True when nothing resolved because every queried source raised."""

        return not self.facts and bool(self.errors)


async def resolve_candidate(
    candidate: CandidateName,
    sources: SourceSet,
    *,
    skip_secondary: bool = False,
) -> Resolution:
    errors: list[SourceError] = []
    primary = await _resolve_primary(candidate, sources.primary, errors)
    if primary is None:
        return Resolution(errors=tuple(errors))
    if skip_secondary or sources.enrichment is None:
        return Resolution(facts=(primary,), errors=tuple(errors))

    enrichment = await _resolve_enrichment(candidate, primary, sources.enrichment, errors)
    facts: tuple[SourceFact, ...] = (primary,) if enrichment is None else (primary, enrichment)
    return Resolution(facts=facts, errors=tuple(errors))


async def gather_bounded[T, R](
    items: Sequence[T],
    func: Callable[[int, T], Awaitable[R]],
    *,
    limit: int,
) -> list[R]:
    """Run ``func`` over ``items`` with at most ``limit`` in flight, preserving input order."""

    semaphore = asyncio.Semaphore(max(1, limit))

    async def run(index: int, item: T) -> R:
        async with semaphore:
            return await func(index, item)

    return list(await asyncio.gather(*(run(index, item) for index, item in enumerate(items))))


async def _resolve_primary(
    candidate: CandidateName,
    source: PrimarySource,
    errors: list[SourceError],
) -> PrimaryFact | None:
    try:
        if candidate.wikidata_qid:
            fact = await source.fetch_by_id(candidate.wikidata_qid)
            if fact is not None:
                return fact
        matches = await source.search(candidate.name)
    except Exception as exc:  # noqa: BLE001
        log.warning("Primary source failed for %r: %s", candidate.name, exc)
        errors.append(SourceError(source=source.kind, message=str(exc) or type(exc).__name__))
        return None
    return matches[0] if matches else None


async def _resolve_enrichment(
    candidate: CandidateName,
    primary: PrimaryFact,
    source: EnrichmentSource,
    errors: list[SourceError],
) -> EnrichmentFact | None:
    cid = candidate.pubchem_cid if candidate.pubchem_cid is not None else primary.pubchem_cid
    try:
        if cid is not None:
            return await source.fetch_by_id(str(cid))
        matches = await source.search(primary.label or candidate.name)
    except Exception as exc:  # noqa: BLE001
        log.warning("Enrichment source failed for %r: %s", candidate.name, exc)
        errors.append(SourceError(source=source.kind, message=str(exc) or type(exc).__name__))
        return None
    return matches[0] if matches else None
