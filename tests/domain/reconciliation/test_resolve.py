from __future__ import annotations

import asyncio

from substance_import.domain.model import CandidateName, SourceKind
from substance_import.domain.reconciliation import (
    Resolution,
    SourceSet,
    gather_bounded,
    resolve_candidate,
)
from tests.helpers.sources import (
    FakeEnrichmentSource,
    FakePrimarySource,
    make_enrichment_fact,
    make_primary_fact,
)


def _resolve(
    candidate: CandidateName, sources: SourceSet, *, skip_secondary: bool = False
) -> Resolution:
    return asyncio.run(resolve_candidate(candidate, sources, skip_secondary=skip_secondary))


def test_resolve_prefers_known_identifier_over_search() -> None:
    primary = FakePrimarySource([make_primary_fact()])
    enrichment = FakeEnrichmentSource([make_enrichment_fact()])

    resolution = _resolve(
        CandidateName(name="Magic mushroom compound", wikidata_qid="Q334033"),
        SourceSet(primary=primary, enrichment=enrichment),
    )

    assert primary.fetch_calls == ["Q334033"]
    assert primary.search_calls == []
    # the enrichment lookup uses the CID carried by the primary record
    assert enrichment.fetch_calls == ["10624"]
    assert [fact.source for fact in resolution.facts] == [SourceKind.WIKIDATA, SourceKind.PUBCHEM]
    assert resolution.errors == ()


def test_resolve_falls_back_to_search_when_identifier_is_unknown() -> None:
    primary = FakePrimarySource([make_primary_fact()])

    resolution = _resolve(
        CandidateName(name="Psilocybin", wikidata_qid="Q999"),
        SourceSet(primary=primary),
    )

    assert primary.fetch_calls == ["Q999"]
    assert primary.search_calls == ["Psilocybin"]
    assert resolution.resolved


def test_resolve_skips_enrichment_when_primary_is_unresolved() -> None:
    enrichment = FakeEnrichmentSource([make_enrichment_fact()])

    resolution = _resolve(
        CandidateName(name="Unknown"),
        SourceSet(primary=FakePrimarySource(), enrichment=enrichment),
    )

    assert not resolution.resolved
    assert not resolution.all_sources_failed
    assert enrichment.fetch_calls == []
    assert enrichment.search_calls == []


def test_resolve_candidate_cid_overrides_primary_cid() -> None:
    enrichment = FakeEnrichmentSource([make_enrichment_fact(cid=42)])

    _resolve(
        CandidateName(name="Psilocybin", pubchem_cid=42),
        SourceSet(primary=FakePrimarySource([make_primary_fact()]), enrichment=enrichment),
    )

    assert enrichment.fetch_calls == ["42"]


def test_resolve_searches_enrichment_by_primary_label_without_cid() -> None:
    enrichment = FakeEnrichmentSource([make_enrichment_fact()])

    resolution = _resolve(
        CandidateName(name="Psilocybin"),
        SourceSet(
            primary=FakePrimarySource([make_primary_fact(pubchem_cid=None)]),
            enrichment=enrichment,
        ),
    )

    assert enrichment.fetch_calls == []
    assert enrichment.search_calls == ["Psilocybin"]
    assert len(resolution.facts) == 2


def test_resolve_records_primary_failure() -> None:
    primary = FakePrimarySource(failures={"Psilocybin": TimeoutError("query timed out")})

    resolution = _resolve(CandidateName(name="Psilocybin"), SourceSet(primary=primary))

    assert resolution.all_sources_failed
    assert [str(error) for error in resolution.errors] == ["wikidata: query timed out"]


def test_resolve_keeps_primary_when_enrichment_fails() -> None:
    enrichment = FakeEnrichmentSource(failures={"10624": RuntimeError("HTTP 503")})

    resolution = _resolve(
        CandidateName(name="Psilocybin"),
        SourceSet(primary=FakePrimarySource([make_primary_fact()]), enrichment=enrichment),
    )

    assert len(resolution.facts) == 1
    assert not resolution.all_sources_failed
    assert [error.source for error in resolution.errors] == [SourceKind.PUBCHEM]


def test_resolve_honours_skip_secondary() -> None:
    enrichment = FakeEnrichmentSource([make_enrichment_fact()])

    resolution = _resolve(
        CandidateName(name="Psilocybin"),
        SourceSet(primary=FakePrimarySource([make_primary_fact()]), enrichment=enrichment),
        skip_secondary=True,
    )

    assert len(resolution.facts) == 1
    assert enrichment.fetch_calls == []


def test_gather_bounded_limits_concurrency_and_preserves_order() -> None:
    in_flight = 0
    peak = 0

    async def work(index: int, value: str) -> str:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.001 * (5 - index))
        in_flight -= 1
        return f"{index}:{value}"

    results = asyncio.run(gather_bounded(list("abcde"), work, limit=2))

    assert results == ["0:a", "1:b", "2:c", "3:d", "4:e"]
    assert peak == 2
