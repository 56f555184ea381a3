from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING

import httpx
import pytest

from substance_import.adapters.wikidata import (
    WikidataAPIError,
    WikidataClient,
    WikidataSeedPager,
    WikidataSource,
    escape_sparql_literal,
)
from substance_import.domain.model import SourceKind
from tests.helpers.http import make_client_factory
from tests.helpers.sparql import ENTITY, SparqlPayload, literal, sparql, uri

if TYPE_CHECKING:
    from collections.abc import Callable

    from substance_import.adapters.http_resilience import ResilientClient
    from substance_import.config.http_resilience import ResilienceConfig
    from substance_import.config.wikidata import WikidataConfig

LIMIT_CLAUSE = re.compile(r"\bLIMIT (\d+)\b")


def _query(request: httpx.Request) -> str:
    return request.url.params["query"]


def _limited(payload: SparqlPayload, query: str) -> SparqlPayload:
    """Cut ``payload`` down to the query's LIMIT, as the query service would."""

    match = LIMIT_CLAUSE.search(query)
    results = payload["results"]
    assert match is not None
    assert isinstance(results, dict)
    return sparql(*results["bindings"][: int(match.group(1))])


def _source(
    config: WikidataConfig,
    handler: Callable[[httpx.Request], httpx.Response],
) -> WikidataSource:
    client = WikidataClient(config=config, client_factory=make_client_factory(handler))
    return WikidataSource(client)


def _routing_handler(
    *,
    entity: SparqlPayload,
    aliases: SparqlPayload,
    classes: SparqlPayload,
    search: SparqlPayload | None = None,
    seen: list[str] | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        query = _query(request)
        if seen is not None:
            seen.append(query)
        assert request.url.params["format"] == "json"
        if "VALUES ?item" in query:
            return httpx.Response(200, json=entity, request=request)
        if "skos:altLabel ?alias" in query:
            return httpx.Response(200, json=_limited(aliases, query), request=request)
        if "wdt:P31 ?class" in query:
            return httpx.Response(200, json=_limited(classes, query), request=request)
        return httpx.Response(200, json=search or sparql(), request=request)

    return handler


def test_fetch_by_id_translates_entity(
    wikidata_config: WikidataConfig,
    psilocybin_entity: SparqlPayload,
    psilocybin_aliases: SparqlPayload,
    psilocybin_classes: SparqlPayload,
) -> None:
    seen: list[str] = []
    source = _source(
        wikidata_config,
        _routing_handler(
            entity=psilocybin_entity,
            aliases=psilocybin_aliases,
            classes=psilocybin_classes,
            seen=seen,
        ),
    )

    fact = asyncio.run(source.fetch_by_id("q334033"))

    assert fact is not None
    assert source.kind is SourceKind.WIKIDATA
    assert fact.qid == "Q334033"
    assert fact.label == "Psilocybin"
    assert fact.source_url == "https://www.wikidata.org/wiki/Q334033"
    assert fact.pubchem_cid == 10624
    assert fact.cas_number == "520-52-5"
    assert fact.chembl_id == "CHEMBL194378"
    assert fact.aliases == ("Psilocybine", "4-PO-DMT")
    assert fact.class_labels == ("tryptamine alkaloid", "psychedelic drug")
    assert fact.has_chemistry
    assert len(seen) == 3
    assert all("wd:Q334033" in query for query in seen)


def test_many_aliases_do_not_crowd_out_class_labels(
    wikidata_config: WikidataConfig,
    psilocybin_entity: SparqlPayload,
    psilocybin_classes: SparqlPayload,
) -> None:
    aliases = sparql(*({"alias": literal(f"Psilocybin-{n}", lang="en")} for n in range(35)))
    source = _source(
        wikidata_config,
        _routing_handler(entity=psilocybin_entity, aliases=aliases, classes=psilocybin_classes),
    )

    fact = asyncio.run(source.fetch_by_id("Q334033"))

    assert fact is not None
    assert len(fact.aliases) == 20
    assert fact.aliases[0] == "Psilocybin-0"
    assert fact.class_labels == ("tryptamine alkaloid", "psychedelic drug")


def test_fetch_by_id_rejects_malformed_ids_without_network(
    wikidata_config: WikidataConfig,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request {request.url}")

    assert asyncio.run(_source(wikidata_config, handler).fetch_by_id("psilocybin")) is None


def test_fetch_by_id_ignores_items_without_label(
    wikidata_config: WikidataConfig,
    psilocybin_aliases: SparqlPayload,
    psilocybin_classes: SparqlPayload,
) -> None:
    entity = sparql({"item": uri(f"{ENTITY}Q42"), "itemLabel": literal("Q42")})
    source = _source(
        wikidata_config,
        _routing_handler(entity=entity, aliases=psilocybin_aliases, classes=psilocybin_classes),
    )

    assert asyncio.run(source.fetch_by_id("Q42")) is None


def test_search_resolves_matching_items(
    wikidata_config: WikidataConfig,
    psilocybin_entity: SparqlPayload,
    psilocybin_aliases: SparqlPayload,
    psilocybin_classes: SparqlPayload,
) -> None:
    seen: list[str] = []
    search = sparql({"item": uri(f"{ENTITY}Q334033")})
    source = _source(
        wikidata_config,
        _routing_handler(
            entity=psilocybin_entity,
            aliases=psilocybin_aliases,
            classes=psilocybin_classes,
            search=search,
            seen=seen,
        ),
    )

    facts = asyncio.run(source.search('Psilocybin "magic"'))

    assert [fact.qid for fact in facts] == ["Q334033"]
    assert 'rdfs:label "Psilocybin \\"magic\\""@en' in seen[0]


def test_search_with_blank_name_returns_nothing(wikidata_config: WikidataConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request {request.url}")

    assert asyncio.run(_source(wikidata_config, handler).search("   ")) == []


def test_query_errors_are_wrapped(wikidata_config: WikidataConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="bad query", request=request)

    with pytest.raises(WikidataAPIError):
        asyncio.run(_source(wikidata_config, handler).fetch_by_id("Q1"))


def test_exhausted_retries_surface_as_api_error(wikidata_config: WikidataConfig) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503, request=request)

    with pytest.raises(WikidataAPIError):
        asyncio.run(_source(wikidata_config, handler).fetch_by_id("Q1"))

    assert len(calls) == 3


def test_non_json_payload_is_reported(wikidata_config: WikidataConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>", request=request)

    with pytest.raises(WikidataAPIError, match="non-JSON"):
        asyncio.run(_source(wikidata_config, handler).fetch_by_id("Q1"))


def test_source_context_reuses_one_client(
    wikidata_config: WikidataConfig,
    psilocybin_entity: SparqlPayload,
    psilocybin_aliases: SparqlPayload,
    psilocybin_classes: SparqlPayload,
) -> None:
    created: list[ResilientClient] = []
    factory = make_client_factory(
        _routing_handler(
            entity=psilocybin_entity, aliases=psilocybin_aliases, classes=psilocybin_classes
        )
    )

    def counting_factory(config: ResilienceConfig) -> ResilientClient:
        client = factory(config)
        created.append(client)
        return client

    async def run() -> None:
        client = WikidataClient(config=wikidata_config, client_factory=counting_factory)
        async with WikidataSource(client) as source:
            await source.fetch_by_id("Q334033")
            await source.fetch_by_id("Q334033")

    asyncio.run(run())

    assert len(created) == 1


def test_seed_pager_groups_labels(wikidata_config: WikidataConfig) -> None:
    seen: list[str] = []
    page = sparql(
        {
            "item": uri(f"{ENTITY}Q243547"),
            "itemLabel": literal("Ketamine", lang="en"),
            "aliases": literal("Ketamin|Ketalar| "),
            "classLabels": literal("arylcyclohexylamine"),
            "pubchemCid": literal("3821"),
        },
        {"item": uri(f"{ENTITY}Q1")},
    )

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(_query(request))
        return httpx.Response(200, json=page, request=request)

    client = WikidataClient(config=wikidata_config, client_factory=make_client_factory(handler))
    rows = asyncio.run(WikidataSeedPager(client).fetch_page(limit=25, offset=50))

    assert len(rows) == 1
    row = rows[0]
    assert row.qid == "Q243547"
    assert row.aliases == ("Ketamin", "Ketalar")
    assert row.class_labels == ("arylcyclohexylamine",)
    assert row.pubchem_cid == 3821
    assert "LIMIT 25" in seen[0]
    assert "OFFSET 50" in seen[0]


def test_escape_sparql_literal() -> None:
    assert escape_sparql_literal('a "b"\\c\n') == 'a \\"b\\"\\\\c\\n'
