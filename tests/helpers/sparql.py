"""Builders for SPARQL JSON result payloads."""

from __future__ import annotations

ENTITY = "http://www.wikidata.org/entity/"

type SparqlPayload = dict[str, object]


def literal(value: str, *, lang: str | None = None) -> dict[str, str]:
    payload = {"type": "literal", "value": value}
    if lang is not None:
        payload["xml:lang"] = lang
    return payload


def uri(value: str) -> dict[str, str]:
    return {"type": "uri", "value": value}


def sparql(*bindings: dict[str, dict[str, str]]) -> SparqlPayload:
    variables = sorted({name for binding in bindings for name in binding})
    return {"head": {"vars": variables}, "results": {"bindings": list(bindings)}}
