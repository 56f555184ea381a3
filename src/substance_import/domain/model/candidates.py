"""Unreconciled candidate records supplied per request."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class CandidateName:
    """A raw name plus optional external identifiers and curator hints."""

    name: str
    wikidata_qid: str | None = None
    pubchem_cid: int | None = None
    tags: tuple[str, ...] = ()
    category: str | None = None
