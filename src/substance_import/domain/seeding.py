"""Seed generator: page through the knowledge graph into deduplicated candidates.

Paging stops when the target count is reached, when a page comes back empty,
or when a page is shorter than requested. Errors from the pager (including
exhausted retries) propagate and fail the whole run.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .slug import slugify
from .tags import dedupe_casefold, infer_tags

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .ports import KnowledgeGraphPager, SeedRow

log = logging.getLogger(__name__)

_BARE_QID = re.compile(r"^Q\d+$")


@dataclass(frozen=True, slots=True, kw_only=True)
class SeedCandidate:
    name: str
    slug: str
    wikidata_qid: str
    aliases: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    pubchem_cid: int | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "slug": self.slug,
            "aliases": list(self.aliases),
            "tags": list(self.tags),
            "wikidata_qid": self.wikidata_qid,
            "pubchem_cid": self.pubchem_cid,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class SeedPaging:
    page_size: int = 500
    page_delay_seconds: float = 2.0
    max_overfetch: int = 15


def seed_candidate(row: SeedRow) -> SeedCandidate | None:
    """Turn one knowledge-graph row into a candidate, or ``None`` when unusable."""

    label = row.label.strip()
    if not label or _BARE_QID.match(label):
        return None
    slug = slugify(label)
    if not slug:
        return None
    return SeedCandidate(
        name=label,
        slug=slug,
        wikidata_qid=row.qid,
        aliases=tuple(dedupe_casefold(row.aliases, exclude=[label])),
        tags=infer_tags(row.class_labels),
        pubchem_cid=row.pubchem_cid,
    )


def request_size(remaining: int, paging: SeedPaging) -> int:
    """Rows to request for the next page, over-fetching to absorb duplicate slugs."""

    overfetch = min(paging.max_overfetch, math.ceil(remaining / 2))
    return max(1, min(paging.page_size, remaining + overfetch))


async def generate_seed(
    pager: KnowledgeGraphPager,
    *,
    limit: int,
    paging: SeedPaging | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> list[SeedCandidate]:
    paging = paging or SeedPaging()
    if limit <= 0:
        return []

    candidates: dict[str, SeedCandidate] = {}
    offset = 0
    pages = 0
    while len(candidates) < limit:
        if pages:
            await sleep(paging.page_delay_seconds)
        requested = request_size(limit - len(candidates), paging)
        rows = await pager.fetch_page(limit=requested, offset=offset)
        pages += 1
        offset += len(rows)
        log.info(
            "Seed page %s: requested=%s, received=%s, collected=%s",
            pages,
            requested,
            len(rows),
            len(candidates),
        )

        for row in rows:
            candidate = seed_candidate(row)
            if candidate is None or candidate.slug in candidates:
                continue
            candidates[candidate.slug] = candidate
            if len(candidates) >= limit:
                break

        if len(rows) < requested:
            break

    log.info("Seed generation finished: %s candidates from %s pages", len(candidates), pages)
    return list(candidates.values())
