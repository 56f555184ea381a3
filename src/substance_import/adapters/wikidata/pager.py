"""Knowledge-graph pager used by the seed generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .queries import seed_page_query
from .translator import translate_seed_row

if TYPE_CHECKING:
    from substance_import.domain.ports import SeedRow

    from .client import WikidataClient


class WikidataSeedPager:
    def __init__(self, client: WikidataClient) -> None:
        self._client = client

    async def fetch_page(self, *, limit: int, offset: int) -> list[SeedRow]:
        response = await self._client.query(seed_page_query(limit=limit, offset=offset))
        return [row for binding in response.bindings if (row := translate_seed_row(binding))]
