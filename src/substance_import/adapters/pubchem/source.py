"""PubChem as the enrichment fact source."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from substance_import.domain.model import SourceKind

from .translator import translate_compound

if TYPE_CHECKING:
    from types import TracebackType

    from substance_import.domain.model import EnrichmentFact

    from .client import PubChemClient

log = getLogger(__name__)


class PubChemSource:
    kind = SourceKind.PUBCHEM

    def __init__(self, client: PubChemClient) -> None:
        self._client = client

    async def __aenter__(self) -> PubChemSource:
        await self._client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self._client.__aexit__(exc_type, exc, tb)

    async def fetch_by_id(self, identifier: str) -> EnrichmentFact | None:
        value = identifier.strip()
        if not value.isdigit():
            log.debug("Ignoring non-numeric PubChem CID %r", identifier)
            return None
        cid = int(value)

        properties = await self._client.fetch_properties(cid)
        if properties is None:
            return None
        synonyms = await self._client.fetch_synonyms(cid)
        description = await self._client.fetch_description(cid)
        return translate_compound(
            properties,
            synonyms=synonyms,
            description=description,
            retrieved_at=datetime.now(tz=UTC),
        )

    async def search(self, name: str) -> list[EnrichmentFact]:
        name = name.strip()
        if not name:
            return []
        cids = await self._client.search_cids(name)
        if not cids:
            return []
        fact = await self.fetch_by_id(str(cids[0]))
        return [fact] if fact is not None else []
