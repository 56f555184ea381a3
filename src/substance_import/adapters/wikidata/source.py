"""Wikidata as the primary fact source."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from substance_import.domain.model import SourceKind

from .queries import aliases_query, class_labels_query, entity_query, label_search_query
from .schema import binding_value
from .translator import qid_from_uri, translate_entity

if TYPE_CHECKING:
    from types import TracebackType

    from substance_import.domain.model import PrimaryFact

    from .client import WikidataClient

log = getLogger(__name__)

QID_PATTERN = re.compile(r"^Q\d+$")


class WikidataSource:
    kind = SourceKind.WIKIDATA

    def __init__(self, client: WikidataClient) -> None:
        self._client = client

    async def __aenter__(self) -> WikidataSource:
        await self._client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self._client.__aexit__(exc_type, exc, tb)

    async def fetch_by_id(self, identifier: str) -> PrimaryFact | None:
        qid = identifier.strip().upper()
        if not QID_PATTERN.match(qid):
            log.debug("Ignoring malformed Wikidata id %r", identifier)
            return None

        entity = await self._client.query(entity_query(qid))
        if not entity.bindings:
            return None
        aliases = await self._client.query(aliases_query(qid))
        class_labels = await self._client.query(class_labels_query(qid))
        return translate_entity(
            entity.bindings[0],
            aliases.bindings,
            class_labels.bindings,
            qid=qid,
            retrieved_at=datetime.now(tz=UTC),
        )

    async def search(self, name: str) -> list[PrimaryFact]:
        name = name.strip()
        if not name:
            return []
        response = await self._client.query(label_search_query(name))
        facts: list[PrimaryFact] = []
        for binding in response.bindings:
            item = binding_value(binding, "item")
            if item is None:
                continue
            fact = await self.fetch_by_id(qid_from_uri(item))
            if fact is not None:
                facts.append(fact)
        return facts
