"""Port for paging through the external knowledge graph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True, kw_only=True)
class SeedRow:
    """One knowledge-graph item with its labels grouped."""

    qid: str
    label: str
    aliases: tuple[str, ...] = ()
    class_labels: tuple[str, ...] = ()
    pubchem_cid: int | None = None


class KnowledgeGraphPager(Protocol):
    async def fetch_page(self, *, limit: int, offset: int) -> list[SeedRow]: ...


__all__ = ["KnowledgeGraphPager", "SeedRow"]
