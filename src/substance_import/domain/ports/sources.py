"""Ports for external fact sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from substance_import.domain.model import EnrichmentFact, PrimaryFact, SourceKind


@runtime_checkable
class SourceAdapter[TFact](Protocol):
    """Fetch-by-id and search-by-name against one external source.

    Both calls may raise; the caller treats any exception as "this source
    contributed nothing". Implementations hold no state beyond their HTTP client.
    """

    @property
    def kind(self) -> SourceKind: ...

    async def fetch_by_id(self, identifier: str) -> TFact | None: ...

    async def search(self, name: str) -> list[TFact]: ...


type PrimarySource = SourceAdapter[PrimaryFact]
type EnrichmentSource = SourceAdapter[EnrichmentFact]


__all__ = ["EnrichmentSource", "PrimarySource", "SourceAdapter"]
