"""Repository ports for the catalog and the audit log."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    import uuid

    from substance_import.domain.model import CatalogEntry, ImportRun, ImportRunItem


class CatalogRepository(Protocol):
    def get_by_slug(self, slug: str) -> CatalogEntry | None: ...

    def add(self, entry: CatalogEntry) -> None: ...

    def existing_slugs(self, *, limit: int) -> set[str]: ...

    def list_all(self) -> list[CatalogEntry]: ...


class ImportRunRepository(Protocol):
    def add(self, run: ImportRun) -> None: ...

    def get(self, run_id: uuid.UUID) -> ImportRun | None: ...

    def list_recent(self, *, limit: int) -> list[ImportRun]: ...


class ImportRunItemRepository(Protocol):
    def add(self, item: ImportRunItem) -> None: ...

    def list_for_run(self, run_id: uuid.UUID) -> list[ImportRunItem]: ...


__all__ = ["CatalogRepository", "ImportRunItemRepository", "ImportRunRepository"]
