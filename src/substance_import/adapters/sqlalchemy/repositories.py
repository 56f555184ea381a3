"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from substance_import.domain.model import CatalogEntry, ImportRun, ImportRunItem

from .mappings import catalog_entry_table, import_run_item_table, import_run_table

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.orm import Session


class SqlAlchemyCatalogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_slug(self, slug: str) -> CatalogEntry | None:
        stmt = select(CatalogEntry).where(catalog_entry_table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def add(self, entry: CatalogEntry) -> None:
        self.session.add(entry)

    def existing_slugs(self, *, limit: int) -> set[str]:
        """Fetch known slugs in one bounded query."""

        stmt = select(catalog_entry_table.c.slug).order_by(catalog_entry_table.c.slug).limit(limit)
        return set(self.session.execute(stmt).scalars())

    def list_all(self) -> list[CatalogEntry]:
        stmt = select(CatalogEntry).order_by(catalog_entry_table.c.slug)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyImportRunRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, run: ImportRun) -> None:
        self.session.add(run)

    def get(self, run_id: uuid.UUID) -> ImportRun | None:
        return self.session.get(ImportRun, run_id)

    def list_recent(self, *, limit: int) -> list[ImportRun]:
        stmt = select(ImportRun).order_by(import_run_table.c.created_at.desc()).limit(limit)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyImportRunItemRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, item: ImportRunItem) -> None:
        self.session.add(item)

    def list_for_run(self, run_id: uuid.UUID) -> list[ImportRunItem]:
        stmt = (
            select(ImportRunItem)
            .where(import_run_item_table.c.run_id == run_id)
            .order_by(import_run_item_table.c.position)
        )
        return list(self.session.execute(stmt).scalars())
