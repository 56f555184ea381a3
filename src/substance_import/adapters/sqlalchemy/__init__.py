"""SQLAlchemy adapter package for the substance catalog."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyCatalogRepository,
    SqlAlchemyImportRunItemRepository,
    SqlAlchemyImportRunRepository,
)
from .unit_of_work import (
    SqlAlchemyAuditUnitOfWork,
    SqlAlchemyCatalogStore,
    SqlAlchemyCatalogUnitOfWork,
    open_catalog_store,
)

__all__ = [
    "SqlAlchemyAuditUnitOfWork",
    "SqlAlchemyCatalogRepository",
    "SqlAlchemyCatalogStore",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyImportRunItemRepository",
    "SqlAlchemyImportRunRepository",
    "mapper_registry",
    "open_catalog_store",
    "start_mappers",
]
