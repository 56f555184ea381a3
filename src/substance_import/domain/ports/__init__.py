"""Domain port definitions for adapters."""

from __future__ import annotations

from .audit import AuditTrail
from .persistence import CatalogRepository, ImportRunItemRepository, ImportRunRepository
from .seeding import KnowledgeGraphPager, SeedRow
from .sources import EnrichmentSource, PrimarySource, SourceAdapter
from .unit_of_work import (
    AuditRepositories,
    AuditUnitOfWork,
    CatalogRepositories,
    CatalogStore,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AuditRepositories",
    "AuditTrail",
    "AuditUnitOfWork",
    "CatalogRepositories",
    "CatalogRepository",
    "CatalogStore",
    "CatalogUnitOfWork",
    "EnrichmentSource",
    "ImportRunItemRepository",
    "ImportRunRepository",
    "KnowledgeGraphPager",
    "PrimarySource",
    "RepositoryCollection",
    "SeedRow",
    "SourceAdapter",
    "UnitOfWork",
]
