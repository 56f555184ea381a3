"""Unit-of-work abstractions and the catalog store capability."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from .persistence import CatalogRepository, ImportRunItemRepository, ImportRunRepository


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CatalogRepositories(RepositoryCollection):
    catalog: CatalogRepository


@dataclass(slots=True)
class AuditRepositories(RepositoryCollection):
    runs: ImportRunRepository
    items: ImportRunItemRepository


type CatalogUnitOfWork = UnitOfWork[CatalogRepositories]
type AuditUnitOfWork = UnitOfWork[AuditRepositories]


class CatalogStore(Protocol):
    """Explicit handle to the backing store, resolved once at startup."""

    def catalog_unit_of_work(self) -> CatalogUnitOfWork: ...

    def audit_unit_of_work(self) -> AuditUnitOfWork: ...


__all__ = [
    "AuditRepositories",
    "AuditUnitOfWork",
    "CatalogRepositories",
    "CatalogStore",
    "CatalogUnitOfWork",
    "RepositoryCollection",
    "UnitOfWork",
]
