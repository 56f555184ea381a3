"""SQLAlchemy-backed catalog store and units of work."""

from __future__ import annotations

from abc import ABC, abstractmethod
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from substance_import.domain.errors import CatalogPersistenceError, DuplicateSlugError
from substance_import.domain.model import CatalogEntry
from substance_import.domain.ports import (
    AuditRepositories,
    CatalogRepositories,
    RepositoryCollection,
)

from .mappings import start_mappers
from .migrations import upgrade_head
from .repositories import (
    SqlAlchemyCatalogRepository,
    SqlAlchemyImportRunItemRepository,
    SqlAlchemyImportRunRepository,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a unit of work is used outside its ``with`` block."""


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        return False

    def commit(self) -> None:
        pending_slugs = [obj.slug for obj in self.session.new if isinstance(obj, CatalogEntry)]
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if pending_slugs and "slug" in str(exc.orig).lower():
                raise DuplicateSlugError(pending_slugs[0]) from exc
            raise CatalogPersistenceError(str(exc.orig)) from exc

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyCatalogUnitOfWork(BaseSqlAlchemyUnitOfWork[CatalogRepositories]):
    def _build_repositories(self, session: Session) -> CatalogRepositories:
        return CatalogRepositories(catalog=SqlAlchemyCatalogRepository(session))


class SqlAlchemyAuditUnitOfWork(BaseSqlAlchemyUnitOfWork[AuditRepositories]):
    def _build_repositories(self, session: Session) -> AuditRepositories:
        return AuditRepositories(
            runs=SqlAlchemyImportRunRepository(session),
            items=SqlAlchemyImportRunItemRepository(session),
        )


class SqlAlchemyCatalogStore:
    """Explicit store handle owning the engine's session factory."""

    def __init__(self, engine: Engine) -> None:
        start_mappers()
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    def catalog_unit_of_work(self) -> SqlAlchemyCatalogUnitOfWork:
        return SqlAlchemyCatalogUnitOfWork(self._session_factory)

    def audit_unit_of_work(self) -> SqlAlchemyAuditUnitOfWork:
        return SqlAlchemyAuditUnitOfWork(self._session_factory)

    def dispose(self) -> None:
        self.engine.dispose()


def open_catalog_store(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
) -> SqlAlchemyCatalogStore | None:
    """Connect, migrate to head and return the store, or ``None`` when unreachable."""

    try:
        if engine is not None:
            resolved_engine = engine
        elif database_uri:
            resolved_engine = create_engine(database_uri, future=True)
        else:
            return None
        upgrade_head(engine=resolved_engine)
    except SQLAlchemyError:
        log.exception("Catalog store is unavailable")
        return None
    return SqlAlchemyCatalogStore(resolved_engine)

