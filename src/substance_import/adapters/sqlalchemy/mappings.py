"""SQLAlchemy mapping metadata for the catalog and audit log."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache
from typing import Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from substance_import.domain.model import (
    CatalogEntry,
    CatalogStatus,
    ImportAction,
    ImportRun,
    ImportRunItem,
    RunStatus,
    VerificationStatus,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class JSONList(TypeDecorator[list[Any]]):
    """JSON array stored as text; ``NULL`` reads back as an empty list."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: list[Any] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(list(value), ensure_ascii=False)

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[Any]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        return cast(list[Any], loaded)


class JSONObject(TypeDecorator[dict[str, Any]]):
    """JSON object stored as text; ``NULL`` reads back as an empty dict."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: dict[str, Any] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(dict(value), ensure_ascii=False, sort_keys=True)

    def process_result_value(self, value: str | None, dialect: Dialect) -> dict[str, Any]:
        _ = dialect
        if value is None:
            return {}
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return {}
        return cast(dict[str, Any], loaded)


def _enum_type(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Catalog ---------------------------------------------------------------------

catalog_entry_table = Table(
    "catalog_entry",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("slug", String(255), nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("status", _enum_type(CatalogStatus), nullable=False),
    Column("canonical_id", String, nullable=True),
    Column("confidence_score", Integer, nullable=False, default=0),
    Column("verification_status", _enum_type(VerificationStatus), nullable=False),
    Column("summary", Text, nullable=True),
    Column("aliases", JSONList, nullable=False),
    Column("tags", JSONList, nullable=False),
    Column("categories", JSONList, nullable=False),
    Column("external_ids", JSONObject, nullable=False),
    Column("sources", JSONList, nullable=False),
    Column("last_imported_at", UTCDateTime, nullable=True),
    Column("import_run_id", UUIDColumnType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

# Audit log -------------------------------------------------------------------

import_run_table = Table(
    "import_run",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("triggered_by", String, nullable=False),
    Column("adapters", JSONList, nullable=False),
    Column("overwrite", Boolean, nullable=False, default=False),
    Column("dry_run", Boolean, nullable=False, default=False),
    Column("status", _enum_type(RunStatus), nullable=False),
    Column("total_items", Integer, nullable=False),
    Column("inserted_count", Integer, nullable=False, default=0),
    Column("updated_count", Integer, nullable=False, default=0),
    Column("skipped_count", Integer, nullable=False, default=0),
    Column("failed_count", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime, nullable=False),
    Column("finished_at", UTCDateTime, nullable=True),
    Index("ix_import_run_created_at", "created_at"),
)

import_run_item_table = Table(
    "import_run_item",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("run_id", UUIDColumnType, ForeignKey("import_run.id"), nullable=False),
    Column("position", Integer, nullable=False),
    Column("substance_name", String, nullable=False),
    Column("substance_slug", String(255), nullable=True),
    Column("canonical_id", String, nullable=True),
    Column("action", _enum_type(ImportAction), nullable=False),
    Column("confidence_score", Integer, nullable=True),
    Column("error_message", Text, nullable=True),
    Column("sources", JSONList, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    Index("ix_import_run_item_run_id", "run_id", "position"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(CatalogEntry, catalog_entry_table)
    mapper_registry.map_imperatively(ImportRun, import_run_table)
    mapper_registry.map_imperatively(ImportRunItem, import_run_item_table)

    configure_mappers()
    return mapper_registry

