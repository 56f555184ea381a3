"""Catalog entries and import audit log.

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from substance_import.adapters.sqlalchemy.mappings import JSONList, JSONObject, UTCDateTime

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_CATALOG_STATUS = sa.Enum("draft", "review", "published", name="catalogstatus", native_enum=False)
_VERIFICATION_STATUS = sa.Enum(
    "unverified", "partial", "verified", name="verificationstatus", native_enum=False
)
_RUN_STATUS = sa.Enum("running", "done", name="runstatus", native_enum=False)
_IMPORT_ACTION = sa.Enum(
    "inserted", "updated", "skipped", "failed", name="importaction", native_enum=False
)


def upgrade() -> None:
    op.create_table(
        "catalog_entry",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", _CATALOG_STATUS, nullable=False),
        sa.Column("canonical_id", sa.String(), nullable=True),
        sa.Column("confidence_score", sa.Integer(), nullable=False),
        sa.Column("verification_status", _VERIFICATION_STATUS, nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("aliases", JSONList(), nullable=False),
        sa.Column("tags", JSONList(), nullable=False),
        sa.Column("categories", JSONList(), nullable=False),
        sa.Column("external_ids", JSONObject(), nullable=False),
        sa.Column("sources", JSONList(), nullable=False),
        sa.Column("last_imported_at", UTCDateTime(), nullable=True),
        sa.Column("import_run_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_catalog_entry")),
        sa.UniqueConstraint("slug", name=op.f("uq_catalog_entry_slug")),
    )

    op.create_table(
        "import_run",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("triggered_by", sa.String(), nullable=False),
        sa.Column("adapters", JSONList(), nullable=False),
        sa.Column("overwrite", sa.Boolean(), nullable=False),
        sa.Column("dry_run", sa.Boolean(), nullable=False),
        sa.Column("status", _RUN_STATUS, nullable=False),
        sa.Column("total_items", sa.Integer(), nullable=False),
        sa.Column("inserted_count", sa.Integer(), nullable=False),
        sa.Column("updated_count", sa.Integer(), nullable=False),
        sa.Column("skipped_count", sa.Integer(), nullable=False),
        sa.Column("failed_count", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("finished_at", UTCDateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_import_run")),
    )
    op.create_index("ix_import_run_created_at", "import_run", ["created_at"])

    op.create_table(
        "import_run_item",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("run_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("substance_name", sa.String(), nullable=False),
        sa.Column("substance_slug", sa.String(length=255), nullable=True),
        sa.Column("canonical_id", sa.String(), nullable=True),
        sa.Column("action", _IMPORT_ACTION, nullable=False),
        sa.Column("confidence_score", sa.Integer(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("sources", JSONList(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["run_id"],
            ["import_run.id"],
            name=op.f("fk_import_run_item_run_id_import_run"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_import_run_item")),
    )
    op.create_index("ix_import_run_item_run_id", "import_run_item", ["run_id", "position"])


def downgrade() -> None:
    op.drop_index("ix_import_run_item_run_id", table_name="import_run_item")
    op.drop_table("import_run_item")
    op.drop_index("ix_import_run_created_at", table_name="import_run")
    op.drop_table("import_run")
    op.drop_table("catalog_entry")
