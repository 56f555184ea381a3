from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from substance_import.domain.audit import BestEffortAuditTrail
from substance_import.domain.model import ImportAction, ImportRun, ImportRunItem, RunStatus
from tests.helpers.catalog import BrokenUnitOfWork

if TYPE_CHECKING:
    from substance_import.adapters.sqlalchemy import SqlAlchemyCatalogStore


def test_best_effort_trail_persists_runs_and_items(catalog_store: SqlAlchemyCatalogStore) -> None:
    trail = BestEffortAuditTrail(catalog_store.audit_unit_of_work)
    run = ImportRun(triggered_by="test", total_items=2, adapters=["wikidata"])

    trail.open_run(run)
    for position, action in enumerate((ImportAction.INSERTED, ImportAction.FAILED)):
        trail.record_item(
            ImportRunItem(
                run_id=run.id,
                position=position,
                substance_name=f"Item {position}",
                action=action,
                error_message="boom" if action is ImportAction.FAILED else None,
            )
        )
    run.finish(inserted=1, updated=0, skipped=0, failed=1)
    trail.finish_run(run)

    with catalog_store.audit_unit_of_work() as uow:
        stored = uow.repositories.runs.get(run.id)
        items = uow.repositories.items.list_for_run(run.id)

    assert stored is not None
    assert stored.status is RunStatus.DONE
    assert stored.failed_count == 1
    assert stored.total_items == len(items) == 2
    assert [item.action for item in items] == [ImportAction.INSERTED, ImportAction.FAILED]


def test_best_effort_trail_adds_run_when_open_was_lost(
    catalog_store: SqlAlchemyCatalogStore,
) -> None:
    trail = BestEffortAuditTrail(catalog_store.audit_unit_of_work)
    run = ImportRun(triggered_by="test", total_items=0)
    run.finish(inserted=0, updated=0, skipped=0, failed=0)

    trail.finish_run(run)

    with catalog_store.audit_unit_of_work() as uow:
        assert uow.repositories.runs.get(run.id) is not None


def test_best_effort_trail_swallows_store_failures(caplog: pytest.LogCaptureFixture) -> None:
    trail = BestEffortAuditTrail(BrokenUnitOfWork)
    run = ImportRun(triggered_by="test", total_items=1)

    trail.open_run(run)
    trail.record_item(
        ImportRunItem(run_id=run.id, position=0, substance_name="x", action=ImportAction.SKIPPED)
    )
    trail.finish_run(run)

    assert [record.levelname for record in caplog.records] == ["ERROR", "ERROR", "ERROR"]
    assert "Could not finalise import run" in caplog.text
