"""Audit trail implementation that never lets a write failure escape."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from substance_import.domain.model import ImportRun, ImportRunItem
    from substance_import.domain.ports import AuditUnitOfWork

log = logging.getLogger(__name__)


class BestEffortAuditTrail:
    """Write audit rows through short-lived units of work, logging and dropping failures."""

    def __init__(self, unit_of_work_factory: Callable[[], AuditUnitOfWork]) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def open_run(self, run: ImportRun) -> None:
        try:
            with self._unit_of_work_factory() as uow:
                uow.repositories.runs.add(run)
                uow.commit()
        except Exception:
            log.exception("Could not record start of import run %s", run.id)

    def record_item(self, item: ImportRunItem) -> None:
        try:
            with self._unit_of_work_factory() as uow:
                uow.repositories.items.add(item)
                uow.commit()
        except Exception:
            log.exception(
                "Could not record audit item %s for import run %s", item.position, item.run_id
            )

    def finish_run(self, run: ImportRun) -> None:
        try:
            with self._unit_of_work_factory() as uow:
                stored = uow.repositories.runs.get(run.id)
                if stored is None:
                    uow.repositories.runs.add(run)
                    stored = run
                stored.finish(
                    inserted=run.inserted_count,
                    updated=run.updated_count,
                    skipped=run.skipped_count,
                    failed=run.failed_count,
                )
                uow.commit()
        except Exception:
            log.exception("Could not finalise import run %s", run.id)
