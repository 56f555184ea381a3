"""Best-effort audit side task."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from substance_import.domain.model import ImportRun, ImportRunItem


class AuditTrail(Protocol):
    """Append-only audit writer whose failures are unobservable to the caller.

    Every method returns ``None`` and must never raise; an implementation that
    cannot write logs the problem and carries on.
    """

    def open_run(self, run: ImportRun) -> None: ...

    def record_item(self, item: ImportRunItem) -> None: ...

    def finish_run(self, run: ImportRun) -> None: ...


__all__ = ["AuditTrail"]
