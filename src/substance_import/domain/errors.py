"""Error taxonomy for import requests and catalog persistence."""

from __future__ import annotations


class ImportRequestError(RuntimeError):
    """Raised before any item is processed; mapped to a failure envelope."""

    code = "import_error"
    retryable = False

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class StoreUnavailableError(ImportRequestError):
    code = "store_unavailable"


class UnauthorizedError(ImportRequestError):
    code = "unauthorized"


class MalformedRequestError(ImportRequestError):
    code = "invalid_request"


class EmptyBatchError(MalformedRequestError):
    code = "empty_batch"


class BatchTooLargeError(MalformedRequestError):
    code = "batch_too_large"

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"Batch of {size} items exceeds the limit of {limit}",
            detail=f"Split the import into batches of at most {limit} items.",
        )
        self.size = size
        self.limit = limit


class BatchTooSlowError(ImportRequestError):
    """The batch finished after the latency budget; committed work stays committed."""

    code = "batch_too_slow"
    retryable = True

    def __init__(
        self, elapsed_seconds: float, budget_seconds: float, *, run_id: str | None = None
    ) -> None:
        detail = "Items processed before the budget ran out remain committed."
        if run_id is not None:
            detail = f"{detail} See import run {run_id}."
        super().__init__(
            f"Batch took {elapsed_seconds:.1f}s (budget {budget_seconds:.1f}s); reduce batch size",
            detail=detail,
        )
        self.elapsed_seconds = elapsed_seconds
        self.budget_seconds = budget_seconds
        self.run_id = run_id


class CatalogPersistenceError(RuntimeError):
    """Raised by catalog repositories for store-level write failures."""


class DuplicateSlugError(CatalogPersistenceError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Catalog already contains an entry with slug {slug!r}")
        self.slug = slug


class EmptySlugError(ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Name {name!r} does not produce a usable slug")
        self.name = name


class SourceResolutionError(RuntimeError):
    """Every queried source raised for one candidate."""
