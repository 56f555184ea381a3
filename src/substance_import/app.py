"""Application orchestration entry points.

Preview, dry run and commit accept a raw request payload and always return an
envelope: pre-processing failures (store, authorization, malformed input, batch
size) become ``ok: false`` envelopes, everything else ``ok: true`` with per-item
results. The catalog store is resolved once by the caller and passed in.
"""

from __future__ import annotations

import asyncio
import hmac
import json
from contextlib import AsyncExitStack, asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from substance_import.adapters.pubchem import PubChemClient, PubChemSource
from substance_import.adapters.sqlalchemy import open_catalog_store
from substance_import.adapters.wikidata import WikidataClient, WikidataSeedPager, WikidataSource
from substance_import.config import (
    get_database_config,
    get_import_settings,
    get_pubchem_config,
    get_seed_settings,
    get_wikidata_config,
)
from substance_import.config.wikidata import WIKIDATA_SEED_TIMEOUT_SECONDS
from substance_import.domain.audit import BestEffortAuditTrail
from substance_import.domain.errors import (
    BatchTooSlowError,
    ImportRequestError,
    StoreUnavailableError,
    UnauthorizedError,
)
from substance_import.domain.reconciliation import (
    CommitEngine,
    CommitOptions,
    CommitResult,
    PreviewOptions,
    SourceSet,
    classify_previews,
    preview_batch,
)
from substance_import.domain.seeding import SeedPaging, generate_seed
from substance_import.domain.validation import validate_catalog_records
from substance_import.payloads import (
    failure_envelope,
    parse_import_request,
    request_id_from,
    success_envelope,
)

if TYPE_CHECKING:
    import uuid
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
    from pathlib import Path

    from substance_import.config import ImportSettings, SeedSettings
    from substance_import.domain.ports import CatalogStore, KnowledgeGraphPager
    from substance_import.domain.seeding import SeedCandidate

type Envelope = dict[str, object]

log = getLogger(__name__)


def open_configured_store() -> CatalogStore | None:
    """Resolve the catalog store from configuration; ``None`` when unavailable."""

    return open_catalog_store(database_uri=get_database_config().uri)


@asynccontextmanager
async def open_sources(*, skip_secondary: bool = False) -> AsyncIterator[SourceSet]:
    """Open the Wikidata and PubChem sources for the duration of one batch."""

    async with AsyncExitStack() as stack:
        primary = await stack.enter_async_context(
            WikidataSource(WikidataClient(config=get_wikidata_config()))
        )
        enrichment = None
        if not skip_secondary:
            enrichment = await stack.enter_async_context(
                PubChemSource(PubChemClient(config=get_pubchem_config()))
            )
        yield SourceSet(primary=primary, enrichment=enrichment)


def preview(
    payload: object,
    *,
    token: str | None = None,
    settings: ImportSettings | None = None,
    sources: SourceSet | None = None,
) -> Envelope:
    """Return the normalized merge for each candidate without touching the catalog."""

    settings = settings or get_import_settings()
    request_id = request_id_from(payload)
    try:
        _authorize(token, settings)
        request = parse_import_request(payload, max_batch_size=settings.max_batch_size)
        options = _preview_options(settings, skip_secondary=request.skip_secondary_source)
        items = _run_with_sources(
            sources,
            request.skip_secondary_source,
            lambda active: preview_batch(request.candidates(), active, options),
        )
    except ImportRequestError as exc:
        log.warning("Preview %s rejected: %s (%s)", request_id, exc.message, exc.code)
        return failure_envelope(exc, request_id)

    return success_envelope(request_id, [item.as_dict() for item in items])


def dry_run(
    payload: object,
    *,
    store: CatalogStore | None,
    token: str | None = None,
    settings: ImportSettings | None = None,
    sources: SourceSet | None = None,
) -> Envelope:
    """Classify each candidate as insert/update/skip against the current catalog."""

    settings = settings or get_import_settings()
    request_id = request_id_from(payload)
    try:
        store = _require_store(store)
        _authorize(token, settings)
        request = parse_import_request(payload, max_batch_size=settings.max_batch_size)
        options = _preview_options(settings, skip_secondary=request.skip_secondary_source)
        items = _run_with_sources(
            sources,
            request.skip_secondary_source,
            lambda active: preview_batch(request.candidates(), active, options),
        )
        existing = _existing_slugs(store, settings)
        result = classify_previews(
            items,
            existing,
            overwrite=request.overwrite,
            max_batch_size=settings.max_batch_size,
        )
    except ImportRequestError as exc:
        log.warning("Dry run %s rejected: %s (%s)", request_id, exc.message, exc.code)
        return failure_envelope(exc, request_id)

    return success_envelope(
        request_id,
        [item.as_dict() for item in result.items],
        summary=result.summary.as_dict(),
    )


def commit(
    payload: object,
    *,
    store: CatalogStore | None,
    token: str | None = None,
    settings: ImportSettings | None = None,
    sources: SourceSet | None = None,
    triggered_by: str = "cli",
) -> Envelope:
    """Apply the batch to the catalog and record it in the audit log."""

    settings = settings or get_import_settings()
    request_id = request_id_from(payload)
    try:
        store = _require_store(store)
        _authorize(token, settings)
        request = parse_import_request(payload, max_batch_size=settings.max_batch_size)
        options = CommitOptions(
            overwrite=request.overwrite,
            skip_secondary=request.skip_secondary_source,
            triggered_by=triggered_by,
            max_batch_size=settings.max_batch_size,
            concurrency=settings.item_concurrency,
        )
        audit = BestEffortAuditTrail(store.audit_unit_of_work)

        def run_commit(active: SourceSet) -> Awaitable[CommitResult]:
            engine = CommitEngine(
                sources=active,
                unit_of_work_factory=store.catalog_unit_of_work,
                audit=audit,
            )
            return engine.commit(request.candidates(), options)

        result = _run_with_sources(sources, request.skip_secondary_source, run_commit)
        if result.elapsed_seconds > settings.batch_timeout_seconds:
            raise BatchTooSlowError(
                result.elapsed_seconds, settings.batch_timeout_seconds, run_id=str(result.run_id)
            )
    except ImportRequestError as exc:
        log.warning("Commit %s rejected: %s (%s)", request_id, exc.message, exc.code)
        return failure_envelope(exc, request_id)

    return success_envelope(
        request_id,
        [item.as_dict() for item in result.results],
        summary=result.summary.as_dict(),
        run_id=str(result.run_id),
    )


def run_seed(
    *,
    limit: int,
    settings: SeedSettings | None = None,
    pager: KnowledgeGraphPager | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> list[SeedCandidate]:
    """Page through the knowledge graph and return deduplicated seed candidates."""

    settings = settings or get_seed_settings()
    paging = SeedPaging(
        page_size=settings.page_size,
        page_delay_seconds=settings.page_delay_seconds,
        max_overfetch=settings.max_overfetch,
    )
    log.info("Starting seed generation: limit=%s, page_size=%s", limit, paging.page_size)

    async def run() -> list[SeedCandidate]:
        if pager is not None:
            return await generate_seed(pager, limit=limit, paging=paging, sleep=sleep)
        config = get_wikidata_config(timeout_seconds=WIKIDATA_SEED_TIMEOUT_SECONDS)
        async with WikidataClient(config=config) as client:
            return await generate_seed(
                WikidataSeedPager(client), limit=limit, paging=paging, sleep=sleep
            )

    return asyncio.run(run())


def write_seed_file(candidates: Iterable[SeedCandidate], path: Path) -> int:
    records = [candidate.as_dict() for candidate in candidates]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(records, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    log.info("Wrote %s seed candidates to %s", len(records), path)
    return len(records)


def validate_catalog(
    records: Iterable[object] | None = None,
    *,
    store: CatalogStore | None = None,
) -> list[str]:
    """Validate exported records, or the live catalog when no records are given."""

    if records is None:
        store = _require_store(store)
        with store.catalog_unit_of_work() as uow:
            records = [entry.as_record() for entry in uow.repositories.catalog.list_all()]
    return validate_catalog_records(records)


def list_runs(store: CatalogStore, *, limit: int = 20) -> list[dict[str, object]]:
    with store.audit_unit_of_work() as uow:
        return [run.as_dict() for run in uow.repositories.runs.list_recent(limit=limit)]


def run_items(store: CatalogStore, run_id: uuid.UUID) -> list[dict[str, object]]:
    with store.audit_unit_of_work() as uow:
        return [item.as_dict() for item in uow.repositories.items.list_for_run(run_id)]


# Helpers ----------------------------------------------------------------------


def _authorize(token: str | None, settings: ImportSettings) -> None:
    expected = settings.admin_token
    if expected is None:
        return
    if token is None or not hmac.compare_digest(token.encode(), expected.encode()):
        raise UnauthorizedError("A valid admin token is required")


def _require_store(store: CatalogStore | None) -> CatalogStore:
    if store is None:
        raise StoreUnavailableError(
            "Catalog store is not configured or unreachable",
            detail="Set DATABASE_URI to a reachable database.",
        )
    return store


def _preview_options(settings: ImportSettings, *, skip_secondary: bool) -> PreviewOptions:
    return PreviewOptions(
        skip_secondary=skip_secondary,
        max_batch_size=settings.max_batch_size,
        concurrency=settings.item_concurrency,
    )


def _existing_slugs(store: CatalogStore, settings: ImportSettings) -> set[str]:
    try:
        with store.catalog_unit_of_work() as uow:
            return uow.repositories.catalog.existing_slugs(
                limit=settings.existing_slug_page_size
            )
    except SQLAlchemyError as exc:
        raise StoreUnavailableError("Could not read existing catalog slugs") from exc


def _run_with_sources[T](
    sources: SourceSet | None,
    skip_secondary: bool,
    func: Callable[[SourceSet], Awaitable[T]],
) -> T:
    async def run() -> T:
        if sources is not None:
            return await func(sources)
        async with open_sources(skip_secondary=skip_secondary) as opened:
            return await func(opened)

    return asyncio.run(run())
