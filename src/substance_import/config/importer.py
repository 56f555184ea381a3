"""Import pipeline defaults and limits."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, optional_env_var

MAX_BATCH_SIZE = 50
EXISTING_SLUG_PAGE_SIZE = 5000
DEFAULT_ITEM_CONCURRENCY = 5
DEFAULT_BATCH_TIMEOUT_SECONDS = 25.0

SEED_PAGE_SIZE = 500
SEED_PAGE_DELAY_SECONDS = 2.0
SEED_MAX_OVERFETCH = 15


@dataclass(frozen=True, slots=True)
class ImportSettings:
    max_batch_size: int = MAX_BATCH_SIZE
    existing_slug_page_size: int = EXISTING_SLUG_PAGE_SIZE
    item_concurrency: int = DEFAULT_ITEM_CONCURRENCY
    batch_timeout_seconds: float = DEFAULT_BATCH_TIMEOUT_SECONDS
    admin_token: str | None = None


@dataclass(frozen=True, slots=True)
class SeedSettings:
    page_size: int = SEED_PAGE_SIZE
    page_delay_seconds: float = SEED_PAGE_DELAY_SECONDS
    max_overfetch: int = SEED_MAX_OVERFETCH


def get_import_settings() -> ImportSettings:
    return ImportSettings(
        batch_timeout_seconds=env_float(
            "SUBSTANCE_IMPORT_BATCH_TIMEOUT_SECONDS", DEFAULT_BATCH_TIMEOUT_SECONDS
        ),
        admin_token=optional_env_var("SUBSTANCE_IMPORT_ADMIN_TOKEN"),
    )


def get_seed_settings() -> SeedSettings:
    return SeedSettings(
        page_delay_seconds=env_float("SUBSTANCE_IMPORT_SEED_DELAY_SECONDS", SEED_PAGE_DELAY_SECONDS)
    )
