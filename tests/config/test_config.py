from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from substance_import.config import (
    ConfigurationError,
    StorageConfig,
    env_float,
    get_database_config,
    get_import_settings,
    get_pubchem_config,
    get_seed_settings,
    get_wikidata_config,
    optional_env_var,
)
from substance_import.config.importer import DEFAULT_BATCH_TIMEOUT_SECONDS, MAX_BATCH_SIZE
from substance_import.config.logging import resolve_log_level

if TYPE_CHECKING:
    from pathlib import Path


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")
    assert optional_env_var("EXAMPLE_VAR") is None

    monkeypatch.setenv("EXAMPLE_VAR", " value ")
    assert optional_env_var("EXAMPLE_VAR") == "value"


def test_env_float_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_FLOAT", raising=False)

    assert env_float("EXAMPLE_FLOAT", 2.5) == 2.5


def test_env_float_rejects_non_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLOAT", "fast")

    with pytest.raises(ConfigurationError) as exc:
        env_float("EXAMPLE_FLOAT", 1.0)

    assert "EXAMPLE_FLOAT" in str(exc.value)


def test_import_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SUBSTANCE_IMPORT_ADMIN_TOKEN", raising=False)
    monkeypatch.delenv("SUBSTANCE_IMPORT_BATCH_TIMEOUT_SECONDS", raising=False)

    settings = get_import_settings()

    assert settings.max_batch_size == MAX_BATCH_SIZE == 50
    assert settings.batch_timeout_seconds == DEFAULT_BATCH_TIMEOUT_SECONDS
    assert settings.admin_token is None


def test_import_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUBSTANCE_IMPORT_ADMIN_TOKEN", "s3cret")
    monkeypatch.setenv("SUBSTANCE_IMPORT_BATCH_TIMEOUT_SECONDS", "40")

    settings = get_import_settings()

    assert settings.admin_token == "s3cret"
    assert settings.batch_timeout_seconds == 40.0


def test_seed_delay_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUBSTANCE_IMPORT_SEED_DELAY_SECONDS", "0")

    assert get_seed_settings().page_delay_seconds == 0.0


def test_database_uri_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://catalog@db/catalog")

    assert get_database_config().uri == "postgresql+psycopg://catalog@db/catalog"


def test_database_uri_defaults_to_sqlite_in_data_dir(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)

    config = get_database_config(storage=StorageConfig(data_dir=tmp_path / "data"))

    assert config.uri == f"sqlite+pysqlite:///{(tmp_path / 'data').resolve()}/substance_import.db"
    assert (tmp_path / "data").is_dir()


def test_source_configs_use_public_endpoints() -> None:
    wikidata = get_wikidata_config()
    pubchem = get_pubchem_config()

    assert wikidata.resilience.base_url == "https://query.wikidata.org/sparql"
    assert pubchem.resilience.base_url == "https://pubchem.ncbi.nlm.nih.gov/rest/pug"
    assert wikidata.resilience.retry.attempts == 3
    assert pubchem.resilience.ratelimit is not None


def test_log_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUBSTANCE_IMPORT_LOG_LEVEL", "debug")

    assert resolve_log_level() == logging.DEBUG


def test_unknown_log_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUBSTANCE_IMPORT_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigurationError):
        resolve_log_level()
