"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, optional_env_var
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .importer import ImportSettings, SeedSettings, get_import_settings, get_seed_settings
from .logging import configure_logging
from .pubchem import PubChemConfig, get_pubchem_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .wikidata import WikidataConfig, get_wikidata_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ImportSettings",
    "PubChemConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SeedSettings",
    "StorageConfig",
    "WikidataConfig",
    "configure_logging",
    "env_float",
    "get_database_config",
    "get_import_settings",
    "get_pubchem_config",
    "get_seed_settings",
    "get_storage_config",
    "get_wikidata_config",
    "optional_env_var",
]
