"""PubChem configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

PUBCHEM_BASE_URL = "https://pubchem.ncbi.nlm.nih.gov/rest/pug"
PUBCHEM_COMPOUND_URL = "https://pubchem.ncbi.nlm.nih.gov/compound/"
PUBCHEM_TIMEOUT_SECONDS = 15.0
# PubChem asks clients to stay below five requests per second.
DEFAULT_PUBCHEM_RATE_LIMIT = 3.0


@dataclass(frozen=True, slots=True)
class PubChemConfig:
    resilience: ResilienceConfig


def get_pubchem_config(*, retry: RetryPolicy | None = None) -> PubChemConfig:
    per_second = env_float("PUBCHEM_RATE_LIMIT_PER_SECOND", DEFAULT_PUBCHEM_RATE_LIMIT)
    resilience = ResilienceConfig(
        name="pubchem",
        base_url=PUBCHEM_BASE_URL,
        timeout_seconds=PUBCHEM_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=max(1, int(per_second)), per_seconds=1.0),
        retry=retry or RetryPolicy(attempts=3, backoff_seconds=1.0),
    )
    return PubChemConfig(resilience=resilience)
