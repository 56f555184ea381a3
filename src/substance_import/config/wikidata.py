"""Wikidata configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

WIKIDATA_SPARQL_URL = "https://query.wikidata.org/sparql"
WIKIDATA_ENTITY_PREFIX = "http://www.wikidata.org/entity/"
WIKIDATA_PAGE_URL = "https://www.wikidata.org/wiki/"
DEFAULT_WIKIDATA_USER_AGENT = "substance-import/1.0 (catalog reconciliation)"
WIKIDATA_TIMEOUT_SECONDS = 30.0
WIKIDATA_SEED_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class WikidataConfig:
    resilience: ResilienceConfig


def get_wikidata_config(
    *,
    timeout_seconds: float = WIKIDATA_TIMEOUT_SECONDS,
    retry: RetryPolicy | None = None,
) -> WikidataConfig:
    user_agent = optional_env_var("WIKIDATA_USER_AGENT") or DEFAULT_WIKIDATA_USER_AGENT
    resilience = ResilienceConfig(
        name="wikidata",
        base_url=WIKIDATA_SPARQL_URL,
        timeout_seconds=timeout_seconds,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        retry=retry or RetryPolicy(attempts=3, backoff_seconds=1.0),
        default_headers={
            "Accept": "application/sparql-results+json",
            "User-Agent": user_agent,
        },
    )
    return WikidataConfig(resilience=resilience)
