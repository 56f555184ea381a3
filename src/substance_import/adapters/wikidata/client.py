"""Wikidata SPARQL query client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from substance_import.adapters.http_resilience import ResilientClient

from .schema import SparqlResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from substance_import.config.http_resilience import ResilienceConfig
    from substance_import.config.wikidata import WikidataConfig

log = getLogger(__name__)

_SPARQL_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class WikidataAPIError(RuntimeError):
    """Raised when the Wikidata query service fails or returns an unexpected payload."""


def escape_sparql_literal(value: str) -> str:
    """Escape ``value`` for use inside a double-quoted SPARQL string literal."""

    return "".join(_SPARQL_ESCAPES.get(char, char) for char in value)


class WikidataClient:
    """Runs SPARQL queries against the Wikidata query service.

    Used as an async context manager the client keeps one HTTP connection pool
    (and rate limiter) for its lifetime; otherwise each query opens its own.
    """

    def __init__(
        self,
        *,
        config: WikidataConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> WikidataClient:
        self._client = self._client_factory(self._resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def query(self, sparql: str) -> SparqlResponse:
        if self._client is not None:
            return await self._perform_query(self._client, sparql)
        async with self._client_factory(self._resilience) as client:
            return await self._perform_query(client, sparql)

    async def _perform_query(self, client: ResilientClient, sparql: str) -> SparqlResponse:
        url = self._resilience.base_url
        if url is None:
            raise WikidataAPIError("Missing Wikidata endpoint in resilience configuration")
        try:
            response = await client.get(url, params={"query": sparql, "format": "json"})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise WikidataAPIError(f"Wikidata query failed: {exc}") from exc
        except ValueError as exc:
            raise WikidataAPIError("Wikidata returned a non-JSON payload") from exc

        if not isinstance(payload, dict):
            raise WikidataAPIError("Unexpected Wikidata response payload")
        try:
            return SparqlResponse.model_validate(payload)
        except ValidationError as exc:
            raise WikidataAPIError(f"Malformed Wikidata response: {exc}") from exc
