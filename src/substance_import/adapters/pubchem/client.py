"""PubChem PUG REST client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from substance_import.adapters.http_resilience import ResilientClient

from .schema import CompoundProperties, IdentifierResponse, InformationResponse, PropertyResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from substance_import.config.http_resilience import ResilienceConfig
    from substance_import.config.pubchem import PubChemConfig

log = getLogger(__name__)

COMPOUND_PROPERTIES = (
    "Title",
    "IUPACName",
    "MolecularFormula",
    "MolecularWeight",
    "SMILES",
    "InChI",
    "InChIKey",
)


class PubChemAPIError(RuntimeError):
    """Raised when PubChem fails or returns an unexpected payload."""


class PubChemClient:
    """Low-level HTTP client for PUG REST. Not-found responses come back as ``None``."""

    def __init__(
        self,
        *,
        config: PubChemConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> PubChemClient:
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

    async def fetch_properties(self, cid: int) -> CompoundProperties | None:
        path = f"compound/cid/{cid}/property/{','.join(COMPOUND_PROPERTIES)}/JSON"
        response = await self._get_model(path, PropertyResponse)
        if response is None or not response.table.properties:
            return None
        return response.table.properties[0]

    async def fetch_synonyms(self, cid: int) -> list[str]:
        response = await self._get_model(f"compound/cid/{cid}/synonyms/JSON", InformationResponse)
        if response is None:
            return []
        return [synonym for entry in response.entries for synonym in entry.synonyms]

    async def fetch_description(self, cid: int) -> str | None:
        response = await self._get_model(
            f"compound/cid/{cid}/description/JSON", InformationResponse
        )
        if response is None:
            return None
        return next(
            (entry.description.strip() for entry in response.entries if entry.description),
            None,
        )

    async def search_cids(self, name: str) -> list[int]:
        path = f"compound/name/{quote(name, safe='')}/cids/JSON"
        response = await self._get_model(path, IdentifierResponse)
        return [] if response is None else response.identifiers.cids

    async def _get_model[TModel: BaseModel](
        self,
        path: str,
        model: type[TModel],
    ) -> TModel | None:
        if self._client is not None:
            return await self._perform_request(self._client, path, model)
        async with self._client_factory(self._resilience) as client:
            return await self._perform_request(client, path, model)

    async def _perform_request[TModel: BaseModel](
        self,
        client: ResilientClient,
        path: str,
        model: type[TModel],
    ) -> TModel | None:
        base_url = self._resilience.base_url
        if base_url is None:
            raise PubChemAPIError("Missing PubChem base_url in resilience configuration")
        url = f"{base_url.rstrip('/')}/{path}"
        try:
            response = await client.get(url)
            if response.status_code == httpx.codes.NOT_FOUND:
                log.debug("PubChem has no record for %s", path)
                return None
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise PubChemAPIError(f"PubChem request failed: {exc}") from exc
        except ValueError as exc:
            raise PubChemAPIError("PubChem returned a non-JSON payload") from exc

        if not isinstance(payload, dict):
            raise PubChemAPIError("Unexpected PubChem response payload")
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise PubChemAPIError(f"Malformed PubChem response: {exc}") from exc
