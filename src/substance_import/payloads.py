"""Request payload validation and response envelopes."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from substance_import.domain.errors import MalformedRequestError
from substance_import.domain.model import CandidateName
from substance_import.domain.reconciliation import ensure_batch_size

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from substance_import.domain.errors import ImportRequestError


class RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


class CandidatePayload(RequestModel):
    name: str = Field(min_length=1)
    wikidata_qid: str | None = None
    pubchem_cid: int | None = None
    tags: list[str] = Field(default_factory=list[str])
    category: str | None = None

    @field_validator("wikidata_qid", "category", mode="before")
    @classmethod
    def _blank_as_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_candidate(self) -> CandidateName:
        return CandidateName(
            name=self.name,
            wikidata_qid=self.wikidata_qid,
            pubchem_cid=self.pubchem_cid,
            tags=tuple(tag.strip() for tag in self.tags if tag.strip()),
            category=self.category,
        )


class ImportRequest(RequestModel):
    items: list[CandidatePayload]
    overwrite: bool = False
    skip_secondary_source: bool = False
    request_id: str | None = None

    def candidates(self) -> list[CandidateName]:
        return [item.to_candidate() for item in self.items]


def parse_import_request(payload: object, *, max_batch_size: int) -> ImportRequest:
    """Validate a raw request; a bare list is treated as the ``items`` list.

    Batch size is checked before item contents so an oversized batch is always
    reported as such.
    """

    document: object = {"items": payload} if isinstance(payload, list) else payload
    if not isinstance(document, dict):
        raise MalformedRequestError("Request body must be a JSON object or array")
    items = cast(dict[str, Any], document).get("items")
    if not isinstance(items, list):
        raise MalformedRequestError("Request body must contain an 'items' array")
    ensure_batch_size(len(cast(list[Any], items)), max_batch_size=max_batch_size)

    try:
        return ImportRequest.model_validate(document)
    except ValidationError as exc:
        raise MalformedRequestError("Invalid import request", detail=_describe(exc)) from exc


def request_id_from(payload: object) -> str:
    if isinstance(payload, dict):
        document = cast(dict[str, Any], payload)
        for key in ("requestId", "request_id"):
            value = document.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return uuid.uuid4().hex


def failure_envelope(error: ImportRequestError, request_id: str) -> dict[str, object]:
    return {
        "ok": False,
        "code": error.code,
        "message": error.message,
        "detail": error.detail,
        "retryable": error.retryable,
        "context": {"request_id": request_id},
        "results": [],
    }


def success_envelope(
    request_id: str,
    results: Sequence[Mapping[str, object]],
    **extra: object,
) -> dict[str, object]:
    envelope: dict[str, object] = {
        "ok": True,
        "context": {"request_id": request_id},
        "results": list(results),
    }
    envelope.update(extra)
    return envelope


def _describe(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
