"""Pre-publish validation of exported catalog records."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import TYPE_CHECKING, Final

from .model import CatalogStatus, VerificationStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

REQUIRED_STRING_FIELDS: Final = ("id", "slug", "name", "status", "verification_status")
ARRAY_FIELDS: Final = ("aliases", "tags", "categories", "sources")
ENUM_FIELDS: Final[dict[str, frozenset[str]]] = {
    "status": frozenset(str(value) for value in CatalogStatus),
    "verification_status": frozenset(str(value) for value in VerificationStatus),
}
UNIQUE_FIELDS: Final = ("id", "slug")


def validate_catalog_records(records: Iterable[object]) -> list[str]:
    """Return one message per violation; an empty list means the catalog is valid.

    Records that are not JSON objects are reported and left out of the uniqueness checks.
    """

    violations: list[str] = []
    materialised: list[Mapping[str, object]] = []
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            violations.append(f"record {position}: must be an object")
            continue
        materialised.append(record)
        label = _record_label(position, record)
        violations.extend(f"{label}: {problem}" for problem in _record_problems(record))

    for field_name in UNIQUE_FIELDS:
        counts = Counter(
            value
            for record in materialised
            if isinstance(value := record.get(field_name), str) and value
        )
        violations.extend(
            f"duplicate {field_name} {value!r} ({count} records)"
            for value, count in counts.items()
            if count > 1
        )
    return violations


def _record_problems(record: Mapping[str, object]) -> list[str]:
    problems: list[str] = []
    for field_name in REQUIRED_STRING_FIELDS:
        value = record.get(field_name)
        if not isinstance(value, str) or not value.strip():
            problems.append(f"{field_name} must be a non-empty string")
    for field_name in ARRAY_FIELDS:
        if not isinstance(record.get(field_name), list):
            problems.append(f"{field_name} must be an array")
    for field_name, allowed in ENUM_FIELDS.items():
        value = record.get(field_name)
        if isinstance(value, str) and value and value not in allowed:
            problems.append(f"{field_name} {value!r} not in {sorted(allowed)}")
    score = record.get("confidence_score")
    if score is not None and (
        isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 100
    ):
        problems.append("confidence_score must be an integer between 0 and 100")
    return problems


def _record_label(position: int, record: Mapping[str, object]) -> str:
    slug = record.get("slug")
    if isinstance(slug, str) and slug:
        return f"record {position} ({slug})"
    return f"record {position}"
