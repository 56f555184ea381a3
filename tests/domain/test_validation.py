from __future__ import annotations

from substance_import.domain.model import CandidateName, CatalogEntry
from substance_import.domain.reconciliation import merge
from substance_import.domain.validation import validate_catalog_records
from tests.helpers.sources import make_primary_fact


def _record(slug: str = "psilocybin", **overrides: object) -> dict[str, object]:
    entry = CatalogEntry.from_normalized(merge(CandidateName(name=slug), []))
    record = entry.as_record()
    record.update(overrides)
    return record


def test_exported_entries_are_valid() -> None:
    entry = CatalogEntry.from_normalized(
        merge(CandidateName(name="Psilocybin"), [make_primary_fact()])
    )

    assert validate_catalog_records([entry.as_record(), _record("mdma")]) == []


def test_validation_reports_field_problems() -> None:
    record = _record(
        name="  ",
        status="archived",
        aliases="not a list",
        confidence_score=140,
    )

    problems = validate_catalog_records([record])

    assert problems == [
        "record 0 (psilocybin): name must be a non-empty string",
        "record 0 (psilocybin): aliases must be an array",
        "record 0 (psilocybin): status 'archived' not in ['draft', 'published', 'review']",
        "record 0 (psilocybin): confidence_score must be an integer between 0 and 100",
    ]


def test_validation_reports_duplicate_slugs_and_ids() -> None:
    first = _record("mdma")
    second = _record("mdma", id=first["id"])

    problems = validate_catalog_records([first, second])

    assert f"duplicate id {first['id']!r} (2 records)" in problems
    assert "duplicate slug 'mdma' (2 records)" in problems


def test_validation_rejects_boolean_confidence() -> None:
    problems = validate_catalog_records([_record(confidence_score=True)])

    assert problems == [
        "record 0 (psilocybin): confidence_score must be an integer between 0 and 100"
    ]


def test_validation_reports_non_object_records() -> None:
    first = _record("mdma")

    problems = validate_catalog_records([first, "mdma", None, _record("mdma", id=first["id"])])

    assert problems[:2] == ["record 1: must be an object", "record 2: must be an object"]
    assert "duplicate slug 'mdma' (2 records)" in problems
    assert len(problems) == 4
