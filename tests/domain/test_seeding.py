from __future__ import annotations

import asyncio

from substance_import.domain.ports import SeedRow
from substance_import.domain.seeding import (
    SeedPaging,
    generate_seed,
    request_size,
    seed_candidate,
)


class FakePager:
    """Serves rows from a fixed list, honouring limit and offset."""

    def __init__(self, rows: list[SeedRow]) -> None:
        self._rows = rows
        self.calls: list[tuple[int, int]] = []

    async def fetch_page(self, *, limit: int, offset: int) -> list[SeedRow]:
        self.calls.append((limit, offset))
        return self._rows[offset : offset + limit]


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _row(label: str, qid: str = "Q1", **kwargs: object) -> SeedRow:
    return SeedRow(qid=qid, label=label, **kwargs)  # type: ignore[arg-type]


def test_seed_candidate_skips_unlabelled_items() -> None:
    assert seed_candidate(_row("Q12345")) is None
    assert seed_candidate(_row("???")) is None


def test_seed_candidate_builds_tags_and_aliases() -> None:
    candidate = seed_candidate(
        _row(
            "Ketamine",
            qid="Q243547",
            aliases=("Ketamin", "ketamine", "Ketalar"),
            class_labels=("arylcyclohexylamine", "dissociative anesthetic"),
            pubchem_cid=3821,
        )
    )

    assert candidate is not None
    assert candidate.slug == "ketamine"
    assert candidate.aliases == ("Ketamin", "Ketalar")
    assert candidate.tags == ("dissociative",)
    assert candidate.as_dict()["pubchem_cid"] == 3821


def test_request_size_overfetches_within_bounds() -> None:
    paging = SeedPaging(page_size=500, max_overfetch=15)

    assert request_size(10, paging) == 15
    assert request_size(100, paging) == 115
    assert request_size(1000, paging) == 500
    assert request_size(1, paging) == 2


def test_generate_seed_stops_at_limit_and_dedupes_slugs() -> None:
    rows = [
        _row("Psilocybin", qid="Q1"),
        _row("psilocybin", qid="Q2"),
        _row("Q3", qid="Q3"),
        _row("MDMA", qid="Q4"),
        _row("Ketamine", qid="Q5"),
    ]
    pager = FakePager(rows)
    sleep = RecordingSleep()

    candidates = asyncio.run(
        generate_seed(pager, limit=3, paging=SeedPaging(page_size=2), sleep=sleep)
    )

    assert [candidate.slug for candidate in candidates] == ["psilocybin", "mdma", "ketamine"]
    assert pager.calls == [(2, 0), (2, 2), (2, 4)]
    assert sleep.delays == [2.0, 2.0]


def test_generate_seed_stops_on_short_page() -> None:
    pager = FakePager([_row("Psilocybin"), _row("MDMA")])

    candidates = asyncio.run(
        generate_seed(pager, limit=50, paging=SeedPaging(page_size=10), sleep=RecordingSleep())
    )

    assert len(candidates) == 2
    assert pager.calls == [(10, 0)]


def test_generate_seed_with_non_positive_limit_does_nothing() -> None:
    pager = FakePager([_row("Psilocybin")])

    assert asyncio.run(generate_seed(pager, limit=0)) == []
    assert pager.calls == []
