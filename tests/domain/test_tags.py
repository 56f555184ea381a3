from __future__ import annotations

from substance_import.domain.tags import dedupe_casefold, infer_tags


def test_infer_tags_matches_english_and_german_keywords() -> None:
    tags = infer_tags(["tryptamine alkaloid", "Halluzinogen", "Opioid-Analgetikum"])

    assert tags == ("opioid", "psychedelic")


def test_infer_tags_returns_empty_tuple_for_no_labels() -> None:
    assert infer_tags([]) == ()
    assert infer_tags(["chemical compound"]) == ()


def test_dedupe_casefold_keeps_first_spelling_and_order() -> None:
    values = ["Ecstasy", " ecstasy ", "", "Molly", "MDMA", "molly"]

    assert dedupe_casefold(values, exclude=["mdma"]) == ["Ecstasy", "Molly"]
