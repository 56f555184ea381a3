"""Keyword-based tag inference from class labels and descriptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

TAG_KEYWORDS: Final[dict[str, tuple[str, ...]]] = {
    "stimulant": ("stimulant", "stimulans", "amphetamine", "amphetamin"),
    "opioid": ("opioid", "opiate", "opiat"),
    "benzodiazepine": ("benzodiazepine", "benzodiazepin"),
    "psychedelic": (
        "psychedelic",
        "psychedelik",
        "hallucinogen",
        "halluzinogen",
        "tryptamine",
        "tryptamin",
        "lysergamide",
    ),
    "dissociative": ("dissociative", "dissociativ", "arylcyclohexylamine"),
    "cannabinoid": ("cannabinoid",),
    "depressant": ("depressant", "sedative", "sedativum", "barbiturate", "barbiturat"),
    "deliriant": ("deliriant", "anticholinergic", "anticholinergikum"),
    "nps": ("new psychoactive", "neue psychoaktive", "designer drug", "research chemical"),
}


def infer_tags(labels: Iterable[str]) -> tuple[str, ...]:
    """Return tags whose keywords appear in any label, in table order."""

    combined = " ".join(labels).lower()
    if not combined:
        return ()
    return tuple(
        tag
        for tag, keywords in TAG_KEYWORDS.items()
        if any(keyword in combined for keyword in keywords)
    )


def dedupe_casefold(values: Iterable[str], *, exclude: Iterable[str] = ()) -> list[str]:
    """Drop blanks and case-insensitive duplicates, keeping first spelling and order."""

    seen = {value.casefold() for value in exclude}
    result: list[str] = []
    for raw in values:
        value = raw.strip()
        key = value.casefold()
        if not value or key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result
