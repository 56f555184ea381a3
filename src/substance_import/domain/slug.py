"""Slug normalisation for catalog identity keys."""

from __future__ import annotations

import re
import unicodedata

_PARENTHETICAL = re.compile(r"\s*\(.*?\)\s*")
_SEPARATORS = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")

_DIGRAPHS = {
    "ä": "ae",
    "ö": "oe",
    "ü": "ue",
    "ß": "ss",
    "α": "alpha",
}


def _fold_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def slugify(title: str) -> str:
    """Return a URL-safe slug for ``title``.

    The result only contains ``[a-z0-9-]`` and is idempotent. Symbol-only input
    yields ``""``; callers must reject empty slugs before using them as keys.
    """

    value = title.strip().lower()
    value = _PARENTHETICAL.sub(" ", value)
    for source, replacement in _DIGRAPHS.items():
        value = value.replace(source, replacement)
    value = _fold_diacritics(value)
    value = _SEPARATORS.sub("-", value.strip())
    value = _DISALLOWED.sub("", value)
    value = _HYPHEN_RUNS.sub("-", value)
    return value.strip("-")
