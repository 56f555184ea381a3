from __future__ import annotations

import pytest

from substance_import.domain.slug import slugify


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Psilocybin", "psilocybin"),
        ("  MDMA (Ecstasy)  ", "mdma"),
        ("Lysergsäurediethylamid", "lysergsaeurediethylamid"),
        ("Größe", "groesse"),
        ("α-PVP", "alpha-pvp"),
        ("Café  au_lait", "cafe-au-lait"),
        ("2C-B", "2c-b"),
        ("3,4-Methylenedioxymethamphetamine", "34-methylenedioxymethamphetamine"),
        ("--a--b--", "a-b"),
    ],
)
def test_slugify_normalises_titles(title: str, expected: str) -> None:
    assert slugify(title) == expected


@pytest.mark.parametrize("title", ["!!!", "   ", "(only a note)", "ツ"])
def test_slugify_returns_empty_for_symbol_only_input(title: str) -> None:
    assert slugify(title) == ""


@pytest.mark.parametrize(
    "title",
    ["Psilocybin", "MDMA (Ecstasy)", "Lysergsäurediethylamid", "α-PVP", "N,N-DMT", "Ketamin"],
)
def test_slugify_is_idempotent(title: str) -> None:
    once = slugify(title)

    assert slugify(once) == once
    assert set(once) <= set("abcdefghijklmnopqrstuvwxyz0123456789-")
