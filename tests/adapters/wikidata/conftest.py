"""Shared fixtures for Wikidata adapter tests."""

from __future__ import annotations

import pytest

from substance_import.config.wikidata import WikidataConfig, get_wikidata_config
from tests.helpers.http import NO_BACKOFF
from tests.helpers.sparql import ENTITY, SparqlPayload, literal, sparql, uri


@pytest.fixture
def wikidata_config() -> WikidataConfig:
    return get_wikidata_config(retry=NO_BACKOFF)


@pytest.fixture
def psilocybin_entity() -> SparqlPayload:
    return sparql(
        {
            "item": uri(f"{ENTITY}Q334033"),
            "itemLabel": literal("Psilocybin", lang="en"),
            "itemDescription": literal("chemical compound", lang="en"),
            "cas": literal("520-52-5"),
            "inchiKey": literal("QVDSEJDULKLHCG-UHFFFAOYSA-N"),
            "smiles": literal("CN(C)CCC1=CNC2=C1C(=CC=C2)OP(=O)(O)O"),
            "pubchemCid": literal("10624"),
            "chembl": literal("CHEMBL194378"),
        }
    )


@pytest.fixture
def psilocybin_aliases() -> SparqlPayload:
    return sparql(
        {"alias": literal("Psilocybine", lang="de")},
        {"alias": literal("psilocybin", lang="en")},
        {"alias": literal("4-PO-DMT", lang="en")},
    )


@pytest.fixture
def psilocybin_classes() -> SparqlPayload:
    return sparql(
        {"classLabel": literal("tryptamine alkaloid", lang="en")},
        {"classLabel": literal("psychedelic drug", lang="en")},
    )
