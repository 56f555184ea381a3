"""SPARQL query builders for the Wikidata adapter."""

from __future__ import annotations

from .client import escape_sparql_literal

CHEMICAL_COMPOUND = "Q11173"
DRUG = "Q8386"
PSYCHOACTIVE_DRUG = "Q207011"

MAX_ALIASES = 20
MAX_CLASS_LABELS = 10
LIST_SEPARATOR = "|"


def entity_query(qid: str) -> str:
    """Identity and chemistry facts for one item."""

    return f"""
SELECT ?item ?itemLabel ?itemDescription ?cas ?inchi ?inchiKey ?smiles ?pubchemCid ?chembl ?drugbank
WHERE {{
  VALUES ?item {{ wd:{qid} }}
  OPTIONAL {{ ?item wdt:P231 ?cas . }}
  OPTIONAL {{ ?item wdt:P234 ?inchi . }}
  OPTIONAL {{ ?item wdt:P235 ?inchiKey . }}
  OPTIONAL {{ ?item wdt:P233 ?smiles . }}
  OPTIONAL {{ ?item wdt:P662 ?pubchemCid . }}
  OPTIONAL {{ ?item wdt:P592 ?chembl . }}
  OPTIONAL {{ ?item wdt:P715 ?drugbank . }}
  SERVICE wikibase:label {{ bd:serviceParam wikibase:language "en,de" . }}
}}
LIMIT 1
""".strip()


def aliases_query(qid: str) -> str:
    """Alternate labels (en/de) for one item."""

    return f"""
SELECT ?alias WHERE {{
  wd:{qid} skos:altLabel ?alias .
  FILTER(LANG(?alias) IN ("en", "de"))
}}
LIMIT {MAX_ALIASES}
""".strip()


def class_labels_query(qid: str) -> str:
    """English labels of the classes the item is an instance of."""

    return f"""
SELECT ?classLabel WHERE {{
  wd:{qid} wdt:P31 ?class .
  ?class rdfs:label ?classLabel .
  FILTER(LANG(?classLabel) = "en")
}}
LIMIT {MAX_CLASS_LABELS}
""".strip()


def label_search_query(name: str) -> str:
    """Exact English label match restricted to chemical compounds."""

    literal = escape_sparql_literal(name)
    return f"""
SELECT ?item WHERE {{
  ?item rdfs:label "{literal}"@en .
  ?item wdt:P31/wdt:P279* wd:{CHEMICAL_COMPOUND} .
}}
LIMIT 1
""".strip()


def seed_page_query(*, limit: int, offset: int) -> str:
    """One row per drug or psychoactive item, labels grouped, ordered by label."""

    return f"""
SELECT ?item ?itemLabel (SAMPLE(?cid) AS ?pubchemCid)
  (GROUP_CONCAT(DISTINCT ?alias; separator="{LIST_SEPARATOR}") AS ?aliases)
  (GROUP_CONCAT(DISTINCT ?classLabel; separator="{LIST_SEPARATOR}") AS ?classLabels)
WHERE {{
  {{ ?item wdt:P31/wdt:P279* wd:{DRUG} . }} UNION {{ ?item wdt:P31 wd:{PSYCHOACTIVE_DRUG} . }}
  ?item rdfs:label ?itemLabel .
  FILTER(LANG(?itemLabel) = "en")
  OPTIONAL {{ ?item skos:altLabel ?alias . FILTER(LANG(?alias) IN ("en", "de")) }}
  OPTIONAL {{
    ?item wdt:P31 ?class .
    ?class rdfs:label ?classLabel .
    FILTER(LANG(?classLabel) = "en")
  }}
  OPTIONAL {{ ?item wdt:P662 ?cid . }}
}}
GROUP BY ?item ?itemLabel
ORDER BY ?itemLabel
LIMIT {limit}
OFFSET {offset}
""".strip()
