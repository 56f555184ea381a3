"""SPARQL JSON result schemas for the Wikidata query service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SparqlValue(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: str
    value: str
    lang: str | None = Field(default=None, alias="xml:lang")
    datatype: str | None = None


type SparqlBinding = dict[str, SparqlValue]


class SparqlResults(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bindings: list[SparqlBinding] = Field(default_factory=list[SparqlBinding])


class SparqlHead(BaseModel):
    model_config = ConfigDict(extra="ignore")

    vars: list[str] = Field(default_factory=list[str])


class SparqlResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    head: SparqlHead = Field(default_factory=SparqlHead)
    results: SparqlResults = Field(default_factory=SparqlResults)

    @property
    def bindings(self) -> list[SparqlBinding]:
        return self.results.bindings


def binding_value(binding: SparqlBinding, name: str) -> str | None:
    """Return the stripped value of ``name`` or ``None`` when absent or blank."""

    entry = binding.get(name)
    if entry is None:
        return None
    value = entry.value.strip()
    return value or None
