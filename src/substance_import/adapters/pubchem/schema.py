"""PUG REST response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PubChemBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CompoundProperties(PubChemBaseModel):
    cid: int = Field(alias="CID")
    title: str | None = Field(default=None, alias="Title")
    iupac_name: str | None = Field(default=None, alias="IUPACName")
    molecular_formula: str | None = Field(default=None, alias="MolecularFormula")
    molecular_weight: str | None = Field(default=None, alias="MolecularWeight")
    smiles: str | None = Field(default=None, alias="SMILES")
    inchi: str | None = Field(default=None, alias="InChI")
    inchi_key: str | None = Field(default=None, alias="InChIKey")

    @field_validator("molecular_weight", mode="before")
    @classmethod
    def _weight_as_text(cls, value: object) -> object:
        # Older responses send the weight as a number.
        if isinstance(value, int | float):
            return str(value)
        return value


class PropertyTable(PubChemBaseModel):
    properties: list[CompoundProperties] = Field(
        default_factory=list[CompoundProperties], alias="Properties"
    )


class PropertyResponse(PubChemBaseModel):
    table: PropertyTable = Field(alias="PropertyTable")


class InformationEntry(PubChemBaseModel):
    cid: int | None = Field(default=None, alias="CID")
    synonyms: list[str] = Field(default_factory=list[str], alias="Synonym")
    title: str | None = Field(default=None, alias="Title")
    description: str | None = Field(default=None, alias="Description")
    description_source: str | None = Field(default=None, alias="DescriptionSourceName")


class InformationList(PubChemBaseModel):
    information: list[InformationEntry] = Field(
        default_factory=list[InformationEntry], alias="Information"
    )


class InformationResponse(PubChemBaseModel):
    information_list: InformationList = Field(alias="InformationList")

    @property
    def entries(self) -> list[InformationEntry]:
        return self.information_list.information


class IdentifierList(PubChemBaseModel):
    cids: list[int] = Field(default_factory=list[int], alias="CID")


class IdentifierResponse(PubChemBaseModel):
    identifiers: IdentifierList = Field(alias="IdentifierList")
