"""Public interface for the PubChem adapter."""

from __future__ import annotations

from .client import PubChemAPIError, PubChemClient
from .schema import CompoundProperties
from .source import PubChemSource
from .translator import translate_compound

__all__ = [
    "CompoundProperties",
    "PubChemAPIError",
    "PubChemClient",
    "PubChemSource",
    "translate_compound",
]
