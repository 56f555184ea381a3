"""Public interface for the Wikidata adapter."""

from __future__ import annotations

from .client import WikidataAPIError, WikidataClient, escape_sparql_literal
from .pager import WikidataSeedPager
from .schema import SparqlResponse
from .source import WikidataSource

__all__ = [
    "SparqlResponse",
    "WikidataAPIError",
    "WikidataClient",
    "WikidataSeedPager",
    "WikidataSource",
    "escape_sparql_literal",
]
