"""
Search Domain - Live search over marketplace listings.

This domain handles:
- Facet filtering (stock level, brand, country) and catalog page filters
- Part-number, model, description and fuzzy full-text matching
- Part-number precedence ranking with a display cap
- Query highlighting for result lists
"""

from .contracts import Matcher, SearchEngine
from .engine import CatalogSearchEngine
from .facets import apply_catalog_filter, apply_facets
from .highlight import highlight
from .matcher import FuzzyScorer, TextMatcher, normalize_identifier
from .models import (
    MAX_RESULTS,
    CatalogFilter,
    SaleStatus,
    SearchMode,
    SearchQuery,
    SearchResult,
    StockFilter,
)
from .ranker import rank_results

__all__ = [
    "SearchEngine",
    "Matcher",
    "CatalogSearchEngine",
    "TextMatcher",
    "FuzzyScorer",
    "SearchQuery",
    "SearchResult",
    "SearchMode",
    "StockFilter",
    "SaleStatus",
    "CatalogFilter",
    "MAX_RESULTS",
    "apply_facets",
    "apply_catalog_filter",
    "rank_results",
    "highlight",
    "normalize_identifier",
]
