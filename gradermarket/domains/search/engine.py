"""
Catalog Search Engine - Live search over an in-memory catalog snapshot.

Pipeline:
- Facet filter (stock level, brand, country)
- Mode-specific text matching
- Part-number precedence ranking, deduplication, display cap
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gradermarket.domains.catalog import Equipment, Part

from .facets import apply_facets
from .matcher import FuzzyScorer, TextMatcher
from .models import MAX_RESULTS, SearchMode, SearchQuery, SearchResult
from .ranker import rank_results

logger = logging.getLogger(__name__)

__all__ = ["CatalogSearchEngine"]


class CatalogSearchEngine:
    """
    Search-as-you-type engine.

    The catalog is read-only input supplied on every call; nothing is cached
    between queries.

    Example:
        >>> engine = CatalogSearchEngine()
        >>> results = engine.search(catalog, SearchQuery(text="140M", mode="model"))
    """

    def __init__(
        self,
        matcher: TextMatcher | None = None,
        limit: int = MAX_RESULTS,
    ) -> None:
        """
        Initialize search engine.

        Args:
            matcher: Text matcher (default thresholds if None)
            limit: Maximum number of results per query
        """
        self._matcher = matcher or TextMatcher()
        self._limit = limit

    @classmethod
    def from_settings(
        cls,
        threshold: float,
        weights: dict[str, float],
        limit: int,
    ) -> CatalogSearchEngine:
        """Build an engine from configured fuzzy parameters."""
        return cls(TextMatcher(FuzzyScorer(threshold=threshold, weights=weights)), limit=limit)

    def search(
        self,
        catalog: Sequence[Equipment | Part],
        query: SearchQuery,
    ) -> list[SearchResult]:
        """
        Execute one live search.

        Args:
            catalog: Candidate listings
            query: Query text, mode and facets

        Returns:
            Ranked results, at most ``limit``; empty for a blank query
        """
        if not query.text.strip():
            return []

        candidates = apply_facets(catalog, query)
        matches = self._matcher.match(candidates, query.text, query.mode)
        ranked = rank_results(matches, query.text, limit=self._limit)

        logger.debug(
            "Search: query='%s' mode=%s -> %d results (candidates=%d, matches=%d)",
            query.text[:50],
            query.mode.value,
            len(ranked),
            len(candidates),
            len(matches),
        )

        return [SearchResult(item=item, rank=rank) for rank, item in enumerate(ranked, 1)]

    def filter_catalog(
        self,
        items: Sequence[Equipment | Part],
        text: str,
        mode: SearchMode = SearchMode.ALL,
    ) -> list[Equipment | Part]:
        """
        Uncapped text filter for catalog browsing.

        Unlike :meth:`search` there is no ranking or display cap, and model
        matching tolerates separators ("140-m" finds "140M"). A blank
        query returns ``items`` unchanged.
        """
        if not text.strip():
            return list(items)

        matches = self._matcher.match_catalog(items, text, mode)
        logger.debug(
            "Catalog filter: query='%s' mode=%s -> %d of %d",
            text[:50],
            mode.value,
            len(matches),
            len(items),
        )
        return matches
