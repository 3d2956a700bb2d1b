"""
Search Contracts - Interfaces for search domain.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from gradermarket.domains.catalog import Equipment, Part

from .models import SearchMode, SearchQuery, SearchResult


@runtime_checkable
class SearchEngine(Protocol):
    """Contract for live-search implementations."""

    def search(
        self,
        catalog: Sequence[Equipment | Part],
        query: SearchQuery,
    ) -> list[SearchResult]:
        """Execute search and return ranked results."""
        ...


@runtime_checkable
class Matcher(Protocol):
    """Contract for mode-specific text matchers."""

    def match(
        self,
        candidates: Iterable[Equipment | Part],
        text: str,
        mode: SearchMode,
    ) -> list[Equipment | Part]:
        """Return candidates matching ``text`` under ``mode``."""
        ...
