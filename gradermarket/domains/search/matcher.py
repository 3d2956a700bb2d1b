"""
Text Matcher - Mode-specific matching of query text against listings.

Modes:
- partNumber: separator-insensitive substring, raw substring, then subsequence
- model: Equipment model or any compatible model of a Part
- description: case-insensitive substring
- all: weighted approximate matching across several fields (RapidFuzz)

Part numbers are typed inconsistently ("1R-0742", "1r0742", "1r 0"), so the
part-number strategy falls back through progressively looser tiers.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from rapidfuzz import fuzz

from gradermarket.domains.catalog import Equipment, Part

from .models import SearchMode

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_FIELD_WEIGHTS",
    "DEFAULT_FUZZY_THRESHOLD",
    "FuzzyScorer",
    "TextMatcher",
    "is_subsequence",
    "match_model",
    "match_part_number",
    "normalize_identifier",
]

DEFAULT_FUZZY_THRESHOLD = 0.3
DEFAULT_FIELD_WEIGHTS: dict[str, float] = {
    "title": 0.3,
    "part_number": 0.4,
    "model": 0.3,
    "description": 0.2,
    "brand": 0.2,
    "category": 0.1,
}

_SEPARATORS = re.compile(r"[\s\-_.]")
_EPSILON = 1e-3


def normalize_identifier(value: str) -> str:
    """Strip separators (whitespace, hyphen, underscore, dot) and lower-case."""
    return _SEPARATORS.sub("", value.lower())


def is_subsequence(needle: str, haystack: str) -> bool:
    """True if every character of ``needle`` appears in ``haystack`` in order."""
    cursor = 0
    for char in haystack:
        if cursor == len(needle):
            break
        if char == needle[cursor]:
            cursor += 1
    return cursor == len(needle)


def _tiered_match(identifier: str, text: str) -> bool:
    query_lower = text.lower()
    query_norm = normalize_identifier(text)
    identifier_norm = normalize_identifier(identifier)

    # A query made only of separators has nothing to normalize against
    if query_norm and (query_norm in identifier_norm or identifier_norm in query_norm):
        return True

    if query_lower in identifier.lower():
        return True

    return bool(query_norm) and is_subsequence(query_norm, identifier_norm)


def match_part_number(part_number: str, text: str) -> bool:
    """
    Tolerant part-number match.

    Tiers: normalized substring (either direction), raw substring, then
    subsequence of the normalized forms.

    Args:
        part_number: Listing part number as displayed (e.g. "1R-0742")
        text: Raw query text

    Returns:
        True if any tier matches
    """
    return _tiered_match(part_number, text)


def match_model(model: str, text: str) -> bool:
    """
    Tolerant model match, same tiers as part numbers ("140-m" and "140" hit "140M").

    Listings without a model never match.
    """
    if not model:
        return False
    return _tiered_match(model, text)


def _searchable_fields(item: Equipment | Part) -> dict[str, str | None]:
    fields: dict[str, str | None] = {
        "title": item.title,
        "description": item.description,
        "brand": item.brand,
    }
    if isinstance(item, Part):
        fields["part_number"] = item.part_number
        fields["category"] = item.category
    else:
        fields["model"] = item.model
    return fields


class FuzzyScorer:
    """
    Weighted multi-field approximate scorer.

    Per-field distance is ``1 - similarity`` where similarity is RapidFuzz's
    best partial alignment of the query inside the field. Fields within the
    threshold contribute ``distance ** normalized_weight`` to a product score,
    so lower is better and 0 is an exact hit.

    Example:
        >>> scorer = FuzzyScorer(threshold=0.3)
        >>> scorer.score(part, "catepillar")
        0.08...
    """

    def __init__(
        self,
        threshold: float = DEFAULT_FUZZY_THRESHOLD,
        weights: Mapping[str, float] | None = None,
    ) -> None:
        self.threshold = threshold
        self._weights = dict(weights or DEFAULT_FIELD_WEIGHTS)
        self._weight_sum = sum(w for w in self._weights.values() if w > 0) or 1.0

    @staticmethod
    def field_distance(query: str, value: str) -> float:
        """Normalized edit distance of ``query`` against ``value`` (0..1)."""
        query = query.lower()
        value = value.lower()
        if len(query) <= len(value):
            similarity = fuzz.partial_ratio(query, value)
        else:
            similarity = fuzz.ratio(query, value)
        return 1.0 - similarity / 100.0

    def score(self, item: Equipment | Part, text: str) -> float | None:
        """
        Score one listing.

        Returns:
            Combined score (lower is better), or None if no field is within threshold
        """
        total = 1.0
        matched = False
        for field, value in _searchable_fields(item).items():
            weight = self._weights.get(field, 0.0)
            if not value or weight <= 0:
                continue
            distance = self.field_distance(text, value)
            if distance <= self.threshold:
                matched = True
                total *= max(distance, _EPSILON) ** (weight / self._weight_sum)
        return total if matched else None


class TextMatcher:
    """
    Select candidates whose mode-relevant fields match the query.

    Stateless: the same inputs always give the same output.

    Example:
        >>> matcher = TextMatcher()
        >>> matcher.match(catalog, "1r 0", SearchMode.PART_NUMBER)
    """

    def __init__(self, scorer: FuzzyScorer | None = None) -> None:
        self._scorer = scorer or FuzzyScorer()

    def match(
        self,
        candidates: Iterable[Equipment | Part],
        text: str,
        mode: SearchMode,
    ) -> list[Equipment | Part]:
        """
        Match candidates against query text.

        Args:
            candidates: Facet-filtered candidate pool
            text: Raw query text
            mode: Search strategy

        Returns:
            Matching listings; input order for substring modes, best score
            first for ``all``
        """
        query_lower = text.lower()

        if mode == SearchMode.PART_NUMBER:
            return [
                item
                for item in candidates
                if isinstance(item, Part) and match_part_number(item.part_number, text)
            ]

        if mode == SearchMode.MODEL:
            return [item for item in candidates if self._matches_model(item, query_lower)]

        if mode == SearchMode.DESCRIPTION:
            return [
                item
                for item in candidates
                if item.description and query_lower in item.description.lower()
            ]

        return self._fuzzy_match(candidates, text)

    def match_catalog(
        self,
        candidates: Iterable[Equipment | Part],
        text: str,
        mode: SearchMode,
    ) -> list[Equipment | Part]:
        """
        Catalog-browse matching: like :meth:`match`, but model mode is
        separator-insensitive with a subsequence fallback.
        """
        if mode != SearchMode.MODEL:
            return self.match(candidates, text, mode)

        matches = []
        for item in candidates:
            models = item.compatible_models if isinstance(item, Part) else [item.model or ""]
            if any(match_model(model, text) for model in models):
                matches.append(item)
        return matches

    @staticmethod
    def _matches_model(item: Equipment | Part, query_lower: str) -> bool:
        if isinstance(item, Part):
            return any(query_lower in model.lower() for model in item.compatible_models)
        return bool(item.model) and query_lower in item.model.lower()

    def _fuzzy_match(
        self,
        candidates: Iterable[Equipment | Part],
        text: str,
    ) -> list[Equipment | Part]:
        scored = []
        for item in candidates:
            score = self._scorer.score(item, text)
            if score is not None:
                scored.append((score, item))

        # sorted() is stable, equal scores keep catalog order
        scored = sorted(scored, key=lambda pair: pair[0])
        logger.debug("Fuzzy match: query='%s' -> %d hits", text[:50], len(scored))
        return [item for _, item in scored]
