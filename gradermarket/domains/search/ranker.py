"""
Result Ranker - Part-number precedence, deduplication and the display cap.

Technicians mostly search by the number stamped on a part, so exact and
partial part-number hits outrank everything the matcher returned.
"""

from __future__ import annotations

from collections.abc import Iterable

from gradermarket.domains.catalog import Equipment, Part, item_key

from .matcher import normalize_identifier
from .models import MAX_RESULTS

__all__ = ["rank_results", "part_number_tier"]

_EXACT = 0
_PARTIAL = 1
_OTHER = 2


def part_number_tier(item: Equipment | Part, text: str) -> int:
    """
    Precedence tier of a listing for ``text`` (lower sorts first).

    Comparisons are made on the lower-cased value and on the normalized form,
    so "1r0742" is an exact hit for "1R-0742".
    """
    if not isinstance(item, Part):
        return _OTHER

    query_lower = text.lower()
    query_norm = normalize_identifier(text)
    part_lower = item.part_number.lower()
    part_norm = normalize_identifier(item.part_number)

    if part_lower == query_lower or (query_norm and part_norm == query_norm):
        return _EXACT
    if query_lower in part_lower or (query_norm and query_norm in part_norm):
        return _PARTIAL
    return _OTHER


def rank_results(
    items: Iterable[Equipment | Part],
    text: str,
    limit: int = MAX_RESULTS,
) -> list[Equipment | Part]:
    """
    Order matched listings and cap the list.

    Args:
        items: Matcher output, in matcher order
        text: Raw query text
        limit: Maximum number of results

    Returns:
        At most ``limit`` distinct listings
    """
    seen: set[tuple[str, str]] = set()
    unique = []
    for item in items:
        key = item_key(item)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)

    ranked = sorted(unique, key=lambda item: part_number_tier(item, text))
    return ranked[:limit]
