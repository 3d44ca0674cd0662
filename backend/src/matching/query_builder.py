"""Catalog search queries for a normalized food name."""

from typing import List

from .models import NormalizedText
from .normalizer import MIN_KEYWORD_LENGTH


def build_search_queries(normalized: NormalizedText) -> List[str]:
    """Build the catalog search strings for one food.

    Order: full normalized name, a phrase of the first two keywords (precision),
    then every keyword on its own (recall). Duplicates are dropped keeping the
    first occurrence, and empty strings are never issued since they would
    match the whole catalog.

    Args:
        normalized: Normalized food text

    Returns:
        Ordered, deduplicated query strings
    """
    candidates = [normalized.normalized]

    if len(normalized.keywords) >= 2:
        candidates.append(" ".join(normalized.keywords[:2]))

    candidates.extend(
        keyword for keyword in normalized.keywords if len(keyword) >= MIN_KEYWORD_LENGTH
    )

    queries = []
    seen = set()
    for query in candidates:
        if query and query not in seen:
            seen.add(query)
            queries.append(query)
    return queries
