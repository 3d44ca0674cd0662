"""Candidate deduplication, filtering and ranking."""

from typing import Dict, Iterable, List, Tuple

from .models import MatchConfig, PlatformProductRecord, ScoredCandidate


def dedupe_candidates(records: Iterable[PlatformProductRecord]) -> List[PlatformProductRecord]:
    """Merge records from all queries, keyed by (platform, platform_product_id).

    The first occurrence wins and the original order is kept.
    """
    unique: Dict[Tuple[str, str], PlatformProductRecord] = {}
    for record in records:
        unique.setdefault(record.key, record)
    return list(unique.values())


def filter_and_rank(scored: Iterable[ScoredCandidate], config: MatchConfig) -> List[ScoredCandidate]:
    """Drop candidates below min_confidence, sort descending, cap at max_results.

    The sort is stable, so equal confidences keep catalog order.
    """
    kept = [candidate for candidate in scored if candidate.confidence >= config.min_confidence]
    kept.sort(key=lambda candidate: candidate.confidence, reverse=True)
    return kept[:config.max_results]
