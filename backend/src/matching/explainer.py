"""Human-readable explanations for match results."""

from typing import List

from .models import NormalizedText, ScoredCandidate, SKUMatchResult


HIGH_MATCH_REASON = "high match: name and keywords strongly aligned"
MODERATE_MATCH_REASON = "moderate match: partial keyword overlap"
LOW_MATCH_REASON = "low match: basic field overlap"
MULTIPLE_KEYWORDS_REASON = "multiple keyword matches"
BRAND_RELEVANT_REASON = "brand relevant"


def find_matched_keywords(normalized: NormalizedText, product_text: str) -> List[str]:
    return [keyword for keyword in normalized.keywords if keyword in product_text]


def explain_match(normalized: NormalizedText, candidate: ScoredCandidate) -> SKUMatchResult:
    """Build the result for a ranked candidate.

    Reasons, in order: confidence tier, "multiple keyword matches" when more
    than two keywords matched, "brand relevant" when the brand sub-term fired.
    """
    confidence = candidate.confidence
    matched_keywords = find_matched_keywords(normalized, candidate.product.searchable_text())

    if confidence > 0.8:
        reasons = [HIGH_MATCH_REASON]
    elif confidence > 0.6:
        reasons = [MODERATE_MATCH_REASON]
    else:
        reasons = [LOW_MATCH_REASON]

    if len(matched_keywords) > 2:
        reasons.append(MULTIPLE_KEYWORDS_REASON)

    if candidate.breakdown.brand_relevant:
        reasons.append(BRAND_RELEVANT_REASON)

    return SKUMatchResult(
        platform_product=candidate.product,
        confidence=confidence,
        matched_keywords=matched_keywords,
        match_reasons=reasons,
        score_breakdown=candidate.breakdown,
    )
