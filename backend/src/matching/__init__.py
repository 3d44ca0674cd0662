"""Matching module for the SKU matching engine.

Maps food items from meal plans to SKUs cached from the supported
e-commerce platforms:
- Text normalization and search query building
- Concurrent catalog reads through CatalogReaderPort
- Weighted confidence scoring with explanations
- Correction feedback through CorrectionSinkPort

The HTTP router lives in matching.router and is not imported here.
"""

from .errors import CatalogReadError, MatchCancelledError, MatchConfigError, MatcherError
from .models import (
    CorrectionRecord,
    FoodCategory,
    FoodItem,
    MatchConfig,
    NormalizedText,
    PlatformProductRecord,
    PriceRange,
    ScoreBreakdown,
    ScoredCandidate,
    SKUMatchResult,
)
from .ports import CatalogFilters, CatalogReaderPort, CorrectionSinkPort, MatcherPort
from .scorer import MatchScorer
from .sku_matcher import SkuMatcher

__all__ = [
    "CatalogReadError",
    "MatchCancelledError",
    "MatchConfigError",
    "MatcherError",
    "CorrectionRecord",
    "FoodCategory",
    "FoodItem",
    "MatchConfig",
    "NormalizedText",
    "PlatformProductRecord",
    "PriceRange",
    "ScoreBreakdown",
    "ScoredCandidate",
    "SKUMatchResult",
    "CatalogFilters",
    "CatalogReaderPort",
    "CorrectionSinkPort",
    "MatcherPort",
    "MatchScorer",
    "SkuMatcher",
]
