"""Matching domain models.

Plain dataclasses for everything that flows through the matching pipeline.
The pipeline never persists these; the catalog and feedback stores have their
own SQLAlchemy models.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from numbers import Real
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from platforms.ports import EcommercePlatform
from .errors import MatchConfigError


class FoodCategory(str, Enum):
    """Food categories used by the meal-planning side."""
    VEGETABLES = "VEGETABLES"
    FRUITS = "FRUITS"
    GRAINS = "GRAINS"
    PROTEIN = "PROTEIN"
    SEAFOOD = "SEAFOOD"
    DAIRY = "DAIRY"
    OILS = "OILS"
    SNACKS = "SNACKS"
    BEVERAGES = "BEVERAGES"
    OTHER = "OTHER"


@dataclass(frozen=True)
class FoodItem:
    """Ingredient to be matched.

    Attributes:
        id: Food identifier (owned by the meal-planning side)
        name: Display name, may be Chinese
        aliases: Alternate names/spellings, in order
        category: Food category
    """
    id: str
    name: str
    aliases: Tuple[str, ...] = ()
    category: FoodCategory = FoodCategory.OTHER

    def __post_init__(self):
        # Accept a single alias or any sequence, store an immutable tuple
        aliases = self.aliases or ()
        if isinstance(aliases, str):
            aliases = (aliases,)
        object.__setattr__(self, "aliases", tuple(aliases))


@dataclass(frozen=True)
class PlatformProductRecord:
    """Cached snapshot of one SKU on one platform.

    Refreshed by the catalog sync process; read-only for the matcher.
    """
    platform: EcommercePlatform
    platform_product_id: str
    name: str
    price: Optional[float]
    expires_at: datetime
    sku: Optional[str] = None
    description: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    specification: Optional[Dict[str, Any]] = None
    weight: Optional[float] = None
    volume: Optional[float] = None
    unit: Optional[str] = None
    currency: str = "CNY"
    stock: int = 0
    is_in_stock: bool = True
    stock_status: Optional[str] = None
    is_valid: bool = True

    @property
    def key(self) -> Tuple[str, str]:
        """Identity of the SKU across queries: (platform, platform_product_id)."""
        platform = self.platform.value if isinstance(self.platform, EcommercePlatform) else str(self.platform)
        return platform, self.platform_product_id

    def is_eligible(self, now: datetime) -> bool:
        return self.is_valid and self.expires_at > now

    def searchable_text(self) -> str:
        """Lowercased name + description + brand, as used for keyword checks."""
        return f"{self.name} {self.description or ''} {self.brand or ''}".lower()


@dataclass(frozen=True)
class NormalizedText:
    """Normalized form of a food name.

    keywords holds unique keywords in first-seen order; membership is what the
    scorer cares about, the order keeps query building deterministic.
    """
    original: str
    normalized: str
    tokens: Tuple[str, ...]
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class PriceRange:
    min: Optional[float] = None
    max: Optional[float] = None

    def contains(self, price: Optional[float]) -> bool:
        if price is None:
            return self.min is None and self.max is None
        if self.min is not None and price < self.min:
            return False
        if self.max is not None and price > self.max:
            return False
        return True


@dataclass(frozen=True)
class MatchConfig:
    """Per-call matching configuration.

    Attributes:
        min_confidence: Results below this confidence are dropped (0.0-1.0)
        max_results: Cap on results, also the per-query catalog read limit
        include_out_of_stock: Consider out-of-stock records
        price_range: Optional inclusive price bounds applied by catalog reads
        platforms: Optional set of platforms to scope catalog reads to
    """
    min_confidence: float = 0.6
    max_results: int = 10
    include_out_of_stock: bool = False
    price_range: Optional[PriceRange] = None
    platforms: Optional[FrozenSet[EcommercePlatform]] = None

    @classmethod
    def from_settings(cls, settings) -> "MatchConfig":
        return cls(
            min_confidence=settings.MATCH_MIN_CONFIDENCE,
            max_results=settings.MATCH_MAX_RESULTS,
            include_out_of_stock=settings.MATCH_INCLUDE_OUT_OF_STOCK,
        )

    def merged(self, overrides: Optional[Union["MatchConfig", Mapping[str, Any]]]) -> "MatchConfig":
        """Return a validated config with overrides applied over self.

        Raises:
            MatchConfigError: If overrides contain unknown keys or invalid values
        """
        if overrides is None:
            config = self
        elif isinstance(overrides, MatchConfig):
            config = overrides
        elif isinstance(overrides, Mapping):
            known = {f.name for f in fields(MatchConfig)}
            unknown = sorted(set(overrides) - known)
            if unknown:
                raise MatchConfigError(
                    f"Unknown match config keys: {', '.join(unknown)}",
                    details={"unknown_keys": unknown},
                )
            values = dict(overrides)
            if "price_range" in values:
                values["price_range"] = _coerce_price_range(values["price_range"])
            if "platforms" in values:
                values["platforms"] = _coerce_platforms(values["platforms"])
            config = replace(self, **values)
        else:
            raise MatchConfigError(
                f"Match config must be a MatchConfig or a mapping, got {type(overrides).__name__}"
            )

        config.validate()
        return config

    def validate(self) -> None:
        """Reject malformed values before any catalog read is issued."""
        if not _is_number(self.min_confidence) or not 0.0 <= self.min_confidence <= 1.0:
            raise MatchConfigError(
                f"min_confidence must be between 0 and 1, got {self.min_confidence!r}",
                details={"field": "min_confidence"},
            )
        if isinstance(self.max_results, bool) or not isinstance(self.max_results, int) or self.max_results < 1:
            raise MatchConfigError(
                f"max_results must be a positive integer, got {self.max_results!r}",
                details={"field": "max_results"},
            )
        if not isinstance(self.include_out_of_stock, bool):
            raise MatchConfigError(
                f"include_out_of_stock must be a boolean, got {self.include_out_of_stock!r}",
                details={"field": "include_out_of_stock"},
            )
        if self.price_range is not None:
            _validate_price_range(self.price_range)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _coerce_price_range(value: Any) -> Optional[PriceRange]:
    if value is None or isinstance(value, PriceRange):
        return value
    if isinstance(value, Mapping):
        unknown = sorted(set(value) - {"min", "max"})
        if unknown:
            raise MatchConfigError(
                f"Unknown price_range keys: {', '.join(unknown)}",
                details={"field": "price_range", "unknown_keys": unknown},
            )
        return PriceRange(min=value.get("min"), max=value.get("max"))
    raise MatchConfigError(
        f"price_range must be a mapping with min/max, got {type(value).__name__}",
        details={"field": "price_range"},
    )


def _validate_price_range(price_range: PriceRange) -> None:
    for bound_name in ("min", "max"):
        bound = getattr(price_range, bound_name)
        if bound is not None and (not _is_number(bound) or bound < 0):
            raise MatchConfigError(
                f"price_range.{bound_name} must be a non-negative number, got {bound!r}",
                details={"field": f"price_range.{bound_name}"},
            )
    if (
        price_range.min is not None
        and price_range.max is not None
        and price_range.min > price_range.max
    ):
        raise MatchConfigError(
            f"price_range.min ({price_range.min}) is greater than price_range.max ({price_range.max})",
            details={"field": "price_range"},
        )


def _coerce_platforms(value: Any) -> Optional[FrozenSet[EcommercePlatform]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    try:
        return frozenset(EcommercePlatform(item) for item in value)
    except (TypeError, ValueError) as e:
        raise MatchConfigError(
            f"Invalid platforms: {value!r}",
            details={"field": "platforms", "error": str(e)},
            code="UNKNOWN_PLATFORM",
        ) from e


@dataclass(frozen=True)
class ScoreBreakdown:
    """Sub-scores of one candidate, each in [0, 1].

    confidence = 0.4 * name + 0.3 * keyword + 0.2 * category + 0.1 * attribute
    """
    name_similarity: float
    keyword_coverage: float
    category_compatibility: float
    attribute_plausibility: float
    brand_relevant: bool = False

    NAME_WEIGHT = 0.4
    KEYWORD_WEIGHT = 0.3
    CATEGORY_WEIGHT = 0.2
    ATTRIBUTE_WEIGHT = 0.1

    @property
    def confidence(self) -> float:
        raw = (
            self.name_similarity * self.NAME_WEIGHT
            + self.keyword_coverage * self.KEYWORD_WEIGHT
            + self.category_compatibility * self.CATEGORY_WEIGHT
            + self.attribute_plausibility * self.ATTRIBUTE_WEIGHT
        )
        return max(0.0, min(1.0, raw))


@dataclass(frozen=True)
class ScoredCandidate:
    """Candidate with its score, before explanation."""
    product: PlatformProductRecord
    breakdown: ScoreBreakdown

    @property
    def confidence(self) -> float:
        return self.breakdown.confidence


@dataclass
class SKUMatchResult:
    """Matched SKU returned to the caller.

    Attributes:
        platform_product: The matched catalog record
        confidence: Final match confidence (0.0-1.0)
        matched_keywords: Food keywords found in the record's text
        match_reasons: Ordered human-readable explanations
        score_breakdown: Sub-scores behind the confidence
    """
    platform_product: PlatformProductRecord
    confidence: float
    matched_keywords: List[str] = field(default_factory=list)
    match_reasons: List[str] = field(default_factory=list)
    score_breakdown: Optional[ScoreBreakdown] = None


@dataclass(frozen=True)
class CorrectionRecord:
    """Human judgment about a previously returned match."""
    food_id: str
    platform_product_id: str
    platform: EcommercePlatform
    is_correct: bool
    recorded_at: datetime
