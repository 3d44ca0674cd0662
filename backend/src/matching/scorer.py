"""Match confidence scoring.

Scoring formula:
- S_name = Jaccard(food tokens, candidate name tokens)
- S_kw = matched keywords / all keywords
- S_cat = 0.5 (neutral) unless category scoring is enabled
- S_attr = min(1, 0.5 * brand_relevant + 0.3 * has_spec + 0.2 * price_sane)
- match_confidence = clamp(0.4 * S_name + 0.3 * S_kw + 0.2 * S_cat + 0.1 * S_attr, 0..1)
"""

from typing import Dict, FrozenSet, Optional

from config import Settings, get_settings
from .models import FoodCategory, NormalizedText, PlatformProductRecord, ScoreBreakdown
from .normalizer import strip_fillers, tokenize


NEUTRAL_CATEGORY_SCORE = 0.5

BRAND_RELEVANCE_SCORE = 0.5
SPECIFICATION_SCORE = 0.3
PRICE_SANITY_SCORE = 0.2

CATEGORY_KEYWORDS: Dict[FoodCategory, FrozenSet[str]] = {
    FoodCategory.VEGETABLES: frozenset({"蔬菜", "青菜", "萝卜", "白菜", "菠菜", "西兰花"}),
    FoodCategory.PROTEIN: frozenset({"肉", "鸡", "牛", "猪", "鱼", "蛋"}),
    FoodCategory.FRUITS: frozenset({"水果", "苹果", "香蕉", "橙子", "葡萄"}),
    FoodCategory.GRAINS: frozenset({"米", "面", "麦", "燕麦", "面包"}),
    FoodCategory.DAIRY: frozenset({"奶", "酸奶", "奶酪", "牛奶"}),
}


class MatchScorer:
    """Calculate match confidence for one candidate.

    Stateless apart from settings, so one instance is shared by all worker
    threads.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize scorer.

        Args:
            settings: Settings providing PRICE_SANITY_CEILING and
                CATEGORY_SCORING_ENABLED (defaults to the cached settings)
        """
        settings = settings or get_settings()
        self.price_ceiling = settings.PRICE_SANITY_CEILING
        self.category_scoring_enabled = settings.CATEGORY_SCORING_ENABLED

    def score(
        self,
        normalized: NormalizedText,
        category: FoodCategory,
        product: PlatformProductRecord,
    ) -> ScoreBreakdown:
        """Calculate all sub-scores for a candidate.

        Args:
            normalized: Normalized food text
            category: Food category
            product: Candidate catalog record

        Returns:
            ScoreBreakdown whose confidence is the weighted sum
        """
        product_text = product.searchable_text()
        brand_relevant = self._is_brand_relevant(normalized, product.brand)

        return ScoreBreakdown(
            name_similarity=self._calculate_name_similarity(normalized, product.name),
            keyword_coverage=self._calculate_keyword_coverage(normalized, product_text),
            category_compatibility=self._calculate_category_score(category, product_text),
            attribute_plausibility=self._calculate_attribute_score(product, brand_relevant),
            brand_relevant=brand_relevant,
        )

    def _calculate_name_similarity(self, normalized: NormalizedText, product_name: str) -> float:
        """Jaccard similarity of token sets.

        The candidate name goes through the same lowercasing and filler
        removal as the food name. An empty union scores 0.
        """
        food_tokens = set(normalized.tokens)
        product_tokens = set(tokenize(strip_fillers(product_name)))

        union = food_tokens | product_tokens
        if not union:
            return 0.0
        return len(food_tokens & product_tokens) / len(union)

    def _calculate_keyword_coverage(self, normalized: NormalizedText, product_text: str) -> float:
        if not normalized.keywords:
            return 0.0

        matched = sum(1 for keyword in normalized.keywords if keyword in product_text)
        return matched / len(normalized.keywords)

    def _calculate_category_score(self, category: FoodCategory, product_text: str) -> float:
        """Category compatibility.

        Neutral unless CATEGORY_SCORING_ENABLED; enabling it changes rankings.
        """
        if not self.category_scoring_enabled:
            return NEUTRAL_CATEGORY_SCORE

        keywords = CATEGORY_KEYWORDS.get(category)
        if not keywords:
            return NEUTRAL_CATEGORY_SCORE
        return 1.0 if any(keyword in product_text for keyword in keywords) else 0.0

    def _calculate_attribute_score(self, product: PlatformProductRecord, brand_relevant: bool) -> float:
        score = 0.0

        if brand_relevant:
            score += BRAND_RELEVANCE_SCORE

        if product.weight is not None or product.volume is not None or product.unit:
            score += SPECIFICATION_SCORE

        if product.price is not None and 0 < product.price < self.price_ceiling:
            score += PRICE_SANITY_SCORE

        return min(score, 1.0)

    @staticmethod
    def _is_brand_relevant(normalized: NormalizedText, brand: Optional[str]) -> bool:
        if not brand:
            return False
        brand_lower = brand.lower()
        return any(keyword in brand_lower for keyword in normalized.keywords)
