"""Pydantic schemas for SKU matching endpoints.

Request schemas only check shapes. Value rules (confidence bounds, price
range, known platforms) are enforced by MatchConfig so the API returns the
same error codes as the library.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from platforms.ports import EcommercePlatform
from .models import FoodCategory, FoodItem


class FoodItemSchema(BaseModel):
    """Food to match."""
    id: str = Field(..., min_length=1)
    name: str
    aliases: List[str] = Field(default_factory=list)
    category: FoodCategory = FoodCategory.OTHER

    def to_domain(self) -> FoodItem:
        return FoodItem(
            id=self.id,
            name=self.name,
            aliases=tuple(self.aliases),
            category=self.category,
        )


class PriceRangeSchema(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class MatchConfigSchema(BaseModel):
    """Overrides applied over the server's default match config."""
    min_confidence: Optional[float] = None
    max_results: Optional[int] = None
    include_out_of_stock: Optional[bool] = None
    price_range: Optional[PriceRangeSchema] = None
    platforms: Optional[List[str]] = None

    def to_overrides(self) -> Dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class MatchRequest(BaseModel):
    food: FoodItemSchema
    config: Optional[MatchConfigSchema] = None


class BatchMatchRequest(BaseModel):
    foods: List[FoodItemSchema]
    config: Optional[MatchConfigSchema] = None


class PlatformProductSchema(BaseModel):
    """Cached platform SKU as returned to clients."""
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

    class Config:
        from_attributes = True


class ScoreBreakdownSchema(BaseModel):
    name_similarity: float
    keyword_coverage: float
    category_compatibility: float
    attribute_plausibility: float
    brand_relevant: bool

    class Config:
        from_attributes = True


class SKUMatchResultSchema(BaseModel):
    """One matched SKU with its explanation."""
    platform_product: PlatformProductSchema
    confidence: float = Field(ge=0.0, le=1.0)
    matched_keywords: List[str]
    match_reasons: List[str]
    score_breakdown: Optional[ScoreBreakdownSchema] = None

    class Config:
        from_attributes = True


class MatchResponse(BaseModel):
    food_id: str
    results: List[SKUMatchResultSchema]


class BatchMatchResponse(BaseModel):
    """Results per food id, in request order."""
    results: Dict[str, List[SKUMatchResultSchema]]


class CorrectionRequest(BaseModel):
    """Human judgment about a returned match."""
    food_id: str = Field(..., min_length=1)
    platform_product_id: str = Field(..., min_length=1)
    platform: str
    is_correct: bool


class CorrectionAcceptedResponse(BaseModel):
    status: str = "accepted"
    food_id: str
