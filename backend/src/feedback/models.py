"""Match correction SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, String, Boolean, Enum, Index

from models.base import Base, UTCDateTime, utcnow
from platforms.ports import EcommercePlatform


class MatchCorrection(Base):
    """MatchCorrection stores a human judgment about a food-to-SKU match.

    Rows are only ever appended. They are kept for later tuning of the
    scoring weights; the matcher does not read them.
    """
    __tablename__ = "sku_match_correction"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    food_id = Column(Text, nullable=False)
    platform = Column(Enum(EcommercePlatform, name="ecommerce_platform", native_enum=False), nullable=False)
    platform_product_id = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False)
    recorded_at = Column(UTCDateTime, nullable=False, default=utcnow)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    def to_dict(self):
        """Convert correction to dictionary representation"""
        return {
            "id": self.id,
            "food_id": self.food_id,
            "platform": EcommercePlatform(self.platform).value,
            "platform_product_id": self.platform_product_id,
            "is_correct": self.is_correct,
            "recorded_at": self.recorded_at.isoformat(),
            "created_at": self.created_at.isoformat(),
        }


Index("idx_sku_match_correction_food", MatchCorrection.food_id, MatchCorrection.recorded_at.desc())
Index(
    "idx_sku_match_correction_product",
    MatchCorrection.platform,
    MatchCorrection.platform_product_id,
)
