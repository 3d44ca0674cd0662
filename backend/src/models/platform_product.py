"""Platform product SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, String, Boolean, Float, Integer, Enum, Index, UniqueConstraint

from platforms.ports import EcommercePlatform
from matching.models import PlatformProductRecord
from .base import Base, PortableJSONB, UTCDateTime, utcnow


class PlatformProduct(Base):
    """Cached snapshot of one SKU on one e-commerce platform.

    Rows are written and refreshed by the catalog sync process. A row is
    eligible for matching only while is_valid is true and expires_at lies in
    the future.
    """
    __tablename__ = "platform_product"
    __table_args__ = (
        UniqueConstraint("platform", "platform_product_id", name="uq_platform_product_platform_id"),
        Index("ix_platform_product_platform", "platform"),
        Index("ix_platform_product_expires_at", "expires_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    platform = Column(Enum(EcommercePlatform, name="ecommerce_platform", native_enum=False), nullable=False)
    platform_product_id = Column(Text, nullable=False)
    sku = Column(Text, nullable=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    brand = Column(Text, nullable=True)
    category = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    specification = Column(PortableJSONB, nullable=True)
    weight = Column(Float, nullable=True)
    volume = Column(Float, nullable=True)
    unit = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    original_price = Column(Float, nullable=True)
    currency = Column(Text, nullable=False, default="CNY")
    stock = Column(Integer, nullable=False, default=0)
    is_in_stock = Column(Boolean, nullable=False, default=True)
    stock_status = Column(Text, nullable=True)
    platform_data = Column(PortableJSONB, nullable=True)

    # Cache validity
    cached_at = Column(UTCDateTime, nullable=False, default=utcnow)
    expires_at = Column(UTCDateTime, nullable=False)
    is_valid = Column(Boolean, nullable=False, default=True)

    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_record(self) -> PlatformProductRecord:
        """Convert the row into the matcher's read-only record"""
        return PlatformProductRecord(
            platform=EcommercePlatform(self.platform),
            platform_product_id=self.platform_product_id,
            sku=self.sku,
            name=self.name,
            description=self.description,
            brand=self.brand,
            category=self.category,
            specification=self.specification,
            weight=self.weight,
            volume=self.volume,
            unit=self.unit,
            price=self.price,
            currency=self.currency,
            stock=self.stock,
            is_in_stock=self.is_in_stock,
            stock_status=self.stock_status,
            is_valid=self.is_valid,
            expires_at=self.expires_at,
        )
