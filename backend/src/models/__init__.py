"""SQLAlchemy models for the platform product catalog.

The correction table lives in feedback.models; import it before calling
Base.metadata.create_all (database.create_tables does both).
"""

from .base import Base
from .platform_product import PlatformProduct

__all__ = [
    "Base",
    "PlatformProduct",
]
