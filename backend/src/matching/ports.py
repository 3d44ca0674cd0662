"""Matching ports and interfaces for hexagonal architecture.

The matcher depends only on these ports. The catalog store and the
correction feedback store are external collaborators plugged in at
construction time.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence, Union

from platforms.ports import EcommercePlatform
from .errors import MatcherError, MatchConfigError, MatchCancelledError, CatalogReadError
from .models import (
    CorrectionRecord,
    FoodItem,
    MatchConfig,
    PlatformProductRecord,
    PriceRange,
    SKUMatchResult,
)


@dataclass(frozen=True)
class CatalogFilters:
    """Filters applied to every catalog read.

    Attributes:
        now: Reference time; only records with expires_at > now are eligible
        limit: Maximum records returned per query
        include_out_of_stock: If False, only records with is_in_stock
        price_range: Optional inclusive price bounds
        platforms: Optional platform scope (None means all platforms)
    """
    now: datetime
    limit: int
    include_out_of_stock: bool = False
    price_range: Optional[PriceRange] = None
    platforms: Optional[FrozenSet[EcommercePlatform]] = None

    @classmethod
    def from_config(cls, config: MatchConfig, now: datetime) -> "CatalogFilters":
        return cls(
            now=now,
            limit=config.max_results,
            include_out_of_stock=config.include_out_of_stock,
            price_range=config.price_range,
            platforms=config.platforms,
        )

    def accepts(self, record: PlatformProductRecord) -> bool:
        """Check the non-text filters against one record.

        Shared by readers that filter in memory.
        """
        if not record.is_eligible(self.now):
            return False
        if not self.include_out_of_stock and not record.is_in_stock:
            return False
        if self.price_range is not None and not self.price_range.contains(record.price):
            return False
        if self.platforms is not None and record.platform not in self.platforms:
            return False
        return True


class CatalogReaderPort(ABC):
    """Port interface for the cached platform product catalog.

    Implementations:
    - SqlCatalogReader: SQLAlchemy query against platform_product
    - InMemoryCatalogReader: list-backed reader for tests and embedding

    Implementations must be safe to call from several threads at once.
    """

    @abstractmethod
    def search(self, query: str, filters: CatalogFilters) -> List[PlatformProductRecord]:
        """Find records whose name, description or brand contains query.

        Matching is case-insensitive substring matching.

        Args:
            query: Search string
            filters: Eligibility filters and result limit

        Returns:
            Up to filters.limit eligible records

        Raises:
            CatalogReadError: If the catalog cannot be read
        """
        pass


class CorrectionSinkPort(ABC):
    """Port interface for the append-only correction feedback log."""

    @abstractmethod
    def append(self, record: CorrectionRecord) -> None:
        """Append one correction. Must not modify earlier records."""
        pass


class MatcherPort(ABC):
    """Port interface for ingredient-to-SKU matching."""

    @abstractmethod
    def match_food(
        self,
        food: FoodItem,
        config: Optional[Union[MatchConfig, Mapping[str, Any]]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[SKUMatchResult]:
        """Match one food item to catalog SKUs.

        Raises:
            MatchConfigError: If config is malformed
            MatcherError: If matching fails
        """
        pass

    @abstractmethod
    def match_foods(
        self,
        foods: Sequence[FoodItem],
        config: Optional[Union[MatchConfig, Mapping[str, Any]]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, List[SKUMatchResult]]:
        """Match several foods; a failing food yields an empty list.

        Raises:
            MatchConfigError: If config is malformed
            MatchCancelledError: If cancel_event was set during the batch
        """
        pass

    @abstractmethod
    def record_correction(
        self,
        food_id: str,
        platform_product_id: str,
        platform: Union[EcommercePlatform, str],
        is_correct: bool,
    ) -> None:
        """Record a human judgment about a match (fire-and-forget)."""
        pass


__all__ = [
    "CatalogFilters",
    "CatalogReaderPort",
    "CorrectionSinkPort",
    "MatcherPort",
    "MatcherError",
    "MatchConfigError",
    "MatchCancelledError",
    "CatalogReadError",
]
