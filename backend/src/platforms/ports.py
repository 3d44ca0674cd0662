"""
PlatformAdapterPort - Port interface for e-commerce platform adapters

Each supported e-commerce platform has one adapter. The matching engine only
needs an adapter to exist for a platform before it scopes catalog searches to
it; live platform API calls (price refresh, stock, ordering) live behind the
adapter and are not part of this interface.
"""

from abc import ABC, abstractmethod
from enum import Enum


class EcommercePlatform(str, Enum):
    """Supported e-commerce platforms (closed set)."""
    SAMS_CLUB = "SAMS_CLUB"
    HEMA = "HEMA"
    DINGDONG = "DINGDONG"


class UnknownPlatformError(ValueError):
    """Raised when a platform has no registered adapter."""

    def __init__(self, platform: object, available: list[str]):
        self.platform = platform
        self.available = available
        super().__init__(
            f"Unknown platform: '{platform}'. "
            f"Available platforms: {', '.join(available) if available else 'none'}"
        )


class PlatformAdapterPort(ABC):
    """
    Abstract handle for one e-commerce platform.

    Implementations:
    - SamsClubAdapter
    - HemaAdapter
    - DingdongAdapter
    """

    @property
    @abstractmethod
    def platform(self) -> EcommercePlatform:
        """Platform this adapter serves."""

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Human-readable platform name."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(platform={self.platform.value}, base_url={self.base_url!r})"
