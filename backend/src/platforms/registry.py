"""
Platform Registry - Explicit mapping of platforms to adapter handles

The registry is built once at startup (see build_default_registry) and then
only read, so lookups need no locking.
"""

import logging
from typing import Dict, Iterable, Optional, Union

from config import Settings, get_settings
from .ports import EcommercePlatform, PlatformAdapterPort, UnknownPlatformError
from .implementations import SamsClubAdapter, HemaAdapter, DingdongAdapter


logger = logging.getLogger(__name__)


class PlatformAdapterRegistry:
    """
    Registry of platform adapter handles.

    Usage:
        registry = build_default_registry()
        adapter = registry.adapter_for(EcommercePlatform.HEMA)

    Registration should happen only at startup in the main thread.
    """

    def __init__(self, adapters: Optional[Iterable[PlatformAdapterPort]] = None):
        self._adapters: Dict[EcommercePlatform, PlatformAdapterPort] = {}
        for adapter in adapters or ():
            self.register(adapter)

    def register(self, adapter: PlatformAdapterPort) -> None:
        """
        Register an adapter under its platform.

        Raises:
            ValueError: If adapter doesn't implement PlatformAdapterPort
            RuntimeError: If the platform is already registered
        """
        if not isinstance(adapter, PlatformAdapterPort):
            raise ValueError(
                f"Adapter must implement PlatformAdapterPort, got {type(adapter).__name__}"
            )

        if adapter.platform in self._adapters:
            raise RuntimeError(
                f"Platform '{adapter.platform.value}' is already registered. "
                f"Use unregister() first if you need to replace it."
            )

        self._adapters[adapter.platform] = adapter
        logger.debug(f"Registered platform adapter {adapter!r}")

    def adapter_for(self, platform: Union[EcommercePlatform, str]) -> PlatformAdapterPort:
        """
        Resolve the adapter for a platform.

        Accepts the enum or its string value.

        Raises:
            UnknownPlatformError: If the platform is not recognized or not registered
        """
        try:
            key = EcommercePlatform(platform)
        except ValueError:
            raise UnknownPlatformError(platform, self.list_available()) from None

        if key not in self._adapters:
            raise UnknownPlatformError(platform, self.list_available())

        return self._adapters[key]

    def list_available(self) -> list[str]:
        """List registered platform values, sorted."""
        return sorted(platform.value for platform in self._adapters)

    def is_registered(self, platform: Union[EcommercePlatform, str]) -> bool:
        try:
            return EcommercePlatform(platform) in self._adapters
        except ValueError:
            return False

    def unregister(self, platform: EcommercePlatform) -> None:
        """
        Remove a platform from the registry.

        Primarily used for testing.

        Raises:
            UnknownPlatformError: If platform is not registered
        """
        if platform not in self._adapters:
            raise UnknownPlatformError(platform, self.list_available())

        del self._adapters[platform]


def build_default_registry(settings: Optional[Settings] = None) -> PlatformAdapterRegistry:
    """Build the registry with one adapter per supported platform."""
    settings = settings or get_settings()
    return PlatformAdapterRegistry([
        SamsClubAdapter(settings.SAMS_CLUB_API_URL),
        HemaAdapter(settings.HEMA_API_URL),
        DingdongAdapter(settings.DINGDONG_API_URL),
    ])
