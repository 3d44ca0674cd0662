"""
Platforms module - e-commerce platform adapter handles

Provides the closed set of supported platforms and the registry that maps each
platform to its adapter handle. The matching engine consults the registry to
confirm a platform is recognized before scoping catalog searches to it.
"""

from .ports import EcommercePlatform, PlatformAdapterPort, UnknownPlatformError
from .registry import PlatformAdapterRegistry, build_default_registry

__all__ = [
    "EcommercePlatform",
    "PlatformAdapterPort",
    "UnknownPlatformError",
    "PlatformAdapterRegistry",
    "build_default_registry",
]
