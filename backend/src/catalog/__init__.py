"""Catalog module - readers over the cached platform product catalog

Implementations of CatalogReaderPort:
- SqlCatalogReader: platform_product table via SQLAlchemy
- InMemoryCatalogReader: list-backed snapshot
"""

from .memory_reader import InMemoryCatalogReader
from .sql_reader import SqlCatalogReader

__all__ = ["InMemoryCatalogReader", "SqlCatalogReader"]
