"""In-memory catalog reader.

Backs the matcher with a plain list of records, in insertion order. Useful
for tests and for callers that already hold a catalog snapshot.
"""

from typing import Iterable, List, Tuple

from matching.models import PlatformProductRecord
from matching.ports import CatalogFilters, CatalogReaderPort


class InMemoryCatalogReader(CatalogReaderPort):
    """Catalog reader over an immutable snapshot of records."""

    def __init__(self, records: Iterable[PlatformProductRecord] = ()):
        self._records: Tuple[PlatformProductRecord, ...] = tuple(records)

    def search(self, query: str, filters: CatalogFilters) -> List[PlatformProductRecord]:
        needle = query.lower()
        results = []
        for record in self._records:
            if len(results) >= filters.limit:
                break
            if not filters.accepts(record):
                continue
            if _contains(record, needle):
                results.append(record)
        return results


def _contains(record: PlatformProductRecord, needle: str) -> bool:
    return any(
        needle in field.lower()
        for field in (record.name, record.description, record.brand)
        if field
    )
