"""SQL-backed catalog reader.

Reads the platform_product cache table populated by the catalog sync
process.
"""

import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from database import SessionFactory, session_scope
from matching.errors import CatalogReadError
from matching.models import PlatformProductRecord
from matching.ports import CatalogFilters, CatalogReaderPort
from models.platform_product import PlatformProduct


logger = logging.getLogger(__name__)


class SqlCatalogReader(CatalogReaderPort):
    """Catalog reader over the platform_product table.

    Opens one session per search so concurrent reads from worker threads
    never share a session. Results are ordered by (platform,
    platform_product_id) so repeated searches return the same rows.
    """

    def __init__(self, session_factory: SessionFactory):
        """Initialize reader.

        Args:
            session_factory: Callable returning a new Session
        """
        self.session_factory = session_factory

    def search(self, query: str, filters: CatalogFilters) -> List[PlatformProductRecord]:
        try:
            with session_scope(self.session_factory) as session:
                db_query = session.query(PlatformProduct).filter(
                    or_(
                        PlatformProduct.name.icontains(query, autoescape=True),
                        PlatformProduct.description.icontains(query, autoescape=True),
                        PlatformProduct.brand.icontains(query, autoescape=True),
                    ),
                    PlatformProduct.is_valid.is_(True),
                    PlatformProduct.expires_at > filters.now,
                )

                if not filters.include_out_of_stock:
                    db_query = db_query.filter(PlatformProduct.is_in_stock.is_(True))

                if filters.price_range is not None:
                    if filters.price_range.min is not None:
                        db_query = db_query.filter(PlatformProduct.price >= filters.price_range.min)
                    if filters.price_range.max is not None:
                        db_query = db_query.filter(PlatformProduct.price <= filters.price_range.max)

                if filters.platforms is not None:
                    db_query = db_query.filter(PlatformProduct.platform.in_(sorted(filters.platforms)))

                rows = (
                    db_query
                    .order_by(PlatformProduct.platform, PlatformProduct.platform_product_id)
                    .limit(filters.limit)
                    .all()
                )
                records = [row.to_record() for row in rows]

        except SQLAlchemyError as e:
            raise CatalogReadError(
                f"Catalog search failed for query '{query}': {e}",
                details={"query": query, "original_error": e},
            ) from e

        logger.debug(
            f"Catalog search '{query}' returned {len(records)} records",
            extra={"query": query},
        )
        return records
