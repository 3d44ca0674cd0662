"""Pytest fixtures for SKU matching tests.

Provides reusable test fixtures for:
- Settings isolated from the developer's .env
- In-memory SQLite engine and session factory with all tables created
- A small cached catalog across the three platforms
- A matcher factory that closes every matcher it creates

Usage:
    def test_match(matcher_factory, sample_catalog):
        matcher = matcher_factory(sample_catalog)
        results = matcher.match_food(FoodItem(id="f1", name="鸡胸肉"))
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from catalog import InMemoryCatalogReader
from config import Settings
from database import build_session_factory, create_engine_from_url, create_tables
from matching.models import PlatformProductRecord
from matching.sku_matcher import SkuMatcher
from platforms import EcommercePlatform


# Products expire a day after NOW, so code using the real clock (the API)
# still sees them as fresh
NOW = datetime.now(timezone.utc).replace(microsecond=0)


def build_product(
    product_id: str,
    name: str,
    platform: EcommercePlatform = EcommercePlatform.SAMS_CLUB,
    price: float = 29.9,
    expires_at: datetime = None,
    **kwargs,
) -> PlatformProductRecord:
    """Build a cached product that is valid for a day after NOW."""
    return PlatformProductRecord(
        platform=platform,
        platform_product_id=product_id,
        name=name,
        price=price,
        expires_at=expires_at or NOW + timedelta(days=1),
        **kwargs,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_product():
    """Factory for PlatformProductRecord with sensible defaults."""
    return build_product


@pytest.fixture
def settings() -> Settings:
    """Settings that ignore .env and use an in-memory database."""
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        LOG_JSON=False,
        MATCH_BATCH_WORKERS=4,
        CATALOG_MAX_CONCURRENT_READS=4,
        CATALOG_READ_TIMEOUT_SECONDS=2.0,
    )


@pytest.fixture
def sample_catalog():
    """Cached catalog used by most matcher tests.

    For the food 鸡胸肉 (defaults, min_confidence 0.6):
    - hm-001 scores 0.85 (exact name, weight and price)
    - sc-001 scores 0.62 (name half-overlap after filler removal, price only)
    - hm-002 is out of stock
    - dd-001 and sc-002 are never returned by a 鸡胸肉 query
    """
    return [
        build_product(
            "sc-001", "新鲜鸡胸肉 500g",
            platform=EcommercePlatform.SAMS_CLUB, price=29.9, brand="山姆会员牌",
        ),
        build_product(
            "hm-001", "鸡胸肉",
            platform=EcommercePlatform.HEMA, price=19.9, brand="盒马", weight=400.0, unit="g",
        ),
        build_product(
            "hm-002", "鸡胸肉 冷冻",
            platform=EcommercePlatform.HEMA, price=15.0, is_in_stock=False, stock_status="sold_out",
        ),
        build_product(
            "dd-001", "鸡腿肉 1kg",
            platform=EcommercePlatform.DINGDONG, price=25.0, weight=1000.0, unit="g",
        ),
        build_product(
            "sc-002", "有机纯牛奶 1L",
            platform=EcommercePlatform.SAMS_CLUB, price=59.0, brand="Member's Mark", volume=1.0, unit="L",
        ),
    ]


@pytest.fixture
def matcher_factory(settings):
    """Create SkuMatchers over an in-memory catalog with a fixed clock."""
    created = []

    def factory(records=(), reader=None, **kwargs):
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("clock", lambda: NOW)
        matcher = SkuMatcher(reader or InMemoryCatalogReader(records), **kwargs)
        created.append(matcher)
        return matcher

    yield factory

    for matcher in created:
        matcher.close()


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by all threads (StaticPool)."""
    engine = create_engine_from_url("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)
