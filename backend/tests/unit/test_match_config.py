"""Unit tests for MatchConfig validation and overrides"""

import pytest

from matching.errors import MatchConfigError
from matching.models import MatchConfig, PriceRange
from platforms import EcommercePlatform


class TestMerged:
    """Test applying overrides over defaults"""

    def test_none_returns_defaults(self):
        defaults = MatchConfig()
        assert defaults.merged(None) == defaults

    def test_mapping_overrides_only_given_keys(self):
        config = MatchConfig(min_confidence=0.6, max_results=10).merged({"max_results": 3})

        assert config.max_results == 3
        assert config.min_confidence == 0.6

    def test_config_instance_replaces_defaults(self):
        override = MatchConfig(min_confidence=0.1, max_results=2)
        assert MatchConfig().merged(override) == override

    def test_price_range_from_mapping(self):
        config = MatchConfig().merged({"price_range": {"min": 10, "max": 50}})
        assert config.price_range == PriceRange(min=10, max=50)

    def test_platforms_from_strings(self):
        config = MatchConfig().merged({"platforms": ["HEMA", EcommercePlatform.DINGDONG]})
        assert config.platforms == frozenset({EcommercePlatform.HEMA, EcommercePlatform.DINGDONG})

    def test_single_platform_string(self):
        config = MatchConfig().merged({"platforms": "SAMS_CLUB"})
        assert config.platforms == frozenset({EcommercePlatform.SAMS_CLUB})


class TestValidation:
    """Test rejection of malformed config"""

    @pytest.mark.parametrize("overrides", [
        {"min_confidence": 1.5},
        {"min_confidence": -0.1},
        {"min_confidence": "high"},
        {"max_results": 0},
        {"max_results": 2.5},
        {"max_results": True},
        {"include_out_of_stock": "yes"},
        {"price_range": {"min": 50, "max": 10}},
        {"price_range": {"min": -1}},
        {"price_range": {"lo": 1}},
        {"price_range": [1, 2]},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(MatchConfigError) as exc_info:
            MatchConfig().merged(overrides)

        assert exc_info.value.code == "INVALID_CONFIG"

    def test_unknown_key(self):
        with pytest.raises(MatchConfigError) as exc_info:
            MatchConfig().merged({"min_conf": 0.5})

        assert exc_info.value.details["unknown_keys"] == ["min_conf"]

    def test_unknown_platform(self):
        with pytest.raises(MatchConfigError) as exc_info:
            MatchConfig().merged({"platforms": ["TAOBAO"]})

        assert exc_info.value.code == "UNKNOWN_PLATFORM"

    def test_not_a_mapping(self):
        with pytest.raises(MatchConfigError):
            MatchConfig().merged(["min_confidence", 0.5])

    def test_boundaries_are_valid(self):
        MatchConfig(min_confidence=0.0, max_results=1).validate()
        MatchConfig(min_confidence=1.0, price_range=PriceRange(min=5, max=5)).validate()


class TestPriceRange:
    """Test inclusive price bounds"""

    def test_bounds_are_inclusive(self):
        price_range = PriceRange(min=10, max=20)

        assert price_range.contains(10)
        assert price_range.contains(20)
        assert not price_range.contains(9.99)
        assert not price_range.contains(20.01)

    def test_open_ended(self):
        assert PriceRange(min=10).contains(10_000)
        assert PriceRange(max=10).contains(0)

    def test_unknown_price(self):
        assert PriceRange().contains(None)
        assert not PriceRange(max=10).contains(None)


class TestErrorPayload:
    """Test the structured error body"""

    def test_to_dict(self):
        error = MatchConfigError("bad config", details={"field": "max_results", "original_error": ValueError("x")})

        assert error.to_dict() == {
            "error": "INVALID_CONFIG",
            "message": "bad config",
            "details": {"field": "max_results", "original_error": "x"},
        }
