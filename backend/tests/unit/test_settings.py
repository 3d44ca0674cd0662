"""Unit tests for environment-driven settings"""

from config import Settings, get_settings
from matching.models import MatchConfig


class TestSettings:
    """Test defaults and environment overrides"""

    def test_matching_defaults(self, monkeypatch):
        monkeypatch.delenv("MATCH_MIN_CONFIDENCE", raising=False)
        monkeypatch.delenv("MATCH_MAX_RESULTS", raising=False)

        settings = Settings(_env_file=None)

        assert settings.MATCH_MIN_CONFIDENCE == 0.6
        assert settings.MATCH_MAX_RESULTS == 10
        assert settings.MATCH_INCLUDE_OUT_OF_STOCK is False
        assert settings.CATEGORY_SCORING_ENABLED is False
        assert settings.PRICE_SANITY_CEILING == 10_000.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MATCH_MAX_RESULTS", "3")
        monkeypatch.setenv("CATALOG_READ_TIMEOUT_SECONDS", "0.5")

        settings = Settings(_env_file=None)

        assert settings.MATCH_MAX_RESULTS == 3
        assert settings.CATALOG_READ_TIMEOUT_SECONDS == 0.5

    def test_default_match_config_from_settings(self):
        settings = Settings(_env_file=None, MATCH_MIN_CONFIDENCE=0.3, MATCH_MAX_RESULTS=5)

        config = MatchConfig.from_settings(settings)

        assert config == MatchConfig(min_confidence=0.3, max_results=5, include_out_of_stock=False)

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
