"""
Unit Tests for Configuration Settings

Tests settings loading, validation, grouped views and the conversion to the
programmatic OptimizerConfig.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from pixelcache.core.config import (
    CacheBackendType,
    CacheConfig,
    OptimizerConfig,
    OutputFormat,
    Settings,
    get_settings,
    reload_settings,
)


@pytest.mark.unit
class TestSettingsInitialization:
    """Test Settings defaults and validation."""

    def test_defaults(self):
        settings = Settings()

        assert settings.CACHE_BACKEND == "memory"
        assert settings.CACHE_TTL is None
        assert settings.CACHE_MAX_ENTRIES == 500
        assert settings.DEFAULT_QUALITY == 80
        assert settings.IMAGE_ROUTE_PATH == "/image"
        assert settings.SINGLE_FLIGHT is False
        assert set(settings.ALLOWED_FORMATS) == set(OutputFormat)

    def test_grouped_views(self):
        settings = Settings()

        assert settings.cache.CACHE_BACKEND == settings.CACHE_BACKEND
        assert settings.optimizer.DEFAULT_QUALITY == settings.DEFAULT_QUALITY
        assert settings.fetch.FETCH_RETRY_LIMIT == 2
        assert settings.logging.LOG_LEVEL == "INFO"
        assert settings.app.APP_NAME == "pixelcache"

    def test_log_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings().LOG_LEVEL == "DEBUG"

    def test_invalid_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(PydanticValidationError):
            Settings()

    def test_invalid_default_quality_rejected(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_QUALITY", "0")
        with pytest.raises(PydanticValidationError):
            Settings()

    def test_invalid_max_width_rejected(self, monkeypatch):
        monkeypatch.setenv("MAX_WIDTH", "20000")
        with pytest.raises(PydanticValidationError):
            Settings()

    def test_env_lists_are_parsed(self, monkeypatch):
        monkeypatch.setenv("SOURCE_ALLOWLIST", '["example.com", "cdn.test"]')
        monkeypatch.setenv("ALLOWED_FORMATS", '["webp", "png"]')
        settings = Settings()

        assert settings.SOURCE_ALLOWLIST == ["example.com", "cdn.test"]
        assert settings.ALLOWED_FORMATS == [OutputFormat.WEBP, OutputFormat.PNG]


@pytest.mark.unit
class TestSettingsSingleton:
    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reload_settings_picks_up_environment(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("CACHE_BACKEND", "disk")
        reloaded = reload_settings()

        assert reloaded is not first
        assert reloaded.CACHE_BACKEND == "disk"
        assert get_settings() is reloaded


@pytest.mark.unit
class TestOptimizerConfigConversion:
    def test_memory_backend(self):
        config = Settings().to_optimizer_config()

        assert isinstance(config, OptimizerConfig)
        assert config.cache.type == CacheBackendType.MEMORY
        assert config.cache.ttl is None
        assert config.cache_ttl is None
        assert config.source_allowlist is None

    def test_ttl_is_carried_over(self, monkeypatch):
        monkeypatch.setenv("CACHE_TTL", "120")
        config = Settings().to_optimizer_config()

        assert config.cache.ttl == 120
        assert config.cache_ttl == 120

    def test_blank_ttl_means_no_ttl(self, monkeypatch):
        monkeypatch.setenv("CACHE_TTL", "")
        settings = Settings()

        assert settings.CACHE_TTL is None
        assert settings.cache.CACHE_TTL is None
        assert settings.to_optimizer_config().cache.ttl is None

    def test_none_backend_disables_cache(self, monkeypatch):
        monkeypatch.setenv("CACHE_BACKEND", "none")
        config = Settings().to_optimizer_config()

        assert config.cache is None
        assert config.cache_ttl is None

    def test_limits_are_carried_over(self, monkeypatch):
        monkeypatch.setenv("MAX_WIDTH", "4000")
        monkeypatch.setenv("SOURCE_ALLOWLIST", '["example.com"]')
        monkeypatch.setenv("SINGLE_FLIGHT", "true")
        config = Settings().to_optimizer_config()

        assert config.max_width == 4000
        assert config.source_allowlist == ("example.com",)
        assert config.single_flight is True


@pytest.mark.unit
class TestOptimizerConfig:
    def test_empty_config_is_usable(self):
        config = OptimizerConfig()

        assert config.cache is None
        assert config.default_quality == 80
        assert set(config.formats) == set(OutputFormat)

    def test_config_is_frozen(self):
        config = OptimizerConfig()
        with pytest.raises(PydanticValidationError):
            config.default_quality = 50

    def test_cache_config_coerces_type(self):
        assert CacheConfig(type="disk").type == CacheBackendType.DISK

    def test_cache_config_rejects_non_positive_ttl(self):
        with pytest.raises(PydanticValidationError):
            CacheConfig(type="memory", ttl=0)
