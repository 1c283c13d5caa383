"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
image transformation service. The HTTP application reads it once at startup
and hands the optimizer an explicit OptimizerConfig; the optimizer core
never reads global settings itself.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with reload_settings()
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pixelcache.core.config.constants import (
    DEFAULT_QUALITY,
    DISK_CACHE_DEFAULT_PATH,
    FETCH_RETRY_LIMIT,
    FETCH_TIMEOUT,
    MAX_DIMENSION,
    MEMORY_CACHE_MAX_ENTRIES,
    CacheBackendType,
    OutputFormat,
)

# ============================================================================
# Programmatic configuration (consumed by the optimizer core)
# ============================================================================


class CacheConfig(BaseModel):
    """
    Cache backend selection.

    Attributes:
        type: Which backend variant to construct
        path: Directory for the disk backend
        ttl: Time-to-live in seconds (None = backend default / never for disk)
        max_entries: Capacity of the memory backend
    """

    model_config = ConfigDict(frozen=True)

    type: CacheBackendType
    path: str = DISK_CACHE_DEFAULT_PATH
    ttl: int | None = Field(default=None, gt=0)
    max_entries: int = Field(default=MEMORY_CACHE_MAX_ENTRIES, gt=0)


class OptimizerConfig(BaseModel):
    """
    Configuration surface of an ImageOptimizer instance.

    Every field is optional; an empty OptimizerConfig is a working
    cache-less optimizer that accepts every output format.
    """

    model_config = ConfigDict(frozen=True)

    cache: CacheConfig | None = None
    formats: tuple[OutputFormat, ...] = tuple(OutputFormat)
    max_width: int | None = Field(default=None, gt=0, le=MAX_DIMENSION)
    max_height: int | None = Field(default=None, gt=0, le=MAX_DIMENSION)
    default_quality: int = Field(default=DEFAULT_QUALITY, ge=1, le=100)
    source_allowlist: tuple[str, ...] | None = None
    single_flight: bool = False
    fetch_timeout: float = Field(default=FETCH_TIMEOUT, gt=0)
    fetch_retry_limit: int = Field(default=FETCH_RETRY_LIMIT, ge=0)

    @property
    def cache_ttl(self) -> int | None:
        """TTL advertised in Cache-Control headers."""
        return self.cache.ttl if self.cache else None


# ============================================================================
# Environment settings (grouped views)
# ============================================================================


class CacheSettings(BaseSettings):
    """
    Cache backend configuration.

    STAGE-C: Cache backend selection
    """

    CACHE_BACKEND: Literal["memory", "disk", "redis", "none"] = Field(
        default="memory", description="Cache backend variant"
    )
    CACHE_PATH: str = Field(default=DISK_CACHE_DEFAULT_PATH, description="Disk cache directory")
    CACHE_TTL: int | None = Field(
        default=None, description="Cache TTL in seconds"
    )
    CACHE_MAX_ENTRIES: int = Field(
        default=MEMORY_CACHE_MAX_ENTRIES, description="Memory cache capacity"
    )
    REDIS_URL: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)

    @field_validator("CACHE_TTL", mode="before")
    @classmethod
    def blank_ttl_is_unset(cls, v):
        """An empty CACHE_TTL= means no TTL."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class OptimizerSettings(BaseSettings):
    """Transform request limits and defaults."""

    ALLOWED_FORMATS: list[OutputFormat] = Field(
        default=list(OutputFormat), description="Output formats the service may encode"
    )
    MAX_WIDTH: int | None = Field(default=None, description="Soft cap for requested width")
    MAX_HEIGHT: int | None = Field(default=None, description="Soft cap for requested height")
    DEFAULT_QUALITY: int = Field(default=DEFAULT_QUALITY, description="Encoder quality default")
    SOURCE_ALLOWLIST: list[str] | None = Field(
        default=None, description="Permitted source hostname suffixes"
    )
    SINGLE_FLIGHT: bool = Field(
        default=False, description="Share one computation between concurrent identical misses"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class FetchSettings(BaseSettings):
    """Remote source fetching."""

    FETCH_TIMEOUT: float = Field(default=FETCH_TIMEOUT, description="Per-attempt timeout (s)")
    FETCH_RETRY_LIMIT: int = Field(default=FETCH_RETRY_LIMIT, description="Extra fetch attempts")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """General application settings."""

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development", description="Application environment"
    )
    APP_NAME: str = Field(default="pixelcache", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    IMAGE_ROUTE_PATH: str = Field(default="/image", description="Mount path of the image route")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from pixelcache.core.config import get_settings

        settings = get_settings()
        backend = settings.cache.CACHE_BACKEND
        config = settings.to_optimizer_config()
    """

    # Cache settings
    CACHE_BACKEND: Literal["memory", "disk", "redis", "none"] = Field(
        default="memory", description="Cache backend variant"
    )
    CACHE_PATH: str = Field(default=DISK_CACHE_DEFAULT_PATH, description="Disk cache directory")
    CACHE_TTL: int | None = Field(
        default=None, description="Cache TTL in seconds"
    )
    CACHE_MAX_ENTRIES: int = Field(
        default=MEMORY_CACHE_MAX_ENTRIES, description="Memory cache capacity"
    )
    REDIS_URL: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")

    # Optimizer settings
    ALLOWED_FORMATS: list[OutputFormat] = Field(
        default=list(OutputFormat), description="Output formats the service may encode"
    )
    MAX_WIDTH: int | None = Field(default=None, description="Soft cap for requested width")
    MAX_HEIGHT: int | None = Field(default=None, description="Soft cap for requested height")
    DEFAULT_QUALITY: int = Field(default=DEFAULT_QUALITY, description="Encoder quality default")
    SOURCE_ALLOWLIST: list[str] | None = Field(
        default=None, description="Permitted source hostname suffixes"
    )
    SINGLE_FLIGHT: bool = Field(
        default=False, description="Share one computation between concurrent identical misses"
    )

    # Fetch settings
    FETCH_TIMEOUT: float = Field(default=FETCH_TIMEOUT, description="Per-attempt timeout (s)")
    FETCH_RETRY_LIMIT: int = Field(default=FETCH_RETRY_LIMIT, description="Extra fetch attempts")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development", description="Application environment"
    )
    APP_NAME: str = Field(default="pixelcache", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    IMAGE_ROUTE_PATH: str = Field(default="/image", description="Mount path of the image route")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    @field_validator("CACHE_TTL", mode="before")
    @classmethod
    def blank_ttl_is_unset(cls, v):
        """An empty CACHE_TTL= means no TTL."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("DEFAULT_QUALITY")
    @classmethod
    def validate_default_quality(cls, v):
        """Quality must be a valid encoder quality."""
        if not 1 <= v <= 100:
            raise ValueError("DEFAULT_QUALITY must be between 1 and 100")
        return v

    @field_validator("MAX_WIDTH", "MAX_HEIGHT")
    @classmethod
    def validate_max_dimension(cls, v):
        """Soft caps must themselves be legal dimensions."""
        if v is not None and not 0 < v <= MAX_DIMENSION:
            raise ValueError(f"maximum dimensions must be between 1 and {MAX_DIMENSION}")
        return v

    # Grouped views
    @property
    def cache(self) -> CacheSettings:
        """Get cache settings."""
        return CacheSettings(
            CACHE_BACKEND=self.CACHE_BACKEND,
            CACHE_PATH=self.CACHE_PATH,
            CACHE_TTL=self.CACHE_TTL,
            CACHE_MAX_ENTRIES=self.CACHE_MAX_ENTRIES,
            REDIS_URL=self.REDIS_URL,
        )

    @property
    def optimizer(self) -> OptimizerSettings:
        """Get optimizer settings."""
        return OptimizerSettings(
            ALLOWED_FORMATS=self.ALLOWED_FORMATS,
            MAX_WIDTH=self.MAX_WIDTH,
            MAX_HEIGHT=self.MAX_HEIGHT,
            DEFAULT_QUALITY=self.DEFAULT_QUALITY,
            SOURCE_ALLOWLIST=self.SOURCE_ALLOWLIST,
            SINGLE_FLIGHT=self.SINGLE_FLIGHT,
        )

    @property
    def fetch(self) -> FetchSettings:
        """Get fetch settings."""
        return FetchSettings(
            FETCH_TIMEOUT=self.FETCH_TIMEOUT,
            FETCH_RETRY_LIMIT=self.FETCH_RETRY_LIMIT,
        )

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def app(self) -> ApplicationSettings:
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
            IMAGE_ROUTE_PATH=self.IMAGE_ROUTE_PATH,
            CORS_ORIGINS=self.CORS_ORIGINS,
        )

    def to_optimizer_config(self) -> OptimizerConfig:
        """
        Build the programmatic configuration handed to ImageOptimizer.

        Returns:
            OptimizerConfig: frozen configuration (no cache when CACHE_BACKEND=none)
        """
        cache = None
        if self.CACHE_BACKEND != "none":
            cache = CacheConfig(
                type=CacheBackendType(self.CACHE_BACKEND),
                path=self.CACHE_PATH,
                ttl=self.CACHE_TTL,
                max_entries=self.CACHE_MAX_ENTRIES,
            )

        return OptimizerConfig(
            cache=cache,
            formats=tuple(self.ALLOWED_FORMATS),
            max_width=self.MAX_WIDTH,
            max_height=self.MAX_HEIGHT,
            default_quality=self.DEFAULT_QUALITY,
            source_allowlist=tuple(self.SOURCE_ALLOWLIST) if self.SOURCE_ALLOWLIST else None,
            single_flight=self.SINGLE_FLIGHT,
            fetch_timeout=self.FETCH_TIMEOUT,
            fetch_retry_limit=self.FETCH_RETRY_LIMIT,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
