"""
Application settings and configuration management
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from intentrelay.shared.constants.app import (
    PROJECT_NAME,
    VERSION,
    DEFAULT_PORT,
    HEALTH_CHECK_TIMEOUT,
    ENVIRONMENT_DEVELOPMENT,
    DEFAULT_IOS_APP_ID,
    DEFAULT_ANDROID_PACKAGE,
    DEFAULT_APP_SCHEME,
    DEFAULT_WEBSITE_URL,
)
from intentrelay.shared.constants.attribution import (
    INTENT_TTL_SECONDS,
    MATCH_THRESHOLD,
    STATS_TIMEOUT_SECONDS,
)
from intentrelay.shared.constants.redis import (
    DEFAULT_REDIS_PORT,
    DEFAULT_REDIS_DB,
    DEFAULT_REDIS_TLS,
)
from intentrelay.core.exceptions import (
    ConfigurationError,
    ConfigurationValidationError,
)

_ENV_CONFIG = SettingsConfigDict(
    env_file=[".env.local", ".env"],  # Try .env.local first, then .env
    env_file_encoding="utf-8",
    case_sensitive=False,
    extra="ignore",
)


class RedisSettings(BaseSettings):
    """Redis configuration settings"""

    model_config = _ENV_CONFIG

    REDIS_HOST: str = Field(default="localhost")
    REDIS_PORT: int = Field(default=DEFAULT_REDIS_PORT)
    REDIS_PASSWORD: str = Field(default="")
    REDIS_DB: int = Field(default=DEFAULT_REDIS_DB)
    REDIS_TLS: bool = Field(default=DEFAULT_REDIS_TLS)

    @field_validator("REDIS_HOST")
    @classmethod
    def validate_redis_host(cls, v):
        if not v:
            return "localhost"
        return v


class AttributionSettings(BaseSettings):
    """Matching policy for deferred deep links"""

    model_config = _ENV_CONFIG

    INTENT_TTL_SECONDS: int = Field(default=INTENT_TTL_SECONDS)
    MATCH_THRESHOLD: float = Field(default=MATCH_THRESHOLD)
    STATS_TIMEOUT_SECONDS: float = Field(default=STATS_TIMEOUT_SECONDS)


class PresentationSettings(BaseSettings):
    """App identifiers and URLs used by the redirect page"""

    model_config = _ENV_CONFIG

    IOS_APP_ID: str = Field(default=DEFAULT_IOS_APP_ID)
    ANDROID_PACKAGE: str = Field(default=DEFAULT_ANDROID_PACKAGE)
    APP_SCHEME: str = Field(default=DEFAULT_APP_SCHEME)
    WEBSITE_URL: str = Field(default=DEFAULT_WEBSITE_URL)

    @field_validator("WEBSITE_URL")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")


class LoggingSettings(BaseSettings):
    """Logging configuration settings"""

    model_config = _ENV_CONFIG

    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="console")

    # Handler overrides, e.g. {"file": {"enabled": true, "log_dir": "/var/log/intentrelay"}}
    LOGGING: dict = Field(default_factory=dict)


class Settings(BaseSettings):
    """Main application settings"""

    model_config = _ENV_CONFIG

    # App Configuration
    PROJECT_NAME: str = PROJECT_NAME
    VERSION: str = VERSION
    DEBUG: bool = Field(default=False)
    PORT: int = Field(default=DEFAULT_PORT)
    ENVIRONMENT: str = Field(default=ENVIRONMENT_DEVELOPMENT)

    # Sub-settings
    redis: RedisSettings = Field(default_factory=RedisSettings)
    attribution: AttributionSettings = Field(default_factory=AttributionSettings)
    presentation: PresentationSettings = Field(default_factory=PresentationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Health Check Configuration
    HEALTH_CHECK_TIMEOUT: int = Field(default=HEALTH_CHECK_TIMEOUT)

    # CORS Configuration
    CORS_ORIGINS: List[str] = Field(default=["*"])

    def validate_configuration(self) -> None:
        """Validate the complete configuration"""
        errors = []

        if self.attribution.INTENT_TTL_SECONDS <= 0:
            errors.append("INTENT_TTL_SECONDS must be positive")
        if not 0.0 <= self.attribution.MATCH_THRESHOLD <= 1.0:
            errors.append("MATCH_THRESHOLD must be within [0, 1]")
        if self.attribution.STATS_TIMEOUT_SECONDS <= 0:
            errors.append("STATS_TIMEOUT_SECONDS must be positive")
        if not self.presentation.APP_SCHEME:
            errors.append("APP_SCHEME must not be empty")

        if errors:
            raise ConfigurationValidationError(
                "Configuration validation failed", validation_errors=errors
            )


# Create settings instance
settings = Settings()

# Validate configuration on import
try:
    settings.validate_configuration()
except ConfigurationError as e:
    print(f"Configuration Error: {e}")
    raise
