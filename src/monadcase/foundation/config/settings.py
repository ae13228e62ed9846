"""Settings for the composition engine, read from MONADCASE_* variables.

Each concern (logging, distributions, transformers) is its own settings
class with its own prefix; the root settings nests them and also reads a
local .env file.

Example:
    >>> from monadcase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.distribution.exact
    True
    >>> settings.logging.level
    'WARNING'

    # Overridden through the environment:
    # MONADCASE_DIST_EXACT=false
    # MONADCASE_LOG_LEVEL=DEBUG
    # MONADCASE_TRANSFORMER_ZERO_POLICY=own
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, PositiveFloat, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PolicyName = Literal["auto", "base", "own"]


class LoggingSettings(BaseSettings):
    """Level, output format and colouring of the structured logger."""

    model_config = SettingsConfigDict(
        env_prefix="MONADCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force colored console output (None = auto)")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class DistributionSettings(BaseSettings):
    """Finite-distribution arithmetic."""

    model_config = SettingsConfigDict(
        env_prefix="MONADCASE_DIST_",
        extra="ignore",
    )

    exact: bool = Field(default=True, description="Build weights as Fractions rather than floats")
    tolerance: PositiveFloat = Field(default=1e-9, description="Allowed drift from 1 for float weights")


class TransformerSettings(BaseSettings):
    """Default zero/plus resolution for transformers when callers pass no policy."""

    model_config = SettingsConfigDict(
        env_prefix="MONADCASE_TRANSFORMER_",
        extra="ignore",
    )

    zero_policy: PolicyName = "auto"
    plus_policy: PolicyName = "auto"


class MonadcaseSettings(BaseSettings):
    """Root settings for monadcase.

    Nested sections can also be set through the root prefix with a
    double underscore, e.g. MONADCASE_DISTRIBUTION__EXACT=false.

    Variables:
        MONADCASE_DEBUG=true
        MONADCASE_LOG_FORMAT=json
        MONADCASE_DIST_EXACT=false
        MONADCASE_TRANSFORMER_PLUS_POLICY=own
    """

    model_config = SettingsConfigDict(
        env_prefix="MONADCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug logging regardless of log level")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    distribution: DistributionSettings = Field(default_factory=DistributionSettings)
    transformer: TransformerSettings = Field(default_factory=TransformerSettings)

    @computed_field
    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug override."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> MonadcaseSettings:
    """Get the global settings instance (cached)."""
    return MonadcaseSettings()


def clear_settings_cache() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
