"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    DistributionSettings,
    LoggingSettings,
    MonadcaseSettings,
    PolicyName,
    TransformerSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "DistributionSettings",
    "LoggingSettings",
    "MonadcaseSettings",
    "PolicyName",
    "TransformerSettings",
    "clear_settings_cache",
    "get_settings",
]
