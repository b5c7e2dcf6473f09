"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from shared.config import settings

    print(settings.environment)
    print(settings.cost_estimation.ai_enabled)
"""

from shared.config.settings import (
    CacheBackend,
    CostEstimationSettings,
    Environment,
    LLMProvider,
    LogLevel,
    Settings,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
    "LLMProvider",
    "CacheBackend",
    "CostEstimationSettings",
]
