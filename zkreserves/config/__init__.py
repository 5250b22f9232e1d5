"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from zkreserves.config import settings

    print(settings.environment)
    print(settings.registry.mode)
"""

from zkreserves.config.settings import (
    Settings,
    get_settings,
    Environment,
    LogLevel,
    RegistryMode,
    HashSettings,
    ProverSettings,
    RegistrySettings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
    "RegistryMode",
    "HashSettings",
    "ProverSettings",
    "RegistrySettings",
]
