"""
Keyed Cache — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    DEFAULT_DATABASE,
    DEFAULT_EXPIRATION_MS,
    CacheOptions,
    KeyedCacheConfig,
    LogLevel,
    RedisSettings,
    SerializerSettings,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Main config
    "KeyedCacheConfig",
    # Enums
    "LogLevel",
    # Config sections
    "CacheOptions",
    "RedisSettings",
    "SerializerSettings",
    # Defaults
    "DEFAULT_DATABASE",
    "DEFAULT_EXPIRATION_MS",
]
