"""
Keyed Cache — Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the process.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import DEFAULT_DATABASE, DEFAULT_EXPIRATION_MS, KeyedCacheConfig

logger = logging.getLogger(__name__)

_config_instance: KeyedCacheConfig | None = None


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> KeyedCacheConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated KeyedCacheConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info("Loading environment from %s", env_path)
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                "Failed to load .env file from %s: %s",
                env_path,
                e,
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    try:
        config_dict = {
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "cache": {
                "domain": os.getenv("KEYED_CACHE_DOMAIN") or None,
                "database": int(os.getenv("KEYED_CACHE_DATABASE", str(DEFAULT_DATABASE))),
                "expiration": int(os.getenv("KEYED_CACHE_EXPIRATION_MS", str(DEFAULT_EXPIRATION_MS))),
                "serializer": {
                    "exclude_none": os.getenv("KEYED_CACHE_EXCLUDE_NONE", "true").lower() == "true",
                },
            },
            "redis": {
                "url": os.getenv("REDIS_URL", "redis://localhost:6379"),
                "max_connections": int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
                "socket_timeout": int(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            },
        }
    except ValueError as e:
        logger.error("Invalid numeric environment value: %s", e, extra={"error": str(e)})
        raise ConfigurationError(
            f"Invalid numeric environment value: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = KeyedCacheConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            "Configuration loaded successfully (domain: %s, database: %d)",
            _config_instance.cache.domain,
            _config_instance.cache.database,
            extra={"domain": _config_instance.cache.domain, "database": _config_instance.cache.database},
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            "Configuration validation failed: %s",
            e,
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
            exc_info=True,
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> KeyedCacheConfig:
    """
    Get the current configuration instance.

    Loads the configuration on first access.

    Returns:
        Current KeyedCacheConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> KeyedCacheConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded KeyedCacheConfig instance
    """
    return load_config(env_file=env_file, reload=True)


def reset_config() -> None:
    """Drop the cached configuration instance. Used by tests."""
    global _config_instance
    _config_instance = None
