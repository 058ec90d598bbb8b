"""
Keyed Cache — Connection Provider Factory

Registry of named connection providers, so that every cache facade of a
process shares the same pooled clients.

Examples:
    from keyed_cache.connection import create_connection_provider, get_connection_provider

    # Uses REDIS_URL and friends from the environment
    provider = create_connection_provider()

    # Or explicitly supply settings (e.g., for tests)
    from keyed_cache.config import RedisSettings
    provider = create_connection_provider(RedisSettings(url="redis://cache:6379"), name="sessions")
"""

from __future__ import annotations

import logging

from ..config import RedisSettings, get_config
from ..errors import ConfigurationError
from .interface import ConnectionProvider

logger = logging.getLogger(__name__)

# Global provider registry
_providers: dict[str, ConnectionProvider] = {}


def _create_redis_provider(settings: RedisSettings) -> ConnectionProvider:
    """Internal helper to construct a Redis provider with lazy import."""
    try:
        from .redis import RedisConnectionProvider
    except ImportError as e:
        logger.error(
            "Redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis client is unavailable. Install with: pip install 'redis>=5.0.0'",
            details={"package": "redis>=5.0.0", "error": str(e)},
        ) from e

    return RedisConnectionProvider(
        redis_url=settings.url,
        max_connections=settings.max_connections,
        socket_timeout=settings.socket_timeout,
    )


def register_connection_provider(provider: ConnectionProvider, name: str = "default") -> ConnectionProvider:
    """
    Register an existing provider under ``name``.

    Replaces any provider previously registered under that name without
    closing it.
    """
    _providers[name] = provider
    logger.debug("Registered connection provider '%s'", name, extra={"provider_name": name})
    return provider


def create_connection_provider(
    settings: RedisSettings | None = None,
    name: str = "default",
) -> ConnectionProvider:
    """
    Create (or return the existing) connection provider named ``name``.

    Args:
        settings: Redis settings (uses global config if not provided)
        name: Provider name

    Returns:
        Connection provider

    Raises:
        ConfigurationError: If the provider cannot be created
    """
    if name in _providers:
        logger.debug("Returning existing connection provider: %s", name)
        return _providers[name]

    if settings is None:
        settings = get_config().redis

    logger.info(
        "Creating connection provider '%s'",
        name,
        extra={"provider_name": name, "max_connections": settings.max_connections},
    )

    try:
        provider = _create_redis_provider(settings)
    except ConfigurationError:
        raise
    except ValueError as e:
        logger.error(
            "Failed to create connection provider '%s': %s",
            name,
            e,
            extra={"provider_name": name, "error": str(e)},
            exc_info=True,
        )
        raise ConfigurationError(
            f"Failed to create connection provider '{name}': {e}",
            details={"provider_name": name, "error": str(e)},
        ) from e

    _providers[name] = provider
    return provider


def get_connection_provider(name: str = "default") -> ConnectionProvider | None:
    """
    Get a registered connection provider by name.

    Returns:
        The provider, or None when nothing is registered under ``name``
    """
    return _providers.get(name)


def list_connection_providers() -> list[str]:
    """List all registered provider names."""
    return list(_providers.keys())


async def close_all_providers() -> None:
    """
    Close all registered providers and clear the registry.

    Must be called during graceful shutdown.
    """
    if not _providers:
        logger.debug("No connection providers to close")
        return

    logger.info("Closing %d connection provider(s)...", len(_providers))

    for name, provider in list(_providers.items()):
        try:
            await provider.close()
            logger.info("Closed connection provider: %s", name)
        except Exception as e:
            logger.error(
                "Error closing connection provider '%s': %s",
                name,
                e,
                extra={"provider_name": name, "error": str(e)},
                exc_info=True,
            )

    _providers.clear()


def reset_connection_registry() -> None:
    """
    Clear all provider references without closing them.

    Warning: Only use this in testing contexts.
    """
    count = len(_providers)
    _providers.clear()
    logger.debug("Reset connection registry, cleared %d provider reference(s)", count)
