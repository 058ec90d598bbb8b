"""
Keyed Cache — Redis Connection Provider

Hands out one pooled asyncio Redis client per database index.

Clients are created lazily; redis-py only connects on the first command, so
obtaining a handle never performs network I/O.

Requires: redis>=5 with asyncio support

Example:
    provider = RedisConnectionProvider(redis_url="redis://localhost:6379")
    database = provider.get_database(2)
    await database.set("Shop:Order:42", "{}", px=5000)
"""

from __future__ import annotations

import logging
import threading

from .interface import ConnectionProvider

logger = logging.getLogger(__name__)

try:
    # redis-py asyncio client (v4+)
    from redis.asyncio import Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e


class RedisConnectionProvider(ConnectionProvider):
    """
    Connection provider backed by redis-py asyncio clients.

    Notes:
    - Each database index gets its own client and connection pool.
    - Values are returned as str (decode_responses=True).
    - A database number in the URL path takes precedence over the index
      passed to get_database(), so the URL should not carry one.
    """

    def __init__(
        self,
        redis_url: str,
        max_connections: int = 10,
        socket_timeout: int = 5,
        decode_responses: bool = True,
    ) -> None:
        """
        Initialize the provider.

        Args:
            redis_url: Connection URL, e.g., redis://localhost:6379 or rediss:// for TLS
            max_connections: Connection pool size per database
            socket_timeout: Socket timeout in seconds
            decode_responses: If True, values returned as str, not bytes
        """
        if not redis_url:
            raise ValueError("redis_url is required")

        self.redis_url = redis_url
        self.max_connections = max_connections
        self.socket_timeout = socket_timeout
        self.decode_responses = decode_responses

        self._databases: dict[int, Redis] = {}
        self._lock = threading.Lock()

    def get_database(self, index: int) -> Redis | None:
        """Return the client bound to ``index``, creating it on first use."""
        if index < 0:
            logger.warning("Rejected negative Redis database index %d", index, extra={"database": index})
            return None

        with self._lock:
            client = self._databases.get(index)
            if client is None:
                try:
                    client = Redis.from_url(  # type: ignore[call-overload]
                        url=self.redis_url,
                        db=index,
                        decode_responses=self.decode_responses,
                        max_connections=self.max_connections,
                        socket_timeout=self.socket_timeout,
                    )
                except ValueError as e:
                    logger.error(
                        "Failed to create Redis client for database %d: %s",
                        index,
                        e,
                        extra={"database": index, "error": str(e)},
                    )
                    return None
                self._databases[index] = client
                logger.debug("Created Redis client for database %d", index, extra={"database": index})
            return client

    @property
    def databases(self) -> list[int]:
        """Database indexes with an open client."""
        return sorted(self._databases)

    async def close(self) -> None:
        """Close every Redis client and release its pool."""
        with self._lock:
            clients = list(self._databases.items())
            self._databases.clear()

        for index, client in clients:
            try:
                await client.aclose()
                logger.info("Closed Redis client for database %d", index)
            except Exception as e:
                logger.error(
                    "Error closing Redis client for database %d: %s",
                    index,
                    e,
                    extra={"database": index, "error": str(e)},
                    exc_info=True,
                )
