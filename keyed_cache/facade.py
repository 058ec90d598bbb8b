"""
Keyed Cache — Cache Facade

Binds a store handle and cache options to key and value derivation.

The facade never reads or writes the store. Concrete caches compose a
facade, take ``(key, value)`` pairs from it and apply whatever storage
semantics they need through ``facade.database``:

    class UserCache:
        def __init__(self, facade: CacheFacade) -> None:
            self.facade = facade

        async def save(self, user: User) -> None:
            item = self.facade.get_key_value_pair(user)
            await self.facade.database.set(item.key, item.value, px=self.facade.expiration)
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple, Protocol, TypeVar, runtime_checkable

from . import keys, serialization
from .config.schemas import CacheOptions, SerializerSettings
from .connection.interface import ConnectionProvider
from .errors import StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheItem(NamedTuple):
    """Derived cache key and serialized value of one object."""

    key: str
    value: str


@runtime_checkable
class CacheFacadeProtocol(Protocol):
    """Narrow interface concrete caches depend on."""

    @property
    def database(self) -> Any: ...

    def item_key(self, obj: Any) -> str: ...

    def item_key_for(self, cls: type, id: str) -> str: ...

    @property
    def expiration(self) -> int: ...

    def get_key_value_pair(self, obj: Any) -> CacheItem: ...

    def load_value(self, cls: type[T], data: str | bytes) -> T: ...


class CacheFacade:
    """
    Key and value derivation over one Redis database.

    Instances are immutable after construction and can be shared between
    threads and tasks.
    """

    __slots__ = ("_database", "_options")

    def __init__(
        self,
        provider: ConnectionProvider | None,
        options: CacheOptions | None = None,
    ) -> None:
        """
        Initialize the facade.

        Args:
            provider: Connection provider yielding the store handle
            options: Cache options (defaults when omitted)

        Raises:
            StoreUnavailableError: If there is no provider, or it fails or
                yields no handle for ``options.database``
        """
        options = options or CacheOptions()

        if provider is None:
            raise StoreUnavailableError(details={"reason": "no connection provider"})

        try:
            database = provider.get_database(options.database)
        except Exception as e:
            raise StoreUnavailableError(
                details={"reason": "provider failed", "database": options.database, "error": str(e)}
            ) from e
        if database is None:
            raise StoreUnavailableError(details={"reason": "no database handle", "database": options.database})

        self._options = options
        self._database = database

        logger.debug(
            "Cache facade ready (domain: %s, database: %d)",
            options.domain,
            options.database,
            extra={"domain": options.domain, "database": options.database},
        )

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def domain(self) -> str | None:
        """Key prefix shared by every key of this facade."""
        return self._options.domain

    @property
    def expiration(self) -> int:
        """Default item expiration in milliseconds; applied by concrete caches, not here."""
        return self._options.expiration

    @property
    def serializer_settings(self) -> SerializerSettings:
        return self._options.serializer

    @property
    def database(self) -> Any:
        """Store handle for concrete cache operations."""
        return self._database

    def item_key_for(self, cls: type, id: str) -> str:
        """
        Key of the item ``id`` of type ``cls``.

        Returns:
            ``Domain:Collection:id``
        """
        return keys.compose_for_type(self.domain, cls, id)

    def item_key(self, obj: Any) -> str:
        """
        Key of ``obj`` from its declared collection name and key fields.

        Raises:
            ConfigurationError: If the key fields of ``obj`` resolve to nothing
        """
        return keys.compose_for_instance(self.domain, obj)

    def get_key_value_pair(self, obj: Any) -> CacheItem:
        """
        Derive the cache key and JSON value of ``obj``.

        Raises:
            ConfigurationError: If the key fields of ``obj`` resolve to nothing
            SerializationError: If ``obj`` cannot be serialized
        """
        value = serialization.dumps(obj, self.serializer_settings)
        return CacheItem(key=self.item_key(obj), value=value)

    def load_value(self, cls: type[T], data: str | bytes) -> T:
        """
        Rebuild an object of type ``cls`` from a value produced by ``get_key_value_pair``.

        Raises:
            SerializationError: If ``data`` does not match ``cls``
        """
        return serialization.loads(cls, data)

    def __repr__(self) -> str:
        return f"CacheFacade(domain={self.domain!r}, database={self._options.database})"
