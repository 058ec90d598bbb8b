"""
Keyed Cache

Metadata-driven cache keys and JSON values for objects stored in Redis.

Usage:
    from dataclasses import dataclass
    from typing import Annotated

    from keyed_cache import CacheFacade, CacheKey, CacheOptions, cacheable
    from keyed_cache.connection import create_connection_provider

    @cacheable(store_as="Order")
    @dataclass
    class PurchaseOrder:
        number: Annotated[str, CacheKey]
        total: float = 0.0

    facade = CacheFacade(create_connection_provider(), CacheOptions(domain="Shop"))
    facade.item_key(PurchaseOrder("42"))        # "Shop:Order:42"
    facade.item_key_for(PurchaseOrder, "42")    # "Shop:Order:42"
"""

from .cache import RecordCache
from .config import CacheOptions, SerializerSettings
from .errors import (
    ConfigurationError,
    ErrorCode,
    KeyedCacheError,
    SerializationError,
    StoreUnavailableError,
)
from .facade import CacheFacade, CacheFacadeProtocol, CacheItem
from .keys import SEPARATOR, compose, compose_for_instance, compose_for_type, key_prefix
from .metadata import (
    CacheKey,
    KeyField,
    TypeDescriptor,
    cacheable,
    collection_name,
    describe,
    is_cacheable,
    key_field,
    key_value,
    register,
)

__version__ = "1.0.0"

__all__ = [
    # Declarations
    "cacheable",
    "register",
    "key_field",
    "KeyField",
    "CacheKey",
    "TypeDescriptor",
    # Resolution
    "collection_name",
    "key_value",
    "describe",
    "is_cacheable",
    # Keys
    "SEPARATOR",
    "compose",
    "compose_for_type",
    "compose_for_instance",
    "key_prefix",
    # Facade
    "CacheFacade",
    "CacheFacadeProtocol",
    "CacheItem",
    "RecordCache",
    # Configuration
    "CacheOptions",
    "SerializerSettings",
    # Errors
    "KeyedCacheError",
    "ConfigurationError",
    "StoreUnavailableError",
    "SerializationError",
    "ErrorCode",
]
