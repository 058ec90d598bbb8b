"""
Keyed Cache — Metadata Module

Declaration markers for cacheable types and the resolver that reads them.
"""

from .declarations import (
    CacheKey,
    KeyField,
    TypeDescriptor,
    cacheable,
    key_field,
    register,
    registered_types,
)
from .resolver import collection_name, describe, is_cacheable, key_value

__all__ = [
    # Declarations
    "CacheKey",
    "KeyField",
    "TypeDescriptor",
    "cacheable",
    "key_field",
    "register",
    "registered_types",
    # Resolution
    "collection_name",
    "describe",
    "is_cacheable",
    "key_value",
]
