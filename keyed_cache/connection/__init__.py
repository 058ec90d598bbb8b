"""
Keyed Cache — Connection Module

Store connection providers and their process-wide registry.

Redis provider is lazy-loaded via factory.py to avoid import overhead.
"""

from .factory import (
    close_all_providers,
    create_connection_provider,
    get_connection_provider,
    list_connection_providers,
    register_connection_provider,
    reset_connection_registry,
)
from .interface import ConnectionProvider

__all__ = [
    # Factory functions
    "create_connection_provider",
    "get_connection_provider",
    "register_connection_provider",
    "list_connection_providers",
    "close_all_providers",
    "reset_connection_registry",
    # Interface
    "ConnectionProvider",
]
