"""
Keyed Cache — Connection Provider Interface

Defines the capability a cache facade needs from the outside world: a store
handle for a database index.
"""

from abc import ABC, abstractmethod
from typing import Any


class ConnectionProvider(ABC):
    """
    Abstract base class for store connection providers.

    Providers own the connections they hand out; facades only borrow them.
    """

    @abstractmethod
    def get_database(self, index: int) -> Any | None:
        """
        Return a store handle for a database index.

        Args:
            index: Database index

        Returns:
            A ready-to-use, pooled store handle, or None if unavailable
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """
        Close every handle created by this provider.

        Should be called during graceful shutdown.
        """
        pass
