"""
Keyed Cache - Core Error Types

Defines the exception hierarchy for the keyed cache package.
All exceptions inherit from KeyedCacheError for consistent error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for structured error responses.

    Used by callers that need to map failures onto their own reporting.
    """

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class KeyedCacheError(Exception):
    """Base exception for all keyed cache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(KeyedCacheError):
    """
    Raised when configuration or type metadata is invalid.

    The most common cause is an instance whose key fields resolve to an
    empty value, which can only be fixed in the type's declarations.
    """

    def __init__(
        self,
        message: str = "Cache: Object key cannot be null",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class StoreUnavailableError(KeyedCacheError):
    """Raised when no usable store connection or database handle can be obtained."""

    def __init__(
        self,
        message: str = "Cannot find Redis Cache Service",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class SerializationError(KeyedCacheError):
    """Raised when a value cannot be converted to or from its JSON form."""

    def __init__(
        self,
        message: str = "Cache: Object value cannot be serialized",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


def make_error_response(
    error_code: ErrorCode,
    message: str,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        error_code: Standard error code
        message: Human-readable error message
        context: Additional context/details

    Returns:
        Standardized error response dictionary

    Example:
        >>> make_error_response(
        ...     ErrorCode.CONFIGURATION_ERROR,
        ...     "Cache: Object key cannot be null",
        ...     {"type": "Order"}
        ... )
        {
            "success": False,
            "error_code": "CONFIGURATION_ERROR",
            "message": "Cache: Object key cannot be null",
            "details": {"type": "Order"}
        }
    """
    return {
        "success": False,
        "error_code": error_code.value,
        "message": message,
        "details": context or {},
    }


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, StoreUnavailableError):
        return ErrorCode.STORE_UNAVAILABLE

    if isinstance(error, SerializationError):
        return ErrorCode.SERIALIZATION_ERROR

    if isinstance(error, ConfigurationError):
        return ErrorCode.CONFIGURATION_ERROR

    return ErrorCode.INTERNAL_ERROR
