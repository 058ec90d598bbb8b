"""
Keyed Cache — Observability Module

Structured JSON logging for the package.

Usage:
    from keyed_cache.observability import configure_logging

    configure_logging("DEBUG")
"""

from .logs import JSONFormatter, configure_logging

__all__ = [
    "JSONFormatter",
    "configure_logging",
]
