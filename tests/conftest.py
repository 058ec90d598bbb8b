"""
Keyed Cache — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from redis.asyncio import Redis

from keyed_cache.connection.interface import ConnectionProvider

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture
def test_redis_url() -> str:
    """Redis URL for testing, without a database path."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379")


@pytest.fixture
def test_redis_database() -> int:
    """Database 15 keeps test data isolated."""
    return 15


@pytest_asyncio.fixture
async def redis_client(test_redis_url: str, test_redis_database: int) -> AsyncGenerator[Redis, None]:
    """
    Create a Redis client for testing.

    Automatically skips tests if Redis is not available.
    Clears the test database before and after each test.
    """
    client: Redis = Redis.from_url(test_redis_url, db=test_redis_database, decode_responses=True)

    try:
        await client.ping()
    except Exception as e:
        await client.aclose()
        pytest.skip(f"Redis not available for testing: {e}")

    await client.flushdb()

    yield client

    try:
        await client.flushdb()
    finally:
        await client.aclose()


@pytest.fixture
def database() -> AsyncMock:
    """Stand-in for a redis.asyncio.Redis handle."""
    handle = AsyncMock()
    handle.set.return_value = True
    handle.get.return_value = None
    handle.exists.return_value = 0
    handle.delete.return_value = 0
    return handle


@pytest.fixture
def provider(database: AsyncMock) -> MagicMock:
    """Connection provider yielding the mocked database for every index."""
    mock = MagicMock(spec=ConnectionProvider)
    mock.get_database.return_value = database
    return mock


@pytest.fixture
def mock_env_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for a domain-prefixed cache."""
    monkeypatch.setenv("KEYED_CACHE_DOMAIN", "Shop")
    monkeypatch.setenv("KEYED_CACHE_DATABASE", "2")
    monkeypatch.setenv("KEYED_CACHE_EXPIRATION_MS", "60000")
    monkeypatch.setenv("KEYED_CACHE_EXCLUDE_NONE", "false")
    monkeypatch.setenv("REDIS_URL", "redis://cache.internal:6380")
    monkeypatch.setenv("REDIS_MAX_CONNECTIONS", "5")
    monkeypatch.setenv("REDIS_SOCKET_TIMEOUT", "2")


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    """Sample data for serialization tests."""
    return {
        "simple_string": "hello",
        "simple_int": 42,
        "simple_float": 3.14,
        "simple_bool": True,
        "complex_dict": {
            "nested": {
                "key": "value",
                "number": 123,
                "list": [1, 2, 3],
            }
        },
        "complex_list": [
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
        ],
    }


@pytest.fixture(autouse=True)
def reset_registries() -> Generator[None, None, None]:
    """Reset provider registry and cached config after each test to prevent state leakage."""
    yield
    from keyed_cache.config import reset_config
    from keyed_cache.connection import reset_connection_registry

    reset_connection_registry()
    reset_config()
