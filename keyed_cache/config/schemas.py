"""
Keyed Cache — Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
Every model is frozen: a facade owns its options and nothing mutates them
after construction.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Default database index on the Redis server
DEFAULT_DATABASE = 0

# Default item expiration in milliseconds
DEFAULT_EXPIRATION_MS = 5 * 1000


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SerializerSettings(BaseModel):
    """
    JSON serializer settings used for cached values.

    Output is always locale-independent: numbers use "." as decimal mark and
    datetimes are written as ISO-8601.
    """

    exclude_none: bool = Field(default=True, description="Omit fields whose value is None")
    by_alias: bool = Field(default=False, description="Use field aliases as JSON property names")
    indent: int | None = Field(default=None, ge=0, description="Indentation for pretty output (None = compact)")

    model_config = ConfigDict(frozen=True)


class CacheOptions(BaseModel):
    """Options for a single cache facade."""

    domain: str | None = Field(
        default=None,
        description="Prefix for every key produced by the facade (blank = no prefix)",
    )
    database: int = Field(default=DEFAULT_DATABASE, ge=0, description="Redis database index")
    expiration: int = Field(
        default=DEFAULT_EXPIRATION_MS,
        ge=0,
        description="Default item expiration in milliseconds (0 = no expiry)",
    )
    serializer: SerializerSettings = Field(default_factory=SerializerSettings)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.model_dump_json(indent=2)


class RedisSettings(BaseModel):
    """Connection settings for the Redis connection provider."""

    url: str = Field(default="redis://localhost:6379", description="Redis connection URL")
    max_connections: int = Field(default=10, ge=1, description="Connection pool size per database")
    socket_timeout: int = Field(default=5, ge=1, description="Socket timeout in seconds")

    model_config = ConfigDict(frozen=True)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only redis://, rediss:// and unix:// URLs are accepted by redis-py."""
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("Redis URL must start with redis://, rediss:// or unix://")
        return v


class KeyedCacheConfig(BaseModel):
    """Root configuration for the keyed cache package."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    cache: CacheOptions = Field(default_factory=CacheOptions)
    redis: RedisSettings = Field(default_factory=RedisSettings)

    model_config = ConfigDict(use_enum_values=True, frozen=True)
