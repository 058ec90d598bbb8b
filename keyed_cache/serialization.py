"""
Keyed Cache — Value Serialization

JSON serialization of cached values using Pydantic.

Dataclasses, pydantic models, TypedDicts and builtin containers go through a
``TypeAdapter`` of their own type, so loading a value back with the same
settings yields an equal object. Plain classes fall back to their public
instance attributes and are rebuilt through their constructor, with each
argument validated against its annotation.
"""

from __future__ import annotations

import threading
import typing
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError
from pydantic_core import PydanticSerializationError, from_json, to_json

from .config.schemas import SerializerSettings
from .errors import SerializationError

T = TypeVar("T")

# None marks types pydantic cannot build a schema for
_adapters: dict[Any, TypeAdapter[Any] | None] = {}
_adapters_lock = threading.Lock()


def _adapter(cls: Any) -> TypeAdapter[Any] | None:
    try:
        return _adapters[cls]
    except KeyError:
        pass
    try:
        adapter: TypeAdapter[Any] | None = TypeAdapter(cls)
    except PydanticSchemaGenerationError:
        adapter = None
    with _adapters_lock:
        _adapters[cls] = adapter
    return adapter


def _public_attributes(value: Any, settings: SerializerSettings) -> dict[str, Any]:
    try:
        attributes = vars(value)
    except TypeError as e:
        raise SerializationError(
            f"Cannot serialize value of type {type(value).__name__}",
            details={"type": type(value).__name__, "error": str(e)},
        ) from e
    return {
        name: attr
        for name, attr in attributes.items()
        if not name.startswith("_") and not (settings.exclude_none and attr is None)
    }


def _constructor_arguments(cls: type, payload: dict[str, Any]) -> dict[str, Any]:
    """Validate JSON values against the annotated parameters of ``cls.__init__``."""
    try:
        hints = typing.get_type_hints(cls.__init__)
    except NameError:
        hints = {}
    arguments = {}
    for name, value in payload.items():
        adapter = _adapter(hints[name]) if name in hints else None
        arguments[name] = adapter.validate_python(value) if adapter is not None else value
    return arguments


def dumps(value: Any, settings: SerializerSettings | None = None) -> str:
    """
    Serialize a value to JSON text.

    Args:
        value: Object to serialize
        settings: Serializer settings (defaults when omitted)

    Returns:
        JSON text

    Raises:
        SerializationError: If the value cannot be serialized
    """
    settings = settings or SerializerSettings()
    adapter = _adapter(type(value))
    try:
        if adapter is not None:
            data = adapter.dump_json(
                value,
                exclude_none=settings.exclude_none,
                by_alias=settings.by_alias,
                indent=settings.indent,
            )
        else:
            data = to_json(
                _public_attributes(value, settings),
                indent=settings.indent,
            )
    except (PydanticSerializationError, ValueError, TypeError) as e:
        raise SerializationError(
            f"Failed to serialize value of type {type(value).__name__}: {e}",
            details={"type": type(value).__name__, "error": str(e)},
        ) from e
    return data.decode("utf-8")


def loads(cls: type[T], data: str | bytes) -> T:
    """
    Deserialize JSON text produced by ``dumps`` into an instance of ``cls``.

    Raises:
        SerializationError: If the text is not valid JSON for ``cls``
    """
    adapter = _adapter(cls)
    try:
        if adapter is not None:
            return adapter.validate_json(data)
        payload = from_json(data)
        if not isinstance(payload, dict):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
        return cls(**_constructor_arguments(cls, payload))
    except (ValidationError, ValueError, TypeError) as e:
        raise SerializationError(
            f"Failed to deserialize {cls.__name__}: {e}",
            details={"type": cls.__name__, "error": str(e)},
        ) from e
