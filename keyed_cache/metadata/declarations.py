"""
Keyed Cache — Metadata Declarations

Declaration surface for cacheable types. A type is registered exactly once,
when its class body is decorated, and the resulting TypeDescriptor is looked
up by the resolver afterwards; nothing is introspected at key-derivation time.

Key fields come from an explicit ``keys=("a", "b")`` tuple on the decorator
when given, otherwise from field markers:
- ``Annotated[T, CacheKey]`` on a dataclass, pydantic model or annotated class
- ``key_field()`` in place of ``dataclasses.field()``
- ``KeyField()`` in place of ``pydantic.Field()``

Example:
    @cacheable(store_as="Order")
    @dataclass
    class PurchaseOrder:
        region: Annotated[str, CacheKey]
        number: Annotated[int, CacheKey]
        total: float = 0.0
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
import threading
import typing
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, Field
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from ..errors import ConfigurationError

T = TypeVar("T", bound=type)

# dataclasses.field metadata key marking a key contributor
KEY_FIELD_METADATA = "keyed_cache.key"


class _CacheKeyMarker:
    """Annotated metadata marking an attribute as a key contributor."""

    def __repr__(self) -> str:
        return "CacheKey"


CacheKey = _CacheKeyMarker()


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Declared cache metadata of one type.

    Attributes:
        type_name: Name of the class, used as collection name without override
        store_as: Explicit collection name override
        key_fields: Attribute names contributing to the key, in declared order
    """

    type_name: str
    store_as: str | None = None
    key_fields: tuple[str, ...] = ()

    @property
    def collection_name(self) -> str:
        if self.store_as is None or not self.store_as.strip():
            return self.type_name
        return self.store_as


_registry: dict[type, TypeDescriptor] = {}
_registry_lock = threading.Lock()


def key_field(**kwargs: Any) -> Any:
    """
    Declare a dataclass field as a key contributor.

    Accepts the same keyword arguments as ``dataclasses.field``.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[KEY_FIELD_METADATA] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def KeyField(default: Any = PydanticUndefined, **kwargs: Any) -> Any:
    """
    Declare a pydantic model field as a key contributor.

    Accepts the same arguments as ``pydantic.Field``; the field is tagged
    through ``json_schema_extra``.
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[KEY_FIELD_METADATA] = True
    return Field(default, json_schema_extra=extra, **kwargs)


def _is_marked(hint: Any) -> bool:
    return typing.get_origin(hint) is typing.Annotated and any(m is CacheKey for m in hint.__metadata__)


def _is_tagged(info: FieldInfo) -> bool:
    extra = info.json_schema_extra
    return isinstance(extra, dict) and bool(extra.get(KEY_FIELD_METADATA))


def _evaluate(owner: type, annotation: Any) -> Any:
    """Evaluate a string annotation of ``owner``; None when it names something not defined yet."""
    if not isinstance(annotation, str):
        return annotation
    module = sys.modules.get(owner.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    try:
        return eval(annotation, globalns, dict(vars(owner)))
    except (NameError, AttributeError):
        return None


def _type_hints(cls: type) -> dict[str, Any]:
    """
    Annotations of ``cls`` and its bases, with ``Annotated`` extras kept.

    Annotations naming a class that is not defined yet (forward references)
    resolve to None instead of failing the whole class.
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError:
        pass
    except TypeError as e:
        raise ConfigurationError(
            f"Cannot resolve annotations of {cls.__name__}: {e}",
            details={"type": cls.__name__, "error": str(e)},
        ) from e

    hints: dict[str, Any] = {}
    for base in reversed(cls.__mro__):
        try:
            annotations = inspect.get_annotations(base)
        except NameError:
            continue
        for name, annotation in annotations.items():
            hints[name] = _evaluate(base, annotation)
    return hints


def _discover_key_fields(cls: type) -> tuple[str, ...]:
    """Collect marked attributes of ``cls`` in declaration order."""
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return tuple(
            name
            for name, info in cls.model_fields.items()
            if _is_tagged(info) or any(m is CacheKey for m in info.metadata)
        )

    if dataclasses.is_dataclass(cls):
        hints = _type_hints(cls)
        return tuple(
            f.name
            for f in dataclasses.fields(cls)
            if f.metadata.get(KEY_FIELD_METADATA) or _is_marked(hints.get(f.name))
        )

    return tuple(name for name, hint in _type_hints(cls).items() if _is_marked(hint))


def _inherited(cls: type) -> TypeDescriptor | None:
    for base in cls.__mro__[1:]:
        descriptor = _registry.get(base)
        if descriptor is not None:
            return descriptor
    return None


def register(
    cls: T,
    store_as: str | None = None,
    keys: Iterable[str] | None = None,
) -> T:
    """
    Register ``cls`` as cacheable.

    Args:
        cls: Class to register
        store_as: Collection name override (blank = use the class name)
        keys: Ordered attribute names contributing to the key; discovered
            from field markers when omitted

    Returns:
        The class itself, so this can be used as a decorator

    Raises:
        ConfigurationError: If ``keys`` contains something other than names
    """
    if keys is not None:
        key_fields = tuple(keys)
        if isinstance(keys, str) or not all(isinstance(k, str) and k for k in key_fields):
            raise ConfigurationError(
                "Cache key fields must be a sequence of attribute names",
                details={"type": cls.__name__, "keys": repr(keys)},
            )
    else:
        key_fields = _discover_key_fields(cls)

    parent = _inherited(cls)
    if parent is not None and not key_fields:
        key_fields = parent.key_fields

    descriptor = TypeDescriptor(type_name=cls.__name__, store_as=store_as, key_fields=key_fields)
    with _registry_lock:
        _registry[cls] = descriptor
    return cls


@typing.overload
def cacheable(cls: T, /) -> T: ...


@typing.overload
def cacheable(
    *,
    store_as: str | None = None,
    keys: Iterable[str] | None = None,
) -> Callable[[T], T]: ...


def cacheable(
    cls: T | None = None,
    /,
    *,
    store_as: str | None = None,
    keys: Iterable[str] | None = None,
) -> T | Callable[[T], T]:
    """
    Class decorator declaring a type as cacheable.

    Usable bare (``@cacheable``) or with arguments
    (``@cacheable(store_as="Users", keys=("tenant", "id"))``).
    Apply it above ``@dataclass`` so the dataclass fields already exist.
    """

    def decorator(target: T) -> T:
        return register(target, store_as=store_as, keys=keys)

    if cls is None:
        return decorator
    return decorator(cls)


def lookup(cls: type) -> TypeDescriptor | None:
    """Return the descriptor registered for ``cls`` itself, without walking bases."""
    return _registry.get(cls)


def registered_types() -> list[type]:
    """List every class registered as cacheable."""
    with _registry_lock:
        return list(_registry.keys())
