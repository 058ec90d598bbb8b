"""
Keyed Cache — Metadata Resolver

Resolves the collection name of a cacheable type and the key value of an
instance from the descriptors registered by the declarations module.

All functions are pure over the registry, which is only written when classes
are decorated, and are safe to call concurrently.
"""

from dataclasses import replace
from typing import Any

from ..errors import ConfigurationError
from .declarations import TypeDescriptor, lookup


def _as_type(target: Any) -> type:
    return target if isinstance(target, type) else type(target)


def describe(target: Any) -> TypeDescriptor:
    """
    Return the descriptor governing a type or instance.

    Subclasses of a registered class share its declaration, but keep their
    own name as fallback collection name. Unregistered types get an implicit
    descriptor with no key fields.
    """
    cls = _as_type(target)
    for klass in cls.__mro__:
        descriptor = lookup(klass)
        if descriptor is None:
            continue
        if klass is cls:
            return descriptor
        return replace(descriptor, type_name=cls.__name__)
    return TypeDescriptor(type_name=cls.__name__)


def is_cacheable(target: Any) -> bool:
    """True when the type (or one of its bases) was declared cacheable."""
    return any(lookup(klass) is not None for klass in _as_type(target).__mro__)


def collection_name(target: Any) -> str:
    """
    Resolve the collection name of a type or instance.

    Returns:
        The declared ``store_as`` override if it is not blank, the class name otherwise
    """
    return describe(target).collection_name


def key_value(instance: Any) -> str:
    """
    Resolve the key value of an instance.

    Key fields are read in declared order; ``None`` values are skipped and
    the rest are concatenated without a separator, so fields ``"A"`` and
    ``7`` resolve to ``"A7"``.

    Raises:
        ConfigurationError: If the result is empty or whitespace, or a key
            field does not exist on the instance
    """
    descriptor = describe(instance)
    parts: list[str] = []
    for name in descriptor.key_fields:
        try:
            value = getattr(instance, name)
        except AttributeError as e:
            raise ConfigurationError(
                f"Cache key field '{name}' not found on {descriptor.type_name}",
                details={"type": descriptor.type_name, "field": name},
            ) from e
        if value is not None:
            parts.append(str(value))

    key = "".join(parts)
    if not key.strip():
        raise ConfigurationError(
            details={"type": descriptor.type_name, "key_fields": list(descriptor.key_fields)},
        )
    return key
