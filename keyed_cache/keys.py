"""
Keyed Cache — Key Builder

Composes hierarchical cache keys of the form ``[domain:]collection:id``.

Identifiers are not escaped: an id containing the separator produces a key
that cannot be split back unambiguously. Callers own that constraint.
"""

from typing import Any

from .metadata import resolver

# Key part separator
SEPARATOR = ":"


def _has_domain(domain: str | None) -> bool:
    return domain is not None and bool(domain.strip())


def compose(domain: str | None, collection: str, id: str) -> str:
    """Join domain, collection and id; a blank domain is left out."""
    if _has_domain(domain):
        return f"{domain}{SEPARATOR}{collection}{SEPARATOR}{id}"
    return f"{collection}{SEPARATOR}{id}"


def key_prefix(domain: str | None, target: Any) -> str:
    """Key prefix ``[domain:]collection`` of a type or instance, without trailing separator."""
    collection = resolver.collection_name(target)
    if _has_domain(domain):
        return f"{domain}{SEPARATOR}{collection}"
    return collection


def compose_for_type(domain: str | None, cls: type, id: str) -> str:
    """Key of the item ``id`` in the collection of ``cls``."""
    return f"{key_prefix(domain, cls)}{SEPARATOR}{id}"


def compose_for_instance(domain: str | None, instance: Any) -> str:
    """
    Key of an instance, from its collection name and key fields.

    Raises:
        ConfigurationError: If the instance key value resolves to nothing
    """
    return compose(domain, resolver.collection_name(instance), resolver.key_value(instance))
