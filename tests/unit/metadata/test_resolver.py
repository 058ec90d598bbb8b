"""
Keyed Cache — Metadata Resolver Tests

Tests collection name resolution, key value resolution, declared key field
order and inheritance of declarations.
"""

from dataclasses import dataclass, field
from typing import Annotated

import pytest
from pydantic import BaseModel

from keyed_cache.errors import ConfigurationError
from keyed_cache.metadata import (
    CacheKey,
    KeyField,
    cacheable,
    collection_name,
    describe,
    is_cacheable,
    key_field,
    key_value,
    register,
    registered_types,
)


@cacheable(store_as="Orders")
@dataclass
class Order:
    number: Annotated[str | None, CacheKey]
    total: float = 0.0


@dataclass
class RushOrder(Order):
    fee: float = 1.0


@cacheable
@dataclass
class Invoice:
    serial: Annotated[str, CacheKey]


@dataclass
class CreditNote(Invoice):
    reason: str = ""


@cacheable(store_as="   ")
@dataclass
class Receipt:
    code: Annotated[str, CacheKey]


@cacheable
@dataclass
class Pair:
    first: Annotated[str | None, CacheKey]
    second: Annotated[int | None, CacheKey]
    label: str = ""


@cacheable(store_as="Lines")
@dataclass
class OrderLine:
    order: str = key_field()
    note: str = ""
    line: int = key_field(default=0)


@cacheable
class Customer(BaseModel):
    tenant: Annotated[str, CacheKey]
    id: Annotated[int, CacheKey]
    name: str | None = None


@cacheable(store_as="Tenants")
class Tenant(BaseModel):
    region: str = KeyField()
    code: str = KeyField(min_length=1, json_schema_extra={"examples": ["acme"]})
    label: str | None = None


@cacheable(store_as="Baskets")
@dataclass
class Basket:
    owner: str = key_field()
    lines: "list[BasketLine]" = field(default_factory=list)


@cacheable
@dataclass
class Shipment:
    carrier: Annotated[str, CacheKey]
    lines: "list[BasketLine]" = field(default_factory=list)


@dataclass
class BasketLine:
    sku: str
    quantity: int = 1


@cacheable(keys=("sku",))
class Product:
    def __init__(self, sku: str | None, name: str | None = None) -> None:
        self.sku = sku
        self.name = name


@cacheable(store_as="Bundles")
class Bundle(Product):
    pass


@cacheable
class Session:
    token: Annotated[str, CacheKey]

    def __init__(self, token: str) -> None:
        self.token = token


@cacheable(keys=("missing",))
class Broken:
    pass


@cacheable
@dataclass
class Keyless:
    value: str


class Plain:
    pass


class TestCollectionName:
    """Test collection name resolution."""

    def test_override_is_used(self) -> None:
        """Test a declared store_as override wins over the class name."""
        assert collection_name(Order) == "Orders"

    def test_override_regardless_of_instance_state(self) -> None:
        """Test the override does not depend on instance values."""
        assert collection_name(Order(number="1")) == "Orders"
        assert collection_name(Order(number=None, total=99.0)) == "Orders"

    def test_class_name_without_override(self) -> None:
        """Test the class name is used when no override is declared."""
        assert collection_name(Invoice) == "Invoice"
        assert collection_name(Invoice(serial="x")) == "Invoice"

    def test_blank_override_falls_back_to_class_name(self) -> None:
        """Test a whitespace override counts as no override."""
        assert collection_name(Receipt) == "Receipt"

    def test_unregistered_type_uses_class_name(self) -> None:
        """Test types never declared cacheable still resolve."""
        assert collection_name(Plain) == "Plain"
        assert collection_name(Plain()) == "Plain"

    def test_subclass_inherits_override(self) -> None:
        """Test undecorated subclasses share the base declaration."""
        assert collection_name(RushOrder) == "Orders"

    def test_subclass_without_override_uses_own_name(self) -> None:
        """Test inherited declarations without override fall back to the subclass name."""
        assert collection_name(CreditNote(serial="c-1")) == "CreditNote"

    def test_decorated_subclass_has_own_override(self) -> None:
        """Test a decorated subclass keeps its own store_as."""
        assert collection_name(Bundle) == "Bundles"
        assert collection_name(Product) == "Product"


class TestKeyValue:
    """Test key value resolution."""

    def test_single_key_field(self) -> None:
        """Test one key field yields its string form."""
        assert key_value(Order(number="42")) == "42"

    def test_fields_concatenated_without_separator(self) -> None:
        """Test key fields are joined in declared order with nothing between them."""
        assert key_value(Pair(first="A", second=7)) == "A7"

    def test_declared_order_pydantic(self) -> None:
        """Test pydantic model fields contribute in declaration order."""
        assert key_value(Customer(tenant="A", id=7)) == "A7"

    def test_declared_order_key_field(self) -> None:
        """Test key_field() contributors follow field order, skipping other fields."""
        assert describe(OrderLine).key_fields == ("order", "line")
        assert key_value(OrderLine(order="SO-1", note="ignored", line=3)) == "SO-13"

    def test_key_field_on_pydantic_model(self) -> None:
        """Test KeyField() contributors of a pydantic model follow field order."""
        assert describe(Tenant).key_fields == ("region", "code")
        assert key_value(Tenant(region="EU", code="acme", label="x")) == "EUacme"

    def test_key_field_keeps_schema_extra(self) -> None:
        """Test KeyField() tags the JSON schema without dropping caller extras."""
        properties = Tenant.model_json_schema()["properties"]

        assert properties["code"]["keyed_cache.key"] is True
        assert properties["code"]["examples"] == ["acme"]
        assert "keyed_cache.key" not in properties["label"]

    def test_forward_referenced_field_type(self) -> None:
        """Test classes annotated with not-yet-defined types can be declared."""
        assert describe(Basket).key_fields == ("owner",)
        assert key_value(Basket(owner="ada", lines=[BasketLine(sku="tea")])) == "ada"
        assert describe(Shipment).key_fields == ("carrier",)

    def test_explicit_keys(self) -> None:
        """Test keys= on the decorator names the contributors."""
        assert key_value(Product(sku="SKU-9", name="Lamp")) == "SKU-9"

    def test_annotated_plain_class(self) -> None:
        """Test Annotated markers on a plain class are discovered."""
        assert describe(Session).key_fields == ("token",)
        assert key_value(Session("abc")) == "abc"

    def test_none_values_skipped(self) -> None:
        """Test None contributors are left out of the key."""
        assert key_value(Pair(first=None, second=7)) == "7"
        assert key_value(Pair(first="A", second=None)) == "A"

    def test_falsy_values_are_not_null(self) -> None:
        """Test zero is a valid key value."""
        assert key_value(Pair(first=None, second=0)) == "0"

    def test_all_none_raises(self) -> None:
        """Test resolution fails when every contributor is None."""
        with pytest.raises(ConfigurationError) as exc_info:
            key_value(Pair(first=None, second=None))

        assert exc_info.value.message == "Cache: Object key cannot be null"
        assert exc_info.value.details["type"] == "Pair"
        assert exc_info.value.details["key_fields"] == ["first", "second"]

    def test_empty_and_whitespace_raise(self) -> None:
        """Test empty or whitespace-only keys are rejected."""
        with pytest.raises(ConfigurationError):
            key_value(Order(number=""))
        with pytest.raises(ConfigurationError):
            key_value(Order(number="   "))

    def test_no_key_fields_raises(self) -> None:
        """Test a cacheable type without contributors cannot produce a key."""
        with pytest.raises(ConfigurationError):
            key_value(Keyless(value="x"))

    def test_unregistered_type_raises(self) -> None:
        """Test types never declared cacheable cannot produce a key."""
        with pytest.raises(ConfigurationError):
            key_value(Plain())

    def test_missing_attribute_raises(self) -> None:
        """Test a declared key field missing on the instance is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            key_value(Broken())

        assert exc_info.value.details["field"] == "missing"

    def test_subclass_inherits_key_fields(self) -> None:
        """Test undecorated and decorated subclasses reuse base key fields."""
        assert key_value(RushOrder(number="R-1", fee=5.0)) == "R-1"
        assert key_value(Bundle(sku="B-2")) == "B-2"


class TestDescriptors:
    """Test descriptor registration and lookup."""

    def test_describe_registered(self) -> None:
        """Test the descriptor reflects the declaration."""
        descriptor = describe(Order)

        assert descriptor.type_name == "Order"
        assert descriptor.store_as == "Orders"
        assert descriptor.key_fields == ("number",)
        assert descriptor.collection_name == "Orders"

    def test_describe_subclass(self) -> None:
        """Test subclasses get a descriptor carrying their own type name."""
        descriptor = describe(RushOrder)

        assert descriptor.type_name == "RushOrder"
        assert descriptor.store_as == "Orders"

    def test_describe_unregistered(self) -> None:
        """Test unregistered types get an empty implicit descriptor."""
        descriptor = describe(Plain)

        assert descriptor.type_name == "Plain"
        assert descriptor.store_as is None
        assert descriptor.key_fields == ()

    def test_is_cacheable(self) -> None:
        """Test cacheable detection through the class hierarchy."""
        assert is_cacheable(Order) is True
        assert is_cacheable(RushOrder(number="1")) is True
        assert is_cacheable(Plain) is False

    def test_registered_types(self) -> None:
        """Test decorated classes are listed in the registry."""
        types = registered_types()

        assert Order in types
        assert Customer in types
        assert RushOrder not in types

    def test_register_without_decorator(self) -> None:
        """Test register() declares types that cannot be decorated."""

        class External:
            def __init__(self, ref: str) -> None:
                self.ref = ref

        assert register(External, store_as="Refs", keys=["ref"]) is External
        assert collection_name(External) == "Refs"
        assert key_value(External("r-1")) == "r-1"

    def test_register_rejects_string_keys(self) -> None:
        """Test a bare string is not accepted as key field list."""

        class Wrong:
            pass

        with pytest.raises(ConfigurationError):
            register(Wrong, keys="id")

    def test_register_rejects_empty_names(self) -> None:
        """Test empty key field names are rejected."""

        class Wrong:
            pass

        with pytest.raises(ConfigurationError):
            register(Wrong, keys=("id", ""))
