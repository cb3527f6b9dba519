"""Unit tests for record binding plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest
from pydantic import BaseModel, ConfigDict

from row_bind.core.exceptions import PlanCompilationError
from row_bind.mapping.fields import column, column_field
from row_bind.mapping.plan import compile_plan, is_record, is_record_type


@dataclass
class Address:
    city: str = column("city", default="")


@dataclass
class Customer:
    id: int = column("id", default=0)
    name: str = column("name", default="")
    address: Address = field(default_factory=Address)
    note: str = ""


class CustomerModel(BaseModel):
    id: int = column_field("id", default=0)
    name: str = column_field("customer_name", default="")
    internal: str = ""


class LegacyCustomer:
    __columns__ = (("id", "id"), ("name", "name"), (None, "address"))

    id: int

    def __init__(self) -> None:
        self.id = 0
        self.name = ""
        self.address = Address()


@dataclass
class DuplicateTags:
    a: str = column("x", default="")
    b: str = column("x", default="")


@dataclass(frozen=True)
class FrozenRecord:
    a: str = column("a", default="")


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    a: str = column_field("a", default="")


class BadColumns:
    __columns__ = ("id",)


class NotARecord:
    pass


@dataclass
class Order:
    id: int = column("id", default=0)
    billing: Address | None = None
    lines: list[Address] = field(default_factory=list)
    shipping: Address = column("shipping", default_factory=Address)


class OrderModel(BaseModel):
    billing: Optional[CustomerModel] = None
    lines: list[CustomerModel] = []


class TestCompilePlan:
    def test_dataclass_fields_in_declaration_order(self) -> None:
        plan = compile_plan(Customer)
        assert [f.attribute for f in plan.fields] == ["id", "name", "address", "note"]
        assert [f.column for f in plan.fields] == ["id", "name", None, None]
        assert plan.columns == ["id", "name"]

    def test_dataclass_converter_from_annotation(self) -> None:
        plan = compile_plan(Customer)
        id_field = plan.fields[0]
        assert id_field.converter is not None
        assert id_field.converter("42") == 42

    def test_untagged_fields_have_no_converter(self) -> None:
        plan = compile_plan(Customer)
        assert plan.fields[3].converter is None

    def test_pydantic_fields(self) -> None:
        plan = compile_plan(CustomerModel)
        assert [(f.attribute, f.column) for f in plan.fields] == [
            ("id", "id"),
            ("name", "customer_name"),
            ("internal", None),
        ]

    def test_explicit_columns_declaration(self) -> None:
        plan = compile_plan(LegacyCustomer)
        assert [(f.column, f.attribute) for f in plan.fields] == [
            ("id", "id"),
            ("name", "name"),
            (None, "address"),
        ]
        # Annotated attributes get a converter, unannotated ones do not
        assert plan.fields[0].converter is not None
        assert plan.fields[1].converter is None

    def test_plan_cached_per_type(self) -> None:
        assert compile_plan(Customer) is compile_plan(Customer)

    def test_duplicate_tags_rejected(self) -> None:
        with pytest.raises(PlanCompilationError, match="'x'"):
            compile_plan(DuplicateTags)

    def test_frozen_dataclass_rejected(self) -> None:
        with pytest.raises(PlanCompilationError, match="frozen"):
            compile_plan(FrozenRecord)

    def test_frozen_pydantic_rejected(self) -> None:
        with pytest.raises(PlanCompilationError, match="frozen"):
            compile_plan(FrozenModel)

    def test_malformed_columns_declaration(self) -> None:
        with pytest.raises(PlanCompilationError, match="pairs"):
            compile_plan(BadColumns)

    def test_plain_class_without_declaration(self) -> None:
        with pytest.raises(PlanCompilationError, match="declares no column bindings"):
            compile_plan(NotARecord)


class TestIsRecord:
    def test_instances(self) -> None:
        assert is_record(Customer())
        assert is_record(CustomerModel())
        assert is_record(LegacyCustomer())

    def test_non_records(self) -> None:
        assert not is_record(Customer)
        assert not is_record(NotARecord())
        assert not is_record("text")
        assert not is_record(None)

    def test_record_types(self) -> None:
        assert is_record_type(Customer)
        assert is_record_type(CustomerModel)
        assert is_record_type(LegacyCustomer)
        assert not is_record_type(NotARecord)
        assert not is_record_type(Customer())


class TestNestedFields:
    def test_nested_type_from_annotation(self) -> None:
        plan = compile_plan(Customer)
        address = plan.fields[2]
        assert address.nested is Address
        assert not address.many
        assert plan.fields[3].nested is None

    def test_optional_and_list_annotations(self) -> None:
        fields = {f.attribute: f for f in compile_plan(Order).fields}
        assert fields["billing"].nested is Address
        assert not fields["billing"].many
        assert fields["lines"].nested is Address
        assert fields["lines"].many

    def test_tagged_record_field_is_a_leaf(self) -> None:
        fields = {f.attribute: f for f in compile_plan(Order).fields}
        shipping = fields["shipping"]
        assert shipping.column == "shipping"
        assert shipping.nested is None
        assert shipping.converter is not None

    def test_pydantic_nested_annotations(self) -> None:
        billing, lines = compile_plan(OrderModel).fields
        assert billing.nested is CustomerModel
        assert not billing.many
        assert lines.nested is CustomerModel
        assert lines.many

    def test_unannotated_explicit_attribute(self) -> None:
        address = compile_plan(LegacyCustomer).fields[2]
        assert address.column is None
        assert address.nested is None
