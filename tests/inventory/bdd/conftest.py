"""Shared BDD fixtures and step definitions for inventory records."""

import pytest
from inventory.record.errors import CapacityExceededError, NegativeQuantityError
from inventory.record.inputs import CreateInput, UpdateInput
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


@pytest.fixture()
def outcome():
    """Holds the error raised by the last When step, if any."""
    return {"error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a record was created with {qty:d} units"), target_fixture="record")
def _(engine, qty):
    return engine.create(CreateInput(product_id="prod-001", warehouse_id="wh-001", sku="TSHIRT-BLK-M", quantity=qty))


@given(
    parsers.cfparse("a record was created with {qty:d} units and a threshold of {threshold:d}"),
    target_fixture="record",
)
def _(engine, qty, threshold):
    return engine.create(
        CreateInput(
            product_id="prod-001",
            warehouse_id="wh-001",
            sku="TSHIRT-BLK-M",
            quantity=qty,
            low_stock_threshold=threshold,
        )
    )


@given(
    parsers.cfparse("a record was created with {qty:d} units and a capacity of {capacity:d}"),
    target_fixture="record",
)
def _(engine, qty, capacity):
    return engine.create(
        CreateInput(
            product_id="prod-001",
            warehouse_id="wh-001",
            sku="TSHIRT-BLK-M",
            quantity=qty,
            max_capacity=capacity,
        )
    )


@given(parsers.cfparse("the record was marked {status}"), target_fixture="record")
def _(engine, record, status):
    return engine.update(record.record_id, UpdateInput(status=status))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the quantity is {qty:d}"))
def _(engine, record, qty):
    assert engine.get(record.record_id).quantity == qty


@then(parsers.cfparse("the available quantity is {qty:d}"))
def _(engine, record, qty):
    assert engine.get(record.record_id).available_quantity == qty


@then(parsers.cfparse("the status is {status}"))
def _(engine, record, status):
    assert engine.get(record.record_id).status == status


@then("the action fails with a validation error")
def _(outcome):
    assert isinstance(outcome["error"], ValidationError)


@then("the action fails with a negative quantity error")
def _(outcome):
    assert isinstance(outcome["error"], NegativeQuantityError)


@then("the action fails with a capacity error")
def _(outcome):
    assert isinstance(outcome["error"], CapacityExceededError)
