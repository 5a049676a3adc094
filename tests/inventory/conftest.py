from datetime import UTC, datetime

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def inventory_bed():
    from inventory.domain import inventory

    bed = DomainFixture(inventory)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(inventory_bed):
    with inventory_bed.domain_context():
        yield


@pytest.fixture()
def store():
    from inventory.record.store import RecordStore

    return RecordStore()


@pytest.fixture()
def movements():
    from inventory.record.movements import MovementLog

    return MovementLog()


@pytest.fixture()
def engine(store, movements):
    from inventory.record.engine import OperationEngine

    return OperationEngine(store, movements)


@pytest.fixture()
def create_record(engine):
    """Factory: create a record through the engine with sensible defaults."""
    from inventory.record.inputs import CreateInput

    def _create(**overrides):
        defaults = {
            "product_id": "prod-001",
            "warehouse_id": "wh-001",
            "sku": "TSHIRT-BLK-M",
            "quantity": 100,
        }
        defaults.update(overrides)
        return engine.create(CreateInput(**defaults))

    return _create


@pytest.fixture()
def make_record():
    """Factory: build an InventoryRecord directly, bypassing the engine."""
    from inventory.record.record import InventoryRecord

    def _make(**overrides):
        now = datetime.now(UTC)
        values = {
            "record_id": "inv-001",
            "product_id": "prod-001",
            "warehouse_id": "wh-001",
            "sku": "TSHIRT-BLK-M",
            "quantity": 100,
            "reserved_quantity": 0,
            "low_stock_threshold": 10,
            "status": "IN_STOCK",
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        return InventoryRecord(**values)

    return _make
