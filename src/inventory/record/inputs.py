"""Already-parsed operation payloads handed to the OperationEngine.

``None`` always means "not provided": creation falls back to defaults and
updates keep the existing value.
"""

from dataclasses import dataclass

from inventory.record.status import InventoryStatus, coerce_status


@dataclass(frozen=True)
class CreateInput:
    product_id: str
    warehouse_id: str
    sku: str
    quantity: int | None = None
    low_stock_threshold: int | None = None
    max_capacity: int | None = None
    batch_number: str | None = None
    unit: str | None = None
    unit_cost: float | None = None


@dataclass(frozen=True)
class UpdateInput:
    """Replacement values for an existing record.

    ``product_id`` and ``warehouse_id`` are fixed at creation and cannot be
    changed here. A ``status`` is stored as an explicit override.
    """

    quantity: int | None = None
    reserved_quantity: int | None = None
    low_stock_threshold: int | None = None
    max_capacity: int | None = None
    status: InventoryStatus | str | None = None
    sku: str | None = None
    batch_number: str | None = None
    unit: str | None = None
    unit_cost: float | None = None


@dataclass(frozen=True)
class RestockMeta:
    batch_number: str | None = None
    unit_cost: float | None = None
    supplier_id: str | None = None
    purchase_order_id: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class RecordFilter:
    """Query predicate for listing records. Unset criteria match everything."""

    warehouse_id: str | None = None
    product_id: str | None = None
    status: InventoryStatus | str | None = None
    low_stock_only: bool = False

    def matches(self, record) -> bool:
        if self.warehouse_id is not None and record.warehouse_id != self.warehouse_id:
            return False
        if self.product_id is not None and record.product_id != self.product_id:
            return False
        status = coerce_status(self.status)
        if status is not None and record.status != status.value:
            return False
        if self.low_stock_only and not record.is_low_stock:
            return False
        return True
