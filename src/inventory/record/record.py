"""InventoryRecord: one product's stock line at one warehouse.

Records are immutable value objects. Every change produces a new record via
``evolve()``, which re-runs field validation and the invariants below, so a
stored record can never be observed half-written.

Stock Level Model:
    quantity:           Units physically held
    reserved_quantity:  Units held against pending commitments
    available_quantity: quantity - reserved_quantity (derived, never stored)
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String

from inventory.domain import inventory
from inventory.record.status import InventoryStatus
from inventory.settings import DEFAULT_LOW_STOCK_THRESHOLD

RECORD_FIELDS = (
    "record_id",
    "product_id",
    "warehouse_id",
    "sku",
    "batch_number",
    "unit",
    "quantity",
    "reserved_quantity",
    "low_stock_threshold",
    "max_capacity",
    "unit_cost",
    "status",
    "created_at",
    "updated_at",
    "last_restocked_at",
)


@inventory.value_object
class InventoryRecord:
    """Stock held for one product at one warehouse."""

    record_id = String(required=True, max_length=100)
    product_id = String(required=True, max_length=100)
    warehouse_id = String(required=True, max_length=100)
    sku = String(required=True, max_length=100)
    batch_number = String(max_length=100)
    unit = String(max_length=50)
    quantity = Integer(default=0, min_value=0)
    reserved_quantity = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=DEFAULT_LOW_STOCK_THRESHOLD, min_value=0)
    max_capacity = Integer(min_value=1)
    unit_cost = Float(min_value=0.0)
    status = String(required=True, choices=InventoryStatus)
    created_at = DateTime(required=True)
    updated_at = DateTime(required=True)
    last_restocked_at = DateTime()

    @invariant.post
    def reserved_cannot_exceed_quantity(self):
        if self.reserved_quantity > self.quantity:
            raise ValidationError(
                {
                    "reserved_quantity": [
                        f"Reserved quantity ({self.reserved_quantity}) cannot exceed quantity ({self.quantity})"
                    ]
                }
            )

    @invariant.post
    def quantity_within_capacity(self):
        if self.max_capacity is not None and self.quantity > self.max_capacity:
            raise ValidationError(
                {"quantity": [f"Quantity ({self.quantity}) exceeds max capacity ({self.max_capacity})"]}
            )

    @property
    def available_quantity(self):
        return self.quantity - self.reserved_quantity

    @property
    def status_enum(self):
        return InventoryStatus(self.status)

    @property
    def is_low_stock(self):
        return self.available_quantity <= self.low_stock_threshold

    def evolve(self, **changes):
        """Return a copy of this record with ``changes`` applied."""
        unknown = set(changes) - set(RECORD_FIELDS)
        if unknown:
            raise ValidationError({field: ["Unknown inventory record field"] for field in sorted(unknown)})

        values = {name: getattr(self, name) for name in RECORD_FIELDS}
        values.update(changes)
        return InventoryRecord(**values)
