"""Pydantic request/response schemas for the Inventory API.

These are external contracts, kept separate from the ledger's own input
types and value objects.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from inventory.record.movements import AdjustmentType
from inventory.record.status import InventoryStatus


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateInventoryRequest(BaseModel):
    product_id: str = Field(min_length=1)
    warehouse_id: str = Field(min_length=1)
    sku: str = Field(min_length=1)
    quantity: int | None = Field(default=None, ge=0)
    low_stock_threshold: int | None = Field(default=None, ge=0)
    max_capacity: int | None = Field(default=None, ge=1)
    batch_number: str | None = None
    unit: str | None = None
    unit_cost: float | None = Field(default=None, ge=0)


class UpdateInventoryRequest(BaseModel):
    quantity: int | None = Field(default=None, ge=0)
    reserved_quantity: int | None = Field(default=None, ge=0)
    low_stock_threshold: int | None = Field(default=None, ge=0)
    max_capacity: int | None = Field(default=None, ge=1)
    status: InventoryStatus | None = None
    sku: str | None = None
    batch_number: str | None = None
    unit: str | None = None
    unit_cost: float | None = Field(default=None, ge=0)


class AdjustQuantityRequest(BaseModel):
    adjustment: int
    reason: str
    adjustment_type: AdjustmentType = AdjustmentType.OTHER
    reference_type: str | None = None
    reference_id: str | None = None


class RestockRequest(BaseModel):
    quantity: int = Field(ge=1)
    batch_number: str | None = None
    unit_cost: float | None = Field(default=None, ge=0)
    supplier_id: str | None = None
    purchase_order_id: str | None = None
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class InventoryRecordResponse(BaseModel):
    id: str
    product_id: str
    warehouse_id: str
    sku: str
    batch_number: str | None = None
    unit: str | None = None
    quantity: int
    reserved_quantity: int
    available_quantity: int
    low_stock_threshold: int
    max_capacity: int | None = None
    unit_cost: float | None = None
    status: InventoryStatus
    created_at: datetime
    updated_at: datetime
    last_restocked_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> "InventoryRecordResponse":
        return cls(
            id=record.record_id,
            product_id=record.product_id,
            warehouse_id=record.warehouse_id,
            sku=record.sku,
            batch_number=record.batch_number,
            unit=record.unit,
            quantity=record.quantity,
            reserved_quantity=record.reserved_quantity,
            available_quantity=record.available_quantity,
            low_stock_threshold=record.low_stock_threshold,
            max_capacity=record.max_capacity,
            unit_cost=record.unit_cost,
            status=record.status,
            created_at=record.created_at,
            updated_at=record.updated_at,
            last_restocked_at=record.last_restocked_at,
        )


class InventoryPageResponse(BaseModel):
    items: list[InventoryRecordResponse]
    page: int
    size: int
    total: int


class StockMovementResponse(BaseModel):
    movement_id: str
    kind: str
    quantity_change: int
    previous_quantity: int
    new_quantity: int
    reason: str | None = None
    adjustment_type: str | None = None
    reference_type: str | None = None
    reference_id: str | None = None
    supplier_id: str | None = None
    purchase_order_id: str | None = None
    notes: str | None = None
    occurred_at: datetime

    @classmethod
    def from_movement(cls, movement) -> "StockMovementResponse":
        return cls(
            movement_id=movement.movement_id,
            kind=movement.kind,
            quantity_change=movement.quantity_change,
            previous_quantity=movement.previous_quantity,
            new_quantity=movement.new_quantity,
            reason=movement.reason,
            adjustment_type=movement.adjustment_type,
            reference_type=movement.reference_type,
            reference_id=movement.reference_id,
            supplier_id=movement.supplier_id,
            purchase_order_id=movement.purchase_order_id,
            notes=movement.notes,
            occurred_at=movement.occurred_at,
        )
