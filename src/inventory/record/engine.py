"""OperationEngine: business rules for creating and changing inventory records.

Every mutation is expressed as a transformation handed to
``RecordStore.transition()``. Checks that depend on the stored record
(existence, capacity, non-negativity) run inside the transformation so they
always see the current value, never a stale read. Checks that only look at
the request run before the store is touched.

Movement entries are written by a commit hook under the per-id lock, so each
record's history follows its write order. Log lines are emitted once the
store has accepted the new record.
"""

from datetime import UTC, datetime
from uuid import uuid4

import structlog

from inventory.record.errors import (
    CapacityExceededError,
    NegativeQuantityError,
    RecordNotFoundError,
    ValidationError,
)
from inventory.record.inputs import CreateInput, RecordFilter, RestockMeta, UpdateInput
from inventory.record.movements import AdjustmentType, MovementKind, MovementLog, StockMovement
from inventory.record.record import InventoryRecord
from inventory.record.status import coerce_status, resolve_status
from inventory.record.store import RecordStore
from inventory.settings import get_default_low_stock_threshold, get_id_prefix

logger = structlog.get_logger(__name__)


def _is_blank(value):
    return value is None or not str(value).strip()


def _pick(new, existing):
    return existing if new is None else new


def _raise_if(errors):
    if errors:
        raise ValidationError(errors)


def _check_non_negative(errors, **values):
    for field, value in values.items():
        if value is not None and value < 0:
            errors.setdefault(field, []).append(f"{field} must be a non-negative number")


def _check_capacity_value(errors, max_capacity):
    if max_capacity is not None and max_capacity < 1:
        errors.setdefault("max_capacity", []).append("max_capacity must be at least 1")


def _coerce_adjustment_type(value):
    if value is None:
        return AdjustmentType.OTHER
    if isinstance(value, AdjustmentType):
        return value
    try:
        return AdjustmentType(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(t.value for t in AdjustmentType)
        raise ValidationError(
            {"adjustment_type": [f"Unknown adjustment type '{value}'. Must be one of: {allowed}"]}
        ) from None


class OperationEngine:
    """Validated, atomic operations over a RecordStore."""

    def __init__(self, store: RecordStore | None = None, movements: MovementLog | None = None) -> None:
        self.store = store if store is not None else RecordStore()
        self.movements = movements if movements is not None else MovementLog()

    # -------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------
    def create(self, data: CreateInput) -> InventoryRecord:
        errors = {}
        for field in ("product_id", "warehouse_id", "sku"):
            if _is_blank(getattr(data, field)):
                errors[field] = [f"{field} is required"]
        _check_non_negative(
            errors,
            quantity=data.quantity,
            low_stock_threshold=data.low_stock_threshold,
            unit_cost=data.unit_cost,
        )
        _check_capacity_value(errors, data.max_capacity)
        _raise_if(errors)

        quantity = _pick(data.quantity, 0)
        threshold = _pick(data.low_stock_threshold, get_default_low_stock_threshold())
        if data.max_capacity is not None and quantity > data.max_capacity:
            raise CapacityExceededError(
                {"quantity": [f"Initial quantity {quantity} exceeds max capacity {data.max_capacity}"]}
            )

        record_id = f"{get_id_prefix()}{uuid4()}"
        now = datetime.now(UTC)

        def build(current):
            if current is not None:
                raise ValidationError({"record_id": [f"Inventory record {record_id} already exists"]})
            return InventoryRecord(
                record_id=record_id,
                product_id=data.product_id,
                warehouse_id=data.warehouse_id,
                sku=data.sku,
                batch_number=data.batch_number,
                unit=data.unit,
                quantity=quantity,
                reserved_quantity=0,
                low_stock_threshold=threshold,
                max_capacity=data.max_capacity,
                unit_cost=data.unit_cost,
                status=resolve_status(quantity, threshold).value,
                created_at=now,
                updated_at=now,
            )

        _, record = self.store.transition(
            record_id, build, on_commit=self._movement_writer(MovementKind.CREATED, reason="Initial stock")
        )

        logger.info(
            "Inventory record created",
            record_id=record.record_id,
            product_id=record.product_id,
            warehouse_id=record.warehouse_id,
            quantity=record.quantity,
            status=record.status,
        )
        return record

    # -------------------------------------------------------------------
    # Full update
    # -------------------------------------------------------------------
    def update(self, record_id: str, data: UpdateInput) -> InventoryRecord:
        override = coerce_status(data.status)

        errors = {}
        _check_non_negative(
            errors,
            quantity=data.quantity,
            reserved_quantity=data.reserved_quantity,
            low_stock_threshold=data.low_stock_threshold,
            unit_cost=data.unit_cost,
        )
        _check_capacity_value(errors, data.max_capacity)
        if data.sku is not None and _is_blank(data.sku):
            errors["sku"] = ["sku cannot be empty"]
        _raise_if(errors)

        now = datetime.now(UTC)

        def replace(current):
            if current is None:
                raise RecordNotFoundError(record_id)

            quantity = _pick(data.quantity, current.quantity)
            reserved = _pick(data.reserved_quantity, current.reserved_quantity)
            threshold = _pick(data.low_stock_threshold, current.low_stock_threshold)
            max_capacity = _pick(data.max_capacity, current.max_capacity)

            if reserved > quantity:
                raise ValidationError(
                    {"reserved_quantity": [f"Reserved quantity {reserved} cannot exceed total quantity {quantity}"]}
                )
            if max_capacity is not None and quantity > max_capacity:
                raise CapacityExceededError(
                    {"quantity": [f"Quantity {quantity} exceeds max capacity {max_capacity}"]}
                )

            return current.evolve(
                quantity=quantity,
                reserved_quantity=reserved,
                low_stock_threshold=threshold,
                max_capacity=max_capacity,
                status=resolve_status(quantity - reserved, threshold, override).value,
                sku=_pick(data.sku, current.sku),
                batch_number=_pick(data.batch_number, current.batch_number),
                unit=_pick(data.unit, current.unit),
                unit_cost=_pick(data.unit_cost, current.unit_cost),
                updated_at=now,
            )

        _, record = self.store.transition(
            record_id,
            replace,
            on_commit=self._movement_writer(MovementKind.UPDATED, only_on_change=True, reason="Record updated"),
        )

        logger.info(
            "Inventory record updated",
            record_id=record_id,
            quantity=record.quantity,
            reserved_quantity=record.reserved_quantity,
            status=record.status,
            status_override=override.value if override else None,
        )
        return record

    # -------------------------------------------------------------------
    # Quantity changes
    # -------------------------------------------------------------------
    def apply_adjustment(
        self,
        record_id: str,
        delta: int,
        reason: str,
        reference_type: str | None = None,
        reference_id: str | None = None,
        adjustment_type: AdjustmentType | str | None = AdjustmentType.OTHER,
    ) -> InventoryRecord:
        """Add ``delta`` (positive or negative) to the record's quantity."""
        adjustment_type = _coerce_adjustment_type(adjustment_type)

        errors = {}
        if delta is None or delta == 0:
            errors["delta"] = ["Adjustment cannot be zero"]
        if _is_blank(reason):
            errors["reason"] = ["Reason is required for stock adjustments"]
        _raise_if(errors)

        now = datetime.now(UTC)

        def adjust(current):
            if current is None:
                raise RecordNotFoundError(record_id)
            new_quantity = current.quantity + delta
            self._check_new_quantity(current, new_quantity, field="delta", action="Adjustment")
            return self._with_quantity(current, new_quantity, now)

        previous, record = self.store.transition(
            record_id,
            adjust,
            on_commit=self._movement_writer(
                MovementKind.ADJUSTED,
                reason=reason,
                adjustment_type=adjustment_type.value,
                reference_type=reference_type,
                reference_id=reference_id,
            ),
        )

        logger.info(
            "Stock adjusted",
            record_id=record_id,
            delta=delta,
            adjustment_type=adjustment_type.value,
            previous_quantity=previous.quantity,
            quantity=record.quantity,
            available_quantity=record.available_quantity,
        )
        self._check_low_stock(record)
        return record

    def restock(self, record_id: str, quantity: int, meta: RestockMeta | None = None) -> InventoryRecord:
        """Receive ``quantity`` new units, optionally with batch and cost details."""
        meta = meta or RestockMeta()

        errors = {}
        if quantity is None or quantity <= 0:
            errors["quantity"] = ["Restock quantity must be positive"]
        _check_non_negative(errors, unit_cost=meta.unit_cost)
        _raise_if(errors)

        now = datetime.now(UTC)

        def receive(current):
            if current is None:
                raise RecordNotFoundError(record_id)
            new_quantity = current.quantity + quantity
            self._check_new_quantity(current, new_quantity, field="quantity", action="Restock")

            changes = {"last_restocked_at": now}
            if meta.batch_number is not None:
                changes["batch_number"] = meta.batch_number
            if meta.unit_cost is not None:
                changes["unit_cost"] = meta.unit_cost
            return self._with_quantity(current, new_quantity, now, **changes)

        _, record = self.store.transition(
            record_id,
            receive,
            on_commit=self._movement_writer(
                MovementKind.RESTOCKED,
                reason=meta.notes or "Restock",
                supplier_id=meta.supplier_id,
                purchase_order_id=meta.purchase_order_id,
                notes=meta.notes,
            ),
        )

        logger.info(
            "Stock restocked",
            record_id=record_id,
            quantity_added=quantity,
            quantity=record.quantity,
            batch_number=record.batch_number,
            supplier_id=meta.supplier_id,
            purchase_order_id=meta.purchase_order_id,
        )
        self._check_low_stock(record)
        return record

    # -------------------------------------------------------------------
    # Queries and removal
    # -------------------------------------------------------------------
    def get(self, record_id: str) -> InventoryRecord | None:
        return self.store.get(record_id)

    def low_stock(self, warehouse_id: str | None = None):
        """Records whose available quantity is at or below their threshold."""
        return self.list(RecordFilter(warehouse_id=warehouse_id, low_stock_only=True))

    def movement_history(self, record_id: str):
        return self.movements.for_record(record_id)

    def list(self, criteria: RecordFilter | None = None):
        if criteria is None:
            return self.store.list()
        coerce_status(criteria.status)
        return self.store.list(criteria.matches)

    def delete(self, record_id: str) -> bool:
        existed = self.store.delete(record_id)
        if existed:
            logger.info("Inventory record deleted", record_id=record_id)
        return existed

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @staticmethod
    def _check_new_quantity(current, new_quantity, field, action):
        if new_quantity < 0:
            raise NegativeQuantityError(
                {field: [f"{action} would result in negative quantity. Current: {current.quantity}"]}
            )
        if new_quantity < current.reserved_quantity:
            raise NegativeQuantityError(
                {
                    field: [
                        f"{action} would leave quantity {new_quantity} below "
                        f"reserved quantity {current.reserved_quantity}"
                    ]
                }
            )
        if current.max_capacity is not None and new_quantity > current.max_capacity:
            raise CapacityExceededError(
                {field: [f"{action} would exceed max capacity: {current.max_capacity}"]}
            )

    @staticmethod
    def _with_quantity(current, new_quantity, now, **changes):
        # Manual overrides do not survive a quantity change.
        status = resolve_status(new_quantity - current.reserved_quantity, current.low_stock_threshold)
        return current.evolve(quantity=new_quantity, status=status.value, updated_at=now, **changes)

    def _movement_writer(self, kind, only_on_change=False, **details):
        """Commit hook that appends a movement for the stored record."""

        def write(previous, record):
            previous_quantity = previous.quantity if previous is not None else 0
            if only_on_change and previous_quantity == record.quantity:
                return
            self.movements.record(
                StockMovement(
                    movement_id=str(uuid4()),
                    record_id=record.record_id,
                    kind=kind.value,
                    quantity_change=record.quantity - previous_quantity,
                    previous_quantity=previous_quantity,
                    new_quantity=record.quantity,
                    occurred_at=record.updated_at,
                    **details,
                )
            )

        return write

    @staticmethod
    def _check_low_stock(record):
        if record.is_low_stock:
            logger.warning(
                "Low stock detected",
                record_id=record.record_id,
                sku=record.sku,
                warehouse_id=record.warehouse_id,
                available_quantity=record.available_quantity,
                low_stock_threshold=record.low_stock_threshold,
            )
