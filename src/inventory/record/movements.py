"""Stock movement log: append-only audit trail of quantity changes.

Entries are written by the OperationEngine from the store's commit hook,
never from inside the transformation itself.
"""

import threading
from enum import Enum

from protean.fields import DateTime, Integer, String

from inventory.domain import inventory


class MovementKind(Enum):
    CREATED = "CREATED"
    ADJUSTED = "ADJUSTED"
    RESTOCKED = "RESTOCKED"
    UPDATED = "UPDATED"


class AdjustmentType(Enum):
    SALE = "SALE"
    RETURN = "RETURN"
    DAMAGE = "DAMAGE"
    CORRECTION = "CORRECTION"
    TRANSFER = "TRANSFER"
    OTHER = "OTHER"


@inventory.value_object
class StockMovement:
    movement_id = String(required=True, max_length=50)
    record_id = String(required=True, max_length=100)
    kind = String(required=True, choices=MovementKind)
    quantity_change = Integer(default=0)
    previous_quantity = Integer(default=0)
    new_quantity = Integer(default=0)
    reason = String(max_length=500)
    adjustment_type = String(choices=AdjustmentType)
    reference_type = String(max_length=100)
    reference_id = String(max_length=100)
    supplier_id = String(max_length=100)
    purchase_order_id = String(max_length=100)
    notes = String(max_length=1000)
    occurred_at = DateTime(required=True)


class MovementLog:
    """Thread-safe in-memory movement history, kept per record.

    History outlives the record it describes: deleting a record leaves its
    movements readable.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_record: dict[str, list[StockMovement]] = {}
        self._count = 0

    def record(self, movement: StockMovement) -> StockMovement:
        with self._lock:
            self._by_record.setdefault(movement.record_id, []).append(movement)
            self._count += 1
        return movement

    def for_record(self, record_id: str) -> list[StockMovement]:
        """Movements of one record, oldest first."""
        with self._lock:
            return list(self._by_record.get(record_id, ()))

    def has_history(self, record_id: str) -> bool:
        with self._lock:
            return record_id in self._by_record

    def all(self) -> list[StockMovement]:
        """Every movement, grouped by record."""
        with self._lock:
            return [entry for entries in self._by_record.values() for entry in entries]

    def clear(self) -> None:
        with self._lock:
            self._by_record.clear()
            self._count = 0

    def __len__(self) -> int:
        with self._lock:
            return self._count
