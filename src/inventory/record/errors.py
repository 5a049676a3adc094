"""Error kinds raised by ledger operations.

All of them carry protean's ``messages`` mapping (field name to a list of
messages) so callers can translate them without parsing strings.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError

__all__ = [
    "CapacityExceededError",
    "NegativeQuantityError",
    "RecordNotFoundError",
    "ValidationError",
]


class RecordNotFoundError(ObjectNotFoundError):
    """No inventory record exists for the requested id."""

    def __init__(self, record_id):
        self.record_id = record_id
        messages = {"record_id": [f"Inventory record not found with id: {record_id}"]}
        super().__init__(messages)
        self.messages = messages


class CapacityExceededError(ValidationError):
    """A quantity change would push the record above its max capacity."""


class NegativeQuantityError(ValidationError):
    """A quantity change would drive quantity (or availability) below zero."""
