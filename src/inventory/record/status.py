"""Inventory status values and the rule that derives them from stock levels."""

from enum import Enum

from protean.exceptions import ValidationError


class InventoryStatus(Enum):
    IN_STOCK = "IN_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    LOW_STOCK = "LOW_STOCK"
    RESERVED = "RESERVED"
    BACKORDERED = "BACKORDERED"
    DISCONTINUED = "DISCONTINUED"
    IN_TRANSIT = "IN_TRANSIT"


# States that are only ever set explicitly, never derived from quantities.
MANUAL_STATUSES = frozenset(
    {
        InventoryStatus.RESERVED,
        InventoryStatus.BACKORDERED,
        InventoryStatus.DISCONTINUED,
        InventoryStatus.IN_TRANSIT,
    }
)


def resolve_status(available_quantity, threshold, override=None):
    """Return the status a record should carry.

    An explicit override wins unchanged. Otherwise nothing available means
    OUT_OF_STOCK, availability at or below the threshold means LOW_STOCK, and
    anything above it is IN_STOCK.
    """
    if override is not None:
        return override
    if available_quantity <= 0:
        return InventoryStatus.OUT_OF_STOCK
    if available_quantity <= threshold:
        return InventoryStatus.LOW_STOCK
    return InventoryStatus.IN_STOCK


def coerce_status(value):
    """Turn an enum member or a case-insensitive name into an InventoryStatus."""
    if value is None or isinstance(value, InventoryStatus):
        return value
    try:
        return InventoryStatus(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in InventoryStatus)
        raise ValidationError({"status": [f"Unknown status '{value}'. Must be one of: {allowed}"]}) from None
