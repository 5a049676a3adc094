"""Environment-driven settings for the inventory ledger."""

import os

DEFAULT_ID_PREFIX = "inv-"
DEFAULT_LOW_STOCK_THRESHOLD = 10


def get_environment() -> str:
    """Name of the active environment (``development`` when unset)."""
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_id_prefix() -> str:
    """Prefix prepended to generated record identifiers."""
    return os.getenv("INVENTORY_ID_PREFIX", DEFAULT_ID_PREFIX)


def get_default_low_stock_threshold() -> int:
    """Threshold applied when a record is created without one."""
    raw = os.getenv("INVENTORY_DEFAULT_LOW_STOCK_THRESHOLD")
    if raw is None or raw.strip() == "":
        return DEFAULT_LOW_STOCK_THRESHOLD
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_LOW_STOCK_THRESHOLD
    return value if value >= 0 else DEFAULT_LOW_STOCK_THRESHOLD
