"""Inventory bounded context: per-location stock records.

Tracks stock levels for each product at each warehouse, applies adjustments
and restocks atomically per record, and keeps an audit trail of every
quantity change.
"""

from protean.domain import Domain

inventory = Domain(name="inventory")
