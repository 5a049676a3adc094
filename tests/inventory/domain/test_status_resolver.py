"""Tests for the status derivation rule."""

import pytest
from inventory.record.status import MANUAL_STATUSES, InventoryStatus, coerce_status, resolve_status
from protean.exceptions import ValidationError


class TestDerivedStatus:
    def test_nothing_available_is_out_of_stock(self):
        assert resolve_status(0, 10) == InventoryStatus.OUT_OF_STOCK

    def test_negative_availability_is_out_of_stock(self):
        assert resolve_status(-3, 10) == InventoryStatus.OUT_OF_STOCK

    def test_at_threshold_is_low_stock(self):
        assert resolve_status(10, 10) == InventoryStatus.LOW_STOCK

    def test_just_above_zero_is_low_stock(self):
        assert resolve_status(1, 10) == InventoryStatus.LOW_STOCK

    def test_above_threshold_is_in_stock(self):
        assert resolve_status(11, 10) == InventoryStatus.IN_STOCK

    def test_zero_threshold_means_any_stock_is_in_stock(self):
        assert resolve_status(1, 0) == InventoryStatus.IN_STOCK

    @pytest.mark.parametrize(
        ("quantity", "reserved", "threshold"),
        [(q, r, t) for q in (0, 1, 5, 10, 11, 50) for r in (0, 1, 5) for t in (0, 5, 10) if r <= q],
    )
    def test_derivation_matches_rule(self, quantity, reserved, threshold):
        available = quantity - reserved
        status = resolve_status(available, threshold)
        if available <= 0:
            assert status == InventoryStatus.OUT_OF_STOCK
        elif available <= threshold:
            assert status == InventoryStatus.LOW_STOCK
        else:
            assert status == InventoryStatus.IN_STOCK


class TestOverride:
    @pytest.mark.parametrize("override", list(InventoryStatus))
    def test_override_is_returned_unchanged(self, override):
        assert resolve_status(500, 10, override) is override
        assert resolve_status(0, 10, override) is override

    def test_manual_statuses(self):
        assert MANUAL_STATUSES == {
            InventoryStatus.RESERVED,
            InventoryStatus.BACKORDERED,
            InventoryStatus.DISCONTINUED,
            InventoryStatus.IN_TRANSIT,
        }


class TestCoerceStatus:
    def test_enum_member_passes_through(self):
        assert coerce_status(InventoryStatus.DISCONTINUED) is InventoryStatus.DISCONTINUED

    def test_none_passes_through(self):
        assert coerce_status(None) is None

    def test_name_is_case_insensitive(self):
        assert coerce_status("low_stock") == InventoryStatus.LOW_STOCK
        assert coerce_status(" In_Transit ") == InventoryStatus.IN_TRANSIT

    def test_unknown_name_rejected(self):
        with pytest.raises(ValidationError) as exc:
            coerce_status("SOLD_OUT")
        assert "status" in exc.value.messages
