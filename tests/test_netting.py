"""
Tests for inventory netting.

Tests cover:
- Cumulative netting in need-by order
- Safety stock rounding on each triggering requirement
- Stock map threading across parts
- Per-part requirement reports
"""

import random
from datetime import date, timedelta
from decimal import Decimal

import pytest

from boatmrp.engine.demand import Requirement, extract_demand
from boatmrp.engine.netting import (
    apply_safety_stock,
    build_part_requirements,
    net_demand,
    net_part_requirements,
    net_requirements,
)

D1 = date(2025, 1, 1)
D10 = date(2025, 1, 10)


def _req(quantity, need_by, part_id="P1", units=None):
    return Requirement(part_id=part_id, need_by_date=need_by, quantity=quantity, unit_ids=units or [])


class TestSafetyStock:
    """Tests for apply_safety_stock."""

    def test_rounds_up(self):
        # 7 units at 10% is 7.7
        assert apply_safety_stock(7, 10) == 8

    def test_exact_values_not_bumped(self):
        # 10 x 1.1 must be exactly 11, not 11.000000000000002
        assert apply_safety_stock(10, 10) == 11
        assert apply_safety_stock(100, 10) == 110

    def test_zero_percentage(self):
        assert apply_safety_stock(7, 0) == 7

    def test_zero_quantity(self):
        assert apply_safety_stock(0, 50) == 0


class TestNetPartRequirements:
    """Tests for netting a single part."""

    def test_cumulative_consumption(self):
        """Stock consumed early is gone for later requirements."""
        remaining, netted = net_part_requirements([_req(5, D1), _req(5, D10)], 5, 0)

        assert remaining == 0
        assert [(n.need_by_date, n.net_quantity) for n in netted] == [(D10, 5)]

    def test_input_order_does_not_matter(self):
        """Requirements are walked in need-by order, not input order."""
        remaining, netted = net_part_requirements([_req(5, D10), _req(5, D1)], 5, 0)

        assert [(n.need_by_date, n.net_quantity) for n in netted] == [(D10, 5)]
        assert netted[0].current_stock == 0

    def test_safety_stock_applied_per_requirement(self):
        remaining, netted = net_part_requirements([_req(7, D1), _req(7, D10)], 0, 10)

        assert [n.raw_net_quantity for n in netted] == [7, 7]
        assert [n.net_quantity for n in netted] == [8, 8]

    def test_partial_cover_records_stock_snapshot(self):
        remaining, netted = net_part_requirements([_req(4, D1), _req(10, D10, units=["U9"])], 6, 0)

        assert remaining == 0
        assert netted[0].current_stock == 2
        assert netted[0].raw_net_quantity == 8
        assert netted[0].unit_ids == ["U9"]

    def test_surplus_stock_kept(self):
        remaining, netted = net_part_requirements([_req(3, D1)], 10, 10)

        assert remaining == 7
        assert netted == []

    @pytest.mark.parametrize("seed", range(20))
    def test_conservation(self, seed):
        """Raw net never exceeds demand beyond stock, and covers it exactly."""
        rng = random.Random(seed)
        requirements = [
            _req(rng.randint(1, 20), D1 + timedelta(days=rng.randint(0, 60)))
            for _ in range(rng.randint(1, 12))
        ]
        stock = rng.randint(0, 100)

        remaining, netted = net_part_requirements(requirements, stock, 0)
        total = sum(r.quantity for r in requirements)

        assert sum(n.raw_net_quantity for n in netted) == max(0, total - stock)
        assert remaining == max(0, stock - total)


class TestNetRequirements:
    """Tests for netting across parts."""

    def test_stock_map_is_returned_not_mutated(self, sample_dataset):
        events = extract_demand(sample_dataset.units, sample_dataset.boat_types_by_id)
        stock = sample_dataset.stock_by_part

        updated, netted = net_requirements(events, stock, 0)

        assert stock["P-HULL"] == 10
        assert updated["P-HULL"] == 0
        assert [(n.part_id, n.net_quantity) for n in netted] == [
            ("P-HULL", 6),
            ("P-CLEAT", 4),
            ("P-CLEAT", 4),
            ("P-NOSUP", 1),
            ("P-NOSUP", 1),
        ]

    def test_unknown_part_starts_at_zero(self, sample_dataset):
        events = extract_demand(sample_dataset.units, sample_dataset.boat_types_by_id)

        updated, _ = net_requirements(events, {}, 0)

        assert updated == {"P-HULL": 0, "P-CLEAT": 0, "P-NOSUP": 0}


class TestBuildPartRequirements:
    """Tests for per-part requirement reports."""

    def test_report_fields(self, sample_dataset, day):
        events = extract_demand(sample_dataset.units, sample_dataset.boat_types_by_id)
        _, reports = net_demand(events, sample_dataset.parts_by_id, 10)

        hull = reports[0]
        assert hull.part_id == "P-HULL"
        assert hull.part_number == "HL-100"
        assert hull.total_quantity_needed == 16
        assert hull.current_stock == 10
        assert hull.net_quantity_needed == 7  # 6 short, plus 10% rounded up
        assert hull.total_cost == Decimal("14.00")
        assert hull.earliest_need_date == day(5)
        assert hull.latest_need_date == day(12)
        assert [u.unit_id for u in hull.units_needing] == ["U1", "U2"]
        assert len(hull.dated_requirements) == 1
        assert hull.dated_requirements[0].stock_before == 2
        assert hull.consumption_by_date() == {day(5): 8, day(12): 8}

    def test_fully_stocked_part_excluded(self, sample_dataset):
        events = extract_demand(sample_dataset.units, sample_dataset.boat_types_by_id)
        parts = sample_dataset.parts_by_id
        parts["P-HULL"] = parts["P-HULL"].model_copy(update={"current_stock": 100})

        _, reports = net_demand(events, parts, 10)

        assert "P-HULL" not in {r.part_id for r in reports}

    def test_part_without_record_skipped(self, sample_dataset, caplog):
        events = extract_demand(sample_dataset.units, sample_dataset.boat_types_by_id)
        parts = sample_dataset.parts_by_id
        del parts["P-NOSUP"]

        stock, netted = net_requirements(events, sample_dataset.stock_by_part, 0)
        reports = build_part_requirements(events, parts, netted)

        assert [r.part_id for r in reports] == ["P-HULL", "P-CLEAT"]
        assert "P-NOSUP" in caplog.text
