"""
Tests for PO batch scheduling.

Tests cover:
- Single, periodic and custom strategies
- Allocation summaries (under, over, exact)
- Redistribution when batches are added or removed
- Monthly grouping of matched order lines
"""

from datetime import date
from decimal import Decimal

import pytest

from boatmrp.engine.batches import (
    POBatchScheduler,
    group_order_lines_by_month,
    spread_evenly,
    spread_remainder_last,
)
from boatmrp.engine.planner import RequirementsPlanner
from boatmrp.models import AllocationStatus, CustomBatch, ScheduleStrategy


@pytest.fixture
def analysis(sample_dataset, no_safety_config):
    return RequirementsPlanner(sample_dataset, no_safety_config).calculate()


@pytest.fixture
def acme(analysis):
    return analysis.supplier("S1")


class TestSpreading:
    """Tests for quantity spreading helpers."""

    def test_spread_evenly(self):
        assert spread_evenly(10, 3) == [4, 3, 3]
        assert spread_evenly(2, 4) == [1, 1, 0, 0]

    def test_spread_remainder_last(self):
        assert spread_remainder_last(10, 3) == [3, 3, 4]
        assert spread_remainder_last(2, 4) == [0, 0, 0, 2]


class TestSingleStrategy:
    """Tests for the single-batch strategy."""

    def test_single_batch(self, acme, day):
        schedule = POBatchScheduler().single(acme)

        assert len(schedule.batches) == 1
        batch = schedule.batches[0]
        # Earliest need 03-05, slowest lead 10 days, buffer 3
        assert batch.order_date == day(20, month=2)
        assert batch.expected_delivery_date == day(2)
        assert batch.quantity_for("P-HULL") == 6
        assert batch.quantity_for("P-CLEAT") == 8
        assert batch.total_cost == Decimal("52.00")
        assert schedule.allocation.is_complete
        assert schedule.total_cost == Decimal("52.00")

    def test_lines_carry_units(self, acme):
        batch = POBatchScheduler().single(acme).batches[0]

        assert batch.lines[0].unit_ids == ["U1", "U2"]


class TestPeriodicStrategies:
    """Tests for weekly, biweekly and monthly strategies."""

    @pytest.mark.parametrize("strategy,interval", [
        (ScheduleStrategy.WEEKLY, 7),
        (ScheduleStrategy.BIWEEKLY, 14),
        (ScheduleStrategy.MONTHLY, 30),
    ])
    def test_dates_and_split(self, acme, strategy, interval):
        schedule = POBatchScheduler().periodic(acme, strategy, batch_count=4)

        base = date(2025, 2, 20)
        assert [b.order_date.toordinal() - base.toordinal() for b in schedule.batches] == [
            0, interval, 2 * interval, 3 * interval,
        ]
        # 6 over 4: remainder on the last batch
        assert [b.quantity_for("P-HULL") for b in schedule.batches] == [1, 1, 1, 3]
        assert [b.quantity_for("P-CLEAT") for b in schedule.batches] == [2, 2, 2, 2]
        assert schedule.allocation.is_complete

    def test_default_batch_count_from_config(self, acme):
        schedule = POBatchScheduler().schedule(acme, "weekly")

        assert len(schedule.batches) == 3

    def test_empty_batches_kept(self, acme):
        schedule = POBatchScheduler().periodic(acme, ScheduleStrategy.WEEKLY, batch_count=8)

        assert len(schedule.batches) == 8
        assert schedule.batches[0].quantity_for("P-HULL") == 0
        assert schedule.allocation.is_complete

    def test_zero_batches_rejected(self, acme):
        with pytest.raises(ValueError):
            POBatchScheduler().periodic(acme, ScheduleStrategy.WEEKLY, batch_count=0)

    def test_non_periodic_rejected(self, acme):
        with pytest.raises(ValueError):
            POBatchScheduler().periodic(acme, ScheduleStrategy.SINGLE)


class TestCustomStrategy:
    """Tests for caller-supplied batches."""

    def test_custom_bookkeeping(self, acme, day):
        batches = [
            CustomBatch(order_date=day(1, month=2), allocations={"P-HULL": 6, "P-CLEAT": 3}),
            CustomBatch(order_date="2025-02-15", allocations={"P-CLEAT": 7}),
        ]

        schedule = POBatchScheduler().schedule(acme, ScheduleStrategy.CUSTOM, custom_batches=batches)

        assert schedule.batches[1].order_date == day(15, month=2)
        assert schedule.batches[1].expected_delivery_date == day(25, month=2)
        assert schedule.batches[0].total_cost == Decimal("27.00")

        cleat = next(p for p in schedule.allocation.parts if p.part_id == "P-CLEAT")
        assert cleat.status == AllocationStatus.OVER
        assert cleat.difference == 2
        assert schedule.allocation.over_allocated == 1
        assert schedule.allocation.under_allocated == 0
        assert not schedule.allocation.is_complete

    def test_under_allocation_not_corrected(self, acme, day):
        batches = [CustomBatch(order_date=day(1, month=2), allocations={"P-HULL": 2})]

        schedule = POBatchScheduler().custom(acme, batches)

        statuses = {p.part_id: (p.status, p.difference) for p in schedule.allocation.parts}
        assert statuses == {
            "P-HULL": (AllocationStatus.UNDER, -4),
            "P-CLEAT": (AllocationStatus.UNDER, -8),
        }
        assert schedule.allocation.total_difference == 12

    def test_unknown_part_rejected(self, acme, day):
        batches = [CustomBatch(order_date=day(1, month=2), allocations={"P-NOSUP": 1})]

        with pytest.raises(ValueError, match="P-NOSUP"):
            POBatchScheduler().custom(acme, batches)

    def test_missing_custom_batches(self, acme):
        with pytest.raises(ValueError):
            POBatchScheduler().schedule(acme, "custom")

    def test_negative_allocation_rejected(self, day):
        with pytest.raises(ValueError):
            CustomBatch(order_date=day(1), allocations={"P-HULL": -1})


class TestRedistribution:
    """Tests for adding, removing and redistributing batches."""

    def test_redistribute_remainder_to_earliest(self, acme, day):
        dates = [day(1, month=2), day(8, month=2), day(15, month=2), day(22, month=2)]

        schedule = POBatchScheduler().redistribute(acme, dates)

        assert [b.quantity_for("P-HULL") for b in schedule.batches] == [2, 2, 1, 1]
        assert schedule.allocation.is_complete

    def test_add_batch(self, acme, day):
        scheduler = POBatchScheduler()
        schedule = scheduler.single(acme)

        schedule = scheduler.add_batch(acme, schedule, day(1))

        assert [b.batch_number for b in schedule.batches] == [1, 2]
        assert [b.quantity_for("P-CLEAT") for b in schedule.batches] == [4, 4]
        assert schedule.strategy == ScheduleStrategy.SINGLE
        assert schedule.allocation.is_complete

    def test_remove_batch(self, acme):
        scheduler = POBatchScheduler()
        schedule = scheduler.periodic(acme, ScheduleStrategy.WEEKLY, batch_count=3)

        schedule = scheduler.remove_batch(acme, schedule, 1)

        assert [b.order_date for b in schedule.batches] == [date(2025, 2, 20), date(2025, 3, 6)]
        assert [b.quantity_for("P-HULL") for b in schedule.batches] == [3, 3]

    def test_remove_last_remaining_batch(self, acme):
        scheduler = POBatchScheduler()
        schedule = scheduler.single(acme)

        with pytest.raises(ValueError):
            scheduler.remove_batch(acme, schedule, 0)
        with pytest.raises(IndexError):
            scheduler.remove_batch(acme, schedule, 3)

    @pytest.mark.parametrize("count", range(1, 12))
    def test_redistribution_preserves_totals(self, acme, count):
        dates = [date(2025, 1, 1 + i) for i in range(count)]

        schedule = POBatchScheduler().redistribute(acme, dates)

        for part in acme.parts:
            sizes = [b.quantity_for(part.part_id) for b in schedule.batches]
            assert sum(sizes) == part.net_quantity_needed
            assert max(sizes) - min(sizes) <= 1


class TestMonthlyGrouping:
    """Tests for grouping order lines by supplier and month."""

    def test_group_by_month(self, analysis, day):
        drafts = group_order_lines_by_month(analysis)

        assert [(d.supplier_id, d.order_date) for d in drafts] == [
            ("S1", day(1, month=2)),
            ("S1", day(1)),
        ]
        february, march = drafts
        # Both cleat orders fall in February and merge into one line
        assert [(line.part_id, line.quantity) for line in february.lines] == [("P-CLEAT", 20)]
        assert february.required_by_date == day(5)
        assert february.total_cost == Decimal("100.00")
        assert [(line.part_id, line.quantity) for line in march.lines] == [("P-HULL", 6)]
        assert march.required_by_date == day(12)
        assert march.expected_delivery_date == day(11)
