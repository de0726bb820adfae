"""
Tests for delivery/consumption timeline validation.

Tests cover:
- Event ordering (date, then delivery before consumption)
- Shortage detection and replay-order reporting
- Projected stock snapshots and totals
"""

import logging
from datetime import date

import pytest

from boatmrp.engine.batches import POBatchScheduler
from boatmrp.engine.planner import RequirementsPlanner
from boatmrp.engine.timeline import (
    EventKind,
    TimelineEvent,
    TimelineValidator,
    timeline_sort_key,
)
from boatmrp.models import CustomBatch


@pytest.fixture
def acme(sample_dataset, no_safety_config):
    return RequirementsPlanner(sample_dataset, no_safety_config).calculate().supplier("S1")


def _custom(acme, order_date, hull=6, cleat=8):
    batches = [CustomBatch(order_date=order_date, allocations={"P-HULL": hull, "P-CLEAT": cleat})]
    return POBatchScheduler().custom(acme, batches).batches


class TestEventOrdering:
    """Tests for the replay order of timeline events."""

    def test_sort_key(self):
        d = date(2025, 3, 5)
        consumption = TimelineEvent(d, EventKind.CONSUMPTION, "P1", 4, sequence=0)
        delivery = TimelineEvent(d, EventKind.DELIVERY, "P1", 4, sequence=9)
        earlier = TimelineEvent(date(2025, 3, 4), EventKind.CONSUMPTION, "P1", 1, sequence=5)

        ordered = sorted([consumption, delivery, earlier], key=timeline_sort_key)

        assert ordered == [earlier, delivery, consumption]

    def test_build_events(self, acme, day):
        batches = POBatchScheduler().single(acme).batches

        events = TimelineValidator().build_events(acme, batches)

        assert [(e.event_date, e.kind, e.part_id, e.quantity) for e in events] == [
            (day(2), EventKind.DELIVERY, "P-HULL", 6),
            (day(2), EventKind.DELIVERY, "P-CLEAT", 8),
            (day(5), EventKind.CONSUMPTION, "P-HULL", 8),
            (day(5), EventKind.CONSUMPTION, "P-CLEAT", 4),
            (day(12), EventKind.CONSUMPTION, "P-HULL", 8),
            (day(12), EventKind.CONSUMPTION, "P-CLEAT", 4),
        ]

    def test_empty_lines_make_no_deliveries(self, acme):
        batches = _custom(acme, date(2025, 2, 1), hull=0, cleat=0)

        events = TimelineValidator().build_events(acme, batches)

        assert all(e.kind == EventKind.CONSUMPTION for e in events)


class TestValidate:
    """Tests for TimelineValidator.validate."""

    def test_single_schedule_has_no_shortage(self, acme, day):
        report = TimelineValidator().validate(acme, POBatchScheduler().single(acme).batches)

        assert not report.has_shortage
        assert report.first_shortage is None
        assert report.starting_stock == {"P-HULL": 10, "P-CLEAT": 0}
        assert report.ending_stock == {"P-HULL": 0, "P-CLEAT": 0}

    def test_same_day_delivery_covers_consumption(self, acme):
        # Ordered 02-23, arrives 03-05 with the first hull's parts need
        report = TimelineValidator().validate(acme, _custom(acme, date(2025, 2, 23)))

        assert not report.has_shortage

    def test_late_delivery_reports_every_shortage(self, acme, day, caplog):
        caplog.set_level(logging.INFO)
        # Ordered 03-10, arrives 03-20, after both need dates
        report = TimelineValidator().validate(acme, _custom(acme, day(10)))

        assert [(s.event_date, s.part_number, s.resulting_stock) for s in report.shortages] == [
            (day(5), "CL-200", -4),
            (day(12), "HL-100", -6),
            (day(12), "CL-200", -8),
        ]
        assert report.first_shortage.part_id == "P-CLEAT"
        assert report.first_shortage.shortfall == 4
        assert report.ending_stock == {"P-HULL": 0, "P-CLEAT": 0}
        assert "3 projected shortage(s)" in caplog.text

    def test_deterministic(self, acme, day):
        validator = TimelineValidator()
        batches = _custom(acme, day(10))

        assert validator.validate(acme, batches) == validator.validate(acme, batches)

    def test_starting_stock_override(self, acme, day):
        batches = POBatchScheduler().single(acme).batches

        report = TimelineValidator().validate(acme, batches, starting_stock={"P-HULL": 0})

        assert report.starting_stock == {"P-HULL": 0, "P-CLEAT": 0}
        assert [(s.event_date, s.part_id, s.resulting_stock) for s in report.shortages] == [
            (day(5), "P-HULL", -2),
            (day(12), "P-HULL", -10),
        ]


class TestProjectedStock:
    """Tests for stock snapshots from a shortage report."""

    @pytest.fixture
    def report(self, acme):
        return TimelineValidator().validate(acme, POBatchScheduler().single(acme).batches)

    def test_projected_stock(self, report, day):
        assert report.projected_stock(day(1)) == {"P-HULL": 10, "P-CLEAT": 0}
        assert report.projected_stock(day(4)) == {"P-HULL": 16, "P-CLEAT": 8}
        assert report.projected_stock(day(5)) == {"P-HULL": 8, "P-CLEAT": 4}

    def test_total_stock_series(self, report, day):
        assert report.total_stock_series() == [
            (day(2), 24),
            (day(5), 12),
            (day(12), 0),
        ]
