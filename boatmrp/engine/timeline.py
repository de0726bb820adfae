"""
Delivery/consumption timeline validation for BOATMRP.

This module handles:
- Building delivery events from PO batches (order date + max lead time)
- Building consumption events from each part's dated gross demand
- Replaying events per part from starting stock
- Reporting every consumption that drives stock below zero

Events are replayed in a fixed total order (see ``timeline_sort_key``):
by date, then deliveries before consumption on the same day, then by the
order in which events were built. The same inputs always produce the
same shortages, whichever strategy produced the batches.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from boatmrp.config.schema import PlannerConfig, get_default_config
from boatmrp.dates import add_days
from boatmrp.models.orders import POBatch
from boatmrp.models.requirements import SupplierRequirement
from boatmrp.models.shortages import ShortageEvent, ShortageReport, StockPoint

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Timeline event kinds."""

    DELIVERY = "delivery"
    CONSUMPTION = "consumption"


# Same-day deliveries are counted before same-day consumption
KIND_PRIORITY = {
    EventKind.DELIVERY: 0,
    EventKind.CONSUMPTION: 1,
}


@dataclass
class TimelineEvent:
    """A stock movement for one part on one date."""

    event_date: date
    kind: EventKind
    part_id: str
    quantity: int
    sequence: int = 0


def timeline_sort_key(event: TimelineEvent) -> tuple[date, int, int]:
    """Total order for replay: date, kind priority, build sequence."""
    return (event.event_date, KIND_PRIORITY[event.kind], event.sequence)


class TimelineValidator:
    """Replays PO deliveries against consumption to find stockouts."""

    def __init__(self, config: Optional[PlannerConfig] = None):
        """Initialize timeline validator.

        Args:
            config: Planner configuration (uses defaults if None)
        """
        self.config = config or get_default_config()

    def build_events(
        self,
        requirement: SupplierRequirement,
        batches: Iterable[POBatch],
    ) -> list[TimelineEvent]:
        """Build delivery and consumption events in replay order.

        Deliveries arrive ``max lead time`` days after each batch's
        order date. Consumption is each part's total gross demand per
        need-by date across all units.
        """
        lead = requirement.max_lead_time_days
        events: list[TimelineEvent] = []

        for batch in batches:
            arrival = add_days(batch.order_date, lead)
            for line in batch.lines:
                if line.quantity <= 0:
                    continue
                events.append(TimelineEvent(
                    event_date=arrival,
                    kind=EventKind.DELIVERY,
                    part_id=line.part_id,
                    quantity=line.quantity,
                    sequence=len(events),
                ))

        for part in requirement.parts:
            for need_by, quantity in part.consumption_by_date().items():
                events.append(TimelineEvent(
                    event_date=need_by,
                    kind=EventKind.CONSUMPTION,
                    part_id=part.part_id,
                    quantity=quantity,
                    sequence=len(events),
                ))

        return sorted(events, key=timeline_sort_key)

    def validate(
        self,
        requirement: SupplierRequirement,
        batches: Iterable[POBatch],
        starting_stock: Optional[dict[str, int]] = None,
    ) -> ShortageReport:
        """Replay a batch schedule and report projected shortages.

        Args:
            requirement: Supplier requirement the batches were built for
            batches: Proposed PO batches
            starting_stock: Stock per part before replay (defaults to each
                part requirement's current stock)

        Returns:
            ShortageReport listing every negative-stock consumption in
            replay order
        """
        batches = list(batches)
        if starting_stock is None:
            starting_stock = {p.part_id: p.current_stock for p in requirement.parts}
        stock = dict(starting_stock)
        for part in requirement.parts:
            stock.setdefault(part.part_id, 0)
        for batch in batches:
            for line in batch.lines:
                stock.setdefault(line.part_id, 0)
        opening = dict(stock)

        parts = {p.part_id: p for p in requirement.parts}
        shortages: list[ShortageEvent] = []
        points: list[StockPoint] = []

        for event in self.build_events(requirement, batches):
            if event.kind == EventKind.DELIVERY:
                stock[event.part_id] += event.quantity
            else:
                stock[event.part_id] -= event.quantity
                if stock[event.part_id] < 0:
                    part = parts.get(event.part_id)
                    shortages.append(ShortageEvent(
                        event_date=event.event_date,
                        part_id=event.part_id,
                        part_number=part.part_number if part else "",
                        part_name=part.part_name if part else "",
                        resulting_stock=stock[event.part_id],
                    ))
            points.append(StockPoint(
                event_date=event.event_date,
                part_id=event.part_id,
                stock=stock[event.part_id],
            ))

        if shortages:
            first = shortages[0]
            logger.info(
                "Supplier %s: %d projected shortage(s), first on %s for part %s",
                requirement.supplier_id,
                len(shortages),
                first.event_date,
                first.part_number or first.part_id,
            )

        return ShortageReport(
            shortages=shortages,
            starting_stock=opening,
            ending_stock=stock,
            stock_points=points,
        )
