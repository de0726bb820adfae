"""
Inventory netting for BOATMRP.

This module handles:
- Walking each part's requirements in need-by order against stock on hand
- Emitting a net requirement when the running stock can't cover a date
- Adding safety stock to each triggering requirement
- Aggregating per-part requirement reports

The running stock is cumulative: stock consumed by an early requirement
is no longer available to a later one. Callers pass the starting stock
in and receive the remaining stock back; nothing is shared.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from fractions import Fraction
from typing import Iterable, Optional

from boatmrp.engine.demand import DemandEvent, Requirement, group_requirements
from boatmrp.models.parts import Part
from boatmrp.models.requirements import DatedRequirement, PartRequirement, UnitNeed

logger = logging.getLogger(__name__)


@dataclass
class NetRequirement:
    """A requirement the running stock could not fully cover."""

    part_id: str
    need_by_date: date
    quantity: int  # Gross demand on this date
    raw_net_quantity: int  # Shortfall before safety stock
    net_quantity: int  # Shortfall incl. safety stock
    current_stock: int  # Running stock when this date was reached
    unit_ids: list[str] = field(default_factory=list)


def apply_safety_stock(quantity: int, safety_stock_percentage: float) -> int:
    """Inflate a shortfall by a percentage, rounding up.

    Computed with exact fractions: 7 units at 10% is 7.7, ordered as 8.
    """
    if quantity <= 0:
        return 0
    factor = 1 + Fraction(str(safety_stock_percentage)) / 100
    return math.ceil(quantity * factor)


def net_part_requirements(
    requirements: Iterable[Requirement],
    starting_stock: int,
    safety_stock_percentage: float,
) -> tuple[int, list[NetRequirement]]:
    """Net one part's requirements against its stock.

    Args:
        requirements: Requirements for a single part
        starting_stock: Units on hand before the first requirement
        safety_stock_percentage: Percentage added to each shortfall

    Returns:
        Tuple of (remaining stock, net requirements in need-by order)
    """
    remaining = starting_stock
    netted: list[NetRequirement] = []

    for requirement in sorted(requirements, key=lambda r: r.need_by_date):
        shortfall = max(0, requirement.quantity - remaining)
        if shortfall > 0:
            netted.append(NetRequirement(
                part_id=requirement.part_id,
                need_by_date=requirement.need_by_date,
                quantity=requirement.quantity,
                raw_net_quantity=shortfall,
                net_quantity=apply_safety_stock(shortfall, safety_stock_percentage),
                current_stock=remaining,
                unit_ids=list(requirement.unit_ids),
            ))
            remaining = 0
        else:
            remaining -= requirement.quantity

    return remaining, netted


def net_requirements(
    events: Iterable[DemandEvent],
    stock_by_part: dict[str, int],
    safety_stock_percentage: float,
) -> tuple[dict[str, int], list[NetRequirement]]:
    """Net every part's demand against a stock snapshot.

    Args:
        events: Demand events (any order)
        stock_by_part: Starting stock keyed by part id; parts missing
            from the map start at zero
        safety_stock_percentage: Percentage added to each shortfall

    Returns:
        Tuple of (updated stock map, net requirements grouped by part in
        first-seen order, each part's in need-by order)
    """
    stock = dict(stock_by_part)

    by_part: dict[str, list[Requirement]] = {}
    for requirement in group_requirements(events):
        by_part.setdefault(requirement.part_id, []).append(requirement)

    netted: list[NetRequirement] = []
    for part_id, requirements in by_part.items():
        remaining, part_netted = net_part_requirements(
            requirements, stock.get(part_id, 0), safety_stock_percentage
        )
        stock[part_id] = remaining
        netted.extend(part_netted)
        logger.debug(
            "Part %s: %d net requirement(s), %d units left",
            part_id,
            len(part_netted),
            remaining,
        )

    return stock, netted


def build_part_requirements(
    events: Iterable[DemandEvent],
    parts: dict[str, Part],
    netted: Iterable[NetRequirement],
) -> list[PartRequirement]:
    """Aggregate demand and net requirements into per-part reports.

    Parts whose net requirement is zero are left out, as are parts with
    no part record (their stock is unknown).

    Args:
        events: Demand events the net requirements were computed from
        parts: Part records keyed by id
        netted: Net requirements from ``net_requirements``

    Returns:
        Part requirements in the order parts first appear in the demand
    """
    events = list(events)
    netted_by_part: dict[str, list[NetRequirement]] = {}
    for net in netted:
        netted_by_part.setdefault(net.part_id, []).append(net)

    events_by_part: dict[str, list[DemandEvent]] = {}
    for event in events:
        events_by_part.setdefault(event.part_id, []).append(event)

    reports: list[PartRequirement] = []
    for part_id, part_events in events_by_part.items():
        part = parts.get(part_id)
        if part is None:
            logger.warning("Skipping part %s: no part record, stock unknown", part_id)
            continue

        part_netted = netted_by_part.get(part_id, [])
        net_total = sum(n.net_quantity for n in part_netted)
        if net_total == 0:
            continue

        need_dates = [e.need_by_date for e in part_events]
        reports.append(PartRequirement(
            part_id=part_id,
            part_number=part.part_number,
            part_name=part.name or part_events[0].part_name,
            total_quantity_needed=sum(e.quantity for e in part_events),
            net_quantity_needed=net_total,
            current_stock=part.current_stock,
            unit_cost=part.unit_cost,
            total_cost=part.unit_cost * Decimal(net_total),
            earliest_need_date=min(need_dates),
            latest_need_date=max(need_dates),
            units_needing=[
                UnitNeed(
                    unit_id=e.unit_id,
                    unit_name=e.unit_name,
                    quantity=e.quantity,
                    need_by_date=e.need_by_date,
                    due_date=e.due_date,
                )
                for e in part_events
            ],
            dated_requirements=[
                DatedRequirement(
                    need_by_date=n.need_by_date,
                    quantity=n.quantity,
                    raw_net_quantity=n.raw_net_quantity,
                    net_quantity=n.net_quantity,
                    stock_before=n.current_stock,
                    unit_ids=n.unit_ids,
                )
                for n in part_netted
            ],
        ))

    return reports


def net_demand(
    events: Iterable[DemandEvent],
    parts: dict[str, Part],
    safety_stock_percentage: float,
    stock_by_part: Optional[dict[str, int]] = None,
) -> tuple[dict[str, int], list[PartRequirement]]:
    """Net demand and build part reports in one call.

    Args:
        events: Demand events
        parts: Part records keyed by id
        safety_stock_percentage: Percentage added to each shortfall
        stock_by_part: Starting stock (defaults to each part's current stock)

    Returns:
        Tuple of (remaining stock map, part requirements)
    """
    events = list(events)
    if stock_by_part is None:
        stock_by_part = {pid: p.current_stock for pid, p in parts.items()}
    remaining, netted = net_requirements(events, stock_by_part, safety_stock_percentage)
    return remaining, build_part_requirements(events, parts, netted)
