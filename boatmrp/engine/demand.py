"""
Demand extraction for BOATMRP.

This module handles:
- Selecting the production units that still consume parts
- Working back from each unit's due date to its parts need-by date
- Expanding each unit's MBOM into per-part demand events
- Grouping demand events that share a part and a need-by date

Units are visited in due-date order so that downstream netting sees
demand in the order it will be consumed.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from boatmrp.config.schema import PlannerConfig, get_default_config
from boatmrp.dates import add_days
from boatmrp.models.boats import BoatType, ProductionUnit

logger = logging.getLogger(__name__)


@dataclass
class DemandEvent:
    """One unit's need for one part on a need-by date."""

    part_id: str
    quantity: int
    need_by_date: date
    unit_id: str
    unit_name: str
    due_date: date
    part_name: str = ""


@dataclass
class Requirement:
    """Total demand for a part on one need-by date."""

    part_id: str
    need_by_date: date
    quantity: int
    unit_ids: list[str] = field(default_factory=list)


def filter_units(
    units: Iterable[ProductionUnit],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    statuses: Optional[Iterable[str]] = None,
) -> list[ProductionUnit]:
    """Select units by status and inclusive due-date range.

    Args:
        units: Production units to filter
        start_date: Earliest due date to keep (None for no lower bound)
        end_date: Latest due date to keep (None for no upper bound)
        statuses: Statuses to keep (defaults to the configured active ones)

    Returns:
        Matching units sorted by due date; ties keep input order
    """
    wanted = set(statuses) if statuses is not None else set(
        get_default_config().demand.active_statuses
    )

    selected = []
    for unit in units:
        if unit.status.value not in wanted:
            continue
        if start_date is not None and unit.due_date < start_date:
            continue
        if end_date is not None and unit.due_date > end_date:
            continue
        selected.append(unit)

    return sorted(selected, key=lambda u: u.due_date)


def extract_demand(
    units: Iterable[ProductionUnit],
    boat_types: dict[str, BoatType],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    statuses: Optional[Iterable[str]] = None,
    config: Optional[PlannerConfig] = None,
) -> list[DemandEvent]:
    """Expand production units into per-part demand events.

    Each selected unit contributes one event per MBOM line, dated
    ``due_date - manufacturing_time_days``. The need-by date may fall in
    the past; it is kept as is.

    Args:
        units: Production units
        boat_types: Boat types keyed by id
        start_date: Inclusive lower due-date bound
        end_date: Inclusive upper due-date bound
        statuses: Unit statuses that consume parts (config default if None)
        config: Planner configuration (uses defaults if None)

    Returns:
        Demand events in unit due-date order, then MBOM line order
    """
    config = config or get_default_config()
    if statuses is None:
        statuses = config.demand.active_statuses

    events: list[DemandEvent] = []
    for unit in filter_units(units, start_date, end_date, statuses):
        boat_type = boat_types.get(unit.boat_type_id)
        if boat_type is None:
            logger.warning(
                "Skipping unit %s: unknown boat type %s", unit.id, unit.boat_type_id
            )
            continue
        if not boat_type.is_active and not config.demand.include_inactive_boat_types:
            logger.debug("Skipping unit %s: boat type %s is inactive", unit.id, boat_type.id)
            continue

        need_by = add_days(unit.due_date, -unit.build_days(boat_type))
        for line in boat_type.mbom:
            events.append(DemandEvent(
                part_id=line.part_id,
                quantity=line.quantity_required,
                need_by_date=need_by,
                unit_id=unit.id,
                unit_name=unit.name,
                due_date=unit.due_date,
                part_name=line.part_name,
            ))

    logger.debug("Extracted %d demand events", len(events))
    return events


def group_requirements(events: Iterable[DemandEvent]) -> list[Requirement]:
    """Merge demand events that share a part and a need-by date.

    Quantities are summed and contributing unit ids collected. Groups
    keep the order in which each (part, date) pair was first seen.
    """
    grouped: dict[tuple[str, date], Requirement] = {}
    for event in events:
        key = (event.part_id, event.need_by_date)
        requirement = grouped.get(key)
        if requirement is None:
            requirement = Requirement(
                part_id=event.part_id,
                need_by_date=event.need_by_date,
                quantity=0,
            )
            grouped[key] = requirement
        requirement.quantity += event.quantity
        if event.unit_id not in requirement.unit_ids:
            requirement.unit_ids.append(event.unit_id)
    return list(grouped.values())
