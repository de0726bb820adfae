"""
BOATMRP planning engine.

This module contains the core planning logic:
- Demand extraction from the production schedule
- Cumulative inventory netting with safety stock
- Supplier matching under lead time, batch, MOQ and capacity terms
- PO batch scheduling strategies
- Delivery/consumption timeline validation
"""

from boatmrp.engine.demand import (
    DemandEvent,
    Requirement,
    extract_demand,
    filter_units,
    group_requirements,
)
from boatmrp.engine.netting import (
    NetRequirement,
    apply_safety_stock,
    build_part_requirements,
    net_demand,
    net_part_requirements,
    net_requirements,
)
from boatmrp.engine.suppliers import (
    MatchResult,
    SupplierMatcher,
    order_lines_for,
    order_quantity,
    select_supplier,
    split_quantity,
)
from boatmrp.engine.batches import (
    POBatchScheduler,
    group_order_lines_by_month,
    spread_evenly,
    spread_remainder_last,
)
from boatmrp.engine.timeline import (
    EventKind,
    TimelineEvent,
    TimelineValidator,
    timeline_sort_key,
)
from boatmrp.engine.planner import (
    RequirementsPlanner,
    ensure_committable,
)

__all__ = [
    # Demand
    "DemandEvent",
    "Requirement",
    "extract_demand",
    "filter_units",
    "group_requirements",
    # Netting
    "NetRequirement",
    "apply_safety_stock",
    "build_part_requirements",
    "net_demand",
    "net_part_requirements",
    "net_requirements",
    # Suppliers
    "MatchResult",
    "SupplierMatcher",
    "order_lines_for",
    "order_quantity",
    "select_supplier",
    "split_quantity",
    # Batches
    "POBatchScheduler",
    "group_order_lines_by_month",
    "spread_evenly",
    "spread_remainder_last",
    # Timeline
    "EventKind",
    "TimelineEvent",
    "TimelineValidator",
    "timeline_sort_key",
    # Planner
    "RequirementsPlanner",
    "ensure_committable",
]
