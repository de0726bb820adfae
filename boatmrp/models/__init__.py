"""
Data models for BOATMRP.

This module contains Pydantic models representing:
- Parts, suppliers and supplier-part terms
- Boat types (with MBOM) and production units
- The planning dataset bundle
- Requirement, batch and shortage reports
"""

from boatmrp.models.parts import (
    Part,
    Supplier,
    SupplierPart,
)
from boatmrp.models.boats import (
    BoatType,
    MBOMLine,
    ProductionUnit,
    UnitStatus,
    parse_mbom,
)
from boatmrp.models.dataset import PlanningDataset
from boatmrp.models.requirements import (
    DatedRequirement,
    OrderLine,
    PartRequirement,
    RequirementsAnalysis,
    SupplierPartRequirement,
    SupplierRequirement,
    UnitNeed,
)
from boatmrp.models.shortages import (
    ShortageEvent,
    ShortageReport,
    StockPoint,
)
from boatmrp.models.orders import (
    AllocationStatus,
    AllocationSummary,
    BatchSchedule,
    CustomBatch,
    PartAllocation,
    POBatch,
    POBatchLine,
    ScheduleResult,
    ScheduleStrategy,
)

__all__ = [
    # Parts
    "Part",
    "Supplier",
    "SupplierPart",
    # Boats
    "BoatType",
    "MBOMLine",
    "ProductionUnit",
    "UnitStatus",
    "parse_mbom",
    # Dataset
    "PlanningDataset",
    # Requirements
    "DatedRequirement",
    "OrderLine",
    "PartRequirement",
    "RequirementsAnalysis",
    "SupplierPartRequirement",
    "SupplierRequirement",
    "UnitNeed",
    # Shortages
    "ShortageEvent",
    "ShortageReport",
    "StockPoint",
    # Orders
    "AllocationStatus",
    "AllocationSummary",
    "BatchSchedule",
    "CustomBatch",
    "PartAllocation",
    "POBatch",
    "POBatchLine",
    "ScheduleResult",
    "ScheduleStrategy",
]
