"""
Purchase order batch models for BOATMRP.

A batch schedule is the set of dated purchase orders proposed for one
supplier, plus an allocation summary comparing what the batches order
against each part's net requirement.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from boatmrp.dates import to_civil_date
from boatmrp.models.shortages import ShortageReport


class ScheduleStrategy(str, Enum):
    """Ways of spreading a supplier's requirement over batches."""

    SINGLE = "single"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"

    @property
    def is_periodic(self) -> bool:
        return self in (
            ScheduleStrategy.WEEKLY,
            ScheduleStrategy.BIWEEKLY,
            ScheduleStrategy.MONTHLY,
        )


class AllocationStatus(str, Enum):
    """How a part's allocated quantity compares to its requirement."""

    UNDER = "under"
    EXACT = "exact"
    OVER = "over"


class POBatchLine(BaseModel):
    """One part on a purchase order batch."""

    part_id: str
    part_number: str = ""
    part_name: str = ""
    quantity: int = Field(ge=0)
    unit_cost: Decimal = Field(ge=0)
    line_total: Decimal = Field(ge=0)
    unit_ids: list[str] = Field(default_factory=list)


class POBatch(BaseModel):
    """A dated purchase order for one supplier."""

    batch_number: int = Field(ge=1)
    supplier_id: str
    order_date: date
    expected_delivery_date: date
    required_by_date: Optional[date] = None
    lines: list[POBatchLine] = Field(default_factory=list)
    total_cost: Decimal = Decimal("0")

    def quantity_for(self, part_id: str) -> int:
        """Units of a part ordered on this batch."""
        return sum(line.quantity for line in self.lines if line.part_id == part_id)

    @property
    def is_empty(self) -> bool:
        return not any(line.quantity > 0 for line in self.lines)


class PartAllocation(BaseModel):
    """Allocated vs required quantity for one part."""

    part_id: str
    part_number: str = ""
    required: int = Field(ge=0)
    allocated: int = Field(ge=0)
    status: AllocationStatus

    @computed_field
    @property
    def difference(self) -> int:
        """Allocated minus required (positive when over-allocated)."""
        return self.allocated - self.required


class AllocationSummary(BaseModel):
    """Allocation completeness across all parts of a schedule."""

    parts: list[PartAllocation] = Field(default_factory=list)
    over_allocated: int = 0
    under_allocated: int = 0

    @property
    def is_complete(self) -> bool:
        return self.over_allocated == 0 and self.under_allocated == 0

    @property
    def mismatches(self) -> list[PartAllocation]:
        return [p for p in self.parts if p.status != AllocationStatus.EXACT]

    @computed_field
    @property
    def total_difference(self) -> int:
        """Sum of absolute over/under amounts."""
        return sum(abs(p.difference) for p in self.parts)


class BatchSchedule(BaseModel):
    """Batches proposed for one supplier under a strategy."""

    supplier_id: str
    strategy: ScheduleStrategy
    max_lead_time_days: int = Field(ge=0)
    batches: list[POBatch] = Field(default_factory=list)
    allocation: AllocationSummary = Field(default_factory=AllocationSummary)

    @property
    def total_cost(self) -> Decimal:
        return sum((b.total_cost for b in self.batches), Decimal("0"))


class CustomBatch(BaseModel):
    """Caller-supplied batch: a date and per-part quantities."""

    order_date: date
    allocations: dict[str, int] = Field(default_factory=dict)

    @field_validator("order_date", mode="before")
    @classmethod
    def normalize_order_date(cls, v: Any) -> date:
        return to_civil_date(v)

    @field_validator("allocations")
    @classmethod
    def validate_allocations(cls, v: dict[str, int]) -> dict[str, int]:
        for part_id, quantity in v.items():
            if quantity < 0:
                raise ValueError(f"Allocation for {part_id} cannot be negative")
        return v


class ScheduleResult(BaseModel):
    """A batch schedule together with its shortage report."""

    schedule: BatchSchedule
    shortages: ShortageReport

    @property
    def is_committable(self) -> bool:
        return self.schedule.allocation.is_complete and not self.shortages.has_shortage
