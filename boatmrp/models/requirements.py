"""
Requirement report models for BOATMRP.

These are the structured results of a requirements calculation:
- Per-part requirements after inventory netting
- Supplier-matched requirements with dated order lines
- The overall analysis returned to the caller
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from boatmrp.errors import UnmatchedSupplierWarning


class UnitNeed(BaseModel):
    """A production unit's demand for one part."""

    unit_id: str
    unit_name: str = ""
    quantity: int = Field(ge=0)
    need_by_date: date
    due_date: date


class DatedRequirement(BaseModel):
    """Net requirement for a part on one need-by date."""

    need_by_date: date
    quantity: int = Field(ge=0, description="Gross demand on this date")
    raw_net_quantity: int = Field(ge=0, description="Shortfall before safety stock")
    net_quantity: int = Field(ge=0, description="Quantity to procure incl. safety stock")
    stock_before: int = Field(ge=0, description="Stock left when this date was reached")
    unit_ids: list[str] = Field(default_factory=list)


class PartRequirement(BaseModel):
    """Everything known about one part's requirement over the horizon."""

    part_id: str
    part_number: str = ""
    part_name: str = ""
    total_quantity_needed: int = Field(ge=0)
    net_quantity_needed: int = Field(ge=0)
    current_stock: int = Field(ge=0)
    unit_cost: Decimal = Field(default=Decimal("0"), ge=0)
    total_cost: Decimal = Field(default=Decimal("0"), ge=0)
    earliest_need_date: date
    latest_need_date: date
    units_needing: list[UnitNeed] = Field(default_factory=list)
    dated_requirements: list[DatedRequirement] = Field(default_factory=list)

    def consumption_by_date(self) -> dict[date, int]:
        """Gross demand per need-by date, in date order."""
        totals: dict[date, int] = {}
        for need in sorted(self.units_needing, key=lambda n: n.need_by_date):
            totals[need.need_by_date] = totals.get(need.need_by_date, 0) + need.quantity
        return totals


class OrderLine(BaseModel):
    """A dated order for a part placed with a supplier."""

    supplier_id: str
    part_id: str
    part_name: str = ""
    quantity: int = Field(ge=0)
    unit_price: Decimal = Field(ge=0)
    line_total: Decimal = Field(ge=0)
    order_date: date
    required_by_date: date
    unit_ids: list[str] = Field(default_factory=list)
    split_index: int = Field(default=0, ge=0, description="Position in a capacity split")
    split_count: int = Field(default=1, ge=1, description="Orders in the capacity split")


class SupplierPartRequirement(PartRequirement):
    """A part requirement matched to its chosen supplier link."""

    lead_time_days: int = Field(ge=0)
    batch_size: int = Field(ge=1)
    minimum_order_quantity: int = Field(ge=0)
    max_monthly_capacity: Optional[int] = None
    is_preferred: bool = False
    order_lines: list[OrderLine] = Field(default_factory=list)
    requires_approval: bool = Field(
        default=False,
        description="Capacity split spans more months than allowed",
    )

    @property
    def ordered_quantity(self) -> int:
        """Units across all order lines (after batch/MOQ rounding)."""
        return sum(line.quantity for line in self.order_lines)

    @property
    def ordered_total(self) -> Decimal:
        return sum((line.line_total for line in self.order_lines), Decimal("0"))


class SupplierRequirement(BaseModel):
    """All matched part requirements for one supplier."""

    supplier_id: str
    supplier_name: str = ""
    supplier_contact: Optional[str] = None
    supplier_email: Optional[str] = None
    supplier_phone: Optional[str] = None
    total_parts: int = 0
    total_cost: Decimal = Decimal("0")
    parts: list[SupplierPartRequirement] = Field(default_factory=list)

    @property
    def max_lead_time_days(self) -> int:
        """Longest lead time across the supplier's parts."""
        return max((p.lead_time_days for p in self.parts), default=0)

    @property
    def earliest_need_date(self) -> Optional[date]:
        return min((p.earliest_need_date for p in self.parts), default=None)

    def part(self, part_id: str) -> Optional[SupplierPartRequirement]:
        for p in self.parts:
            if p.part_id == part_id:
                return p
        return None


class RequirementsAnalysis(BaseModel):
    """Result of a requirements calculation."""

    calculated_at: datetime
    total_parts: int
    total_suppliers: int
    total_cost: Decimal
    total_units: int
    planning_horizon_start: date
    planning_horizon_end: date
    safety_stock_percentage: float
    parts: list[PartRequirement] = Field(default_factory=list)
    suppliers: list[SupplierRequirement] = Field(default_factory=list)
    unmatched: list[UnmatchedSupplierWarning] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def supplier(self, supplier_id: str) -> Optional[SupplierRequirement]:
        """Get a supplier's requirement by id."""
        for s in self.suppliers:
            if s.supplier_id == supplier_id:
                return s
        return None

    def part(self, part_id: str) -> Optional[PartRequirement]:
        for p in self.parts:
            if p.part_id == part_id:
                return p
        return None
