"""
Errors raised by the BOATMRP planning engine.

Fatal conditions are exceptions deriving from PlanningError. Per-part
problems that should not stop a calculation (a part with no eligible
supplier) are reported as UnmatchedSupplierWarning records instead.
"""

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from boatmrp.models.orders import PartAllocation
    from boatmrp.models.shortages import ShortageEvent


class PlanningError(Exception):
    """Base class for all planning errors."""

    pass


class NoDemandError(PlanningError):
    """Raised when no scheduled production units fall in the requested range."""

    def __init__(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ):
        self.start_date = start_date
        self.end_date = end_date
        if start_date or end_date:
            window = f" between {start_date or '-'} and {end_date or '-'}"
        else:
            window = ""
        super().__init__(f"No scheduled production units found{window}")


class MalformedBOMError(PlanningError, ValueError):
    """Raised when a boat type's MBOM blob cannot be turned into typed lines."""

    def __init__(self, message: str, boat_type_id: Optional[str] = None, index: Optional[int] = None):
        self.boat_type_id = boat_type_id
        self.index = index
        location = ""
        if boat_type_id is not None:
            location += f"boat type {boat_type_id}"
        if index is not None:
            location += f"{', ' if location else ''}MBOM entry {index}"
        super().__init__(f"{location}: {message}" if location else message)


class CapacitySplitError(PlanningError, ValueError):
    """Raised when a capacity split would date orders before the calendar starts."""

    def __init__(self, part_id: str, split_count: int, capacity: int, base_date: date):
        self.part_id = part_id
        self.split_count = split_count
        self.capacity = capacity
        self.base_date = base_date
        super().__init__(
            f"Part {part_id} would need {split_count} monthly orders at a capacity "
            f"of {capacity} per month, reaching back before year 1 from "
            f"{base_date.isoformat()}"
        )


class DatasetError(PlanningError):
    """Raised when a planning dataset file cannot be read."""

    pass


class ShortageBlockError(PlanningError):
    """Raised when committing a schedule that projects a stockout."""

    def __init__(self, shortage: "ShortageEvent"):
        self.shortage = shortage
        super().__init__(
            f"Projected shortage on {shortage.event_date.isoformat()} for part "
            f"{shortage.part_number or shortage.part_id}: stock would reach "
            f"{shortage.resulting_stock}"
        )


class AllocationMismatchError(PlanningError):
    """Raised when committing a schedule whose allocations don't match requirements."""

    def __init__(self, mismatches: list["PartAllocation"]):
        self.mismatches = mismatches
        details = ", ".join(
            f"{m.part_number or m.part_id} {m.difference:+d}" for m in mismatches
        )
        super().__init__(
            f"{len(mismatches)} part(s) are not exactly allocated: {details}"
        )


@dataclass
class UnmatchedSupplierWarning:
    """A part with a net requirement but no eligible supplier link."""

    part_id: str
    part_number: str
    part_name: str
    net_quantity: int

    @property
    def message(self) -> str:
        return (
            f"No supplier found for part {self.part_number or self.part_id} "
            f"({self.net_quantity} units needed)"
        )

    def __str__(self) -> str:
        return self.message
