"""
Purchase order batch scheduling for BOATMRP.

This module handles:
- Proposing dated PO batches for one supplier under a strategy
- Re-splitting a supplier's requirement when batches are added or removed
- Summarizing how well batch allocations cover each part's requirement
- Grouping matched order lines into monthly draft batches

Strategies:
    single    One batch carrying every part's full net quantity
    weekly    N batches 7 days apart
    biweekly  N batches 14 days apart
    monthly   N batches 30 days apart
    custom    Caller-supplied dates and quantities, bookkeeping only

Every batch is expected to arrive ``max lead time`` days after it is
ordered, where the maximum is taken across the supplier's parts.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from boatmrp.config.schema import PlannerConfig, get_default_config
from boatmrp.dates import add_days, first_of_month
from boatmrp.models.orders import (
    AllocationStatus,
    AllocationSummary,
    BatchSchedule,
    CustomBatch,
    PartAllocation,
    POBatch,
    POBatchLine,
    ScheduleStrategy,
)
from boatmrp.models.requirements import (
    RequirementsAnalysis,
    SupplierPartRequirement,
    SupplierRequirement,
)

logger = logging.getLogger(__name__)


def spread_evenly(quantity: int, batch_count: int) -> list[int]:
    """Split a quantity over batches, one extra unit to each early batch."""
    base, remainder = divmod(quantity, batch_count)
    return [base + (1 if i < remainder else 0) for i in range(batch_count)]


def spread_remainder_last(quantity: int, batch_count: int) -> list[int]:
    """Split a quantity over batches, the whole remainder on the last one."""
    base, remainder = divmod(quantity, batch_count)
    sizes = [base] * batch_count
    sizes[-1] += remainder
    return sizes


class POBatchScheduler:
    """Builds PO batch schedules for a supplier's requirement.

    Allocation mismatches are reported in the schedule's allocation
    summary and never corrected automatically.
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        """Initialize batch scheduler.

        Args:
            config: Planner configuration (uses defaults if None)
        """
        self.config = config or get_default_config()

    def base_order_date(self, requirement: SupplierRequirement) -> date:
        """Order date that lets the slowest part arrive for the earliest need.

        Raises:
            ValueError: If the supplier requirement has no parts
        """
        earliest = requirement.earliest_need_date
        if earliest is None:
            raise ValueError(f"Supplier {requirement.supplier_id} has no part requirements")
        return add_days(
            earliest,
            -(requirement.max_lead_time_days + self.config.ordering.buffer_days),
        )

    def schedule(
        self,
        requirement: SupplierRequirement,
        strategy: ScheduleStrategy | str,
        batch_count: Optional[int] = None,
        custom_batches: Optional[Iterable[CustomBatch]] = None,
    ) -> BatchSchedule:
        """Build a schedule under the given strategy.

        Args:
            requirement: Supplier requirement to schedule
            strategy: Scheduling strategy
            batch_count: Batches for periodic strategies (config default if None)
            custom_batches: Batches for the custom strategy

        Returns:
            BatchSchedule with its allocation summary

        Raises:
            ValueError: On a bad batch count, missing custom batches, or a
                custom batch naming a part the supplier isn't supplying
        """
        strategy = ScheduleStrategy(strategy)
        if strategy == ScheduleStrategy.SINGLE:
            return self.single(requirement)
        if strategy == ScheduleStrategy.CUSTOM:
            if custom_batches is None:
                raise ValueError("Custom strategy needs custom_batches")
            return self.custom(requirement, custom_batches)
        return self.periodic(requirement, strategy, batch_count)

    def single(self, requirement: SupplierRequirement) -> BatchSchedule:
        """One batch for each part's full net quantity."""
        order_date = self.base_order_date(requirement)
        batch = self._build_batch(
            requirement,
            1,
            order_date,
            {p.part_id: p.net_quantity_needed for p in requirement.parts},
        )
        return self._finish(requirement, ScheduleStrategy.SINGLE, [batch])

    def periodic(
        self,
        requirement: SupplierRequirement,
        strategy: ScheduleStrategy,
        batch_count: Optional[int] = None,
    ) -> BatchSchedule:
        """N evenly spaced batches, the remainder landing on the last one.

        Batches that end up with nothing to order are kept so that the
        batch count matches what was asked for.
        """
        if not strategy.is_periodic:
            raise ValueError(f"{strategy.value} is not a periodic strategy")
        count = batch_count if batch_count is not None else self.config.scheduling.default_batch_count
        if count < 1:
            raise ValueError(f"Batch count must be >= 1, got {count}")

        interval = self.config.scheduling.interval_days[strategy.value]
        base = self.base_order_date(requirement)
        sizes = {
            p.part_id: spread_remainder_last(p.net_quantity_needed, count)
            for p in requirement.parts
        }

        batches = [
            self._build_batch(
                requirement,
                i + 1,
                add_days(base, i * interval),
                {part_id: split[i] for part_id, split in sizes.items()},
            )
            for i in range(count)
        ]
        return self._finish(requirement, strategy, batches)

    def custom(
        self,
        requirement: SupplierRequirement,
        custom_batches: Iterable[CustomBatch],
    ) -> BatchSchedule:
        """Record caller-supplied batches as given.

        Raises:
            ValueError: If a batch names a part not in the requirement
        """
        known = {p.part_id for p in requirement.parts}
        batches = []
        for i, custom in enumerate(custom_batches):
            unknown = sorted(set(custom.allocations) - known)
            if unknown:
                raise ValueError(
                    f"Batch {i + 1} allocates unknown part(s) for supplier "
                    f"{requirement.supplier_id}: {', '.join(unknown)}"
                )
            batches.append(
                self._build_batch(requirement, i + 1, custom.order_date, custom.allocations)
            )
        return self._finish(requirement, ScheduleStrategy.CUSTOM, batches)

    def redistribute(
        self,
        requirement: SupplierRequirement,
        order_dates: Iterable[date],
        strategy: ScheduleStrategy = ScheduleStrategy.CUSTOM,
    ) -> BatchSchedule:
        """Re-split every part's net requirement over the given dates.

        Each part gets ``q // N`` per batch with one extra unit on each
        of the first ``q % N`` batches, so allocations always add up.

        Raises:
            ValueError: If no dates are given
        """
        dates = list(order_dates)
        if not dates:
            raise ValueError("Cannot redistribute over zero batches")

        sizes = {
            p.part_id: spread_evenly(p.net_quantity_needed, len(dates))
            for p in requirement.parts
        }
        batches = [
            self._build_batch(
                requirement,
                i + 1,
                order_date,
                {part_id: split[i] for part_id, split in sizes.items()},
            )
            for i, order_date in enumerate(dates)
        ]
        return self._finish(requirement, strategy, batches)

    def add_batch(
        self,
        requirement: SupplierRequirement,
        schedule: BatchSchedule,
        order_date: date,
    ) -> BatchSchedule:
        """Append a batch and re-split all quantities."""
        dates = [b.order_date for b in schedule.batches] + [order_date]
        return self.redistribute(requirement, dates, schedule.strategy)

    def remove_batch(
        self,
        requirement: SupplierRequirement,
        schedule: BatchSchedule,
        index: int,
    ) -> BatchSchedule:
        """Drop the batch at a zero-based index and re-split all quantities.

        Raises:
            IndexError: If the index is out of range
            ValueError: If it is the only batch
        """
        if not 0 <= index < len(schedule.batches):
            raise IndexError(f"No batch at index {index}")
        if len(schedule.batches) == 1:
            raise ValueError("Cannot remove the only batch")
        dates = [b.order_date for i, b in enumerate(schedule.batches) if i != index]
        return self.redistribute(requirement, dates, schedule.strategy)

    def allocation_summary(
        self,
        requirement: SupplierRequirement,
        batches: Iterable[POBatch],
    ) -> AllocationSummary:
        """Compare allocated quantities against each part's net requirement."""
        batches = list(batches)
        allocations = []
        for part in requirement.parts:
            allocated = sum(b.quantity_for(part.part_id) for b in batches)
            required = part.net_quantity_needed
            if allocated < required:
                status = AllocationStatus.UNDER
            elif allocated > required:
                status = AllocationStatus.OVER
            else:
                status = AllocationStatus.EXACT
            allocations.append(PartAllocation(
                part_id=part.part_id,
                part_number=part.part_number,
                required=required,
                allocated=allocated,
                status=status,
            ))

        return AllocationSummary(
            parts=allocations,
            over_allocated=sum(1 for a in allocations if a.status == AllocationStatus.OVER),
            under_allocated=sum(1 for a in allocations if a.status == AllocationStatus.UNDER),
        )

    def _build_batch(
        self,
        requirement: SupplierRequirement,
        batch_number: int,
        order_date: date,
        quantities: dict[str, int],
    ) -> POBatch:
        lines = []
        for part in requirement.parts:
            if part.part_id not in quantities:
                continue
            quantity = quantities[part.part_id]
            lines.append(POBatchLine(
                part_id=part.part_id,
                part_number=part.part_number,
                part_name=part.part_name,
                quantity=quantity,
                unit_cost=part.unit_cost,
                line_total=part.unit_cost * Decimal(quantity),
                unit_ids=_unit_ids(part),
            ))

        return POBatch(
            batch_number=batch_number,
            supplier_id=requirement.supplier_id,
            order_date=order_date,
            expected_delivery_date=add_days(order_date, requirement.max_lead_time_days),
            required_by_date=requirement.earliest_need_date,
            lines=lines,
            total_cost=sum((line.line_total for line in lines), Decimal("0")),
        )

    def _finish(
        self,
        requirement: SupplierRequirement,
        strategy: ScheduleStrategy,
        batches: list[POBatch],
    ) -> BatchSchedule:
        summary = self.allocation_summary(requirement, batches)
        if not summary.is_complete:
            logger.debug(
                "Supplier %s %s schedule: %d over, %d under",
                requirement.supplier_id,
                strategy.value,
                summary.over_allocated,
                summary.under_allocated,
            )
        return BatchSchedule(
            supplier_id=requirement.supplier_id,
            strategy=strategy,
            max_lead_time_days=requirement.max_lead_time_days,
            batches=batches,
            allocation=summary,
        )


def group_order_lines_by_month(analysis: RequirementsAnalysis) -> list[POBatch]:
    """Group matched order lines into one draft batch per supplier and month.

    Lines for the same part in the same month are merged. Each batch is
    dated the first of its month and required by its earliest line need
    date. Batches come out per supplier (analysis order), then by month.

    Args:
        analysis: Result of a requirements calculation

    Returns:
        Draft PO batches numbered from 1 within each supplier
    """
    drafts: list[POBatch] = []
    for supplier in analysis.suppliers:
        lead = supplier.max_lead_time_days
        months: dict[date, dict[str, POBatchLine]] = {}
        required_by: dict[date, date] = {}

        for part in supplier.parts:
            for line in part.order_lines:
                month = first_of_month(line.order_date)
                month_lines = months.setdefault(month, {})
                if month not in required_by or line.required_by_date < required_by[month]:
                    required_by[month] = line.required_by_date

                merged = month_lines.get(part.part_id)
                if merged is None:
                    month_lines[part.part_id] = POBatchLine(
                        part_id=part.part_id,
                        part_number=part.part_number,
                        part_name=part.part_name,
                        quantity=line.quantity,
                        unit_cost=line.unit_price,
                        line_total=line.line_total,
                        unit_ids=list(line.unit_ids),
                    )
                else:
                    merged.quantity += line.quantity
                    merged.line_total += line.line_total
                    merged.unit_ids.extend(u for u in line.unit_ids if u not in merged.unit_ids)

        for number, month in enumerate(sorted(months), start=1):
            lines = list(months[month].values())
            drafts.append(POBatch(
                batch_number=number,
                supplier_id=supplier.supplier_id,
                order_date=month,
                expected_delivery_date=add_days(month, lead),
                required_by_date=required_by[month],
                lines=lines,
                total_cost=sum((line.line_total for line in lines), Decimal("0")),
            ))

    logger.debug("Grouped order lines into %d monthly batch(es)", len(drafts))
    return drafts


def _unit_ids(part: SupplierPartRequirement) -> list[str]:
    seen: list[str] = []
    for need in part.units_needing:
        if need.unit_id not in seen:
            seen.append(need.unit_id)
    return seen
