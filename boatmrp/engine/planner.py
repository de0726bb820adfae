"""
Requirements planning entry points for BOATMRP.

RequirementsPlanner ties the pipeline together:
    Demand Extractor -> Inventory Netting -> Supplier Matcher
    -> PO Batch Scheduler -> Timeline Validator

It reads only the dataset it was given and returns plain report models;
committing accepted batches is left to the caller.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from boatmrp.config.schema import PlannerConfig, get_default_config
from boatmrp.engine.batches import POBatchScheduler, group_order_lines_by_month
from boatmrp.engine.demand import extract_demand, filter_units
from boatmrp.engine.netting import net_demand
from boatmrp.engine.suppliers import SupplierMatcher
from boatmrp.engine.timeline import TimelineValidator
from boatmrp.errors import AllocationMismatchError, NoDemandError, ShortageBlockError
from boatmrp.models.dataset import PlanningDataset
from boatmrp.models.orders import (
    CustomBatch,
    POBatch,
    ScheduleResult,
    ScheduleStrategy,
)
from boatmrp.models.requirements import RequirementsAnalysis, SupplierRequirement

logger = logging.getLogger(__name__)


def ensure_committable(result: ScheduleResult) -> None:
    """Refuse a schedule that can't be committed as is.

    Allocation is checked before shortages.

    Raises:
        AllocationMismatchError: If any part is over- or under-allocated
        ShortageBlockError: If the schedule projects a stockout
    """
    mismatches = result.schedule.allocation.mismatches
    if mismatches:
        raise AllocationMismatchError(mismatches)
    first = result.shortages.first_shortage
    if first is not None:
        raise ShortageBlockError(first)


class RequirementsPlanner:
    """Calculates requirements and validates PO schedules for one dataset."""

    def __init__(
        self,
        dataset: PlanningDataset,
        config: Optional[PlannerConfig] = None,
    ):
        """Initialize planner.

        Args:
            dataset: Parts, boat types, units, suppliers and links
            config: Planner configuration (uses defaults if None)
        """
        self.dataset = dataset
        self.config = config or get_default_config()

    def calculate(
        self,
        safety_stock_percentage: Optional[float] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        prefer_batch_optimization: Optional[bool] = None,
    ) -> RequirementsAnalysis:
        """Run a full requirements calculation.

        Args:
            safety_stock_percentage: Override for the configured percentage
            start_date: Inclusive lower due-date bound
            end_date: Inclusive upper due-date bound
            prefer_batch_optimization: Override for batch-size rounding

        Returns:
            RequirementsAnalysis with part and supplier requirements

        Raises:
            NoDemandError: If no active production units fall in range
        """
        config = self._config_for(safety_stock_percentage, prefer_batch_optimization)
        pct = config.netting.safety_stock_percentage

        units = filter_units(
            self.dataset.units, start_date, end_date, config.demand.active_statuses
        )
        if not units:
            raise NoDemandError(start_date, end_date)

        warnings: list[str] = []
        boat_types = self.dataset.boat_types_by_id
        for unit in units:
            if unit.boat_type_id not in boat_types:
                warnings.append(
                    f"Unit {unit.name or unit.id} skipped: unknown boat type {unit.boat_type_id}"
                )

        events = extract_demand(units, boat_types, config=config)
        parts = self.dataset.parts_by_id
        for part_id in dict.fromkeys(e.part_id for e in events):
            if part_id not in parts:
                warnings.append(f"Part {part_id} skipped: no part record")

        _, part_requirements = net_demand(events, parts, pct)
        match = SupplierMatcher(config).match(part_requirements, self.dataset)
        warnings.extend(match.warnings)

        total_cost = sum((s.total_cost for s in match.suppliers), Decimal("0"))
        logger.info(
            "Calculated requirements for %d unit(s): %d part(s), %d supplier(s), %d unmatched",
            len(units),
            len(part_requirements),
            len(match.suppliers),
            len(match.unmatched),
        )

        return RequirementsAnalysis(
            calculated_at=datetime.now(),
            total_parts=len(part_requirements),
            total_suppliers=len(match.suppliers),
            total_cost=total_cost,
            total_units=len(units),
            planning_horizon_start=start_date or units[0].due_date,
            planning_horizon_end=end_date or max(u.due_date for u in units),
            safety_stock_percentage=pct,
            parts=part_requirements,
            suppliers=match.suppliers,
            unmatched=match.unmatched,
            warnings=warnings,
        )

    def schedule_and_validate(
        self,
        supplier_requirement: SupplierRequirement,
        strategy: ScheduleStrategy | str,
        batch_count: Optional[int] = None,
        custom_batches: Optional[Iterable[CustomBatch]] = None,
    ) -> ScheduleResult:
        """Propose batches for a supplier and check them for shortages.

        Args:
            supplier_requirement: One supplier's requirement from ``calculate``
            strategy: Batch scheduling strategy
            batch_count: Batches for periodic strategies
            custom_batches: Batches for the custom strategy

        Returns:
            ScheduleResult with the schedule and its shortage report
        """
        schedule = POBatchScheduler(self.config).schedule(
            supplier_requirement, strategy, batch_count, custom_batches
        )
        shortages = TimelineValidator(self.config).validate(
            supplier_requirement, schedule.batches
        )
        return ScheduleResult(schedule=schedule, shortages=shortages)

    def monthly_batches(self, analysis: RequirementsAnalysis) -> list[POBatch]:
        """Draft batches grouping order lines by supplier and month."""
        return group_order_lines_by_month(analysis)

    @staticmethod
    def ensure_committable(result: ScheduleResult) -> None:
        """See :func:`ensure_committable`."""
        ensure_committable(result)

    def _config_for(
        self,
        safety_stock_percentage: Optional[float],
        prefer_batch_optimization: Optional[bool],
    ) -> PlannerConfig:
        overrides: dict = {}
        if safety_stock_percentage is not None:
            overrides.setdefault("netting", {})["safety_stock_percentage"] = safety_stock_percentage
        if prefer_batch_optimization is not None:
            overrides.setdefault("ordering", {})["prefer_batch_optimization"] = prefer_batch_optimization
        return self.config.merge(overrides) if overrides else self.config
