"""
Planning service for the BOATMRP web adapter.

Runs the planner for request payloads and commits accepted batch
schedules as draft purchase orders.
"""

import json
import logging
import time
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from boatmrp.config.schema import PlannerConfig, get_default_config
from boatmrp.engine.planner import RequirementsPlanner
from boatmrp.models.dataset import PlanningDataset
from boatmrp.models.orders import (
    BatchSchedule,
    CustomBatch,
    ScheduleResult,
    ScheduleStrategy,
)
from boatmrp.models.requirements import RequirementsAnalysis
from web.config import get_settings
from web.database.models import GenerationRun, PurchaseOrder, PurchaseOrderLine

logger = logging.getLogger(__name__)


class SupplierNotFoundError(LookupError):
    """Raised when a supplier has no requirement in the calculated range."""

    pass


class PlanningService:
    """Service for running plans and persisting committed batches.

    Every call works from the dataset it is given; the database only
    receives purchase orders for schedules that pass commit checks.
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or get_default_config()

    def calculate(
        self,
        dataset: PlanningDataset,
        safety_stock_percentage: Optional[float] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        prefer_batch_optimization: Optional[bool] = None,
    ) -> RequirementsAnalysis:
        """Run a requirements calculation.

        Raises:
            NoDemandError: If no active production units fall in range.
        """
        planner = RequirementsPlanner(dataset, self.config)
        return planner.calculate(
            safety_stock_percentage=safety_stock_percentage,
            start_date=start_date,
            end_date=end_date,
            prefer_batch_optimization=prefer_batch_optimization,
        )

    def schedule(
        self,
        dataset: PlanningDataset,
        supplier_id: str,
        strategy: ScheduleStrategy,
        batch_count: Optional[int] = None,
        custom_batches: Optional[list[CustomBatch]] = None,
        safety_stock_percentage: Optional[float] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ScheduleResult:
        """Calculate requirements, then schedule and validate one supplier.

        Raises:
            NoDemandError: If no active production units fall in range.
            SupplierNotFoundError: If the supplier has nothing to order.
            ValueError: On a bad batch count or custom batch.
        """
        planner = RequirementsPlanner(dataset, self.config)
        analysis = planner.calculate(
            safety_stock_percentage=safety_stock_percentage,
            start_date=start_date,
            end_date=end_date,
        )
        requirement = analysis.supplier(supplier_id)
        if requirement is None:
            raise SupplierNotFoundError(
                f"Supplier {supplier_id} has no requirements in this range"
            )
        return planner.schedule_and_validate(
            requirement, strategy, batch_count, custom_batches
        )

    def commit(
        self,
        db: Session,
        result: ScheduleResult,
        supplier_name: str = "",
        parameters: Optional[dict[str, Any]] = None,
    ) -> GenerationRun:
        """Persist an accepted schedule as draft purchase orders.

        The whole commit is one transaction: either every purchase order
        is written or none is. Batches with nothing to order are skipped.
        A commit that fails part way leaves a generation run marked
        "failed" with the error, written in a transaction of its own.

        Args:
            db: Database session.
            result: Schedule to commit.
            supplier_name: Supplier name copied onto the orders.
            parameters: Request parameters recorded on the generation run.

        Returns:
            The completed GenerationRun record.

        Raises:
            AllocationMismatchError: If any part is not exactly allocated.
            ShortageBlockError: If the schedule projects a stockout.
        """
        RequirementsPlanner.ensure_committable(result)

        started = time.monotonic()
        schedule = result.schedule
        try:
            run = GenerationRun(
                supplier_id=schedule.supplier_id,
                strategy=schedule.strategy.value,
                status="running",
                parameters_json=json.dumps(parameters or {}, default=str),
            )
            db.add(run)
            db.flush()

            orders: list[PurchaseOrder] = []
            for batch in schedule.batches:
                if batch.is_empty:
                    continue
                order = PurchaseOrder(
                    po_number=self._next_po_number(db, batch.order_date),
                    generation_run_id=run.id,
                    supplier_id=batch.supplier_id,
                    supplier_name=supplier_name,
                    order_date=batch.order_date,
                    expected_delivery_date=batch.expected_delivery_date,
                    required_by_date=batch.required_by_date,
                    status="draft",
                    total_amount=batch.total_cost,
                )
                db.add(order)
                db.flush()

                for line in batch.lines:
                    if line.quantity <= 0:
                        continue
                    db.add(PurchaseOrderLine(
                        purchase_order_id=order.id,
                        part_id=line.part_id,
                        part_number=line.part_number,
                        part_name=line.part_name,
                        quantity=line.quantity,
                        unit_price=line.unit_cost,
                        line_total=line.line_total,
                        linked_unit_ids_json=json.dumps(line.unit_ids),
                    ))
                orders.append(order)

            run.status = "completed"
            run.total_pos_generated = len(orders)
            run.total_amount = sum((o.total_amount for o in orders), Decimal("0"))
            run.execution_time_ms = int((time.monotonic() - started) * 1000)
            db.commit()
        except Exception as e:
            db.rollback()
            self._record_failure(db, schedule, parameters, started, e)
            raise

        db.refresh(run)
        logger.info(
            "Committed %d purchase order(s) for supplier %s (run %d)",
            run.total_pos_generated,
            run.supplier_id,
            run.id,
        )
        return run

    def _record_failure(
        self,
        db: Session,
        schedule: BatchSchedule,
        parameters: Optional[dict[str, Any]],
        started: float,
        error: Exception,
    ) -> None:
        """Keep a failed generation run after the commit was rolled back."""
        logger.error("Commit for supplier %s failed: %s", schedule.supplier_id, error)
        try:
            db.add(GenerationRun(
                supplier_id=schedule.supplier_id,
                strategy=schedule.strategy.value,
                status="failed",
                parameters_json=json.dumps(parameters or {}, default=str),
                execution_time_ms=int((time.monotonic() - started) * 1000),
                error_message=str(error),
            ))
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Could not record failed run for supplier %s", schedule.supplier_id)

    def list_purchase_orders(
        self,
        db: Session,
        supplier_id: Optional[str] = None,
        generation_run_id: Optional[int] = None,
    ) -> list[PurchaseOrder]:
        """List committed purchase orders, oldest order date first."""
        query = db.query(PurchaseOrder)
        if supplier_id is not None:
            query = query.filter(PurchaseOrder.supplier_id == supplier_id)
        if generation_run_id is not None:
            query = query.filter(PurchaseOrder.generation_run_id == generation_run_id)
        return query.order_by(PurchaseOrder.order_date, PurchaseOrder.po_number).all()

    def get_lines(self, db: Session, order: PurchaseOrder) -> list[PurchaseOrderLine]:
        """Get a purchase order's lines."""
        return (
            db.query(PurchaseOrderLine)
            .filter(PurchaseOrderLine.purchase_order_id == order.id)
            .order_by(PurchaseOrderLine.id)
            .all()
        )

    def _next_po_number(self, db: Session, order_date: date) -> str:
        """Next free PO number for a date, as PO-YYYYMMDD-NNN."""
        prefix = f"PO-{order_date.strftime('%Y%m%d')}-"
        existing = (
            db.query(PurchaseOrder.po_number)
            .filter(PurchaseOrder.po_number.like(f"{prefix}%"))
            .all()
        )
        highest = max((int(number[len(prefix):]) for (number,) in existing), default=0)
        return f"{prefix}{highest + 1:03d}"


# Global service instance (singleton pattern)
_planning_service: Optional[PlanningService] = None


def get_planning_service() -> PlanningService:
    """Get or create the global PlanningService instance."""
    global _planning_service
    if _planning_service is None:
        _planning_service = PlanningService(get_settings().planner_config())
    return _planning_service
