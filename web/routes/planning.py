"""
Planning routes for the BOATMRP web adapter.

Each request carries the planning dataset it should run against.
"""

import json
from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from boatmrp.errors import (
    AllocationMismatchError,
    CapacitySplitError,
    NoDemandError,
    ShortageBlockError,
)
from boatmrp.models.dataset import PlanningDataset
from boatmrp.models.orders import CustomBatch, ScheduleResult, ScheduleStrategy
from boatmrp.models.requirements import RequirementsAnalysis
from web.database.models import PurchaseOrder
from web.database.session import get_db
from web.services.planning_service import SupplierNotFoundError, get_planning_service

router = APIRouter()


# =============================================================================
# Request / Response Models
# =============================================================================


class PlanRequest(BaseModel):
    """Dataset plus calculation parameters."""

    dataset: PlanningDataset
    safety_stock_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    prefer_batch_optimization: Optional[bool] = None


class ScheduleRequest(PlanRequest):
    """Calculation parameters plus a supplier and scheduling strategy."""

    supplier_id: str
    strategy: ScheduleStrategy = ScheduleStrategy.SINGLE
    batch_count: Optional[int] = Field(default=None, ge=1)
    custom_batches: Optional[list[CustomBatch]] = None


class PurchaseOrderLineOut(BaseModel):
    part_id: str
    part_number: str
    part_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    linked_unit_ids: list[str]


class PurchaseOrderOut(BaseModel):
    id: int
    po_number: str
    generation_run_id: int
    supplier_id: str
    supplier_name: str
    order_date: date
    expected_delivery_date: date
    required_by_date: Optional[date]
    status: str
    total_amount: Decimal
    lines: list[PurchaseOrderLineOut] = Field(default_factory=list)


class CommitResponse(BaseModel):
    generation_run_id: int
    pos_generated: int
    total_amount: Decimal
    purchase_orders: list[PurchaseOrderOut]


def _order_out(db: Session, order: PurchaseOrder) -> PurchaseOrderOut:
    lines = get_planning_service().get_lines(db, order)
    return PurchaseOrderOut(
        id=order.id,
        po_number=order.po_number,
        generation_run_id=order.generation_run_id,
        supplier_id=order.supplier_id,
        supplier_name=order.supplier_name or "",
        order_date=order.order_date,
        expected_delivery_date=order.expected_delivery_date,
        required_by_date=order.required_by_date,
        status=order.status,
        total_amount=order.total_amount,
        lines=[
            PurchaseOrderLineOut(
                part_id=line.part_id,
                part_number=line.part_number or "",
                part_name=line.part_name or "",
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
                linked_unit_ids=json.loads(line.linked_unit_ids_json or "[]"),
            )
            for line in lines
        ],
    )


def _schedule(request: ScheduleRequest) -> ScheduleResult:
    """Run the schedule for a request, mapping planning errors to HTTP."""
    try:
        return get_planning_service().schedule(
            request.dataset,
            request.supplier_id,
            request.strategy,
            batch_count=request.batch_count,
            custom_batches=request.custom_batches,
            safety_stock_percentage=request.safety_stock_percentage,
            start_date=request.start_date,
            end_date=request.end_date,
        )
    except (NoDemandError, SupplierNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


# =============================================================================
# Routes
# =============================================================================


@router.post("/requirements", response_model=RequirementsAnalysis)
def calculate_requirements(request: PlanRequest):
    """Calculate part and supplier requirements."""
    try:
        return get_planning_service().calculate(
            request.dataset,
            safety_stock_percentage=request.safety_stock_percentage,
            start_date=request.start_date,
            end_date=request.end_date,
            prefer_batch_optimization=request.prefer_batch_optimization,
        )
    except NoDemandError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except CapacitySplitError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.post("/schedule", response_model=ScheduleResult)
def schedule_batches(request: ScheduleRequest):
    """Propose PO batches for a supplier and report projected shortages."""
    return _schedule(request)


@router.post("/commit", response_model=CommitResponse)
def commit_batches(request: ScheduleRequest, db: Session = Depends(get_db)):
    """Commit a supplier's schedule as draft purchase orders.

    Refused with 409 if allocations don't match requirements or the
    schedule projects a shortage.
    """
    service = get_planning_service()
    result = _schedule(request)
    supplier = request.dataset.supplier(request.supplier_id)

    try:
        run = service.commit(
            db,
            result,
            supplier_name=supplier.name if supplier else "",
            parameters=request.model_dump(mode="json", exclude={"dataset"}),
        )
    except (AllocationMismatchError, ShortageBlockError) as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    orders = service.list_purchase_orders(db, generation_run_id=run.id)
    return CommitResponse(
        generation_run_id=run.id,
        pos_generated=run.total_pos_generated,
        total_amount=run.total_amount,
        purchase_orders=[_order_out(db, order) for order in orders],
    )


@router.get("/purchase-orders", response_model=list[PurchaseOrderOut])
def list_purchase_orders(
    supplier_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List committed purchase orders."""
    orders = get_planning_service().list_purchase_orders(db, supplier_id=supplier_id)
    return [_order_out(db, order) for order in orders]
