"""
SQLAlchemy models for the BOATMRP commit adapter.

These models store committed purchase orders and the generation runs
that produced them. Planning itself never touches the database; only
accepted batch schedules are written here.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class GenerationRun(Base):
    """One commit of a supplier's batch schedule.

    Keeps the parameters the schedule was generated with so that a set of
    purchase orders can be traced back to how it was produced.
    """

    __tablename__ = "generation_runs"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    supplier_id: str = Column(String(64), nullable=False, index=True)
    strategy: str = Column(String(16), nullable=False)
    status: str = Column(String(16), nullable=False, default="running")

    parameters_json: str = Column(Text, nullable=False)  # JSON serialized request parameters

    total_pos_generated: int = Column(Integer, default=0)
    total_amount: Decimal = Column(Numeric(14, 2), default=0)
    execution_time_ms: Optional[int] = Column(Integer, nullable=True)
    error_message: Optional[str] = Column(Text, nullable=True)

    created_at: datetime = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<GenerationRun(id={self.id}, supplier={self.supplier_id}, "
            f"strategy={self.strategy}, status={self.status})>"
        )


class PurchaseOrder(Base):
    """A draft purchase order created from a committed batch."""

    __tablename__ = "purchase_orders"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    po_number: str = Column(String(32), unique=True, nullable=False, index=True)
    generation_run_id: int = Column(
        Integer, ForeignKey("generation_runs.id"), nullable=False, index=True
    )

    supplier_id: str = Column(String(64), nullable=False, index=True)
    supplier_name: str = Column(String(200), default="")

    order_date: date = Column(Date, nullable=False)
    expected_delivery_date: date = Column(Date, nullable=False)
    required_by_date: Optional[date] = Column(Date, nullable=True)

    status: str = Column(String(16), nullable=False, default="draft")
    total_amount: Decimal = Column(Numeric(14, 2), default=0)
    generated_by_system: bool = Column(Boolean, default=True)

    created_at: datetime = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<PurchaseOrder(id={self.id}, po_number={self.po_number}, "
            f"supplier={self.supplier_id}, order_date={self.order_date})>"
        )


class PurchaseOrderLine(Base):
    """One part line of a purchase order."""

    __tablename__ = "purchase_order_lines"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    purchase_order_id: int = Column(
        Integer, ForeignKey("purchase_orders.id"), nullable=False, index=True
    )

    part_id: str = Column(String(64), nullable=False)
    part_number: str = Column(String(64), default="")
    part_name: str = Column(String(200), default="")

    quantity: int = Column(Integer, nullable=False)
    unit_price: Decimal = Column(Numeric(14, 4), nullable=False)
    line_total: Decimal = Column(Numeric(14, 2), nullable=False)

    linked_unit_ids_json: str = Column(Text, default="[]")  # JSON list of production unit ids

    def __repr__(self) -> str:
        return (
            f"<PurchaseOrderLine(id={self.id}, po={self.purchase_order_id}, "
            f"part={self.part_id}, qty={self.quantity})>"
        )
