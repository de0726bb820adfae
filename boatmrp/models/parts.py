"""
Part and supplier records for BOATMRP.

These are read-only snapshots of what the persistence layer holds:
parts with their current stock, suppliers, and the supplier-part links
that carry ordering terms (lead time, MOQ, batch size, price, capacity).
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class Part(BaseModel):
    """A purchasable part with its on-hand stock."""

    id: str = Field(description="Part identifier")
    part_number: str = Field(default="", description="Catalogue part number")
    name: str = Field(default="", description="Part name")
    description: Optional[str] = Field(default=None, description="Free-form description")
    category: Optional[str] = Field(default=None, description="Part category")
    current_stock: int = Field(default=0, ge=0, description="Units on hand")
    unit_of_measure: str = Field(default="each", description="Stocking unit")
    unit_cost: Decimal = Field(default=Decimal("0"), ge=0, description="Standard unit cost")
    reorder_point: int = Field(default=0, ge=0, description="Reorder point")

    @property
    def label(self) -> str:
        """Part number if known, otherwise the id."""
        return self.part_number or self.id


class Supplier(BaseModel):
    """A supplier with its contact details."""

    id: str = Field(description="Supplier identifier")
    name: str = Field(description="Supplier name")
    contact_name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    address: Optional[str] = Field(default=None)
    payment_terms: Optional[str] = Field(default=None)


class SupplierPart(BaseModel):
    """Terms under which a supplier sells a part."""

    supplier_id: str = Field(description="Supplier identifier")
    part_id: str = Field(description="Part identifier")
    lead_time_days: int = Field(default=0, ge=0, description="Days from order to delivery")
    minimum_order_quantity: int = Field(default=0, ge=0, description="Smallest accepted order")
    batch_size: int = Field(default=1, ge=1, description="Order quantity granularity")
    price_per_unit: Decimal = Field(default=Decimal("0"), ge=0, description="Unit price")
    is_preferred: bool = Field(default=False, description="Preferred supplier for the part")
    max_monthly_capacity: Optional[int] = Field(
        default=None,
        ge=1,
        description="Most units the supplier can deliver per month",
    )
