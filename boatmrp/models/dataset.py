"""
The bundle of records a planning run works from.

The persistence layer fetches these for one entity and hands them over;
the engine never queries anything itself.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from boatmrp.models.boats import BoatType, ProductionUnit
from boatmrp.models.parts import Part, Supplier, SupplierPart


class PlanningDataset(BaseModel):
    """Parts, boat types, production units, suppliers and their links."""

    parts: list[Part] = Field(default_factory=list)
    boat_types: list[BoatType] = Field(default_factory=list)
    units: list[ProductionUnit] = Field(
        default_factory=list,
        validation_alias=AliasChoices("units", "boats"),
        description="Production units (also accepted under the key 'boats')",
    )
    suppliers: list[Supplier] = Field(default_factory=list)
    supplier_parts: list[SupplierPart] = Field(default_factory=list)

    def part(self, part_id: str) -> Optional[Part]:
        """Get a part by id."""
        for p in self.parts:
            if p.id == part_id:
                return p
        return None

    def boat_type(self, boat_type_id: str) -> Optional[BoatType]:
        """Get a boat type by id."""
        for bt in self.boat_types:
            if bt.id == boat_type_id:
                return bt
        return None

    def supplier(self, supplier_id: str) -> Optional[Supplier]:
        """Get a supplier by id."""
        for s in self.suppliers:
            if s.id == supplier_id:
                return s
        return None

    def links_for_part(self, part_id: str) -> list[SupplierPart]:
        """Get every supplier link for a part, in input order."""
        return [sp for sp in self.supplier_parts if sp.part_id == part_id]

    @property
    def parts_by_id(self) -> dict[str, Part]:
        return {p.id: p for p in self.parts}

    @property
    def boat_types_by_id(self) -> dict[str, BoatType]:
        return {bt.id: bt for bt in self.boat_types}

    @property
    def stock_by_part(self) -> dict[str, int]:
        """Starting stock snapshot keyed by part id."""
        return {p.id: p.current_stock for p in self.parts}
