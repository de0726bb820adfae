"""
Boat type and production unit records for BOATMRP.

A boat type carries the Manufacturing Bill of Materials (MBOM): the parts
and quantities needed to build one unit. Production units ("boats") are
scheduled builds of a boat type with a due date.
"""

from datetime import date
from enum import Enum
from numbers import Integral
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from boatmrp.dates import to_civil_date
from boatmrp.errors import MalformedBOMError


class UnitStatus(str, Enum):
    """Lifecycle states of a production unit."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MBOMLine(BaseModel):
    """One part line of a bill of materials."""

    part_id: str = Field(description="Part identifier")
    quantity_required: int = Field(gt=0, description="Units needed per boat")
    part_name: str = Field(default="", description="Part name at time of BOM entry")


class BoatType(BaseModel):
    """A boat model and its bill of materials."""

    id: str = Field(description="Boat type identifier")
    name: str = Field(default="", description="Boat type name")
    model: str = Field(default="", description="Model designation")
    mbom: list[MBOMLine] = Field(default_factory=list, description="Manufacturing BOM")
    default_manufacturing_time_days: int = Field(
        default=0,
        ge=0,
        description="Build time used when a unit doesn't override it",
    )
    is_active: bool = Field(default=True, description="Whether the type is still offered")

    @field_validator("mbom", mode="before")
    @classmethod
    def parse_mbom_blob(cls, v: Any, info: ValidationInfo) -> list[MBOMLine]:
        return parse_mbom(v, boat_type_id=info.data.get("id"))

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "BoatType":
        """Build a boat type from a loosely-typed persistence record.

        The ``mbom`` value may be ``{"parts": [...]}``, a bare list of
        lines, or missing.

        Raises:
            MalformedBOMError: If any MBOM entry is unusable
        """
        data = dict(record)
        boat_type_id = str(data.get("id", ""))
        data["mbom"] = parse_mbom(data.get("mbom"), boat_type_id=boat_type_id)
        return cls.model_validate(data)


class ProductionUnit(BaseModel):
    """A scheduled build of a boat type."""

    id: str = Field(description="Unit identifier")
    name: str = Field(default="", description="Hull name or number")
    boat_type_id: str = Field(description="Boat type being built")
    due_date: date = Field(description="Date the finished boat is due")
    manufacturing_time_days: Optional[int] = Field(
        default=None,
        ge=0,
        description="Build time in days (boat type default if None)",
    )
    status: UnitStatus = Field(default=UnitStatus.SCHEDULED)

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, v: Any) -> date:
        return to_civil_date(v)

    def build_days(self, boat_type: Optional[BoatType] = None) -> int:
        """Manufacturing time in days, falling back to the type default."""
        if self.manufacturing_time_days is not None:
            return self.manufacturing_time_days
        if boat_type is not None:
            return boat_type.default_manufacturing_time_days
        return 0


def parse_mbom(raw: Any, boat_type_id: Optional[str] = None) -> list[MBOMLine]:
    """Turn a raw MBOM blob into typed lines.

    Args:
        raw: ``{"parts": [...]}``, a list of line mappings, or None
        boat_type_id: Owning boat type, used in error messages

    Returns:
        List of MBOM lines in input order

    Raises:
        MalformedBOMError: On a missing part id or an unusable quantity
    """
    if raw is None:
        return []
    if isinstance(raw, dict):
        if "parts" not in raw:
            raise MalformedBOMError("MBOM mapping has no 'parts' list", boat_type_id)
        raw = raw["parts"] or []
    if not isinstance(raw, list):
        raise MalformedBOMError(
            f"MBOM must be a list of lines, got {type(raw).__name__}", boat_type_id
        )

    lines = []
    for index, entry in enumerate(raw):
        if isinstance(entry, MBOMLine):
            lines.append(entry)
            continue
        if not isinstance(entry, dict):
            raise MalformedBOMError(
                f"expected a mapping, got {type(entry).__name__}", boat_type_id, index
            )

        part_id = entry.get("part_id")
        if part_id is None or str(part_id).strip() == "":
            raise MalformedBOMError("missing part_id", boat_type_id, index)

        quantity = _parse_quantity(entry.get("quantity_required"), boat_type_id, index)
        lines.append(MBOMLine(
            part_id=str(part_id),
            quantity_required=quantity,
            part_name=str(entry.get("part_name") or ""),
        ))

    return lines


def _parse_quantity(value: Any, boat_type_id: Optional[str], index: int) -> int:
    """Read a positive whole quantity, rejecting anything fractional."""
    if value is None:
        raise MalformedBOMError("missing quantity_required", boat_type_id, index)
    if isinstance(value, bool):
        raise MalformedBOMError(
            f"quantity_required must be a number, got {value!r}", boat_type_id, index
        )

    if isinstance(value, Integral):
        quantity = int(value)
    elif isinstance(value, float) and value.is_integer():
        quantity = int(value)
    elif isinstance(value, str) and value.strip().lstrip("+").isdigit():
        quantity = int(value.strip())
    else:
        raise MalformedBOMError(
            f"quantity_required must be a whole number, got {value!r}",
            boat_type_id,
            index,
        )

    if quantity <= 0:
        raise MalformedBOMError(
            f"quantity_required must be positive, got {quantity}", boat_type_id, index
        )
    return quantity
