"""
Planning dataset loading for BOATMRP.

A dataset file is a JSON or YAML mapping with one list per record kind:

    parts:           part records with current stock
    boat_types:      boat types with their MBOM blob
    units:           production units (``boats`` is accepted as well)
    suppliers:       supplier records
    supplier_parts:  supplier-part links with ordering terms

MBOM blobs are validated here, so malformed lines fail on load rather
than partway through a calculation.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from boatmrp.errors import DatasetError
from boatmrp.models.boats import BoatType, ProductionUnit
from boatmrp.models.dataset import PlanningDataset
from boatmrp.models.parts import Part, Supplier, SupplierPart

logger = logging.getLogger(__name__)


def dataset_from_dict(data: dict[str, Any]) -> PlanningDataset:
    """Build a planning dataset from raw record lists.

    Args:
        data: Mapping of record kind to list of records

    Returns:
        Validated planning dataset

    Raises:
        DatasetError: If a record fails validation
        MalformedBOMError: If a boat type's MBOM is unusable
    """
    units = data.get("units")
    if units is None:
        units = data.get("boats", [])

    try:
        return PlanningDataset(
            parts=[Part.model_validate(r) for r in data.get("parts") or []],
            boat_types=[BoatType.from_record(r) for r in data.get("boat_types") or []],
            units=[ProductionUnit.model_validate(r) for r in units or []],
            suppliers=[Supplier.model_validate(r) for r in data.get("suppliers") or []],
            supplier_parts=[
                SupplierPart.model_validate(r) for r in data.get("supplier_parts") or []
            ],
        )
    except ValidationError as e:
        raise DatasetError(f"Invalid dataset record: {e}") from e


def load_dataset(path: str | Path) -> PlanningDataset:
    """Load a planning dataset from a JSON or YAML file.

    Args:
        path: Path to the dataset (.json, .yaml or .yml)

    Returns:
        Validated planning dataset

    Raises:
        DatasetError: If the file is missing, unreadable or malformed
        MalformedBOMError: If a boat type's MBOM is unusable
    """
    path = Path(path)
    if not path.exists():
        raise DatasetError(f"Dataset file not found: {path}")

    suffix = path.suffix.lower()
    try:
        with open(path, encoding="utf-8") as f:
            if suffix == ".json":
                data = json.load(f)
            elif suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                raise DatasetError(
                    f"Unsupported dataset format: {suffix}. Use .json or .yaml/.yml"
                )
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DatasetError(f"Failed to parse dataset {path}: {e}") from e
    except OSError as e:
        raise DatasetError(f"Failed to read dataset {path}: {e}") from e

    if not isinstance(data, dict):
        raise DatasetError(f"Dataset {path} must be a mapping of record lists")

    dataset = dataset_from_dict(data)
    logger.debug(
        "Loaded %s: %d parts, %d boat types, %d units, %d suppliers",
        path,
        len(dataset.parts),
        len(dataset.boat_types),
        len(dataset.units),
        len(dataset.suppliers),
    )
    return dataset
