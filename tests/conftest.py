"""
Pytest configuration and fixtures for BOATMRP tests.

The sample dataset is a small boatyard:

- Boat type BT-21 ("Skiff 21") takes 7 days to build and needs
  8 x HL-100 resin, 4 x CL-200 cleats and 1 x NS-300 placard per hull
- Hull U1 is due 2025-03-12 (parts needed 03-05), U2 is due 2025-03-19
  (parts needed 03-12); U3 is already completed
- Acme Marine is the preferred resin supplier (lead 5 days, $2.00) and
  the only cleat supplier (lead 10 days, batches of 10, $5.00)
- Bayside Supply sells resin cheaper ($1.50) but is not preferred
- Nobody sells the NS-300 placard
"""

import json
from datetime import date
from pathlib import Path
from typing import Any

import pytest

from boatmrp.config.schema import PlannerConfig
from boatmrp.io.records import dataset_from_dict
from boatmrp.models.dataset import PlanningDataset


@pytest.fixture
def sample_records() -> dict[str, Any]:
    """Raw dataset records as a persistence layer would return them."""
    return {
        "parts": [
            {"id": "P-HULL", "part_number": "HL-100", "name": "Hull resin",
             "current_stock": 10, "unit_cost": "2.00"},
            {"id": "P-CLEAT", "part_number": "CL-200", "name": "Deck cleat",
             "current_stock": 0, "unit_cost": "5.00"},
            {"id": "P-NOSUP", "part_number": "NS-300", "name": "Builder placard",
             "current_stock": 0, "unit_cost": "1.00"},
        ],
        "boat_types": [
            {
                "id": "BT-21",
                "name": "Skiff 21",
                "model": "S21",
                "default_manufacturing_time_days": 7,
                "mbom": {
                    "parts": [
                        {"part_id": "P-HULL", "quantity_required": 8, "part_name": "Hull resin"},
                        {"part_id": "P-CLEAT", "quantity_required": 4, "part_name": "Deck cleat"},
                        {"part_id": "P-NOSUP", "quantity_required": 1, "part_name": "Builder placard"},
                    ]
                },
            },
        ],
        "units": [
            {"id": "U1", "name": "Hull 101", "boat_type_id": "BT-21",
             "due_date": "2025-03-12", "status": "scheduled"},
            {"id": "U2", "name": "Hull 102", "boat_type_id": "BT-21",
             "due_date": "2025-03-19T09:30:00", "status": "in_progress"},
            {"id": "U3", "name": "Hull 100", "boat_type_id": "BT-21",
             "due_date": "2025-03-26", "status": "completed"},
        ],
        "suppliers": [
            {"id": "S1", "name": "Acme Marine", "contact_name": "Dana Reyes",
             "email": "orders@acme-marine.test", "phone": "555-0100"},
            {"id": "S2", "name": "Bayside Supply"},
        ],
        "supplier_parts": [
            {"supplier_id": "S2", "part_id": "P-HULL", "lead_time_days": 3,
             "price_per_unit": "1.50", "is_preferred": False},
            {"supplier_id": "S1", "part_id": "P-HULL", "lead_time_days": 5,
             "price_per_unit": "2.00", "is_preferred": True},
            {"supplier_id": "S1", "part_id": "P-CLEAT", "lead_time_days": 10,
             "batch_size": 10, "price_per_unit": "5.00", "is_preferred": True},
        ],
    }


@pytest.fixture
def sample_dataset(sample_records: dict[str, Any]) -> PlanningDataset:
    """The sample records loaded into a planning dataset."""
    return dataset_from_dict(sample_records)


@pytest.fixture
def dataset_file(tmp_path: Path, sample_records: dict[str, Any]) -> Path:
    """The sample records written to a JSON file."""
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")
    return path


@pytest.fixture
def no_safety_config() -> PlannerConfig:
    """Default configuration with safety stock turned off."""
    return PlannerConfig.from_dict({"netting": {"safety_stock_percentage": 0}})


@pytest.fixture
def day():
    """Build March 2025 dates by day of month."""

    def _day(n: int, month: int = 3) -> date:
        return date(2025, month, n)

    return _day
