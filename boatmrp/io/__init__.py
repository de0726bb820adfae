"""
File I/O for BOATMRP.

This module handles reading and writing of:
- Planning datasets (JSON or YAML record dumps)
- Calculation results (JSON)
"""

from boatmrp.io.records import (
    dataset_from_dict,
    load_dataset,
)
from boatmrp.io.export import (
    ExportError,
    save_result,
)

__all__ = [
    # Records
    "dataset_from_dict",
    "load_dataset",
    # Export
    "ExportError",
    "save_result",
]
