"""
BOATMRP - Material Requirements Planning for Boat Manufacturing

Works out which parts to buy, from whom, and when, so that every
scheduled hull has its materials on hand before its build starts.

This package provides:
- Demand extraction from the production schedule and boat MBOMs
- Cumulative inventory netting with safety stock
- Supplier matching and purchase order batch scheduling
- Shortage validation of proposed delivery schedules
- CLI and HTTP interfaces
"""

__version__ = "0.1.0"

from boatmrp.config.defaults import DEFAULT_CONFIG

__all__ = [
    "__version__",
    "DEFAULT_CONFIG",
]
