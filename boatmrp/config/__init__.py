"""
Configuration management for BOATMRP.

This module provides:
- Default planning parameters
- Configuration schema and validation
- Support for custom configuration files (JSON/YAML)
"""

from boatmrp.config.defaults import DEFAULT_CONFIG
from boatmrp.config.schema import (
    DemandConfig,
    NettingConfig,
    OrderingConfig,
    PlannerConfig,
    SchedulingConfig,
    get_default_config,
)

__all__ = [
    # Dict-based defaults
    "DEFAULT_CONFIG",
    # Pydantic config classes
    "DemandConfig",
    "NettingConfig",
    "OrderingConfig",
    "PlannerConfig",
    "SchedulingConfig",
    # Functions
    "get_default_config",
]
