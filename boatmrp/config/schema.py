"""
Configuration schema for BOATMRP.

Provides Pydantic models for configuration validation and type safety.
"""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from boatmrp.config.defaults import (
    ACTIVE_UNIT_STATUSES,
    BUFFER_DAYS,
    DEFAULT_BATCH_COUNT,
    DEFAULT_SAFETY_STOCK_PERCENTAGE,
    INCLUDE_INACTIVE_BOAT_TYPES,
    MAX_CAPACITY_SPLIT_MONTHS,
    PERIODIC_INTERVAL_DAYS,
    PREFER_BATCH_OPTIMIZATION,
)

_KNOWN_STATUSES = {"scheduled", "in_progress", "completed"}


class DemandConfig(BaseModel):
    """Which production units feed demand."""

    active_statuses: list[str] = Field(
        default_factory=lambda: list(ACTIVE_UNIT_STATUSES),
        description="Unit statuses that consume parts",
    )
    include_inactive_boat_types: bool = Field(
        default=INCLUDE_INACTIVE_BOAT_TYPES,
        description="Whether units of inactive boat types still feed demand",
    )

    @field_validator("active_statuses")
    @classmethod
    def validate_statuses(cls, v: list[str]) -> list[str]:
        unknown = set(v) - _KNOWN_STATUSES
        if unknown:
            raise ValueError(f"Unknown unit status(es): {sorted(unknown)}")
        return v


class NettingConfig(BaseModel):
    """Inventory netting parameters."""

    safety_stock_percentage: float = Field(
        default=DEFAULT_SAFETY_STOCK_PERCENTAGE,
        ge=0.0,
        le=100.0,
        description="Percentage added to each triggering net requirement",
    )


class OrderingConfig(BaseModel):
    """Supplier ordering parameters."""

    buffer_days: int = Field(
        default=BUFFER_DAYS,
        ge=0,
        description="Days subtracted on top of supplier lead time",
    )
    prefer_batch_optimization: bool = Field(
        default=PREFER_BATCH_OPTIMIZATION,
        description="Round order quantities up to supplier batch size",
    )
    max_capacity_split_months: int = Field(
        default=MAX_CAPACITY_SPLIT_MONTHS,
        ge=1,
        description="Capacity splits longer than this require approval",
    )


class SchedulingConfig(BaseModel):
    """PO batch scheduling parameters."""

    interval_days: dict[str, int] = Field(
        default_factory=lambda: dict(PERIODIC_INTERVAL_DAYS),
        description="Days between batches for each periodic strategy",
    )
    default_batch_count: int = Field(
        default=DEFAULT_BATCH_COUNT,
        ge=1,
        description="Batches produced by periodic strategies when not given",
    )

    @field_validator("interval_days")
    @classmethod
    def validate_intervals(cls, v: dict[str, int]) -> dict[str, int]:
        missing = set(PERIODIC_INTERVAL_DAYS) - set(v)
        if missing:
            raise ValueError(f"Missing interval(s) for: {sorted(missing)}")
        if any(days < 1 for days in v.values()):
            raise ValueError("Interval days must be >= 1")
        return v


class PlannerConfig(BaseModel):
    """Complete BOATMRP configuration.

    This is the top-level configuration object that contains all
    planning parameters.
    """

    demand: DemandConfig = Field(default_factory=DemandConfig)
    netting: NettingConfig = Field(default_factory=NettingConfig)
    ordering: OrderingConfig = Field(default_factory=OrderingConfig)
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlannerConfig":
        """Create configuration from a dictionary.

        Args:
            data: Configuration dictionary (can be partial)

        Returns:
            PlannerConfig with defaults for any missing values
        """
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "PlannerConfig":
        """Load configuration from a JSON or YAML file.

        Args:
            path: Path to configuration file (.json or .yaml/.yml)

        Returns:
            Parsed configuration

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is not supported
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()

        if suffix == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        elif suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                "Use .json or .yaml/.yml"
            )

        return cls.from_dict(data or {})

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return self.model_dump()

    def to_file(self, path: str | Path) -> None:
        """Save configuration to a JSON or YAML file.

        Args:
            path: Path to save configuration to

        Raises:
            ValueError: If file format is not supported
        """
        path = Path(path)
        suffix = path.suffix.lower()
        data = self.to_dict()

        if suffix == ".json":
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        elif suffix in (".yaml", ".yml"):
            with open(path, "w", encoding="utf-8") as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                "Use .json or .yaml/.yml"
            )

    def merge(self, overrides: dict[str, Any]) -> "PlannerConfig":
        """Create a new config with overrides applied.

        Args:
            overrides: Dictionary of values to override

        Returns:
            New PlannerConfig with overrides merged in
        """
        base = self.to_dict()
        _deep_merge(base, overrides)
        return PlannerConfig.from_dict(base)


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> None:
    """Deep merge overrides into base dict (in place)."""
    for key, value in overrides.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def get_default_config() -> PlannerConfig:
    """Get the default BOATMRP configuration.

    Returns:
        PlannerConfig with all default values
    """
    return PlannerConfig()
