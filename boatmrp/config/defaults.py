"""
Default configuration values for BOATMRP.

Ordering uses a 3-day buffer on top of supplier lead time, netting adds
10% safety stock, and order quantities are rounded up to batch size
unless configured otherwise.
"""

from typing import Any

# =============================================================================
# DEMAND
# =============================================================================

# Production unit statuses that still consume parts
ACTIVE_UNIT_STATUSES: list[str] = ["scheduled", "in_progress"]

# Units whose boat type is flagged inactive still feed demand by default
INCLUDE_INACTIVE_BOAT_TYPES: bool = True

# =============================================================================
# NETTING
# =============================================================================

# Percentage added on top of every triggering net requirement (0-100)
DEFAULT_SAFETY_STOCK_PERCENTAGE: float = 10.0

# =============================================================================
# ORDERING
# =============================================================================

# Extra days between the order date and the supplier lead time
BUFFER_DAYS: int = 3

# Round order quantities up to the supplier batch size
PREFER_BATCH_OPTIMIZATION: bool = True

# Capacity splits spanning more months than this need caller approval
MAX_CAPACITY_SPLIT_MONTHS: int = 12

# =============================================================================
# SCHEDULING
# =============================================================================

# Days between batches for the periodic strategies
PERIODIC_INTERVAL_DAYS: dict[str, int] = {
    "weekly": 7,
    "biweekly": 14,
    "monthly": 30,
}

DEFAULT_BATCH_COUNT: int = 3


# =============================================================================
# COMBINED DEFAULT CONFIG
# =============================================================================

DEFAULT_CONFIG: dict[str, Any] = {
    "demand": {
        "active_statuses": list(ACTIVE_UNIT_STATUSES),
        "include_inactive_boat_types": INCLUDE_INACTIVE_BOAT_TYPES,
    },
    "netting": {
        "safety_stock_percentage": DEFAULT_SAFETY_STOCK_PERCENTAGE,
    },
    "ordering": {
        "buffer_days": BUFFER_DAYS,
        "prefer_batch_optimization": PREFER_BATCH_OPTIMIZATION,
        "max_capacity_split_months": MAX_CAPACITY_SPLIT_MONTHS,
    },
    "scheduling": {
        "interval_days": dict(PERIODIC_INTERVAL_DAYS),
        "default_batch_count": DEFAULT_BATCH_COUNT,
    },
}
