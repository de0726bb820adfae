"""Business logic services for the BOATMRP web adapter."""

from web.services.planning_service import (
    PlanningService,
    SupplierNotFoundError,
    get_planning_service,
)

__all__ = ["PlanningService", "SupplierNotFoundError", "get_planning_service"]
