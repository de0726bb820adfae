"""Database models and session management for the BOATMRP web adapter."""

from web.database.models import Base, GenerationRun, PurchaseOrder, PurchaseOrderLine
from web.database.session import get_db, init_db

__all__ = [
    "Base",
    "GenerationRun",
    "PurchaseOrder",
    "PurchaseOrderLine",
    "get_db",
    "init_db",
]
