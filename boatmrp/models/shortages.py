"""
Shortage report models for BOATMRP.

A shortage is a projected date on which a part's running stock would go
negative under a given delivery/consumption schedule.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class ShortageEvent(BaseModel):
    """A consumption that would leave a part's stock below zero."""

    event_date: date
    part_id: str
    part_number: str = ""
    part_name: str = ""
    resulting_stock: int = Field(lt=0)

    @property
    def shortfall(self) -> int:
        """Units missing on that date."""
        return -self.resulting_stock


class StockPoint(BaseModel):
    """Running stock of a part after the events of one date."""

    event_date: date
    part_id: str
    stock: int


class ShortageReport(BaseModel):
    """Outcome of replaying a delivery/consumption timeline."""

    shortages: list[ShortageEvent] = Field(default_factory=list)
    starting_stock: dict[str, int] = Field(default_factory=dict)
    ending_stock: dict[str, int] = Field(default_factory=dict)
    stock_points: list[StockPoint] = Field(default_factory=list)

    @property
    def has_shortage(self) -> bool:
        return bool(self.shortages)

    @property
    def first_shortage(self) -> Optional[ShortageEvent]:
        """Earliest shortage in replay order; this one gates commits."""
        return self.shortages[0] if self.shortages else None

    def projected_stock(self, on_date: date) -> dict[str, int]:
        """Stock per part after every event up to and including a date."""
        stock = dict(self.starting_stock)
        for point in self.stock_points:
            if point.event_date > on_date:
                break
            stock[point.part_id] = point.stock
        return stock

    def total_stock_series(self) -> list[tuple[date, int]]:
        """Total stock across parts after each date with events."""
        stock = dict(self.starting_stock)
        series: list[tuple[date, int]] = []
        for point in self.stock_points:
            stock[point.part_id] = point.stock
            total = sum(stock.values())
            if series and series[-1][0] == point.event_date:
                series[-1] = (point.event_date, total)
            else:
                series.append((point.event_date, total))
        return series
