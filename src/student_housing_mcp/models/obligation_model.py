"""Resolved payment obligation of a unit."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class DueItem(BaseModel):
    """An unpaid amount with its due date."""

    due_date: Optional[date] = Field(None, description="None means due now")
    amount: float = 0
    days_late: int = 0
    days_remaining: Optional[int] = None


class ObligationSummary(BaseModel):
    """Display-ready obligation facts derived from a unit."""

    remaining: float = 0
    total_paid: float = 0
    total_rent: float = 0
    plan_label: str = ""
    due_date: Optional[date] = Field(None, description="Earliest unpaid due date")
    due_dates: List[date] = Field(default_factory=list)
    overdue_items: List[DueItem] = Field(default_factory=list)
    upcoming_items: List[DueItem] = Field(default_factory=list)
    is_overdue: bool = False
    needs_plan: bool = False
    paid_count: int = 0
    unpaid_count: int = 0
    total_installments_count: int = 0

    @property
    def days_remaining(self) -> Optional[int]:
        """Days until the next upcoming item, if any."""
        if not self.upcoming_items:
            return None
        return self.upcoming_items[0].days_remaining

    @property
    def days_late(self) -> int:
        """Delay of the oldest overdue item."""
        if not self.overdue_items:
            return 0
        return self.overdue_items[0].days_late
