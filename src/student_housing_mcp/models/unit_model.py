"""Unit data models.

Field names are snake_case in Python and camelCase on disk, so documents
written by the browser dashboard keep their original keys.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def _coerce_date(value: Any) -> Any:
    """Accept ``YYYY-MM-DD`` and full ISO timestamps; anything else is None."""
    if value is None or isinstance(value, date):
        return value.date() if isinstance(value, datetime) else value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        # timestamps such as 2025-01-05T10:00:00.000Z keep only the date part
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return value


LooseDate = Annotated[Optional[date], BeforeValidator(_coerce_date)]


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UnitType(str, Enum):
    """Unit kind"""

    APARTMENT = "apartment"
    SUITE = "suite"

    @property
    def room_key(self) -> str:
        """Name of the RoomData group holding this kind of unit."""
        return "apartments" if self is UnitType.APARTMENT else "suites"


class UnitStatus(str, Enum):
    """Occupancy status"""

    AVAILABLE = "available"
    RENTED = "rented"
    UNDER_MAINTENANCE = "under_maintenance"
    OFFICE = "office"


class PaymentStatus(str, Enum):
    """Payment status of a rented unit"""

    PAID = "paid"
    DEFERRED = "deferred"
    EXEMPT = "exempt"
    PAYMENT_PLAN = "payment_plan"
    SCHOLARSHIP = "scholarship"
    PAID_IN_FULL = "paid_in_full"


class PlanType(str, Enum):
    """Payment plan kind"""

    EXEMPT = "exempt"
    INSTALLMENT = "installment"
    DEFERRED = "deferred"
    STIPEND = "stipend"
    SCHOLARSHIP = "scholarship"


class MaintenanceType(str, Enum):
    """Reason a unit is taken out of service"""

    MAINTENANCE = "maintenance"
    FURNITURE = "furniture"
    ELECTRICAL = "electrical"
    PAINTING = "painting"
    NONE = "none"


class PaymentInstallment(CamelModel):
    """One installment or stipend deduction."""

    amount: float = Field(..., ge=0, description="Installment amount")
    due_date: LooseDate = Field(None, description="Due date")
    is_paid: bool = Field(default=False, description="Paid flag")


class PaymentPlan(CamelModel):
    """Alternative-to-full-payment arrangement attached to a unit."""

    type: PlanType = Field(..., description="Plan kind")
    notes: Optional[str] = Field(None, description="Free text notes")
    deferred_until: LooseDate = Field(None, description="Deferral date")
    installments: Optional[List[PaymentInstallment]] = Field(None)
    stipend_deductions: Optional[List[PaymentInstallment]] = Field(None)
    completed_date: Optional[datetime] = Field(
        None, description="Set once every installment is paid"
    )


class ClaimRecord(CamelModel):
    """Logged dues claim (email, WhatsApp or paper)."""

    id: str
    date: datetime
    action: str


class MaintenanceRecord(CamelModel):
    """Archived maintenance episode."""

    id: str
    start_date: LooseDate = None
    end_date: LooseDate = None
    expected_end_date: LooseDate = None
    cost: float = 0
    type: MaintenanceType = MaintenanceType.NONE
    description: str = ""


class ActiveMaintenance(CamelModel):
    """Maintenance currently in progress on a unit."""

    vacancy_reason: MaintenanceType = MaintenanceType.NONE
    cost: Optional[float] = Field(None, ge=0)
    start_date: LooseDate = None
    expected_end_date: LooseDate = None
    status_before: Optional[UnitStatus] = Field(
        None, description="Status restored when maintenance ends"
    )


class Unit(CamelModel):
    """A single rentable room (apartment or suite)."""

    # identity
    id: str = Field(..., description="Unit ID, e.g. B1-F1-A001")
    building_id: int = Field(..., description="Building ID")
    floor: int = Field(..., description="Floor number")
    unit_type: UnitType = Field(..., description="Apartment or suite")
    unit_number: int = Field(..., description="Sequential number within its type")

    # occupancy
    status: UnitStatus = Field(default=UnitStatus.AVAILABLE)
    maintenance: Optional[ActiveMaintenance] = Field(
        None, description="Only present while under maintenance"
    )

    # finance
    base_rent: float = Field(..., ge=0, description="Semester rent")
    actual_rent: Optional[float] = Field(None, description="Collected rent")
    rent_date: Optional[str] = Field(None)

    # payment
    payment_status: Optional[PaymentStatus] = Field(None)
    payment_plan: Optional[PaymentPlan] = Field(None)
    plan_archived: bool = Field(default=False)

    # history
    maintenance_history: List[MaintenanceRecord] = Field(default_factory=list)
    claim_history: List[ClaimRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_maintenance_block(self) -> "Unit":
        under_maintenance = self.status == UnitStatus.UNDER_MAINTENANCE
        if under_maintenance and self.maintenance is None:
            raise ValueError(f"unit {self.id} is under maintenance without details")
        if not under_maintenance and self.maintenance is not None:
            raise ValueError(
                f"unit {self.id} carries maintenance details while {self.status.value}"
            )
        return self

    @property
    def label(self) -> str:
        """``building / unit`` label used by every report."""
        return f"{self.building_id} / {self.unit_number}"
