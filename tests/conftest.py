"""Shared test fixtures"""
# pylint: disable=import-error,redefined-outer-name

from datetime import date

import pytest

from student_housing_mcp.models.building_model import AppState, FloorLayout
from student_housing_mcp.models.unit_model import (
    MaintenanceType,
    PaymentInstallment,
    PaymentPlan,
    PlanType,
    UnitStatus,
    UnitType,
)
from student_housing_mcp.utils.defaults import build_building
from student_housing_mcp.utils.storage import JsonStorage
from student_housing_mcp.utils.store import HousingStore
from tests.helpers.shared import NOW, TODAY


@pytest.fixture
def small_state() -> AppState:
    """One building, one floor: two rented apartments and one rented suite."""
    building = build_building(
        1, "مبنى 1", [FloorLayout(apartments=2, suites=1)], occupied=True, rent_date=TODAY
    )
    return AppState(buildings=[building])


@pytest.fixture
def store(small_state) -> HousingStore:
    """In-memory store with a fixed clock."""
    return HousingStore(state=small_state, clock=lambda: NOW)


@pytest.fixture
def json_storage(tmp_path) -> JsonStorage:
    """Storage writing into a temporary directory."""
    return JsonStorage(str(tmp_path / "app_data.json"), today=TODAY)


@pytest.fixture
def installment_plan() -> PaymentPlan:
    """Two installments of 850, the first one paid."""
    return PaymentPlan(
        type=PlanType.INSTALLMENT,
        installments=[
            PaymentInstallment(amount=850, due_date=date(2025, 2, 1), is_paid=True),
            PaymentInstallment(amount=850, due_date=date(2025, 4, 1), is_paid=False),
        ],
    )


@pytest.fixture
def mixed_state() -> AppState:
    """
    One building with one unit per situation:

    A001 rented/paid, A002 deferred without plan, A003 available with one
    completed (late) maintenance job, A004 on an overdue installment plan,
    S001 under electrical maintenance, S002 office.
    """
    building = build_building(
        1, "مبنى 1", [FloorLayout(apartments=4, suites=2)], occupied=True, rent_date=TODAY
    )
    store = HousingStore(state=AppState(buildings=[building]), clock=lambda: NOW)

    store.update_unit(1, "B1-F1-A002", {"payment_status": "deferred", "actual_rent": 0})

    store.update_unit_status(1, UnitType.APARTMENT, "B1-F1-A003", UnitStatus.AVAILABLE)
    store.update_unit_status(
        1, UnitType.APARTMENT, "B1-F1-A003", UnitStatus.UNDER_MAINTENANCE, MaintenanceType.PAINTING
    )
    store.update_maintenance_details(
        1, "B1-F1-A003", cost=250, expected_end_date=date(2025, 2, 20)
    )
    store.complete_maintenance(store.state.find_unit("B1-F1-A003"))

    store.update_payment_plan(
        1,
        "B1-F1-A004",
        PaymentPlan(
            type=PlanType.INSTALLMENT,
            installments=[
                PaymentInstallment(amount=850, due_date=date(2025, 1, 15), is_paid=True),
                PaymentInstallment(amount=850, due_date=date(2025, 2, 15), is_paid=False),
            ],
        ),
    )

    store.update_unit_status(
        1, UnitType.SUITE, "B1-F1-S001", UnitStatus.UNDER_MAINTENANCE, MaintenanceType.ELECTRICAL
    )
    store.update_maintenance_details(
        1, "B1-F1-S001", cost=400, expected_end_date=date(2025, 3, 10)
    )
    store.update_unit_status(1, UnitType.SUITE, "B1-F1-S002", UnitStatus.OFFICE)
    return store.state
