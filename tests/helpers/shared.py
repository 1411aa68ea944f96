"""
Shared test data used by several test modules.

Keeps the reference clock, rents and the legacy document in one place so
tests do not repeat the same literals.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict

from student_housing_mcp.models.unit_model import Unit

TODAY = date(2025, 3, 1)
NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)
NOW_MS = int(NOW.timestamp() * 1000)

APARTMENT_RENT = 1700
SUITE_RENT = 3000


def make_unit(**overrides: Any) -> Unit:
    """Rented, paid apartment ``B1-F1-A001`` with the given overrides."""
    data: Dict[str, Any] = {
        "id": "B1-F1-A001",
        "building_id": 1,
        "floor": 1,
        "unit_type": "apartment",
        "unit_number": 1,
        "status": "rented",
        "base_rent": APARTMENT_RENT,
        "actual_rent": APARTMENT_RENT,
        "payment_status": "paid",
    }
    data.update(overrides)
    return Unit.model_validate(data)


# browser-era document: no version, flat maintenance fields
VERSION_0_DOCUMENT: Dict[str, Any] = {
    "buildings": [
        {
            "id": 1,
            "name": "مبنى 1",
            "apartments": {
                "total": 2,
                "rented": 1,
                "rent": 1700,
                "units": [
                    {
                        "id": "B1-F1-A001",
                        "buildingId": 1,
                        "floor": 1,
                        "unitType": "apartment",
                        "unitNumber": 1,
                        "status": "under_maintenance",
                        "baseRent": 1700,
                        "actualRent": 0,
                        "paymentStatus": "paid",
                        "vacancyReason": "electrical",
                        "maintenanceCost": 500,
                        "maintenanceStartDate": "2025-02-01T08:00:00.000Z",
                        "maintenanceEndDate": "2025-02-20",
                        "statusBeforeMaintenance": "rented",
                        "maintenanceHistory": [],
                        "claimHistory": [],
                    },
                    {
                        "id": "B1-F1-A002",
                        "buildingId": 1,
                        "floor": 1,
                        "unitType": "apartment",
                        "unitNumber": 2,
                        "status": "available",
                        "baseRent": 1700,
                        "vacancyReason": "none",
                        "maintenanceCost": 0,
                    },
                ],
            },
            "suites": {"total": 0, "rented": 0, "rent": 3000, "units": []},
        }
    ],
    "forecastInputs": [],
    "bulkRentValues": {"apartmentRent": 1700, "suiteRent": 3000},
}
