"""Default dataset and unit generation helpers."""

from datetime import date
from typing import List, Optional, Sequence

from ..models.building_model import AppState, BuildingData, FloorLayout, RoomData
from ..models.unit_model import PaymentStatus, Unit, UnitStatus, UnitType

DEFAULT_APARTMENT_RENT = 1700
DEFAULT_SUITE_RENT = 3000
DEFAULT_BUILDING_COUNT = 8

# floor 1 hosts the lobby, hence fewer apartments
DEFAULT_FLOOR_LAYOUT = [
    FloorLayout(apartments=16, suites=4),
    FloorLayout(apartments=36, suites=2),
    FloorLayout(apartments=36, suites=2),
    FloorLayout(apartments=36, suites=2),
]


def make_unit_id(
    building_id: int,
    floor: int,
    unit_type: UnitType,
    unit_number: int,
    suffix: Optional[str] = None,
) -> str:
    """Build ids like ``B1-F2-A017`` (optionally with a uniqueness suffix)."""
    prefix = "A" if unit_type == UnitType.APARTMENT else "S"
    unit_id = f"B{building_id}-F{floor}-{prefix}{unit_number:03d}"
    return f"{unit_id}-{suffix}" if suffix else unit_id


def generate_units(
    building_id: int,
    unit_type: UnitType,
    floor_counts: Sequence[int],
    base_rent: float,
    *,
    occupied: bool = False,
    rent_date: Optional[date] = None,
    suffix: Optional[str] = None,
) -> List[Unit]:
    """
    Generate the units of one type for a building.

    Numbering continues across floors: floor 1 holds 1..n, floor 2 starts at n+1.

    Args:
        building_id: owning building
        unit_type: apartment or suite
        floor_counts: unit count per floor, floor numbers start at 1
        base_rent: rent applied to every generated unit
        occupied: create rented/paid units instead of available ones
        rent_date: rent date recorded on occupied units
        suffix: appended to every id (runtime-created units)

    Returns:
        List[Unit]: generated units
    """
    units: List[Unit] = []
    next_number = 1
    for floor, count in enumerate(floor_counts, start=1):
        for unit_number in range(next_number, next_number + count):
            unit = Unit(
                id=make_unit_id(building_id, floor, unit_type, unit_number, suffix),
                building_id=building_id,
                floor=floor,
                unit_type=unit_type,
                unit_number=unit_number,
                status=UnitStatus.AVAILABLE,
                base_rent=base_rent,
            )
            if occupied:
                unit = unit.model_copy(
                    update={
                        "status": UnitStatus.RENTED,
                        "payment_status": PaymentStatus.PAID,
                        "actual_rent": base_rent,
                        "rent_date": (rent_date or date.today()).isoformat(),
                    }
                )
            units.append(unit)
        next_number += count
    return units


def build_building(
    building_id: int,
    name: str,
    floors: Sequence[FloorLayout],
    apartment_rent: float = DEFAULT_APARTMENT_RENT,
    suite_rent: float = DEFAULT_SUITE_RENT,
    *,
    occupied: bool = False,
    rent_date: Optional[date] = None,
    suffix: Optional[str] = None,
) -> BuildingData:
    """Create a building from a per-floor layout."""
    apartments = generate_units(
        building_id,
        UnitType.APARTMENT,
        [f.apartments for f in floors],
        apartment_rent,
        occupied=occupied,
        rent_date=rent_date,
        suffix=suffix,
    )
    suites = generate_units(
        building_id,
        UnitType.SUITE,
        [f.suites for f in floors],
        suite_rent,
        occupied=occupied,
        rent_date=rent_date,
        suffix=suffix,
    )
    return BuildingData(
        id=building_id,
        name=name,
        apartments=RoomData(
            total=len(apartments),
            rented=sum(1 for u in apartments if u.status == UnitStatus.RENTED),
            rent=apartment_rent,
            units=apartments,
        ),
        suites=RoomData(
            total=len(suites),
            rented=sum(1 for u in suites if u.status == UnitStatus.RENTED),
            rent=suite_rent,
            units=suites,
        ),
    )


def initial_buildings(
    today: Optional[date] = None, count: int = DEFAULT_BUILDING_COUNT
) -> List[BuildingData]:
    """Fully rented sample complex used when nothing is stored yet."""
    return [
        build_building(
            building_id,
            f"مبنى {building_id}",
            DEFAULT_FLOOR_LAYOUT,
            occupied=True,
            rent_date=today,
        )
        for building_id in range(1, count + 1)
    ]


def default_state(today: Optional[date] = None) -> AppState:
    """Fresh application state built on the default dataset."""
    return AppState(buildings=initial_buildings(today))
