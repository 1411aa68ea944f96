"""Building tree and application state models."""

from typing import Iterator, List, Optional, Tuple

from pydantic import Field

from .unit_model import CamelModel, Unit, UnitType

CURRENT_SCHEMA_VERSION = 1


class RoomData(CamelModel):
    """Units of one kind within a building."""

    total: int = 0
    rented: int = 0
    rent: float = 0
    units: List[Unit] = Field(default_factory=list)


class BuildingData(CamelModel):
    """A building with its apartment and suite groups."""

    id: int
    name: str
    apartments: RoomData = Field(default_factory=RoomData)
    suites: RoomData = Field(default_factory=RoomData)

    def all_units(self) -> List[Unit]:
        """Apartments followed by suites."""
        return [*self.apartments.units, *self.suites.units]

    def room_key_for(self, unit_id: str) -> Optional[str]:
        """Return ``apartments`` / ``suites`` for the group holding ``unit_id``."""
        if any(u.id == unit_id for u in self.apartments.units):
            return "apartments"
        if any(u.id == unit_id for u in self.suites.units):
            return "suites"
        return None


class FloorLayout(CamelModel):
    """Unit counts for one floor of a new building."""

    apartments: int = Field(default=0, ge=0)
    suites: int = Field(default=0, ge=0)


class BulkRentValues(CamelModel):
    """Last rents applied by the bulk rent editor."""

    apartment_rent: float = 1700
    suite_rent: float = 3000

    def rent_for(self, unit_type: UnitType) -> float:
        """Rent matching ``unit_type``."""
        return self.apartment_rent if unit_type == UnitType.APARTMENT else self.suite_rent


class SemesterData(CamelModel):
    """Forecast inputs for one semester."""

    apartment_rent: float = Field(default=0, ge=0)
    rented_apartments: int = Field(default=0, ge=0)
    suite_rent: float = Field(default=0, ge=0)
    rented_suites: int = Field(default=0, ge=0)
    expenses: float = Field(default=0, ge=0)


class YearlyForecastInput(CamelModel):
    """Forecast inputs for one academic (Hijri) year."""

    year: int
    semesters: Tuple[SemesterData, SemesterData]


class AppState(CamelModel):
    """The whole persisted document."""

    version: int = CURRENT_SCHEMA_VERSION
    buildings: List[BuildingData] = Field(default_factory=list)
    forecast_inputs: List[YearlyForecastInput] = Field(default_factory=list)
    bulk_rent_values: BulkRentValues = Field(default_factory=BulkRentValues)

    def iter_units(self) -> Iterator[Unit]:
        """Every unit of every building."""
        for building in self.buildings:
            yield from building.all_units()

    def find_building(self, building_id: int) -> Optional[BuildingData]:
        """Building by id, or None."""
        return next((b for b in self.buildings if b.id == building_id), None)

    def find_unit(self, unit_id: str) -> Optional[Unit]:
        """Unit by id across all buildings, or None."""
        return next((u for u in self.iter_units() if u.id == unit_id), None)
