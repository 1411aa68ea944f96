"""Unit/building store.

State changes go through ``reduce(state, action, now)``, which returns a new
``AppState`` and never touches its input. ``HousingStore`` keeps the current
state, persists it after every change and offers one method per action.

Actions aimed at unknown buildings or units are no-ops: ``reduce`` returns the
very same state object.
"""

import logging
from datetime import date, datetime, timezone
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from ..models.building_model import (
    AppState,
    BuildingData,
    BulkRentValues,
    FloorLayout,
    RoomData,
    YearlyForecastInput,
)
from ..models.unit_model import (
    ActiveMaintenance,
    ClaimRecord,
    MaintenanceRecord,
    MaintenanceType,
    PaymentPlan,
    PaymentStatus,
    Unit,
    UnitStatus,
    UnitType,
)
from .defaults import build_building, make_unit_id
from .obligations import derive_actual_rent, derive_payment_fields
from .storage import JsonStorage

logger = logging.getLogger(__name__)

BULK_SCOPES = ("all_rented", "rented_apartments", "rented_suites")


# ---------------------------------------------------------------- actions
class UpdateUnit(BaseModel):
    """Shallow-merge ``fields`` into one unit."""

    type: Literal["update_unit"] = "update_unit"
    building_id: int
    unit_id: str
    fields: Dict[str, Any]


class UpdateUnitStatus(BaseModel):
    """Change occupancy status (snapshots/clears maintenance details)."""

    type: Literal["update_unit_status"] = "update_unit_status"
    building_id: int
    unit_type: UnitType
    unit_id: str
    status: UnitStatus
    reason: Optional[MaintenanceType] = None


class UpdatePaymentPlan(BaseModel):
    """Set or clear a plan; payment status and actual rent follow."""

    type: Literal["update_payment_plan"] = "update_payment_plan"
    building_id: int
    unit_id: str
    plan: Optional[PaymentPlan] = None


class ArchiveCompletedPlan(BaseModel):
    """Move a completed plan to the archive and mark the unit paid."""

    type: Literal["archive_completed_plan"] = "archive_completed_plan"
    building_id: int
    unit_id: str


class UpdateMaintenanceDetails(BaseModel):
    """Edit cost / expected end / reason of an ongoing maintenance."""

    type: Literal["update_maintenance_details"] = "update_maintenance_details"
    building_id: int
    unit_id: str
    cost: Optional[float] = Field(None, ge=0)
    expected_end_date: Optional[date] = None
    vacancy_reason: Optional[MaintenanceType] = None


class CompleteMaintenance(BaseModel):
    """Archive the ongoing maintenance and restore the previous status."""

    type: Literal["complete_maintenance"] = "complete_maintenance"
    building_id: int
    unit_id: str


class CancelMaintenance(BaseModel):
    """Restore the previous status without archiving a record."""

    type: Literal["cancel_maintenance"] = "cancel_maintenance"
    building_id: int
    unit_id: str


class AddBuilding(BaseModel):
    """Create a building from a per-floor layout."""

    type: Literal["add_building"] = "add_building"
    name: str = Field(..., min_length=3)
    floors: List[FloorLayout] = Field(..., min_length=1)
    apartment_rent: float = Field(..., ge=0)
    suite_rent: float = Field(..., ge=0)


class DeleteBuilding(BaseModel):
    """Remove a building and all its units."""

    type: Literal["delete_building"] = "delete_building"
    building_id: int


class AddUnit(BaseModel):
    """Add one available unit to a building."""

    type: Literal["add_unit"] = "add_unit"
    building_id: int
    unit_type: UnitType
    floor: int = Field(..., ge=1)
    unit_number: int = Field(..., ge=1)
    base_rent: float = Field(..., ge=0)


class DeleteUnit(BaseModel):
    """Remove one unit from its building."""

    type: Literal["delete_unit"] = "delete_unit"
    building_id: int
    unit_id: str


class LogClaimAction(BaseModel):
    """Append a claim record for audit display."""

    type: Literal["log_claim_action"] = "log_claim_action"
    building_id: int
    unit_id: str
    action: str = Field(..., min_length=1)


class UpdateAllBaseRents(BaseModel):
    """Apply one rent to every apartment and one to every suite."""

    type: Literal["update_all_base_rents"] = "update_all_base_rents"
    apartment_rent: float = Field(..., ge=0)
    suite_rent: float = Field(..., ge=0)


class UpdateAllPaymentStatuses(BaseModel):
    """Mark every rented unit in scope as paid or deferred."""

    type: Literal["update_all_payment_statuses"] = "update_all_payment_statuses"
    scope: Literal["all_rented", "rented_apartments", "rented_suites"] = "all_rented"
    payment_status: Literal["paid", "deferred"] = "paid"


class SaveForecastInputs(BaseModel):
    """Replace the stored forecast inputs."""

    type: Literal["save_forecast_inputs"] = "save_forecast_inputs"
    forecasts: List[YearlyForecastInput]


Action = Annotated[
    Union[
        UpdateUnit,
        UpdateUnitStatus,
        UpdatePaymentPlan,
        ArchiveCompletedPlan,
        UpdateMaintenanceDetails,
        CompleteMaintenance,
        CancelMaintenance,
        AddBuilding,
        DeleteBuilding,
        AddUnit,
        DeleteUnit,
        LogClaimAction,
        UpdateAllBaseRents,
        UpdateAllPaymentStatuses,
        SaveForecastInputs,
    ],
    Field(discriminator="type"),
]
ACTION_ADAPTER: TypeAdapter = TypeAdapter(Action)


# ---------------------------------------------------------------- helpers
def _millis(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def _field_names(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase aliases to attribute names; reject unknown keys."""
    by_alias = {info.alias: name for name, info in Unit.model_fields.items()}
    normalized: Dict[str, Any] = {}
    for key, value in fields.items():
        name = key if key in Unit.model_fields else by_alias.get(key)
        if name is None:
            raise ValueError(f"Unknown unit field: {key}")
        normalized[name] = value
    return normalized


def _merge(unit: Unit, updates: Dict[str, Any]) -> Unit:
    """Shallow merge followed by full validation."""
    data = {name: getattr(unit, name) for name in Unit.model_fields}
    data.update(updates)
    return Unit.model_validate(data)


def _with_units(room: RoomData, units: List[Unit]) -> RoomData:
    """Replace a group's units, keeping its counters in step."""
    rented = sum(1 for u in units if u.status == UnitStatus.RENTED)
    return room.model_copy(update={"units": units, "total": len(units), "rented": rented})


def _map_unit(
    state: AppState,
    building_id: int,
    unit_id: str,
    change: Callable[[Unit], Unit],
    room_key: Optional[str] = None,
) -> AppState:
    """Rebuild the tree with ``change`` applied to one unit."""
    for index, building in enumerate(state.buildings):
        if building.id != building_id:
            continue
        key = building.room_key_for(unit_id)
        if key is None or (room_key is not None and key != room_key):
            break
        room = getattr(building, key)
        current = next(u for u in room.units if u.id == unit_id)
        replacement = change(current)
        if replacement is current:
            return state
        units = [replacement if u.id == unit_id else u for u in room.units]
        new_building = building.model_copy(
            update={key: _with_units(room, units)}
        )
        buildings = list(state.buildings)
        buildings[index] = new_building
        return state.model_copy(update={"buildings": buildings})
    logger.debug("No unit %s in building %s, nothing changed", unit_id, building_id)
    return state


def _map_buildings(
    state: AppState, change: Callable[[BuildingData], BuildingData]
) -> AppState:
    return state.model_copy(update={"buildings": [change(b) for b in state.buildings]})


def _leave_maintenance(unit: Unit, status: UnitStatus, **extra: Any) -> Unit:
    """Drop the maintenance block and re-derive collected rent."""
    updated = _merge(unit, {"status": status, "maintenance": None, **extra})
    return _merge(updated, {"actual_rent": derive_actual_rent(updated)})


def validate_completion(unit: Unit) -> Dict[str, str]:
    """Details required before a maintenance episode can be completed."""
    errors: Dict[str, str] = {}
    block = unit.maintenance
    if block is None:
        errors["status"] = f"Unit {unit.id} is not under maintenance"
        return errors
    if block.expected_end_date is None:
        errors["expected_end_date"] = "Expected end date is required"
    if block.vacancy_reason == MaintenanceType.NONE:
        errors["vacancy_reason"] = "Maintenance type is required"
    return errors


# ---------------------------------------------------------------- reducers
def _update_unit(state: AppState, action: UpdateUnit, _now: datetime) -> AppState:
    updates = _field_names(action.fields)
    return _map_unit(state, action.building_id, action.unit_id, lambda u: _merge(u, updates))


def _update_unit_status(
    state: AppState, action: UpdateUnitStatus, now: datetime
) -> AppState:
    def change(unit: Unit) -> Unit:
        if action.status == UnitStatus.UNDER_MAINTENANCE:
            if unit.maintenance is not None:
                return unit
            block = ActiveMaintenance(
                vacancy_reason=action.reason or MaintenanceType.NONE,
                start_date=now.date(),
                status_before=unit.status,
            )
            return _merge(
                unit, {"status": action.status, "maintenance": block, "actual_rent": 0}
            )
        extra: Dict[str, Any] = {}
        if action.status == UnitStatus.RENTED and unit.payment_status is None:
            extra["payment_status"] = PaymentStatus.PAID
        return _leave_maintenance(unit, action.status, **extra)

    return _map_unit(
        state, action.building_id, action.unit_id, change, action.unit_type.room_key
    )


def _update_payment_plan(
    state: AppState, action: UpdatePaymentPlan, now: datetime
) -> AppState:
    return _map_unit(
        state,
        action.building_id,
        action.unit_id,
        lambda u: _merge(u, derive_payment_fields(u, action.plan, now)),
    )


def _archive_completed_plan(
    state: AppState, action: ArchiveCompletedPlan, _now: datetime
) -> AppState:
    return _map_unit(
        state,
        action.building_id,
        action.unit_id,
        lambda u: _merge(
            u,
            {
                "payment_status": PaymentStatus.PAID,
                "actual_rent": u.base_rent if u.status == UnitStatus.RENTED else 0,
                "plan_archived": True,
            },
        ),
    )


def _update_maintenance_details(
    state: AppState, action: UpdateMaintenanceDetails, _now: datetime
) -> AppState:
    changes = action.model_dump(
        include={"cost", "expected_end_date", "vacancy_reason"}, exclude_none=True
    )

    def change(unit: Unit) -> Unit:
        if unit.maintenance is None or not changes:
            return unit
        return _merge(unit, {"maintenance": unit.maintenance.model_copy(update=changes)})

    return _map_unit(state, action.building_id, action.unit_id, change)


def _complete_maintenance(
    state: AppState, action: CompleteMaintenance, now: datetime
) -> AppState:
    def change(unit: Unit) -> Unit:
        block = unit.maintenance
        if block is None:
            return unit
        today = now.date()
        record = MaintenanceRecord(
            id=f"maint-{unit.id}-{_millis(now)}",
            start_date=block.start_date or today,
            end_date=today,
            expected_end_date=block.expected_end_date,
            cost=block.cost or 0,
            type=block.vacancy_reason,
            description=f"Completed maintenance for unit {unit.unit_number}",
        )
        return _leave_maintenance(
            unit,
            block.status_before or UnitStatus.AVAILABLE,
            maintenance_history=[*unit.maintenance_history, record],
        )

    return _map_unit(state, action.building_id, action.unit_id, change)


def _cancel_maintenance(
    state: AppState, action: CancelMaintenance, _now: datetime
) -> AppState:
    def change(unit: Unit) -> Unit:
        if unit.maintenance is None:
            return unit
        return _leave_maintenance(
            unit, unit.maintenance.status_before or UnitStatus.AVAILABLE
        )

    return _map_unit(state, action.building_id, action.unit_id, change)


def _add_building(state: AppState, action: AddBuilding, now: datetime) -> AppState:
    next_id = max((b.id for b in state.buildings), default=0) + 1
    building = build_building(
        next_id,
        action.name,
        action.floors,
        action.apartment_rent,
        action.suite_rent,
        suffix=str(_millis(now)),
    )
    return state.model_copy(update={"buildings": [*state.buildings, building]})


def _delete_building(state: AppState, action: DeleteBuilding, _now: datetime) -> AppState:
    remaining = [b for b in state.buildings if b.id != action.building_id]
    if len(remaining) == len(state.buildings):
        return state
    return state.model_copy(update={"buildings": remaining})


def _add_unit(state: AppState, action: AddUnit, now: datetime) -> AppState:
    key = action.unit_type.room_key

    def change(building: BuildingData) -> BuildingData:
        if building.id != action.building_id:
            return building
        unit = Unit(
            id=make_unit_id(
                building.id,
                action.floor,
                action.unit_type,
                action.unit_number,
                str(_millis(now)),
            ),
            building_id=building.id,
            floor=action.floor,
            unit_type=action.unit_type,
            unit_number=action.unit_number,
            status=UnitStatus.AVAILABLE,
            base_rent=action.base_rent,
        )
        room = getattr(building, key)
        units = sorted([*room.units, unit], key=lambda u: u.unit_number)
        return building.model_copy(
            update={key: _with_units(room, units)}
        )

    if state.find_building(action.building_id) is None:
        return state
    return _map_buildings(state, change)


def _delete_unit(state: AppState, action: DeleteUnit, _now: datetime) -> AppState:
    building = state.find_building(action.building_id)
    key = building.room_key_for(action.unit_id) if building else None
    if building is None or key is None:
        return state

    def change(b: BuildingData) -> BuildingData:
        if b.id != action.building_id:
            return b
        room = getattr(b, key)
        units = [u for u in room.units if u.id != action.unit_id]
        return b.model_copy(
            update={key: _with_units(room, units)}
        )

    return _map_buildings(state, change)


def _log_claim_action(state: AppState, action: LogClaimAction, now: datetime) -> AppState:
    record = ClaimRecord(id=f"claim-{_millis(now)}", date=now, action=action.action)
    return _map_unit(
        state,
        action.building_id,
        action.unit_id,
        lambda u: _merge(u, {"claim_history": [*u.claim_history, record]}),
    )


def _update_all_base_rents(
    state: AppState, action: UpdateAllBaseRents, _now: datetime
) -> AppState:
    values = BulkRentValues(
        apartment_rent=action.apartment_rent, suite_rent=action.suite_rent
    )

    def change(building: BuildingData) -> BuildingData:
        rooms = {}
        for key in ("apartments", "suites"):
            room = getattr(building, key)
            units = []
            for unit in room.units:
                updated = _merge(unit, {"base_rent": values.rent_for(unit.unit_type)})
                if unit.status == UnitStatus.RENTED and unit.payment_status in (
                    PaymentStatus.PAID,
                    PaymentStatus.PAID_IN_FULL,
                ):
                    updated = _merge(updated, {"actual_rent": updated.base_rent})
                units.append(updated)
            rooms[key] = _with_units(room, units)
        return building.model_copy(update=rooms)

    new_state = _map_buildings(state, change)
    return new_state.model_copy(update={"bulk_rent_values": values})


def _update_all_payment_statuses(
    state: AppState, action: UpdateAllPaymentStatuses, _now: datetime
) -> AppState:
    keys = {
        "all_rented": ("apartments", "suites"),
        "rented_apartments": ("apartments",),
        "rented_suites": ("suites",),
    }[action.scope]
    status = PaymentStatus(action.payment_status)

    def change(building: BuildingData) -> BuildingData:
        rooms = {}
        for key in keys:
            room = getattr(building, key)
            units = [
                _merge(
                    u,
                    {
                        "payment_status": status,
                        "payment_plan": None,
                        "actual_rent": u.base_rent if status == PaymentStatus.PAID else 0,
                    },
                )
                if u.status == UnitStatus.RENTED
                else u
                for u in room.units
            ]
            rooms[key] = _with_units(room, units)
        return building.model_copy(update=rooms)

    return _map_buildings(state, change)


def _save_forecast_inputs(
    state: AppState, action: SaveForecastInputs, _now: datetime
) -> AppState:
    return state.model_copy(update={"forecast_inputs": list(action.forecasts)})


_REDUCERS: Dict[str, Callable[[AppState, Any, datetime], AppState]] = {
    "update_unit": _update_unit,
    "update_unit_status": _update_unit_status,
    "update_payment_plan": _update_payment_plan,
    "archive_completed_plan": _archive_completed_plan,
    "update_maintenance_details": _update_maintenance_details,
    "complete_maintenance": _complete_maintenance,
    "cancel_maintenance": _cancel_maintenance,
    "add_building": _add_building,
    "delete_building": _delete_building,
    "add_unit": _add_unit,
    "delete_unit": _delete_unit,
    "log_claim_action": _log_claim_action,
    "update_all_base_rents": _update_all_base_rents,
    "update_all_payment_statuses": _update_all_payment_statuses,
    "save_forecast_inputs": _save_forecast_inputs,
}


def reduce(state: AppState, action: Any, now: Optional[datetime] = None) -> AppState:
    """
    Apply one action to the state.

    Args:
        state: current state (left untouched)
        action: action model, or a dict with a ``type`` key
        now: timestamp for ids and dates, defaults to the current UTC time

    Returns:
        AppState: new state, or ``state`` itself when nothing changed
    """
    if isinstance(action, dict):
        action = ACTION_ADAPTER.validate_python(action)
    return _REDUCERS[action.type](state, action, now or datetime.now(timezone.utc))


# ---------------------------------------------------------------- store
class HousingStore:
    """Current state plus persistence."""

    def __init__(
        self,
        storage: Optional[JsonStorage] = None,
        state: Optional[AppState] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.storage = storage
        self.clock = clock
        if state is None:
            state = storage.load() if storage is not None else AppState()
        self._state = state

    @property
    def state(self) -> AppState:
        """Current state (treat as read-only)."""
        return self._state

    def dispatch(self, action: Any) -> AppState:
        """Reduce, persist, then publish the new state.

        A failed save leaves the in-memory state unchanged and propagates
        ``StorageError``.
        """
        if isinstance(action, dict):
            action = ACTION_ADAPTER.validate_python(action)
        new_state = reduce(self._state, action, self.clock())
        if new_state is self._state:
            return self._state
        if self.storage is not None:
            self.storage.save(new_state)
        self._state = new_state
        logger.info("Applied %s", action.type)
        return new_state

    # convenience wrappers, one per action
    def update_unit(self, building_id: int, unit_id: str, fields: Dict[str, Any]) -> AppState:
        """Shallow-merge fields into a unit."""
        return self.dispatch(UpdateUnit(building_id=building_id, unit_id=unit_id, fields=fields))

    def update_unit_status(
        self,
        building_id: int,
        unit_type: UnitType,
        unit_id: str,
        status: UnitStatus,
        reason: Optional[MaintenanceType] = None,
    ) -> AppState:
        """Status transition with maintenance snapshot/clearing."""
        return self.dispatch(
            UpdateUnitStatus(
                building_id=building_id,
                unit_type=unit_type,
                unit_id=unit_id,
                status=status,
                reason=reason,
            )
        )

    def update_payment_plan(
        self, building_id: int, unit_id: str, plan: Optional[PaymentPlan]
    ) -> AppState:
        """Set or clear a payment plan."""
        return self.dispatch(
            UpdatePaymentPlan(building_id=building_id, unit_id=unit_id, plan=plan)
        )

    def archive_completed_plan(self, building_id: int, unit_id: str) -> AppState:
        """Archive a completed plan."""
        return self.dispatch(ArchiveCompletedPlan(building_id=building_id, unit_id=unit_id))

    def update_maintenance_details(self, building_id: int, unit_id: str, **details: Any) -> AppState:
        """Edit ongoing maintenance (cost, expected_end_date, vacancy_reason)."""
        return self.dispatch(
            UpdateMaintenanceDetails(building_id=building_id, unit_id=unit_id, **details)
        )

    def complete_maintenance(self, unit: Unit) -> AppState:
        """Archive the unit's ongoing maintenance."""
        return self.dispatch(
            CompleteMaintenance(building_id=unit.building_id, unit_id=unit.id)
        )

    def cancel_maintenance(self, building_id: int, unit_id: str) -> AppState:
        """Abort maintenance without archiving."""
        return self.dispatch(CancelMaintenance(building_id=building_id, unit_id=unit_id))

    def add_building(
        self,
        name: str,
        floors: List[FloorLayout],
        apartment_rent: float,
        suite_rent: float,
    ) -> AppState:
        """Create a building."""
        return self.dispatch(
            AddBuilding(
                name=name,
                floors=floors,
                apartment_rent=apartment_rent,
                suite_rent=suite_rent,
            )
        )

    def delete_building(self, building_id: int) -> AppState:
        """Remove a building."""
        return self.dispatch(DeleteBuilding(building_id=building_id))

    def add_unit(
        self,
        building_id: int,
        unit_type: UnitType,
        floor: int,
        unit_number: int,
        base_rent: float,
    ) -> AppState:
        """Add a unit."""
        return self.dispatch(
            AddUnit(
                building_id=building_id,
                unit_type=unit_type,
                floor=floor,
                unit_number=unit_number,
                base_rent=base_rent,
            )
        )

    def delete_unit(self, building_id: int, unit_id: str) -> AppState:
        """Remove a unit."""
        return self.dispatch(DeleteUnit(building_id=building_id, unit_id=unit_id))

    def log_claim_action(self, building_id: int, unit_id: str, action: str) -> AppState:
        """Record a claim action."""
        return self.dispatch(
            LogClaimAction(building_id=building_id, unit_id=unit_id, action=action)
        )

    def update_all_base_rents(self, apartment_rent: float, suite_rent: float) -> AppState:
        """Bulk rent update."""
        return self.dispatch(
            UpdateAllBaseRents(apartment_rent=apartment_rent, suite_rent=suite_rent)
        )

    def update_all_payment_statuses(self, scope: str, payment_status: str) -> AppState:
        """Bulk payment-status update for rented units."""
        return self.dispatch(
            UpdateAllPaymentStatuses(scope=scope, payment_status=payment_status)
        )

    def save_forecast_inputs(self, forecasts: List[YearlyForecastInput]) -> AppState:
        """Persist forecast inputs."""
        return self.dispatch(SaveForecastInputs(forecasts=forecasts))
