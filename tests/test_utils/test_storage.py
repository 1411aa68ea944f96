"""JSON storage and migration tests"""

import copy
import glob
import json
import os
from datetime import date

import pytest

from student_housing_mcp.models.building_model import CURRENT_SCHEMA_VERSION
from student_housing_mcp.models.unit_model import (
    MaintenanceType,
    PaymentStatus,
    UnitStatus,
    UnitType,
)
from student_housing_mcp.utils.defaults import DEFAULT_BUILDING_COUNT, default_state
from student_housing_mcp.utils.storage import JsonStorage, StorageError, migrate_document
from student_housing_mcp.utils.store import HousingStore
from tests.helpers.shared import NOW, TODAY, VERSION_0_DOCUMENT


def _write(path, payload: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(payload)


def _set_aside_files(storage) -> list:
    return glob.glob(f"{storage.path}.invalid-*")


class TestDefaultDataset:
    """Fallback dataset"""

    def test_missing_file_yields_default_dataset(self, json_storage):
        state = json_storage.load()
        assert len(state.buildings) == DEFAULT_BUILDING_COUNT
        building = state.buildings[0]
        assert building.name == "مبنى 1"
        assert building.apartments.total == 124
        assert building.suites.total == 10
        assert all(u.status == UnitStatus.RENTED for u in building.all_units())
        assert all(u.payment_status == PaymentStatus.PAID for u in building.all_units())

    def test_default_numbering_and_rents(self):
        building = default_state(TODAY).buildings[1]
        first_floor_2 = [u for u in building.apartments.units if u.floor == 2][0]
        assert first_floor_2.unit_number == 17
        assert first_floor_2.id == "B2-F2-A017"
        assert building.apartments.units[0].base_rent == 1700
        assert building.suites.units[0].base_rent == 3000
        assert building.suites.units[0].rent_date == TODAY.isoformat()

    def test_invalid_json_falls_back(self, json_storage):
        _write(json_storage.path, "{not json")
        assert len(json_storage.load().buildings) == DEFAULT_BUILDING_COUNT
        assert not os.path.exists(json_storage.path)
        assert len(_set_aside_files(json_storage)) == 1

    def test_unexpected_document_falls_back(self, json_storage):
        _write(json_storage.path, "[1, 2, 3]")
        assert len(json_storage.load().buildings) == DEFAULT_BUILDING_COUNT

    def test_invalid_units_fall_back(self, json_storage):
        document = {"version": 1, "buildings": [{"id": "x", "name": None}]}
        _write(json_storage.path, json.dumps(document))
        assert len(json_storage.load().buildings) == DEFAULT_BUILDING_COUNT

    def test_invalid_file_is_kept_after_the_next_save(self, json_storage):
        document = {"version": 1, "buildings": [{"id": "x", "name": None}]}
        _write(json_storage.path, json.dumps(document))
        store = HousingStore(json_storage, clock=lambda: NOW)
        store.update_all_base_rents(1800, 3100)

        (kept,) = _set_aside_files(json_storage)
        with open(kept, encoding="utf-8") as f:
            assert json.load(f) == document
        assert len(json_storage.load().buildings) == DEFAULT_BUILDING_COUNT

    def test_file_that_cannot_be_moved_aside(self, json_storage, monkeypatch):
        _write(json_storage.path, "{not json")

        def refuse(*_args):
            raise PermissionError("read-only directory")

        monkeypatch.setattr(os, "replace", refuse)
        with pytest.raises(StorageError):
            json_storage.load()


class TestRoundTrip:
    """save then load"""

    def test_round_trip(self, mixed_state, json_storage):
        store = HousingStore(state=mixed_state, clock=lambda: NOW)
        store.log_claim_action(1, "B1-F1-A002", "مطالبة عبر واتساب")
        json_storage.save(store.state)
        loaded = json_storage.load()
        assert loaded.model_dump() == store.state.model_dump()

    def test_document_layout(self, small_state, json_storage):
        json_storage.save(small_state)
        with open(json_storage.path, encoding="utf-8") as f:
            document = json.load(f)
        assert document["version"] == CURRENT_SCHEMA_VERSION
        assert set(document) == {"version", "buildings", "forecastInputs", "bulkRentValues"}
        unit = document["buildings"][0]["apartments"]["units"][0]
        assert unit["baseRent"] == 1700
        assert unit["unitType"] == "apartment"
        assert "maintenance" in unit and unit["maintenance"] is None

    def test_arabic_is_stored_unescaped(self, small_state, json_storage):
        json_storage.save(small_state)
        with open(json_storage.path, encoding="utf-8") as f:
            assert "مبنى 1" in f.read()

    def test_write_failure_raises(self, small_state, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x", encoding="utf-8")
        storage = JsonStorage(str(blocker / "state.json"))
        with pytest.raises(StorageError):
            storage.save(small_state)


class TestMigration:
    """Version 0 documents"""

    def test_flat_fields_become_maintenance_block(self, json_storage):
        _write(json_storage.path, json.dumps(VERSION_0_DOCUMENT, ensure_ascii=False))
        state = json_storage.load()
        unit = state.find_unit("B1-F1-A001")
        assert unit.status == UnitStatus.UNDER_MAINTENANCE
        assert unit.maintenance.vacancy_reason == MaintenanceType.ELECTRICAL
        assert unit.maintenance.cost == 500
        assert unit.maintenance.start_date == date(2025, 2, 1)
        assert unit.maintenance.expected_end_date == date(2025, 2, 20)
        assert unit.maintenance.status_before == UnitStatus.RENTED
        assert unit.unit_type == UnitType.APARTMENT

    def test_stray_fields_are_dropped_outside_maintenance(self, json_storage):
        _write(json_storage.path, json.dumps(VERSION_0_DOCUMENT, ensure_ascii=False))
        unit = json_storage.load().find_unit("B1-F1-A002")
        assert unit.maintenance is None
        assert unit.status == UnitStatus.AVAILABLE

    def test_migration_does_not_touch_input(self):
        original = copy.deepcopy(VERSION_0_DOCUMENT)
        migrated = migrate_document(VERSION_0_DOCUMENT)
        assert VERSION_0_DOCUMENT == original
        assert migrated["version"] == CURRENT_SCHEMA_VERSION

    def test_newer_version_is_rejected(self, json_storage):
        _write(json_storage.path, json.dumps({"version": CURRENT_SCHEMA_VERSION + 1, "buildings": []}))
        with pytest.raises(StorageError):
            json_storage.load()

    def test_current_version_is_unchanged(self):
        document = {"version": CURRENT_SCHEMA_VERSION, "buildings": []}
        assert migrate_document(document) == document


class TestMalformedDates:
    """Unparseable date strings inside an otherwise valid document"""

    def test_bad_dates_become_missing(self, mixed_state, json_storage):
        json_storage.save(mixed_state)
        with open(json_storage.path, encoding="utf-8") as f:
            document = json.load(f)
        units = {u["id"]: u for u in document["buildings"][0]["apartments"]["units"]}
        units["B1-F1-A004"]["paymentPlan"]["installments"][1]["dueDate"] = "2025/03/01"
        suite = document["buildings"][0]["suites"]["units"][0]
        suite["maintenance"]["expectedEndDate"] = "غير محدد"
        _write(json_storage.path, json.dumps(document, ensure_ascii=False))

        state = json_storage.load()
        assert [b.name for b in state.buildings] == ["مبنى 1"]
        assert state.find_unit("B1-F1-A004").payment_plan.installments[1].due_date is None
        assert state.find_unit("B1-F1-S001").maintenance.expected_end_date is None
        assert _set_aside_files(json_storage) == []

    def test_bad_dates_survive_a_save(self, json_storage):
        document = copy.deepcopy(VERSION_0_DOCUMENT)
        document["buildings"][0]["name"] = "My"
        unit = document["buildings"][0]["apartments"]["units"][1]
        unit["paymentPlan"] = {
            "type": "installment",
            "installments": [{"amount": 1700, "dueDate": "2025/03/01", "isPaid": False}],
        }
        _write(json_storage.path, json.dumps(document, ensure_ascii=False))

        store = HousingStore(json_storage, clock=lambda: NOW)
        store.update_all_base_rents(1800, 3100)

        reloaded = json_storage.load()
        assert [b.name for b in reloaded.buildings] == ["My"]
        assert reloaded.find_unit("B1-F1-A002").payment_plan.installments[0].due_date is None
