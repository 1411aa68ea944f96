"""JSON document storage with schema versioning.

The document keeps the browser dashboard's camelCase layout
(``buildings``, ``forecastInputs``, ``bulkRentValues``) plus a ``version``
field. Documents without one are version 0 and are migrated on load.
"""

import json
import logging
import os
import tempfile
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from ..models.building_model import CURRENT_SCHEMA_VERSION, AppState
from .defaults import default_state

logger = logging.getLogger(__name__)

# flat maintenance fields of version-0 units -> keys of the maintenance block
_LEGACY_MAINTENANCE_FIELDS = {
    "vacancyReason": "vacancyReason",
    "maintenanceCost": "cost",
    "maintenanceStartDate": "startDate",
    "maintenanceEndDate": "expectedEndDate",
    "statusBeforeMaintenance": "statusBefore",
}


class StorageError(Exception):
    """Raised when the state document cannot be written or is unsupported."""


def _migrate_unit_v0(unit: Dict[str, Any]) -> Dict[str, Any]:
    unit = dict(unit)
    block = {
        target: unit.pop(source)
        for source, target in _LEGACY_MAINTENANCE_FIELDS.items()
        if source in unit
    }
    if unit.get("status") == "under_maintenance":
        block.setdefault("vacancyReason", "none")
        unit["maintenance"] = block
    else:
        unit.pop("maintenance", None)
    return unit


def _migrate_v0_to_v1(document: Dict[str, Any]) -> Dict[str, Any]:
    """Fold flat maintenance fields into a ``maintenance`` block."""
    buildings = []
    for building in document.get("buildings") or []:
        building = dict(building)
        for key in ("apartments", "suites"):
            room = dict(building.get(key) or {})
            room["units"] = [_migrate_unit_v0(u) for u in room.get("units") or []]
            building[key] = room
        buildings.append(building)
    return {**document, "buildings": buildings, "version": 1}


# version -> function producing version + 1
MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    0: _migrate_v0_to_v1,
}


def migrate_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Upgrade a raw document to the current schema version.

    Args:
        document: parsed JSON document

    Returns:
        Dict[str, Any]: document at ``CURRENT_SCHEMA_VERSION``

    Raises:
        StorageError: the document is newer than this code understands
    """
    version = document.get("version", 0)
    if not isinstance(version, int):
        raise StorageError(f"Invalid document version: {version!r}")
    if version > CURRENT_SCHEMA_VERSION:
        raise StorageError(
            f"Document version {version} is newer than supported "
            f"version {CURRENT_SCHEMA_VERSION}"
        )
    while version < CURRENT_SCHEMA_VERSION:
        logger.info("Migrating state document from version %d", version)
        document = MIGRATIONS[version](document)
        version += 1
    return document


class JsonStorage:
    """Load and save ``AppState`` as a single JSON file."""

    def __init__(self, path: str, today: Optional[date] = None) -> None:
        self.path = path
        self.today = today

    def load(self) -> AppState:
        """
        Read the stored state.

        A missing file yields the default dataset. A file that exists but
        cannot be parsed or validated is renamed to ``<path>.invalid-<stamp>``
        before falling back, so the next save never overwrites it. A
        document from a newer schema version is an error.
        """
        if not os.path.exists(self.path):
            logger.info("No state file at %s, using default dataset", self.path)
            return default_state(self.today)
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            self._set_aside(f"could not read: {e}")
            return default_state(self.today)
        if not isinstance(document, dict):
            self._set_aside("unexpected document")
            return default_state(self.today)

        document = migrate_document(document)
        try:
            return AppState.model_validate(document)
        except ValidationError as e:
            self._set_aside(f"{e.error_count()} validation errors")
            return default_state(self.today)

    def _set_aside(self, reason: str) -> str:
        """Rename the unusable state file and return its new path."""
        stamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
        backup = f"{self.path}.invalid-{stamp}"
        try:
            os.replace(self.path, backup)
        except OSError as e:
            raise StorageError(
                f"State file {self.path} is unusable ({reason}) and could not be moved aside: {e}"
            ) from e
        logger.warning(
            "Unusable state in %s (%s); moved to %s, using default dataset",
            self.path,
            reason,
            backup,
        )
        return backup

    def save(self, state: AppState) -> None:
        """Write the state atomically (temp file then rename)."""
        payload = json.dumps(
            state.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2
        )
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_path, self.path)
            except OSError:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            logger.error("Failed to save state to %s: %s", self.path, e)
            raise StorageError(f"Failed to save state to {self.path}: {e}") from e
        logger.debug("Saved state to %s", self.path)
