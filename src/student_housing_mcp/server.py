# src/student_housing_mcp/server.py
"""Student housing administration MCP server"""

import asyncio
import importlib.metadata
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from mcp.server import NotificationOptions, Server
from mcp.types import Resource, TextContent, Tool
from pydantic import AnyUrl, TypeAdapter

from .models.building_model import BuildingData, FloorLayout, YearlyForecastInput
from .models.unit_model import (
    MaintenanceType,
    PaymentInstallment,
    PaymentPlan,
    PlanType,
    Unit,
    UnitStatus,
    UnitType,
)
from .utils.claims import channel_label, claim_text, format_currency, whatsapp_url
from .utils.exporters import ExportError, export_workbook, render_print_html
from .utils.obligations import (
    ENTRY_PLAN_TYPES,
    resolve_obligation,
    split_installments,
    validate_plan_inputs,
)
from .utils.reports import DATED_REPORTS, REPORTS, ReportTable, default_forecast_inputs
from .utils.settings import Settings, load_settings
from .utils.storage import JsonStorage, StorageError
from .utils.store import BULK_SCOPES, HousingStore, validate_completion

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BUILDING_URI = "building://local.host/"
UNIT_URI = "unit://local.host/"

_FORECASTS = TypeAdapter(List[YearlyForecastInput])
_FLOORS = TypeAdapter(List[FloorLayout])

ToolHandler = Callable[[Dict[str, Any]], Awaitable[List[TextContent]]]


def _schema(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required or []}


_BUILDING_ID = {"type": "integer", "description": "Building ID"}
_UNIT_ID = {"type": "string", "description": "Unit ID, e.g. B1-F2-A017"}
_REPORT_PARAMS = {
    "type": "object",
    "description": "Report options, e.g. {\"view\": \"upcoming\"} or {\"kind\": \"status\", \"value\": \"rented\"}",
}


def _enum(values: Any, description: str) -> Dict[str, Any]:
    return {"type": "string", "enum": [v.value if hasattr(v, "value") else v for v in values], "description": description}


TOOLS: List[Tool] = [
    Tool(
        name="list_buildings",
        description="List buildings with occupancy counts",
        inputSchema=_schema({}),
    ),
    Tool(
        name="get_unit",
        description="Full record of one unit (JSON)",
        inputSchema=_schema({"unit_id": _UNIT_ID}, ["unit_id"]),
    ),
    Tool(
        name="resolve_obligation",
        description="Remaining balance, due dates and overdue state of a unit",
        inputSchema=_schema({"unit_id": _UNIT_ID}, ["unit_id"]),
    ),
    Tool(
        name="update_unit",
        description="Merge field values into a unit",
        inputSchema=_schema(
            {
                "building_id": _BUILDING_ID,
                "unit_id": _UNIT_ID,
                "fields": {"type": "object", "description": "Field values (snake_case or camelCase)"},
            },
            ["building_id", "unit_id", "fields"],
        ),
    ),
    Tool(
        name="update_unit_status",
        description="Change a unit's occupancy status",
        inputSchema=_schema(
            {
                "building_id": _BUILDING_ID,
                "unit_id": _UNIT_ID,
                "status": _enum(UnitStatus, "New status"),
                "reason": _enum(MaintenanceType, "Maintenance reason when entering maintenance"),
            },
            ["building_id", "unit_id", "status"],
        ),
    ),
    Tool(
        name="update_payment_plan",
        description="Set or clear (plan=null) a unit's payment plan",
        inputSchema=_schema(
            {
                "building_id": _BUILDING_ID,
                "unit_id": _UNIT_ID,
                "plan": {"type": ["object", "null"], "description": "PaymentPlan (camelCase or snake_case)"},
                "split": {
                    "type": "object",
                    "description": "Generate equal entries from base rent: {\"count\": n, \"due_dates\": [...]}",
                },
            },
            ["building_id", "unit_id"],
        ),
    ),
    Tool(
        name="archive_completed_plan",
        description="Archive a completed plan and mark the unit paid",
        inputSchema=_schema({"building_id": _BUILDING_ID, "unit_id": _UNIT_ID}, ["building_id", "unit_id"]),
    ),
    Tool(
        name="complete_maintenance",
        description="Archive the ongoing maintenance and restore the previous status",
        inputSchema=_schema({"unit_id": _UNIT_ID}, ["unit_id"]),
    ),
    Tool(
        name="cancel_maintenance",
        description="Abort maintenance without archiving",
        inputSchema=_schema({"building_id": _BUILDING_ID, "unit_id": _UNIT_ID}, ["building_id", "unit_id"]),
    ),
    Tool(
        name="update_maintenance_details",
        description="Edit cost, expected end date or reason of ongoing maintenance",
        inputSchema=_schema(
            {
                "building_id": _BUILDING_ID,
                "unit_id": _UNIT_ID,
                "cost": {"type": "number"},
                "expected_end_date": {"type": "string", "description": "YYYY-MM-DD"},
                "vacancy_reason": _enum(MaintenanceType, "Maintenance reason"),
            },
            ["building_id", "unit_id"],
        ),
    ),
    Tool(
        name="add_building",
        description="Create a building from a per-floor layout",
        inputSchema=_schema(
            {
                "name": {"type": "string"},
                "floors": {
                    "type": "array",
                    "items": {"type": "object", "properties": {"apartments": {"type": "integer"}, "suites": {"type": "integer"}}},
                },
                "apartment_rent": {"type": "number"},
                "suite_rent": {"type": "number"},
            },
            ["name", "floors"],
        ),
    ),
    Tool(
        name="delete_building",
        description="Delete a building and all its units",
        inputSchema=_schema({"building_id": _BUILDING_ID}, ["building_id"]),
    ),
    Tool(
        name="add_unit",
        description="Add an available unit to a building",
        inputSchema=_schema(
            {
                "building_id": _BUILDING_ID,
                "unit_type": _enum(UnitType, "Apartment or suite"),
                "floor": {"type": "integer"},
                "unit_number": {"type": "integer"},
                "base_rent": {"type": "number", "description": "Defaults to the bulk rent for the type"},
            },
            ["building_id", "unit_type", "floor", "unit_number"],
        ),
    ),
    Tool(
        name="delete_unit",
        description="Delete a unit",
        inputSchema=_schema({"building_id": _BUILDING_ID, "unit_id": _UNIT_ID}, ["building_id", "unit_id"]),
    ),
    Tool(
        name="log_claim",
        description="Record a claim action in a unit's history",
        inputSchema=_schema(
            {"building_id": _BUILDING_ID, "unit_id": _UNIT_ID, "action": {"type": "string"}},
            ["building_id", "unit_id", "action"],
        ),
    ),
    Tool(
        name="send_claim",
        description="Prepare a dues claim (email text, WhatsApp link or printable page) and log it",
        inputSchema=_schema(
            {
                "unit_id": _UNIT_ID,
                "channel": _enum(["email", "whatsapp", "paper"], "Claim channel"),
                "phone": {"type": "string", "description": "Mobile without 0 or country code (WhatsApp)"},
            },
            ["unit_id", "channel"],
        ),
    ),
    Tool(
        name="bulk_update_base_rents",
        description="Apply one rent to all apartments and one to all suites",
        inputSchema=_schema(
            {"apartment_rent": {"type": "number"}, "suite_rent": {"type": "number"}},
            ["apartment_rent", "suite_rent"],
        ),
    ),
    Tool(
        name="bulk_update_payment_status",
        description="Mark rented units as paid or deferred",
        inputSchema=_schema(
            {
                "scope": _enum(BULK_SCOPES, "Units affected"),
                "payment_status": _enum(["paid", "deferred"], "New payment status"),
            },
            ["scope", "payment_status"],
        ),
    ),
    Tool(
        name="save_forecast",
        description="Save forecast inputs (or seed them from the current buildings)",
        inputSchema=_schema(
            {
                "forecasts": {"type": "array", "items": {"type": "object"}},
                "years": {"type": "integer", "description": "Seed this many years when forecasts is omitted"},
            }
        ),
    ),
    Tool(
        name="generate_report",
        description="Render a report as text",
        inputSchema=_schema(
            {"report": _enum(REPORTS, "Report name"), "params": _REPORT_PARAMS},
            ["report"],
        ),
    ),
    Tool(
        name="export_report",
        description="Export one or more reports to an .xlsx workbook",
        inputSchema=_schema(
            {
                "reports": {"type": "array", "items": _enum(REPORTS, "Report name")},
                "name": {"type": "string", "description": "File name prefix"},
                "params": _REPORT_PARAMS,
            },
            ["reports"],
        ),
    ),
    Tool(
        name="print_report",
        description="Printable RTL HTML page for a report",
        inputSchema=_schema(
            {"report": _enum(REPORTS, "Report name"), "params": _REPORT_PARAMS},
            ["report"],
        ),
    ),
]


def _text(message: str) -> List[TextContent]:
    return [TextContent(type="text", text=message)]


def _cell(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:,.0f}" if value.is_integer() else f"{value:,.2f}"
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:,}"
    return str(value)


def format_table(table: ReportTable) -> str:
    """Plain-text rendering of a report table."""
    lines = [f"📊 {table.title}", " | ".join(table.columns)]
    lines.extend(" | ".join(_cell(v) for v in row) for row in table.rows)
    if not table.rows:
        lines.append("(لا توجد بيانات)")
    if table.totals:
        lines.append(" | ".join(_cell(v) for v in table.totals))
    return "\n".join(lines)


class StudentHousingMCPServer:
    """Student housing administration MCP server"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[HousingStore] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.store = store or HousingStore(JsonStorage(self.settings.storage_path))
        self.server = Server("student-housing-mcp")
        self._handlers: Dict[str, ToolHandler] = {
            "list_buildings": self._list_buildings,
            "get_unit": self._get_unit,
            "resolve_obligation": self._resolve_obligation,
            "update_unit": self._update_unit,
            "update_unit_status": self._update_unit_status,
            "update_payment_plan": self._update_payment_plan,
            "archive_completed_plan": self._archive_completed_plan,
            "complete_maintenance": self._complete_maintenance,
            "cancel_maintenance": self._cancel_maintenance,
            "update_maintenance_details": self._update_maintenance_details,
            "add_building": self._add_building,
            "delete_building": self._delete_building,
            "add_unit": self._add_unit,
            "delete_unit": self._delete_unit,
            "log_claim": self._log_claim,
            "send_claim": self._send_claim,
            "bulk_update_base_rents": self._bulk_update_base_rents,
            "bulk_update_payment_status": self._bulk_update_payment_status,
            "save_forecast": self._save_forecast,
            "generate_report": self._generate_report,
            "export_report": self._export_report,
            "print_report": self._print_report,
        }

        self._register_tools()
        self._register_resources()

    def _register_tools(self) -> None:
        """Bind list / call handlers to the MCP server."""

        @self.server.list_tools()
        async def list_tools() -> List[Tool]:
            return TOOLS

        @self.server.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
            return await self._dispatch_tool(name, arguments or {})

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        """Dispatch a tool call outside the MCP transport."""
        return await self._dispatch_tool(name, arguments)

    async def _dispatch_tool(self, name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        handler = self._handlers.get(name)
        if handler is None:
            return _text(f"Unknown tool: {name}")
        try:
            return await handler(arguments)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Tool %s input error: %s", name, e)
            return _text(f"Input error: {e}")
        except StorageError as e:
            return _text(f"Save failed, no changes were applied: {e}")
        except ExportError as e:
            return _text(f"Export failed: {e}")
        # anything else propagates

    def _register_resources(self) -> None:
        @self.server.list_resources()
        async def list_resources() -> List[Resource]:
            return [
                Resource(
                    uri=f"{BUILDING_URI}{building.id}",  # type: ignore[arg-type]
                    name=building.name,
                    description=f"Building {building.id} with all its units",
                    mimeType="application/json",
                )
                for building in self.store.state.buildings
            ]

        @self.server.read_resource()  # type: ignore[misc]
        async def read_resource(uri: AnyUrl) -> str:
            return self.read_resource(str(uri))

    def read_resource(self, uri: str) -> str:
        """JSON document for a building:// or unit:// URI."""
        state = self.store.state
        if uri.startswith(BUILDING_URI):
            building_id = int(uri[len(BUILDING_URI):])
            building = state.find_building(building_id)
            if building is None:
                raise ValueError(f"Building not found: {building_id}")
            return building.model_dump_json(by_alias=True, indent=2)
        if uri.startswith(UNIT_URI):
            unit = state.find_unit(uri[len(UNIT_URI):])
            if unit is None:
                raise ValueError(f"Unit not found: {uri[len(UNIT_URI):]}")
            return unit.model_dump_json(by_alias=True, indent=2)
        raise ValueError(f"Unknown resource URI: {uri}")

    # ---------------------------------------------------------------- helpers
    def _today(self) -> date:
        return self.store.clock().date()

    def _require_unit(self, unit_id: str, building_id: Optional[int] = None) -> Unit:
        unit = self.store.state.find_unit(unit_id)
        if unit is None or (building_id is not None and unit.building_id != building_id):
            raise KeyError(f"Unit not found: {unit_id}")
        return unit

    def _require_building(self, building_id: int) -> BuildingData:
        building = self.store.state.find_building(building_id)
        if building is None:
            raise KeyError(f"Building not found: {building_id}")
        return building

    def _build_report(self, name: str, params: Optional[Dict[str, Any]]) -> ReportTable:
        if name not in REPORTS:
            raise ValueError(f"Unknown report: {name}")
        kwargs = dict(params or {})
        if "forecasts" in kwargs:
            kwargs["forecasts"] = _FORECASTS.validate_python(kwargs["forecasts"])
        if name in DATED_REPORTS:
            kwargs.setdefault("today", self._today())
        return REPORTS[name](self.store.state, **kwargs)

    # ---------------------------------------------------------------- queries
    async def _list_buildings(self, _arguments: Dict[str, Any]) -> List[TextContent]:
        buildings = self.store.state.buildings
        if not buildings:
            return _text("No buildings registered.")
        lines = ["🏢 Buildings"]
        for b in buildings:
            lines.append(
                f"・{b.name} (ID: {b.id}): apartments {b.apartments.rented}/{b.apartments.total}, "
                f"suites {b.suites.rented}/{b.suites.total}"
            )
        return _text("\n".join(lines))

    async def _get_unit(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"])
        return _text(unit.model_dump_json(by_alias=True, indent=2))

    async def _resolve_obligation(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"])
        summary = resolve_obligation(unit, self._today())
        lines = [
            f"💰 Unit {unit.label} ({unit.id})",
            f"・Plan: {summary.plan_label}",
            f"・Remaining: {format_currency(summary.remaining)}",
            f"・Paid: {format_currency(summary.total_paid)} of {format_currency(summary.total_rent)}",
            f"・Next due: {summary.due_date.isoformat() if summary.due_date else '-'}",
            f"・Overdue: {'yes' if summary.is_overdue else 'no'}",
        ]
        if summary.total_installments_count:
            lines.append(
                f"・Installments: {summary.paid_count}/{summary.total_installments_count} paid"
            )
        if summary.needs_plan:
            lines.append("⚠️ Deferred without a payment plan")
        return _text("\n".join(lines))

    # ---------------------------------------------------------------- mutations
    async def _update_unit(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"], arguments["building_id"])
        self.store.update_unit(unit.building_id, unit.id, dict(arguments["fields"]))
        return _text(f"Unit {unit.id} updated.")

    async def _update_unit_status(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"], arguments["building_id"])
        status = UnitStatus(arguments["status"])
        reason = MaintenanceType(arguments["reason"]) if arguments.get("reason") else None
        self.store.update_unit_status(unit.building_id, unit.unit_type, unit.id, status, reason)
        return _text(f"Unit {unit.id} is now {status.value}.")

    async def _update_payment_plan(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"], arguments["building_id"])
        raw_plan = arguments.get("plan")
        if raw_plan is None:
            self.store.update_payment_plan(unit.building_id, unit.id, None)
            return _text(f"Payment plan cleared; unit {unit.id} marked paid.")

        plan = PaymentPlan.model_validate(raw_plan)
        split = arguments.get("split")
        if split and plan.type in ENTRY_PLAN_TYPES:
            amounts = split_installments(unit.base_rent, int(split["count"]))
            due_dates = list(split.get("due_dates") or [])
            entries = [
                PaymentInstallment(amount=amount, due_date=due_dates[i] if i < len(due_dates) else None)
                for i, amount in enumerate(amounts)
            ]
            key = "installments" if plan.type == PlanType.INSTALLMENT else "stipend_deductions"
            plan = plan.model_copy(update={key: entries})

        errors = validate_plan_inputs(plan)
        if errors:
            return _text("Input error: " + ", ".join(errors.values()))
        self.store.update_payment_plan(unit.building_id, unit.id, plan)
        updated = self._require_unit(unit.id)
        return _text(
            f"Payment plan saved for unit {unit.id} "
            f"(payment status: {updated.payment_status.value if updated.payment_status else '-'})."
        )

    async def _archive_completed_plan(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"], arguments["building_id"])
        self.store.archive_completed_plan(unit.building_id, unit.id)
        return _text(f"Plan of unit {unit.id} archived.")

    async def _complete_maintenance(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"])
        errors = validate_completion(unit)
        if errors:
            return _text("Cannot complete maintenance: " + ", ".join(errors.values()))
        self.store.complete_maintenance(unit)
        restored = self._require_unit(unit.id)
        return _text(f"Maintenance of unit {unit.id} completed; status {restored.status.value}.")

    async def _cancel_maintenance(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"], arguments["building_id"])
        if unit.maintenance is None:
            return _text(f"Unit {unit.id} is not under maintenance.")
        self.store.cancel_maintenance(unit.building_id, unit.id)
        return _text(f"Maintenance of unit {unit.id} cancelled.")

    async def _update_maintenance_details(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"], arguments["building_id"])
        if unit.maintenance is None:
            return _text(f"Unit {unit.id} is not under maintenance.")
        details = {
            key: arguments[key]
            for key in ("cost", "expected_end_date", "vacancy_reason")
            if arguments.get(key) is not None
        }
        self.store.update_maintenance_details(unit.building_id, unit.id, **details)
        return _text(f"Maintenance details of unit {unit.id} updated.")

    async def _add_building(self, arguments: Dict[str, Any]) -> List[TextContent]:
        self.store.add_building(
            arguments["name"],
            _FLOORS.validate_python(arguments["floors"]),
            arguments.get("apartment_rent", self.settings.apartment_rent),
            arguments.get("suite_rent", self.settings.suite_rent),
        )
        building = self.store.state.buildings[-1]
        return _text(
            f"Building '{building.name}' (ID: {building.id}) created with "
            f"{building.apartments.total} apartments and {building.suites.total} suites."
        )

    async def _delete_building(self, arguments: Dict[str, Any]) -> List[TextContent]:
        building = self._require_building(arguments["building_id"])
        self.store.delete_building(building.id)
        return _text(f"Building '{building.name}' deleted.")

    async def _add_unit(self, arguments: Dict[str, Any]) -> List[TextContent]:
        building = self._require_building(arguments["building_id"])
        unit_type = UnitType(arguments["unit_type"])
        base_rent = arguments.get("base_rent")
        if base_rent is None:
            base_rent = self.store.state.bulk_rent_values.rent_for(unit_type)
        self.store.add_unit(
            building.id, unit_type, arguments["floor"], arguments["unit_number"], base_rent
        )
        return _text(f"Unit {arguments['unit_number']} added to building {building.id}.")

    async def _delete_unit(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"], arguments["building_id"])
        self.store.delete_unit(unit.building_id, unit.id)
        return _text(f"Unit {unit.id} deleted.")

    async def _log_claim(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"], arguments["building_id"])
        self.store.log_claim_action(unit.building_id, unit.id, arguments["action"])
        return _text(f"Claim logged for unit {unit.id}.")

    async def _send_claim(self, arguments: Dict[str, Any]) -> List[TextContent]:
        unit = self._require_unit(arguments["unit_id"])
        channel = arguments["channel"]
        label = channel_label(channel)
        summary = resolve_obligation(unit, self._today())
        text = claim_text(unit, summary.remaining, summary.due_date, self.settings)

        if channel == "whatsapp":
            output = whatsapp_url(
                str(arguments.get("phone", "")), text, self.settings.whatsapp_country_code
            )
        elif channel == "paper":
            output = render_print_html(f"مطالبة مالية - {unit.label}", text=text)
        else:
            output = text

        self.store.log_claim_action(unit.building_id, unit.id, label)
        return _text(f"{label} ({unit.label})\n\n{output}")

    async def _bulk_update_base_rents(self, arguments: Dict[str, Any]) -> List[TextContent]:
        self.store.update_all_base_rents(arguments["apartment_rent"], arguments["suite_rent"])
        return _text(
            f"Base rents updated: apartments {format_currency(arguments['apartment_rent'])}, "
            f"suites {format_currency(arguments['suite_rent'])}."
        )

    async def _bulk_update_payment_status(self, arguments: Dict[str, Any]) -> List[TextContent]:
        self.store.update_all_payment_statuses(arguments["scope"], arguments["payment_status"])
        return _text(
            f"Payment status of {arguments['scope']} units set to {arguments['payment_status']}."
        )

    async def _save_forecast(self, arguments: Dict[str, Any]) -> List[TextContent]:
        if arguments.get("forecasts") is not None:
            forecasts = _FORECASTS.validate_python(arguments["forecasts"])
        else:
            forecasts = default_forecast_inputs(self.store.state, int(arguments.get("years", 1)))
        self.store.save_forecast_inputs(forecasts)
        return _text(f"Saved forecast inputs for {len(forecasts)} year(s).")

    # ---------------------------------------------------------------- reports
    async def _generate_report(self, arguments: Dict[str, Any]) -> List[TextContent]:
        table = self._build_report(arguments["report"], arguments.get("params"))
        return _text(format_table(table))

    async def _export_report(self, arguments: Dict[str, Any]) -> List[TextContent]:
        names = list(arguments["reports"])
        tables = [self._build_report(name, arguments.get("params")) for name in names]
        path = export_workbook(
            tables,
            self.settings.export_dir,
            arguments.get("name") or names[0],
            self._today(),
        )
        return _text(f"Exported to {path}")

    async def _print_report(self, arguments: Dict[str, Any]) -> List[TextContent]:
        table = self._build_report(arguments["report"], arguments.get("params"))
        return _text(render_print_html(table.title, table=table))

    async def run(
        self,
        streams: Optional[Tuple[Any, Any]] = None,
        initialization_options: Optional[Any] = None,
        *,
        raise_exceptions: bool = False,
        stateless: bool = False,
    ) -> None:
        """Start the server on stdio (or on the given streams)."""
        from mcp.server.models import InitializationOptions  # pylint: disable=import-outside-toplevel
        from mcp.server.stdio import stdio_server  # pylint: disable=import-outside-toplevel

        logger.info("Student Housing MCP Server starting...")

        if initialization_options is None:
            try:
                version = importlib.metadata.version("student-housing-mcp")
            except importlib.metadata.PackageNotFoundError:  # pragma: no cover
                version = "0.0.0"
            initialization_options = InitializationOptions(
                server_name=self.server.name,
                server_version=version,
                capabilities=self.server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
                instructions=(
                    "Manages student housing buildings and units: occupancy, "
                    "payment plans, maintenance, dues claims and reports."
                ),
            )

        if streams is not None:
            read_stream, write_stream = streams
            await self.server.run(
                read_stream,
                write_stream,
                initialization_options,
                raise_exceptions=raise_exceptions,
                stateless=stateless,
            )
            return

        async with stdio_server() as (r, w):
            await self.server.run(
                r,
                w,
                initialization_options,
                raise_exceptions=raise_exceptions,
                stateless=stateless,
            )


async def main() -> None:
    """Entry point"""
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    server = StudentHousingMCPServer(settings)
    await server.run()


def cli() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
