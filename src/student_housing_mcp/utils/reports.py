"""Report projections.

Each report is a pure function of the state (and a reference date) returning
a ``ReportTable``. Amount columns hold plain numbers; formatting is left to
the exporters. When a table has a footer, each summed column equals the sum
of that column over the rows.
"""

from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from ..models.building_model import AppState, SemesterData, YearlyForecastInput
from ..models.unit_model import (
    MaintenanceType,
    PaymentStatus,
    Unit,
    UnitStatus,
    UnitType,
)
from .obligations import (
    CLAIMABLE_STATUSES,
    PLAN_TYPE_LABELS,
    needs_claim,
    plan_entries,
    resolve_obligation,
)

TOTAL_LABEL = "الإجمالي"
CURRENT_HIJRI_YEAR = 1447
MAX_FORECAST_YEARS = 20

UNIT_TYPE_LABELS = {UnitType.APARTMENT: "شقة", UnitType.SUITE: "جناح"}
STATUS_LABELS = {
    UnitStatus.RENTED: "مؤجرة",
    UnitStatus.AVAILABLE: "متاحة",
    UnitStatus.UNDER_MAINTENANCE: "تحت الصيانة",
    UnitStatus.OFFICE: "مكتب إداري",
}
PAYMENT_STATUS_LABELS = {
    PaymentStatus.PAID: "تم السداد",
    PaymentStatus.DEFERRED: "مؤجل",
    PaymentStatus.EXEMPT: "معفى",
    PaymentStatus.PAYMENT_PLAN: "خطة سداد",
    PaymentStatus.SCHOLARSHIP: "ابتعاث",
    PaymentStatus.PAID_IN_FULL: "مسدد بالكامل",
}
MAINTENANCE_TYPE_LABELS = {
    MaintenanceType.MAINTENANCE: "صيانة",
    MaintenanceType.FURNITURE: "أثاث",
    MaintenanceType.ELECTRICAL: "كهرباء",
    MaintenanceType.PAINTING: "دهانات",
    MaintenanceType.NONE: "أخرى",
}


class ReportTable(BaseModel):
    """Tabular report ready for export or printing."""

    title: str = Field(..., description="Report / sheet title")
    columns: List[str] = Field(..., description="Column headers")
    rows: List[List[Any]] = Field(default_factory=list)
    totals: Optional[List[Any]] = Field(None, description="Footer row")

    def column(self, name: str) -> List[Any]:
        """Values of one column."""
        index = self.columns.index(name)
        return [row[index] for row in self.rows]


def _footer(columns: Sequence[str], rows: List[List[Any]], summed: Iterable[str]) -> List[Any]:
    summed = set(summed)
    footer: List[Any] = []
    for index, name in enumerate(columns):
        if name in summed:
            footer.append(sum(row[index] or 0 for row in rows))
        else:
            footer.append(TOTAL_LABEL if index == 0 else "")
    return footer


def _iso(value: Optional[date]) -> str:
    return value.isoformat() if value else "-"


def _sorted_units(units: Iterable[Unit]) -> List[Unit]:
    return sorted(units, key=lambda u: (u.building_id, u.unit_number))


def _last_claim(unit: Unit) -> Any:
    return unit.claim_history[-1] if unit.claim_history else None


# ---------------------------------------------------------------- dues
def active_dues_report(
    state: AppState, today: Optional[date] = None, view: str = "overdue"
) -> ReportTable:
    """
    Units with open dues.

    Args:
        state: application state
        today: reference date
        view: ``overdue`` (late items, with claim counts) or ``upcoming``

    Returns:
        ReportTable: one row per unit, footer sums the remaining amounts
    """
    if view not in ("overdue", "upcoming"):
        raise ValueError(f"Unknown dues view: {view}")
    today = today or date.today()
    upcoming = view == "upcoming"
    time_column = "الأيام المتبقية" if upcoming else "مدة التأخير"
    columns = [
        "المبنى/الغرفة",
        "نوع الوحدة",
        "نوع الخطة",
        "عدد الأقساط",
        "المسدد منها",
        "موعد الاستحقاق",
        time_column,
        "قيمة الدفعة",
        "المبلغ المتبقي",
    ]
    if not upcoming:
        columns.append("عدد المطالبات")

    rows: List[List[Any]] = []
    for unit in _sorted_units(state.iter_units()):
        if unit.payment_status not in CLAIMABLE_STATUSES:
            continue
        summary = resolve_obligation(unit, today)
        items = summary.upcoming_items if upcoming else summary.overdue_items
        if not items:
            continue
        first = items[0]
        row = [
            unit.label,
            UNIT_TYPE_LABELS[unit.unit_type],
            summary.plan_label,
            summary.total_installments_count or "-",
            summary.paid_count or "-",
            _iso(first.due_date) if first.due_date else today.isoformat(),
            first.days_remaining if upcoming else first.days_late,
            first.amount,
            summary.remaining,
        ]
        if not upcoming:
            row.append(len(unit.claim_history))
        rows.append(row)

    title = "المستحقات القادمة" if upcoming else "المستحقات المتأخرة"
    return ReportTable(
        title=title, columns=columns, rows=rows, totals=_footer(columns, rows, ["المبلغ المتبقي"])
    )


# ---------------------------------------------------------------- claims
def claims_report(state: AppState, today: Optional[date] = None) -> ReportTable:
    """Units needing a claim: never-claimed first, then building / unit."""
    today = today or date.today()
    columns = [
        "المبنى/الغرفة",
        "نوع الوحدة",
        "حالة السداد",
        "تاريخ الاستحقاق",
        "المبلغ المتبقي",
        "آخر إجراء مطالبة",
        "تاريخه",
    ]
    units = [u for u in state.iter_units() if needs_claim(u, today)]
    units.sort(key=lambda u: (bool(u.claim_history), u.building_id, u.unit_number))
    rows = []
    for unit in units:
        summary = resolve_obligation(unit, today)
        last = _last_claim(unit)
        rows.append(
            [
                unit.label,
                UNIT_TYPE_LABELS[unit.unit_type],
                PAYMENT_STATUS_LABELS[unit.payment_status],
                _iso(summary.due_date),
                summary.remaining,
                last.action if last else "لا يوجد",
                last.date.strftime("%Y-%m-%d %H:%M") if last else "-",
            ]
        )
    return ReportTable(
        title="تقرير المطالبات المالية",
        columns=columns,
        rows=rows,
        totals=_footer(columns, rows, ["المبلغ المتبقي"]),
    )


def claim_history_report(state: AppState) -> ReportTable:
    """Archive of logged claims, one row per unit with claims."""
    columns = ["المبنى/الغرفة", "نوع الوحدة", "إجمالي عدد المطالبات الموثقة", "آخر إجراء"]
    rows = [
        [
            unit.label,
            UNIT_TYPE_LABELS[unit.unit_type],
            len(unit.claim_history),
            unit.claim_history[-1].action,
        ]
        for unit in _sorted_units(state.iter_units())
        if unit.claim_history
    ]
    return ReportTable(
        title="أرشيف المطالبات",
        columns=columns,
        rows=rows,
        totals=_footer(columns, rows, ["إجمالي عدد المطالبات الموثقة"]),
    )


# ---------------------------------------------------------------- plans
def _is_completed_plan(unit: Unit) -> bool:
    return unit.plan_archived or unit.payment_status in (
        PaymentStatus.PAID_IN_FULL,
        PaymentStatus.EXEMPT,
        PaymentStatus.SCHOLARSHIP,
    )


def payment_plans_report(
    state: AppState, today: Optional[date] = None, completed: bool = False
) -> ReportTable:
    """
    Active or completed payment plans.

    Active plans are ordered overdue first, then deferred units still
    waiting for a plan, then by building / unit.
    """
    today = today or date.today()
    columns = [
        "المبنى/الغرفة",
        "نوع الوحدة",
        "نوع الخطة",
        "حالة السداد",
        "المبلغ المسدد",
        "المبلغ المتبقي",
        "موعد الاستحقاق",
    ]
    selected: List[Unit] = []
    for unit in state.iter_units():
        if completed:
            if _is_completed_plan(unit) and (unit.payment_plan or unit.plan_archived):
                selected.append(unit)
        elif unit.payment_status in CLAIMABLE_STATUSES and not unit.plan_archived:
            selected.append(unit)

    summaries = {unit.id: resolve_obligation(unit, today) for unit in selected}
    if completed:
        selected = _sorted_units(selected)
    else:
        selected.sort(
            key=lambda u: (
                not summaries[u.id].is_overdue,
                not summaries[u.id].needs_plan,
                u.building_id,
                u.unit_number,
            )
        )

    rows = []
    for unit in selected:
        summary = summaries[unit.id]
        rows.append(
            [
                unit.label,
                UNIT_TYPE_LABELS[unit.unit_type],
                summary.plan_label,
                PAYMENT_STATUS_LABELS.get(unit.payment_status, "-"),
                summary.total_paid,
                summary.remaining,
                _iso(summary.due_date),
            ]
        )
    title = "خطط السداد المكتملة" if completed else "خطط السداد النشطة"
    return ReportTable(
        title=title,
        columns=columns,
        rows=rows,
        totals=_footer(columns, rows, ["المبلغ المسدد", "المبلغ المتبقي"]),
    )


def paid_installments_report(state: AppState) -> ReportTable:
    """Every paid installment or stipend deduction."""
    columns = ["المبنى/الغرفة", "نوع الخطة", "تاريخ الاستحقاق", "المبلغ"]
    rows = []
    for unit in _sorted_units(state.iter_units()):
        plan = unit.payment_plan
        for entry in plan_entries(plan):
            if entry.is_paid:
                rows.append([unit.label, PLAN_TYPE_LABELS[plan.type], _iso(entry.due_date), entry.amount])
    return ReportTable(
        title="الأقساط المسددة", columns=columns, rows=rows, totals=_footer(columns, rows, ["المبلغ"])
    )


# ---------------------------------------------------------------- revenue
def lost_revenue_breakdown(state: AppState) -> Dict[str, float]:
    """Lost revenue per cause."""
    breakdown = {
        "available": 0.0,
        "under_maintenance": 0.0,
        "office": 0.0,
        "remaining_dues": 0.0,
        "scholarship": 0.0,
        "exempt": 0.0,
        "maintenance_cost": 0.0,
    }
    for unit in state.iter_units():
        breakdown["maintenance_cost"] += sum(r.cost for r in unit.maintenance_history)
        if unit.status == UnitStatus.AVAILABLE:
            breakdown["available"] += unit.base_rent
        elif unit.status == UnitStatus.UNDER_MAINTENANCE:
            breakdown["under_maintenance"] += unit.base_rent
        elif unit.status == UnitStatus.OFFICE:
            breakdown["office"] += unit.base_rent
        elif unit.payment_status in CLAIMABLE_STATUSES:
            gap = unit.base_rent - (unit.actual_rent or 0)
            if gap > 0:
                breakdown["remaining_dues"] += gap
        elif unit.payment_status == PaymentStatus.SCHOLARSHIP:
            breakdown["scholarship"] += unit.base_rent
        elif unit.payment_status == PaymentStatus.EXEMPT:
            breakdown["exempt"] += unit.base_rent
    return breakdown


LOST_REVENUE_LABELS = {
    "available": "وحدات متاحة (غير مؤجرة)",
    "under_maintenance": "وحدات تحت الصيانة",
    "office": "مكاتب إدارية",
    "remaining_dues": "مستحقات متبقية (تأجيل / خطط سداد)",
    "scholarship": "ابتعاث",
    "exempt": "إعفاء",
    "maintenance_cost": "تكاليف الصيانة",
}


def lost_revenue_report(state: AppState) -> ReportTable:
    """Lost revenue broken down by cause."""
    columns = ["السبب", "المبلغ"]
    rows = [[LOST_REVENUE_LABELS[key], value] for key, value in lost_revenue_breakdown(state).items()]
    return ReportTable(
        title="الإيرادات المفقودة", columns=columns, rows=rows, totals=_footer(columns, rows, ["المبلغ"])
    )


def _building_figures(units: List[Unit]) -> Dict[str, float]:
    rented = [u for u in units if u.status == UnitStatus.RENTED]
    offices = sum(1 for u in units if u.status == UnitStatus.OFFICE)
    expected = sum(u.base_rent for u in units)
    actual = sum(u.actual_rent if u.actual_rent is not None else u.base_rent for u in rented)
    rentable = len(units) - offices
    return {
        "expected": expected,
        "actual": actual,
        "lost": expected - actual,
        "occupancy": round(100 * len(rented) / rentable, 1) if rentable else 0.0,
        "achievement": round(100 * actual / expected, 1) if expected else 0.0,
    }


def performance_indicators_report(state: AppState) -> ReportTable:
    """Expected / actual / lost revenue, occupancy and achievement per building."""
    columns = [
        "المبنى",
        "الإيراد المتوقع",
        "الإيراد الفعلي",
        "الإيراد المفقود",
        "نسبة الإشغال %",
        "نسبة تحقيق الإيراد %",
    ]
    rows = []
    for building in state.buildings:
        f = _building_figures(building.all_units())
        rows.append(
            [building.name, f["expected"], f["actual"], f["lost"], f["occupancy"], f["achievement"]]
        )
    totals = _footer(columns, rows, ["الإيراد المتوقع", "الإيراد الفعلي", "الإيراد المفقود"])
    overall = _building_figures(list(state.iter_units()))
    totals[4] = overall["occupancy"]
    totals[5] = overall["achievement"]
    return ReportTable(title="مؤشرات الأداء", columns=columns, rows=rows, totals=totals)


def quarterly_report(state: AppState) -> ReportTable:
    """Per-building expected, actual, deficit and rented counts."""
    columns = [
        "المبنى",
        "الإيراد المتوقع",
        "الإيراد الفعلي",
        "العجز",
        "شقق مؤجرة",
        "أجنحة مؤجرة",
        "إجمالي الوحدات",
    ]
    rows = []
    for building in state.buildings:
        units = building.all_units()
        f = _building_figures(units)
        rows.append(
            [
                building.name,
                f["expected"],
                f["actual"],
                f["lost"],
                sum(1 for u in building.apartments.units if u.status == UnitStatus.RENTED),
                sum(1 for u in building.suites.units if u.status == UnitStatus.RENTED),
                len(units),
            ]
        )
    return ReportTable(
        title="التقرير الفصلي",
        columns=columns,
        rows=rows,
        totals=_footer(columns, rows, columns[1:]),
    )


def revenue_flow_report(state: AppState) -> ReportTable:
    """Expected revenue (offices excluded), what was collected and where the rest went."""
    units = [u for u in state.iter_units() if u.status != UnitStatus.OFFICE]
    expected = sum(u.base_rent for u in units)
    actual = sum(u.actual_rent or 0 for u in units if u.status == UnitStatus.RENTED)
    losses: Dict[str, float] = {}
    for unit in units:
        if unit.status == UnitStatus.RENTED:
            gap = unit.base_rent - (unit.actual_rent or 0)
            if gap <= 0:
                continue
            key = PAYMENT_STATUS_LABELS.get(unit.payment_status, STATUS_LABELS[unit.status])
        else:
            gap = unit.base_rent
            key = STATUS_LABELS[unit.status]
        losses[key] = losses.get(key, 0) + gap

    columns = ["البند", "المبلغ"]
    rows = [["الإيراد المحصل", actual]]
    rows.extend([f"فاقد: {label}", amount] for label, amount in losses.items())
    totals = _footer(columns, rows, ["المبلغ"])
    totals[0] = f"الإيراد المتوقع ({expected:g})"
    return ReportTable(title="تدفق الإيرادات", columns=columns, rows=rows, totals=totals)


# ---------------------------------------------------------------- maintenance
def _timeliness(end: Optional[date], expected: Optional[date]) -> Optional[str]:
    if end is None or expected is None:
        return None
    if end < expected:
        return "early"
    if end > expected:
        return "delayed"
    return "on_time"


def maintenance_stats(state: AppState) -> Dict[str, Any]:
    """Aggregate figures over every archived maintenance record."""
    records = [r for u in state.iter_units() for r in u.maintenance_history]
    total_cost = sum(r.cost for r in records)
    reasons: Dict[str, int] = {}
    timing = {"on_time": 0, "early": 0, "delayed": 0}
    for record in records:
        label = MAINTENANCE_TYPE_LABELS[record.type]
        reasons[label] = reasons.get(label, 0) + 1
        outcome = _timeliness(record.end_date, record.expected_end_date)
        if outcome:
            timing[outcome] += 1
    return {
        "jobs": len(records),
        "total_cost": total_cost,
        "average_cost": total_cost / len(records) if records else 0,
        "reasons": reasons,
        **timing,
    }


def maintenance_performance_report(state: AppState) -> ReportTable:
    """Per-unit maintenance cost against collected rent, worst first."""
    columns = [
        "المبنى/الغرفة",
        "عدد الأعمال",
        "تكلفة الصيانة",
        "الإيراد الفعلي",
        "صافي الربح/الخسارة",
        "في الموعد",
        "مبكر",
        "متأخر",
    ]
    rows = []
    for unit in state.iter_units():
        if not unit.maintenance_history:
            continue
        cost = sum(r.cost for r in unit.maintenance_history)
        revenue = unit.actual_rent or 0
        outcomes = [_timeliness(r.end_date, r.expected_end_date) for r in unit.maintenance_history]
        rows.append(
            [
                unit.label,
                len(unit.maintenance_history),
                cost,
                revenue,
                revenue - cost,
                outcomes.count("on_time"),
                outcomes.count("early"),
                outcomes.count("delayed"),
            ]
        )
    rows.sort(key=lambda row: row[4])
    return ReportTable(
        title="أداء الصيانة",
        columns=columns,
        rows=rows,
        totals=_footer(columns, rows, columns[1:]),
    )


def maintenance_archive_report(state: AppState) -> ReportTable:
    """Every archived maintenance record, newest first."""
    columns = ["المبنى/الغرفة", "نوع الصيانة", "تاريخ البدء", "تاريخ الانتهاء", "الانتهاء المتوقع", "التكلفة"]
    entries = [(u, r) for u in state.iter_units() for r in u.maintenance_history]
    entries.sort(key=lambda pair: pair[1].end_date or date.min, reverse=True)
    rows = [
        [
            unit.label,
            MAINTENANCE_TYPE_LABELS[record.type],
            _iso(record.start_date),
            _iso(record.end_date),
            _iso(record.expected_end_date),
            record.cost,
        ]
        for unit, record in entries
    ]
    return ReportTable(
        title="أرشيف الصيانة", columns=columns, rows=rows, totals=_footer(columns, rows, ["التكلفة"])
    )


# ---------------------------------------------------------------- requests
def request_report(
    state: AppState, kind: str, value: Optional[str] = None, today: Optional[date] = None
) -> ReportTable:
    """
    Units filtered by occupancy status, payment status, or overdue dues.

    Args:
        state: application state
        kind: ``status``, ``payment_status`` or ``overdue``
        value: status / payment status to match (ignored for ``overdue``)
        today: reference date for the overdue filter

    Returns:
        ReportTable: matching units with kind-specific columns
    """
    today = today or date.today()
    units = _sorted_units(state.iter_units())
    head = ["المبنى/الغرفة", "نوع الوحدة"]

    if kind == "status":
        status = UnitStatus(value)
        units = [u for u in units if u.status == status]
        if status == UnitStatus.UNDER_MAINTENANCE:
            columns = head + ["نوع الصيانة", "تاريخ البدء", "الانتهاء المتوقع", "التكلفة"]
            rows = [
                [
                    u.label,
                    UNIT_TYPE_LABELS[u.unit_type],
                    MAINTENANCE_TYPE_LABELS[u.maintenance.vacancy_reason],
                    _iso(u.maintenance.start_date),
                    _iso(u.maintenance.expected_end_date),
                    u.maintenance.cost or 0,
                ]
                for u in units
            ]
            summed = ["التكلفة"]
        else:
            columns = head + ["حالة السداد", "تاريخ الإيجار", "الإيراد الفعلي"]
            rows = [
                [
                    u.label,
                    UNIT_TYPE_LABELS[u.unit_type],
                    PAYMENT_STATUS_LABELS.get(u.payment_status, "-"),
                    u.rent_date or "-",
                    u.actual_rent or 0,
                ]
                for u in units
            ]
            summed = ["الإيراد الفعلي"]
        title = f"تقرير الحالة: {STATUS_LABELS[status]}"
    elif kind == "payment_status":
        payment_status = PaymentStatus(value)
        units = [u for u in units if u.payment_status == payment_status]
        columns = head + ["حالة الغرفة", "حالة السداد", "الإيجار الأساسي", "الإيجار الفعلي"]
        rows = [
            [
                u.label,
                UNIT_TYPE_LABELS[u.unit_type],
                STATUS_LABELS[u.status],
                PAYMENT_STATUS_LABELS[payment_status],
                u.base_rent,
                u.actual_rent or 0,
            ]
            for u in units
        ]
        summed = ["الإيجار الأساسي", "الإيجار الفعلي"]
        title = f"تقرير حالة السداد: {PAYMENT_STATUS_LABELS[payment_status]}"
    elif kind == "overdue":
        columns = head + ["حالة السداد", "الإيجار الأساسي", "المبلغ المتبقي", "تاريخ الاستحقاق", "أيام التأخير"]
        rows = []
        for u in units:
            summary = resolve_obligation(u, today)
            if not summary.is_overdue:
                continue
            rows.append(
                [
                    u.label,
                    UNIT_TYPE_LABELS[u.unit_type],
                    PAYMENT_STATUS_LABELS.get(u.payment_status, "-"),
                    u.base_rent,
                    summary.remaining,
                    _iso(summary.due_date),
                    summary.days_late,
                ]
            )
        summed = ["الإيجار الأساسي", "المبلغ المتبقي"]
        title = "تقرير المتأخرات"
    else:
        raise ValueError(f"Unknown request report kind: {kind}")

    return ReportTable(title=title, columns=columns, rows=rows, totals=_footer(columns, rows, summed))


# ---------------------------------------------------------------- forecast
def default_forecast_inputs(
    state: AppState, years: int = 1, start_year: int = CURRENT_HIJRI_YEAR
) -> List[YearlyForecastInput]:
    """
    Forecast inputs seeded from the current tree.

    Rents are the average base rent per unit type and rented counts are the
    current ones; expenses start at zero.
    """
    if years < 1 or years > MAX_FORECAST_YEARS:
        raise ValueError(f"years must be between 1 and {MAX_FORECAST_YEARS}")
    apartments = [u for b in state.buildings for u in b.apartments.units]
    suites = [u for b in state.buildings for u in b.suites.units]

    def average(units: List[Unit]) -> float:
        return round(sum(u.base_rent for u in units) / len(units)) if units else 0

    semester = SemesterData(
        apartment_rent=average(apartments),
        rented_apartments=sum(1 for u in apartments if u.status == UnitStatus.RENTED),
        suite_rent=average(suites),
        rented_suites=sum(1 for u in suites if u.status == UnitStatus.RENTED),
    )
    return [
        YearlyForecastInput(year=start_year + offset, semesters=(semester, semester))
        for offset in range(years)
    ]


def clamp_forecast_inputs(
    state: AppState, forecasts: List[YearlyForecastInput]
) -> List[YearlyForecastInput]:
    """Cap rented counts at the number of existing units."""
    max_apartments = sum(len(b.apartments.units) for b in state.buildings)
    max_suites = sum(len(b.suites.units) for b in state.buildings)

    def clamp(semester: SemesterData) -> SemesterData:
        return semester.model_copy(
            update={
                "rented_apartments": min(semester.rented_apartments, max_apartments),
                "rented_suites": min(semester.rented_suites, max_suites),
            }
        )

    return [
        f.model_copy(update={"semesters": tuple(clamp(s) for s in f.semesters)})
        for f in forecasts
    ]


def semester_revenue(semester: SemesterData) -> float:
    """Revenue of one forecast semester."""
    return (
        semester.rented_apartments * semester.apartment_rent
        + semester.rented_suites * semester.suite_rent
    )


def forecast_report(
    state: AppState, forecasts: Optional[List[YearlyForecastInput]] = None
) -> ReportTable:
    """Per-year revenue, expenses and net, with grand totals."""
    if forecasts is None:
        forecasts = state.forecast_inputs or default_forecast_inputs(state)
    forecasts = clamp_forecast_inputs(state, forecasts)
    columns = ["السنة", "إيراد الفصل الأول", "إيراد الفصل الثاني", "إجمالي الإيرادات", "المصروفات", "صافي الدخل"]
    rows = []
    for forecast in forecasts:
        first, second = (semester_revenue(s) for s in forecast.semesters)
        expenses = sum(s.expenses for s in forecast.semesters)
        rows.append([f"{forecast.year}هـ", first, second, first + second, expenses, first + second - expenses])
    return ReportTable(
        title="التوقعات المالية",
        columns=columns,
        rows=rows,
        totals=_footer(columns, rows, columns[1:]),
    )


REPORTS: Dict[str, Callable[..., ReportTable]] = {
    "active_dues": active_dues_report,
    "claims": claims_report,
    "claim_history": claim_history_report,
    "payment_plans": payment_plans_report,
    "paid_installments": paid_installments_report,
    "lost_revenue": lost_revenue_report,
    "performance_indicators": performance_indicators_report,
    "quarterly": quarterly_report,
    "revenue_flow": revenue_flow_report,
    "maintenance_performance": maintenance_performance_report,
    "maintenance_archive": maintenance_archive_report,
    "request": request_report,
    "forecast": forecast_report,
}

# reports whose output depends on the reference date
DATED_REPORTS = ("active_dues", "claims", "payment_plans", "request")
