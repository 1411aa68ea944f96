"""Payment obligation resolver.

Every screen that shows dues (claims, payment plans, dashboards, reports)
goes through ``resolve_obligation`` instead of redoing the arithmetic.
"""

import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ..models.obligation_model import DueItem, ObligationSummary
from ..models.unit_model import (
    PaymentInstallment,
    PaymentPlan,
    PaymentStatus,
    PlanType,
    Unit,
    UnitStatus,
)

PLAN_TYPE_LABELS = {
    PlanType.DEFERRED: "تأجيل",
    PlanType.INSTALLMENT: "تقسيط",
    PlanType.EXEMPT: "إعفاء",
    PlanType.STIPEND: "خصم من المكافأة",
    PlanType.SCHOLARSHIP: "ابتعاث",
}
NO_PLAN_LABEL = "لا يوجد خطة"
PAID_IN_FULL_LABEL = "مسدد بالكامل"
UNSPECIFIED_LABEL = "غير محدد"

# the plan form caps generated installments at 10
MAX_SPLIT_COUNT = 10

ENTRY_PLAN_TYPES = (PlanType.INSTALLMENT, PlanType.STIPEND)
ZERO_RENT_PLAN_TYPES = (PlanType.EXEMPT, PlanType.SCHOLARSHIP)
CLAIMABLE_STATUSES = (PaymentStatus.DEFERRED, PaymentStatus.PAYMENT_PLAN)


def plan_entries(plan: Optional[PaymentPlan]) -> List[PaymentInstallment]:
    """Installments (or stipend deductions) relevant to the plan type."""
    if plan is None:
        return []
    if plan.type == PlanType.INSTALLMENT:
        return list(plan.installments or [])
    if plan.type == PlanType.STIPEND:
        return list(plan.stipend_deductions or [])
    return []


def total_paid(entries: List[PaymentInstallment]) -> float:
    """Sum of paid entries."""
    return sum(entry.amount for entry in entries if entry.is_paid)


def _due_item(due_date: Optional[date], amount: float, today: date) -> DueItem:
    if due_date is None:
        return DueItem(due_date=None, amount=amount)
    delta = (due_date - today).days
    if delta < 0:
        return DueItem(due_date=due_date, amount=amount, days_late=-delta)
    return DueItem(due_date=due_date, amount=amount, days_remaining=delta)


def _sort_key(item: DueItem) -> date:
    # undated entries go last
    return item.due_date or date.max


def _resolve_entries(
    unit: Unit, plan: PaymentPlan, today: date
) -> ObligationSummary:
    entries = plan_entries(plan)
    paid = total_paid(entries)
    unpaid = [e for e in entries if not e.is_paid]
    items = sorted((_due_item(e.due_date, e.amount, today) for e in unpaid), key=_sort_key)
    overdue = [i for i in items if i.due_date is not None and i.due_date < today]
    upcoming = [i for i in items if i.due_date is not None and i.due_date >= today]
    due_dates = [i.due_date for i in items if i.due_date is not None]
    return ObligationSummary(
        remaining=unit.base_rent - paid,
        total_paid=paid,
        total_rent=unit.base_rent,
        plan_label=PLAN_TYPE_LABELS[plan.type],
        due_date=due_dates[0] if due_dates else None,
        due_dates=due_dates,
        overdue_items=overdue,
        upcoming_items=upcoming,
        is_overdue=bool(overdue),
        paid_count=len(entries) - len(unpaid),
        unpaid_count=len(unpaid),
        total_installments_count=len(entries),
    )


def _resolve_deferred(unit: Unit, plan: PaymentPlan, today: date) -> ObligationSummary:
    summary = ObligationSummary(
        remaining=unit.base_rent,
        total_rent=unit.base_rent,
        plan_label=PLAN_TYPE_LABELS[plan.type],
    )
    if plan.deferred_until is None:
        return summary
    item = _due_item(plan.deferred_until, unit.base_rent, today)
    summary.due_date = plan.deferred_until
    summary.due_dates = [plan.deferred_until]
    if plan.deferred_until < today:
        summary.overdue_items = [item]
        summary.is_overdue = True
    else:
        summary.upcoming_items = [item]
    return summary


def resolve_obligation(unit: Unit, today: Optional[date] = None) -> ObligationSummary:
    """
    Resolve what a unit still owes.

    Args:
        unit: unit to inspect (only rent and payment fields are read)
        today: reference date, defaults to the system date

    Returns:
        ObligationSummary: remaining balance, due dates, overdue flag and counts
    """
    today = today or date.today()
    plan = unit.payment_plan
    base_rent = unit.base_rent

    if unit.payment_status == PaymentStatus.PAID_IN_FULL:
        count = len(plan_entries(plan))
        return ObligationSummary(
            remaining=0,
            total_paid=base_rent,
            total_rent=base_rent,
            plan_label=PLAN_TYPE_LABELS[plan.type] if plan else PAID_IN_FULL_LABEL,
            paid_count=count,
            total_installments_count=count,
        )

    if plan is None:
        if unit.payment_status == PaymentStatus.DEFERRED:
            # a deferral without a plan is due immediately
            return ObligationSummary(
                remaining=base_rent,
                total_rent=base_rent,
                plan_label=NO_PLAN_LABEL,
                overdue_items=[DueItem(due_date=None, amount=base_rent)],
                is_overdue=True,
                needs_plan=True,
                unpaid_count=1,
                total_installments_count=1,
            )
        return ObligationSummary(
            remaining=0,
            total_paid=base_rent if unit.payment_status == PaymentStatus.PAID else 0,
            total_rent=base_rent,
            plan_label=UNSPECIFIED_LABEL,
        )

    if plan.type in ENTRY_PLAN_TYPES:
        return _resolve_entries(unit, plan, today)
    if plan.type == PlanType.DEFERRED:
        return _resolve_deferred(unit, plan, today)
    return ObligationSummary(
        remaining=0, total_rent=base_rent, plan_label=PLAN_TYPE_LABELS[plan.type]
    )


def is_overdue(unit: Unit, today: Optional[date] = None) -> bool:
    """True if any unpaid due date is strictly before ``today``."""
    return resolve_obligation(unit, today).is_overdue


def needs_claim(unit: Unit, today: Optional[date] = None) -> bool:
    """Rented unit on deferral or a plan whose dues have fallen due."""
    if unit.status != UnitStatus.RENTED:
        return False
    if unit.payment_status not in CLAIMABLE_STATUSES:
        return False
    return is_overdue(unit, today)


def derive_actual_rent(unit: Unit) -> float:
    """Collected rent implied by status, payment status and plan."""
    if unit.status != UnitStatus.RENTED:
        return 0
    if unit.payment_status in (None, PaymentStatus.PAID, PaymentStatus.PAID_IN_FULL):
        return unit.base_rent
    if unit.payment_status == PaymentStatus.PAYMENT_PLAN:
        return total_paid(plan_entries(unit.payment_plan))
    return 0


def derive_payment_fields(
    unit: Unit, plan: Optional[PaymentPlan], now: datetime
) -> Dict[str, Any]:
    """
    Field updates implied by setting (or clearing) a payment plan.

    Args:
        unit: unit the plan belongs to
        plan: new plan, or None to clear it and mark the unit paid
        now: timestamp used as ``completed_date`` when the plan is fully paid

    Returns:
        Dict[str, Any]: ``payment_plan``, ``payment_status``, ``actual_rent``
        and ``plan_archived`` values to merge into the unit
    """
    rented = unit.status == UnitStatus.RENTED
    if plan is None:
        return {
            "payment_plan": None,
            "payment_status": PaymentStatus.PAID,
            "actual_rent": unit.base_rent if rented else 0,
        }

    plan = plan.model_copy(update={"completed_date": None})
    entries = plan_entries(plan)
    updates: Dict[str, Any] = {"plan_archived": False}

    if plan.type in ENTRY_PLAN_TYPES and entries and all(e.is_paid for e in entries):
        plan = plan.model_copy(update={"completed_date": now})
        updates["payment_status"] = PaymentStatus.PAID_IN_FULL
        updates["actual_rent"] = unit.base_rent if rented else 0
    elif plan.type in ZERO_RENT_PLAN_TYPES:
        updates["payment_status"] = PaymentStatus(plan.type.value)
        updates["actual_rent"] = 0
    elif plan.type in ENTRY_PLAN_TYPES:
        updates["payment_status"] = PaymentStatus.PAYMENT_PLAN
        updates["actual_rent"] = total_paid(entries) if rented else 0
    else:
        updates["payment_status"] = PaymentStatus.DEFERRED
        updates["actual_rent"] = 0

    updates["payment_plan"] = plan
    return updates


def split_installments(total: float, count: int) -> List[float]:
    """
    Split ``total`` into ``count`` equal whole amounts.

    The remainder is added to the first entry, matching the plan form.

    Args:
        total: amount to split (usually the unit's base rent)
        count: number of entries, 1..MAX_SPLIT_COUNT

    Returns:
        List[float]: amounts summing to ``total``
    """
    if count <= 0 or count > MAX_SPLIT_COUNT:
        raise ValueError(f"count must be between 1 and {MAX_SPLIT_COUNT}")
    per_entry = math.floor(total / count)
    remainder = total - per_entry * count
    return [per_entry + (remainder if i == 0 else 0) for i in range(count)]


def validate_plan_inputs(plan: PaymentPlan) -> Dict[str, str]:
    """
    Validate a plan submitted by a user.

    Args:
        plan: plan to check

    Returns:
        Dict[str, str]: field -> message (empty when the plan is acceptable)
    """
    errors: Dict[str, str] = {}
    if plan.type == PlanType.DEFERRED and plan.deferred_until is None:
        errors["deferred_until"] = "A deferral date is required for deferred plans"
    if plan.type == PlanType.INSTALLMENT and not plan.installments:
        errors["installments"] = "At least one installment is required"
    if plan.type == PlanType.STIPEND and not plan.stipend_deductions:
        errors["stipend_deductions"] = "At least one stipend deduction is required"
    if plan.installments and plan.stipend_deductions:
        errors["plan"] = "Installments and stipend deductions are mutually exclusive"
    for entry in plan_entries(plan):
        if entry.due_date is None:
            errors["due_date"] = "Every installment needs a due date"
            break
    return errors
