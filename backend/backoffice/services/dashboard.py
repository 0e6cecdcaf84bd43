# backend/backoffice/services/dashboard.py
"""
Dashboard aggregation.

``prepare_dashboard_data`` is a pure function over already-fetched entity
collections. ``build_dashboard`` is the period-filtering wrapper used by the
HTTP layer: it reads everything through ``Storage``, narrows the period-scoped
facts (billings, expenses, bonuses, profit distributions) to one month/year
when both are given, and never lets an unexpected error escape in lenient mode.
"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.constants import (
    ACTIVE_PROJECT_STATUSES,
    DASHBOARD_LIST_LIMIT,
    UNASSIGNED,
    UNCATEGORIZED,
)
from ..core.errors import ValidationError
from ..core.numbers import round2, round_half_up, to_float, to_int
from ..storage import Storage

logger = logging.getLogger(__name__)

Period = Tuple[str, int]


# ---------------------------
# Record helpers
# ---------------------------
def _field(rec: Any, name: str, default: Any = None) -> Any:
    """Read a field from an ORM row or a plain mapping."""
    if rec is None:
        return default
    if isinstance(rec, Mapping):
        return rec.get(name, default)
    return getattr(rec, name, default)


def _as_list(items: Any) -> list:
    if isinstance(items, (list, tuple)):
        return [r for r in items if r is not None]
    if items is not None:
        logger.warning("expected a list of records, got %s; treating as empty", type(items).__name__)
    return []


def _sum_amounts(rows: Iterable[Any], *, strict: bool, field: str = "amount") -> float:
    total = 0.0
    for r in rows:
        total += to_float(_field(r, field), strict=strict, field=field)
    return total


def _in_period(rec: Any, month: str, year: int) -> bool:
    return _field(rec, "month") == month and to_int(_field(rec, "year")) == year


def _is_active(project: Any) -> bool:
    return _field(project, "status") == "Active"


# ---------------------------
# Metrics
# ---------------------------
def calculate_total_revenue(billings: Sequence[Any], *, strict: bool = False) -> float:
    """Sum of billing amounts; callers pre-filter to the period they want."""
    rows = _as_list(billings)
    total = _sum_amounts(rows, strict=strict)
    logger.debug("revenue: %d billing row(s) -> %.2f", len(rows), total)
    return total


def calculate_total_expenses(expenses: Sequence[Any], *, strict: bool = False) -> float:
    rows = _as_list(expenses)
    total = _sum_amounts(rows, strict=strict)
    logger.debug("expenses: %d row(s) -> %.2f", len(rows), total)
    return total


def expense_ratio(total_revenue: float, total_expenses: float) -> str:
    if total_revenue <= 0:
        return "0.00"
    return f"{total_expenses / total_revenue * 100:.2f}"


def expense_breakdown(expenses: Sequence[Any], *, strict: bool = False) -> List[Dict[str, Any]]:
    """Group by category in first-seen order; blank category -> Uncategorized."""
    groups: Dict[str, float] = {}
    for e in _as_list(expenses):
        category = _field(e, "category") or UNCATEGORIZED
        if isinstance(category, str) and not category.strip():
            category = UNCATEGORIZED
        groups[category] = groups.get(category, 0.0) + to_float(_field(e, "amount"), strict=strict)
    return [{"name": name, "value": value} for name, value in groups.items()]


def revenue_chart_data(
    billings: Sequence[Any],
    expenses: Sequence[Any],
    *,
    strict: bool = False,
) -> List[Dict[str, Any]]:
    """
    One point per distinct "{month} {year}" seen in billings, in first-seen order.
    Not chronological; sort on the client if needed.
    """
    billings = _as_list(billings)
    expenses = _as_list(expenses)

    periods: Dict[Period, None] = {}
    for b in billings:
        month = _field(b, "month")
        year = to_int(_field(b, "year"))
        if month and year:
            periods.setdefault((month, year), None)

    out: List[Dict[str, Any]] = []
    for month, year in periods:
        revenue = _sum_amounts((b for b in billings if _in_period(b, month, year)), strict=strict)
        spent = _sum_amounts((e for e in expenses if _in_period(e, month, year)), strict=strict)
        out.append(
            {
                "month": month,
                "year": year,
                "revenue": revenue,
                "expenses": spent,
                "profit": revenue - spent,
            }
        )
    return out


def partner_distributions(
    partners: Sequence[Any],
    profit_distributions: Sequence[Any],
    profit: float,
    *,
    period: Optional[Period] = None,
    strict: bool = False,
) -> List[Dict[str, Any]]:
    """
    Each partner's cut of profit.

    A recorded ProfitDistribution for (partner, period) wins over the live
    ``profit * share / 100`` figure; without a period everything is live.
    """
    recorded: Dict[Any, Any] = {}
    if period is not None:
        month, year = period
        for pd in _as_list(profit_distributions):
            if _in_period(pd, month, year):
                recorded.setdefault(_field(pd, "partner_id"), pd)

    out: List[Dict[str, Any]] = []
    for p in _as_list(partners):
        share = to_float(_field(p, "share"), strict=strict, field="share")
        pd = recorded.get(_field(p, "id"))
        if pd is not None:
            amount = round2(to_float(_field(pd, "amount"), strict=strict))
            source = "recorded"
        else:
            amount = round2(profit * (share / 100))
            source = "live"
        out.append(
            {
                "id": _field(p, "id"),
                "name": _field(p, "name"),
                "share": share,
                "amount": amount,
                "source": source,
            }
        )
    return out


def project_bonuses(
    projects: Sequence[Any],
    employees: Sequence[Any],
    bonuses: Sequence[Any],
    *,
    strict: bool = False,
) -> List[Dict[str, Any]]:
    employees_by_id = {_field(e, "id"): e for e in _as_list(employees)}
    bonuses = _as_list(bonuses)

    out: List[Dict[str, Any]] = []
    for project in [p for p in _as_list(projects) if _is_active(p)][:DASHBOARD_LIST_LIMIT]:
        pid = _field(project, "id")
        total_bonus = _sum_amounts((b for b in bonuses if _field(b, "project_id") == pid), strict=strict)
        value = to_float(_field(project, "value"), strict=strict, field="value")
        roi = round_half_up(total_bonus / value * 100) if value > 0 else 0

        manager = employees_by_id.get(_field(project, "manager_id"))
        manager_name = (
            f"{_field(manager, 'first_name', '')} {_field(manager, 'last_name', '')}".strip()
            if manager is not None
            else UNASSIGNED
        )
        out.append(
            {
                "id": pid,
                "name": _field(project, "name"),
                "roi": roi,
                "manager": manager_name or UNASSIGNED,
                "bonus": total_bonus,
            }
        )
    return out


# ---------------------------
# Aggregator
# ---------------------------
def prepare_dashboard_data(
    employees: Sequence[Any],
    projects: Sequence[Any],
    billings: Sequence[Any],
    expenses: Sequence[Any],
    partners: Sequence[Any],
    profit_distributions: Sequence[Any],
    bonuses: Sequence[Any],
    *,
    period: Optional[Period] = None,
    strict: bool = False,
) -> Dict[str, Any]:
    employees = _as_list(employees)
    projects = _as_list(projects)
    billings = _as_list(billings)
    expenses = _as_list(expenses)
    partners = _as_list(partners)
    profit_distributions = _as_list(profit_distributions)
    bonuses = _as_list(bonuses)

    logger.debug(
        "dashboard inputs: employees=%d projects=%d billings=%d expenses=%d bonuses=%d",
        len(employees), len(projects), len(billings), len(expenses), len(bonuses),
    )

    total_revenue = calculate_total_revenue(billings, strict=strict)
    total_expenses = calculate_total_expenses(expenses, strict=strict)
    profit = total_revenue - total_expenses

    active_projects = [p for p in projects if _field(p, "status") in ACTIVE_PROJECT_STATUSES]
    total_bonus_pool = _sum_amounts(bonuses, strict=strict)

    metrics = {
        "total_revenue": total_revenue,
        "total_expenses": total_expenses,
        "profit": profit,
        "expense_ratio": expense_ratio(total_revenue, total_expenses),
        "employee_count": len(employees),
        "project_count": len(projects),
        "active_project_count": len(active_projects),
    }
    logger.info("dashboard metrics: %s bonus_pool=%.2f", metrics, total_bonus_pool)

    return {
        "metrics": metrics,
        "recent_projects": [p for p in projects if _is_active(p)][:DASHBOARD_LIST_LIMIT],
        "revenue_chart_data": revenue_chart_data(billings, expenses, strict=strict),
        "expense_breakdown": expense_breakdown(expenses, strict=strict),
        "partner_distributions": partner_distributions(
            partners, profit_distributions, profit, period=period, strict=strict
        ),
        "project_bonuses": project_bonuses(projects, employees, bonuses, strict=strict),
        "recent_employees": employees[:DASHBOARD_LIST_LIMIT],
        "total_bonus_pool": total_bonus_pool,
    }


def empty_dashboard() -> Dict[str, Any]:
    return prepare_dashboard_data([], [], [], [], [], [], [])


# ---------------------------
# Period filter wrapper
# ---------------------------
def resolve_period(month: Optional[str], year: Any) -> Optional[Period]:
    """Both parts present -> (month, int year); anything else -> no filter."""
    if not month or year is None or year == "":
        return None
    y = to_int(year)
    if y is None:
        raise ValidationError(f"year must be an integer, got {year!r}")
    return month, y


def build_dashboard(
    storage: Storage,
    month: Optional[str] = None,
    year: Any = None,
    *,
    strict: bool = False,
) -> Dict[str, Any]:
    period = resolve_period(month, year)
    try:
        employees = storage.list_employees()
        projects = storage.list_projects()
        partners = storage.list_partners()
        bonuses = storage.list_bonuses()
        profit_distributions = storage.list_profit_distributions()
        expenses = storage.list_expenses()
        billings = storage.list_billings()

        if period is not None:
            m, y = period
            billings = [b for b in billings if _in_period(b, m, y)]
            expenses = [e for e in expenses if _in_period(e, m, y)]
            bonuses = [b for b in bonuses if _in_period(b, m, y)]
            profit_distributions = [p for p in profit_distributions if _in_period(p, m, y)]
            logger.debug(
                "dashboard filtered to %s %s: billings=%d expenses=%d bonuses=%d distributions=%d",
                m, y, len(billings), len(expenses), len(bonuses), len(profit_distributions),
            )

        return prepare_dashboard_data(
            employees,
            projects,
            billings,
            expenses,
            partners,
            profit_distributions,
            bonuses,
            period=period,
            strict=strict,
        )
    except ValidationError:
        if strict:
            raise
        logger.exception("dashboard validation failed in lenient mode; serving empty payload")
        return empty_dashboard()
    except Exception:
        logger.exception("dashboard aggregation failed; serving empty payload")
        return empty_dashboard()
