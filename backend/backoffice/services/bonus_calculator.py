# backend/backoffice/services/bonus_calculator.py
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ..core.constants import MAX_BONUS_PERCENT, quarter_months
from ..core.errors import ValidationError
from ..core.numbers import parse_number, quantize_money, to_decimal, to_int

logger = logging.getLogger(__name__)

PENDING = "Pending"


def parse_pair_key(key: Any) -> Optional[Tuple[int, int]]:
    """'7-1' -> (employee_id=7, project_id=1); None when malformed."""
    if not isinstance(key, str):
        return None
    parts = key.split("-")
    if len(parts) != 2:
        return None
    employee_id, project_id = to_int(parts[0]), to_int(parts[1])
    if employee_id is None or project_id is None:
        return None
    return employee_id, project_id


def _parse_percent(value: Any) -> Optional[Decimal]:
    """Positive percent rounded to the stored two decimals; None otherwise."""
    if parse_number(value) is None:
        return None
    p = quantize_money(to_decimal(value))
    return p if p > 0 else None


def _restrict(ids: Optional[Iterable[int]]) -> Optional[Set[int]]:
    if not ids:
        return None
    return {int(i) for i in ids}


class QuarterlyBonusCalculator:
    """
    Turns a sparse employee/project percentage map into Bonus rows for one quarter.

    Each project's base is the sum of its billings in the three quarter months
    of ``year``; a pair's bonus is ``base * percent / 100`` rounded half-up to
    cents and booked on the last month of the quarter.
    """

    def __init__(self, storage):
        self.storage = storage

    def project_totals(self, months: List[str], year: int) -> Dict[int, Decimal]:
        totals: Dict[int, Decimal] = {}
        for b in self.storage.list_billings():
            if b.month not in months or to_int(b.year) != year:
                continue
            totals[b.project_id] = totals.get(b.project_id, Decimal("0")) + to_decimal(b.amount)
        return totals

    def plan(
        self,
        quarter: int,
        year: int,
        percentages: Mapping[str, Any],
        project_ids: Optional[Iterable[int]] = None,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Tuple[List[Dict[str, Any]], List[Dict[str, str]]]:
        """Compute rows to insert and the entries that were skipped (with reasons)."""
        months = quarter_months(quarter)
        bonus_month = months[-1]

        only_projects = _restrict(project_ids)
        only_employees = _restrict(employee_ids)

        totals = self.project_totals(months, year)

        rows: List[Dict[str, Any]] = []
        skipped: List[Dict[str, str]] = []

        def skip(key: Any, reason: str) -> None:
            logger.info("quarterly bonus Q%s %s: skipping %r (%s)", quarter, year, key, reason)
            skipped.append({"key": str(key), "reason": reason})

        for key, raw_percent in (percentages or {}).items():
            percent = _parse_percent(raw_percent)
            if percent is None:
                skip(key, "percentage missing or not positive")
                continue
            if percent > MAX_BONUS_PERCENT:
                skip(key, "percentage too large")
                continue

            pair = parse_pair_key(key)
            if pair is None:
                skip(key, "malformed key")
                continue
            employee_id, project_id = pair

            if only_employees is not None and employee_id not in only_employees:
                skip(key, "employee not selected")
                continue
            if only_projects is not None and project_id not in only_projects:
                skip(key, "project not selected")
                continue

            base = totals.get(project_id)
            if base is None or base <= 0:
                skip(key, "no billing for project in quarter")
                continue

            amount = quantize_money(base * percent / Decimal("100"))
            if amount <= 0:
                skip(key, "computed amount rounds to zero")
                continue

            rows.append(
                {
                    "project_id": project_id,
                    "employee_id": employee_id,
                    "month": bonus_month,
                    "year": year,
                    "amount": amount,
                    "percentage": percent,
                    "status": PENDING,
                }
            )

        return rows, skipped

    def calculate(
        self,
        quarter: int,
        year: int,
        percentages: Mapping[str, Any],
        project_ids: Optional[Iterable[int]] = None,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Dict[str, Any]:
        if to_int(year) is None:
            raise ValidationError(f"year must be an integer, got {year!r}")
        rows, skipped = self.plan(quarter, int(year), percentages, project_ids, employee_ids)
        bonuses = self.storage.create_bonuses(rows)
        logger.info(
            "quarterly bonus Q%s %s: created %d, skipped %d", quarter, year, len(bonuses), len(skipped)
        )
        return {
            "message": f"Successfully calculated quarterly bonuses for {len(bonuses)} employees.",
            "bonuses": bonuses,
            "skipped": skipped,
        }
