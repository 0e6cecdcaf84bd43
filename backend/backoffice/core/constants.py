# backend/backoffice/core/constants.py
from decimal import Decimal
from typing import List

from .errors import ValidationError

MONTHS: List[str] = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

ACTIVE_PROJECT_STATUSES = {"Active", "In Progress"}

DEFAULT_EMPLOYEE_STATUS = "Active"
DEFAULT_SALARY_STATUS = "Pending"
UNCATEGORIZED = "Uncategorized"
UNASSIGNED = "Unassigned"

DASHBOARD_LIST_LIMIT = 3

# bonuses.percentage is Numeric(7, 2)
MAX_BONUS_PERCENT = Decimal("99999.99")


def quarter_months(quarter: int) -> List[str]:
    """Q1 -> January..March, ..., Q4 -> October..December."""
    if quarter not in (1, 2, 3, 4):
        raise ValidationError(f"quarter must be 1-4, got {quarter!r}")
    start = (quarter - 1) * 3
    return MONTHS[start:start + 3]
