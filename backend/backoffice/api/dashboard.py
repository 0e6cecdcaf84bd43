# backend/backoffice/api/dashboard.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from .deps import get_cache, get_storage
from .employees import EmployeeOut
from .projects import ProjectOut
from .schemas import CamelModel
from ..core.cache import QueryCache, make_key
from ..core.config import settings
from ..services.dashboard import build_dashboard
from ..storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

CACHE_NAMESPACE = "dashboard"


# ---------------------------
# Schemas
# ---------------------------
class DashboardMetrics(CamelModel):
    total_revenue: float
    total_expenses: float
    profit: float
    expense_ratio: str
    employee_count: int
    project_count: int
    active_project_count: int


class RevenuePoint(CamelModel):
    month: str
    year: int
    revenue: float
    expenses: float
    profit: float


class ExpenseSlice(CamelModel):
    name: str
    value: float


class PartnerDistribution(CamelModel):
    id: int
    name: str
    share: float
    amount: float
    source: str


class ProjectBonus(CamelModel):
    id: int
    name: str
    roi: int
    manager: str
    bonus: float


class DashboardOut(CamelModel):
    metrics: DashboardMetrics
    recent_projects: List[ProjectOut]
    revenue_chart_data: List[RevenuePoint]
    expense_breakdown: List[ExpenseSlice]
    partner_distributions: List[PartnerDistribution]
    project_bonuses: List[ProjectBonus]
    recent_employees: List[EmployeeOut]
    total_bonus_pool: float


# ---------------------------
# Endpoint
# ---------------------------
@router.get("", response_model=DashboardOut, summary="Dashboard summary, optionally for one month")
def get_dashboard(
    month: Optional[str] = Query(None, description="English month name, e.g. March"),
    year: Optional[str] = Query(None, description="Four-digit year; applied only together with month"),
    storage: Storage = Depends(get_storage),
    cache: QueryCache = Depends(get_cache),
):
    strict = settings.STRICT_NUMERIC
    key = make_key(CACHE_NAMESPACE, month, year, strict)

    cached = cache.get(key)
    if cached is not None:
        logger.debug("dashboard cache hit %s", key)
        return cached

    out = DashboardOut.model_validate(build_dashboard(storage, month, year, strict=strict))
    cache.set(key, out)
    return out
