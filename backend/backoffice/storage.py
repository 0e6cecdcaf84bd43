# backend/backoffice/storage.py
"""
Read accessors over the entity tables plus the bulk writes the services need.

Routers doing plain CRUD query the session directly; the dashboard and the
quarterly bonus calculator go through ``Storage`` so they can be exercised
against an in-memory fake in tests.
"""
import logging
from typing import Dict, List, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import (
    Billing,
    Bonus,
    Employee,
    Expense,
    Partner,
    ProfitDistribution,
    Project,
)

logger = logging.getLogger(__name__)


class Storage:
    def __init__(self, db: Session):
        self.db = db

    # ---------------------------
    # Reads (insertion order = id order)
    # ---------------------------
    def _all(self, model) -> list:
        return list(self.db.execute(select(model).order_by(model.id.asc())).scalars().all())

    def list_employees(self) -> List[Employee]:
        return self._all(Employee)

    def list_projects(self) -> List[Project]:
        return self._all(Project)

    def list_billings(self) -> List[Billing]:
        return self._all(Billing)

    def list_expenses(self) -> List[Expense]:
        return self._all(Expense)

    def list_partners(self) -> List[Partner]:
        return self._all(Partner)

    def list_profit_distributions(self) -> List[ProfitDistribution]:
        return self._all(ProfitDistribution)

    def list_bonuses(self) -> List[Bonus]:
        return self._all(Bonus)

    # ---------------------------
    # Writes
    # ---------------------------
    def create_bonuses(self, rows: Sequence[Dict]) -> List[Bonus]:
        """Insert all rows in one unit of work: either every bonus lands or none."""
        bonuses = [Bonus(**row) for row in rows]
        if not bonuses:
            return []
        try:
            self.db.add_all(bonuses)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("bulk bonus insert failed, rolled back %d row(s)", len(bonuses))
            raise
        for b in bonuses:
            self.db.refresh(b)
        return bonuses
