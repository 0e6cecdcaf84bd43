# backend/backoffice/api/bonuses.py
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field, PlainSerializer
from sqlalchemy.orm import Session

from .deps import get_db, get_storage
from .schemas import CamelModel, Money, MonthName, Percent, Year
from ..core.constants import MAX_BONUS_PERCENT
from ..core.numbers import format_percent
from ..models import Bonus
from ..services.bonus_calculator import QuarterlyBonusCalculator
from ..storage import Storage

router = APIRouter(prefix="/api/bonuses", tags=["bonuses"])

BonusStatus = Literal["Pending", "Approved", "Paid", "Rejected", "Finalized"]
# fits bonuses.percentage
BonusPercent = Annotated[
    Decimal,
    Field(ge=0, le=MAX_BONUS_PERCENT, decimal_places=2),
    PlainSerializer(format_percent, return_type=str),
]


# ---------------------------
# Schemas
# ---------------------------
class BonusCreate(CamelModel):
    project_id: int
    employee_id: int
    month: MonthName
    year: Year
    amount: Money
    percentage: BonusPercent
    status: BonusStatus = "Pending"


class BonusUpdate(CamelModel):
    project_id: Optional[int] = None
    employee_id: Optional[int] = None
    month: Optional[MonthName] = None
    year: Optional[Year] = None
    amount: Optional[Money] = None
    percentage: Optional[BonusPercent] = None
    status: Optional[BonusStatus] = None


class BonusOut(CamelModel):
    id: int
    project_id: int
    employee_id: int
    month: str
    year: int
    amount: Money
    percentage: Percent
    status: str


class QuarterlyBonusIn(CamelModel):
    """
    ``percentages`` maps "{employeeId}-{projectId}" to a percent of that
    project's quarter billing. Values may be numbers or numeric strings;
    entries that do not parse to a positive number are skipped, not rejected.
    """

    quarter: int
    year: Year
    project_ids: Optional[List[int]] = None
    employee_ids: Optional[List[int]] = None
    percentages: Dict[str, Any] = Field(default_factory=dict)


class SkippedEntry(CamelModel):
    key: str
    reason: str


class QuarterlyBonusOut(CamelModel):
    message: str
    bonuses: List[BonusOut]
    skipped: List[SkippedEntry] = []


def _ensure_bonus(db: Session, bonus_id: int) -> Bonus:
    b = db.get(Bonus, bonus_id)
    if not b:
        raise HTTPException(status_code=404, detail="Bonus not found")
    return b


# ---------------------------
# Endpoints
# ---------------------------
@router.get("", response_model=List[BonusOut], summary="List Bonuses")
def list_bonuses(db: Session = Depends(get_db)):
    return db.query(Bonus).order_by(Bonus.id.asc()).all()


@router.get("/project/{project_id}", response_model=List[BonusOut], summary="Bonuses of one project")
def list_project_bonuses(project_id: int, db: Session = Depends(get_db)):
    return db.query(Bonus).filter(Bonus.project_id == project_id).order_by(Bonus.id.asc()).all()


@router.get("/employee/{employee_id}", response_model=List[BonusOut], summary="Bonuses of one employee")
def list_employee_bonuses(employee_id: int, db: Session = Depends(get_db)):
    return db.query(Bonus).filter(Bonus.employee_id == employee_id).order_by(Bonus.id.asc()).all()


@router.post(
    "/calculate-quarterly",
    response_model=QuarterlyBonusOut,
    status_code=status.HTTP_201_CREATED,
    summary="Compute and store quarterly bonuses from project billings",
)
def calculate_quarterly(body: QuarterlyBonusIn, storage: Storage = Depends(get_storage)):
    # quarter outside 1..4 raises ValidationError -> 400
    result = QuarterlyBonusCalculator(storage).calculate(
        quarter=body.quarter,
        year=body.year,
        percentages=body.percentages,
        project_ids=body.project_ids,
        employee_ids=body.employee_ids,
    )
    return QuarterlyBonusOut(
        message=result["message"],
        bonuses=[BonusOut.model_validate(b) for b in result["bonuses"]],
        skipped=[SkippedEntry(**s) for s in result["skipped"]],
    )


@router.get("/{bonus_id}", response_model=BonusOut, summary="Get Bonus")
def get_bonus(bonus_id: int, db: Session = Depends(get_db)):
    return _ensure_bonus(db, bonus_id)


@router.post("", response_model=BonusOut, status_code=status.HTTP_201_CREATED, summary="Create Bonus")
def create_bonus(body: BonusCreate, db: Session = Depends(get_db)):
    b = Bonus(**body.model_dump())
    db.add(b)
    db.commit()
    db.refresh(b)
    return b


@router.put("/{bonus_id}", response_model=BonusOut, summary="Update Bonus")
def update_bonus(bonus_id: int, body: BonusUpdate, db: Session = Depends(get_db)):
    b = _ensure_bonus(db, bonus_id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(b, k, v)
    db.commit()
    db.refresh(b)
    return b


@router.delete("/{bonus_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Bonus")
def delete_bonus(bonus_id: int, db: Session = Depends(get_db)):
    b = _ensure_bonus(db, bonus_id)
    db.delete(b)
    db.commit()
