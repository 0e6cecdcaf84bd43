# backend/backoffice/api/billings.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field
from sqlalchemy.orm import Session

from .deps import get_db
from .schemas import CamelModel, Money, MonthName, SignedMoney, Year
from ..models import Billing, Revenue

router = APIRouter(prefix="/api/billings", tags=["billings"])


# ---------------------------
# Schemas
# ---------------------------
class BillingCreate(CamelModel):
    project_id: int
    month: MonthName
    year: Year
    amount: Money
    status: str = Field(..., min_length=1)
    invoice_date: Optional[str] = None
    payment_date: Optional[str] = None


class BillingUpdate(CamelModel):
    project_id: Optional[int] = None
    month: Optional[MonthName] = None
    year: Optional[Year] = None
    amount: Optional[Money] = None
    status: Optional[str] = None
    invoice_date: Optional[str] = None
    payment_date: Optional[str] = None


class BillingOut(CamelModel):
    id: int
    project_id: int
    month: str
    year: int
    amount: Money
    status: str
    invoice_date: Optional[str] = None
    payment_date: Optional[str] = None


def _ensure_billing(db: Session, billing_id: int) -> Billing:
    b = db.get(Billing, billing_id)
    if not b:
        raise HTTPException(status_code=404, detail="Billing not found")
    return b


# ---------------------------
# Endpoints
# ---------------------------
@router.get("", response_model=List[BillingOut], summary="List Billings")
def list_billings(db: Session = Depends(get_db)):
    return db.query(Billing).order_by(Billing.id.asc()).all()


@router.get("/project/{project_id}", response_model=List[BillingOut], summary="Billings of one project")
def list_project_billings(project_id: int, db: Session = Depends(get_db)):
    return (
        db.query(Billing)
        .filter(Billing.project_id == project_id)
        .order_by(Billing.id.asc())
        .all()
    )


@router.get("/{billing_id}", response_model=BillingOut, summary="Get Billing")
def get_billing(billing_id: int, db: Session = Depends(get_db)):
    return _ensure_billing(db, billing_id)


@router.post("", response_model=BillingOut, status_code=status.HTTP_201_CREATED, summary="Create Billing")
def create_billing(body: BillingCreate, db: Session = Depends(get_db)):
    b = Billing(**body.model_dump())
    db.add(b)
    db.commit()
    db.refresh(b)
    return b


@router.put("/{billing_id}", response_model=BillingOut, summary="Update Billing")
def update_billing(billing_id: int, body: BillingUpdate, db: Session = Depends(get_db)):
    b = _ensure_billing(db, billing_id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(b, k, v)
    db.commit()
    db.refresh(b)
    return b


@router.delete("/{billing_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Billing")
def delete_billing(billing_id: int, db: Session = Depends(get_db)):
    b = _ensure_billing(db, billing_id)
    db.delete(b)
    db.commit()


# ---------------------------
# Revenues (read-only monthly rollups)
# ---------------------------
revenues_router = APIRouter(prefix="/api/revenues", tags=["billings"])


class RevenueOut(CamelModel):
    id: int
    month: str
    year: int
    amount: Money
    expenses: Money
    profit: SignedMoney


@revenues_router.get("", response_model=List[RevenueOut], summary="List Revenues")
def list_revenues(db: Session = Depends(get_db)):
    return db.query(Revenue).order_by(Revenue.id.asc()).all()
