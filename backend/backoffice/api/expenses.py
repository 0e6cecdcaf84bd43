# backend/backoffice/api/expenses.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field
from sqlalchemy.orm import Session

from .deps import get_db
from .schemas import CamelModel, Money, MonthName, Year
from ..models import Expense

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


# ---------------------------
# Schemas
# ---------------------------
class ExpenseCreate(CamelModel):
    category: str = Field(..., min_length=1)  # Tax, Rent, Utilities ...
    description: str
    amount: Money
    month: MonthName
    year: Year
    date: str = Field(..., min_length=1)
    payment_method: Optional[str] = None
    receipt_url: Optional[str] = None
    notes: Optional[str] = None


class ExpenseUpdate(CamelModel):
    category: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Money] = None
    month: Optional[MonthName] = None
    year: Optional[Year] = None
    date: Optional[str] = None
    payment_method: Optional[str] = None
    receipt_url: Optional[str] = None
    notes: Optional[str] = None


class ExpenseOut(CamelModel):
    id: int
    category: str
    description: str
    amount: Money
    month: str
    year: int
    date: str
    payment_method: Optional[str] = None
    receipt_url: Optional[str] = None
    notes: Optional[str] = None


def _ensure_expense(db: Session, expense_id: int) -> Expense:
    e = db.get(Expense, expense_id)
    if not e:
        raise HTTPException(status_code=404, detail="Expense not found")
    return e


# ---------------------------
# Endpoints
# ---------------------------
@router.get("", response_model=List[ExpenseOut], summary="List Expenses")
def list_expenses(db: Session = Depends(get_db)):
    return db.query(Expense).order_by(Expense.id.asc()).all()


@router.get("/{expense_id}", response_model=ExpenseOut, summary="Get Expense")
def get_expense(expense_id: int, db: Session = Depends(get_db)):
    return _ensure_expense(db, expense_id)


@router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED, summary="Create Expense")
def create_expense(body: ExpenseCreate, db: Session = Depends(get_db)):
    e = Expense(**body.model_dump())
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


@router.patch("/{expense_id}", response_model=ExpenseOut, summary="Update Expense")
def update_expense(expense_id: int, body: ExpenseUpdate, db: Session = Depends(get_db)):
    e = _ensure_expense(db, expense_id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(e, k, v)
    db.commit()
    db.refresh(e)
    return e


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Expense")
def delete_expense(expense_id: int, db: Session = Depends(get_db)):
    e = _ensure_expense(db, expense_id)
    db.delete(e)
    db.commit()
