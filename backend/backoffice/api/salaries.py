# backend/backoffice/api/salaries.py
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import Session

from .deps import get_db
from .schemas import CamelModel, IdsIn, Money, MonthName, SignedMoney, Year
from ..core.constants import DEFAULT_SALARY_STATUS, MONTHS
from ..core.numbers import parse_number, to_decimal, to_int
from ..models import Employee, Salary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/salaries", tags=["salaries"])

_EARNINGS = ("basic_salary", "bonus", "arrears", "travel_allowance")
_DEDUCTIONS = ("tax_deduction", "loan_deduction")
_OPTIONAL_AMOUNTS = (
    ("bonus", "bonus"),
    ("arrears", "arrears"),
    ("travelAllowance", "travel_allowance"),
    ("taxDeduction", "tax_deduction"),
    ("loanDeduction", "loan_deduction"),
)


# ---------------------------
# Schemas
# ---------------------------
class SalaryCreate(CamelModel):
    employee_id: int
    month: MonthName
    year: Year
    basic_salary: Money
    bonus: Money = Decimal("0")
    tax_deduction: Money = Decimal("0")
    loan_deduction: Money = Decimal("0")
    arrears: Money = Decimal("0")
    travel_allowance: Money = Decimal("0")
    status: str = DEFAULT_SALARY_STATUS
    payment_date: Optional[str] = None


class SalaryUpdate(CamelModel):
    employee_id: Optional[int] = None
    month: Optional[MonthName] = None
    year: Optional[Year] = None
    basic_salary: Optional[Money] = None
    bonus: Optional[Money] = None
    tax_deduction: Optional[Money] = None
    loan_deduction: Optional[Money] = None
    arrears: Optional[Money] = None
    travel_allowance: Optional[Money] = None
    status: Optional[str] = None
    payment_date: Optional[str] = None


class SalaryOut(CamelModel):
    id: int
    employee_id: int
    month: str
    year: int
    basic_salary: Money
    bonus: Optional[Money] = None
    tax_deduction: Optional[Money] = None
    loan_deduction: Optional[Money] = None
    arrears: Optional[Money] = None
    travel_allowance: Optional[Money] = None
    net_salary: SignedMoney
    status: str
    payment_date: Optional[str] = None


class SalaryBulkUpload(CamelModel):
    salaries: List[Dict[str, Any]]


class SalaryBulkResult(CamelModel):
    success: bool = True
    created: int
    failed: int
    results: List[SalaryOut]
    errors: List[Dict[str, Any]]


# ---------------------------
# Helpers
# ---------------------------
def calculate_net_salary(values: Dict[str, Any]) -> Decimal:
    """basic + bonus + arrears + travel - tax - loan; missing parts count as 0."""
    earned = sum((to_decimal(values.get(k)) for k in _EARNINGS), Decimal("0"))
    deducted = sum((to_decimal(values.get(k)) for k in _DEDUCTIONS), Decimal("0"))
    return earned - deducted


def _ensure_salary(db: Session, salary_id: int) -> Salary:
    s = db.get(Salary, salary_id)
    if not s:
        raise HTTPException(status_code=404, detail="Salary record not found")
    return s


def _row_value(row: Dict[str, Any], camel: str, snake: str) -> Any:
    return row.get(camel, row.get(snake))


def _check_bulk_row(row: Dict[str, Any], employee_ids: set) -> Optional[str]:
    missing = [
        camel
        for camel, snake in (
            ("employeeId", "employee_id"),
            ("month", "month"),
            ("year", "year"),
            ("basicSalary", "basic_salary"),
        )
        if _row_value(row, camel, snake) in (None, "")
    ]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"

    for camel, snake in (("employeeId", "employee_id"), ("year", "year")):
        if to_int(_row_value(row, camel, snake)) is None:
            return f"{camel} must be a number"
    if parse_number(_row_value(row, "basicSalary", "basic_salary")) is None:
        return "basicSalary must be a number"
    for camel, snake in _OPTIONAL_AMOUNTS:
        value = _row_value(row, camel, snake)
        if value not in (None, "") and parse_number(value) is None:
            return f"{camel} must be a number"
    if row.get("month") not in MONTHS:
        return f"month must be one of {', '.join(MONTHS)}"

    employee_id = to_int(_row_value(row, "employeeId", "employee_id"))
    if employee_id not in employee_ids:
        return f"Employee with ID {employee_id} does not exist"
    return None


# ---------------------------
# Endpoints
# ---------------------------
@router.get("", response_model=List[SalaryOut], summary="List Salaries")
def list_salaries(db: Session = Depends(get_db)):
    return db.query(Salary).order_by(Salary.id.asc()).all()


@router.post("/bulk-upload", response_model=SalaryBulkResult, summary="Create salary records from parsed rows")
def bulk_upload_salaries(body: SalaryBulkUpload, db: Session = Depends(get_db)):
    employee_ids = {i for (i,) in db.query(Employee.id).all()}
    results: List[Salary] = []
    errors: List[Dict[str, Any]] = []

    for row in body.salaries:
        problem = _check_bulk_row(row, employee_ids)
        if problem:
            errors.append({"salary": row, "error": problem})
            continue

        # blank cells fall back to the schema defaults
        try:
            data = SalaryCreate.model_validate({k: v for k, v in row.items() if v not in (None, "")})
        except SchemaValidationError as e:
            errors.append({"salary": row, "error": str(e)})
            continue

        values = data.model_dump()
        s = Salary(**values, net_salary=calculate_net_salary(values))
        db.add(s)
        db.commit()
        db.refresh(s)
        results.append(s)

    logger.info("salary bulk upload: created=%d failed=%d", len(results), len(errors))
    return SalaryBulkResult(
        created=len(results),
        failed=len(errors),
        results=[SalaryOut.model_validate(s) for s in results],
        errors=errors,
    )


@router.post("/bulk-delete", status_code=status.HTTP_204_NO_CONTENT, summary="Delete several salary records")
def bulk_delete_salaries(body: IdsIn, db: Session = Depends(get_db)):
    n = db.query(Salary).filter(Salary.id.in_(body.ids)).delete(synchronize_session=False)
    db.commit()
    logger.info("bulk-deleted %d salary record(s) of %d requested", n, len(body.ids))


@router.get("/employee/{employee_id}", response_model=List[SalaryOut], summary="Salaries of one employee")
def list_employee_salaries(employee_id: int, db: Session = Depends(get_db)):
    return db.query(Salary).filter(Salary.employee_id == employee_id).order_by(Salary.id.asc()).all()


@router.get("/month/{month}/{year}", response_model=List[SalaryOut], summary="Salaries for one month")
def list_month_salaries(month: str, year: int, db: Session = Depends(get_db)):
    return (
        db.query(Salary)
        .filter(Salary.month == month, Salary.year == year)
        .order_by(Salary.id.asc())
        .all()
    )


@router.get("/{salary_id}", response_model=SalaryOut, summary="Get Salary")
def get_salary(salary_id: int, db: Session = Depends(get_db)):
    return _ensure_salary(db, salary_id)


@router.post("", response_model=SalaryOut, status_code=status.HTTP_201_CREATED, summary="Create Salary")
def create_salary(body: SalaryCreate, db: Session = Depends(get_db)):
    values = body.model_dump()
    s = Salary(**values, net_salary=calculate_net_salary(values))
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


@router.put("/{salary_id}", response_model=SalaryOut, summary="Update Salary")
def update_salary(salary_id: int, body: SalaryUpdate, db: Session = Depends(get_db)):
    s = _ensure_salary(db, salary_id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(s, k, v)
    # net always follows the merged components
    s.net_salary = calculate_net_salary({k: getattr(s, k) for k in _EARNINGS + _DEDUCTIONS})
    db.commit()
    db.refresh(s)
    return s


@router.delete("/{salary_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Salary")
def delete_salary(salary_id: int, db: Session = Depends(get_db)):
    s = _ensure_salary(db, salary_id)
    db.delete(s)
    db.commit()
