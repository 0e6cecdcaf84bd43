# backend/backoffice/api/employees.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import EmailStr, Field
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .deps import get_db
from .schemas import CamelModel, IdsIn, Money, SuccessOut
from ..core.constants import DEFAULT_EMPLOYEE_STATUS
from ..models import Employee

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/employees", tags=["employees"])


# ---------------------------
# Schemas
# ---------------------------
class EmployeeCreate(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    department: str = Field(..., min_length=1)
    status: Optional[str] = None
    project_id: Optional[int] = None
    salary: Money
    role: Optional[str] = None
    avatar: Optional[str] = None


class EmployeeUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    department: Optional[str] = None
    status: Optional[str] = None
    project_id: Optional[int] = None
    salary: Optional[Money] = None
    role: Optional[str] = None
    avatar: Optional[str] = None


class EmployeeOut(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    department: str
    status: str
    project_id: Optional[int] = None
    salary: Money
    role: Optional[str] = None
    avatar: Optional[str] = None


class EmployeeBulkUpload(CamelModel):
    employees: List[Dict[str, Any]]


class EmployeeBulkResult(CamelModel):
    success: bool = True
    created: int
    failed: int
    results: List[EmployeeOut]
    errors: List[Dict[str, Any]]


# ---------------------------
# Helpers
# ---------------------------
def _ensure_employee(db: Session, employee_id: int) -> Employee:
    emp = db.get(Employee, employee_id)
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


def _normalize_status(value: Optional[str]) -> str:
    if not value or not value.strip():
        return DEFAULT_EMPLOYEE_STATUS
    return value


def _required_missing(row: Dict[str, Any]) -> List[str]:
    missing = []
    for camel, snake in (
        ("firstName", "first_name"),
        ("lastName", "last_name"),
        ("email", "email"),
        ("department", "department"),
        ("salary", "salary"),
    ):
        v = row.get(camel, row.get(snake))
        if v is None or (isinstance(v, str) and not v.strip()):
            missing.append(camel)
    return missing


# ---------------------------
# Endpoints
# ---------------------------
@router.get("", response_model=List[EmployeeOut], summary="List Employees")
def list_employees(db: Session = Depends(get_db)):
    return db.query(Employee).order_by(Employee.id.asc()).all()


@router.post("/bulk-delete", response_model=SuccessOut, summary="Delete several employees")
def bulk_delete_employees(body: IdsIn, db: Session = Depends(get_db)):
    n = db.query(Employee).filter(Employee.id.in_(body.ids)).delete(synchronize_session=False)
    db.commit()
    logger.info("bulk-deleted %d employee(s) of %d requested", n, len(body.ids))
    return SuccessOut()


@router.post("/bulk-upload", response_model=EmployeeBulkResult, summary="Create employees from parsed rows")
def bulk_upload_employees(body: EmployeeBulkUpload, db: Session = Depends(get_db)):
    results: List[Employee] = []
    errors: List[Dict[str, Any]] = []

    for row in body.employees:
        missing = _required_missing(row)
        if missing:
            errors.append({"employee": row, "error": f"Missing required fields: {', '.join(missing)}"})
            continue
        try:
            data = EmployeeCreate.model_validate(row)
        except SchemaValidationError as e:
            errors.append({"employee": row, "error": str(e)})
            continue

        emp = Employee(**data.model_dump(exclude={"status"}), status=_normalize_status(data.status))
        db.add(emp)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            errors.append({"employee": row, "error": f"Duplicate or invalid record: {e.orig}"})
            continue
        db.refresh(emp)
        results.append(emp)

    logger.info("employee bulk upload: created=%d failed=%d", len(results), len(errors))
    return EmployeeBulkResult(
        created=len(results),
        failed=len(errors),
        results=[EmployeeOut.model_validate(e) for e in results],
        errors=errors,
    )


@router.get("/{employee_id}", response_model=EmployeeOut, summary="Get Employee")
def get_employee(employee_id: int, db: Session = Depends(get_db)):
    return _ensure_employee(db, employee_id)


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED, summary="Create Employee")
def create_employee(body: EmployeeCreate, db: Session = Depends(get_db)):
    emp = Employee(**body.model_dump(exclude={"status"}), status=_normalize_status(body.status))
    db.add(emp)
    db.commit()
    db.refresh(emp)
    return emp


@router.put("/{employee_id}", response_model=EmployeeOut, summary="Update Employee")
def update_employee(employee_id: int, body: EmployeeUpdate, db: Session = Depends(get_db)):
    emp = _ensure_employee(db, employee_id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(emp, k, v)
    db.commit()
    db.refresh(emp)
    return emp


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Employee")
def delete_employee(employee_id: int, db: Session = Depends(get_db)):
    emp = _ensure_employee(db, employee_id)
    db.delete(emp)
    db.commit()
