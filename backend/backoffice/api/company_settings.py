# backend/backoffice/api/company_settings.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field
from sqlalchemy.orm import Session

from .deps import get_db
from .schemas import CamelModel
from ..models import CompanySettings

router = APIRouter(prefix="/api/company-settings", tags=["company-settings"])


class CompanySettingsIn(CamelModel):
    company_name: str = Field(..., min_length=1)
    tax_id: str = Field(..., min_length=1)
    address: str
    city: str
    state: str
    postal_code: str
    fiscal_year_start: str


class CompanySettingsUpdate(CamelModel):
    company_name: Optional[str] = None
    tax_id: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    fiscal_year_start: Optional[str] = None


class CompanySettingsOut(CompanySettingsIn):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def _ensure_settings(db: Session, settings_id: int) -> CompanySettings:
    row = db.get(CompanySettings, settings_id)
    if not row:
        raise HTTPException(status_code=404, detail="Company settings not found")
    return row


# Single-row resource: GET returns the first record.
@router.get("", response_model=CompanySettingsOut, summary="Get Company Settings")
def get_company_settings(db: Session = Depends(get_db)):
    row = db.query(CompanySettings).order_by(CompanySettings.id.asc()).first()
    if not row:
        raise HTTPException(status_code=404, detail="Company settings not found")
    return row


@router.post(
    "",
    response_model=CompanySettingsOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Company Settings",
)
def create_company_settings(body: CompanySettingsIn, db: Session = Depends(get_db)):
    row = CompanySettings(**body.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@router.put("/{settings_id}", response_model=CompanySettingsOut, summary="Update Company Settings")
def update_company_settings(settings_id: int, body: CompanySettingsUpdate, db: Session = Depends(get_db)):
    row = _ensure_settings(db, settings_id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{settings_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Company Settings")
def delete_company_settings(settings_id: int, db: Session = Depends(get_db)):
    row = _ensure_settings(db, settings_id)
    db.delete(row)
    db.commit()
