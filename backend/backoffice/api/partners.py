# backend/backoffice/api/partners.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import EmailStr, Field
from sqlalchemy.orm import Session

from .deps import get_db
from .schemas import CamelModel, Money, Percent
from ..models import Partner, ProfitDistribution

router = APIRouter(prefix="/api/partners", tags=["partners"])
distributions_router = APIRouter(prefix="/api/profit-distributions", tags=["partners"])


# ---------------------------
# Schemas
# ---------------------------
class PartnerCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    share: Percent


class PartnerUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    share: Optional[Percent] = None


class PartnerOut(CamelModel):
    id: int
    name: str
    email: str
    share: Percent


class ProfitDistributionOut(CamelModel):
    id: int
    partner_id: int
    month: str
    year: int
    amount: Money
    percentage: Percent


def _ensure_partner(db: Session, partner_id: int) -> Partner:
    p = db.get(Partner, partner_id)
    if not p:
        raise HTTPException(status_code=404, detail="Partner not found")
    return p


# ---------------------------
# Partners
# ---------------------------
@router.get("", response_model=List[PartnerOut], summary="List Partners")
def list_partners(db: Session = Depends(get_db)):
    return db.query(Partner).order_by(Partner.id.asc()).all()


@router.get("/{partner_id}", response_model=PartnerOut, summary="Get Partner")
def get_partner(partner_id: int, db: Session = Depends(get_db)):
    return _ensure_partner(db, partner_id)


@router.post("", response_model=PartnerOut, status_code=status.HTTP_201_CREATED, summary="Create Partner")
def create_partner(body: PartnerCreate, db: Session = Depends(get_db)):
    p = Partner(**body.model_dump())
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@router.put("/{partner_id}", response_model=PartnerOut, summary="Update Partner")
def update_partner(partner_id: int, body: PartnerUpdate, db: Session = Depends(get_db)):
    p = _ensure_partner(db, partner_id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(p, k, v)
    db.commit()
    db.refresh(p)
    return p


@router.delete("/{partner_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Partner")
def delete_partner(partner_id: int, db: Session = Depends(get_db)):
    p = _ensure_partner(db, partner_id)
    db.delete(p)
    db.commit()


# ---------------------------
# Profit distributions (read-only)
# ---------------------------
@distributions_router.get("", response_model=List[ProfitDistributionOut], summary="List Profit Distributions")
def list_profit_distributions(db: Session = Depends(get_db)):
    return db.query(ProfitDistribution).order_by(ProfitDistribution.id.asc()).all()


@distributions_router.get(
    "/partner/{partner_id}",
    response_model=List[ProfitDistributionOut],
    summary="Profit distributions of one partner",
)
def list_partner_distributions(partner_id: int, db: Session = Depends(get_db)):
    return (
        db.query(ProfitDistribution)
        .filter(ProfitDistribution.partner_id == partner_id)
        .order_by(ProfitDistribution.id.asc())
        .all()
    )
