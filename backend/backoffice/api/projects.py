# backend/backoffice/api/projects.py
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field
from sqlalchemy.orm import Session

from .deps import get_db
from .schemas import CamelModel, IdsIn, Money, SuccessOut
from ..models import Project

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


# ---------------------------
# Schemas
# ---------------------------
class ProjectCreate(CamelModel):
    name: str = Field(..., min_length=1)
    client: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)
    progress: int = Field(0, ge=0, le=100)
    value: Money
    deadline: date
    manager_id: Optional[int] = None
    description: Optional[str] = None


class ProjectUpdate(CamelModel):
    name: Optional[str] = None
    client: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    value: Optional[Money] = None
    deadline: Optional[date] = None
    manager_id: Optional[int] = None
    description: Optional[str] = None


class ProjectOut(CamelModel):
    id: int
    name: str
    client: str
    status: str
    progress: int
    value: Money
    deadline: date
    manager_id: Optional[int] = None
    description: Optional[str] = None


def _ensure_project(db: Session, project_id: int) -> Project:
    p = db.get(Project, project_id)
    if not p:
        raise HTTPException(status_code=404, detail="Project not found")
    return p


# ---------------------------
# Endpoints
# ---------------------------
@router.get("", response_model=List[ProjectOut], summary="List Projects")
def list_projects(db: Session = Depends(get_db)):
    return db.query(Project).order_by(Project.id.asc()).all()


@router.post("/bulk-delete", response_model=SuccessOut, summary="Delete several projects")
def bulk_delete_projects(body: IdsIn, db: Session = Depends(get_db)):
    n = db.query(Project).filter(Project.id.in_(body.ids)).delete(synchronize_session=False)
    db.commit()
    logger.info("bulk-deleted %d project(s) of %d requested", n, len(body.ids))
    return SuccessOut()


@router.get("/{project_id}", response_model=ProjectOut, summary="Get Project")
def get_project(project_id: int, db: Session = Depends(get_db)):
    return _ensure_project(db, project_id)


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED, summary="Create Project")
def create_project(body: ProjectCreate, db: Session = Depends(get_db)):
    p = Project(**body.model_dump())
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@router.put("/{project_id}", response_model=ProjectOut, summary="Update Project")
def update_project(project_id: int, body: ProjectUpdate, db: Session = Depends(get_db)):
    p = _ensure_project(db, project_id)
    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(p, k, v)
    db.commit()
    db.refresh(p)
    return p


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Project")
def delete_project(project_id: int, db: Session = Depends(get_db)):
    p = _ensure_project(db, project_id)
    db.delete(p)
    db.commit()
