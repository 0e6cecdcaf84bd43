# backend/backoffice/api/deps.py
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..core.cache import QueryCache
from ..core.config import get_db  # noqa: F401  re-exported for routers and test overrides
from ..storage import Storage


# ---------------------------
# Service dependencies
# ---------------------------
def get_cache(request: Request) -> QueryCache:
    return request.app.state.cache


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return Storage(db)
