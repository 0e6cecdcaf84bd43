# backend/backoffice/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .core.cache import QueryCache
from .core.config import engine, settings
from .core.errors import NotFoundError, ValidationError
from .core.logging_config import configure_logging
from .models import Base

# ---- Routers ----
from .api import (
    bonuses,
    company_settings,
    dashboard,
    employees,
    expenses,
    projects,
    salaries,
)
from .api.billings import router as billings_router, revenues_router
from .api.partners import router as partners_router, distributions_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("tables ensured on %s", engine.url.render_as_string(hide_password=True))
    yield


app = FastAPI(title="Back-office Finance API", lifespan=lifespan)
app.state.cache = QueryCache(ttl_seconds=settings.DASHBOARD_CACHE_TTL)

# ---------------------------
# CORS (frontend dev servers)
# ---------------------------
DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _resolve_allowed_origins() -> list[str]:
    # CORS_ALLOW_ORIGINS may be a list or a comma separated string
    raw = getattr(settings, "CORS_ALLOW_ORIGINS", None)
    if not raw:
        return DEFAULT_CORS_ORIGINS
    if isinstance(raw, (list, tuple)):
        vals = [str(x).strip().rstrip("/") for x in raw if str(x).strip()]
    else:
        vals = [s.strip().rstrip("/") for s in str(raw).split(",") if s.strip()]
    if len(vals) == 1 and vals[0] == "*":
        return DEFAULT_CORS_ORIGINS
    return vals or DEFAULT_CORS_ORIGINS


ALLOW_ORIGINS = _resolve_allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------
# Dashboard cache invalidation
# ---------------------------
_MUTATING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


@app.middleware("http")
async def invalidate_dashboard_cache(request: Request, call_next):
    response = await call_next(request)
    if (
        request.method in _MUTATING_METHODS
        and request.url.path.startswith("/api/")
        and response.status_code < 400
    ):
        request.app.state.cache.invalidate_prefix(dashboard.CACHE_NAMESPACE)
    return response


# ---------------------------
# Error translation
# ---------------------------
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(ValidationError)
async def domain_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(IntegrityError)
async def integrity_handler(request: Request, exc: IntegrityError):
    logger.warning("integrity violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "Record conflicts with existing data"},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


# ---------------------------
# Health
# ---------------------------
@app.get("/health", tags=["system"])
def health():
    return {"status": "ok"}


# ---------------------------
# Routers
# ---------------------------
app.include_router(dashboard.router)
app.include_router(employees.router)
app.include_router(projects.router)
app.include_router(billings_router)
app.include_router(revenues_router)
app.include_router(partners_router)
app.include_router(distributions_router)
app.include_router(bonuses.router)            # incl. quarterly calculation
app.include_router(salaries.router)
app.include_router(expenses.router)
app.include_router(company_settings.router)
