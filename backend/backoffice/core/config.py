# backend/backoffice/core/config.py
from typing import List

from pydantic_settings import BaseSettings
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session


class Settings(BaseSettings):
    # --- Database ---
    DATABASE_URL: str = "sqlite:///./backoffice.db"
    AUTO_CREATE_TABLES: bool = True  # dev convenience; use alembic in prod

    # --- CORS ---
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # --- Dashboard ---
    # strict: non-numeric money fields fail the request instead of counting as 0
    STRICT_NUMERIC: bool = False
    DASHBOARD_CACHE_TTL: int = 30  # seconds, 0 disables caching

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

# SQLite needs check_same_thread off for the threadpool FastAPI runs sync routes in
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, future=True)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def get_db() -> Session:
    """FastAPI dependency: one DB session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
