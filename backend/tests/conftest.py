# backend/tests/conftest.py
import os
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from backoffice.api import deps as app_deps
from backoffice.main import app
from backoffice.models import Base

# -----------------------------
# Test DB: separate SQLite file
# -----------------------------
TEST_DB_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "test_api.db"))
TEST_DB_URL = f"sqlite:///{TEST_DB_PATH}"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[app_deps.get_db] = override_get_db


# -----------------------------
# Fixtures
# -----------------------------
@pytest.fixture(scope="session", autouse=True)
def _setup_test_db():
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest.fixture(autouse=True)
def _clean_state(_setup_test_db):
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    app.state.cache.clear()
    yield
    app.dependency_overrides.pop(app_deps.get_storage, None)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# -----------------------------
# In-memory storage
# -----------------------------
class FakeStorage:
    """Same accessors as backoffice.storage.Storage, backed by lists."""

    def __init__(self, employees=(), projects=(), billings=(), expenses=(),
                 partners=(), profit_distributions=(), bonuses=()):
        self.employees = list(employees)
        self.projects = list(projects)
        self.billings = list(billings)
        self.expenses = list(expenses)
        self.partners = list(partners)
        self.profit_distributions = list(profit_distributions)
        self.bonuses = list(bonuses)
        self.created = []

    def list_employees(self):
        return list(self.employees)

    def list_projects(self):
        return list(self.projects)

    def list_billings(self):
        return list(self.billings)

    def list_expenses(self):
        return list(self.expenses)

    def list_partners(self):
        return list(self.partners)

    def list_profit_distributions(self):
        return list(self.profit_distributions)

    def list_bonuses(self):
        return list(self.bonuses)

    def create_bonuses(self, rows):
        out = []
        for row in rows:
            b = SimpleNamespace(id=len(self.bonuses) + 1, **row)
            self.bonuses.append(b)
            out.append(b)
        self.created.extend(out)
        return out


@pytest.fixture
def make_storage():
    return FakeStorage


def rec(**kw):
    return SimpleNamespace(**kw)


@pytest.fixture
def row():
    """Attribute-style record builder (stands in for an ORM row)."""
    return rec
