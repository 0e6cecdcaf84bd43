# backend/tests/test_dashboard_api.py
from datetime import date
from decimal import Decimal

import pytest

from backoffice.api import deps as app_deps
from backoffice.core.config import settings
from backoffice.main import app
from backoffice.models import Billing, Bonus, Employee, Expense, Partner, Project


@pytest.fixture
def seeded(db):
    db.add_all([
        Employee(id=1, first_name="Alice", last_name="Moreau", email="alice@example.com",
                 department="Engineering", status="Active", salary=Decimal("6500")),
        Employee(id=2, first_name="Bora", last_name="Yilmaz", email="bora@example.com",
                 department="Finance", status="Active", salary=Decimal("5000")),
        Project(id=1, name="Portal", client="Northwind", status="Active", progress=50,
                value=Decimal("10000"), deadline=date(2024, 12, 31), manager_id=1),
        Project(id=2, name="Audit", client="Contoso", status="In Progress", progress=5,
                value=Decimal("4000"), deadline=date(2024, 6, 30)),
        Billing(project_id=1, month="March", year=2024, amount=Decimal("3000"), status="Paid"),
        Billing(project_id=1, month="April", year=2024, amount=Decimal("1000"), status="Paid"),
        Expense(category="Rent", description="Office", amount=Decimal("750"),
                month="March", year=2024, date="2024-03-01"),
        Partner(id=1, name="Defne", email="defne@example.com", share=Decimal("100")),
        Bonus(project_id=1, employee_id=1, month="March", year=2024,
              amount=Decimal("250"), percentage=Decimal("5"), status="Pending"),
    ])
    db.commit()


def test_dashboard_all_time(client, seeded):
    r = client.get("/api/dashboard")
    assert r.status_code == 200, r.text
    body = r.json()
    m = body["metrics"]
    assert m["totalRevenue"] == 4000
    assert m["totalExpenses"] == 750
    assert m["profit"] == 3250
    assert m["expenseRatio"] == "18.75"
    assert m["employeeCount"] == 2
    assert m["projectCount"] == 2
    assert m["activeProjectCount"] == 2

    assert [p["name"] for p in body["recentProjects"]] == ["Portal"]
    assert body["recentProjects"][0]["value"] == "10000.00"
    assert [e["firstName"] for e in body["recentEmployees"]] == ["Alice", "Bora"]
    assert [(pt["month"], pt["revenue"]) for pt in body["revenueChartData"]] == [("March", 3000), ("April", 1000)]
    assert body["expenseBreakdown"] == [{"name": "Rent", "value": 750}]
    assert body["projectBonuses"] == [
        {"id": 1, "name": "Portal", "roi": 3, "manager": "Alice Moreau", "bonus": 250}
    ]
    assert body["totalBonusPool"] == 250


def test_dashboard_filtered_by_month_and_year(client, seeded):
    body = client.get("/api/dashboard", params={"month": "April", "year": "2024"}).json()
    assert body["metrics"]["totalRevenue"] == 1000
    assert body["metrics"]["totalExpenses"] == 0
    assert body["totalBonusPool"] == 0
    assert body["partnerDistributions"] == [
        {"id": 1, "name": "Defne", "share": 100, "amount": 1000, "source": "live"}
    ]
    # entities are never period-filtered
    assert body["metrics"]["employeeCount"] == 2


def test_dashboard_month_without_year_is_unfiltered(client, seeded):
    body = client.get("/api/dashboard", params={"month": "April"}).json()
    assert body["metrics"]["totalRevenue"] == 4000


def test_dashboard_rejects_non_integer_year(client, seeded):
    r = client.get("/api/dashboard", params={"month": "April", "year": "soon"})
    assert r.status_code == 400


def test_dashboard_cache_is_dropped_by_writes(client, seeded, db):
    first = client.get("/api/dashboard").json()
    assert first["metrics"]["totalRevenue"] == 4000

    # direct DB write bypasses the API, so the cached summary is still served
    db.add(Billing(project_id=1, month="May", year=2024, amount=Decimal("500"), status="Paid"))
    db.commit()
    assert client.get("/api/dashboard").json()["metrics"]["totalRevenue"] == 4000

    r = client.post(
        "/api/expenses",
        json={"category": "Tax", "description": "VAT", "amount": "50", "month": "May",
              "year": 2024, "date": "2024-05-10"},
    )
    assert r.status_code == 201
    body = client.get("/api/dashboard").json()
    assert body["metrics"]["totalRevenue"] == 4500
    assert body["metrics"]["totalExpenses"] == 800


def test_dashboard_falls_back_to_zero_payload(client, make_storage):
    class Broken(make_storage):
        def list_employees(self):
            raise RuntimeError("connection reset")

    app.dependency_overrides[app_deps.get_storage] = lambda: Broken()
    r = client.get("/api/dashboard")
    assert r.status_code == 200
    body = r.json()
    assert body["metrics"]["totalRevenue"] == 0
    assert body["metrics"]["expenseRatio"] == "0.00"
    assert body["recentProjects"] == []


def test_dashboard_strict_mode_returns_400(client, make_storage, row, monkeypatch):
    storage = make_storage(billings=[row(project_id=1, month="March", year=2024, amount="n/a")])
    app.dependency_overrides[app_deps.get_storage] = lambda: storage

    assert client.get("/api/dashboard").json()["metrics"]["totalRevenue"] == 0

    monkeypatch.setattr(settings, "STRICT_NUMERIC", True)
    r = client.get("/api/dashboard")
    assert r.status_code == 400
    assert "not numeric" in r.json()["detail"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
