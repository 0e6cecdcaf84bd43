# backend/tests/test_dashboard_aggregator.py
from decimal import Decimal

import pytest

from backoffice.core.errors import ValidationError
from backoffice.services.dashboard import (
    build_dashboard,
    empty_dashboard,
    prepare_dashboard_data,
    resolve_period,
)


def _prepare(**kw):
    args = {
        "employees": [],
        "projects": [],
        "billings": [],
        "expenses": [],
        "partners": [],
        "profit_distributions": [],
        "bonuses": [],
    }
    args.update(kw)
    period = args.pop("period", None)
    strict = args.pop("strict", False)
    return prepare_dashboard_data(**args, period=period, strict=strict)


# -----------------------------
# Aggregator
# -----------------------------
def test_all_empty_inputs_give_zero_payload():
    out = _prepare()
    assert out["metrics"] == {
        "total_revenue": 0.0,
        "total_expenses": 0.0,
        "profit": 0.0,
        "expense_ratio": "0.00",
        "employee_count": 0,
        "project_count": 0,
        "active_project_count": 0,
    }
    for key in (
        "recent_projects",
        "revenue_chart_data",
        "expense_breakdown",
        "partner_distributions",
        "project_bonuses",
        "recent_employees",
    ):
        assert out[key] == []
    assert out["total_bonus_pool"] == 0.0
    assert empty_dashboard() == out


def test_none_and_non_list_inputs_count_as_empty():
    out = prepare_dashboard_data(None, None, "oops", None, 42, None, None)
    assert out["metrics"]["employee_count"] == 0
    assert out["metrics"]["total_revenue"] == 0.0


def test_revenue_sum_tolerates_mixed_amounts():
    billings = [
        {"amount": 100, "month": "March", "year": 2024},
        {"amount": "200.50", "month": "March", "year": 2024},
        {"amount": None, "month": "March", "year": 2024},
        {"amount": "abc", "month": "March", "year": 2024},
        {"amount": Decimal("50"), "month": "March", "year": 2024},
    ]
    out = _prepare(billings=billings)
    assert out["metrics"]["total_revenue"] == pytest.approx(350.5)
    assert out["metrics"]["expense_ratio"] == "0.00"


def test_profit_and_expense_ratio():
    out = _prepare(
        billings=[{"amount": "2000", "month": "May", "year": 2024}],
        expenses=[{"amount": 500, "category": "Rent", "month": "May", "year": 2024}],
    )
    m = out["metrics"]
    assert m["profit"] == pytest.approx(1500)
    assert m["expense_ratio"] == "25.00"


def test_expense_ratio_is_zero_string_when_no_revenue():
    out = _prepare(expenses=[{"amount": 300, "category": "Tax", "month": "May", "year": 2024}])
    assert out["metrics"]["expense_ratio"] == "0.00"
    assert out["metrics"]["profit"] == pytest.approx(-300)


def test_expense_ratio_is_zero_string_when_revenue_is_negative():
    out = _prepare(
        billings=[{"amount": "-50", "month": "May", "year": 2024}],
        expenses=[{"amount": 10, "category": "Tax", "month": "May", "year": 2024}],
    )
    assert out["metrics"]["total_revenue"] == pytest.approx(-50)
    assert out["metrics"]["expense_ratio"] == "0.00"


def test_counts_and_recent_lists(row):
    projects = [
        row(id=1, name="A", status="Active", value=0, manager_id=None),
        row(id=2, name="B", status="In Progress", value=0, manager_id=None),
        row(id=3, name="C", status="Completed", value=0, manager_id=None),
        row(id=4, name="D", status="Active", value=0, manager_id=None),
        row(id=5, name="E", status="Active", value=0, manager_id=None),
        row(id=6, name="F", status="Active", value=0, manager_id=None),
    ]
    employees = [row(id=i, first_name=f"E{i}", last_name="X") for i in range(1, 6)]
    out = _prepare(projects=projects, employees=employees)

    assert out["metrics"]["project_count"] == 6
    assert out["metrics"]["active_project_count"] == 5
    assert out["metrics"]["employee_count"] == 5
    assert [p.id for p in out["recent_projects"]] == [1, 4, 5]
    assert [e.id for e in out["recent_employees"]] == [1, 2, 3]


def test_expense_breakdown_groups_in_first_seen_order():
    expenses = [
        {"category": "Rent", "amount": 1000},
        {"category": "", "amount": 20},
        {"category": None, "amount": "5"},
        {"category": "Rent", "amount": "250.5"},
        {"category": "Tax", "amount": "nope"},
    ]
    out = _prepare(expenses=expenses)
    assert out["expense_breakdown"] == [
        {"name": "Rent", "value": pytest.approx(1250.5)},
        {"name": "Uncategorized", "value": pytest.approx(25)},
        {"name": "Tax", "value": 0.0},
    ]


def test_revenue_chart_follows_first_seen_periods():
    billings = [
        {"amount": 100, "month": "March", "year": 2024},
        {"amount": 40, "month": "January", "year": 2024},
        {"amount": 60, "month": "March", "year": "2024"},
    ]
    expenses = [
        {"amount": 30, "month": "March", "year": "2024", "category": "Rent"},
        {"amount": 5, "month": "February", "year": 2024, "category": "Rent"},
    ]
    out = _prepare(billings=billings, expenses=expenses)
    assert out["revenue_chart_data"] == [
        {"month": "March", "year": 2024, "revenue": 160.0, "expenses": 30.0, "profit": 130.0},
        {"month": "January", "year": 2024, "revenue": 40.0, "expenses": 0.0, "profit": 40.0},
    ]


def test_live_partner_amounts_add_up_to_profit():
    out = _prepare(
        billings=[{"amount": 1000}, {"amount": 500}],
        expenses=[{"amount": 300, "category": "Rent"}],
        partners=[
            {"id": 1, "name": "P1", "share": "60"},
            {"id": 2, "name": "P2", "share": Decimal("40.00")},
        ],
    )
    dists = out["partner_distributions"]
    assert [d["amount"] for d in dists] == [720.0, 480.0]
    assert all(d["source"] == "live" for d in dists)
    assert sum(d["amount"] for d in dists) == pytest.approx(out["metrics"]["profit"], abs=1e-6)


def test_recorded_distribution_wins_for_matching_period():
    out = _prepare(
        billings=[{"amount": 1000, "month": "March", "year": 2024}],
        partners=[
            {"id": 1, "name": "P1", "share": 50},
            {"id": 2, "name": "P2", "share": 50},
        ],
        profit_distributions=[
            {"partner_id": 1, "month": "March", "year": 2024, "amount": "999.99"},
            {"partner_id": 2, "month": "February", "year": 2024, "amount": "1.00"},
        ],
        period=("March", 2024),
    )
    p1, p2 = out["partner_distributions"]
    assert (p1["amount"], p1["source"]) == (999.99, "recorded")
    assert (p2["amount"], p2["source"]) == (500.0, "live")


def test_project_bonuses_roi_and_manager(row):
    employees = [row(id=1, first_name="Alice", last_name="Moreau")]
    projects = [
        row(id=1, name="Portal", status="Active", value=Decimal("10000"), manager_id=1),
        row(id=2, name="Done", status="Completed", value=100, manager_id=1),
        row(id=3, name="Zero", status="Active", value=0, manager_id=99),
        row(id=4, name="Third", status="Active", value="5000", manager_id=None),
        row(id=5, name="Fourth", status="Active", value=1, manager_id=None),
    ]
    bonuses = [
        row(project_id=1, amount="150"),
        row(project_id=1, amount=Decimal("100")),
        row(project_id=2, amount=50),
        row(project_id=3, amount=20),
    ]
    out = _prepare(employees=employees, projects=projects, bonuses=bonuses)

    assert out["project_bonuses"] == [
        {"id": 1, "name": "Portal", "roi": 3, "manager": "Alice Moreau", "bonus": 250.0},
        {"id": 3, "name": "Zero", "roi": 0, "manager": "Unassigned", "bonus": 20.0},
        {"id": 4, "name": "Third", "roi": 0, "manager": "Unassigned", "bonus": 0.0},
    ]
    assert out["total_bonus_pool"] == pytest.approx(320)


def test_strict_mode_rejects_non_numeric_amounts():
    with pytest.raises(ValidationError):
        _prepare(billings=[{"amount": "abc"}], strict=True)
    with pytest.raises(ValidationError):
        _prepare(expenses=[{"amount": None, "category": "Rent"}], strict=True)


# -----------------------------
# Period filter wrapper
# -----------------------------
def _storage(make_storage, row):
    return make_storage(
        employees=[row(id=1, first_name="Alice", last_name="Moreau")],
        projects=[row(id=1, name="Portal", status="Active", value=10000, manager_id=1)],
        billings=[
            row(project_id=1, month="March", year=2024, amount="1000"),
            row(project_id=1, month="April", year=2024, amount="500"),
            row(project_id=1, month="March", year=2023, amount="700"),
        ],
        expenses=[
            row(category="Rent", month="March", year=2024, amount="200"),
            row(category="Rent", month="April", year=2024, amount="100"),
        ],
        partners=[row(id=1, name="P1", share=100)],
        profit_distributions=[row(partner_id=1, month="March", year=2024, amount="123.45")],
        bonuses=[
            row(project_id=1, month="March", year=2024, amount="50"),
            row(project_id=1, month="June", year=2024, amount="75"),
        ],
    )


def test_period_filter_keeps_matching_facts_only(make_storage, row):
    out = build_dashboard(_storage(make_storage, row), "March", "2024")
    m = out["metrics"]
    assert m["total_revenue"] == pytest.approx(1000)
    assert m["total_expenses"] == pytest.approx(200)
    assert m["employee_count"] == 1
    assert out["total_bonus_pool"] == pytest.approx(50)
    assert out["partner_distributions"][0]["source"] == "recorded"
    assert out["partner_distributions"][0]["amount"] == 123.45


def test_one_period_part_alone_does_not_filter(make_storage, row):
    out = build_dashboard(_storage(make_storage, row), "March", None)
    assert out["metrics"]["total_revenue"] == pytest.approx(2200)
    assert out["total_bonus_pool"] == pytest.approx(125)
    # live share of all-time profit
    assert out["partner_distributions"][0] == {
        "id": 1, "name": "P1", "share": 100.0, "amount": 1900.0, "source": "live",
    }


def test_unfiltered_partner_amounts_add_up_to_profit(make_storage, row):
    storage = make_storage(
        billings=[
            row(project_id=1, month="March", year=2024, amount="1000"),
            row(project_id=1, month="January", year=2024, amount="9000"),
        ],
        partners=[row(id=1, name="P1", share=60), row(id=2, name="P2", share=40)],
        profit_distributions=[row(partner_id=1, month="March", year=2024, amount="10")],
    )
    out = build_dashboard(storage)
    assert out["metrics"]["profit"] == pytest.approx(10000)
    assert [(p["amount"], p["source"]) for p in out["partner_distributions"]] == [
        (6000.0, "live"),
        (4000.0, "live"),
    ]


def test_unexpected_failure_yields_zero_payload(make_storage):
    class Broken(make_storage):
        def list_billings(self):
            raise RuntimeError("db went away")

    assert build_dashboard(Broken()) == empty_dashboard()


def test_strict_validation_error_propagates(make_storage, row):
    storage = make_storage(billings=[row(month="March", year=2024, amount="n/a")])
    with pytest.raises(ValidationError):
        build_dashboard(storage, strict=True)
    # lenient: the bad amount just counts as 0
    assert build_dashboard(storage)["metrics"]["total_revenue"] == 0.0


def test_resolve_period():
    assert resolve_period("March", "2024") == ("March", 2024)
    assert resolve_period("March", 2024.0) == ("March", 2024)
    assert resolve_period(None, "2024") is None
    assert resolve_period("March", "") is None
    with pytest.raises(ValidationError):
        resolve_period("March", "twenty")
