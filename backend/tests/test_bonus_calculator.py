# backend/tests/test_bonus_calculator.py
from decimal import Decimal

import pytest

from backoffice.core.errors import ValidationError
from backoffice.services.bonus_calculator import QuarterlyBonusCalculator, parse_pair_key


@pytest.fixture
def storage(make_storage, row):
    return make_storage(
        employees=[row(id=7), row(id=8), row(id=9)],
        projects=[row(id=1), row(id=2), row(id=3)],
        billings=[
            row(project_id=1, month="January", year=2024, amount=Decimal("5000")),
            row(project_id=1, month="February", year=2024, amount="5000"),
            row(project_id=1, month="March", year=2024, amount=Decimal("10000.00")),
            # outside Q1 2024
            row(project_id=1, month="April", year=2024, amount=Decimal("99999")),
            row(project_id=1, month="March", year=2023, amount=Decimal("99999")),
            row(project_id=2, month="February", year=2024, amount=Decimal("333.33")),
        ],
    )


def test_single_pair_scenario(storage):
    result = QuarterlyBonusCalculator(storage).calculate(1, 2024, {"7-1": "10"})

    assert result["message"] == "Successfully calculated quarterly bonuses for 1 employees."
    assert result["skipped"] == []
    (bonus,) = result["bonuses"]
    assert bonus.employee_id == 7
    assert bonus.project_id == 1
    assert bonus.month == "March"
    assert bonus.year == 2024
    assert bonus.amount == Decimal("2000.00")
    assert bonus.percentage == Decimal("10")
    assert bonus.status == "Pending"


def test_amount_rounds_half_up_to_cents(storage):
    result = QuarterlyBonusCalculator(storage).calculate(1, 2024, {"8-2": 12.5})
    # 333.33 * 12.5% = 41.66625
    assert result["bonuses"][0].amount == Decimal("41.67")
    assert result["bonuses"][0].percentage == Decimal("12.5")


def test_bonus_month_is_last_month_of_quarter(make_storage, row):
    storage = make_storage(
        employees=[row(id=1)],
        projects=[row(id=1)],
        billings=[row(project_id=1, month="November", year=2024, amount="100")],
    )
    result = QuarterlyBonusCalculator(storage).calculate(4, 2024, {"1-1": "50"})
    assert result["bonuses"][0].month == "December"
    assert result["bonuses"][0].amount == Decimal("50.00")


def test_projects_without_quarter_billing_get_no_bonus(storage):
    result = QuarterlyBonusCalculator(storage).calculate(1, 2024, {"7-3": "10"})
    assert result["bonuses"] == []
    assert result["skipped"] == [{"key": "7-3", "reason": "no billing for project in quarter"}]
    assert storage.created == []


def test_invalid_entries_are_skipped(storage):
    percentages = {
        "7-1": "10",
        "abc": "10",
        "7-1-2": "10",
        "8-1": "not a number",
        "9-1": "0",
        "9-2": -5,
        "42-1": "10",
        "7-42": "10",
        "8-2": None,
    }
    result = QuarterlyBonusCalculator(storage).calculate(1, 2024, percentages)

    assert [(b.employee_id, b.project_id) for b in result["bonuses"]] == [(7, 1), (42, 1)]
    reasons = {s["key"]: s["reason"] for s in result["skipped"]}
    assert reasons == {
        "abc": "malformed key",
        "7-1-2": "malformed key",
        "8-1": "percentage missing or not positive",
        "9-1": "percentage missing or not positive",
        "9-2": "percentage missing or not positive",
        "7-42": "no billing for project in quarter",
        "8-2": "percentage missing or not positive",
    }


def test_restrictions_limit_eligible_pairs(storage):
    calc = QuarterlyBonusCalculator(storage)
    result = calc.calculate(
        1,
        2024,
        {"7-1": "10", "8-1": "10", "8-2": "10"},
        project_ids=[1],
        employee_ids=[7, 8],
    )
    assert [(b.employee_id, b.project_id) for b in result["bonuses"]] == [(7, 1), (8, 1)]
    assert result["skipped"] == [{"key": "8-2", "reason": "project not selected"}]
    assert result["message"] == "Successfully calculated quarterly bonuses for 2 employees."


def test_employee_restriction_skips_unselected_employees(storage):
    result = QuarterlyBonusCalculator(storage).calculate(
        1, 2024, {"7-1": "10", "9-1": "10"}, employee_ids=[9]
    )
    assert [b.employee_id for b in result["bonuses"]] == [9]
    assert result["skipped"] == [{"key": "7-1", "reason": "employee not selected"}]


def test_billings_alone_are_enough(make_storage, row):
    # no employee or project rows: pairs are not checked for existence
    storage = make_storage(
        billings=[
            row(project_id=1, month="January", year=2024, amount="5000"),
            row(project_id=1, month="February", year=2024, amount="5000"),
            row(project_id=1, month="March", year=2024, amount="10000"),
        ],
    )
    result = QuarterlyBonusCalculator(storage).calculate(1, 2024, {"7-1": "10"})
    assert result["skipped"] == []
    (bonus,) = result["bonuses"]
    assert (bonus.employee_id, bonus.project_id, bonus.month) == (7, 1, "March")
    assert bonus.amount == Decimal("2000.00")
    assert len(storage.created) == 1


def test_percentages_above_100_are_not_clamped(storage):
    result = QuarterlyBonusCalculator(storage).calculate(1, 2024, {"7-1": "150"})
    assert result["bonuses"][0].amount == Decimal("30000.00")
    result = QuarterlyBonusCalculator(storage).calculate(1, 2024, {"7-1": "1500"})
    assert result["bonuses"][0].percentage == Decimal("1500")
    assert result["bonuses"][0].amount == Decimal("300000.00")


def test_percentage_is_rounded_to_cents_before_use(storage):
    result = QuarterlyBonusCalculator(storage).calculate(1, 2024, {"7-1": "12.345"})
    (bonus,) = result["bonuses"]
    assert bonus.percentage == Decimal("12.35")
    # 20000 * 12.35%
    assert bonus.amount == Decimal("2470.00")


def test_percentage_beyond_column_range_is_skipped(storage):
    result = QuarterlyBonusCalculator(storage).calculate(1, 2024, {"7-1": "100000"})
    assert result["bonuses"] == []
    assert result["skipped"] == [{"key": "7-1", "reason": "percentage too large"}]


def test_invalid_quarter_is_rejected(storage):
    with pytest.raises(ValidationError):
        QuarterlyBonusCalculator(storage).calculate(5, 2024, {"7-1": "10"})
    assert storage.created == []


def test_rerun_creates_duplicates(storage):
    calc = QuarterlyBonusCalculator(storage)
    calc.calculate(1, 2024, {"7-1": "10"})
    calc.calculate(1, 2024, {"7-1": "10"})
    assert len(storage.created) == 2


@pytest.mark.parametrize(
    "key,expected",
    [("7-1", (7, 1)), ("07-001", (7, 1)), ("7_1", None), ("-1", None), ("a-b", None), (71, None)],
)
def test_parse_pair_key(key, expected):
    assert parse_pair_key(key) == expected
