# backend/scripts/seed_demo_data.py
"""
Load a small demo data set (Q1 2024) so the dashboard has something to show.

Usage:
    cd backend
    python scripts/init_db.py
    python scripts/seed_demo_data.py [--with-bonuses]
"""
import argparse
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from backoffice.core.config import SessionLocal  # noqa: E402
from backoffice.models import (  # noqa: E402
    Billing,
    CompanySettings,
    Employee,
    Expense,
    Partner,
    ProfitDistribution,
    Project,
    Revenue,
    Salary,
)
from backoffice.services.bonus_calculator import QuarterlyBonusCalculator  # noqa: E402
from backoffice.storage import Storage  # noqa: E402

Q1 = ("January", "February", "March")


def seed(db) -> None:
    if db.query(Employee).first():
        print("Employees already present, skipping seed.")
        return

    alice = Employee(first_name="Alice", last_name="Moreau", email="alice@example.com",
                     department="Engineering", status="Active", salary=Decimal("6500"), role="Lead")
    bora = Employee(first_name="Bora", last_name="Yilmaz", email="bora@example.com",
                    department="Engineering", status="Active", salary=Decimal("5200"))
    chen = Employee(first_name="Chen", last_name="Li", email="chen@example.com",
                    department="Finance", status="On Leave", salary=Decimal("4800"))
    db.add_all([alice, bora, chen])
    db.flush()

    portal = Project(name="Client Portal", client="Northwind", status="Active", progress=60,
                     value=Decimal("120000"), deadline=date(2024, 9, 30), manager_id=alice.id)
    audit = Project(name="Ledger Audit", client="Contoso", status="In Progress", progress=20,
                    value=Decimal("40000"), deadline=date(2024, 6, 30), manager_id=None)
    db.add_all([portal, audit])
    db.flush()

    for month, amount in zip(Q1, ("5000", "5000", "10000")):
        db.add(Billing(project_id=portal.id, month=month, year=2024, amount=Decimal(amount), status="Paid"))
    db.add(Billing(project_id=audit.id, month="March", year=2024, amount=Decimal("4000"), status="Invoiced"))

    for month in Q1:
        db.add(Expense(category="Rent", description="Office rent", amount=Decimal("2500"),
                       month=month, year=2024, date=f"2024-{Q1.index(month) + 1:02d}-01",
                       payment_method="Bank transfer"))
    db.add(Expense(category="Utilities", description="Electricity", amount=Decimal("320.50"),
                   month="March", year=2024, date="2024-03-15"))

    p1 = Partner(name="Defne Kaya", email="defne@example.com", share=Decimal("60"))
    p2 = Partner(name="Emil Novak", email="emil@example.com", share=Decimal("40"))
    db.add_all([p1, p2])
    db.flush()
    db.add(ProfitDistribution(partner_id=p1.id, month="March", year=2024,
                              amount=Decimal("4500"), percentage=Decimal("60")))

    db.add(Revenue(month="March", year=2024, amount=Decimal("14000"),
                   expenses=Decimal("2820.50"), profit=Decimal("11179.50")))
    db.add(Salary(employee_id=bora.id, month="March", year=2024, basic_salary=Decimal("5200"),
                  bonus=Decimal("0"), tax_deduction=Decimal("780"), loan_deduction=Decimal("0"),
                  arrears=Decimal("0"), travel_allowance=Decimal("150"), net_salary=Decimal("4570")))
    db.add(CompanySettings(company_name="Demo Back Office Ltd", tax_id="TR-0000001",
                           address="1 Demo Street", city="Istanbul", state="Istanbul",
                           postal_code="34000", fiscal_year_start="January"))
    db.commit()
    print("Seeded employees, projects, billings, expenses, partners and settings.")


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--with-bonuses", action="store_true", help="run the Q1 2024 bonus calculation afterwards")
    args = ap.parse_args()

    db = SessionLocal()
    try:
        seed(db)
        if args.with_bonuses:
            storage = Storage(db)
            employees = {e.email: e.id for e in storage.list_employees()}
            project_id = storage.list_projects()[0].id
            result = QuarterlyBonusCalculator(storage).calculate(
                quarter=1,
                year=2024,
                percentages={
                    f"{employees['alice@example.com']}-{project_id}": "10",
                    f"{employees['bora@example.com']}-{project_id}": "5",
                },
            )
            print(result["message"])
    finally:
        db.close()


if __name__ == "__main__":
    main()
