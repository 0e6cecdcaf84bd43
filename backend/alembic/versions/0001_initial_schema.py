"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 10:00:00
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money(name: str, nullable: bool = False, precision: int = 10):
    return sa.Column(name, sa.Numeric(precision, 2), nullable=nullable, server_default="0")


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("first_name", sa.String, nullable=False),
        sa.Column("last_name", sa.String, nullable=False),
        sa.Column("email", sa.String, nullable=False),
        sa.Column("department", sa.String, nullable=False),
        sa.Column("status", sa.String, nullable=False, server_default="Active"),
        sa.Column("project_id", sa.Integer, nullable=True),
        _money("salary"),
        sa.Column("role", sa.String, nullable=True),
        sa.Column("avatar", sa.Text, nullable=True),
        sa.UniqueConstraint("email", name="uix_employee_email"),
    )
    op.create_index("ix_employees_id", "employees", ["id"])

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("client", sa.String, nullable=False),
        sa.Column("status", sa.String, nullable=False),
        sa.Column("progress", sa.Integer, nullable=False, server_default="0"),
        _money("value", precision=12),
        sa.Column("deadline", sa.Date, nullable=False),
        sa.Column("manager_id", sa.Integer, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_project_progress"),
    )
    op.create_index("ix_projects_id", "projects", ["id"])
    op.create_index("ix_projects_status", "projects", ["status"])

    op.create_table(
        "billings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("project_id", sa.Integer, nullable=False),
        sa.Column("month", sa.String(20), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        _money("amount"),
        sa.Column("status", sa.String, nullable=False),
        sa.Column("invoice_date", sa.String, nullable=True),
        sa.Column("payment_date", sa.String, nullable=True),
    )
    op.create_index("ix_billings_id", "billings", ["id"])
    op.create_index("ix_billings_project", "billings", ["project_id"])
    op.create_index("ix_billings_period", "billings", ["year", "month"])

    op.create_table(
        "revenues",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("month", sa.String(20), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        _money("amount"),
        _money("expenses"),
        _money("profit"),
    )
    op.create_index("ix_revenues_id", "revenues", ["id"])

    op.create_table(
        "partners",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("email", sa.String, nullable=False),
        sa.Column("share", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.UniqueConstraint("email", name="uix_partner_email"),
    )
    op.create_index("ix_partners_id", "partners", ["id"])

    op.create_table(
        "profit_distributions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("partner_id", sa.Integer, nullable=False),
        sa.Column("month", sa.String(20), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        _money("amount"),
        sa.Column("percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
    )
    op.create_index("ix_profit_distributions_id", "profit_distributions", ["id"])
    op.create_index(
        "ix_profit_dist_partner_period", "profit_distributions", ["partner_id", "year", "month"]
    )

    op.create_table(
        "bonuses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("project_id", sa.Integer, nullable=False),
        sa.Column("employee_id", sa.Integer, nullable=False),
        sa.Column("month", sa.String(20), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        _money("amount"),
        sa.Column("percentage", sa.Numeric(7, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String, nullable=False, server_default="Pending"),
    )
    op.create_index("ix_bonuses_id", "bonuses", ["id"])
    op.create_index("ix_bonuses_project", "bonuses", ["project_id"])
    op.create_index("ix_bonuses_employee", "bonuses", ["employee_id"])

    op.create_table(
        "salaries",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("employee_id", sa.Integer, nullable=False),
        sa.Column("month", sa.String(20), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("basic_salary", sa.Numeric(10, 2), nullable=False),
        _money("bonus", nullable=True),
        _money("tax_deduction", nullable=True),
        _money("loan_deduction", nullable=True),
        _money("arrears", nullable=True),
        _money("travel_allowance", nullable=True),
        sa.Column("net_salary", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String, nullable=False, server_default="Pending"),
        sa.Column("payment_date", sa.String, nullable=True),
    )
    op.create_index("ix_salaries_id", "salaries", ["id"])
    op.create_index("ix_salaries_employee", "salaries", ["employee_id"])
    op.create_index("ix_salaries_period", "salaries", ["year", "month"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("category", sa.String, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        _money("amount"),
        sa.Column("month", sa.String(20), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("date", sa.String, nullable=False),
        sa.Column("payment_method", sa.String, nullable=True),
        sa.Column("receipt_url", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
    )
    op.create_index("ix_expenses_id", "expenses", ["id"])
    op.create_index("ix_expenses_period", "expenses", ["year", "month"])

    op.create_table(
        "company_settings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("company_name", sa.String, nullable=False),
        sa.Column("tax_id", sa.String, nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("city", sa.String, nullable=False),
        sa.Column("state", sa.String, nullable=False),
        sa.Column("postal_code", sa.String, nullable=False),
        sa.Column("fiscal_year_start", sa.String, nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_company_settings_id", "company_settings", ["id"])


def downgrade() -> None:
    for table in (
        "company_settings",
        "expenses",
        "salaries",
        "bonuses",
        "profit_distributions",
        "partners",
        "revenues",
        "billings",
        "projects",
        "employees",
    ):
        op.drop_table(table)
