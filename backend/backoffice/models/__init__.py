# backend/backoffice/models/__init__.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Date,
    UniqueConstraint,
    Index,
    CheckConstraint,
    func,
    Numeric,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Foreign keys are plain integer references: rows are resolved by lookup at
# aggregation time and deletions never cascade across entities.


# =========================
# People & Projects
# =========================
class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    department = Column(String, nullable=False)
    status = Column(String, nullable=False, default="Active")
    project_id = Column(Integer, nullable=True)
    salary = Column(Numeric(10, 2), nullable=False, default=0)
    role = Column(String, nullable=True)
    avatar = Column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("email", name="uix_employee_email"),)


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    client = Column(String, nullable=False)
    status = Column(String, nullable=False)
    progress = Column(Integer, nullable=False, default=0)
    value = Column(Numeric(12, 2), nullable=False, default=0)
    deadline = Column(Date, nullable=False)
    manager_id = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_project_progress"),
        Index("ix_projects_status", "status"),
    )


# =========================
# Billing & Revenue
# =========================
class Billing(Base):
    __tablename__ = "billings"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, nullable=False)
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String, nullable=False)
    invoice_date = Column(String, nullable=True)
    payment_date = Column(String, nullable=True)

    __table_args__ = (
        Index("ix_billings_project", "project_id"),
        Index("ix_billings_period", "year", "month"),
    )


class Revenue(Base):
    __tablename__ = "revenues"

    id = Column(Integer, primary_key=True, index=True)
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    expenses = Column(Numeric(10, 2), nullable=False, default=0)
    profit = Column(Numeric(10, 2), nullable=False, default=0)


# =========================
# Partners & Profit sharing
# =========================
class Partner(Base):
    __tablename__ = "partners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    share = Column(Numeric(5, 2), nullable=False, default=0)  # percent of profit

    __table_args__ = (UniqueConstraint("email", name="uix_partner_email"),)


class ProfitDistribution(Base):
    __tablename__ = "profit_distributions"

    id = Column(Integer, primary_key=True, index=True)
    partner_id = Column(Integer, nullable=False)
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    percentage = Column(Numeric(5, 2), nullable=False, default=0)

    __table_args__ = (Index("ix_profit_dist_partner_period", "partner_id", "year", "month"),)


# =========================
# Compensation
# =========================
class Bonus(Base):
    __tablename__ = "bonuses"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, nullable=False)
    employee_id = Column(Integer, nullable=False)
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    percentage = Column(Numeric(7, 2), nullable=False, default=0)
    status = Column(String, nullable=False, default="Pending")

    __table_args__ = (
        Index("ix_bonuses_project", "project_id"),
        Index("ix_bonuses_employee", "employee_id"),
    )


class Salary(Base):
    __tablename__ = "salaries"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, nullable=False)
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    basic_salary = Column(Numeric(10, 2), nullable=False)
    bonus = Column(Numeric(10, 2), nullable=True, default=0)
    tax_deduction = Column(Numeric(10, 2), nullable=True, default=0)
    loan_deduction = Column(Numeric(10, 2), nullable=True, default=0)
    arrears = Column(Numeric(10, 2), nullable=True, default=0)
    travel_allowance = Column(Numeric(10, 2), nullable=True, default=0)
    net_salary = Column(Numeric(10, 2), nullable=False)
    status = Column(String, nullable=False, default="Pending")
    payment_date = Column(String, nullable=True)

    __table_args__ = (
        Index("ix_salaries_employee", "employee_id"),
        Index("ix_salaries_period", "year", "month"),
    )


# =========================
# Operating expenses
# =========================
class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String, nullable=False)  # Tax, Rent, Utilities ...
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    date = Column(String, nullable=False)  # exact day, ISO string
    payment_method = Column(String, nullable=True)
    receipt_url = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (Index("ix_expenses_period", "year", "month"),)


# =========================
# Company
# =========================
class CompanySettings(Base):
    __tablename__ = "company_settings"

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String, nullable=False)
    tax_id = Column(String, nullable=False)
    address = Column(Text, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    postal_code = Column(String, nullable=False)
    fiscal_year_start = Column(String, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
