"""ORM entities for the profitability schema."""

from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from profit_tracker.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class ContractUnit(str, enum.Enum):
    HOURLY = "時給"
    DAILY = "日額"
    MONTHLY = "月額"


class ServiceType(str, enum.Enum):
    CONSULTING = "コンサル"
    TESTING = "テスト"
    LICENSE = "ライセンス"


class ProjectStatus(str, enum.Enum):
    IN_PROGRESS = "進行中"
    COMPLETED = "完了"
    ON_HOLD = "一時停止"
    CANCELLED = "キャンセル"


class ContractStatus(str, enum.Enum):
    SIGNED = "締結済"
    NEGOTIATING = "交渉中"
    CANCELLED = "キャンセル"
    EXPIRED = "期限切れ"


class ResourceType(str, enum.Enum):
    EMPLOYEE = "employee"
    PARTNER = "partner"


class AllocationType(str, enum.Enum):
    MONTHLY = "monthly"
    ONE_TIME = "one_time"


def _enum_column(enum_cls: type[enum.Enum], name: str) -> SQLEnum:
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
    )


class Client(Base):
    __tablename__ = "clients"

    client_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[str | None] = mapped_column(String(128), nullable=True)
    payment_terms: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    contact_tel: Mapped[str | None] = mapped_column(String(32), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (Index("ix_employees_department", "department"),)

    employee_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_kana: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department: Mapped[str | None] = mapped_column(String(128), nullable=True)
    position: Mapped[str | None] = mapped_column(String(128), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    standard_unit_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    standard_unit_cost_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="JPY")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class EmployeeCostHistory(Base):
    __tablename__ = "employee_cost_history"
    __table_args__ = (
        CheckConstraint("standard_unit_cost >= 0", name="ck_cost_history_unit_cost_non_negative"),
        Index("ix_cost_history_employee_effective", "employee_id", "effective_from"),
    )

    history_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.employee_id"), nullable=False)
    standard_unit_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class Partner(Base):
    __tablename__ = "partners"
    __table_args__ = (
        CheckConstraint("contract_unit_price >= 0", name="ck_partners_unit_price_non_negative"),
    )

    partner_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    partner_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contract_unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    contract_unit: Mapped[ContractUnit] = mapped_column(_enum_column(ContractUnit, "contract_unit"), nullable=False)
    contract_unit_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="JPY")
    contact_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    contact_tel: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_client_id", "client_id"),
        Index("ix_projects_pm_employee_id", "pm_employee_id"),
    )

    project_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    client_id: Mapped[int] = mapped_column(Integer, ForeignKey("clients.client_id"), nullable=False)
    pm_employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.employee_id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    service_type: Mapped[ServiceType] = mapped_column(_enum_column(ServiceType, "service_type"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    budget_revenue: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    budget_cost: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        _enum_column(ProjectStatus, "project_status"),
        nullable=False,
        default=ProjectStatus.IN_PROGRESS,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Contract(Base):
    __tablename__ = "contracts"
    __table_args__ = (Index("ix_contracts_project_id", "project_id"),)

    contract_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.project_id"), nullable=False)
    contract_number: Mapped[str] = mapped_column(String(64), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    contract_status: Mapped[ContractStatus] = mapped_column(
        _enum_column(ContractStatus, "contract_status"),
        nullable=False,
        default=ContractStatus.SIGNED,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class AssignmentPlan(Base):
    __tablename__ = "assignment_plans"
    __table_args__ = (
        CheckConstraint("planned_hours >= 0", name="ck_assignment_plans_hours_non_negative"),
        Index("ix_assignment_plans_project_month", "project_id", "target_month"),
    )

    plan_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.project_id"), nullable=False)
    resource_type: Mapped[ResourceType] = mapped_column(_enum_column(ResourceType, "resource_type"), nullable=False)
    employee_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("employees.employee_id"), nullable=True)
    partner_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("partners.partner_id"), nullable=True)
    target_month: Mapped[date] = mapped_column(Date, nullable=False)
    planned_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class WorkRecord(Base):
    __tablename__ = "work_records"
    __table_args__ = (
        CheckConstraint("hours >= 0", name="ck_work_records_hours_non_negative"),
        Index("ix_work_records_project_date", "project_id", "work_date"),
    )

    record_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.project_id"), nullable=False)
    resource_type: Mapped[ResourceType] = mapped_column(_enum_column(ResourceType, "resource_type"), nullable=False)
    employee_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("employees.employee_id"), nullable=True)
    partner_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("partners.partner_id"), nullable=True)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    import_batch_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class MonthlyActualCost(Base):
    __tablename__ = "monthly_actual_costs"
    __table_args__ = (
        CheckConstraint("total_salary >= 0", name="ck_monthly_costs_salary_non_negative"),
        CheckConstraint("total_work_hours > 0", name="ck_monthly_costs_hours_positive"),
        UniqueConstraint("employee_id", "target_month", name="uq_monthly_costs_employee_month"),
    )

    cost_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.employee_id"), nullable=False)
    target_month: Mapped[date] = mapped_column(Date, nullable=False)
    total_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    total_work_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    calculated_unit_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class ExpenseRecord(Base):
    __tablename__ = "expense_records"
    __table_args__ = (Index("ix_expense_records_project_date", "project_id", "occurred_date"),)

    expense_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.project_id"), nullable=False)
    expense_type: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="JPY")
    occurred_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    invoice_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class RevenueRecord(Base):
    __tablename__ = "revenue_records"
    __table_args__ = (Index("ix_revenue_records_project_month", "project_id", "revenue_month"),)

    revenue_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, ForeignKey("projects.project_id"), nullable=False)
    revenue_month: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="JPY")
    allocation_type: Mapped[AllocationType] = mapped_column(
        _enum_column(AllocationType, "allocation_type"),
        nullable=False,
        default=AllocationType.MONTHLY,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class User(Base):
    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    employee_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("employees.employee_id"), nullable=True)
    role: Mapped[UserRole] = mapped_column(_enum_column(UserRole, "user_role"), nullable=False, default=UserRole.USER)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
