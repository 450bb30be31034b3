"""initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from profit_tracker.db.views import create_reporting_views, drop_reporting_views

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


user_role = postgresql.ENUM("admin", "manager", "user", name="user_role", create_type=False)
contract_unit = postgresql.ENUM("時給", "日額", "月額", name="contract_unit", create_type=False)
service_type = postgresql.ENUM("コンサル", "テスト", "ライセンス", name="service_type", create_type=False)
project_status = postgresql.ENUM("進行中", "完了", "一時停止", "キャンセル", name="project_status", create_type=False)
contract_status = postgresql.ENUM("締結済", "交渉中", "キャンセル", "期限切れ", name="contract_status", create_type=False)
resource_type = postgresql.ENUM("employee", "partner", name="resource_type", create_type=False)
allocation_type = postgresql.ENUM("monthly", "one_time", name="allocation_type", create_type=False)

ENUM_TYPES = (
    user_role,
    contract_unit,
    service_type,
    project_status,
    contract_status,
    resource_type,
    allocation_type,
)


def _timestamps(*, soft_delete: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]
    if soft_delete:
        columns.append(sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True))
    return columns


def upgrade() -> None:
    for enum_type in ENUM_TYPES:
        enum_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "clients",
        sa.Column("client_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("client_code", sa.String(length=32), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("industry", sa.String(length=128), nullable=True),
        sa.Column("payment_terms", sa.String(length=255), nullable=True),
        sa.Column("contact_person", sa.String(length=255), nullable=True),
        sa.Column("contact_email", sa.String(length=320), nullable=True),
        sa.Column("contact_tel", sa.String(length=32), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "employees",
        sa.Column("employee_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("employee_code", sa.String(length=32), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("name_kana", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=128), nullable=True),
        sa.Column("position", sa.String(length=128), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("standard_unit_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("standard_unit_cost_currency", sa.String(length=3), nullable=False, server_default="JPY"),
        *_timestamps(),
    )
    op.create_index("ix_employees_department", "employees", ["department"])

    op.create_table(
        "employee_cost_history",
        sa.Column("history_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.employee_id"), nullable=False),
        sa.Column("standard_unit_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("effective_from", sa.Date(), nullable=False),
        sa.Column("effective_to", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("standard_unit_cost >= 0", name="ck_cost_history_unit_cost_non_negative"),
    )
    op.create_index(
        "ix_cost_history_employee_effective",
        "employee_cost_history",
        ["employee_id", "effective_from"],
    )

    op.create_table(
        "partners",
        sa.Column("partner_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("partner_code", sa.String(length=32), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("contract_unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("contract_unit", contract_unit, nullable=False),
        sa.Column("contract_unit_currency", sa.String(length=3), nullable=False, server_default="JPY"),
        sa.Column("contact_email", sa.String(length=320), nullable=True),
        sa.Column("contact_tel", sa.String(length=32), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("contract_unit_price >= 0", name="ck_partners_unit_price_non_negative"),
    )

    op.create_table(
        "projects",
        sa.Column("project_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_code", sa.String(length=32), nullable=False, unique=True),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.client_id"), nullable=False),
        sa.Column("pm_employee_id", sa.Integer(), sa.ForeignKey("employees.employee_id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("service_type", service_type, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("contract_amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("budget_revenue", sa.Numeric(14, 2), nullable=True),
        sa.Column("budget_cost", sa.Numeric(14, 2), nullable=True),
        sa.Column("status", project_status, nullable=False, server_default="進行中"),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_projects_client_id", "projects", ["client_id"])
    op.create_index("ix_projects_pm_employee_id", "projects", ["pm_employee_id"])

    op.create_table(
        "contracts",
        sa.Column("contract_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("contract_number", sa.String(length=64), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("contract_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("contract_status", contract_status, nullable=False, server_default="締結済"),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_contracts_project_id", "contracts", ["project_id"])

    op.create_table(
        "assignment_plans",
        sa.Column("plan_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("resource_type", resource_type, nullable=False),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.employee_id"), nullable=True),
        sa.Column("partner_id", sa.Integer(), sa.ForeignKey("partners.partner_id"), nullable=True),
        sa.Column("target_month", sa.Date(), nullable=False),
        sa.Column("planned_hours", sa.Numeric(8, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("planned_hours >= 0", name="ck_assignment_plans_hours_non_negative"),
    )
    op.create_index("ix_assignment_plans_project_month", "assignment_plans", ["project_id", "target_month"])

    op.create_table(
        "work_records",
        sa.Column("record_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("resource_type", resource_type, nullable=False),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.employee_id"), nullable=True),
        sa.Column("partner_id", sa.Integer(), sa.ForeignKey("partners.partner_id"), nullable=True),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("hours", sa.Numeric(6, 2), nullable=False),
        sa.Column("import_batch_id", sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("hours >= 0", name="ck_work_records_hours_non_negative"),
    )
    op.create_index("ix_work_records_project_date", "work_records", ["project_id", "work_date"])

    op.create_table(
        "monthly_actual_costs",
        sa.Column("cost_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.employee_id"), nullable=False),
        sa.Column("target_month", sa.Date(), nullable=False),
        sa.Column("total_salary", sa.Numeric(14, 2), nullable=False),
        sa.Column("total_work_hours", sa.Numeric(8, 2), nullable=False),
        sa.Column("calculated_unit_cost", sa.Numeric(12, 2), nullable=True),
        *_timestamps(soft_delete=False),
        sa.CheckConstraint("total_salary >= 0", name="ck_monthly_costs_salary_non_negative"),
        sa.CheckConstraint("total_work_hours > 0", name="ck_monthly_costs_hours_positive"),
        sa.UniqueConstraint("employee_id", "target_month", name="uq_monthly_costs_employee_month"),
    )

    op.create_table(
        "expense_records",
        sa.Column("expense_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("expense_type", sa.String(length=64), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="JPY"),
        sa.Column("occurred_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("invoice_number", sa.String(length=64), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_expense_records_project_date", "expense_records", ["project_id", "occurred_date"])

    op.create_table(
        "revenue_records",
        sa.Column("revenue_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("revenue_month", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="JPY"),
        sa.Column("allocation_type", allocation_type, nullable=False, server_default="monthly"),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(soft_delete=False),
    )
    op.create_index("ix_revenue_records_project_month", "revenue_records", ["project_id", "revenue_month"])

    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=64), nullable=False, unique=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.employee_id"), nullable=True),
        sa.Column("role", user_role, nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(soft_delete=False),
    )

    create_reporting_views(op.get_bind())


def downgrade() -> None:
    drop_reporting_views(op.get_bind())

    op.drop_table("users")

    op.drop_index("ix_revenue_records_project_month", table_name="revenue_records")
    op.drop_table("revenue_records")

    op.drop_index("ix_expense_records_project_date", table_name="expense_records")
    op.drop_table("expense_records")

    op.drop_table("monthly_actual_costs")

    op.drop_index("ix_work_records_project_date", table_name="work_records")
    op.drop_table("work_records")

    op.drop_index("ix_assignment_plans_project_month", table_name="assignment_plans")
    op.drop_table("assignment_plans")

    op.drop_index("ix_contracts_project_id", table_name="contracts")
    op.drop_table("contracts")

    op.drop_index("ix_projects_pm_employee_id", table_name="projects")
    op.drop_index("ix_projects_client_id", table_name="projects")
    op.drop_table("projects")

    op.drop_table("partners")

    op.drop_index("ix_cost_history_employee_effective", table_name="employee_cost_history")
    op.drop_table("employee_cost_history")

    op.drop_index("ix_employees_department", table_name="employees")
    op.drop_table("employees")

    op.drop_table("clients")

    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(op.get_bind(), checkfirst=True)
