"""Application service for assignment plans, work records, costs, expenses and revenues."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from profit_tracker.core.config import get_settings
from profit_tracker.core.errors import not_found, validation_error
from profit_tracker.core.responses import Q2, decimal_str, iso
from profit_tracker.models.entities import (
    AllocationType,
    AssignmentPlan,
    ExpenseRecord,
    MonthlyActualCost,
    ResourceType,
    RevenueRecord,
    WorkRecord,
    utcnow,
)
from profit_tracker.repositories.ledger_repository import LedgerRepository
from profit_tracker.services.common import (
    apply_changes,
    normalize_month_start,
    soft_delete,
    validate_resource,
    write_transaction,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AssignmentPlanCreateData:
    project_id: int
    resource_type: ResourceType
    target_month: date
    planned_hours: Decimal
    employee_id: int | None = None
    partner_id: int | None = None


@dataclass(slots=True)
class WorkRecordCreateData:
    project_id: int
    resource_type: ResourceType
    work_date: date
    hours: Decimal
    employee_id: int | None = None
    partner_id: int | None = None
    import_batch_id: str | None = None


@dataclass(slots=True)
class WorkRecordUpdateData:
    hours: Decimal | None = None
    work_date: date | None = None


@dataclass(slots=True)
class MonthlyCostCreateData:
    employee_id: int
    target_month: date
    total_salary: Decimal
    total_work_hours: Decimal


@dataclass(slots=True)
class MonthlyCostUpdateData:
    total_salary: Decimal | None = None
    total_work_hours: Decimal | None = None


@dataclass(slots=True)
class ExpenseCreateData:
    project_id: int
    expense_type: str
    amount: Decimal
    occurred_date: date
    currency: str | None = None
    description: str | None = None
    invoice_number: str | None = None


@dataclass(slots=True)
class ExpenseUpdateData:
    expense_type: str | None = None
    amount: Decimal | None = None
    occurred_date: date | None = None
    description: str | None = None
    invoice_number: str | None = None


@dataclass(slots=True)
class RevenueCreateData:
    project_id: int
    revenue_month: date
    amount: Decimal
    currency: str | None = None
    allocation_type: AllocationType = AllocationType.MONTHLY
    description: str | None = None


@dataclass(slots=True)
class RevenueUpdateData:
    amount: Decimal | None = None
    description: str | None = None


def calculate_unit_cost(total_salary: Decimal, total_work_hours: Decimal) -> Decimal:
    if total_work_hours <= 0:
        raise validation_error("総労働時間は0より大きい値を指定してください")
    return (Decimal(total_salary) / Decimal(total_work_hours)).quantize(Q2, rounding=ROUND_HALF_UP)


class LedgerService:
    """Transactional project data; no role gates beyond authentication."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = LedgerRepository(db)
        self.settings = get_settings()

    # ---------- Serializers ----------
    @staticmethod
    def serialize_assignment_plan(plan: AssignmentPlan) -> dict[str, object]:
        return {
            "plan_id": plan.plan_id,
            "project_id": plan.project_id,
            "resource_type": plan.resource_type.value,
            "employee_id": plan.employee_id,
            "partner_id": plan.partner_id,
            "target_month": iso(plan.target_month),
            "planned_hours": decimal_str(plan.planned_hours),
            "created_at": iso(plan.created_at),
            "updated_at": iso(plan.updated_at),
        }

    @staticmethod
    def serialize_work_record(record: WorkRecord) -> dict[str, object]:
        return {
            "record_id": record.record_id,
            "project_id": record.project_id,
            "resource_type": record.resource_type.value,
            "employee_id": record.employee_id,
            "partner_id": record.partner_id,
            "work_date": iso(record.work_date),
            "hours": decimal_str(record.hours),
            "import_batch_id": record.import_batch_id,
            "created_at": iso(record.created_at),
            "updated_at": iso(record.updated_at),
        }

    @staticmethod
    def serialize_monthly_cost(row: MonthlyActualCost) -> dict[str, object]:
        return {
            "cost_id": row.cost_id,
            "employee_id": row.employee_id,
            "target_month": iso(row.target_month),
            "total_salary": decimal_str(row.total_salary),
            "total_work_hours": decimal_str(row.total_work_hours),
            "calculated_unit_cost": decimal_str(row.calculated_unit_cost),
            "created_at": iso(row.created_at),
            "updated_at": iso(row.updated_at),
        }

    @staticmethod
    def serialize_expense(row: ExpenseRecord) -> dict[str, object]:
        return {
            "expense_id": row.expense_id,
            "project_id": row.project_id,
            "expense_type": row.expense_type,
            "amount": decimal_str(row.amount),
            "currency": row.currency,
            "occurred_date": iso(row.occurred_date),
            "description": row.description,
            "invoice_number": row.invoice_number,
            "created_at": iso(row.created_at),
            "updated_at": iso(row.updated_at),
        }

    @staticmethod
    def serialize_revenue(row: RevenueRecord) -> dict[str, object]:
        return {
            "revenue_id": row.revenue_id,
            "project_id": row.project_id,
            "revenue_month": iso(row.revenue_month),
            "amount": decimal_str(row.amount),
            "currency": row.currency,
            "allocation_type": row.allocation_type.value,
            "description": row.description,
            "created_at": iso(row.created_at),
            "updated_at": iso(row.updated_at),
        }

    # ---------- Assignment plans ----------
    def list_assignment_plans(
        self,
        *,
        project_id: int | None = None,
        target_month: date | None = None,
    ) -> list[AssignmentPlan]:
        if target_month is not None:
            target_month = normalize_month_start(target_month, "target_month")
        return self.repo.list_assignment_plans(project_id=project_id, target_month=target_month)

    def get_assignment_plan(self, plan_id: int) -> AssignmentPlan:
        plan = self.repo.get_assignment_plan(plan_id)
        if plan is None:
            raise not_found("アサイン計画が見つかりません")
        return plan

    def create_assignment_plan(self, data: AssignmentPlanCreateData) -> AssignmentPlan:
        validate_resource(data.resource_type, data.employee_id, data.partner_id)
        plan = AssignmentPlan(
            project_id=data.project_id,
            resource_type=data.resource_type,
            employee_id=data.employee_id if data.resource_type is ResourceType.EMPLOYEE else None,
            partner_id=data.partner_id if data.resource_type is ResourceType.PARTNER else None,
            target_month=normalize_month_start(data.target_month, "target_month"),
            planned_hours=data.planned_hours,
        )
        with write_transaction(self.db):
            self.repo.add(plan)
        self.db.refresh(plan)
        logger.info("Created assignment plan %s for project %s", plan.plan_id, plan.project_id)
        return plan

    def update_assignment_plan(self, plan_id: int, planned_hours: Decimal) -> AssignmentPlan:
        plan = self.get_assignment_plan(plan_id)
        with write_transaction(self.db):
            plan.planned_hours = planned_hours
            plan.updated_at = utcnow()
        self.db.refresh(plan)
        logger.info("Updated assignment plan %s", plan_id)
        return plan

    def delete_assignment_plan(self, plan_id: int) -> None:
        plan = self.get_assignment_plan(plan_id)
        with write_transaction(self.db):
            soft_delete(plan)
        logger.info("Deleted assignment plan %s", plan_id)

    # ---------- Work records ----------
    def list_work_records(
        self,
        *,
        project_id: int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[WorkRecord]:
        if from_date is not None and to_date is not None and to_date < from_date:
            raise validation_error("終了日は開始日以降の日付を指定してください")
        return self.repo.list_work_records(project_id=project_id, from_date=from_date, to_date=to_date)

    def get_work_record(self, record_id: int) -> WorkRecord:
        record = self.repo.get_work_record(record_id)
        if record is None:
            raise not_found("稼働実績が見つかりません")
        return record

    def create_work_record(self, data: WorkRecordCreateData) -> WorkRecord:
        validate_resource(data.resource_type, data.employee_id, data.partner_id)
        record = WorkRecord(
            project_id=data.project_id,
            resource_type=data.resource_type,
            employee_id=data.employee_id if data.resource_type is ResourceType.EMPLOYEE else None,
            partner_id=data.partner_id if data.resource_type is ResourceType.PARTNER else None,
            work_date=data.work_date,
            hours=data.hours,
            import_batch_id=data.import_batch_id,
        )
        with write_transaction(self.db):
            self.repo.add(record)
        self.db.refresh(record)
        logger.info("Created work record %s for project %s", record.record_id, record.project_id)
        return record

    def update_work_record(self, record_id: int, data: WorkRecordUpdateData) -> WorkRecord:
        record = self.get_work_record(record_id)
        with write_transaction(self.db):
            apply_changes(record, data)
        self.db.refresh(record)
        logger.info("Updated work record %s", record_id)
        return record

    def delete_work_record(self, record_id: int) -> None:
        record = self.get_work_record(record_id)
        with write_transaction(self.db):
            soft_delete(record)
        logger.info("Deleted work record %s", record_id)

    # ---------- Monthly actual costs ----------
    def list_monthly_costs(self, *, employee_id: int | None = None) -> list[MonthlyActualCost]:
        return self.repo.list_monthly_costs(employee_id=employee_id)

    def get_monthly_cost(self, cost_id: int) -> MonthlyActualCost:
        row = self.repo.get_monthly_cost(cost_id)
        if row is None:
            raise not_found("給与実績が見つかりません")
        return row

    def create_monthly_cost(self, data: MonthlyCostCreateData) -> MonthlyActualCost:
        row = MonthlyActualCost(
            employee_id=data.employee_id,
            target_month=normalize_month_start(data.target_month, "target_month"),
            total_salary=data.total_salary,
            total_work_hours=data.total_work_hours,
            calculated_unit_cost=calculate_unit_cost(data.total_salary, data.total_work_hours),
        )
        with write_transaction(self.db):
            self.repo.add(row)
        self.db.refresh(row)
        logger.info("Created monthly cost %s for employee %s", row.cost_id, row.employee_id)
        return row

    def update_monthly_cost(self, cost_id: int, data: MonthlyCostUpdateData) -> MonthlyActualCost:
        row = self.get_monthly_cost(cost_id)
        total_salary = data.total_salary if data.total_salary is not None else row.total_salary
        total_work_hours = data.total_work_hours if data.total_work_hours is not None else row.total_work_hours
        unit_cost = calculate_unit_cost(total_salary, total_work_hours)
        with write_transaction(self.db):
            row.total_salary = total_salary
            row.total_work_hours = total_work_hours
            row.calculated_unit_cost = unit_cost
            row.updated_at = utcnow()
        self.db.refresh(row)
        logger.info("Updated monthly cost %s", cost_id)
        return row

    def delete_monthly_cost(self, cost_id: int) -> None:
        row = self.get_monthly_cost(cost_id)
        with write_transaction(self.db):
            self.repo.delete(row)
        logger.info("Deleted monthly cost %s", cost_id)

    # ---------- Expenses ----------
    def list_expenses(self, *, project_id: int | None = None) -> list[ExpenseRecord]:
        return self.repo.list_expenses(project_id=project_id)

    def get_expense(self, expense_id: int) -> ExpenseRecord:
        row = self.repo.get_expense(expense_id)
        if row is None:
            raise not_found("経費が見つかりません")
        return row

    def create_expense(self, data: ExpenseCreateData) -> ExpenseRecord:
        row = ExpenseRecord(
            project_id=data.project_id,
            expense_type=data.expense_type,
            amount=data.amount,
            currency=data.currency or self.settings.default_currency,
            occurred_date=data.occurred_date,
            description=data.description,
            invoice_number=data.invoice_number,
        )
        with write_transaction(self.db):
            self.repo.add(row)
        self.db.refresh(row)
        logger.info("Created expense %s for project %s", row.expense_id, row.project_id)
        return row

    def update_expense(self, expense_id: int, data: ExpenseUpdateData) -> ExpenseRecord:
        row = self.get_expense(expense_id)
        with write_transaction(self.db):
            apply_changes(row, data)
        self.db.refresh(row)
        logger.info("Updated expense %s", expense_id)
        return row

    def delete_expense(self, expense_id: int) -> None:
        row = self.get_expense(expense_id)
        with write_transaction(self.db):
            soft_delete(row)
        logger.info("Deleted expense %s", expense_id)

    # ---------- Revenues ----------
    def list_revenues(self, *, project_id: int | None = None) -> list[RevenueRecord]:
        return self.repo.list_revenues(project_id=project_id)

    def get_revenue(self, revenue_id: int) -> RevenueRecord:
        row = self.repo.get_revenue(revenue_id)
        if row is None:
            raise not_found("売上実績が見つかりません")
        return row

    def create_revenue(self, data: RevenueCreateData) -> RevenueRecord:
        row = RevenueRecord(
            project_id=data.project_id,
            revenue_month=normalize_month_start(data.revenue_month, "revenue_month"),
            amount=data.amount,
            currency=data.currency or self.settings.default_currency,
            allocation_type=data.allocation_type,
            description=data.description,
        )
        with write_transaction(self.db):
            self.repo.add(row)
        self.db.refresh(row)
        logger.info("Created revenue %s for project %s", row.revenue_id, row.project_id)
        return row

    def update_revenue(self, revenue_id: int, data: RevenueUpdateData) -> RevenueRecord:
        row = self.get_revenue(revenue_id)
        with write_transaction(self.db):
            apply_changes(row, data)
        self.db.refresh(row)
        logger.info("Updated revenue %s", revenue_id)
        return row

    def delete_revenue(self, revenue_id: int) -> None:
        row = self.get_revenue(revenue_id)
        with write_transaction(self.db):
            self.repo.delete(row)
        logger.info("Deleted revenue %s", revenue_id)
