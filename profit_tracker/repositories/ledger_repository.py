"""Repository helpers for plans, work records, costs, expenses and revenues."""

from __future__ import annotations

from datetime import date

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from profit_tracker.models.entities import (
    AssignmentPlan,
    ExpenseRecord,
    MonthlyActualCost,
    RevenueRecord,
    WorkRecord,
)


class LedgerRepository:
    """Persistence operations for transactional project data."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def add(self, row: object) -> None:
        self.db.add(row)
        self.db.flush()

    def delete(self, row: object) -> None:
        self.db.delete(row)
        self.db.flush()

    # ---------- Assignment plans ----------
    def list_assignment_plans(
        self,
        *,
        project_id: int | None = None,
        target_month: date | None = None,
    ) -> list[AssignmentPlan]:
        conditions = [AssignmentPlan.deleted_at.is_(None)]
        if project_id is not None:
            conditions.append(AssignmentPlan.project_id == project_id)
        if target_month is not None:
            conditions.append(AssignmentPlan.target_month == target_month)
        return self.db.scalars(
            select(AssignmentPlan)
            .where(and_(*conditions))
            .order_by(AssignmentPlan.target_month.desc(), AssignmentPlan.plan_id.desc())
        ).all()

    def get_assignment_plan(self, plan_id: int) -> AssignmentPlan | None:
        return self.db.scalar(
            select(AssignmentPlan).where(
                and_(AssignmentPlan.plan_id == plan_id, AssignmentPlan.deleted_at.is_(None))
            )
        )

    # ---------- Work records ----------
    def list_work_records(
        self,
        *,
        project_id: int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[WorkRecord]:
        conditions = [WorkRecord.deleted_at.is_(None)]
        if project_id is not None:
            conditions.append(WorkRecord.project_id == project_id)
        if from_date is not None:
            conditions.append(WorkRecord.work_date >= from_date)
        if to_date is not None:
            conditions.append(WorkRecord.work_date <= to_date)
        return self.db.scalars(
            select(WorkRecord)
            .where(and_(*conditions))
            .order_by(WorkRecord.work_date.desc(), WorkRecord.record_id.desc())
        ).all()

    def get_work_record(self, record_id: int) -> WorkRecord | None:
        return self.db.scalar(
            select(WorkRecord).where(and_(WorkRecord.record_id == record_id, WorkRecord.deleted_at.is_(None)))
        )

    # ---------- Monthly actual costs ----------
    def list_monthly_costs(self, *, employee_id: int | None = None) -> list[MonthlyActualCost]:
        statement = select(MonthlyActualCost)
        if employee_id is not None:
            statement = statement.where(MonthlyActualCost.employee_id == employee_id)
        return self.db.scalars(
            statement.order_by(MonthlyActualCost.target_month.desc(), MonthlyActualCost.cost_id.desc())
        ).all()

    def get_monthly_cost(self, cost_id: int) -> MonthlyActualCost | None:
        return self.db.scalar(select(MonthlyActualCost).where(MonthlyActualCost.cost_id == cost_id))

    # ---------- Expenses ----------
    def list_expenses(self, *, project_id: int | None = None) -> list[ExpenseRecord]:
        conditions = [ExpenseRecord.deleted_at.is_(None)]
        if project_id is not None:
            conditions.append(ExpenseRecord.project_id == project_id)
        return self.db.scalars(
            select(ExpenseRecord)
            .where(and_(*conditions))
            .order_by(ExpenseRecord.occurred_date.desc(), ExpenseRecord.expense_id.desc())
        ).all()

    def get_expense(self, expense_id: int) -> ExpenseRecord | None:
        return self.db.scalar(
            select(ExpenseRecord).where(
                and_(ExpenseRecord.expense_id == expense_id, ExpenseRecord.deleted_at.is_(None))
            )
        )

    # ---------- Revenues ----------
    def list_revenues(self, *, project_id: int | None = None) -> list[RevenueRecord]:
        statement = select(RevenueRecord)
        if project_id is not None:
            statement = statement.where(RevenueRecord.project_id == project_id)
        return self.db.scalars(
            statement.order_by(RevenueRecord.revenue_month.desc(), RevenueRecord.revenue_id.desc())
        ).all()

    def get_revenue(self, revenue_id: int) -> RevenueRecord | None:
        return self.db.scalar(select(RevenueRecord).where(RevenueRecord.revenue_id == revenue_id))
