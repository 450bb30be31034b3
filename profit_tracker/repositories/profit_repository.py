"""Read-only queries over the profit view and revenue aggregates."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.engine import RowMapping
from sqlalchemy.orm import Session

from profit_tracker.models.entities import Client, Project, ProjectStatus, RevenueRecord
from profit_tracker.models.views import project_profit_standard as profit_view


class ProfitRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def project_profit(self, project_id: int) -> RowMapping | None:
        return self.db.execute(
            select(profit_view).where(profit_view.c.project_id == project_id)
        ).mappings().first()

    def pm_profit(self, pm_employee_id: int) -> list[RowMapping]:
        return self.db.execute(
            select(profit_view)
            .where(profit_view.c.pm_employee_id == pm_employee_id)
            .order_by(profit_view.c.project_id)
        ).mappings().all()

    def all_project_profit(self) -> list[RowMapping]:
        return self.db.execute(select(profit_view).order_by(profit_view.c.project_id)).mappings().all()

    def pm_ranking(self, *, limit: int) -> list[RowMapping]:
        total_profit = func.sum(profit_view.c.profit_standard).label("total_profit")
        return self.db.execute(
            select(profit_view.c.pm_employee_id, profit_view.c.pm_name, total_profit)
            .group_by(profit_view.c.pm_employee_id, profit_view.c.pm_name)
            .order_by(total_profit.desc(), profit_view.c.pm_employee_id)
            .limit(limit)
        ).mappings().all()

    def loss_projects(self) -> list[RowMapping]:
        return self.db.execute(
            select(
                profit_view.c.project_id,
                profit_view.c.project_code,
                profit_view.c.project_name,
                profit_view.c.profit_standard,
            )
            .where(profit_view.c.profit_standard < 0)
            .order_by(profit_view.c.profit_standard.asc(), profit_view.c.project_id)
        ).mappings().all()

    def client_revenue(self, client_id: int) -> RowMapping | None:
        return self.db.execute(
            select(
                Client.client_id,
                Client.name.label("client_name"),
                func.coalesce(func.sum(RevenueRecord.amount), 0).label("total_revenue"),
            )
            .select_from(Client)
            .outerjoin(
                Project,
                and_(Project.client_id == Client.client_id, Project.deleted_at.is_(None)),
            )
            .outerjoin(RevenueRecord, RevenueRecord.project_id == Project.project_id)
            .where(and_(Client.client_id == client_id, Client.deleted_at.is_(None)))
            .group_by(Client.client_id, Client.name)
        ).mappings().first()

    def total_revenue(self) -> Decimal:
        return self.db.scalar(select(func.coalesce(func.sum(RevenueRecord.amount), 0)))

    def in_progress_project_count(self) -> int:
        return int(
            self.db.scalar(
                select(func.count())
                .select_from(Project)
                .where(and_(Project.deleted_at.is_(None), Project.status == ProjectStatus.IN_PROGRESS))
            )
            or 0
        )
