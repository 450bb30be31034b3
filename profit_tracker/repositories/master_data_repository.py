"""Repository helpers for clients, employees, partners and users."""

from __future__ import annotations

from datetime import date

from sqlalchemy import and_, func, select, update
from sqlalchemy.orm import Session

from profit_tracker.models.entities import Client, Employee, EmployeeCostHistory, Partner, User


class MasterDataRepository:
    """Persistence operations for master data; soft-deleted rows are never returned."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ---------- Clients ----------
    def list_clients(self) -> list[Client]:
        return self.db.scalars(
            select(Client)
            .where(Client.deleted_at.is_(None))
            .order_by(Client.created_at.desc(), Client.client_id.desc())
        ).all()

    def get_client(self, client_id: int) -> Client | None:
        return self.db.scalar(
            select(Client).where(and_(Client.client_id == client_id, Client.deleted_at.is_(None)))
        )

    def add_client(self, client: Client) -> Client:
        self.db.add(client)
        self.db.flush()
        return client

    # ---------- Employees ----------
    def list_employees(self, *, department: str | None = None) -> list[Employee]:
        conditions = [Employee.deleted_at.is_(None)]
        if department:
            conditions.append(Employee.department == department)
        return self.db.scalars(
            select(Employee)
            .where(and_(*conditions))
            .order_by(Employee.created_at.desc(), Employee.employee_id.desc())
        ).all()

    def get_employee(self, employee_id: int) -> Employee | None:
        return self.db.scalar(
            select(Employee).where(and_(Employee.employee_id == employee_id, Employee.deleted_at.is_(None)))
        )

    def add_employee(self, employee: Employee) -> Employee:
        self.db.add(employee)
        self.db.flush()
        return employee

    # ---------- Employee cost history ----------
    def list_cost_history(self, employee_id: int) -> list[EmployeeCostHistory]:
        return self.db.scalars(
            select(EmployeeCostHistory)
            .where(EmployeeCostHistory.employee_id == employee_id)
            .order_by(EmployeeCostHistory.effective_from.desc(), EmployeeCostHistory.history_id.desc())
        ).all()

    def add_cost_history(self, row: EmployeeCostHistory) -> EmployeeCostHistory:
        self.db.add(row)
        self.db.flush()
        return row

    def close_open_cost_history(
        self,
        employee_id: int,
        *,
        effective_to: date,
        only_before: date | None = None,
    ) -> None:
        conditions = [
            EmployeeCostHistory.employee_id == employee_id,
            EmployeeCostHistory.effective_to.is_(None),
        ]
        if only_before is not None:
            conditions.append(EmployeeCostHistory.effective_from < only_before)
        self.db.execute(
            update(EmployeeCostHistory)
            .where(and_(*conditions))
            .values(effective_to=effective_to)
            .execution_options(synchronize_session="fetch")
        )

    def next_cost_history_start(self, employee_id: int, *, after: date) -> date | None:
        return self.db.scalar(
            select(func.min(EmployeeCostHistory.effective_from)).where(
                and_(
                    EmployeeCostHistory.employee_id == employee_id,
                    EmployeeCostHistory.effective_from > after,
                )
            )
        )

    def cost_history_count(self, employee_id: int) -> int:
        return int(
            self.db.scalar(
                select(func.count())
                .select_from(EmployeeCostHistory)
                .where(EmployeeCostHistory.employee_id == employee_id)
            )
            or 0
        )

    def oldest_cost_history(
        self,
        employee_id: int,
        *,
        limit: int,
        keep_history_id: int | None = None,
    ) -> list[EmployeeCostHistory]:
        conditions = [EmployeeCostHistory.employee_id == employee_id]
        if keep_history_id is not None:
            conditions.append(EmployeeCostHistory.history_id != keep_history_id)
        return self.db.scalars(
            select(EmployeeCostHistory)
            .where(and_(*conditions))
            .order_by(EmployeeCostHistory.effective_from.asc(), EmployeeCostHistory.history_id.asc())
            .limit(limit)
        ).all()

    def delete_cost_history(self, row: EmployeeCostHistory) -> None:
        self.db.delete(row)
        self.db.flush()

    # ---------- Partners ----------
    def list_partners(self) -> list[Partner]:
        return self.db.scalars(
            select(Partner)
            .where(Partner.deleted_at.is_(None))
            .order_by(Partner.created_at.desc(), Partner.partner_id.desc())
        ).all()

    def get_partner(self, partner_id: int) -> Partner | None:
        return self.db.scalar(
            select(Partner).where(and_(Partner.partner_id == partner_id, Partner.deleted_at.is_(None)))
        )

    def add_partner(self, partner: Partner) -> Partner:
        self.db.add(partner)
        self.db.flush()
        return partner

    # ---------- Users ----------
    def get_user(self, user_id: int) -> User | None:
        return self.db.scalar(select(User).where(User.user_id == user_id))
