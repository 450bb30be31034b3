"""Repository helpers for projects and contracts."""

from __future__ import annotations

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from profit_tracker.models.entities import Contract, Project, ProjectStatus, ServiceType


class ProjectRepository:
    """Persistence operations for projects and their contracts."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ---------- Projects ----------
    def list_projects(
        self,
        *,
        client_id: int | None = None,
        pm_employee_id: int | None = None,
        service_type: ServiceType | None = None,
        status: ProjectStatus | None = None,
    ) -> list[Project]:
        conditions = [Project.deleted_at.is_(None)]
        if client_id is not None:
            conditions.append(Project.client_id == client_id)
        if pm_employee_id is not None:
            conditions.append(Project.pm_employee_id == pm_employee_id)
        if service_type is not None:
            conditions.append(Project.service_type == service_type)
        if status is not None:
            conditions.append(Project.status == status)

        return self.db.scalars(
            select(Project)
            .where(and_(*conditions))
            .order_by(Project.created_at.desc(), Project.project_id.desc())
        ).all()

    def get_project(self, project_id: int) -> Project | None:
        return self.db.scalar(
            select(Project).where(and_(Project.project_id == project_id, Project.deleted_at.is_(None)))
        )

    def add_project(self, project: Project) -> Project:
        self.db.add(project)
        self.db.flush()
        return project

    # ---------- Contracts ----------
    def list_contracts(self, *, project_id: int | None = None) -> list[Contract]:
        conditions = [Contract.deleted_at.is_(None)]
        if project_id is not None:
            conditions.append(Contract.project_id == project_id)
        return self.db.scalars(
            select(Contract)
            .where(and_(*conditions))
            .order_by(Contract.created_at.desc(), Contract.contract_id.desc())
        ).all()

    def get_contract(self, contract_id: int) -> Contract | None:
        return self.db.scalar(
            select(Contract).where(and_(Contract.contract_id == contract_id, Contract.deleted_at.is_(None)))
        )

    def add_contract(self, contract: Contract) -> Contract:
        self.db.add(contract)
        self.db.flush()
        return contract
