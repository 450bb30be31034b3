"""Application service for projects and contracts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from profit_tracker.core.errors import not_found, validation_error
from profit_tracker.core.responses import decimal_str, iso
from profit_tracker.models.entities import Contract, ContractStatus, Project, ProjectStatus, ServiceType
from profit_tracker.repositories.project_repository import ProjectRepository
from profit_tracker.services.common import apply_changes, soft_delete, write_transaction

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProjectCreateData:
    project_code: str
    client_id: int
    pm_employee_id: int
    name: str
    service_type: ServiceType
    start_date: date
    end_date: date | None = None
    contract_amount: Decimal | None = None
    budget_revenue: Decimal | None = None
    budget_cost: Decimal | None = None
    status: ProjectStatus = ProjectStatus.IN_PROGRESS
    description: str | None = None


@dataclass(slots=True)
class ProjectUpdateData:
    project_code: str | None = None
    client_id: int | None = None
    pm_employee_id: int | None = None
    name: str | None = None
    service_type: ServiceType | None = None
    start_date: date | None = None
    end_date: date | None = None
    contract_amount: Decimal | None = None
    budget_revenue: Decimal | None = None
    budget_cost: Decimal | None = None
    status: ProjectStatus | None = None
    description: str | None = None


@dataclass(slots=True)
class ContractCreateData:
    project_id: int
    contract_number: str
    start_date: date
    contract_amount: Decimal
    end_date: date | None = None
    contract_status: ContractStatus = ContractStatus.SIGNED
    description: str | None = None


@dataclass(slots=True)
class ContractUpdateData:
    contract_number: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    contract_amount: Decimal | None = None
    contract_status: ContractStatus | None = None
    description: str | None = None


def _validate_date_range(start_date: date, end_date: date | None) -> None:
    if end_date is not None and end_date < start_date:
        raise validation_error("終了日は開始日以降の日付を指定してください")


class ProjectService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = ProjectRepository(db)

    @staticmethod
    def serialize_project(project: Project) -> dict[str, object]:
        return {
            "project_id": project.project_id,
            "project_code": project.project_code,
            "client_id": project.client_id,
            "pm_employee_id": project.pm_employee_id,
            "name": project.name,
            "service_type": project.service_type.value,
            "start_date": iso(project.start_date),
            "end_date": iso(project.end_date),
            "contract_amount": decimal_str(project.contract_amount),
            "budget_revenue": decimal_str(project.budget_revenue),
            "budget_cost": decimal_str(project.budget_cost),
            "status": project.status.value,
            "description": project.description,
            "created_at": iso(project.created_at),
            "updated_at": iso(project.updated_at),
        }

    @staticmethod
    def serialize_contract(contract: Contract) -> dict[str, object]:
        return {
            "contract_id": contract.contract_id,
            "project_id": contract.project_id,
            "contract_number": contract.contract_number,
            "start_date": iso(contract.start_date),
            "end_date": iso(contract.end_date),
            "contract_amount": decimal_str(contract.contract_amount),
            "contract_status": contract.contract_status.value,
            "description": contract.description,
            "created_at": iso(contract.created_at),
            "updated_at": iso(contract.updated_at),
        }

    # ---------- Projects ----------
    def list_projects(
        self,
        *,
        client_id: int | None = None,
        pm_employee_id: int | None = None,
        service_type: ServiceType | None = None,
        status: ProjectStatus | None = None,
    ) -> list[Project]:
        return self.repo.list_projects(
            client_id=client_id,
            pm_employee_id=pm_employee_id,
            service_type=service_type,
            status=status,
        )

    def get_project(self, project_id: int) -> Project:
        project = self.repo.get_project(project_id)
        if project is None:
            raise not_found("プロジェクトが見つかりません")
        return project

    def create_project(self, data: ProjectCreateData) -> Project:
        _validate_date_range(data.start_date, data.end_date)
        project = Project(
            project_code=data.project_code,
            client_id=data.client_id,
            pm_employee_id=data.pm_employee_id,
            name=data.name,
            service_type=data.service_type,
            start_date=data.start_date,
            end_date=data.end_date,
            contract_amount=data.contract_amount,
            budget_revenue=data.budget_revenue,
            budget_cost=data.budget_cost,
            status=data.status,
            description=data.description,
        )
        with write_transaction(self.db):
            self.repo.add_project(project)
        self.db.refresh(project)
        logger.info("Created project %s (%s)", project.project_id, project.project_code)
        return project

    def update_project(self, project_id: int, data: ProjectUpdateData) -> Project:
        project = self.get_project(project_id)
        _validate_date_range(
            data.start_date or project.start_date,
            data.end_date or project.end_date,
        )
        with write_transaction(self.db):
            apply_changes(project, data)
        self.db.refresh(project)
        logger.info("Updated project %s", project_id)
        return project

    def delete_project(self, project_id: int) -> None:
        project = self.get_project(project_id)
        with write_transaction(self.db):
            soft_delete(project)
        logger.info("Deleted project %s", project_id)

    # ---------- Contracts ----------
    def list_contracts(self, *, project_id: int | None = None) -> list[Contract]:
        return self.repo.list_contracts(project_id=project_id)

    def get_contract(self, contract_id: int) -> Contract:
        contract = self.repo.get_contract(contract_id)
        if contract is None:
            raise not_found("契約が見つかりません")
        return contract

    def create_contract(self, data: ContractCreateData) -> Contract:
        _validate_date_range(data.start_date, data.end_date)
        contract = Contract(
            project_id=data.project_id,
            contract_number=data.contract_number,
            start_date=data.start_date,
            end_date=data.end_date,
            contract_amount=data.contract_amount,
            contract_status=data.contract_status,
            description=data.description,
        )
        with write_transaction(self.db):
            self.repo.add_contract(contract)
        self.db.refresh(contract)
        logger.info("Created contract %s for project %s", contract.contract_id, contract.project_id)
        return contract

    def update_contract(self, contract_id: int, data: ContractUpdateData) -> Contract:
        contract = self.get_contract(contract_id)
        _validate_date_range(
            data.start_date or contract.start_date,
            data.end_date or contract.end_date,
        )
        with write_transaction(self.db):
            apply_changes(contract, data)
        self.db.refresh(contract)
        logger.info("Updated contract %s", contract_id)
        return contract

    def delete_contract(self, contract_id: int) -> None:
        contract = self.get_contract(contract_id)
        with write_transaction(self.db):
            soft_delete(contract)
        logger.info("Deleted contract %s", contract_id)
