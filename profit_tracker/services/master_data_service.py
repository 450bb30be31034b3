"""Application service for clients, employees, partners and users."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from profit_tracker.core.config import get_settings
from profit_tracker.core.errors import not_found
from profit_tracker.core.responses import decimal_str, iso
from profit_tracker.models.entities import (
    Client,
    ContractUnit,
    Employee,
    EmployeeCostHistory,
    Partner,
    User,
    utcnow,
)
from profit_tracker.repositories.master_data_repository import MasterDataRepository
from profit_tracker.services.common import apply_changes, soft_delete, write_transaction

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ClientCreateData:
    client_code: str
    name: str
    industry: str | None = None
    payment_terms: str | None = None
    contact_person: str | None = None
    contact_email: str | None = None
    contact_tel: str | None = None
    address: str | None = None


@dataclass(slots=True)
class ClientUpdateData:
    client_code: str | None = None
    name: str | None = None
    industry: str | None = None
    payment_terms: str | None = None
    contact_person: str | None = None
    contact_email: str | None = None
    contact_tel: str | None = None
    address: str | None = None


@dataclass(slots=True)
class EmployeeCreateData:
    employee_code: str
    name: str
    name_kana: str | None = None
    department: str | None = None
    position: str | None = None
    email: str | None = None
    hire_date: date | None = None
    standard_unit_cost: Decimal | None = None
    standard_unit_cost_currency: str | None = None


@dataclass(slots=True)
class EmployeeUpdateData:
    employee_code: str | None = None
    name: str | None = None
    name_kana: str | None = None
    department: str | None = None
    position: str | None = None
    email: str | None = None
    hire_date: date | None = None
    standard_unit_cost_currency: str | None = None


@dataclass(slots=True)
class CostHistoryCreateData:
    standard_unit_cost: Decimal
    effective_from: date


@dataclass(slots=True)
class PartnerCreateData:
    partner_code: str
    name: str
    company_name: str
    contract_unit_price: Decimal
    contract_unit: ContractUnit
    contract_unit_currency: str | None = None
    contact_email: str | None = None
    contact_tel: str | None = None


@dataclass(slots=True)
class PartnerUpdateData:
    partner_code: str | None = None
    name: str | None = None
    company_name: str | None = None
    contract_unit_price: Decimal | None = None
    contract_unit: ContractUnit | None = None
    contract_unit_currency: str | None = None
    contact_email: str | None = None
    contact_tel: str | None = None


def _optional_text(value: str | None) -> str | None:
    return value or None


class MasterDataService:
    """Master data lifecycle including the per-employee cost-history ledger."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = MasterDataRepository(db)
        self.settings = get_settings()

    # ---------- Serializers ----------
    @staticmethod
    def serialize_client(client: Client) -> dict[str, object]:
        return {
            "client_id": client.client_id,
            "client_code": client.client_code,
            "name": client.name,
            "industry": client.industry,
            "payment_terms": client.payment_terms,
            "contact_person": client.contact_person,
            "contact_email": client.contact_email,
            "contact_tel": client.contact_tel,
            "address": client.address,
            "created_at": iso(client.created_at),
            "updated_at": iso(client.updated_at),
        }

    @staticmethod
    def serialize_employee(employee: Employee) -> dict[str, object]:
        return {
            "employee_id": employee.employee_id,
            "employee_code": employee.employee_code,
            "name": employee.name,
            "name_kana": employee.name_kana,
            "department": employee.department,
            "position": employee.position,
            "email": employee.email,
            "hire_date": iso(employee.hire_date),
            "standard_unit_cost": decimal_str(employee.standard_unit_cost),
            "standard_unit_cost_currency": employee.standard_unit_cost_currency,
            "created_at": iso(employee.created_at),
            "updated_at": iso(employee.updated_at),
        }

    @staticmethod
    def serialize_cost_history(row: EmployeeCostHistory) -> dict[str, object]:
        return {
            "history_id": row.history_id,
            "employee_id": row.employee_id,
            "standard_unit_cost": decimal_str(row.standard_unit_cost),
            "effective_from": iso(row.effective_from),
            "effective_to": iso(row.effective_to),
            "created_at": iso(row.created_at),
        }

    @staticmethod
    def serialize_partner(partner: Partner) -> dict[str, object]:
        return {
            "partner_id": partner.partner_id,
            "partner_code": partner.partner_code,
            "name": partner.name,
            "company_name": partner.company_name,
            "contract_unit_price": decimal_str(partner.contract_unit_price),
            "contract_unit": partner.contract_unit.value,
            "contract_unit_currency": partner.contract_unit_currency,
            "contact_email": partner.contact_email,
            "contact_tel": partner.contact_tel,
            "created_at": iso(partner.created_at),
            "updated_at": iso(partner.updated_at),
        }

    @staticmethod
    def serialize_user(user: User) -> dict[str, object]:
        return {
            "user_id": user.user_id,
            "username": user.username,
            "employee_id": user.employee_id,
            "role": user.role.value,
            "is_active": user.is_active,
            "last_login_at": iso(user.last_login_at),
        }

    # ---------- Clients ----------
    def list_clients(self) -> list[Client]:
        return self.repo.list_clients()

    def get_client(self, client_id: int) -> Client:
        client = self.repo.get_client(client_id)
        if client is None:
            raise not_found("クライアントが見つかりません")
        return client

    def create_client(self, data: ClientCreateData) -> Client:
        client = Client(
            client_code=data.client_code,
            name=data.name,
            industry=_optional_text(data.industry),
            payment_terms=_optional_text(data.payment_terms),
            contact_person=_optional_text(data.contact_person),
            contact_email=_optional_text(data.contact_email),
            contact_tel=_optional_text(data.contact_tel),
            address=_optional_text(data.address),
        )
        with write_transaction(self.db):
            self.repo.add_client(client)
        self.db.refresh(client)
        logger.info("Created client %s (%s)", client.client_id, client.client_code)
        return client

    def update_client(self, client_id: int, data: ClientUpdateData) -> Client:
        client = self.get_client(client_id)
        with write_transaction(self.db):
            apply_changes(client, data)
        self.db.refresh(client)
        logger.info("Updated client %s", client_id)
        return client

    def delete_client(self, client_id: int) -> None:
        client = self.get_client(client_id)
        with write_transaction(self.db):
            soft_delete(client)
        logger.info("Deleted client %s", client_id)

    # ---------- Employees ----------
    def list_employees(self, *, department: str | None = None) -> list[Employee]:
        return self.repo.list_employees(department=department)

    def get_employee(self, employee_id: int) -> Employee:
        employee = self.repo.get_employee(employee_id)
        if employee is None:
            raise not_found("社員が見つかりません")
        return employee

    def create_employee(self, data: EmployeeCreateData) -> Employee:
        employee = Employee(
            employee_code=data.employee_code,
            name=data.name,
            name_kana=_optional_text(data.name_kana),
            department=_optional_text(data.department),
            position=_optional_text(data.position),
            email=_optional_text(data.email),
            hire_date=data.hire_date,
            standard_unit_cost=data.standard_unit_cost,
            standard_unit_cost_currency=data.standard_unit_cost_currency or self.settings.default_currency,
        )
        with write_transaction(self.db):
            self.repo.add_employee(employee)
            if data.standard_unit_cost is not None:
                self.repo.add_cost_history(
                    EmployeeCostHistory(
                        employee_id=employee.employee_id,
                        standard_unit_cost=data.standard_unit_cost,
                        effective_from=date.today(),
                    )
                )
        self.db.refresh(employee)
        logger.info("Created employee %s (%s)", employee.employee_id, employee.employee_code)
        return employee

    def update_employee(
        self,
        employee_id: int,
        data: EmployeeUpdateData,
        *,
        standard_unit_cost: Decimal | None = None,
    ) -> Employee:
        """Apply a partial update; a changed standard cost opens a new ledger row effective today."""

        employee = self.get_employee(employee_id)
        with write_transaction(self.db):
            apply_changes(employee, data)
            if standard_unit_cost is not None and standard_unit_cost != employee.standard_unit_cost:
                today = date.today()
                self.repo.close_open_cost_history(employee.employee_id, effective_to=today)
                new_row = EmployeeCostHistory(
                    employee_id=employee.employee_id,
                    standard_unit_cost=standard_unit_cost,
                    effective_from=today,
                )
                self.repo.add_cost_history(new_row)
                employee.standard_unit_cost = standard_unit_cost
                self._evict_cost_history(employee.employee_id, keep=new_row)
                logger.info("Employee %s standard unit cost changed to %s", employee_id, standard_unit_cost)
        self.db.refresh(employee)
        logger.info("Updated employee %s", employee_id)
        return employee

    def delete_employee(self, employee_id: int) -> None:
        employee = self.get_employee(employee_id)
        with write_transaction(self.db):
            soft_delete(employee)
        logger.info("Deleted employee %s", employee_id)

    # ---------- Employee cost history ----------
    def list_cost_history(self, employee_id: int) -> list[EmployeeCostHistory]:
        self.get_employee(employee_id)
        return self.repo.list_cost_history(employee_id)

    def add_cost_history(self, employee_id: int, data: CostHistoryCreateData) -> EmployeeCostHistory:
        employee = self.get_employee(employee_id)
        row = EmployeeCostHistory(
            employee_id=employee.employee_id,
            standard_unit_cost=data.standard_unit_cost,
            effective_from=data.effective_from,
        )
        with write_transaction(self.db):
            self.repo.close_open_cost_history(
                employee.employee_id,
                effective_to=data.effective_from,
                only_before=data.effective_from,
            )
            # A back-dated row ends where the next recorded period starts.
            row.effective_to = self.repo.next_cost_history_start(employee.employee_id, after=data.effective_from)
            self.repo.add_cost_history(row)
            employee.standard_unit_cost = data.standard_unit_cost
            employee.updated_at = utcnow()
            self._evict_cost_history(employee.employee_id, keep=row)
        self.db.refresh(row)
        logger.info(
            "Added cost history %s for employee %s effective %s",
            row.history_id,
            employee_id,
            data.effective_from,
        )
        return row

    def _evict_cost_history(self, employee_id: int, *, keep: EmployeeCostHistory) -> None:
        """Delete the oldest ledger rows, never ``keep``, until at most ``cost_history_limit`` remain."""

        limit = self.settings.cost_history_limit
        excess = self.repo.cost_history_count(employee_id) - limit
        if excess <= 0:
            return
        for row in self.repo.oldest_cost_history(
            employee_id,
            limit=excess,
            keep_history_id=keep.history_id,
        ):
            logger.info(
                "Evicting cost history %s (effective %s) for employee %s",
                row.history_id,
                row.effective_from,
                employee_id,
            )
            self.repo.delete_cost_history(row)

    # ---------- Partners ----------
    def list_partners(self) -> list[Partner]:
        return self.repo.list_partners()

    def get_partner(self, partner_id: int) -> Partner:
        partner = self.repo.get_partner(partner_id)
        if partner is None:
            raise not_found("パートナーが見つかりません")
        return partner

    def create_partner(self, data: PartnerCreateData) -> Partner:
        partner = Partner(
            partner_code=data.partner_code,
            name=data.name,
            company_name=data.company_name,
            contract_unit_price=data.contract_unit_price,
            contract_unit=data.contract_unit,
            contract_unit_currency=data.contract_unit_currency or self.settings.default_currency,
            contact_email=_optional_text(data.contact_email),
            contact_tel=_optional_text(data.contact_tel),
        )
        with write_transaction(self.db):
            self.repo.add_partner(partner)
        self.db.refresh(partner)
        logger.info("Created partner %s (%s)", partner.partner_id, partner.partner_code)
        return partner

    def update_partner(self, partner_id: int, data: PartnerUpdateData) -> Partner:
        partner = self.get_partner(partner_id)
        with write_transaction(self.db):
            apply_changes(partner, data)
        self.db.refresh(partner)
        logger.info("Updated partner %s", partner_id)
        return partner

    def delete_partner(self, partner_id: int) -> None:
        partner = self.get_partner(partner_id)
        with write_transaction(self.db):
            soft_delete(partner)
        logger.info("Deleted partner %s", partner_id)

    # ---------- Users ----------
    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user(user_id)
        if user is None:
            raise not_found("ユーザーが見つかりません")
        return user
