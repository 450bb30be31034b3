"""Employee master and standard cost history endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy.orm import Session

from profit_tracker.api.payloads import RequestPayload
from profit_tracker.core.auth import (
    ADMIN_ONLY,
    MANAGE_ROLES,
    RequestUserContext,
    get_current_user_context,
    require_roles,
)
from profit_tracker.core.responses import deleted, ok, ok_list
from profit_tracker.db.dependencies import get_db_session
from profit_tracker.services.master_data_service import (
    CostHistoryCreateData,
    EmployeeCreateData,
    EmployeeUpdateData,
    MasterDataService,
)

router = APIRouter(prefix="/employees", tags=["employees"])


class EmployeeCreatePayload(RequestPayload):
    employee_code: str = Field(min_length=1, max_length=32)
    name: str = Field(min_length=1, max_length=255)
    name_kana: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=128)
    position: str | None = Field(default=None, max_length=128)
    email: str | None = Field(default=None, max_length=320)
    hire_date: date | None = None
    standard_unit_cost: Decimal | None = Field(default=None, ge=0)
    standard_unit_cost_currency: str | None = Field(default=None, min_length=3, max_length=3)


class EmployeeUpdatePayload(RequestPayload):
    employee_code: str | None = Field(default=None, min_length=1, max_length=32)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    name_kana: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=128)
    position: str | None = Field(default=None, max_length=128)
    email: str | None = Field(default=None, max_length=320)
    hire_date: date | None = None
    standard_unit_cost: Decimal | None = Field(default=None, ge=0)
    standard_unit_cost_currency: str | None = Field(default=None, min_length=3, max_length=3)


class CostHistoryCreatePayload(RequestPayload):
    standard_unit_cost: Decimal = Field(ge=0)
    effective_from: date


@router.get("")
def list_employees(
    department: str | None = Query(default=None),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    items = service.list_employees(department=department)
    return ok_list([service.serialize_employee(employee) for employee in items])


@router.get("/{employee_id}")
def get_employee(
    employee_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    return ok(service.serialize_employee(service.get_employee(employee_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    employee = service.create_employee(EmployeeCreateData(**payload.model_dump()))
    return ok(service.serialize_employee(employee))


@router.put("/{employee_id}")
def update_employee(
    employee_id: int,
    payload: EmployeeUpdatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    employee = service.update_employee(
        employee_id,
        EmployeeUpdateData(**payload.model_dump(exclude={"standard_unit_cost"})),
        standard_unit_cost=payload.standard_unit_cost,
    )
    return ok(service.serialize_employee(employee))


@router.delete("/{employee_id}")
def delete_employee(
    employee_id: int,
    context: RequestUserContext = Depends(require_roles(*ADMIN_ONLY)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    MasterDataService(db).delete_employee(employee_id)
    return deleted("社員を削除しました")


@router.get("/{employee_id}/cost-history")
def list_cost_history(
    employee_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    rows = service.list_cost_history(employee_id)
    return ok_list([service.serialize_cost_history(row) for row in rows])


@router.post("/{employee_id}/cost-history", status_code=status.HTTP_201_CREATED)
def add_cost_history(
    employee_id: int,
    payload: CostHistoryCreatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    row = service.add_cost_history(
        employee_id,
        CostHistoryCreateData(
            standard_unit_cost=payload.standard_unit_cost,
            effective_from=payload.effective_from,
        ),
    )
    return ok(service.serialize_cost_history(row))
