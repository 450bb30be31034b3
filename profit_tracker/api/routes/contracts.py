"""Contract endpoints."""

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
from profit_tracker.models.entities import ContractStatus
from profit_tracker.services.project_service import ContractCreateData, ContractUpdateData, ProjectService

router = APIRouter(prefix="/contracts", tags=["contracts"])


class ContractCreatePayload(RequestPayload):
    project_id: int
    contract_number: str = Field(min_length=1, max_length=64)
    start_date: date
    end_date: date | None = None
    contract_amount: Decimal = Field(ge=0)
    contract_status: ContractStatus = ContractStatus.SIGNED
    description: str | None = Field(default=None, max_length=2000)


class ContractUpdatePayload(RequestPayload):
    contract_number: str | None = Field(default=None, min_length=1, max_length=64)
    start_date: date | None = None
    end_date: date | None = None
    contract_amount: Decimal | None = Field(default=None, ge=0)
    contract_status: ContractStatus | None = None
    description: str | None = Field(default=None, max_length=2000)


@router.get("")
def list_contracts(
    project_id: int | None = Query(default=None),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = ProjectService(db)
    items = service.list_contracts(project_id=project_id)
    return ok_list([service.serialize_contract(contract) for contract in items])


@router.get("/{contract_id}")
def get_contract(
    contract_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = ProjectService(db)
    return ok(service.serialize_contract(service.get_contract(contract_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_contract(
    payload: ContractCreatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = ProjectService(db)
    contract = service.create_contract(ContractCreateData(**payload.model_dump()))
    return ok(service.serialize_contract(contract))


@router.put("/{contract_id}")
def update_contract(
    contract_id: int,
    payload: ContractUpdatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = ProjectService(db)
    contract = service.update_contract(contract_id, ContractUpdateData(**payload.model_dump()))
    return ok(service.serialize_contract(contract))


@router.delete("/{contract_id}")
def delete_contract(
    contract_id: int,
    context: RequestUserContext = Depends(require_roles(*ADMIN_ONLY)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    ProjectService(db).delete_contract(contract_id)
    return deleted("契約を削除しました")
