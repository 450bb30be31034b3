"""Monthly actual salary cost endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy.orm import Session

from profit_tracker.api.payloads import RequestPayload
from profit_tracker.core.auth import RequestUserContext, get_current_user_context
from profit_tracker.core.responses import deleted, ok, ok_list
from profit_tracker.db.dependencies import get_db_session
from profit_tracker.services.ledger_service import LedgerService, MonthlyCostCreateData, MonthlyCostUpdateData

router = APIRouter(prefix="/monthly-actual-costs", tags=["monthly-actual-costs"])


class MonthlyCostCreatePayload(RequestPayload):
    employee_id: int
    target_month: date
    total_salary: Decimal = Field(ge=0)
    total_work_hours: Decimal = Field(gt=0)


class MonthlyCostUpdatePayload(RequestPayload):
    total_salary: Decimal | None = Field(default=None, ge=0)
    total_work_hours: Decimal | None = Field(default=None, gt=0)


@router.get("")
def list_monthly_costs(
    employee_id: int | None = Query(default=None),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    items = service.list_monthly_costs(employee_id=employee_id)
    return ok_list([service.serialize_monthly_cost(row) for row in items])


@router.get("/{cost_id}")
def get_monthly_cost(
    cost_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    return ok(service.serialize_monthly_cost(service.get_monthly_cost(cost_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_monthly_cost(
    payload: MonthlyCostCreatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    row = service.create_monthly_cost(MonthlyCostCreateData(**payload.model_dump()))
    return ok(service.serialize_monthly_cost(row))


@router.put("/{cost_id}")
def update_monthly_cost(
    cost_id: int,
    payload: MonthlyCostUpdatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    row = service.update_monthly_cost(cost_id, MonthlyCostUpdateData(**payload.model_dump()))
    return ok(service.serialize_monthly_cost(row))


@router.delete("/{cost_id}")
def delete_monthly_cost(
    cost_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    LedgerService(db).delete_monthly_cost(cost_id)
    return deleted("給与実績を削除しました")
