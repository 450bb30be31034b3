"""Revenue record endpoints."""

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
from profit_tracker.models.entities import AllocationType
from profit_tracker.services.ledger_service import LedgerService, RevenueCreateData, RevenueUpdateData

router = APIRouter(prefix="/revenues", tags=["revenues"])


class RevenueCreatePayload(RequestPayload):
    project_id: int
    revenue_month: date
    amount: Decimal
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    allocation_type: AllocationType = AllocationType.MONTHLY
    description: str | None = Field(default=None, max_length=2000)


class RevenueUpdatePayload(RequestPayload):
    amount: Decimal | None = None
    description: str | None = Field(default=None, max_length=2000)


@router.get("")
def list_revenues(
    project_id: int | None = Query(default=None),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    return ok_list([service.serialize_revenue(row) for row in service.list_revenues(project_id=project_id)])


@router.get("/{revenue_id}")
def get_revenue(
    revenue_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    return ok(service.serialize_revenue(service.get_revenue(revenue_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_revenue(
    payload: RevenueCreatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    row = service.create_revenue(RevenueCreateData(**payload.model_dump()))
    return ok(service.serialize_revenue(row))


@router.put("/{revenue_id}")
def update_revenue(
    revenue_id: int,
    payload: RevenueUpdatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    row = service.update_revenue(revenue_id, RevenueUpdateData(**payload.model_dump()))
    return ok(service.serialize_revenue(row))


@router.delete("/{revenue_id}")
def delete_revenue(
    revenue_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    LedgerService(db).delete_revenue(revenue_id)
    return deleted("売上実績を削除しました")
