"""Project expense endpoints."""

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
from profit_tracker.services.ledger_service import ExpenseCreateData, ExpenseUpdateData, LedgerService

router = APIRouter(prefix="/expenses", tags=["expenses"])


class ExpenseCreatePayload(RequestPayload):
    project_id: int
    expense_type: str = Field(min_length=1, max_length=64)
    amount: Decimal = Field(ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    occurred_date: date
    description: str | None = Field(default=None, max_length=2000)
    invoice_number: str | None = Field(default=None, max_length=64)


class ExpenseUpdatePayload(RequestPayload):
    expense_type: str | None = Field(default=None, min_length=1, max_length=64)
    amount: Decimal | None = Field(default=None, ge=0)
    occurred_date: date | None = None
    description: str | None = Field(default=None, max_length=2000)
    invoice_number: str | None = Field(default=None, max_length=64)


@router.get("")
def list_expenses(
    project_id: int | None = Query(default=None),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    return ok_list([service.serialize_expense(row) for row in service.list_expenses(project_id=project_id)])


@router.get("/{expense_id}")
def get_expense(
    expense_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    return ok(service.serialize_expense(service.get_expense(expense_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    row = service.create_expense(ExpenseCreateData(**payload.model_dump()))
    return ok(service.serialize_expense(row))


@router.put("/{expense_id}")
def update_expense(
    expense_id: int,
    payload: ExpenseUpdatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    row = service.update_expense(expense_id, ExpenseUpdateData(**payload.model_dump()))
    return ok(service.serialize_expense(row))


@router.delete("/{expense_id}")
def delete_expense(
    expense_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    LedgerService(db).delete_expense(expense_id)
    return deleted("経費を削除しました")
