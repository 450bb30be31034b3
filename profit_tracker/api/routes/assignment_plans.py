"""Monthly assignment plan endpoints."""

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
from profit_tracker.models.entities import ResourceType
from profit_tracker.services.ledger_service import AssignmentPlanCreateData, LedgerService

router = APIRouter(prefix="/assignment-plans", tags=["assignment-plans"])


class AssignmentPlanCreatePayload(RequestPayload):
    project_id: int
    resource_type: ResourceType
    employee_id: int | None = None
    partner_id: int | None = None
    target_month: date
    planned_hours: Decimal = Field(ge=0)


class AssignmentPlanUpdatePayload(RequestPayload):
    planned_hours: Decimal = Field(ge=0)


@router.get("")
def list_assignment_plans(
    project_id: int | None = Query(default=None),
    target_month: date | None = Query(default=None),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    items = service.list_assignment_plans(project_id=project_id, target_month=target_month)
    return ok_list([service.serialize_assignment_plan(plan) for plan in items])


@router.get("/{plan_id}")
def get_assignment_plan(
    plan_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    return ok(service.serialize_assignment_plan(service.get_assignment_plan(plan_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_assignment_plan(
    payload: AssignmentPlanCreatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    plan = service.create_assignment_plan(AssignmentPlanCreateData(**payload.model_dump()))
    return ok(service.serialize_assignment_plan(plan))


@router.put("/{plan_id}")
def update_assignment_plan(
    plan_id: int,
    payload: AssignmentPlanUpdatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    plan = service.update_assignment_plan(plan_id, payload.planned_hours)
    return ok(service.serialize_assignment_plan(plan))


@router.delete("/{plan_id}")
def delete_assignment_plan(
    plan_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    LedgerService(db).delete_assignment_plan(plan_id)
    return deleted("アサイン計画を削除しました")
