"""Work record (actual hours) endpoints."""

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
from profit_tracker.services.ledger_service import LedgerService, WorkRecordCreateData, WorkRecordUpdateData

router = APIRouter(prefix="/work-records", tags=["work-records"])


class WorkRecordCreatePayload(RequestPayload):
    project_id: int
    resource_type: ResourceType
    employee_id: int | None = None
    partner_id: int | None = None
    work_date: date
    hours: Decimal = Field(ge=0, le=24)
    import_batch_id: str | None = Field(default=None, max_length=64)


class WorkRecordUpdatePayload(RequestPayload):
    hours: Decimal | None = Field(default=None, ge=0, le=24)
    work_date: date | None = None


@router.get("")
def list_work_records(
    project_id: int | None = Query(default=None),
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    items = service.list_work_records(project_id=project_id, from_date=from_date, to_date=to_date)
    return ok_list([service.serialize_work_record(record) for record in items])


@router.get("/{record_id}")
def get_work_record(
    record_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    return ok(service.serialize_work_record(service.get_work_record(record_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_work_record(
    payload: WorkRecordCreatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    record = service.create_work_record(WorkRecordCreateData(**payload.model_dump()))
    return ok(service.serialize_work_record(record))


@router.put("/{record_id}")
def update_work_record(
    record_id: int,
    payload: WorkRecordUpdatePayload,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = LedgerService(db)
    record = service.update_work_record(record_id, WorkRecordUpdateData(**payload.model_dump()))
    return ok(service.serialize_work_record(record))


@router.delete("/{record_id}")
def delete_work_record(
    record_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    LedgerService(db).delete_work_record(record_id)
    return deleted("稼働実績を削除しました")
