"""Client master endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import Field
from sqlalchemy.orm import Session

from profit_tracker.api.payloads import RequestPayload
from profit_tracker.core.auth import (
    MANAGE_ROLES,
    RequestUserContext,
    get_current_user_context,
    require_roles,
)
from profit_tracker.core.responses import deleted, ok, ok_list
from profit_tracker.db.dependencies import get_db_session
from profit_tracker.services.master_data_service import ClientCreateData, ClientUpdateData, MasterDataService

router = APIRouter(prefix="/clients", tags=["clients"])


class ClientCreatePayload(RequestPayload):
    client_code: str = Field(min_length=1, max_length=32)
    name: str = Field(min_length=1, max_length=255)
    industry: str | None = Field(default=None, max_length=128)
    payment_terms: str | None = Field(default=None, max_length=255)
    contact_person: str | None = Field(default=None, max_length=255)
    contact_email: str | None = Field(default=None, max_length=320)
    contact_tel: str | None = Field(default=None, max_length=32)
    address: str | None = Field(default=None, max_length=500)


class ClientUpdatePayload(RequestPayload):
    client_code: str | None = Field(default=None, min_length=1, max_length=32)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    industry: str | None = Field(default=None, max_length=128)
    payment_terms: str | None = Field(default=None, max_length=255)
    contact_person: str | None = Field(default=None, max_length=255)
    contact_email: str | None = Field(default=None, max_length=320)
    contact_tel: str | None = Field(default=None, max_length=32)
    address: str | None = Field(default=None, max_length=500)


@router.get("")
def list_clients(
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    return ok_list([service.serialize_client(client) for client in service.list_clients()])


@router.get("/{client_id}")
def get_client(
    client_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    return ok(service.serialize_client(service.get_client(client_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClientCreatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    client = service.create_client(ClientCreateData(**payload.model_dump()))
    return ok(service.serialize_client(client))


@router.put("/{client_id}")
def update_client(
    client_id: int,
    payload: ClientUpdatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    client = service.update_client(client_id, ClientUpdateData(**payload.model_dump()))
    return ok(service.serialize_client(client))


@router.delete("/{client_id}")
def delete_client(
    client_id: int,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    MasterDataService(db).delete_client(client_id)
    return deleted("クライアントを削除しました")
