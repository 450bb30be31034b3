"""Partner (subcontractor) master endpoints."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, status
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
from profit_tracker.models.entities import ContractUnit
from profit_tracker.services.master_data_service import MasterDataService, PartnerCreateData, PartnerUpdateData

router = APIRouter(prefix="/partners", tags=["partners"])


class PartnerCreatePayload(RequestPayload):
    partner_code: str = Field(min_length=1, max_length=32)
    name: str = Field(min_length=1, max_length=255)
    company_name: str = Field(min_length=1, max_length=255)
    contract_unit_price: Decimal = Field(ge=0)
    contract_unit: ContractUnit
    contract_unit_currency: str | None = Field(default=None, min_length=3, max_length=3)
    contact_email: str | None = Field(default=None, max_length=320)
    contact_tel: str | None = Field(default=None, max_length=32)


class PartnerUpdatePayload(RequestPayload):
    partner_code: str | None = Field(default=None, min_length=1, max_length=32)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    company_name: str | None = Field(default=None, min_length=1, max_length=255)
    contract_unit_price: Decimal | None = Field(default=None, ge=0)
    contract_unit: ContractUnit | None = None
    contract_unit_currency: str | None = Field(default=None, min_length=3, max_length=3)
    contact_email: str | None = Field(default=None, max_length=320)
    contact_tel: str | None = Field(default=None, max_length=32)


@router.get("")
def list_partners(
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    return ok_list([service.serialize_partner(partner) for partner in service.list_partners()])


@router.get("/{partner_id}")
def get_partner(
    partner_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    return ok(service.serialize_partner(service.get_partner(partner_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_partner(
    payload: PartnerCreatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    partner = service.create_partner(PartnerCreateData(**payload.model_dump()))
    return ok(service.serialize_partner(partner))


@router.put("/{partner_id}")
def update_partner(
    partner_id: int,
    payload: PartnerUpdatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = MasterDataService(db)
    partner = service.update_partner(partner_id, PartnerUpdateData(**payload.model_dump()))
    return ok(service.serialize_partner(partner))


@router.delete("/{partner_id}")
def delete_partner(
    partner_id: int,
    context: RequestUserContext = Depends(require_roles(*ADMIN_ONLY)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    MasterDataService(db).delete_partner(partner_id)
    return deleted("パートナーを削除しました")
