"""Project endpoints."""

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
from profit_tracker.models.entities import ProjectStatus, ServiceType
from profit_tracker.services.project_service import ProjectCreateData, ProjectService, ProjectUpdateData

router = APIRouter(prefix="/projects", tags=["projects"])


class ProjectCreatePayload(RequestPayload):
    project_code: str = Field(min_length=1, max_length=32)
    client_id: int
    pm_employee_id: int
    name: str = Field(min_length=1, max_length=255)
    service_type: ServiceType
    start_date: date
    end_date: date | None = None
    contract_amount: Decimal | None = Field(default=None, ge=0)
    budget_revenue: Decimal | None = Field(default=None, ge=0)
    budget_cost: Decimal | None = Field(default=None, ge=0)
    status: ProjectStatus = ProjectStatus.IN_PROGRESS
    description: str | None = Field(default=None, max_length=2000)


class ProjectUpdatePayload(RequestPayload):
    project_code: str | None = Field(default=None, min_length=1, max_length=32)
    client_id: int | None = None
    pm_employee_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    service_type: ServiceType | None = None
    start_date: date | None = None
    end_date: date | None = None
    contract_amount: Decimal | None = Field(default=None, ge=0)
    budget_revenue: Decimal | None = Field(default=None, ge=0)
    budget_cost: Decimal | None = Field(default=None, ge=0)
    status: ProjectStatus | None = None
    description: str | None = Field(default=None, max_length=2000)


@router.get("")
def list_projects(
    client_id: int | None = Query(default=None),
    pm_employee_id: int | None = Query(default=None),
    service_type: ServiceType | None = Query(default=None),
    status: ProjectStatus | None = Query(default=None),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = ProjectService(db)
    items = service.list_projects(
        client_id=client_id,
        pm_employee_id=pm_employee_id,
        service_type=service_type,
        status=status,
    )
    return ok_list([service.serialize_project(project) for project in items])


@router.get("/{project_id}")
def get_project(
    project_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = ProjectService(db)
    return ok(service.serialize_project(service.get_project(project_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = ProjectService(db)
    project = service.create_project(ProjectCreateData(**payload.model_dump()))
    return ok(service.serialize_project(project))


@router.put("/{project_id}")
def update_project(
    project_id: int,
    payload: ProjectUpdatePayload,
    context: RequestUserContext = Depends(require_roles(*MANAGE_ROLES)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = ProjectService(db)
    project = service.update_project(project_id, ProjectUpdateData(**payload.model_dump()))
    return ok(service.serialize_project(project))


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    context: RequestUserContext = Depends(require_roles(*ADMIN_ONLY)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    ProjectService(db).delete_project(project_id)
    return deleted("プロジェクトを削除しました")
