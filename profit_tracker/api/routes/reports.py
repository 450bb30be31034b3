"""Profit and revenue report endpoints backed by the profit view."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from profit_tracker.core.auth import RequestUserContext, get_current_user_context
from profit_tracker.core.responses import ok, ok_list
from profit_tracker.db.dependencies import get_db_session
from profit_tracker.services.profit_reporting_service import ProfitReportingService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/projects/{project_id}/profit")
def project_profit(
    project_id: int,
    cost_type: str = Query(default="standard"),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    return ok(ProfitReportingService(db).project_profit(project_id, cost_type=cost_type))


@router.get("/pm/{employee_id}/profit")
def pm_profit(
    employee_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    return ok_list(ProfitReportingService(db).pm_profit(employee_id))


@router.get("/clients/{client_id}/revenue")
def client_revenue(
    client_id: int,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    return ok(ProfitReportingService(db).client_revenue(client_id))
