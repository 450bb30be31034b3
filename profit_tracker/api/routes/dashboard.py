"""Dashboard aggregate endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from profit_tracker.core.auth import RequestUserContext, get_current_user_context
from profit_tracker.core.responses import ok, ok_list
from profit_tracker.db.dependencies import get_db_session
from profit_tracker.services.profit_reporting_service import ProfitReportingService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary")
def dashboard_summary(
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    """Total recorded revenue and the number of projects in progress."""

    return ok(ProfitReportingService(db).dashboard_summary())


@router.get("/pm-ranking")
def pm_ranking(
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    return ok_list(ProfitReportingService(db).pm_ranking())


@router.get("/alerts")
def alerts(
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    """Loss-making projects, worst first."""

    return ok_list(ProfitReportingService(db).alerts())
