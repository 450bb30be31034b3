"""Export endpoint for report datasets."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from profit_tracker.core.auth import RequestUserContext, get_current_user_context
from profit_tracker.db.dependencies import get_db_session
from profit_tracker.services.profit_reporting_service import ProfitReportingService

router = APIRouter(prefix="/exports", tags=["exports"])


@router.get("/{report_key}")
def export_report(
    report_key: str,
    format: str = Query(default="xlsx"),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> Response:
    exported = ProfitReportingService(db).export_report(report_key=report_key, format_name=format)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
