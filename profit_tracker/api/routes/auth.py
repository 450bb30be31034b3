"""Current user endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from profit_tracker.core.auth import RequestUserContext, get_current_user_context
from profit_tracker.core.responses import ok
from profit_tracker.db.dependencies import get_db_session
from profit_tracker.services.master_data_service import MasterDataService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
def get_me(
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    """Return the user row behind the bearer token."""

    service = MasterDataService(db)
    return ok(service.serialize_user(service.get_user(context.user_id)))
