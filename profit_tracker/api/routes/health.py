"""Health check endpoints."""

from fastapi import APIRouter

from profit_tracker.models.entities import utcnow

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    """Simple liveness endpoint."""

    return {"status": "ok", "timestamp": utcnow().isoformat()}
