from fastapi import APIRouter, Request
from sqlalchemy import text

from hostel_rooms.services.common import UnitOfWork

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    """Liveness plus a database round trip."""
    with UnitOfWork(request.app.state.session_factory) as uow:
        uow.session.execute(text("SELECT 1"))
    settings = request.app.state.settings
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.API_VERSION,
        "environment": settings.ENVIRONMENT,
    }
