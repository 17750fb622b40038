from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from hostel_rooms.api.v1 import api_router
from hostel_rooms.config.logging import get_logger, setup_logging
from hostel_rooms.config.settings import Settings, get_settings
from hostel_rooms.core import register_exception_handlers, register_middlewares
from hostel_rooms.db.init_db import init_db
from hostel_rooms.db.session import get_engine, make_session_factory
from hostel_rooms.services.common.security import JWTSettings
from hostel_rooms.services.room import (
    AllocationService,
    MaintenanceService,
    OccupancyService,
    RoomService,
    default_publisher,
)

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Builds the services on ``app.state`` around one session factory.
    - Registers CORS, core middleware and exception handlers.
    - Includes the versioned API router under ``API_V1_STR``.

    The engine is created lazily from settings unless one is passed in.
    """
    settings = settings or get_settings()
    engine = engine or get_engine()
    session_factory = make_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Schema creation for dev/demo only; production uses migrations
        if not settings.is_production():
            init_db(engine)
        logger.info(f"{settings.APP_NAME} started", extra={"environment": settings.ENVIRONMENT})
        yield
        logger.info(f"{settings.APP_NAME} stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    events = default_publisher()
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.jwt_settings = JWTSettings.from_settings(settings)
    app.state.events = events
    app.state.room_service = RoomService(session_factory)
    app.state.allocation_service = AllocationService(session_factory, events=events)
    app.state.occupancy_service = OccupancyService(session_factory, events=events)
    app.state.maintenance_service = MaintenanceService(session_factory)

    # Credentials cannot be combined with a wildcard origin
    wildcard = not settings.CORS_ORIGINS or settings.CORS_ORIGINS == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else settings.CORS_ORIGINS,
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middlewares(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    return app


def get_application() -> FastAPI:
    """Configure logging and build the app from the environment settings."""
    setup_logging()
    return create_app()


app = get_application()


if __name__ == "__main__":
    import uvicorn

    run_settings = get_settings()
    uvicorn.run(
        "hostel_rooms.main:app",
        host=run_settings.HOST,
        port=run_settings.PORT,
        reload=run_settings.is_development(),
    )
