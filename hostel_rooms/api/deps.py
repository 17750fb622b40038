"""
FastAPI dependencies.

Services live on ``app.state`` (built once in ``create_app``); the caller's
``Principal`` comes from the bearer token.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hostel_rooms.config.logging import get_logger
from hostel_rooms.services.common.errors import AuthenticationError
from hostel_rooms.services.common.permissions import Principal
from hostel_rooms.services.common.security import JWTSettings, principal_from_token
from hostel_rooms.services.room import (
    AllocationService,
    MaintenanceService,
    OccupancyService,
    RoomService,
)

logger = get_logger(__name__)

# Security scheme; missing credentials are reported by get_current_principal
bearer_scheme = HTTPBearer(auto_error=False)


def get_room_service(request: Request) -> RoomService:
    return request.app.state.room_service


def get_allocation_service(request: Request) -> AllocationService:
    return request.app.state.allocation_service


def get_occupancy_service(request: Request) -> OccupancyService:
    return request.app.state.occupancy_service


def get_maintenance_service(request: Request) -> MaintenanceService:
    return request.app.state.maintenance_service


def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    Resolve the caller from the ``Authorization: Bearer`` header.

    Raises:
        AuthenticationError: missing, malformed or expired token
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    jwt_settings: JWTSettings = request.app.state.jwt_settings
    principal = principal_from_token(credentials.credentials, jwt_settings)
    request.state.user_id = principal.user_id
    return principal
