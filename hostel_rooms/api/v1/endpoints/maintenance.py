"""
Maintenance request endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from hostel_rooms.api.deps import get_current_principal, get_maintenance_service
from hostel_rooms.schemas.room import (
    MaintenanceRequestCreate,
    MaintenanceRequestResponse,
    MaintenanceStatusUpdate,
)
from hostel_rooms.services.common.permissions import Principal
from hostel_rooms.services.room import MaintenanceService

router = APIRouter(prefix="/maintenance-requests", tags=["maintenance"])


@router.post("", response_model=MaintenanceRequestResponse, status_code=status.HTTP_201_CREATED)
def create_maintenance_request(
    payload: MaintenanceRequestCreate,
    principal: Principal = Depends(get_current_principal),
    maintenance: MaintenanceService = Depends(get_maintenance_service),
):
    return maintenance.create_request(payload, actor=principal)


@router.get("/pending", response_model=List[MaintenanceRequestResponse])
def list_pending_requests(
    limit: Optional[int] = Query(None, ge=1, le=100),
    principal: Principal = Depends(get_current_principal),
    maintenance: MaintenanceService = Depends(get_maintenance_service),
):
    return maintenance.list_pending(actor=principal, limit=limit)


@router.patch("/{request_id}", response_model=MaintenanceRequestResponse)
def update_request_status(
    request_id: str,
    payload: MaintenanceStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    maintenance: MaintenanceService = Depends(get_maintenance_service),
):
    return maintenance.update_status(request_id, payload, actor=principal)
