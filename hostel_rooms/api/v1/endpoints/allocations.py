"""
Allocation endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from hostel_rooms.api.deps import get_allocation_service, get_current_principal
from hostel_rooms.schemas.room import (
    AllocationCreate,
    AllocationEnd,
    AllocationResponse,
    AllocationUpdate,
    RecentAllocation,
)
from hostel_rooms.services.common.permissions import Principal
from hostel_rooms.services.room import AllocationService

router = APIRouter(prefix="/allocations", tags=["allocations"])


@router.post("", response_model=AllocationResponse, status_code=status.HTTP_201_CREATED)
def allocate_bed(
    payload: AllocationCreate,
    principal: Principal = Depends(get_current_principal),
    allocations: AllocationService = Depends(get_allocation_service),
):
    return allocations.allocate(
        student_id=payload.student_id,
        room_id=payload.room_id,
        bed_id=payload.bed_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        payment_status=payload.payment_status,
        actor=principal,
    )


@router.get("/recent", response_model=List[RecentAllocation])
def recent_allocations(
    limit: Optional[int] = Query(None, ge=1, le=100),
    principal: Principal = Depends(get_current_principal),
    allocations: AllocationService = Depends(get_allocation_service),
):
    return allocations.recent_allocations(actor=principal, limit=limit)


@router.get("/{allocation_id}", response_model=AllocationResponse)
def get_allocation(
    allocation_id: str,
    principal: Principal = Depends(get_current_principal),
    allocations: AllocationService = Depends(get_allocation_service),
):
    return allocations.get_allocation(allocation_id, actor=principal)


@router.put("/{allocation_id}", response_model=AllocationResponse)
def update_allocation(
    allocation_id: str,
    payload: AllocationUpdate,
    principal: Principal = Depends(get_current_principal),
    allocations: AllocationService = Depends(get_allocation_service),
):
    return allocations.update_allocation(allocation_id, payload, actor=principal)


@router.post("/{allocation_id}/end", response_model=AllocationResponse)
def end_allocation(
    allocation_id: str,
    payload: Optional[AllocationEnd] = Body(None),
    principal: Principal = Depends(get_current_principal),
    allocations: AllocationService = Depends(get_allocation_service),
):
    end_date = payload.end_date if payload is not None else None
    return allocations.end_allocation(allocation_id, actor=principal, end_date=end_date)
