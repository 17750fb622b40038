from fastapi import APIRouter, Depends

from hostel_rooms.api.deps import get_allocation_service, get_current_principal
from hostel_rooms.schemas.room import AllocationResponse
from hostel_rooms.services.common.permissions import Principal
from hostel_rooms.services.room import AllocationService

router = APIRouter(prefix="/students", tags=["students"])


@router.get("/{student_id}/allocation", response_model=AllocationResponse)
def get_student_allocation(
    student_id: str,
    principal: Principal = Depends(get_current_principal),
    allocations: AllocationService = Depends(get_allocation_service),
):
    """Active allocation of a student (staff, or the student themself)."""
    return allocations.get_student_allocation(student_id, actor=principal)
