# --- File: hostel_rooms/schemas/room/allocation.py ---
"""
Room allocation schemas.

Date ordering and id formats are checked by the allocation service so
that every caller gets the same errors.
"""

from __future__ import annotations

from datetime import date as Date, datetime
from typing import Optional

from pydantic import Field, computed_field

from hostel_rooms.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from hostel_rooms.schemas.common.enums import AllocationStatus, PaymentStatus, RoomType

__all__ = [
    "AllocationCreate",
    "AllocationEnd",
    "AllocationUpdate",
    "AllocationResponse",
    "RecentAllocation",
]


class AllocationCreate(BaseCreateSchema):
    """Assign a student to a bed."""

    student_id: str = Field(..., description="Student ID")
    room_id: str = Field(..., description="Room ID")
    bed_id: str = Field(..., description="Bed ID")
    start_date: Optional[Date] = Field(default=None, description="Defaults to today")
    end_date: Optional[Date] = Field(default=None, description="Planned move-out date")
    payment_status: PaymentStatus = PaymentStatus.PENDING


class AllocationEnd(BaseSchema):
    end_date: Optional[Date] = Field(default=None, description="Defaults to today")


class AllocationUpdate(BaseUpdateSchema):
    """Change the planned end date or payment state of an allocation."""

    end_date: Optional[Date] = None
    payment_status: Optional[PaymentStatus] = None


class AllocationResponse(BaseResponseSchema):
    student_id: str
    room_id: str
    bed_id: Optional[str] = None
    start_date: Date
    end_date: Optional[Date] = None
    status: AllocationStatus
    payment_status: PaymentStatus
    allocated_by: Optional[str] = None
    ended_by: Optional[str] = None
    ended_at: Optional[datetime] = None


class RecentAllocation(BaseSchema):
    """Allocation summary row for the staff dashboard."""

    id: str
    student_id: str
    room_id: str
    room_number: str
    room_type: RoomType
    start_date: Date
    end_date: Optional[Date] = None
    status: AllocationStatus
    created_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status_label(self) -> str:
        return "Active" if self.status == AllocationStatus.ACTIVE else "Ended"
