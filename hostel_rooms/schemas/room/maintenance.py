# --- File: hostel_rooms/schemas/room/maintenance.py ---
"""
Maintenance request schemas.
"""

from __future__ import annotations

from datetime import date as Date
from typing import Optional

from pydantic import Field

from hostel_rooms.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema
from hostel_rooms.schemas.common.enums import MaintenancePriority, MaintenanceStatus

__all__ = [
    "MaintenanceRequestCreate",
    "MaintenanceStatusUpdate",
    "MaintenanceRequestResponse",
]


class MaintenanceRequestCreate(BaseCreateSchema):
    """Report an issue with a room."""

    room_id: str = Field(..., description="Room ID")
    issue_type: str = Field(
        ...,
        min_length=1,
        max_length=100,
        examples=["plumbing", "electrical", "furniture"],
    )
    description: str = Field(..., min_length=1, max_length=2000)
    priority: MaintenancePriority = MaintenancePriority.MEDIUM
    estimated_completion_date: Optional[Date] = None
    notes: Optional[str] = Field(default=None, max_length=2000)


class MaintenanceStatusUpdate(BaseSchema):
    status: MaintenanceStatus
    notes: Optional[str] = Field(default=None, max_length=2000)


class MaintenanceRequestResponse(BaseResponseSchema):
    room_id: str
    issue_type: str
    description: str
    status: MaintenanceStatus
    priority: MaintenancePriority
    estimated_completion_date: Optional[Date] = None
    notes: Optional[str] = None
    reported_by: str
