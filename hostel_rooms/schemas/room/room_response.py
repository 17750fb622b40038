# --- File: hostel_rooms/schemas/room/room_response.py ---
"""
Room and bed response schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, computed_field

from hostel_rooms.schemas.common.base import BaseResponseSchema, BaseSchema
from hostel_rooms.schemas.common.enums import RoomStatus, RoomType

__all__ = [
    "RoomResponse",
    "BedResponse",
    "OccupancyReport",
]


class RoomResponse(BaseResponseSchema):
    """Standard room response schema."""

    room_number: str = Field(..., description="Room number")
    floor: int = Field(..., ge=0, description="Floor number")
    building: Optional[str] = Field(default=None, description="Building")

    room_type: RoomType = Field(..., description="Room type")
    capacity: int = Field(..., ge=1, description="Total bed capacity")
    occupied: int = Field(..., ge=0, description="Currently occupied beds")
    status: RoomStatus = Field(..., description="Room status")

    amenities: List[str] = Field(default_factory=list)
    price: Decimal = Field(..., ge=0, description="Monthly rent")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def available_beds(self) -> int:
        """Free beds left in the room."""
        return max(0, self.capacity - self.occupied)


class BedResponse(BaseSchema):
    """Bed with its current occupant."""

    id: str = Field(..., description="Bed ID")
    room_id: str = Field(..., description="Room ID")
    bed_number: int = Field(..., ge=1, description="Bed number within the room")
    is_occupied: bool = Field(..., description="Currently occupied")
    occupied_by: Optional[str] = Field(default=None, description="Current student ID")
    current_allocation_id: Optional[str] = None


class OccupancyReport(BaseSchema):
    """
    Result of reconciling a room's counter with its bed flags.

    ``previous_*`` hold the stored values before the repair.
    """

    room_id: str
    room_number: str
    capacity: int
    previous_occupied: int
    occupied: int
    previous_status: RoomStatus
    status: RoomStatus
    checked_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def drift_detected(self) -> bool:
        return self.previous_occupied != self.occupied or self.previous_status != self.status
