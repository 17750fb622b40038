"""
Room domain schemas.
"""

from hostel_rooms.schemas.room.allocation import (
    AllocationCreate,
    AllocationEnd,
    AllocationResponse,
    AllocationUpdate,
    RecentAllocation,
)
from hostel_rooms.schemas.room.maintenance import (
    MaintenanceRequestCreate,
    MaintenanceRequestResponse,
    MaintenanceStatusUpdate,
)
from hostel_rooms.schemas.room.room_base import RoomCreate, RoomUpdate
from hostel_rooms.schemas.room.room_response import BedResponse, OccupancyReport, RoomResponse

__all__ = [
    "RoomCreate",
    "RoomUpdate",
    "RoomResponse",
    "BedResponse",
    "OccupancyReport",
    "AllocationCreate",
    "AllocationEnd",
    "AllocationUpdate",
    "AllocationResponse",
    "RecentAllocation",
    "MaintenanceRequestCreate",
    "MaintenanceStatusUpdate",
    "MaintenanceRequestResponse",
]
