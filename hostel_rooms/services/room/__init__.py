"""
Room domain services.
"""

from hostel_rooms.services.room.allocation_events import (
    AllocationEvent,
    AllocationEventPublisher,
    default_publisher,
)
from hostel_rooms.services.room.allocation_service import AllocationService
from hostel_rooms.services.room.maintenance_service import MaintenanceService
from hostel_rooms.services.room.occupancy_service import OccupancyService
from hostel_rooms.services.room.room_service import RoomService

__all__ = [
    "RoomService",
    "AllocationService",
    "OccupancyService",
    "MaintenanceService",
    "AllocationEvent",
    "AllocationEventPublisher",
    "default_publisher",
]
