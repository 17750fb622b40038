"""Room domain repositories."""

from hostel_rooms.repositories.room.bed_repository import BedRepository
from hostel_rooms.repositories.room.maintenance_request_repository import (
    MaintenanceRequestRepository,
)
from hostel_rooms.repositories.room.room_allocation_repository import RoomAllocationRepository
from hostel_rooms.repositories.room.room_repository import RoomRepository

__all__ = [
    "RoomRepository",
    "BedRepository",
    "RoomAllocationRepository",
    "MaintenanceRequestRepository",
]
