"""
Room domain models: rooms, beds, allocations and maintenance requests.
"""

from hostel_rooms.models.room.bed import Bed
from hostel_rooms.models.room.maintenance_request import MaintenanceRequest
from hostel_rooms.models.room.room import Room
from hostel_rooms.models.room.room_allocation import RoomAllocation

__all__ = [
    "Room",
    "Bed",
    "RoomAllocation",
    "MaintenanceRequest",
]
