"""
SQLAlchemy models.

Importing this package registers every table on ``Base.metadata``.
"""

from hostel_rooms.models.base import Base
from hostel_rooms.models.room import Bed, MaintenanceRequest, Room, RoomAllocation

__all__ = [
    "Base",
    "Room",
    "Bed",
    "RoomAllocation",
    "MaintenanceRequest",
]
