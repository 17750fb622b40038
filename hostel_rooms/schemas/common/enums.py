"""
Enumerations shared by models and schemas.

Each entity has its own status enum; room, allocation and maintenance
statuses are never mixed.
"""

from enum import Enum

__all__ = [
    "UserRole",
    "RoomType",
    "RoomStatus",
    "AllocationStatus",
    "PaymentStatus",
    "MaintenancePriority",
    "MaintenanceStatus",
]


class UserRole(str, Enum):
    """Roles issued by the identity service."""

    STUDENT = "student"
    STAFF = "staff"


class RoomType(str, Enum):
    """Room occupancy type."""

    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    QUAD = "quad"
    SUITE = "suite"


class RoomStatus(str, Enum):
    """
    Room availability.

    FULL is derived from occupancy; MAINTENANCE overrides it.
    """

    AVAILABLE = "available"
    FULL = "full"
    MAINTENANCE = "maintenance"


class AllocationStatus(str, Enum):
    """Room allocation lifecycle."""

    ACTIVE = "active"
    ENDED = "ended"


class PaymentStatus(str, Enum):
    """Payment state of an allocation."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    REFUNDED = "refunded"


class MaintenancePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MaintenanceStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
