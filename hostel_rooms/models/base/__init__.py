"""
Base model package.

Declarative base and abstract models shared by all entities.
"""

from hostel_rooms.models.base.base_model import (
    Base,
    BaseModel,
    SoftDeleteModel,
    TimestampModel,
    new_id,
    utcnow,
)

__all__ = [
    "Base",
    "BaseModel",
    "SoftDeleteModel",
    "TimestampModel",
    "new_id",
    "utcnow",
]
