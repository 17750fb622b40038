# --- File: hostel_rooms/schemas/room/room_base.py ---
"""
Room input schemas.

Creation and partial update payloads for rooms. ``full`` is never
accepted as an explicit status because it is derived from occupancy.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import Field, field_validator

from hostel_rooms.schemas.common.base import BaseCreateSchema, BaseUpdateSchema
from hostel_rooms.schemas.common.enums import RoomStatus, RoomType

__all__ = [
    "RoomCreate",
    "RoomUpdate",
]

Price = Annotated[
    Decimal,
    Field(ge=0, max_digits=10, decimal_places=2, description="Monthly rent amount"),
]


def _clean_amenities(v: Optional[List[str]]) -> Optional[List[str]]:
    """Strip, drop blanks and duplicates while keeping first-seen order."""
    if v is None:
        return None
    seen: List[str] = []
    for item in v:
        item = item.strip()
        if item and item not in seen:
            seen.append(item)
    return seen


class RoomCreate(BaseCreateSchema):
    """Create a room together with its beds."""

    room_number: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Room number/identifier (e.g., '101', 'A-201')",
        examples=["101", "A-201"],
    )
    floor: int = Field(default=0, ge=0, le=200, description="Floor number (0 for ground floor)")
    building: Optional[str] = Field(default=None, max_length=100)
    room_type: RoomType = Field(..., description="Room occupancy type")
    capacity: int = Field(..., ge=1, le=20, description="Total bed capacity in the room")
    amenities: List[str] = Field(default_factory=list, description="Amenity labels")
    price: Price = Decimal("0.00")

    @field_validator("amenities")
    @classmethod
    def normalize_amenities(cls, v: List[str]) -> List[str]:
        return _clean_amenities(v)


class RoomUpdate(BaseUpdateSchema):
    """
    Partial room update.

    Only fields that are set are applied. ``status`` may be set to
    ``available`` or ``maintenance``.
    """

    room_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    floor: Optional[int] = Field(default=None, ge=0, le=200)
    building: Optional[str] = Field(default=None, max_length=100)
    room_type: Optional[RoomType] = None
    capacity: Optional[int] = Field(default=None, ge=1, le=20)
    amenities: Optional[List[str]] = None
    price: Optional[Price] = None
    status: Optional[RoomStatus] = None

    @field_validator("amenities")
    @classmethod
    def normalize_amenities(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_amenities(v)

    @field_validator("status")
    @classmethod
    def status_not_derived(cls, v: Optional[RoomStatus]) -> Optional[RoomStatus]:
        if v == RoomStatus.FULL:
            raise ValueError("status 'full' is derived from occupancy and cannot be set")
        return v
