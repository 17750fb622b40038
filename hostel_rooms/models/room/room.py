# hostel_rooms/models/room/room.py
"""
Room model.

A physical room with a fixed bed capacity. ``occupied`` and ``status``
are a projection of the room's bed flags and are only written together
with the bed/allocation change they are derived from.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, CheckConstraint, Index, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_rooms.models.base import SoftDeleteModel
from hostel_rooms.schemas.common.enums import RoomStatus, RoomType

if TYPE_CHECKING:
    from hostel_rooms.models.room.bed import Bed

__all__ = ["Room"]


class Room(SoftDeleteModel):
    """Physical room with capacity, pricing and amenities."""

    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_rooms_capacity_positive"),
        CheckConstraint(
            "occupied >= 0 AND occupied <= capacity",
            name="ck_rooms_occupied_within_capacity",
        ),
        Index(
            "uq_rooms_room_number_live",
            "room_number",
            unique=True,
            sqlite_where=text("is_deleted = 0"),
            postgresql_where=text("is_deleted = false"),
        ),
        Index("ix_rooms_status_occupancy", "status", "occupied", "capacity"),
    )

    room_number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    floor: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    building: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    room_type: Mapped[RoomType] = mapped_column(String(20), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    occupied: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[RoomStatus] = mapped_column(
        String(20),
        nullable=False,
        default=RoomStatus.AVAILABLE.value,
        index=True,
    )

    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    beds: Mapped[List["Bed"]] = relationship(
        back_populates="room",
        order_by="Bed.bed_number",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return (
            f"<Room(id={self.id}, room_number={self.room_number}, "
            f"occupied={self.occupied}/{self.capacity}, status={self.status})>"
        )

    @property
    def is_under_maintenance(self) -> bool:
        return self.status == RoomStatus.MAINTENANCE

    @property
    def is_fully_occupied(self) -> bool:
        return self.occupied >= self.capacity

    @staticmethod
    def derive_status(occupied: int, capacity: int, current: str) -> RoomStatus:
        """Status implied by an occupancy count; maintenance is kept as is."""
        if current == RoomStatus.MAINTENANCE:
            return RoomStatus.MAINTENANCE
        if occupied >= capacity:
            return RoomStatus.FULL
        return RoomStatus.AVAILABLE
