# hostel_rooms/models/room/bed.py
"""
Bed model.

One allocatable sleeping slot inside a room.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_rooms.models.base import TimestampModel

if TYPE_CHECKING:
    from hostel_rooms.models.room.room import Room

__all__ = ["Bed"]


class Bed(TimestampModel):
    """Individual bed with its current occupant."""

    __tablename__ = "beds"
    __table_args__ = (
        UniqueConstraint("room_id", "bed_number", name="uq_beds_room_bed_number"),
    )

    room_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    bed_number: Mapped[int] = mapped_column(Integer, nullable=False)

    is_occupied: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )
    # Current occupant
    occupied_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    current_allocation_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    room: Mapped["Room"] = relationship(back_populates="beds")

    def __repr__(self) -> str:
        return (
            f"<Bed(id={self.id}, room_id={self.room_id}, "
            f"bed_number={self.bed_number}, occupied={self.is_occupied})>"
        )
