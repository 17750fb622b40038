# hostel_rooms/models/room/room_allocation.py
"""
Room allocation model.

Links a student to one bed for a span of dates. Ending an allocation
changes its status; rows are never deleted.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_rooms.models.base import TimestampModel
from hostel_rooms.schemas.common.enums import AllocationStatus, PaymentStatus

if TYPE_CHECKING:
    from hostel_rooms.models.room.bed import Bed
    from hostel_rooms.models.room.room import Room

__all__ = ["RoomAllocation"]

_ACTIVE = text("status = 'active'")


class RoomAllocation(TimestampModel):
    """Assignment of a student to a bed."""

    __tablename__ = "room_allocations"
    __table_args__ = (
        # At most one active allocation per bed and per student
        Index(
            "uq_room_allocations_active_bed",
            "bed_id",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
        Index(
            "uq_room_allocations_active_student",
            "student_id",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
        Index("ix_room_allocations_created", "created_at"),
    )

    student_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    room_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("rooms.id"),
        nullable=False,
        index=True,
    )
    # Cleared if a free bed is later removed when the room shrinks
    bed_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("beds.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[AllocationStatus] = mapped_column(
        String(20),
        nullable=False,
        default=AllocationStatus.ACTIVE.value,
        index=True,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.PENDING.value,
    )

    allocated_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    ended_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    room: Mapped["Room"] = relationship()
    bed: Mapped["Bed"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<RoomAllocation(id={self.id}, student_id={self.student_id}, "
            f"bed_id={self.bed_id}, status={self.status})>"
        )

    @property
    def is_active(self) -> bool:
        return self.status == AllocationStatus.ACTIVE
