# hostel_rooms/models/room/maintenance_request.py
"""
Maintenance request model.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_rooms.models.base import TimestampModel
from hostel_rooms.schemas.common.enums import MaintenancePriority, MaintenanceStatus

if TYPE_CHECKING:
    from hostel_rooms.models.room.room import Room

__all__ = ["MaintenanceRequest"]


class MaintenanceRequest(TimestampModel):
    """An issue reported against a room."""

    __tablename__ = "maintenance_requests"

    room_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("rooms.id"),
        nullable=False,
        index=True,
    )
    issue_type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[MaintenanceStatus] = mapped_column(
        String(20),
        nullable=False,
        default=MaintenanceStatus.PENDING.value,
        index=True,
    )
    priority: Mapped[MaintenancePriority] = mapped_column(
        String(20),
        nullable=False,
        default=MaintenancePriority.MEDIUM.value,
    )
    estimated_completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reported_by: Mapped[str] = mapped_column(String(36), nullable=False)

    room: Mapped["Room"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<MaintenanceRequest(id={self.id}, room_id={self.room_id}, "
            f"status={self.status})>"
        )
