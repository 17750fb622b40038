# hostel_rooms/repositories/room/room_allocation_repository.py
"""
Room allocation repository.
"""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, joinedload

from hostel_rooms.models.room import RoomAllocation
from hostel_rooms.schemas.common.enums import AllocationStatus
from hostel_rooms.repositories.base import BaseRepository

_ACTIVE = AllocationStatus.ACTIVE.value


class RoomAllocationRepository(BaseRepository[RoomAllocation]):
    """Repository for RoomAllocation entity."""

    def __init__(self, session: Session):
        super().__init__(RoomAllocation, session)

    def find_active_for_student(self, student_id: str) -> Optional[RoomAllocation]:
        stmt = select(RoomAllocation).where(
            RoomAllocation.student_id == student_id,
            RoomAllocation.status == _ACTIVE,
        )
        return self.session.execute(stmt).scalars().first()

    def count_active_for_room(self, room_id: str) -> int:
        stmt = select(func.count()).select_from(RoomAllocation).where(
            RoomAllocation.room_id == room_id,
            RoomAllocation.status == _ACTIVE,
        )
        return self.session.execute(stmt).scalar_one()

    def find_recent(self, limit: int) -> List[RoomAllocation]:
        """
        Newest allocations first, with their room loaded.

        Args:
            limit: Maximum number of allocations
        """
        stmt = (
            select(RoomAllocation)
            .options(joinedload(RoomAllocation.room))
            .order_by(RoomAllocation.created_at.desc(), RoomAllocation.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def end(
        self,
        allocation_id: str,
        end_date: date,
        ended_at: datetime,
        ended_by: Optional[str] = None,
    ) -> bool:
        """
        Move an active allocation to ENDED.

        Returns False when the allocation was no longer active.
        """
        stmt = (
            update(RoomAllocation)
            .where(RoomAllocation.id == allocation_id, RoomAllocation.status == _ACTIVE)
            .values(
                status=AllocationStatus.ENDED.value,
                end_date=end_date,
                ended_at=ended_at,
                ended_by=ended_by,
                updated_at=ended_at,
            )
            .execution_options(synchronize_session=False)
        )
        matched = self.session.execute(stmt).rowcount == 1
        self.session.get(RoomAllocation, allocation_id, populate_existing=True)
        return matched
