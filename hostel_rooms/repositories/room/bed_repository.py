# hostel_rooms/repositories/room/bed_repository.py
"""
Bed repository.
"""

from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from hostel_rooms.models.room import Bed
from hostel_rooms.repositories.base import BaseRepository


class BedRepository(BaseRepository[Bed]):
    """
    Repository for Bed entity.

    ``claim`` and ``release`` are compare-and-swap updates on
    ``is_occupied``; they report whether this caller won.
    """

    def __init__(self, session: Session):
        super().__init__(Bed, session)

    def find_beds_by_room(self, room_id: str, only_free: bool = False) -> List[Bed]:
        """
        Beds of a room ordered by bed number.

        Args:
            room_id: Room ID
            only_free: Skip occupied beds
        """
        stmt = select(Bed).where(Bed.room_id == room_id)
        if only_free:
            stmt = stmt.where(Bed.is_occupied.is_(False))
        stmt = stmt.order_by(Bed.bed_number.asc())
        return list(self.session.execute(stmt).scalars())

    def lock_for_update(self, bed_id: str) -> Optional[Bed]:
        stmt = (
            select(Bed)
            .where(Bed.id == bed_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def count_occupied(self, room_id: str) -> int:
        stmt = select(func.count()).select_from(Bed).where(
            Bed.room_id == room_id,
            Bed.is_occupied.is_(True),
        )
        return self.session.execute(stmt).scalar_one()

    def max_bed_number(self, room_id: str) -> int:
        stmt = select(func.max(Bed.bed_number)).where(Bed.room_id == room_id)
        return self.session.execute(stmt).scalar_one() or 0

    def create_beds(self, room_id: str, numbers: List[int]) -> List[Bed]:
        return self.add_all([Bed(room_id=room_id, bed_number=n) for n in numbers])

    def highest_free_beds(self, room_id: str, limit: int) -> List[Bed]:
        """Free beds with the highest numbers first."""
        stmt = (
            select(Bed)
            .where(Bed.room_id == room_id, Bed.is_occupied.is_(False))
            .order_by(Bed.bed_number.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    # ============================================================================
    # OCCUPANCY
    # ============================================================================

    def claim(self, bed_id: str, student_id: str, allocation_id: str) -> bool:
        """Mark a free bed occupied. False if it was already taken."""
        stmt = (
            update(Bed)
            .where(Bed.id == bed_id, Bed.is_occupied.is_(False))
            .values(
                is_occupied=True,
                occupied_by=student_id,
                current_allocation_id=allocation_id,
            )
            .execution_options(synchronize_session=False)
        )
        matched = self.session.execute(stmt).rowcount == 1
        self.session.get(Bed, bed_id, populate_existing=True)
        return matched

    def release(self, bed_id: str) -> bool:
        """Free an occupied bed. False if it was already free."""
        stmt = (
            update(Bed)
            .where(Bed.id == bed_id, Bed.is_occupied.is_(True))
            .values(is_occupied=False, occupied_by=None, current_allocation_id=None)
            .execution_options(synchronize_session=False)
        )
        matched = self.session.execute(stmt).rowcount == 1
        self.session.get(Bed, bed_id, populate_existing=True)
        return matched
