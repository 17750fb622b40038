# hostel_rooms/repositories/room/room_repository.py
"""
Room repository.

Occupancy changes are conditional UPDATEs: the guard is part of the
WHERE clause, so a concurrent writer that got there first makes the
statement match zero rows instead of overshooting capacity.
"""

from typing import List, Optional

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from hostel_rooms.models.room import Room
from hostel_rooms.schemas.common.enums import RoomStatus, RoomType
from hostel_rooms.repositories.base import BaseRepository


class RoomRepository(BaseRepository[Room]):
    """
    Repository for Room entity.

    Handles:
    - Room lookups and filtered listings
    - Row locks for allocation workflows
    - Guarded occupancy counter updates
    """

    def __init__(self, session: Session):
        super().__init__(Room, session)

    # ============================================================================
    # LOOKUPS
    # ============================================================================

    def find_by_room_number(self, room_number: str) -> Optional[Room]:
        rooms = self.find_by_criteria({"room_number": room_number})
        return rooms[0] if rooms else None

    def lock_for_update(self, room_id: str) -> Optional[Room]:
        """
        Load a live room with a row lock (``SELECT ... FOR UPDATE``).

        SQLite ignores the lock clause; there the IMMEDIATE transaction
        already holds the database write lock.
        """
        stmt = (
            select(Room)
            .where(Room.id == room_id, Room.is_deleted.is_(False))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_rooms(
        self,
        available: Optional[bool] = None,
        room_type: Optional[RoomType] = None,
        floor: Optional[int] = None,
    ) -> List[Room]:
        """
        Live rooms ordered by room number.

        Args:
            available: True for rooms that can take an allocation, False
                for rooms that cannot, None for all
            room_type: Restrict to one room type
            floor: Restrict to one floor
        """
        stmt = select(Room).where(Room.is_deleted.is_(False))

        bookable = (Room.status != RoomStatus.MAINTENANCE.value) & (
            Room.occupied < Room.capacity
        )
        if available is True:
            stmt = stmt.where(bookable)
        elif available is False:
            stmt = stmt.where(~bookable)

        if room_type is not None:
            stmt = stmt.where(Room.room_type == RoomType(room_type).value)
        if floor is not None:
            stmt = stmt.where(Room.floor == floor)

        stmt = stmt.order_by(Room.room_number.asc())
        return list(self.session.execute(stmt).scalars())

    def list_available(self) -> List[Room]:
        """Rooms not under maintenance with at least one free bed."""
        return self.list_rooms(available=True)

    # ============================================================================
    # OCCUPANCY
    # ============================================================================

    def increment_occupancy(self, room_id: str) -> bool:
        """
        Add one occupant if the room has space and is not under maintenance.

        The room becomes FULL in the same statement when the new count
        reaches capacity. Returns False when the guard did not match.
        """
        stmt = (
            update(Room)
            .where(
                Room.id == room_id,
                Room.is_deleted.is_(False),
                Room.occupied < Room.capacity,
                Room.status != RoomStatus.MAINTENANCE.value,
            )
            .values(
                occupied=Room.occupied + 1,
                status=case(
                    (Room.occupied + 1 >= Room.capacity, RoomStatus.FULL.value),
                    else_=RoomStatus.AVAILABLE.value,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        matched = self.session.execute(stmt).rowcount == 1
        self._reload(room_id)
        return matched

    def decrement_occupancy(self, room_id: str) -> bool:
        """
        Remove one occupant, never going below zero.

        FULL reverts to AVAILABLE; MAINTENANCE is left untouched.
        Returns False when the count was already zero.
        """
        stmt = (
            update(Room)
            .where(Room.id == room_id, Room.occupied > 0)
            .values(
                occupied=Room.occupied - 1,
                status=case(
                    (Room.status == RoomStatus.FULL.value, RoomStatus.AVAILABLE.value),
                    else_=Room.status,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        matched = self.session.execute(stmt).rowcount == 1
        self._reload(room_id)
        return matched

    def set_occupancy(self, room: Room, occupied: int) -> Room:
        """Overwrite the counter and re-derive the status."""
        room.occupied = occupied
        room.status = Room.derive_status(occupied, room.capacity, room.status).value
        self.session.flush()
        return room

    def _reload(self, room_id: str) -> None:
        # Bulk UPDATEs bypass the identity map
        self.session.get(Room, room_id, populate_existing=True)
