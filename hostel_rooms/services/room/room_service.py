# hostel_rooms/services/room/room_service.py
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hostel_rooms.models.room import Room
from hostel_rooms.repositories.room import (
    BedRepository,
    RoomAllocationRepository,
    RoomRepository,
)
from hostel_rooms.schemas.common.enums import RoomStatus, RoomType
from hostel_rooms.schemas.room import (
    BedResponse,
    RoomCreate,
    RoomResponse,
    RoomUpdate,
)
from hostel_rooms.services.common import UnitOfWork
from hostel_rooms.services.common.errors import (
    AlreadyExistsError,
    BusinessRuleViolation,
    NotFoundError,
)
from hostel_rooms.services.common.mapping import to_schema, to_schema_list
from hostel_rooms.services.common.permissions import Principal, require_staff
from hostel_rooms.services.common.validation import ensure_uuid

logger = logging.getLogger(__name__)


class RoomService:
    """
    Room catalogue: listings, bed views and staff-side room management.

    - Read operations are open to any authenticated caller.
    - Create/update/delete require a staff principal.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_rooms(
        self,
        *,
        available: Optional[bool] = None,
        room_type: Optional[RoomType] = None,
        floor: Optional[int] = None,
    ) -> List[RoomResponse]:
        with UnitOfWork(self._session_factory) as uow:
            rooms = uow.get_repo(RoomRepository).list_rooms(
                available=available,
                room_type=room_type,
                floor=floor,
            )
            return to_schema_list(rooms, RoomResponse)

    def list_available_rooms(self) -> List[RoomResponse]:
        """Rooms that can take another allocation, ordered by room number."""
        with UnitOfWork(self._session_factory) as uow:
            return to_schema_list(uow.get_repo(RoomRepository).list_available(), RoomResponse)

    def get_room(self, room_id: str) -> RoomResponse:
        room_id = ensure_uuid(room_id, "room_id")
        with UnitOfWork(self._session_factory) as uow:
            room = uow.get_repo(RoomRepository).find_by_id(room_id)
            if room is None:
                raise NotFoundError("Room", room_id)
            return to_schema(room, RoomResponse)

    def list_beds_in_room(self, room_id: str, *, only_free: bool = False) -> List[BedResponse]:
        room_id = ensure_uuid(room_id, "room_id")
        with UnitOfWork(self._session_factory) as uow:
            if uow.get_repo(RoomRepository).find_by_id(room_id) is None:
                raise NotFoundError("Room", room_id)
            beds = uow.get_repo(BedRepository).find_beds_by_room(room_id, only_free=only_free)
            return to_schema_list(beds, BedResponse)

    # ------------------------------------------------------------------ #
    # Management
    # ------------------------------------------------------------------ #

    def create_room(self, data: RoomCreate, *, actor: Principal) -> RoomResponse:
        """Create a room with beds numbered 1..capacity."""
        require_staff(actor)

        with UnitOfWork(self._session_factory) as uow:
            room_repo = uow.get_repo(RoomRepository)
            if room_repo.find_by_room_number(data.room_number) is not None:
                raise AlreadyExistsError("Room", "room_number", data.room_number)

            room = Room(
                room_number=data.room_number,
                floor=data.floor,
                building=data.building,
                room_type=data.room_type.value,
                capacity=data.capacity,
                occupied=0,
                status=RoomStatus.AVAILABLE.value,
                amenities=list(data.amenities),
                price=data.price,
            )
            try:
                room_repo.add(room)
            except IntegrityError as exc:
                raise AlreadyExistsError("Room", "room_number", data.room_number) from exc

            uow.get_repo(BedRepository).create_beds(room.id, list(range(1, data.capacity + 1)))
            result = to_schema(room, RoomResponse)

        logger.info(
            f"Created room {result.room_number} with {result.capacity} beds",
            extra={"room_id": result.id},
        )
        return result

    def update_room(self, room_id: str, data: RoomUpdate, *, actor: Principal) -> RoomResponse:
        """
        Apply a partial update.

        Capacity changes add beds after the highest bed number or remove
        the highest-numbered free beds. Capacity can never drop below the
        number of occupied beds.
        """
        require_staff(actor)
        room_id = ensure_uuid(room_id, "room_id")
        changes = data.model_dump(exclude_unset=True)

        with UnitOfWork(self._session_factory) as uow:
            room_repo = uow.get_repo(RoomRepository)
            bed_repo = uow.get_repo(BedRepository)

            room = room_repo.lock_for_update(room_id)
            if room is None:
                raise NotFoundError("Room", room_id)

            new_number = changes.get("room_number")
            if new_number is not None and new_number != room.room_number:
                clash = room_repo.find_by_room_number(new_number)
                if clash is not None and clash.id != room.id:
                    raise AlreadyExistsError("Room", "room_number", new_number)

            new_capacity = changes.pop("capacity", None)
            if new_capacity is not None and new_capacity != room.capacity:
                self._resize_beds(room, new_capacity, bed_repo)

            requested_status = changes.pop("status", None)
            if changes.get("room_type") is not None:
                changes["room_type"] = RoomType(changes["room_type"]).value
            for key in ("room_number", "floor", "room_type", "amenities", "price"):
                if key in changes and changes[key] is None:
                    changes.pop(key)
            room_repo.update_fields(room, changes)

            if requested_status is not None:
                current = RoomStatus(requested_status).value
            else:
                current = room.status
            room.status = Room.derive_status(room.occupied, room.capacity, current).value

            try:
                uow.flush()
            except IntegrityError as exc:
                raise AlreadyExistsError("Room", "room_number", room.room_number) from exc
            result = to_schema(room, RoomResponse)

        logger.info(f"Updated room {result.room_number}", extra={"room_id": result.id})
        return result

    def _resize_beds(self, room: Room, new_capacity: int, bed_repo: BedRepository) -> None:
        occupied_beds = bed_repo.count_occupied(room.id)
        if new_capacity < max(occupied_beds, room.occupied):
            raise BusinessRuleViolation(
                "capacity_below_occupancy",
                f"Cannot reduce capacity of room {room.room_number} to {new_capacity}: "
                f"{max(occupied_beds, room.occupied)} beds are occupied",
                details={"capacity": new_capacity, "occupied": room.occupied},
            )

        existing = bed_repo.find_beds_by_room(room.id)
        if new_capacity > len(existing):
            start = bed_repo.max_bed_number(room.id) + 1
            bed_repo.create_beds(room.id, list(range(start, start + new_capacity - len(existing))))
        elif new_capacity < len(existing):
            for bed in bed_repo.highest_free_beds(room.id, len(existing) - new_capacity):
                bed_repo.delete(bed)

        room.capacity = new_capacity

    def delete_room(self, room_id: str, *, actor: Principal) -> None:
        """Soft-delete a room that nobody occupies."""
        require_staff(actor)
        room_id = ensure_uuid(room_id, "room_id")

        with UnitOfWork(self._session_factory) as uow:
            room_repo = uow.get_repo(RoomRepository)
            room = room_repo.lock_for_update(room_id)
            if room is None:
                raise NotFoundError("Room", room_id)

            occupied_beds = uow.get_repo(BedRepository).count_occupied(room_id)
            active = uow.get_repo(RoomAllocationRepository).count_active_for_room(room_id)
            if occupied_beds or active or room.occupied:
                raise BusinessRuleViolation(
                    "room_has_occupants",
                    f"Room {room.room_number} still has occupants",
                    details={"occupied_beds": occupied_beds, "active_allocations": active},
                )
            room_repo.soft_delete(room, deleted_by=actor.user_id)

        logger.info(f"Deleted room {room_id}", extra={"room_id": room_id})
