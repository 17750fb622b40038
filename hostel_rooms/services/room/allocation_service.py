# hostel_rooms/services/room/allocation_service.py
"""
Room allocation workflow.

Allocating and ending touch the bed, the room counter and the
allocation row in one UnitOfWork. The bed claim and the counter change
are guarded UPDATEs; if another transaction got there first the guard
matches nothing and the whole unit is rolled back with a ConflictError.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hostel_rooms.config.settings import settings
from hostel_rooms.models.room import RoomAllocation
from hostel_rooms.repositories.room import (
    BedRepository,
    RoomAllocationRepository,
    RoomRepository,
)
from hostel_rooms.schemas.common.enums import AllocationStatus, PaymentStatus
from hostel_rooms.schemas.room import (
    AllocationResponse,
    AllocationUpdate,
    RecentAllocation,
)
from hostel_rooms.services.common import UnitOfWork
from hostel_rooms.services.common.errors import (
    AllocationAlreadyEndedError,
    BedOccupiedError,
    BusinessRuleViolation,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from hostel_rooms.services.common.mapping import to_schema
from hostel_rooms.services.common.permissions import (
    Principal,
    require_staff,
    require_staff_or_owner,
)
from hostel_rooms.services.common.validation import ensure_uuid
from hostel_rooms.services.room.allocation_events import (
    ALLOCATION_CREATED,
    ALLOCATION_ENDED,
    ALLOCATION_UPDATED,
    AllocationEvent,
    AllocationEventPublisher,
    default_publisher,
)

logger = logging.getLogger(__name__)

MAX_RECENT_LIMIT = 100


class AllocationService:
    """
    Assigns students to beds and ends those assignments.

    All mutating operations require a staff principal.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        events: Optional[AllocationEventPublisher] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._session_factory = session_factory
        self._events = events if events is not None else default_publisher()
        self._today = today

    # ------------------------------------------------------------------ #
    # Allocate
    # ------------------------------------------------------------------ #

    def allocate(
        self,
        *,
        student_id: str,
        room_id: str,
        bed_id: str,
        actor: Principal,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
    ) -> AllocationResponse:
        """
        Assign ``student_id`` to a free bed.

        Raises:
            PermissionDenied: actor is not staff
            ValidationError: malformed ids, bed outside the room, bad dates
            NotFoundError: unknown room or bed
            BusinessRuleViolation: room under maintenance, student already housed
            ConflictError: bed or room filled up concurrently
        """
        require_staff(actor)
        student_id = ensure_uuid(student_id, "student_id")
        room_id = ensure_uuid(room_id, "room_id")
        bed_id = ensure_uuid(bed_id, "bed_id")

        start = start_date or self._today()
        if end_date is not None and end_date < start:
            raise ValidationError("end_date must not be before start_date", field="end_date")

        with UnitOfWork(self._session_factory) as uow:
            room_repo = uow.get_repo(RoomRepository)
            bed_repo = uow.get_repo(BedRepository)
            alloc_repo = uow.get_repo(RoomAllocationRepository)

            room = room_repo.lock_for_update(room_id)
            if room is None:
                raise NotFoundError("Room", room_id)
            if room.is_under_maintenance:
                raise BusinessRuleViolation(
                    "room_under_maintenance",
                    f"Room {room.room_number} is under maintenance",
                    details={"room_id": room_id},
                )

            bed = bed_repo.lock_for_update(bed_id)
            if bed is None:
                raise NotFoundError("Bed", bed_id)
            if bed.room_id != room.id:
                raise ValidationError(
                    f"Bed {bed_id} does not belong to room {room.room_number}",
                    field="bed_id",
                )
            if bed.is_occupied:
                raise BedOccupiedError(bed_id)
            if room.is_fully_occupied:
                raise ConflictError(
                    f"Room {room.room_number} is fully occupied",
                    conflicting_field="room_id",
                )

            current = alloc_repo.find_active_for_student(student_id)
            if current is not None:
                raise BusinessRuleViolation(
                    "one_active_allocation_per_student",
                    f"Student {student_id} already has an active allocation",
                    details={"allocation_id": current.id},
                )

            allocation = RoomAllocation(
                student_id=student_id,
                room_id=room_id,
                bed_id=bed_id,
                start_date=start,
                end_date=end_date,
                status=AllocationStatus.ACTIVE.value,
                payment_status=PaymentStatus(payment_status).value,
                allocated_by=actor.user_id,
            )
            try:
                alloc_repo.add(allocation)
            except IntegrityError as exc:
                raise ConflictError(
                    "Bed or student already has an active allocation",
                    conflicting_field="bed_id",
                ) from exc

            if not bed_repo.claim(bed_id, student_id, allocation.id):
                raise BedOccupiedError(bed_id)
            if not room_repo.increment_occupancy(room_id):
                raise ConflictError(
                    f"Room {room.room_number} has no free capacity",
                    conflicting_field="room_id",
                )

            result = to_schema(allocation, AllocationResponse)
            room_status = room.status

        logger.info(
            f"Allocated bed {bed_id} to student {student_id}",
            extra={
                "allocation_id": result.id,
                "room_id": room_id,
                "bed_id": bed_id,
                "room_status": room_status,
            },
        )
        self._events.publish(
            AllocationEvent(
                event_type=ALLOCATION_CREATED,
                room_id=room_id,
                allocation_id=result.id,
                student_id=student_id,
                bed_id=bed_id,
                actor_id=actor.user_id,
            )
        )
        return result

    # ------------------------------------------------------------------ #
    # End
    # ------------------------------------------------------------------ #

    def end_allocation(
        self,
        allocation_id: str,
        *,
        actor: Principal,
        end_date: Optional[date] = None,
    ) -> AllocationResponse:
        """
        End an active allocation and free its bed.

        ``end_date`` defaults to today, or to the start date for an
        allocation that has not started yet.

        Raises:
            NotFoundError: unknown allocation
            AllocationAlreadyEndedError: allocation is not active
            ValidationError: end_date before start_date
        """
        require_staff(actor)
        allocation_id = ensure_uuid(allocation_id, "allocation_id")

        with UnitOfWork(self._session_factory) as uow:
            room_repo = uow.get_repo(RoomRepository)
            bed_repo = uow.get_repo(BedRepository)
            alloc_repo = uow.get_repo(RoomAllocationRepository)

            allocation = alloc_repo.find_by_id(allocation_id)
            if allocation is None:
                raise NotFoundError("RoomAllocation", allocation_id)
            if not allocation.is_active:
                raise AllocationAlreadyEndedError(allocation_id)

            end = end_date or max(self._today(), allocation.start_date)
            if end < allocation.start_date:
                raise ValidationError("end_date must not be before start_date", field="end_date")

            # Same lock order as allocate: room, then bed
            room_repo.lock_for_update(allocation.room_id)
            if allocation.bed_id is not None:
                bed_repo.lock_for_update(allocation.bed_id)

            now = datetime.now(timezone.utc)
            if not alloc_repo.end(allocation_id, end, now, ended_by=actor.user_id):
                raise AllocationAlreadyEndedError(allocation_id)

            if allocation.bed_id is None or not bed_repo.release(allocation.bed_id):
                logger.warning(
                    f"Bed of allocation {allocation_id} was already free",
                    extra={"allocation_id": allocation_id, "bed_id": allocation.bed_id},
                )
            if not room_repo.decrement_occupancy(allocation.room_id):
                logger.warning(
                    f"Room {allocation.room_id} occupancy already at zero",
                    extra={"allocation_id": allocation_id, "room_id": allocation.room_id},
                )

            result = to_schema(allocation, AllocationResponse)

        logger.info(
            f"Ended allocation {allocation_id}",
            extra={"allocation_id": allocation_id, "room_id": result.room_id, "bed_id": result.bed_id},
        )
        self._events.publish(
            AllocationEvent(
                event_type=ALLOCATION_ENDED,
                room_id=result.room_id,
                allocation_id=allocation_id,
                student_id=result.student_id,
                bed_id=result.bed_id,
                actor_id=actor.user_id,
                data={"end_date": result.end_date.isoformat()},
            )
        )
        return result

    # ------------------------------------------------------------------ #
    # Maintenance of allocation records
    # ------------------------------------------------------------------ #

    def update_allocation(
        self,
        allocation_id: str,
        data: AllocationUpdate,
        *,
        actor: Principal,
    ) -> AllocationResponse:
        """Change the planned end date or the payment status."""
        require_staff(actor)
        allocation_id = ensure_uuid(allocation_id, "allocation_id")
        changes = data.model_dump(exclude_unset=True)

        with UnitOfWork(self._session_factory) as uow:
            alloc_repo = uow.get_repo(RoomAllocationRepository)
            allocation = alloc_repo.find_by_id(allocation_id)
            if allocation is None:
                raise NotFoundError("RoomAllocation", allocation_id)

            values = {}
            if "end_date" in changes:
                if not allocation.is_active:
                    raise AllocationAlreadyEndedError(allocation_id)
                new_end = changes["end_date"]
                if new_end is not None and new_end < allocation.start_date:
                    raise ValidationError(
                        "end_date must not be before start_date", field="end_date"
                    )
                values["end_date"] = new_end
            if changes.get("payment_status") is not None:
                values["payment_status"] = PaymentStatus(changes["payment_status"]).value

            alloc_repo.update_fields(allocation, values)
            result = to_schema(allocation, AllocationResponse)

        self._events.publish(
            AllocationEvent(
                event_type=ALLOCATION_UPDATED,
                room_id=result.room_id,
                allocation_id=allocation_id,
                student_id=result.student_id,
                bed_id=result.bed_id,
                actor_id=actor.user_id,
                data={key: str(value) for key, value in values.items()},
            )
        )
        return result

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get_allocation(self, allocation_id: str, *, actor: Principal) -> AllocationResponse:
        allocation_id = ensure_uuid(allocation_id, "allocation_id")
        with UnitOfWork(self._session_factory) as uow:
            allocation = uow.get_repo(RoomAllocationRepository).find_by_id(allocation_id)
            if allocation is None:
                raise NotFoundError("RoomAllocation", allocation_id)
            require_staff_or_owner(actor, allocation.student_id, resource_type="allocation")
            return to_schema(allocation, AllocationResponse)

    def get_student_allocation(self, student_id: str, *, actor: Principal) -> AllocationResponse:
        """Active allocation of a student; staff or the student themself."""
        student_id = ensure_uuid(student_id, "student_id")
        require_staff_or_owner(actor, student_id, resource_type="allocation")

        with UnitOfWork(self._session_factory) as uow:
            allocation = uow.get_repo(RoomAllocationRepository).find_active_for_student(student_id)
            if allocation is None:
                raise NotFoundError("Active allocation for student", student_id)
            return to_schema(allocation, AllocationResponse)

    def recent_allocations(
        self,
        *,
        actor: Principal,
        limit: Optional[int] = None,
    ) -> List[RecentAllocation]:
        require_staff(actor)
        limit = settings.RECENT_ALLOCATIONS_LIMIT if limit is None else limit
        if not 1 <= limit <= MAX_RECENT_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_RECENT_LIMIT}", field="limit")

        with UnitOfWork(self._session_factory) as uow:
            allocations = uow.get_repo(RoomAllocationRepository).find_recent(limit)
            return [
                RecentAllocation(
                    id=a.id,
                    student_id=a.student_id,
                    room_id=a.room_id,
                    room_number=a.room.room_number,
                    room_type=a.room.room_type,
                    start_date=a.start_date,
                    end_date=a.end_date,
                    status=a.status,
                    created_at=a.created_at,
                )
                for a in allocations
            ]
