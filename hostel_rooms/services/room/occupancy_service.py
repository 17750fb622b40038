# hostel_rooms/services/room/occupancy_service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from hostel_rooms.models.room import Room
from hostel_rooms.repositories.room import BedRepository, RoomRepository
from hostel_rooms.schemas.common.enums import RoomStatus
from hostel_rooms.schemas.room import OccupancyReport
from hostel_rooms.services.common import UnitOfWork
from hostel_rooms.services.common.errors import NotFoundError
from hostel_rooms.services.common.permissions import Principal, require_staff
from hostel_rooms.services.common.validation import ensure_uuid
from hostel_rooms.services.room.allocation_events import (
    OCCUPANCY_CORRECTED,
    AllocationEvent,
    AllocationEventPublisher,
    default_publisher,
)

logger = logging.getLogger(__name__)


class OccupancyService:
    """
    Reconciles each room's ``occupied``/``status`` with its bed flags.

    - Bed flags are the source of truth.
    - Rooms under maintenance stay under maintenance.
    - Running it twice in a row changes nothing the second time.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        events: Optional[AllocationEventPublisher] = None,
    ) -> None:
        self._session_factory = session_factory
        self._events = events if events is not None else default_publisher()

    def recompute_occupancy(self, room_id: str, *, actor: Principal) -> OccupancyReport:
        require_staff(actor)
        room_id = ensure_uuid(room_id, "room_id")

        with UnitOfWork(self._session_factory) as uow:
            room = uow.get_repo(RoomRepository).lock_for_update(room_id)
            if room is None:
                raise NotFoundError("Room", room_id)
            report = self._reconcile(uow, room)

        self._announce(report, actor)
        return report

    def recompute_all(self, *, actor: Principal) -> List[OccupancyReport]:
        """Reconcile every live room in one transaction."""
        require_staff(actor)

        reports: List[OccupancyReport] = []
        with UnitOfWork(self._session_factory) as uow:
            room_repo = uow.get_repo(RoomRepository)
            # Each room is locked before its beds are counted, in room_number order
            for room_id in [room.id for room in room_repo.list_rooms()]:
                room = room_repo.lock_for_update(room_id)
                if room is None:
                    continue
                reports.append(self._reconcile(uow, room))

        drifted = [r for r in reports if r.drift_detected]
        logger.info(f"Recomputed occupancy of {len(reports)} rooms, {len(drifted)} corrected")
        for report in drifted:
            self._announce(report, actor)
        return reports

    def _reconcile(self, uow: UnitOfWork, room: Room) -> OccupancyReport:
        previous_occupied = room.occupied
        previous_status = RoomStatus(room.status)

        counted = uow.get_repo(BedRepository).count_occupied(room.id)
        if counted > room.capacity:
            logger.warning(
                f"Room {room.room_number} has {counted} occupied beds for capacity {room.capacity}",
                extra={"room_id": room.id},
            )
            counted = room.capacity

        uow.get_repo(RoomRepository).set_occupancy(room, counted)
        return OccupancyReport(
            room_id=room.id,
            room_number=room.room_number,
            capacity=room.capacity,
            previous_occupied=previous_occupied,
            occupied=room.occupied,
            previous_status=previous_status,
            status=room.status,
            checked_at=datetime.now(timezone.utc),
        )

    def _announce(self, report: OccupancyReport, actor: Principal) -> None:
        if not report.drift_detected:
            return
        logger.warning(
            f"Corrected occupancy of room {report.room_number}: "
            f"{report.previous_occupied} -> {report.occupied}",
            extra={"room_id": report.room_id},
        )
        self._events.publish(
            AllocationEvent(
                event_type=OCCUPANCY_CORRECTED,
                room_id=report.room_id,
                actor_id=actor.user_id,
                data={
                    "previous_occupied": report.previous_occupied,
                    "occupied": report.occupied,
                    "previous_status": report.previous_status.value,
                    "status": report.status.value,
                },
            )
        )
