# hostel_rooms/repositories/room/maintenance_request_repository.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from hostel_rooms.models.room import MaintenanceRequest
from hostel_rooms.schemas.common.enums import MaintenanceStatus
from hostel_rooms.repositories.base import BaseRepository

OPEN_STATUSES = (MaintenanceStatus.PENDING.value, MaintenanceStatus.IN_PROGRESS.value)


class MaintenanceRequestRepository(BaseRepository[MaintenanceRequest]):
    """Repository for MaintenanceRequest entity."""

    def __init__(self, session: Session):
        super().__init__(MaintenanceRequest, session)

    def find_open(self, limit: int) -> List[MaintenanceRequest]:
        """Pending and in-progress requests, newest first."""
        stmt = (
            select(MaintenanceRequest)
            .options(joinedload(MaintenanceRequest.room))
            .where(MaintenanceRequest.status.in_(OPEN_STATUSES))
            .order_by(MaintenanceRequest.created_at.desc(), MaintenanceRequest.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())
