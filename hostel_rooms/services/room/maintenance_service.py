# hostel_rooms/services/room/maintenance_service.py
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from hostel_rooms.config.settings import settings
from hostel_rooms.models.room import MaintenanceRequest
from hostel_rooms.repositories.room import MaintenanceRequestRepository, RoomRepository
from hostel_rooms.schemas.common.enums import MaintenanceStatus
from hostel_rooms.schemas.room import (
    MaintenanceRequestCreate,
    MaintenanceRequestResponse,
    MaintenanceStatusUpdate,
)
from hostel_rooms.services.common import UnitOfWork
from hostel_rooms.services.common.errors import BusinessRuleViolation, NotFoundError, ValidationError
from hostel_rooms.services.common.mapping import to_schema, to_schema_list
from hostel_rooms.services.common.permissions import Principal, require_staff
from hostel_rooms.services.common.validation import ensure_uuid

logger = logging.getLogger(__name__)

# Requests only move forward
_STATUS_ORDER = {
    MaintenanceStatus.PENDING: 0,
    MaintenanceStatus.IN_PROGRESS: 1,
    MaintenanceStatus.COMPLETED: 2,
}


class MaintenanceService:
    """
    Room maintenance requests.

    Anyone signed in can report an issue; staff triage and close them.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def create_request(
        self,
        data: MaintenanceRequestCreate,
        *,
        actor: Principal,
    ) -> MaintenanceRequestResponse:
        room_id = ensure_uuid(data.room_id, "room_id")

        with UnitOfWork(self._session_factory) as uow:
            if uow.get_repo(RoomRepository).find_by_id(room_id) is None:
                raise NotFoundError("Room", room_id)

            request = MaintenanceRequest(
                room_id=room_id,
                issue_type=data.issue_type,
                description=data.description,
                priority=data.priority.value,
                status=MaintenanceStatus.PENDING.value,
                estimated_completion_date=data.estimated_completion_date,
                notes=data.notes,
                reported_by=actor.user_id,
            )
            uow.get_repo(MaintenanceRequestRepository).add(request)
            result = to_schema(request, MaintenanceRequestResponse)

        logger.info(
            f"Maintenance request {result.id} filed ({result.issue_type}, {result.priority.value})",
            extra={"room_id": room_id},
        )
        return result

    def list_pending(
        self,
        *,
        actor: Principal,
        limit: Optional[int] = None,
    ) -> List[MaintenanceRequestResponse]:
        """Pending and in-progress requests, newest first."""
        require_staff(actor)
        limit = settings.PENDING_MAINTENANCE_LIMIT if limit is None else limit
        if limit < 1:
            raise ValidationError("limit must be positive", field="limit")

        with UnitOfWork(self._session_factory) as uow:
            requests = uow.get_repo(MaintenanceRequestRepository).find_open(limit)
            return to_schema_list(requests, MaintenanceRequestResponse)

    def update_status(
        self,
        request_id: str,
        data: MaintenanceStatusUpdate,
        *,
        actor: Principal,
    ) -> MaintenanceRequestResponse:
        require_staff(actor)
        request_id = ensure_uuid(request_id, "request_id")

        with UnitOfWork(self._session_factory) as uow:
            repo = uow.get_repo(MaintenanceRequestRepository)
            request = repo.find_by_id(request_id)
            if request is None:
                raise NotFoundError("MaintenanceRequest", request_id)

            current = MaintenanceStatus(request.status)
            if _STATUS_ORDER[data.status] <= _STATUS_ORDER[current]:
                raise BusinessRuleViolation(
                    "maintenance_status_transition",
                    f"Cannot move maintenance request from {current.value} to {data.status.value}",
                )

            values = {"status": data.status.value}
            if data.notes is not None:
                values["notes"] = data.notes
            repo.update_fields(request, values)
            result = to_schema(request, MaintenanceRequestResponse)

        logger.info(
            f"Maintenance request {request_id}: {current.value} -> {result.status.value}",
            extra={"room_id": result.room_id},
        )
        return result
