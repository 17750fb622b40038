import uuid

import pytest
from sqlalchemy import update

from hostel_rooms.models.room import Bed, Room
from hostel_rooms.repositories.room import RoomRepository
from hostel_rooms.schemas.common.enums import RoomStatus
from hostel_rooms.schemas.room import RoomUpdate
from hostel_rooms.services.common.errors import NotFoundError
from hostel_rooms.services.common.permissions import PermissionDenied

from conftest import new_student_id


def corrupt_room(session_factory, room_id, **values):
    session = session_factory()
    try:
        session.execute(update(Room).where(Room.id == room_id).values(**values))
        session.commit()
    finally:
        session.close()


def test_recompute_repairs_drift(make_room, allocation_service, occupancy_service, staff, check_invariants, session_factory):
    room, beds = make_room(capacity=3)
    allocation_service.allocate(
        student_id=new_student_id(), room_id=room.id, bed_id=beds[0].id, actor=staff
    )
    corrupt_room(session_factory, room.id, occupied=3, status=RoomStatus.FULL.value)

    report = occupancy_service.recompute_occupancy(room.id, actor=staff)

    assert report.previous_occupied == 3
    assert report.previous_status == RoomStatus.FULL
    assert report.occupied == 1
    assert report.status == RoomStatus.AVAILABLE
    assert report.drift_detected
    check_invariants()


def test_recompute_is_idempotent(make_room, allocation_service, occupancy_service, staff, session_factory, recorded):
    room, beds = make_room(capacity=2)
    allocation_service.allocate(
        student_id=new_student_id(), room_id=room.id, bed_id=beds[0].id, actor=staff
    )
    corrupt_room(session_factory, room.id, occupied=0)

    first = occupancy_service.recompute_occupancy(room.id, actor=staff)
    second = occupancy_service.recompute_occupancy(room.id, actor=staff)

    assert first.drift_detected
    assert not second.drift_detected
    assert (second.occupied, second.status) == (first.occupied, first.status) == (1, RoomStatus.AVAILABLE)
    assert recorded.types.count("room.occupancy_corrected") == 1


def test_recompute_keeps_maintenance(make_room, room_service, occupancy_service, staff, session_factory):
    room, _ = make_room(capacity=2)
    room_service.update_room(room.id, RoomUpdate(status=RoomStatus.MAINTENANCE), actor=staff)
    corrupt_room(session_factory, room.id, occupied=2)

    report = occupancy_service.recompute_occupancy(room.id, actor=staff)
    assert report.occupied == 0
    assert report.status == RoomStatus.MAINTENANCE


def test_recompute_marks_full_room(make_room, occupancy_service, staff, session_factory):
    room, beds = make_room(capacity=1)
    session = session_factory()
    try:
        session.execute(update(Bed).where(Bed.id == beds[0].id).values(is_occupied=True))
        session.commit()
    finally:
        session.close()

    report = occupancy_service.recompute_occupancy(room.id, actor=staff)
    assert report.occupied == 1
    assert report.status == RoomStatus.FULL


def test_recompute_all(make_room, occupancy_service, staff, session_factory):
    clean, _ = make_room()
    dirty, _ = make_room()
    corrupt_room(session_factory, dirty.id, occupied=1)

    reports = {r.room_id: r for r in occupancy_service.recompute_all(actor=staff)}
    assert not reports[clean.id].drift_detected
    assert reports[dirty.id].drift_detected
    assert reports[dirty.id].occupied == 0


def test_recompute_requires_staff_and_known_room(make_room, occupancy_service, staff, student):
    room, _ = make_room()
    with pytest.raises(PermissionDenied):
        occupancy_service.recompute_occupancy(room.id, actor=student)
    with pytest.raises(NotFoundError):
        occupancy_service.recompute_occupancy(str(uuid.uuid4()), actor=staff)


def test_recompute_all_locks_every_room_before_counting(make_room, occupancy_service, staff, monkeypatch):
    first, _ = make_room(room_number="B-1")
    second, _ = make_room(room_number="A-1")
    locked = []
    original = RoomRepository.lock_for_update

    def recording_lock(self, room_id):
        locked.append(room_id)
        return original(self, room_id)

    monkeypatch.setattr(RoomRepository, "lock_for_update", recording_lock)

    reports = occupancy_service.recompute_all(actor=staff)

    assert locked == [second.id, first.id]
    assert [r.room_id for r in reports] == locked
