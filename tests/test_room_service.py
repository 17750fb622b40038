import uuid
from decimal import Decimal

import pytest

from hostel_rooms.schemas.common.enums import RoomStatus, RoomType
from hostel_rooms.schemas.room import RoomCreate, RoomUpdate
from hostel_rooms.services.common.errors import (
    AlreadyExistsError,
    BusinessRuleViolation,
    NotFoundError,
    ValidationError,
)
from hostel_rooms.services.common.permissions import PermissionDenied

from conftest import new_student_id


def test_create_room_creates_numbered_beds(make_room):
    room, beds = make_room(capacity=3, room_type=RoomType.TRIPLE)

    assert room.capacity == 3
    assert room.occupied == 0
    assert room.status == RoomStatus.AVAILABLE
    assert room.available_beds == 3
    assert [b.bed_number for b in beds] == [1, 2, 3]
    assert not any(b.is_occupied for b in beds)


def test_create_room_normalizes_amenities(make_room):
    room, _ = make_room(amenities=[" wifi", "desk", "wifi", ""])
    assert room.amenities == ["wifi", "desk"]


def test_create_room_rejects_duplicate_number(make_room):
    make_room(room_number="A-1")
    with pytest.raises(AlreadyExistsError):
        make_room(room_number="A-1")


def test_create_room_requires_staff(room_service, student):
    data = RoomCreate(room_number="X", room_type=RoomType.SINGLE, capacity=1)
    with pytest.raises(PermissionDenied):
        room_service.create_room(data, actor=student)


def test_list_available_rooms_orders_by_number_and_skips_full_and_maintenance(
    make_room, room_service, allocation_service, staff
):
    full_room, full_beds = make_room(room_number="300", capacity=1, room_type=RoomType.SINGLE)
    make_room(room_number="200")
    closed, _ = make_room(room_number="100")
    room_service.update_room(closed.id, RoomUpdate(status=RoomStatus.MAINTENANCE), actor=staff)
    make_room(room_number="150")

    allocation_service.allocate(
        student_id=new_student_id(),
        room_id=full_room.id,
        bed_id=full_beds[0].id,
        actor=staff,
    )

    available = room_service.list_available_rooms()
    assert [r.room_number for r in available] == ["150", "200"]
    assert all(r.available_beds == 2 for r in available)


def test_list_rooms_filters(make_room, room_service):
    make_room(room_number="101", floor=1, room_type=RoomType.DOUBLE)
    make_room(room_number="201", floor=2, room_type=RoomType.SINGLE, capacity=1)

    assert [r.room_number for r in room_service.list_rooms(floor=2)] == ["201"]
    assert [r.room_number for r in room_service.list_rooms(room_type=RoomType.DOUBLE)] == ["101"]
    assert len(room_service.list_rooms()) == 2


def test_list_beds_only_free(make_room, allocation_service, room_service, staff):
    room, beds = make_room(capacity=2)
    allocation_service.allocate(
        student_id=new_student_id(), room_id=room.id, bed_id=beds[0].id, actor=staff
    )

    free = room_service.list_beds_in_room(room.id, only_free=True)
    assert [b.bed_number for b in free] == [2]
    assert len(room_service.list_beds_in_room(room.id)) == 2


def test_get_room_unknown_and_malformed(room_service):
    with pytest.raises(NotFoundError):
        room_service.get_room(str(uuid.uuid4()))
    with pytest.raises(ValidationError):
        room_service.get_room("not-a-uuid")
    with pytest.raises(ValidationError):
        room_service.list_beds_in_room("42")


def test_update_room_grows_and_shrinks_beds(make_room, room_service, allocation_service, staff):
    room, beds = make_room(capacity=2)
    allocation_service.allocate(
        student_id=new_student_id(), room_id=room.id, bed_id=beds[0].id, actor=staff
    )

    grown = room_service.update_room(room.id, RoomUpdate(capacity=4), actor=staff)
    assert grown.capacity == 4
    assert [b.bed_number for b in room_service.list_beds_in_room(room.id)] == [1, 2, 3, 4]

    shrunk = room_service.update_room(room.id, RoomUpdate(capacity=1), actor=staff)
    assert shrunk.capacity == 1
    assert shrunk.status == RoomStatus.FULL
    remaining = room_service.list_beds_in_room(room.id)
    assert [b.bed_number for b in remaining] == [1]
    assert remaining[0].is_occupied


def test_update_room_refuses_capacity_below_occupancy(make_room, room_service, allocation_service, staff):
    room, beds = make_room(capacity=2)
    for bed in beds:
        allocation_service.allocate(
            student_id=new_student_id(), room_id=room.id, bed_id=bed.id, actor=staff
        )

    with pytest.raises(BusinessRuleViolation):
        room_service.update_room(room.id, RoomUpdate(capacity=1), actor=staff)
    assert room_service.get_room(room.id).capacity == 2


def test_update_room_status_and_fields(make_room, room_service, staff):
    room, _ = make_room(capacity=2)

    updated = room_service.update_room(
        room.id,
        RoomUpdate(status=RoomStatus.MAINTENANCE, price=Decimal("5000"), building="North"),
        actor=staff,
    )
    assert updated.status == RoomStatus.MAINTENANCE
    assert updated.price == Decimal("5000")
    assert updated.building == "North"

    reopened = room_service.update_room(room.id, RoomUpdate(status=RoomStatus.AVAILABLE), actor=staff)
    assert reopened.status == RoomStatus.AVAILABLE


def test_room_update_rejects_full_status():
    with pytest.raises(ValueError):
        RoomUpdate(status=RoomStatus.FULL)


def test_update_room_rejects_taken_number(make_room, room_service, staff):
    make_room(room_number="1")
    room, _ = make_room(room_number="2")
    with pytest.raises(AlreadyExistsError):
        room_service.update_room(room.id, RoomUpdate(room_number="1"), actor=staff)


def test_delete_room(make_room, room_service, allocation_service, staff):
    empty, _ = make_room()
    occupied, beds = make_room()
    allocation_service.allocate(
        student_id=new_student_id(), room_id=occupied.id, bed_id=beds[0].id, actor=staff
    )

    with pytest.raises(BusinessRuleViolation):
        room_service.delete_room(occupied.id, actor=staff)

    room_service.delete_room(empty.id, actor=staff)
    with pytest.raises(NotFoundError):
        room_service.get_room(empty.id)
    assert [r.id for r in room_service.list_rooms()] == [occupied.id]


def test_deleted_room_number_can_be_reused(make_room, room_service, staff):
    room, _ = make_room(room_number="R1")
    room_service.delete_room(room.id, actor=staff)
    again, _ = make_room(room_number="R1")
    assert again.id != room.id
