import uuid
from datetime import timedelta

import pytest
from jose import jwt

from hostel_rooms.config.settings import Settings
from hostel_rooms.db import make_engine
from hostel_rooms.models.room import Room
from hostel_rooms.repositories.room import RoomRepository
from hostel_rooms.schemas.common.enums import UserRole
from hostel_rooms.services.common import UnitOfWork
from hostel_rooms.services.common.permissions import (
    PermissionDenied,
    Principal,
    require_staff,
    require_staff_or_owner,
)
from hostel_rooms.services.common.security import (
    JWTSettings,
    TokenDecodeError,
    TokenExpiredError,
    create_access_token,
    principal_from_token,
)
from hostel_rooms.services.common.validation import ensure_uuid
from hostel_rooms.services.common.errors import ConflictError, ValidationError

JWT = JWTSettings(secret_key="unit-test-secret")


def test_token_round_trip():
    token = create_access_token(subject="5f1c", role=UserRole.STAFF, jwt_settings=JWT)
    principal = principal_from_token(token, JWT)
    assert principal == Principal(user_id="5f1c", role=UserRole.STAFF)


def test_expired_token():
    token = create_access_token(
        subject="5f1c",
        role=UserRole.STUDENT,
        jwt_settings=JWT,
        expires_delta=timedelta(minutes=-5),
    )
    with pytest.raises(TokenExpiredError):
        principal_from_token(token, JWT)


def test_token_with_unknown_role_or_wrong_key():
    token = jwt.encode({"sub": "u1", "role": "warden"}, JWT.secret_key, algorithm="HS256")
    with pytest.raises(TokenDecodeError):
        principal_from_token(token, JWT)

    other = create_access_token(
        subject="u1", role=UserRole.STAFF, jwt_settings=JWTSettings(secret_key="other")
    )
    with pytest.raises(TokenDecodeError):
        principal_from_token(other, JWT)


def test_role_checks():
    staff = Principal(user_id="s", role=UserRole.STAFF)
    student = Principal(user_id="u", role=UserRole.STUDENT)

    require_staff(staff)
    require_staff_or_owner(student, "u")
    require_staff_or_owner(staff, "u")
    with pytest.raises(PermissionDenied):
        require_staff(student)
    with pytest.raises(PermissionDenied):
        require_staff_or_owner(student, "someone-else")


def test_ensure_uuid_canonicalizes():
    assert ensure_uuid("6F9619FF-8B86-D011-B42D-00C04FC964FF", "id") == "6f9619ff-8b86-d011-b42d-00c04fc964ff"
    with pytest.raises(ValidationError) as info:
        ensure_uuid("bed-7", "bed_id")
    assert info.value.field == "bed_id"


def test_unit_of_work_rolls_back_on_error(session_factory):
    with pytest.raises(RuntimeError):
        with UnitOfWork(session_factory) as uow:
            uow.get_repo(RoomRepository).add(
                Room(room_number="tmp", room_type="single", capacity=1)
            )
            raise RuntimeError("boom")

    with UnitOfWork(session_factory) as uow:
        assert uow.get_repo(RoomRepository).find_by_room_number("tmp") is None


def test_unit_of_work_commits_and_caches_repositories(session_factory):
    with UnitOfWork(session_factory) as uow:
        repo = uow.get_repo(RoomRepository)
        assert uow.get_repo(RoomRepository) is repo
        repo.add(Room(room_number="kept", room_type="single", capacity=1))

    with UnitOfWork(session_factory) as uow:
        assert uow.get_repo(RoomRepository).find_by_room_number("kept") is not None


def test_default_database_url_uses_declared_driver():
    configured = Settings(DATABASE_URL=None, DB_HOST="db", DB_NAME="rooms")

    url = configured.get_database_url()
    assert url == "postgresql+psycopg2://postgres:postgres@db:5432/rooms"
    engine = make_engine(url, settings=configured)
    try:
        assert engine.dialect.driver == "psycopg2"
    finally:
        engine.dispose()


def test_unit_of_work_maps_commit_constraint_failure_to_conflict(session_factory):
    with pytest.raises(ConflictError):
        with UnitOfWork(session_factory) as uow:
            uow.session.add(Room(room_number="dup", room_type="single", capacity=1))
            uow.session.add(Room(room_number="dup", room_type="single", capacity=1))

    with UnitOfWork(session_factory) as uow:
        assert uow.get_repo(RoomRepository).find_by_room_number("dup") is None


def test_staff_or_owner_compares_uuids_by_value():
    owner = str(uuid.uuid4())
    require_staff_or_owner(Principal(user_id=owner.upper(), role=UserRole.STUDENT), owner)
    with pytest.raises(PermissionDenied):
        require_staff_or_owner(Principal(user_id=str(uuid.uuid4()), role=UserRole.STUDENT), owner)
