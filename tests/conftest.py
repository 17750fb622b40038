import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from hostel_rooms.config.settings import Settings
from hostel_rooms.db import init_db, make_engine, make_session_factory
from hostel_rooms.models.room import Bed, Room, RoomAllocation
from hostel_rooms.schemas.common.enums import AllocationStatus, RoomStatus, RoomType, UserRole
from hostel_rooms.schemas.room import RoomCreate
from hostel_rooms.services.common.permissions import Principal
from hostel_rooms.services.common.security import JWTSettings, create_access_token
from hostel_rooms.services.room import (
    AllocationEventPublisher,
    AllocationService,
    MaintenanceService,
    OccupancyService,
    RoomService,
)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'hostel.db'}",
        ENVIRONMENT="testing",
        JWT_SECRET_KEY="test-secret-key",
        CORS_ORIGINS="http://localhost:3000",
    )


@pytest.fixture
def engine(settings):
    engine = make_engine(settings.DATABASE_URL, settings=settings)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


class RecordingSubscriber:
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    @property
    def types(self):
        return [e.event_type for e in self.events]


@pytest.fixture
def recorded():
    return RecordingSubscriber()


@pytest.fixture
def events(recorded):
    publisher = AllocationEventPublisher()
    publisher.subscribe("*", recorded)
    return publisher


@pytest.fixture
def room_service(session_factory):
    return RoomService(session_factory)


@pytest.fixture
def allocation_service(session_factory, events):
    return AllocationService(session_factory, events=events)


@pytest.fixture
def occupancy_service(session_factory, events):
    return OccupancyService(session_factory, events=events)


@pytest.fixture
def maintenance_service(session_factory):
    return MaintenanceService(session_factory)


@pytest.fixture
def staff():
    return Principal(user_id=str(uuid.uuid4()), role=UserRole.STAFF)


@pytest.fixture
def student():
    return Principal(user_id=str(uuid.uuid4()), role=UserRole.STUDENT)


def new_student_id():
    return str(uuid.uuid4())


@pytest.fixture
def make_room(room_service, staff):
    counter = {"n": 100}

    def _make(capacity=2, room_type=RoomType.DOUBLE, floor=1, **kwargs):
        counter["n"] += 1
        data = RoomCreate(
            room_number=kwargs.pop("room_number", str(counter["n"])),
            room_type=room_type,
            capacity=capacity,
            floor=floor,
            price=kwargs.pop("price", Decimal("4500.00")),
            **kwargs,
        )
        room = room_service.create_room(data, actor=staff)
        beds = room_service.list_beds_in_room(room.id)
        return room, beds

    return _make


@pytest.fixture
def check_invariants(session_factory):
    """Assert the cross-entity consistency rules against the database."""

    def _check():
        session = session_factory()
        try:
            rooms = session.execute(select(Room).where(Room.is_deleted.is_(False))).scalars().all()
            for room in rooms:
                assert 0 <= room.occupied <= room.capacity, room
                occupied_beds = session.execute(
                    select(func.count()).select_from(Bed).where(
                        Bed.room_id == room.id, Bed.is_occupied.is_(True)
                    )
                ).scalar_one()
                assert room.occupied == occupied_beds, room
                if room.status != RoomStatus.MAINTENANCE:
                    expected = RoomStatus.FULL if room.occupied == room.capacity else RoomStatus.AVAILABLE
                    assert room.status == expected, room

            for bed in session.execute(select(Bed)).scalars():
                active = session.execute(
                    select(func.count()).select_from(RoomAllocation).where(
                        RoomAllocation.bed_id == bed.id,
                        RoomAllocation.status == AllocationStatus.ACTIVE.value,
                    )
                ).scalar_one()
                assert bed.is_occupied == (active == 1), bed
                assert active <= 1, bed
        finally:
            session.close()

    return _check


@pytest.fixture
def app(settings, engine):
    from hostel_rooms.main import create_app

    return create_app(settings=settings, engine=engine)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(settings):
    jwt_settings = JWTSettings.from_settings(settings)

    def _headers(principal):
        token = create_access_token(
            subject=principal.user_id,
            role=principal.role,
            jwt_settings=jwt_settings,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
