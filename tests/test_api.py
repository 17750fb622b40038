import uuid

import pytest

from hostel_rooms.schemas.common.enums import UserRole
from hostel_rooms.services.common.permissions import Principal

from conftest import new_student_id

API = "/api/v1"


@pytest.fixture
def staff_headers(auth_headers, staff):
    return auth_headers(staff)


@pytest.fixture
def student_headers(auth_headers, student):
    return auth_headers(student)


def create_room(client, headers, number="101", capacity=2, room_type="double"):
    response = client.post(
        f"{API}/rooms",
        json={
            "room_number": number,
            "room_type": room_type,
            "capacity": capacity,
            "floor": 1,
            "amenities": ["wifi"],
            "price": "4500.00",
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def beds_of(client, headers, room_id, **params):
    response = client.get(f"{API}/rooms/{room_id}/beds", params=params, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    response = client.get(f"{API}/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers
    assert "X-Process-Time" in response.headers


def test_request_id_is_echoed(client):
    response = client.get(f"{API}/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_missing_and_bad_tokens(client):
    response = client.get(f"{API}/rooms")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "unauthenticated"

    response = client.get(f"{API}/rooms", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401


def test_room_lifecycle(client, staff_headers, student_headers):
    room = create_room(client, staff_headers)
    assert room["available_beds"] == 2
    assert room["status"] == "available"

    listed = client.get(f"{API}/rooms", headers=student_headers).json()
    assert [r["id"] for r in listed] == [room["id"]]

    fetched = client.get(f"{API}/rooms/{room['id']}", headers=student_headers)
    assert fetched.status_code == 200
    assert fetched.json()["room_number"] == "101"

    updated = client.put(
        f"{API}/rooms/{room['id']}",
        json={"capacity": 3, "status": "maintenance"},
        headers=staff_headers,
    )
    assert updated.status_code == 200, updated.text
    assert updated.json()["capacity"] == 3
    assert updated.json()["status"] == "maintenance"
    assert len(beds_of(client, staff_headers, room["id"])) == 3

    deleted = client.delete(f"{API}/rooms/{room['id']}", headers=staff_headers)
    assert deleted.status_code == 204
    assert client.get(f"{API}/rooms/{room['id']}", headers=staff_headers).status_code == 404


def test_student_cannot_manage_rooms(client, student_headers):
    response = client.post(
        f"{API}/rooms",
        json={"room_number": "9", "room_type": "single", "capacity": 1},
        headers=student_headers,
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"


def test_setting_full_status_is_rejected(client, staff_headers):
    room = create_room(client, staff_headers)
    response = client.put(f"{API}/rooms/{room['id']}", json={"status": "full"}, headers=staff_headers)
    assert response.status_code == 422


def test_allocation_flow(client, staff_headers, auth_headers, student, check_invariants):
    room = create_room(client, staff_headers, capacity=2)
    beds = beds_of(client, staff_headers, room["id"])

    response = client.post(
        f"{API}/allocations",
        json={"student_id": student.user_id, "room_id": room["id"], "bed_id": beds[0]["id"]},
        headers=staff_headers,
    )
    assert response.status_code == 201, response.text
    allocation = response.json()
    assert allocation["status"] == "active"

    free = beds_of(client, staff_headers, room["id"], only_free="true")
    assert [b["bed_number"] for b in free] == [2]

    mine = client.get(f"{API}/students/{student.user_id}/allocation", headers=auth_headers(student))
    assert mine.status_code == 200
    assert mine.json()["id"] == allocation["id"]

    available = client.get(f"{API}/rooms/available", headers=staff_headers).json()
    assert available[0]["available_beds"] == 1

    ended = client.post(f"{API}/allocations/{allocation['id']}/end", json={}, headers=staff_headers)
    assert ended.status_code == 200, ended.text
    assert ended.json()["status"] == "ended"

    again = client.post(f"{API}/allocations/{allocation['id']}/end", headers=staff_headers)
    assert again.status_code == 409
    body = again.json()
    assert body["error"]["code"] == "allocation_already_ended"
    assert body["request_id"] == again.headers["X-Request-ID"]
    check_invariants()


def test_allocation_errors(client, staff_headers):
    room = create_room(client, staff_headers, capacity=1, room_type="single")
    bed = beds_of(client, staff_headers, room["id"])[0]
    payload = {"student_id": new_student_id(), "room_id": room["id"], "bed_id": bed["id"]}

    assert client.post(f"{API}/allocations", json=payload, headers=staff_headers).status_code == 201

    taken = client.post(
        f"{API}/allocations",
        json={**payload, "student_id": new_student_id()},
        headers=staff_headers,
    )
    assert taken.status_code == 409
    assert taken.json()["error"]["code"] == "bed_occupied"

    malformed = client.post(
        f"{API}/allocations",
        json={**payload, "room_id": "room-1"},
        headers=staff_headers,
    )
    assert malformed.status_code == 400
    assert malformed.json()["error"]["details"]["field"] == "room_id"

    bad_dates = client.post(
        f"{API}/allocations",
        json={**payload, "student_id": new_student_id(), "start_date": "2026-09-01", "end_date": "2026-08-01"},
        headers=staff_headers,
    )
    assert bad_dates.status_code == 400

    missing = client.post(f"{API}/allocations/{uuid.uuid4()}/end", headers=staff_headers)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "not_found"


def test_update_and_recent_allocations(client, staff_headers):
    room = create_room(client, staff_headers, number="A-2")
    bed = beds_of(client, staff_headers, room["id"])[0]
    created = client.post(
        f"{API}/allocations",
        json={"student_id": new_student_id(), "room_id": room["id"], "bed_id": bed["id"]},
        headers=staff_headers,
    ).json()

    updated = client.put(
        f"{API}/allocations/{created['id']}",
        json={"payment_status": "paid"},
        headers=staff_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["payment_status"] == "paid"

    fetched = client.get(f"{API}/allocations/{created['id']}", headers=staff_headers)
    assert fetched.json()["payment_status"] == "paid"

    recent = client.get(f"{API}/allocations/recent", headers=staff_headers).json()
    assert recent[0]["id"] == created["id"]
    assert recent[0]["room_number"] == "A-2"
    assert recent[0]["status_label"] == "Active"


def test_recompute_endpoints(client, staff_headers, student_headers):
    room = create_room(client, staff_headers)

    report = client.post(f"{API}/rooms/{room['id']}/recompute-occupancy", headers=staff_headers)
    assert report.status_code == 200
    assert report.json()["drift_detected"] is False

    forbidden = client.post(f"{API}/rooms/{room['id']}/recompute-occupancy", headers=student_headers)
    assert forbidden.status_code == 403

    all_reports = client.post(f"{API}/rooms/recompute-occupancy", headers=staff_headers)
    assert all_reports.status_code == 200
    assert len(all_reports.json()) == 1


def test_maintenance_requests(client, staff_headers, student_headers):
    room = create_room(client, staff_headers)

    filed = client.post(
        f"{API}/maintenance-requests",
        json={
            "room_id": room["id"],
            "issue_type": "plumbing",
            "description": "Leaking tap",
            "priority": "high",
        },
        headers=student_headers,
    )
    assert filed.status_code == 201, filed.text
    request_id = filed.json()["id"]
    assert filed.json()["status"] == "pending"

    assert client.get(f"{API}/maintenance-requests/pending", headers=student_headers).status_code == 403
    pending = client.get(f"{API}/maintenance-requests/pending", headers=staff_headers).json()
    assert [r["id"] for r in pending] == [request_id]

    started = client.patch(
        f"{API}/maintenance-requests/{request_id}",
        json={"status": "in_progress", "notes": "Plumber booked"},
        headers=staff_headers,
    )
    assert started.status_code == 200
    assert started.json()["notes"] == "Plumber booked"

    backwards = client.patch(
        f"{API}/maintenance-requests/{request_id}",
        json={"status": "pending"},
        headers=staff_headers,
    )
    assert backwards.status_code == 409

    done = client.patch(
        f"{API}/maintenance-requests/{request_id}",
        json={"status": "completed"},
        headers=staff_headers,
    )
    assert done.json()["status"] == "completed"
    assert client.get(f"{API}/maintenance-requests/pending", headers=staff_headers).json() == []


def test_student_cannot_end_allocation(client, staff_headers, student_headers, student, check_invariants):
    room = create_room(client, staff_headers)
    bed = beds_of(client, staff_headers, room["id"])[0]
    allocation = client.post(
        f"{API}/allocations",
        json={"student_id": student.user_id, "room_id": room["id"], "bed_id": bed["id"]},
        headers=staff_headers,
    ).json()

    response = client.post(f"{API}/allocations/{allocation['id']}/end", json={}, headers=student_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"

    fetched = client.get(f"{API}/allocations/{allocation['id']}", headers=student_headers)
    assert fetched.json()["status"] == "active"
    assert beds_of(client, staff_headers, room["id"], only_free="true") == [
        b for b in beds_of(client, staff_headers, room["id"]) if b["id"] != bed["id"]
    ]
    check_invariants()


def test_own_allocation_with_uppercase_token_subject(client, staff_headers, auth_headers):
    student_id = new_student_id()
    room = create_room(client, staff_headers)
    bed = beds_of(client, staff_headers, room["id"])[0]
    client.post(
        f"{API}/allocations",
        json={"student_id": student_id, "room_id": room["id"], "bed_id": bed["id"]},
        headers=staff_headers,
    )
    headers = auth_headers(Principal(user_id=student_id.upper(), role=UserRole.STUDENT))

    response = client.get(f"{API}/students/{student_id.upper()}/allocation", headers=headers)
    assert response.status_code == 200
    assert response.json()["student_id"] == student_id
