import threading

from hostel_rooms.services.common.errors import ConflictError

from conftest import new_student_id


def run_concurrently(*calls):
    """Start every call at the same moment; collect results and errors."""
    barrier = threading.Barrier(len(calls))
    results, errors = [], []
    lock = threading.Lock()

    def worker(call):
        barrier.wait()
        try:
            outcome = call()
        except Exception as exc:
            with lock:
                errors.append(exc)
        else:
            with lock:
                results.append(outcome)

    threads = [threading.Thread(target=worker, args=(call,)) for call in calls]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return results, errors


def test_simultaneous_allocations_of_one_bed(make_room, room_service, allocation_service, staff, check_invariants):
    room, beds = make_room(capacity=2)

    def attempt():
        return allocation_service.allocate(
            student_id=new_student_id(), room_id=room.id, bed_id=beds[0].id, actor=staff
        )

    results, errors = run_concurrently(attempt, attempt)

    assert len(results) == 1
    assert len(errors) == 1
    assert isinstance(errors[0], ConflictError)
    assert room_service.get_room(room.id).occupied == 1
    check_invariants()


def test_simultaneous_allocations_of_different_beds(make_room, room_service, allocation_service, staff, check_invariants):
    room, beds = make_room(capacity=3)

    calls = [
        (lambda bed=bed: allocation_service.allocate(
            student_id=new_student_id(), room_id=room.id, bed_id=bed.id, actor=staff
        ))
        for bed in beds
    ]
    results, errors = run_concurrently(*calls)

    assert errors == []
    assert len(results) == 3
    refreshed = room_service.get_room(room.id)
    assert refreshed.occupied == 3
    assert refreshed.status == "full"
    check_invariants()


def test_simultaneous_end_of_one_allocation(make_room, room_service, allocation_service, staff, check_invariants):
    room, beds = make_room(capacity=2)
    allocation = allocation_service.allocate(
        student_id=new_student_id(), room_id=room.id, bed_id=beds[0].id, actor=staff
    )

    def attempt():
        return allocation_service.end_allocation(allocation.id, actor=staff)

    results, errors = run_concurrently(attempt, attempt)

    assert len(results) == 1
    assert len(errors) == 1
    assert isinstance(errors[0], ConflictError)
    assert room_service.get_room(room.id).occupied == 0
    check_invariants()
