"""Tests for the generic collection service, filters and conflict checks."""

from __future__ import annotations

import pytest

from fitcoach_api.app.core.db import InMemoryRepository
from fitcoach_api.app.core.errors import ConflictError, NotFoundError, ValidationError
from fitcoach_api.app.schemas.client import ClientStatus
from fitcoach_api.app.schemas.workout import WorkoutStatus
from fitcoach_api.app.services.client_service import CLIENT_DESCRIPTOR
from fitcoach_api.app.services.query import AnyOf, Contains, Exact, Search, paginate
from fitcoach_api.app.services.resource_service import ALL_STATUSES, ResourceCollectionService
from fitcoach_api.app.services.workout_service import WORKOUT_DESCRIPTOR


@pytest.fixture
def clients(clock):
    return ResourceCollectionService(CLIENT_DESCRIPTOR, InMemoryRepository("clients"), clock)


@pytest.fixture
def workouts(clock):
    return ResourceCollectionService(WORKOUT_DESCRIPTOR, InMemoryRepository("workouts"), clock)


def _client(n: int, **extra) -> dict:
    return {"name": f"Client {n}", "email": f"client{n}@example.com", **extra}


def _workout(time: str = "09:00", day: str = "2024-11-02", **extra) -> dict:
    return {
        "client_id": "1",
        "title": "Session",
        "type": "strength",
        "date": day,
        "time": time,
        "duration": 60,
        **extra,
    }


def test_create_assigns_fresh_ids_and_equal_timestamps(clients, clock):
    first = clients.create("c1", _client(1))
    second = clients.create("c1", _client(2))
    assert first.id != second.id
    assert first.owner_id == "c1"
    assert first.status == ClientStatus.ACTIVE
    assert first.created_at == first.updated_at == clock.now


def test_create_ignores_server_managed_fields(clients):
    record = clients.create("c1", _client(1, id="999", owner_id="c2", status="inactive"))
    assert record.id != "999"
    assert record.owner_id == "c1"
    assert record.status == ClientStatus.ACTIVE


def test_update_applies_only_whitelisted_fields(clients):
    record = clients.create("c1", _client(1))
    updated = clients.update(
        "c1",
        record.id,
        {"name": "Renamed", "owner_id": "c2", "progress": {"sessions_completed": 99}, "bogus": 1},
    )
    assert updated.name == "Renamed"
    assert updated.owner_id == "c1"
    assert updated.progress.sessions_completed == 0
    assert not hasattr(updated, "bogus")


def test_updated_at_strictly_increases_with_a_frozen_clock(clients):
    record = clients.create("c1", _client(1))
    once = clients.update("c1", record.id, {"name": "Once"})
    twice = clients.update("c1", record.id, {})
    assert record.updated_at < once.updated_at < twice.updated_at
    assert twice.created_at == record.created_at


def test_soft_delete_is_idempotent(clients, clock):
    record = clients.create("c1", _client(1))
    clock.advance(minutes=1)
    deleted = clients.soft_delete("c1", record.id)
    clock.advance(minutes=1)
    again = clients.soft_delete("c1", record.id)
    assert deleted.status == ClientStatus.INACTIVE
    assert again == deleted


def test_soft_deleted_records_hidden_by_default_but_readable(clients):
    kept = clients.create("c1", _client(1))
    gone = clients.create("c1", _client(2))
    clients.soft_delete("c1", gone.id)

    assert [c.id for c in clients.list("c1").items] == [kept.id]
    assert clients.list("c1", status=ALL_STATUSES).total == 2
    assert [c.id for c in clients.list("c1", status="inactive").items] == [gone.id]
    assert clients.get("c1", gone.id).status == ClientStatus.INACTIVE


def _pages(service, owner_id, limit):
    first = service.list(owner_id, page=1, limit=limit)
    pages = [first] + [service.list(owner_id, page=n, limit=limit) for n in range(2, first.total_pages + 1)]
    return first.total, pages


def test_pagination_law(clients):
    for n in range(23):
        clients.create("c1", _client(n))
    total, pages = _pages(clients, "c1", 7)

    assert total == 23
    assert len(pages) == 4
    assert [len(page.items) for page in pages] == [7, 7, 7, 2]
    joined = [record.id for page in pages for record in page.items]
    assert joined == [record.id for record in clients.list("c1", limit=100).items]
    assert len(set(joined)) == sum(len(page.items) for page in pages) == total
    assert clients.list("c1", page=5, limit=7).items == []


def test_pagination_law_follows_workout_calendar_order(workouts):
    # 7 and 23 are coprime, so this visits every slot once, out of order.
    for n in (7 * k % 23 for k in range(23)):
        workouts.create("c1", _workout(f"{8 + n // 5:02d}:00", day=f"2024-11-0{n % 5 + 1}"))
    total, pages = _pages(workouts, "c1", 7)

    full = workouts.list("c1", limit=100).items
    assert [(w.date, w.time) for w in full] == sorted((w.date, w.time) for w in full)
    joined = [record.id for page in pages for record in page.items]
    assert joined == [record.id for record in full]
    assert len(set(joined)) == sum(len(page.items) for page in pages) == total == 23


def test_pagination_law_with_status_filter(clients):
    for n in range(12):
        record = clients.create("c1", _client(n))
        if n % 3 == 0:
            clients.soft_delete("c1", record.id)
    active = [r.id for r in clients.list("c1", limit=100).items]
    first = clients.list("c1", page=1, limit=5)
    joined = [
        record.id
        for n in range(1, first.total_pages + 1)
        for record in clients.list("c1", page=n, limit=5).items
    ]
    assert first.total == len(active) == 8
    assert joined == active


@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 101)])
def test_paging_arguments_are_validated(clients, page, limit):
    with pytest.raises(ValidationError):
        clients.list("c1", page=page, limit=limit)


def test_empty_listing_has_zero_pages():
    page = paginate([], 1, 10)
    assert page.total == 0
    assert page.total_pages == 0


def test_email_conflict_across_owners_leaves_store_untouched(clients):
    clients.create("c1", _client(1))
    with pytest.raises(ConflictError) as exc:
        clients.create("c2", _client(9, email="client1@example.com"))
    assert exc.value.error == "Client already exists"
    assert clients.list("c2", status=ALL_STATUSES).total == 0


def test_email_of_deactivated_client_stays_reserved(clients):
    record = clients.create("c1", _client(1))
    clients.soft_delete("c1", record.id)
    with pytest.raises(ConflictError):
        clients.create("c1", _client(2, email="client1@example.com"))


def test_update_email_conflict_excludes_the_record_itself(clients):
    first = clients.create("c1", _client(1))
    second = clients.create("c1", _client(2))
    clients.update("c1", first.id, {"email": "client1@example.com"})
    with pytest.raises(ConflictError) as exc:
        clients.update("c1", second.id, {"email": "client1@example.com"})
    assert exc.value.error == "Email already in use"
    assert clients.get("c1", second.id).email == "client2@example.com"


def test_updated_email_is_released_for_new_clients(clients):
    first = clients.create("c1", _client(1))
    clients.update("c1", first.id, {"email": "moved@example.com"})
    reused = clients.create("c1", _client(9, email="client1@example.com"))
    assert reused.id != first.id
    assert reused.email == "client1@example.com"
    assert clients.get("c1", first.id).email == "moved@example.com"
    with pytest.raises(ConflictError):
        clients.create("c2", _client(10, email="moved@example.com"))


def test_slot_conflict_only_within_one_owner(workouts):
    workouts.create("c1", _workout("09:00"))
    with pytest.raises(ConflictError) as exc:
        workouts.create("c1", _workout("9:00"))
    assert exc.value.error == "Scheduling conflict"
    assert workouts.create("c2", _workout("09:00")).owner_id == "c2"


def test_cancelling_frees_the_slot(workouts):
    first = workouts.create("c1", _workout("09:00"))
    workouts.soft_delete("c1", first.id)
    replacement = workouts.create("c1", _workout("09:00"))
    assert replacement.status == WorkoutStatus.SCHEDULED
    # Reviving the cancelled session would now double book the slot.
    with pytest.raises(ConflictError):
        workouts.update("c1", first.id, {"status": "scheduled"})


def test_moving_into_a_taken_slot_is_rejected(workouts):
    workouts.create("c1", _workout("09:00"))
    other = workouts.create("c1", _workout("10:00"))
    with pytest.raises(ConflictError):
        workouts.update("c1", other.id, {"time": "09:00"})
    assert workouts.update("c1", other.id, {"time": "10:00", "notes": "same slot"}).time == "10:00"


def test_completion_stamp_set_once(workouts, clock):
    record = workouts.create("c1", _workout())
    clock.advance(hours=2)
    completed = workouts.update("c1", record.id, {"status": "completed"})
    assert completed.completed_at == clock.now
    stamped = completed.completed_at

    clock.advance(hours=1)
    again = workouts.update("c1", record.id, {"status": "completed", "rating": 5})
    assert again.completed_at == stamped
    assert again.rating == 5


def test_foreign_records_look_absent(clients):
    record = clients.create("c1", _client(1))
    for operation in (
        lambda: clients.get("c2", record.id),
        lambda: clients.update("c2", record.id, {"name": "Nope"}),
        lambda: clients.soft_delete("c2", record.id),
    ):
        with pytest.raises(NotFoundError) as exc:
            operation()
        assert exc.value.error == "Client not found"
    assert clients.get("c1", record.id).name == "Client 1"


def test_predicates(clients):
    clients.create("c1", _client(1, goals=["Weight Loss"]))
    clients.create("c1", _client(2, name="Mike", goals=["Flexibility", "Strength"]))

    assert clients.list("c1", [Exact("no_such_field", "x")]).total == 0
    assert clients.list("c1", [Contains("name", "MIKE")]).total == 1
    assert clients.list("c1", [AnyOf("goals", ("Strength", "Cardio"))]).total == 1
    assert clients.list("c1", [Search(("name", "goals"), "weight")]).items[0].name == "Client 1"
    assert clients.list("c1", [Exact("status", ClientStatus.ACTIVE), Contains("email", "example")]).total == 2


def test_unknown_status_selector_is_a_validation_error(clients):
    with pytest.raises(ValidationError):
        clients.list("c1", status="archived")


def test_workouts_sorted_by_date_then_time(workouts):
    workouts.create("c1", _workout("14:00"))
    workouts.create("c1", _workout("08:00", day="2024-11-03"))
    workouts.create("c1", _workout("07:30"))
    listed = [(w.date.isoformat(), w.time) for w in workouts.list("c1").items]
    assert listed == [("2024-11-02", "07:30"), ("2024-11-02", "14:00"), ("2024-11-03", "08:00")]


def test_invalid_payload_raises_validation_error(workouts):
    with pytest.raises(ValidationError) as exc:
        workouts.create("c1", _workout(time="25:00"))
    assert exc.value.details
