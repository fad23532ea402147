"""Tests for list_volunteers: concurrency, timeouts and cancellation."""

import asyncio

import pytest

from app.models.grid import GridCreate, create_grid
from app.models.registration import RegistrationCreate, create_registration
from app.models.user import Role, UserCreate, create_user
from app.visibility import service
from app.visibility.queries import VolunteerQueryError
from app.visibility.service import list_volunteers
from app.visibility.store import SqliteVolunteerStore
from app.visibility.tokens import create_access_token

from conftest import FakeVolunteerStore, identity, make_row

G1 = "6f1c3a5e-8d2b-4c1f-9a7e-111111111111"
COORD = "c-1"
ADMIN = "a-1"


def _store():
    return FakeVolunteerStore(
        users={
            COORD: identity(Role.GRID_COORDINATOR.value),
            ADMIN: identity(Role.SUPER_ADMIN.value),
        },
        grids={G1: COORD},
        rows=[
            make_row("r-1", G1, created_at="2026-10-01T08:00:00+00:00"),
            make_row("r-2", G1, status="confirmed", created_at="2026-10-02T08:00:00+00:00"),
        ],
    )


def _others():
    return [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]


def test_anonymous_payload_has_no_phones():
    body = asyncio.run(list_volunteers(_store(), None, timeout=1.0, retries=0))
    assert body["can_view_phone"] is False
    assert body["total"] == 2
    assert all("volunteer_phone" not in item for item in body["data"])


def test_admin_sees_full_phones():
    token = create_access_token(ADMIN)
    body = asyncio.run(list_volunteers(_store(), token, timeout=1.0, retries=0))
    assert body["can_view_phone"] is True
    assert {item["volunteer_phone"] for item in body["data"]} == {"0912345678"}


def test_stalled_query_fails_within_timeout():
    store = _store()
    store.stall["query_registrations"] = 0.5

    async def run():
        loop = asyncio.get_running_loop()
        started = loop.time()
        with pytest.raises(VolunteerQueryError):
            await list_volunteers(store, None, timeout=0.05, retries=0)
        return loop.time() - started

    assert asyncio.run(run()) < 0.4


def test_stalled_ownership_lookup_hides_phones():
    store = _store()
    store.stall["lookup_ownership"] = 0.5
    token = create_access_token(COORD)
    body = asyncio.run(list_volunteers(store, token, grid_id=G1, timeout=0.05, retries=0))
    assert body["can_view_phone"] is False
    assert [item["id"] for item in body["data"]] == ["r-2", "r-1"]
    assert all("volunteer_phone" not in item for item in body["data"])


def test_failed_role_lookup_hides_phones():
    store = _store()
    store.fail.add("lookup_role")
    token = create_access_token(ADMIN)
    body = asyncio.run(list_volunteers(store, token, timeout=1.0, retries=0))
    assert body["can_view_phone"] is False
    assert body["total"] == 2


def test_cancelling_the_call_cancels_the_query():
    store = _store()
    store.stall["lookup_role"] = 0.5
    store.stall["query_registrations"] = 0.5
    token = create_access_token(ADMIN)

    async def run():
        outer = asyncio.create_task(list_volunteers(store, token, timeout=5.0, retries=0))
        await asyncio.sleep(0.05)
        outer.cancel()
        with pytest.raises(asyncio.CancelledError):
            await outer
        await asyncio.sleep(0.05)
        return _others()

    assert asyncio.run(run()) == []


def test_verdict_failure_cancels_the_query(monkeypatch):
    store = _store()
    store.stall["query_registrations"] = 0.5

    async def broken(*args):
        raise RuntimeError("policy unavailable")

    monkeypatch.setattr(service, "decide", broken)

    async def run():
        with pytest.raises(RuntimeError):
            await list_volunteers(store, None, timeout=5.0, retries=0)
        await asyncio.sleep(0.05)
        return _others()

    assert asyncio.run(run()) == []


def test_query_runs_alongside_verdict_and_assembly_waits(monkeypatch):
    store = _store()
    events = []
    real_decide = service.decide
    real_assemble = service.assemble

    async def slow_decide(*args):
        await asyncio.sleep(0.05)
        events.append(("decide", "query_registrations" in store.calls))
        return await real_decide(*args)

    def recording_assemble(*args):
        events.append(("assemble", None))
        return real_assemble(*args)

    monkeypatch.setattr(service, "decide", slow_decide)
    monkeypatch.setattr(service, "assemble", recording_assemble)

    body = asyncio.run(list_volunteers(store, None, timeout=1.0, retries=0))
    assert events == [("decide", True), ("assemble", None)]
    assert body["total"] == 2


def test_concurrent_calls_share_one_connection(db):
    user = create_user(db, UserCreate(name="Mei", phone="0912345678"))
    admin = create_user(db, UserCreate(name="Root", role=Role.SUPER_ADMIN))
    grid = create_grid(db, GridCreate(code="A-1"))
    for i in range(5):
        create_registration(
            db,
            RegistrationCreate(grid_id=grid.id, user_id=user.id),
            created_at=f"2026-10-01T08:0{i}:00+00:00",
        )
    store = SqliteVolunteerStore(db)
    token = create_access_token(admin.id)

    async def run():
        return await asyncio.gather(*[
            list_volunteers(store, token if i % 2 else None, grid_id=grid.id, timeout=5.0, retries=0)
            for i in range(8)
        ])

    bodies = asyncio.run(run())
    assert {body["total"] for body in bodies} == {5}
    assert all(sum(body["status_counts"].values()) == 5 for body in bodies)
    assert [body["can_view_phone"] for body in bodies] == [False, True] * 4
