import time
from collections import Counter
from datetime import datetime

import pytest

from app.db import get_db_connection, create_tables
from app.visibility.store import IdentityRecord, RegistrationRow


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "test-secret-for-bearer-tokens-0123456789")


@pytest.fixture
def db():
    """Yield an in-memory SQLite connection with all tables created."""
    conn = get_db_connection(":memory:")
    create_tables(conn)
    yield conn
    conn.close()


class FakeVolunteerStore:
    """In-memory ``VolunteerStore``.

    ``fail`` holds method names that raise; ``stall`` maps method names to
    a number of seconds to block before answering.
    """

    def __init__(self, users=None, grids=None, rows=None):
        self.users = dict(users or {})
        self.grids = dict(grids or {})
        self.rows = list(rows or [])
        self.fail = set()
        self.stall = {}
        self.calls = []

    def _enter(self, name):
        self.calls.append(name)
        if name in self.stall:
            time.sleep(self.stall[name])
        if name in self.fail:
            raise RuntimeError(f"{name} unavailable")

    def _matching(self, grid_id, status):
        return [
            r for r in self.rows
            if (grid_id is None or r.grid_id == grid_id)
            and (status is None or r.status == status)
        ]

    def lookup_role(self, user_id):
        self._enter("lookup_role")
        return self.users.get(user_id)

    def lookup_ownership(self, grid_id):
        self._enter("lookup_ownership")
        return self.grids.get(grid_id)

    def query_registrations(self, grid_id, status, limit, offset):
        self._enter("query_registrations")
        matched = sorted(
            self._matching(grid_id, status),
            key=lambda r: (r.created_at, r.id),
            reverse=True,
        )
        return matched[offset:offset + limit]

    def count_by_status(self, grid_id, status):
        self._enter("count_by_status")
        return dict(Counter(r.status for r in self._matching(grid_id, status)))


def make_row(
    row_id: str,
    grid_id: str,
    user_id: str = "u-1",
    status: str = "pending",
    created_at: str = "2026-10-01T08:00:00+00:00",
    name: str | None = "Mei",
    phone: str | None = "0912345678",
) -> RegistrationRow:
    return RegistrationRow(
        id=row_id,
        grid_id=grid_id,
        user_id=user_id,
        status=status,
        created_at=datetime.fromisoformat(created_at),
        volunteer_name=name,
        volunteer_phone=phone,
    )


def identity(role: str | None, status: str = "active") -> IdentityRecord:
    return IdentityRecord(role=role, status=status)


@pytest.fixture
def fake_store():
    return FakeVolunteerStore()
