"""Seed helpers: demo users for every role, grids and registrations."""

from __future__ import annotations

import sqlite3

from app.models.grid import GridCreate, create_grid, get_grid
from app.models.registration import RegistrationCreate, RegistrationStatus, create_registration
from app.models.user import Role, UserCreate, create_user, get_user

# ---------------------------------------------------------------------------
# Demo data
# ---------------------------------------------------------------------------

SUPER_ADMIN_ID = "00000000-0000-4000-8000-000000000001"
REGIONAL_ADMIN_ID = "00000000-0000-4000-8000-000000000002"
COORDINATOR_ID = "00000000-0000-4000-8000-000000000003"
VOLUNTEER_IDS = [
    "00000000-0000-4000-8000-000000000011",
    "00000000-0000-4000-8000-000000000012",
    "00000000-0000-4000-8000-000000000013",
]

MANAGED_GRID_ID = "10000000-0000-4000-8000-000000000001"
UNMANAGED_GRID_ID = "10000000-0000-4000-8000-000000000002"

USER_DATA = [
    {"id": SUPER_ADMIN_ID, "name": "Admin", "phone": "0900000001", "role": Role.SUPER_ADMIN},
    {"id": REGIONAL_ADMIN_ID, "name": "Regional", "phone": "0900000002", "role": Role.REGIONAL_ADMIN},
    {"id": COORDINATOR_ID, "name": "Coordinator", "phone": "0900000003", "role": Role.GRID_COORDINATOR},
    {"id": VOLUNTEER_IDS[0], "name": "Mei", "phone": "0912345678", "role": Role.REGULAR_USER},
    {"id": VOLUNTEER_IDS[1], "name": "", "phone": "0987654321", "role": Role.REGULAR_USER},
    {"id": VOLUNTEER_IDS[2], "name": "Chen", "phone": None, "role": Role.REGULAR_USER},
]

REGISTRATION_DATA = [
    (MANAGED_GRID_ID, VOLUNTEER_IDS[0], RegistrationStatus.CONFIRMED, "2026-10-01T08:00:00+00:00"),
    (MANAGED_GRID_ID, VOLUNTEER_IDS[1], RegistrationStatus.PENDING, "2026-10-01T09:00:00+00:00"),
    (UNMANAGED_GRID_ID, VOLUNTEER_IDS[2], RegistrationStatus.ARRIVED, "2026-10-02T07:30:00+00:00"),
]


def seed_demo_data(db: sqlite3.Connection) -> int:
    """Create deterministic demo users, grids and registrations.

    Idempotent: does nothing if the managed demo grid already exists.
    Returns the number of registrations created.
    """
    for entry in USER_DATA:
        if get_user(db, entry["id"]) is None:
            create_user(
                db,
                UserCreate(name=entry["name"], phone=entry["phone"], role=entry["role"]),
                user_id=entry["id"],
            )

    if get_grid(db, MANAGED_GRID_ID) is not None:
        return 0

    create_grid(db, GridCreate(code="A-1", grid_manager_id=COORDINATOR_ID), grid_id=MANAGED_GRID_ID)
    create_grid(db, GridCreate(code="B-2"), grid_id=UNMANAGED_GRID_ID)

    for grid_id, user_id, status, created_at in REGISTRATION_DATA:
        create_registration(
            db,
            RegistrationCreate(grid_id=grid_id, user_id=user_id, status=status),
            created_at=created_at,
        )
    return len(REGISTRATION_DATA)
