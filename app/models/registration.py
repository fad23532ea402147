"""Volunteer registration domain model: Pydantic schemas and CRUD functions."""

from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.db import utc_now


class RegistrationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ARRIVED = "arrived"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class RegistrationCreate(BaseModel):
    grid_id: str
    user_id: str
    status: RegistrationStatus = RegistrationStatus.PENDING
    available_time: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    equipment: list[str] = Field(default_factory=list)
    notes: Optional[str] = None


class RegistrationStatusUpdate(BaseModel):
    status: RegistrationStatus


class Registration(BaseModel):
    id: str
    grid_id: str
    user_id: str
    status: RegistrationStatus
    available_time: Optional[str]
    skills: list[str]
    equipment: list[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def decode_list(raw: Optional[str]) -> list[str]:
    """Decode a JSON-encoded list column; anything unreadable becomes []."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return []
    return [str(v) for v in value] if isinstance(value, list) else []


def _row_to_registration(row: sqlite3.Row) -> Registration:
    return Registration(
        id=row["id"],
        grid_id=row["grid_id"],
        user_id=row["user_id"],
        status=row["status"],
        available_time=row["available_time"],
        skills=decode_list(row["skills"]),
        equipment=decode_list(row["equipment"]),
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def create_registration(
    db: sqlite3.Connection,
    data: RegistrationCreate,
    created_at: str | None = None,
) -> Registration:
    """Insert a new registration and return it.

    ``created_at`` may be supplied by seeders that need a fixed ordering.
    """
    new_id = str(uuid.uuid4())
    stamp = created_at or utc_now()
    db.execute(
        """
        INSERT INTO volunteer_registrations
            (id, grid_id, user_id, status, available_time, skills, equipment, notes, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            new_id,
            data.grid_id,
            data.user_id,
            data.status.value,
            data.available_time,
            json.dumps(data.skills),
            json.dumps(data.equipment),
            data.notes,
            stamp,
            stamp,
        ),
    )
    db.commit()
    return get_registration(db, new_id)


def get_registration(db: sqlite3.Connection, registration_id: str) -> Optional[Registration]:
    row = db.execute(
        "SELECT * FROM volunteer_registrations WHERE id = ?", (registration_id,)
    ).fetchone()
    if row is None:
        return None
    return _row_to_registration(row)


def list_registrations(db: sqlite3.Connection) -> list[Registration]:
    """Return all registrations, newest first."""
    rows = db.execute(
        "SELECT * FROM volunteer_registrations ORDER BY created_at DESC, id DESC"
    ).fetchall()
    return [_row_to_registration(r) for r in rows]


def update_registration_status(
    db: sqlite3.Connection, registration_id: str, status: RegistrationStatus
) -> Optional[Registration]:
    """Set a new status. Returns the updated registration or None if not found."""
    cursor = db.execute(
        "UPDATE volunteer_registrations SET status = ?, updated_at = ? WHERE id = ?",
        (status.value, utc_now(), registration_id),
    )
    db.commit()
    if cursor.rowcount == 0:
        return None
    return get_registration(db, registration_id)


def delete_registration(db: sqlite3.Connection, registration_id: str) -> bool:
    """Delete a registration. Returns False if it did not exist."""
    cursor = db.execute(
        "DELETE FROM volunteer_registrations WHERE id = ?", (registration_id,)
    )
    db.commit()
    return cursor.rowcount > 0
